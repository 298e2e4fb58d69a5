"""
product_crud.handler — Product CRUD Lambda.

GET/POST /products, GET/PUT/DELETE /products/{id}, scoped to the caller's org.
Table name from PRODUCTS_TABLE_NAME.
"""

from __future__ import annotations

from typing import Any

from aws_lambda_powertools import Logger
from benchmark_data import ConfigurationError, api
from benchmark_data.crud import EntityCrudHandler, EntityType, HandlerDependencies
from benchmark_data.models import ProductRecord
from benchmark_data.schemas import CatalogBody

logger = Logger(service="product-crud")

ENTITY = EntityType(
    label="product",
    table_field="products",
    record_cls=ProductRecord,
    body_model=CatalogBody,
)


def _dependencies() -> HandlerDependencies:
    return HandlerDependencies.from_env(only=("products",))


@logger.inject_lambda_context(clear_state=True, log_event=False)
def lambda_handler(event: dict[str, Any], _context: Any) -> dict[str, Any]:
    try:
        deps = _dependencies()
    except ConfigurationError:
        logger.exception("Product handler is misconfigured")
        return api.internal_error()
    return EntityCrudHandler(ENTITY, deps, logger=logger).handle(event)
