"""
use_case_crud.handler — Use-case CRUD Lambda.

GET/POST /use-cases, GET/PUT/DELETE /use-cases/{id}, scoped to the caller's org.
Table name from USE_CASES_TABLE_NAME.
"""

from __future__ import annotations

from typing import Any

from aws_lambda_powertools import Logger
from benchmark_data import ConfigurationError, api
from benchmark_data.crud import EntityCrudHandler, EntityType, HandlerDependencies
from benchmark_data.models import UseCaseRecord
from benchmark_data.schemas import CatalogBody

logger = Logger(service="use-case-crud")

ENTITY = EntityType(
    label="use case",
    table_field="use_cases",
    record_cls=UseCaseRecord,
    body_model=CatalogBody,
)


def _dependencies() -> HandlerDependencies:
    return HandlerDependencies.from_env(only=("use_cases",))


@logger.inject_lambda_context(clear_state=True, log_event=False)
def lambda_handler(event: dict[str, Any], _context: Any) -> dict[str, Any]:
    try:
        deps = _dependencies()
    except ConfigurationError:
        logger.exception("Use-case handler is misconfigured")
        return api.internal_error()
    return EntityCrudHandler(ENTITY, deps, logger=logger).handle(event)
