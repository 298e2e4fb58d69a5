"""
environment_crud.handler — Environment CRUD Lambda.

GET/POST /environments, GET/PUT/DELETE /environments/{id}, scoped to the caller's org.
Table name from ENVIRONMENTS_TABLE_NAME.
"""

from __future__ import annotations

from typing import Any

from aws_lambda_powertools import Logger
from benchmark_data import ConfigurationError, api
from benchmark_data.crud import EntityCrudHandler, EntityType, HandlerDependencies
from benchmark_data.models import EnvironmentRecord
from benchmark_data.schemas import CatalogBody

logger = Logger(service="environment-crud")

ENTITY = EntityType(
    label="environment",
    table_field="environments",
    record_cls=EnvironmentRecord,
    body_model=CatalogBody,
)


def _dependencies() -> HandlerDependencies:
    return HandlerDependencies.from_env(only=("environments",))


@logger.inject_lambda_context(clear_state=True, log_event=False)
def lambda_handler(event: dict[str, Any], _context: Any) -> dict[str, Any]:
    try:
        deps = _dependencies()
    except ConfigurationError:
        logger.exception("Environment handler is misconfigured")
        return api.internal_error()
    return EntityCrudHandler(ENTITY, deps, logger=logger).handle(event)
