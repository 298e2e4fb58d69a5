"""
metric_definition_crud.handler — Metric-definition CRUD Lambda.

GET/POST /metric-definitions, GET/PUT/DELETE /metric-definitions/{id}, scoped to the caller's org.
Table name from METRIC_DEFINITIONS_TABLE_NAME.
"""

from __future__ import annotations

from typing import Any

from aws_lambda_powertools import Logger
from benchmark_data import ConfigurationError, api
from benchmark_data.crud import EntityCrudHandler, EntityType, HandlerDependencies
from benchmark_data.models import MetricDefinitionRecord
from benchmark_data.schemas import MetricDefinitionBody

logger = Logger(service="metric-definition-crud")

ENTITY = EntityType(
    label="metric definition",
    table_field="metric_definitions",
    record_cls=MetricDefinitionRecord,
    body_model=MetricDefinitionBody,
)


def _dependencies() -> HandlerDependencies:
    return HandlerDependencies.from_env(only=("metric_definitions",))


@logger.inject_lambda_context(clear_state=True, log_event=False)
def lambda_handler(event: dict[str, Any], _context: Any) -> dict[str, Any]:
    try:
        deps = _dependencies()
    except ConfigurationError:
        logger.exception("Metric-definition handler is misconfigured")
        return api.internal_error()
    return EntityCrudHandler(ENTITY, deps, logger=logger).handle(event)
