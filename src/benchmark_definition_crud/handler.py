"""
benchmark_definition_crud.handler — Benchmark-definition CRUD Lambda.

A benchmark definition ties a use-case, an environment and a product together.
Create checks that all three exist (one BatchGetItem across the three tables)
before anything is written; update and delete behave like every other entity.

Tables: BENCHMARK_DEFINITIONS_TABLE_NAME, USE_CASES_TABLE_NAME,
ENVIRONMENTS_TABLE_NAME, PRODUCTS_TABLE_NAME.
"""

from __future__ import annotations

from typing import Any

from aws_lambda_powertools import Logger
from benchmark_data import ConfigurationError, RequestError, api
from benchmark_data.client import OrgScopedDynamoDB
from benchmark_data.crud import EntityCrudHandler, EntityType, HandlerDependencies
from benchmark_data.models import BenchmarkDefinitionRecord, org_key
from benchmark_data.schemas import BenchmarkDefinitionBody

logger = Logger(service="benchmark-definition-crud")

LINKED_ENTITY_NOT_FOUND = "Linked entity not found"

ENTITY = EntityType(
    label="benchmark definition",
    table_field="benchmark_definitions",
    record_cls=BenchmarkDefinitionRecord,
    body_model=BenchmarkDefinitionBody,
)


class BenchmarkDefinitionCrudHandler(EntityCrudHandler):
    def build_record(
        self, org_id: str, entity_id: str, body: BenchmarkDefinitionBody
    ) -> BenchmarkDefinitionRecord:
        last_uploaded_timestamp = self._clock()
        logger.debug(
            "Marking benchmark as last updated on",
            extra={"last_uploaded_timestamp": last_uploaded_timestamp},
        )
        return BenchmarkDefinitionRecord.from_body(
            org_id,
            entity_id,
            body,
            last_uploaded_timestamp=last_uploaded_timestamp,
        )

    def before_create(self, db: OrgScopedDynamoDB, record: BenchmarkDefinitionRecord) -> None:
        tables = self.deps.tables
        linked = {
            tables.use_cases: record.use_case_id,
            tables.environments: record.environment_id,
            tables.products: record.product_id,
        }
        found = db.batch_get(
            {
                table_name: [org_key(record.org_id, linked_id)]
                for table_name, linked_id in linked.items()
            }
        )
        missing = [table_name for table_name in linked if not found.get(table_name)]
        if missing:
            logger.debug("Linked entities missing", extra={"tables": missing})
            raise RequestError(404, LINKED_ENTITY_NOT_FOUND)


def _dependencies() -> HandlerDependencies:
    return HandlerDependencies.from_env(
        only=("benchmark_definitions", "use_cases", "environments", "products")
    )


@logger.inject_lambda_context(clear_state=True, log_event=False)
def lambda_handler(event: dict[str, Any], _context: Any) -> dict[str, Any]:
    try:
        deps = _dependencies()
    except ConfigurationError:
        logger.exception("Benchmark-definition handler is misconfigured")
        return api.internal_error()
    return BenchmarkDefinitionCrudHandler(ENTITY, deps, logger=logger).handle(event)
