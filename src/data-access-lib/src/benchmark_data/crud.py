"""
benchmark_data.crud — List/get/create/update/delete over one entity table.

Every entity handler is the same dispatcher over a different EntityType:

    GET     /entities        list the caller's org
    GET     /entities/{id}   get one
    POST    /entities        create (server-generated id)
    PUT     /entities/{id}   replace an existing entity (body id must match)
    DELETE  /entities/{id}   delete an existing entity

Content-type, org-id and id checks all run before the store is touched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

import boto3
from aws_lambda_powertools import Logger
from pydantic import BaseModel

from benchmark_data import api, ids
from benchmark_data.client import OrgScopedDynamoDB
from benchmark_data.config import TableNames, aws_region
from benchmark_data.exceptions import RequestError
from benchmark_data.models import org_key
from benchmark_data.results import WriteOutcome, WriteResult


def new_dynamodb_resource() -> Any:
    # boto3 resources are not thread-safe; each one gets its own session.
    session = boto3.session.Session(region_name=aws_region())
    return session.resource("dynamodb")


@dataclass(frozen=True)
class HandlerDependencies:
    """Everything a handler needs from its process: table names and DynamoDB resources.

    dynamodb:         resource used on the invocation thread
    dynamodb_factory: builds a separate resource for each worker thread
    """

    tables: TableNames
    dynamodb: Any
    dynamodb_factory: Callable[[], Any] = new_dynamodb_resource

    @classmethod
    def from_env(cls, *, only: tuple[str, ...] | None = None) -> HandlerDependencies:
        return cls(tables=TableNames.from_env(only=only), dynamodb=new_dynamodb_resource())

    def db_for_org(self, org_id: str) -> OrgScopedDynamoDB:
        return OrgScopedDynamoDB(org_id, dynamodb_resource=self.dynamodb)

    def worker_db_for_org(self, org_id: str) -> OrgScopedDynamoDB:
        """A store on its own resource, safe to use from a worker thread."""
        return OrgScopedDynamoDB(org_id, dynamodb_resource=self.dynamodb_factory())


@dataclass(frozen=True)
class EntityType:
    """Describes one CRUD-able entity.

    label:       used in log lines ("use case", "product", ...)
    table_field: the TableNames attribute holding this entity's table
    record_cls:  record dataclass with ID_PREFIX, ATTRIBUTES, from_item,
                 from_body, to_item, to_api
    body_model:  pydantic schema for POST/PUT bodies
    """

    label: str
    table_field: str
    record_cls: Any
    body_model: type[BaseModel]


class EntityCrudHandler:
    def __init__(
        self,
        entity: EntityType,
        deps: HandlerDependencies,
        *,
        logger: Logger,
        id_factory: Callable[[str], str] | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self.entity = entity
        self.deps = deps
        self.logger = logger
        self._id_factory = id_factory or ids.generate_id
        self._clock = clock or ids.current_timestamp_ms

    @property
    def table_name(self) -> str:
        return getattr(self.deps.tables, self.entity.table_field)

    def handle(self, event: dict[str, Any]) -> dict[str, Any]:
        method = api.http_method(event)
        entity_id = api.path_id(event)
        self.logger.debug(
            "Dispatching query",
            extra={"http_method": method, "entity": self.entity.label, "entity_id": entity_id},
        )
        try:
            if entity_id is None and method == "GET":
                return self.list_all(event)
            if entity_id is None and method == "POST":
                return self.create(event)
            if method == "GET":
                return self.get(event)
            if method == "PUT":
                return self.update(event)
            if method == "DELETE":
                return self.delete(event)
            return api.error(400, api.UNKNOWN_ROUTE)
        except RequestError as exc:
            return api.error(exc.status_code, exc.message)
        except Exception:
            self.logger.exception(f"Unhandled {self.entity.label} handler error")
            return api.internal_error()

    # ------------------------------------------------------------------
    # Hooks overridden by entities with extra rules
    # ------------------------------------------------------------------

    def build_record(self, org_id: str, entity_id: str, body: Any) -> Any:
        return self.entity.record_cls.from_body(org_id, entity_id, body)

    def before_create(self, db: OrgScopedDynamoDB, record: Any) -> None:
        """Runs after validation and before the create write."""

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def _org_id(self, event: dict[str, Any]) -> str:
        org_id = api.require_org_id(event)
        self.logger.append_keys(orgid=org_id)
        return org_id

    def list_all(self, event: dict[str, Any]) -> dict[str, Any]:
        org_id = self._org_id(event)
        db = self.deps.db_for_org(org_id)
        items = db.scan_org(self.table_name, self.entity.record_cls.ATTRIBUTES)
        records = [self.entity.record_cls.from_item(item) for item in items]
        self.logger.debug(f"Fetched {self.entity.label} list", extra={"count": len(records)})
        return api.response(200, [record.to_api() for record in records])

    def get(self, event: dict[str, Any]) -> dict[str, Any]:
        org_id = self._org_id(event)
        entity_id = api.require_path_id(event)
        db = self.deps.db_for_org(org_id)
        item = db.get_item(self.table_name, org_key(org_id, entity_id))
        if item is None:
            return api.error(404, api.NOT_FOUND)
        return api.response(200, self.entity.record_cls.from_item(item).to_api())

    def create(self, event: dict[str, Any]) -> dict[str, Any]:
        api.require_json_content_type(event)
        org_id = self._org_id(event)
        body = api.parse_body(event, self.entity.body_model)
        entity_id = self._id_factory(self.entity.record_cls.ID_PREFIX)
        record = self.build_record(org_id, entity_id, body)

        db = self.deps.db_for_org(org_id)
        self.before_create(db, record)
        db.put_item(self.table_name, record.to_item())
        self.logger.debug(f"Added {self.entity.label}", extra={"entity_id": entity_id})
        return api.response(200, record.to_api())

    def update(self, event: dict[str, Any]) -> dict[str, Any]:
        api.require_json_content_type(event)
        org_id = self._org_id(event)
        entity_id = api.require_path_id(event)
        raw_body = api.parse_json_body(event)
        if raw_body.get("id") != entity_id:
            raise RequestError(400, api.ID_MISMATCH)
        body = api.validate_body(raw_body, self.entity.body_model)
        record = self.build_record(org_id, entity_id, body)

        db = self.deps.db_for_org(org_id)
        result = db.put_existing_item(self.table_name, record.to_item())
        if not result.ok:
            return self._write_failure(result, "update")
        self.logger.debug(f"Updated {self.entity.label}", extra={"entity_id": entity_id})
        return api.response(200, record.to_api())

    def delete(self, event: dict[str, Any]) -> dict[str, Any]:
        org_id = self._org_id(event)
        entity_id = api.require_path_id(event)
        db = self.deps.db_for_org(org_id)
        result = db.delete_existing_item(self.table_name, org_key(org_id, entity_id))
        if not result.ok:
            return self._write_failure(result, "delete")
        self.logger.debug(f"Deleted {self.entity.label}", extra={"entity_id": entity_id})
        return api.response(200, {})

    def _write_failure(self, result: WriteResult, operation: str) -> dict[str, Any]:
        if result.outcome is WriteOutcome.NOT_FOUND:
            return api.error(404, api.NOT_FOUND)
        self.logger.error(
            f"Failed to {operation} {self.entity.label}",
            exc_info=result.error,
        )
        return api.internal_error()
