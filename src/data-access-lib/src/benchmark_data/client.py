"""
benchmark_data.client — OrgScopedDynamoDB.

Enforces the caller's org on every DynamoDB key it is handed, and exposes the
handful of operations the handlers need: single-item get/put/delete, an
org-filtered full scan, multi-table batch get, batched puts, set-union add and
attribute set.

Security guarantees:
  - ``orgId`` key attributes must equal the scoped org id.
  - Composite ``fullRunId`` / ``fullValueId`` keys must start with ``{orgId}#``.
  - On violation: log with org_id/target_org_id, raise OrgAccessViolation.

Conditional writes return a WriteResult; every other failure propagates as
the boto3 exception.
"""

from __future__ import annotations

from typing import Any, Iterable

import boto3
from aws_lambda_powertools import Logger
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError

from benchmark_data.config import aws_region
from benchmark_data.exceptions import OrgAccessViolation
from benchmark_data.models import KEY_SEPARATOR
from benchmark_data.results import WriteResult

logger = Logger(service="benchmark-data")

_COMPOSITE_KEY_ATTRIBUTES = ("fullRunId", "fullValueId")
_EXISTS_CONDITION = "attribute_exists(orgId) AND attribute_exists(id)"
_CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"

# DynamoDB BatchWriteItem accepts at most 25 put/delete requests per call.
BATCH_WRITE_LIMIT = 25


def _chunks(items: list[dict[str, Any]], size: int) -> Iterable[list[dict[str, Any]]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


class OrgScopedDynamoDB:
    """
    DynamoDB access scoped to a single org.

    The org id comes from trusted authoriser claims; any key naming another
    org is refused before a request is sent.
    """

    def __init__(self, org_id: str, *, dynamodb_resource: Any = None) -> None:
        self._org_id = org_id
        self._dynamodb: Any = dynamodb_resource or boto3.resource(
            "dynamodb", region_name=aws_region()
        )

    @property
    def org_id(self) -> str:
        return self._org_id

    # ------------------------------------------------------------------
    # Key enforcement
    # ------------------------------------------------------------------

    def _validate_key(self, key: dict[str, Any]) -> None:
        """Raise OrgAccessViolation if the key belongs to another org."""
        org_id = key.get("orgId")
        if org_id is not None and org_id != self._org_id:
            self._raise_violation(target_org_id=str(org_id), attempted_key=repr(key))

        for attribute in _COMPOSITE_KEY_ATTRIBUTES:
            composite = key.get(attribute)
            if composite is None:
                continue
            if not str(composite).startswith(f"{self._org_id}{KEY_SEPARATOR}"):
                target_org_id = str(composite).split(KEY_SEPARATOR, 1)[0]
                self._raise_violation(target_org_id=target_org_id, attempted_key=repr(key))

    def _raise_violation(self, *, target_org_id: str, attempted_key: str) -> None:
        """Log, then raise OrgAccessViolation. Never returns."""
        logger.error(
            "OrgAccessViolation: cross-org DynamoDB access attempt",
            org_id=self._org_id,
            target_org_id=target_org_id,
            attempted_key=attempted_key,
        )
        raise OrgAccessViolation(
            org_id=target_org_id,
            caller_org_id=self._org_id,
            attempted_key=attempted_key,
        )

    # ------------------------------------------------------------------
    # Single-item operations
    # ------------------------------------------------------------------

    def get_item(self, table_name: str, key: dict[str, Any]) -> dict[str, Any] | None:
        """Get a single item; None if it does not exist."""
        self._validate_key(key)
        table = self._dynamodb.Table(table_name)
        response = table.get_item(Key=key)
        return response.get("Item")

    def put_item(self, table_name: str, item: dict[str, Any]) -> None:
        """Write an item unconditionally."""
        self._validate_key(item)
        table = self._dynamodb.Table(table_name)
        table.put_item(Item=item)

    def put_existing_item(self, table_name: str, item: dict[str, Any]) -> WriteResult:
        """Replace an item only if one with the same key already exists."""
        self._validate_key(item)
        table = self._dynamodb.Table(table_name)
        try:
            table.put_item(Item=item, ConditionExpression=_EXISTS_CONDITION)
        except (ClientError, BotoCoreError) as exc:
            return self._conditional_failure(exc)
        return WriteResult.success()

    def delete_existing_item(self, table_name: str, key: dict[str, Any]) -> WriteResult:
        """Delete an item only if it exists."""
        self._validate_key(key)
        table = self._dynamodb.Table(table_name)
        try:
            table.delete_item(Key=key, ConditionExpression=_EXISTS_CONDITION)
        except (ClientError, BotoCoreError) as exc:
            return self._conditional_failure(exc)
        return WriteResult.success()

    @staticmethod
    def _conditional_failure(exc: Exception) -> WriteResult:
        if isinstance(exc, ClientError):
            if exc.response.get("Error", {}).get("Code") == _CONDITIONAL_CHECK_FAILED:
                return WriteResult.not_found()
        return WriteResult.failed(exc)

    def add_to_set(
        self,
        table_name: str,
        key: dict[str, Any],
        attribute: str,
        values: Iterable[str],
    ) -> None:
        """Union ``values`` into a string-set attribute, creating the item if needed."""
        self._validate_key(key)
        table = self._dynamodb.Table(table_name)
        table.update_item(
            Key=key,
            UpdateExpression="ADD #s :s",
            ExpressionAttributeNames={"#s": attribute},
            ExpressionAttributeValues={":s": set(values)},
        )

    def set_attribute(
        self,
        table_name: str,
        key: dict[str, Any],
        attribute: str,
        value: Any,
    ) -> None:
        self._validate_key(key)
        table = self._dynamodb.Table(table_name)
        table.update_item(
            Key=key,
            UpdateExpression="SET #a = :a",
            ExpressionAttributeNames={"#a": attribute},
            ExpressionAttributeValues={":a": value},
        )

    # ------------------------------------------------------------------
    # Multi-item operations
    # ------------------------------------------------------------------

    def scan_org(self, table_name: str, attributes: Iterable[str]) -> list[dict[str, Any]]:
        """Scan the whole table, keeping only this org's items.

        Only ``attributes`` are projected. Follows LastEvaluatedKey until
        the table is exhausted.
        """
        names = {f"#p{idx}": attribute for idx, attribute in enumerate(attributes)}
        table = self._dynamodb.Table(table_name)
        kwargs: dict[str, Any] = {
            "FilterExpression": Attr("orgId").eq(self._org_id),
            "ProjectionExpression": ", ".join(names),
            "ExpressionAttributeNames": names,
        }
        items: list[dict[str, Any]] = []
        while True:
            response = table.scan(**kwargs)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key

    def batch_get(
        self, requests: dict[str, list[dict[str, Any]]]
    ) -> dict[str, list[dict[str, Any]]]:
        """Fetch keys from several tables in one BatchGetItem.

        Returns every requested table name mapped to the items found (an
        empty list when none were). Raises RuntimeError if DynamoDB leaves any
        key unprocessed.
        """
        for keys in requests.values():
            for key in keys:
                self._validate_key(key)

        found: dict[str, list[dict[str, Any]]] = {table_name: [] for table_name in requests}
        request_items: dict[str, Any] = {
            table_name: {"Keys": keys} for table_name, keys in requests.items() if keys
        }
        if not request_items:
            return found
        response = self._dynamodb.batch_get_item(RequestItems=request_items)
        for table_name, items in response.get("Responses", {}).items():
            found.setdefault(table_name, []).extend(items)
        unprocessed = response.get("UnprocessedKeys") or {}
        if unprocessed:
            raise RuntimeError(f"Keys left unprocessed in {', '.join(sorted(unprocessed))}")
        return found

    def batch_put(self, table_name: str, items: list[dict[str, Any]]) -> None:
        """Put items with BatchWriteItem, BATCH_WRITE_LIMIT per request.

        Raises RuntimeError if DynamoDB leaves any item unprocessed.
        """
        for item in items:
            self._validate_key(item)

        for chunk in _chunks(items, BATCH_WRITE_LIMIT):
            response = self._dynamodb.batch_write_item(
                RequestItems={table_name: [{"PutRequest": {"Item": item}} for item in chunk]}
            )
            unprocessed = response.get("UnprocessedItems") or {}
            if unprocessed.get(table_name):
                raise RuntimeError(
                    f"{len(unprocessed[table_name])} item(s) left unprocessed in {table_name}"
                )
