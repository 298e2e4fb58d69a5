"""Shared builders for handler tests: API Gateway events, Lambda context, moto tables."""

from __future__ import annotations

import json
from typing import Any

ORG_ID = "the-org-id"
OTHER_ORG_ID = "other-org-id"
REGION = "eu-west-2"
CORS = {"Access-Control-Allow-Origin": "*"}

TABLE_ENV = {
    "USE_CASES_TABLE_NAME": "use-cases",
    "ENVIRONMENTS_TABLE_NAME": "environments",
    "PRODUCTS_TABLE_NAME": "products",
    "METRIC_DEFINITIONS_TABLE_NAME": "metric-definitions",
    "BENCHMARK_DEFINITIONS_TABLE_NAME": "benchmark-definitions",
    "BENCHMARK_RUNS_TABLE_NAME": "benchmark-runs",
    "BENCHMARK_VALUES_TABLE_NAME": "benchmark-values",
    "MONITORED_METRICS_TABLE_NAME": "monitored-metrics",
}

_TABLE_KEYS = {
    "use-cases": (("orgId", "S"), ("id", "S")),
    "environments": (("orgId", "S"), ("id", "S")),
    "products": (("orgId", "S"), ("id", "S")),
    "metric-definitions": (("orgId", "S"), ("id", "S")),
    "benchmark-definitions": (("orgId", "S"), ("id", "S")),
    "benchmark-runs": (("fullRunId", "S"), ("executedOn", "N")),
    "benchmark-values": (("fullValueId", "S"), ("executedOn", "N")),
    "monitored-metrics": (("orgId", "S"), ("benchmarkId", "S")),
}


class FakeLambdaContext:
    function_name = "benchmark-tracker"
    memory_limit_in_mb = 256
    invoked_function_arn = "arn:aws:lambda:eu-west-2:111111111111:function:benchmark-tracker"
    aws_request_id = "req-123"


def set_aws_env(monkeypatch: Any) -> None:
    monkeypatch.setenv("AWS_REGION", REGION)
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")  # pragma: allowlist secret
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")  # pragma: allowlist secret
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("POWERTOOLS_TRACE_DISABLED", "1")
    for name, value in TABLE_ENV.items():
        monkeypatch.setenv(name, value)


def create_tables(dynamodb: Any) -> None:
    """Create every benchmark-tracker table on a (moto) DynamoDB resource."""
    for table_name, ((hash_key, hash_type), (range_key, range_type)) in _TABLE_KEYS.items():
        dynamodb.create_table(
            TableName=table_name,
            KeySchema=[
                {"AttributeName": hash_key, "KeyType": "HASH"},
                {"AttributeName": range_key, "KeyType": "RANGE"},
            ],
            AttributeDefinitions=[
                {"AttributeName": hash_key, "AttributeType": hash_type},
                {"AttributeName": range_key, "AttributeType": range_type},
            ],
            BillingMode="PAY_PER_REQUEST",
        )


def make_event(
    *,
    method: str,
    entity_id: str | None = None,
    body: dict[str, Any] | None = None,
    org_id: str | None = ORG_ID,
    content_type: str | None = "application/json",
    authorizer: bool = True,
) -> dict[str, Any]:
    headers: dict[str, str] = {}
    if content_type is not None:
        headers["content-type"] = content_type

    request_context: dict[str, Any] = {}
    if authorizer:
        claims: dict[str, Any] = {}
        if org_id is not None:
            claims["custom:orgId"] = org_id
        request_context["authorizer"] = {"claims": claims}

    return {
        "httpMethod": method,
        "headers": headers,
        "pathParameters": None if entity_id is None else {"id": entity_id},
        "body": None if body is None else json.dumps(body),
        "requestContext": request_context,
    }


def body_of(response: dict[str, Any]) -> Any:
    return json.loads(response["body"])


def message(status_code: int, text: str) -> tuple[int, dict[str, str]]:
    return status_code, {"message": text}


def status_and_body(response: dict[str, Any]) -> tuple[int, Any]:
    assert response["headers"]["Access-Control-Allow-Origin"] == "*"
    return response["statusCode"], body_of(response)
