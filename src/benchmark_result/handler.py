"""
benchmark_result.handler — Benchmark-result upload Lambda.

POST /benchmark-results records one run of a benchmark as four independent
writes, issued concurrently and each awaited:

  benchmarkRun           put the run (tags) keyed by org#benchmark + executedOn
  benchmarkValues        batch-put one value per metric, one partition per metric
  monitoredMetrics       ADD the reported metric ids to the benchmark's set
  lastUploadedTimestamp  SET the definition's lastUploadedTimestamp to now

The writes are not transactional. When any of them fails the others may
already have committed; the response is a 500 naming the failed writes.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable

from aws_lambda_powertools import Logger, Tracer
from aws_lambda_powertools.logging import correlation_paths
from benchmark_data import ConfigurationError, RequestError, api, ids
from benchmark_data.client import OrgScopedDynamoDB
from benchmark_data.config import TableNames
from benchmark_data.crud import HandlerDependencies
from benchmark_data.models import (
    LAST_UPLOADED_TIMESTAMP_ATTRIBUTE,
    MONITORED_METRIC_IDS_ATTRIBUTE,
    BenchmarkRunRecord,
    BenchmarkValueRecord,
    monitored_metrics_key,
    org_key,
)
from benchmark_data.schemas import BenchmarkResultBody

logger = Logger(service="benchmark-result")
tracer = Tracer(service="benchmark-result")

RUN_WRITE = "benchmarkRun"
VALUES_WRITE = "benchmarkValues"
MONITORED_METRICS_WRITE = "monitoredMetrics"
LAST_UPLOADED_WRITE = "lastUploadedTimestamp"


@dataclass(frozen=True)
class IngestionWrite:
    name: str
    action: Callable[[], None]


def build_writes(
    org_id: str,
    store: Callable[[], OrgScopedDynamoDB],
    tables: TableNames,
    result: BenchmarkResultBody,
    *,
    now_ms: int,
) -> list[IngestionWrite]:
    """The four writes of one upload.

    Each action calls ``store`` on its own thread, so no two writes share a
    boto3 resource.
    """
    run = BenchmarkRunRecord.from_result(org_id, result)
    values = [BenchmarkValueRecord.from_result(org_id, result, metric) for metric in result.metrics]
    logger.debug(
        "Prepared benchmark result writes",
        extra={"benchmark_id": result.benchmark_id, "value_count": len(values)},
    )
    return [
        IngestionWrite(RUN_WRITE, lambda: store().put_item(tables.benchmark_runs, run.to_item())),
        IngestionWrite(
            VALUES_WRITE,
            lambda: store().batch_put(
                tables.benchmark_values, [value.to_item() for value in values]
            ),
        ),
        IngestionWrite(
            MONITORED_METRICS_WRITE,
            lambda: store().add_to_set(
                tables.monitored_metrics,
                monitored_metrics_key(org_id, result.benchmark_id),
                MONITORED_METRIC_IDS_ATTRIBUTE,
                result.metric_definition_ids,
            ),
        ),
        IngestionWrite(
            LAST_UPLOADED_WRITE,
            lambda: store().set_attribute(
                tables.benchmark_definitions,
                org_key(org_id, result.benchmark_id),
                LAST_UPLOADED_TIMESTAMP_ATTRIBUTE,
                now_ms,
            ),
        ),
    ]


def run_writes(writes: list[IngestionWrite]) -> list[str]:
    """Start every write, wait for all of them, return the names of those that failed."""
    failed: list[str] = []
    with ThreadPoolExecutor(max_workers=len(writes)) as pool:
        futures = [(write.name, pool.submit(write.action)) for write in writes]
        for name, future in futures:
            try:
                future.result()
            except Exception:
                logger.exception("Benchmark result write failed", extra={"write": name})
                failed.append(name)
    return failed


def handle_post(
    event: dict[str, Any],
    deps: HandlerDependencies,
    *,
    clock: Callable[[], int] | None = None,
) -> dict[str, Any]:
    api.require_json_content_type(event)
    org_id = api.require_org_id(event)
    logger.append_keys(orgid=org_id)
    result = api.parse_body(event, BenchmarkResultBody, required=True)
    logger.debug(
        "Parsed benchmark result",
        extra={"benchmark_id": result.benchmark_id, "executed_on": result.executed_on},
    )

    now_ms = (clock or ids.current_timestamp_ms)()
    writes = build_writes(
        org_id,
        lambda: deps.worker_db_for_org(org_id),
        deps.tables,
        result,
        now_ms=now_ms,
    )
    failed = run_writes(writes)
    if failed:
        logger.error("Benchmark result partially recorded", extra={"failed_writes": failed})
        return api.internal_error(failedWrites=failed)
    return api.response(200, {})


def handle_request(event: dict[str, Any], deps: HandlerDependencies) -> dict[str, Any]:
    method = api.http_method(event)
    logger.debug("Dispatching query", extra={"http_method": method})
    try:
        if method == "POST":
            return handle_post(event, deps)
        return api.error(400, api.UNKNOWN_ROUTE)
    except RequestError as exc:
        return api.error(exc.status_code, exc.message)
    except Exception:
        logger.exception("Unhandled benchmark result handler error")
        return api.internal_error()


def _dependencies() -> HandlerDependencies:
    return HandlerDependencies.from_env(
        only=("benchmark_definitions", "benchmark_runs", "benchmark_values", "monitored_metrics")
    )


@logger.inject_lambda_context(
    correlation_id_path=correlation_paths.API_GATEWAY_REST, clear_state=True, log_event=False
)
@tracer.capture_lambda_handler
def lambda_handler(event: dict[str, Any], _context: Any) -> dict[str, Any]:
    try:
        deps = _dependencies()
    except ConfigurationError:
        logger.exception("Benchmark-result handler is misconfigured")
        return api.internal_error()
    return handle_request(event, deps)
