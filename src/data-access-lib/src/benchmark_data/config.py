"""
benchmark_data.config — Table-name configuration for the Lambda handlers.

Each function builds one TableNames from its environment at the start of an
invocation and passes it down explicitly; nothing here is cached at module
level.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping


class ConfigurationError(Exception):
    """Raised when a required environment variable is not set."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Missing environment variable {name}")


_ENV_NAMES = {
    "use_cases": "USE_CASES_TABLE_NAME",
    "environments": "ENVIRONMENTS_TABLE_NAME",
    "products": "PRODUCTS_TABLE_NAME",
    "metric_definitions": "METRIC_DEFINITIONS_TABLE_NAME",
    "benchmark_definitions": "BENCHMARK_DEFINITIONS_TABLE_NAME",
    "benchmark_runs": "BENCHMARK_RUNS_TABLE_NAME",
    "benchmark_values": "BENCHMARK_VALUES_TABLE_NAME",
    "monitored_metrics": "MONITORED_METRICS_TABLE_NAME",
}


def _require(env: Mapping[str, str], name: str) -> str:
    value = env.get(name)
    if value is None or not value.strip():
        raise ConfigurationError(name)
    return value.strip()


@dataclass(frozen=True)
class TableNames:
    """DynamoDB table names, one per stored entity."""

    use_cases: str
    environments: str
    products: str
    metric_definitions: str
    benchmark_definitions: str
    benchmark_runs: str
    benchmark_values: str
    monitored_metrics: str

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        *,
        only: tuple[str, ...] | None = None,
    ) -> TableNames:
        """Read table names from the environment.

        ``only`` restricts which variables are required; a function that
        touches two tables should not fail because a third is unset. Fields
        that are not requested are left as empty strings.
        """
        source = os.environ if env is None else env
        wanted = set(_ENV_NAMES) if only is None else set(only)
        unknown = wanted - set(_ENV_NAMES)
        if unknown:
            raise ValueError(f"Unknown table field(s): {', '.join(sorted(unknown))}")
        values = {
            field: _require(source, env_name) if field in wanted else ""
            for field, env_name in _ENV_NAMES.items()
        }
        return cls(**values)


def aws_region(env: Mapping[str, str] | None = None) -> str:
    source = os.environ if env is None else env
    return source.get("AWS_REGION", "eu-west-1")
