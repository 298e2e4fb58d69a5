from __future__ import annotations

import pytest
from benchmark_data.config import ConfigurationError, TableNames, aws_region
from benchmark_data.results import WriteOutcome, WriteResult

FULL_ENV = {
    "USE_CASES_TABLE_NAME": "use-cases",
    "ENVIRONMENTS_TABLE_NAME": "environments",
    "PRODUCTS_TABLE_NAME": "products",
    "METRIC_DEFINITIONS_TABLE_NAME": "metric-definitions",
    "BENCHMARK_DEFINITIONS_TABLE_NAME": "benchmark-definitions",
    "BENCHMARK_RUNS_TABLE_NAME": "benchmark-runs",
    "BENCHMARK_VALUES_TABLE_NAME": "benchmark-values",
    "MONITORED_METRICS_TABLE_NAME": "monitored-metrics",
}


class TestTableNames:
    def test_reads_every_table(self):
        tables = TableNames.from_env(FULL_ENV)
        assert tables.use_cases == "use-cases"
        assert tables.monitored_metrics == "monitored-metrics"

    def test_values_are_stripped(self):
        env = {**FULL_ENV, "PRODUCTS_TABLE_NAME": "  products \n"}
        assert TableNames.from_env(env).products == "products"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_variable(self, value):
        env = dict(FULL_ENV)
        if value is None:
            del env["BENCHMARK_VALUES_TABLE_NAME"]
        else:
            env["BENCHMARK_VALUES_TABLE_NAME"] = value
        with pytest.raises(ConfigurationError) as exc_info:
            TableNames.from_env(env)
        assert exc_info.value.name == "BENCHMARK_VALUES_TABLE_NAME"
        assert str(exc_info.value) == "Missing environment variable BENCHMARK_VALUES_TABLE_NAME"

    def test_only_requires_the_named_tables(self):
        tables = TableNames.from_env({"PRODUCTS_TABLE_NAME": "p"}, only=("products",))
        assert tables.products == "p"
        assert tables.use_cases == ""

    def test_unknown_field(self):
        with pytest.raises(ValueError):
            TableNames.from_env(FULL_ENV, only=("nope",))

    def test_reads_process_environment_by_default(self, monkeypatch):
        for name, value in FULL_ENV.items():
            monkeypatch.setenv(name, value)
        assert TableNames.from_env() == TableNames.from_env(FULL_ENV)


class TestRegion:
    def test_default(self):
        assert aws_region({}) == "eu-west-1"

    def test_from_env(self):
        assert aws_region({"AWS_REGION": "us-east-2"}) == "us-east-2"


class TestWriteResult:
    def test_success(self):
        assert WriteResult.success().ok
        assert WriteResult.success().error is None

    def test_not_found(self):
        result = WriteResult.not_found()
        assert not result.ok
        assert result.outcome is WriteOutcome.NOT_FOUND

    def test_failed_keeps_error(self):
        err = RuntimeError("boom")
        result = WriteResult.failed(err)
        assert result.outcome is WriteOutcome.STORE_ERROR
        assert result.error is err
