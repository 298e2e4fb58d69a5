"""
tests/unit/test_models.py — Key shape and item/API mapping tests for benchmark_data.models.

Validates:
- PK/SK key patterns for every table
- Empty name/description are omitted from items and API models
- Tags: absent vs empty list are distinguished
- Numbers read back from DynamoDB (Decimal) become int/float
- Frozen dataclass immutability
"""

import dataclasses
from decimal import Decimal

import pytest
from benchmark_data.models import (
    KEY_SEPARATOR,
    BenchmarkDefinitionRecord,
    BenchmarkRunRecord,
    BenchmarkValueRecord,
    EnvironmentRecord,
    MetricDefinitionRecord,
    ProductRecord,
    Tag,
    UseCaseRecord,
    monitored_metrics_key,
    org_key,
)
from benchmark_data.schemas import (
    BenchmarkDefinitionBody,
    BenchmarkResultBody,
    CatalogBody,
    MetricDefinitionBody,
)

ORG = "org-1"

# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


class TestKeys:
    def test_org_key(self):
        assert org_key(ORG, "use-1") == {"orgId": ORG, "id": "use-1"}

    def test_separator(self):
        assert KEY_SEPARATOR == "#"

    def test_run_key(self):
        run = BenchmarkRunRecord(org_id=ORG, benchmark_id="bch-1", executed_on=42)
        assert run.key == {"fullRunId": "org-1#bch-1", "executedOn": 42}

    def test_value_key_has_one_partition_per_metric(self):
        value = BenchmarkValueRecord(
            org_id=ORG,
            benchmark_id="bch-1",
            metric_definition_id="met-1",
            executed_on=42,
            value=1.5,
        )
        assert value.key == {"fullValueId": "org-1#bch-1#met-1", "executedOn": 42}

    def test_monitored_metrics_key(self):
        assert monitored_metrics_key(ORG, "bch-1") == {"orgId": ORG, "benchmarkId": "bch-1"}

    @pytest.mark.parametrize(
        ("record_cls", "prefix"),
        [
            (UseCaseRecord, "use-"),
            (EnvironmentRecord, "env-"),
            (ProductRecord, "prd-"),
            (MetricDefinitionRecord, "met-"),
            (BenchmarkDefinitionRecord, "bch-"),
        ],
    )
    def test_id_prefixes(self, record_cls, prefix):
        assert record_cls.ID_PREFIX == prefix


# ---------------------------------------------------------------------------
# Catalog records
# ---------------------------------------------------------------------------


class TestCatalogRecord:
    def test_item_and_api_shape(self):
        record = ProductRecord(
            org_id=ORG,
            id="prd-1",
            name="checkout",
            description="web shop",
            tags=(Tag("team", "payments"),),
        )
        assert record.to_item() == {
            "orgId": ORG,
            "id": "prd-1",
            "name": "checkout",
            "description": "web shop",
            "tags": [{"name": "team", "value": "payments"}],
        }
        assert record.to_api() == {
            "id": "prd-1",
            "name": "checkout",
            "description": "web shop",
            "tags": [{"name": "team", "value": "payments"}],
        }

    def test_empty_fields_are_omitted(self):
        record = UseCaseRecord(org_id=ORG, id="use-1", name="", description=None)
        assert record.to_item() == {"orgId": ORG, "id": "use-1"}
        assert record.to_api() == {"id": "use-1"}

    def test_empty_tag_list_is_kept(self):
        record = UseCaseRecord(org_id=ORG, id="use-1", tags=())
        assert record.to_api() == {"id": "use-1", "tags": []}

    def test_from_item_round_trip(self):
        item = {"orgId": ORG, "id": "env-1", "name": "perf-lab", "tags": []}
        record = EnvironmentRecord.from_item(item)
        assert record == EnvironmentRecord(org_id=ORG, id="env-1", name="perf-lab", tags=())
        assert record.to_item() == item

    def test_from_body_uses_given_org_and_id(self):
        body = CatalogBody.model_validate({"id": "ignored", "name": "n"})
        record = UseCaseRecord.from_body(ORG, "use-9", body)
        assert record.org_id == ORG
        assert record.id == "use-9"
        assert record.tags is None

    def test_frozen(self):
        record = UseCaseRecord(org_id=ORG, id="use-1")
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.name = "changed"


class TestMetricDefinitionRecord:
    def test_unit_and_direction_always_present(self):
        body = MetricDefinitionBody.model_validate(
            {"name": "latency", "unit": "ms", "regressionDirection": "up"}
        )
        record = MetricDefinitionRecord.from_body(ORG, "met-1", body)
        assert record.to_api() == {
            "id": "met-1",
            "name": "latency",
            "unit": "ms",
            "regressionDirection": "up",
        }
        assert record.to_item()["orgId"] == ORG

    def test_from_item(self):
        record = MetricDefinitionRecord.from_item(
            {"orgId": ORG, "id": "met-1", "unit": "ops/s", "regressionDirection": "down"}
        )
        assert record.unit == "ops/s"
        assert record.regression_direction == "down"
        assert record.name is None


# ---------------------------------------------------------------------------
# Benchmark definitions
# ---------------------------------------------------------------------------


class TestBenchmarkDefinitionRecord:
    def _body(self, **overrides):
        payload = {"useCaseId": "use-1", "environmentId": "env-1", "productId": "prd-1"}
        payload.update(overrides)
        return BenchmarkDefinitionBody.model_validate(payload)

    def test_from_body_sets_timestamp(self):
        record = BenchmarkDefinitionRecord.from_body(
            ORG, "bch-1", self._body(), last_uploaded_timestamp=1000
        )
        assert record.to_api() == {
            "id": "bch-1",
            "useCaseId": "use-1",
            "environmentId": "env-1",
            "productId": "prd-1",
            "lastUploadedTimestamp": 1000,
        }

    def test_optional_fields(self):
        body = self._body(jenkinsJobUrl="https://ci/job/1", tags=[{"name": "a", "value": "b"}])
        record = BenchmarkDefinitionRecord.from_body(
            ORG, "bch-1", body, last_uploaded_timestamp=1000
        )
        item = record.to_item()
        assert item["jenkinsJobUrl"] == "https://ci/job/1"
        assert item["tags"] == [{"name": "a", "value": "b"}]

    def test_from_item_converts_decimal_timestamp(self):
        record = BenchmarkDefinitionRecord.from_item(
            {
                "orgId": ORG,
                "id": "bch-1",
                "useCaseId": "use-1",
                "environmentId": "env-1",
                "productId": "prd-1",
                "lastUploadedTimestamp": Decimal("1706201101677"),
            }
        )
        assert record.last_uploaded_timestamp == 1706201101677
        assert isinstance(record.last_uploaded_timestamp, int)

    def test_missing_timestamp_reads_as_zero(self):
        record = BenchmarkDefinitionRecord.from_item(
            {"orgId": ORG, "id": "b", "useCaseId": "u", "environmentId": "e", "productId": "p"}
        )
        assert record.last_uploaded_timestamp == 0


# ---------------------------------------------------------------------------
# Runs and values
# ---------------------------------------------------------------------------


class TestRunsAndValues:
    def _result(self):
        return BenchmarkResultBody.model_validate(
            {
                "benchmarkId": "bch-1",
                "executedOn": 42,
                "metrics": [
                    {"metricDefinitionId": "met-1", "value": 0.1},
                    {"metricDefinitionId": "met-2", "value": 7},
                ],
                "tags": [{"name": "commit", "value": "abc"}],
            }
        )

    def test_run_from_result(self):
        run = BenchmarkRunRecord.from_result(ORG, self._result())
        assert run.to_item() == {
            "fullRunId": "org-1#bch-1",
            "executedOn": 42,
            "tags": [{"name": "commit", "value": "abc"}],
        }

    def test_run_from_item_splits_composite_key(self):
        run = BenchmarkRunRecord.from_item({"fullRunId": "org-1#bch-1", "executedOn": Decimal(42)})
        assert run.org_id == ORG
        assert run.benchmark_id == "bch-1"
        assert run.executed_on == 42
        assert run.tags == ()

    def test_value_is_stored_as_exact_decimal(self):
        result = self._result()
        value = BenchmarkValueRecord.from_result(ORG, result, result.metrics[0])
        assert value.to_item()["value"] == Decimal("0.1")

    def test_value_from_item(self):
        value = BenchmarkValueRecord.from_item(
            {"fullValueId": "org-1#bch-1#met-2", "executedOn": Decimal(42), "value": Decimal("7")}
        )
        assert value.metric_definition_id == "met-2"
        assert value.value == 7
        assert isinstance(value.value, int)
