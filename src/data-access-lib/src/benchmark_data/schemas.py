"""
benchmark_data.schemas — Request-body schemas.

Bodies are validated into these models before any record is built. Unknown
fields (including a client-supplied ``orgId``) are ignored; ``id`` is only
read to compare against the path id on update.
"""

from __future__ import annotations

from decimal import DecimalException

from boto3.dynamodb.types import DYNAMODB_CONTEXT
from pydantic import BaseModel, ConfigDict, Field, field_validator

# "#" joins the parts of composite run/value keys.
_KEY_PART_PATTERN = r"^[^#]+$"


class _ApiModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ApiTag(_ApiModel):
    name: str
    value: str


class CatalogBody(_ApiModel):
    """Body of a use-case, environment or product."""

    id: str | None = None
    name: str | None = None
    description: str | None = None
    tags: list[ApiTag] | None = None


class MetricDefinitionBody(CatalogBody):
    unit: str
    regression_direction: str = Field(alias="regressionDirection")


class BenchmarkDefinitionBody(_ApiModel):
    id: str | None = None
    use_case_id: str = Field(alias="useCaseId")
    environment_id: str = Field(alias="environmentId")
    product_id: str = Field(alias="productId")
    jenkins_job_url: str | None = Field(default=None, alias="jenkinsJobUrl")
    tags: list[ApiTag] | None = None


class ApiMetricValue(_ApiModel):
    metric_definition_id: str = Field(alias="metricDefinitionId", pattern=_KEY_PART_PATTERN)
    value: float = Field(allow_inf_nan=False)

    @field_validator("value")
    @classmethod
    def _storable_number(cls, value: float) -> float:
        try:
            DYNAMODB_CONTEXT.create_decimal(str(value))
        except DecimalException as exc:
            raise ValueError("value is outside the range DynamoDB can store") from exc
        return value


class BenchmarkResultBody(_ApiModel):
    """One upload: a run of ``benchmarkId`` at ``executedOn`` with its metric values."""

    benchmark_id: str = Field(alias="benchmarkId", pattern=_KEY_PART_PATTERN)
    executed_on: int = Field(alias="executedOn")
    metrics: list[ApiMetricValue] = Field(min_length=1)
    tags: list[ApiTag] = Field(default_factory=list)

    @field_validator("metrics")
    @classmethod
    def _unique_metric_ids(cls, metrics: list[ApiMetricValue]) -> list[ApiMetricValue]:
        seen: set[str] = set()
        for metric in metrics:
            if metric.metric_definition_id in seen:
                raise ValueError(f"duplicate metricDefinitionId {metric.metric_definition_id!r}")
            seen.add(metric.metric_definition_id)
        return metrics

    @property
    def metric_definition_ids(self) -> list[str]:
        return [metric.metric_definition_id for metric in self.metrics]
