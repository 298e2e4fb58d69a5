"""
benchmark_data.models — DynamoDB record shapes for every benchmark-tracker table.

Each record knows its key, how to write itself as a DynamoDB item, how to read
itself back, and (for entities exposed over HTTP) its public API shape. The
org id never appears in the API shape.

Tables:
    use-cases / environments / products / metric-definitions / benchmark-definitions
        PK: orgId   SK: id
    benchmark-runs
        PK: fullRunId = {orgId}#{benchmarkId}                     SK: executedOn
    benchmark-values
        PK: fullValueId = {orgId}#{benchmarkId}#{metricDefinitionId}  SK: executedOn
        One partition per metric so a single upload spreads its writes.
    monitored-metrics
        PK: orgId   SK: benchmarkId   metricDefinitionIds: string set
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from benchmark_data.schemas import (
        ApiMetricValue,
        ApiTag,
        BenchmarkDefinitionBody,
        BenchmarkResultBody,
        CatalogBody,
        MetricDefinitionBody,
    )

KEY_SEPARATOR = "#"


def _ddb_number(value: float | int) -> Decimal:
    return Decimal(str(value))


def _as_int(value: Any) -> int:
    return int(value) if value is not None else 0


def _as_number(value: Any) -> float | int:
    if isinstance(value, Decimal):
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    return value


def _opt_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


# ---------------------------------------------------------------------------
# Tag
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Tag:
    name: str
    value: str

    def to_item(self) -> dict[str, str]:
        return {"name": self.name, "value": self.value}

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> Tag:
        return cls(name=str(item["name"]), value=str(item["value"]))

    @classmethod
    def from_api(cls, tag: ApiTag) -> Tag:
        return cls(name=tag.name, value=tag.value)


def _tags_from_api(tags: list[ApiTag] | None) -> tuple[Tag, ...] | None:
    if tags is None:
        return None
    return tuple(Tag.from_api(tag) for tag in tags)


def _tags_from_item(raw: Any) -> tuple[Tag, ...] | None:
    if raw is None:
        return None
    return tuple(Tag.from_item(tag) for tag in raw)


def _tags_to_item(tags: tuple[Tag, ...]) -> list[dict[str, str]]:
    return [tag.to_item() for tag in tags]


def org_key(org_id: str, entity_id: str) -> dict[str, str]:
    return {"orgId": org_id, "id": entity_id}


# ---------------------------------------------------------------------------
# Catalog entities: use-cases, environments, products
# PK: orgId  SK: id
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CatalogRecord:
    """Named, described, tagged entity owned by one org.

    Empty name/description are not written, matching how the API omits them.
    """

    ID_PREFIX: ClassVar[str] = ""
    ATTRIBUTES: ClassVar[tuple[str, ...]] = ("orgId", "id", "name", "description", "tags")

    org_id: str
    id: str
    name: str | None = None
    description: str | None = None
    tags: tuple[Tag, ...] | None = None

    @property
    def key(self) -> dict[str, str]:
        return org_key(self.org_id, self.id)

    def to_item(self) -> dict[str, Any]:
        item: dict[str, Any] = dict(self.key)
        if self.name:
            item["name"] = self.name
        if self.description:
            item["description"] = self.description
        if self.tags is not None:
            item["tags"] = _tags_to_item(self.tags)
        return item

    def to_api(self) -> dict[str, Any]:
        model: dict[str, Any] = {"id": self.id}
        if self.name:
            model["name"] = self.name
        if self.description:
            model["description"] = self.description
        if self.tags is not None:
            model["tags"] = _tags_to_item(self.tags)
        return model

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> CatalogRecord:
        return cls(
            org_id=str(item["orgId"]),
            id=str(item["id"]),
            name=_opt_str(item.get("name")),
            description=_opt_str(item.get("description")),
            tags=_tags_from_item(item.get("tags")),
        )

    @classmethod
    def from_body(cls, org_id: str, entity_id: str, body: CatalogBody) -> CatalogRecord:
        return cls(
            org_id=org_id,
            id=entity_id,
            name=body.name,
            description=body.description,
            tags=_tags_from_api(body.tags),
        )


@dataclass(frozen=True)
class UseCaseRecord(CatalogRecord):
    ID_PREFIX: ClassVar[str] = "use-"


@dataclass(frozen=True)
class EnvironmentRecord(CatalogRecord):
    ID_PREFIX: ClassVar[str] = "env-"


@dataclass(frozen=True)
class ProductRecord(CatalogRecord):
    ID_PREFIX: ClassVar[str] = "prd-"


# ---------------------------------------------------------------------------
# Table: metric-definitions
# PK: orgId  SK: id
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MetricDefinitionRecord(CatalogRecord):
    """A measurable quantity: its unit and which direction counts as a regression."""

    ID_PREFIX: ClassVar[str] = "met-"
    ATTRIBUTES: ClassVar[tuple[str, ...]] = (
        "orgId",
        "id",
        "name",
        "description",
        "unit",
        "regressionDirection",
        "tags",
    )

    unit: str = ""
    regression_direction: str = ""

    def to_item(self) -> dict[str, Any]:
        item = super().to_item()
        item["unit"] = self.unit
        item["regressionDirection"] = self.regression_direction
        return item

    def to_api(self) -> dict[str, Any]:
        model = super().to_api()
        model["unit"] = self.unit
        model["regressionDirection"] = self.regression_direction
        return model

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> MetricDefinitionRecord:
        return cls(
            org_id=str(item["orgId"]),
            id=str(item["id"]),
            name=_opt_str(item.get("name")),
            description=_opt_str(item.get("description")),
            tags=_tags_from_item(item.get("tags")),
            unit=str(item.get("unit", "")),
            regression_direction=str(item.get("regressionDirection", "")),
        )

    @classmethod
    def from_body(
        cls, org_id: str, entity_id: str, body: MetricDefinitionBody
    ) -> MetricDefinitionRecord:
        return cls(
            org_id=org_id,
            id=entity_id,
            name=body.name,
            description=body.description,
            tags=_tags_from_api(body.tags),
            unit=body.unit,
            regression_direction=body.regression_direction,
        )


# ---------------------------------------------------------------------------
# Table: benchmark-definitions
# PK: orgId  SK: id
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BenchmarkDefinitionRecord:
    """Association of a use-case, an environment and a product.

    last_uploaded_timestamp: epoch milliseconds; set on create/update and
    advanced by every benchmark-result upload.
    """

    ID_PREFIX: ClassVar[str] = "bch-"
    ATTRIBUTES: ClassVar[tuple[str, ...]] = (
        "orgId",
        "id",
        "useCaseId",
        "environmentId",
        "productId",
        "jenkinsJobUrl",
        "tags",
        "lastUploadedTimestamp",
    )

    org_id: str
    id: str
    use_case_id: str
    environment_id: str
    product_id: str
    last_uploaded_timestamp: int
    jenkins_job_url: str | None = None
    tags: tuple[Tag, ...] | None = None

    @property
    def key(self) -> dict[str, str]:
        return org_key(self.org_id, self.id)

    def to_item(self) -> dict[str, Any]:
        item: dict[str, Any] = {
            **self.key,
            "useCaseId": self.use_case_id,
            "environmentId": self.environment_id,
            "productId": self.product_id,
            "lastUploadedTimestamp": self.last_uploaded_timestamp,
        }
        if self.jenkins_job_url:
            item["jenkinsJobUrl"] = self.jenkins_job_url
        if self.tags is not None:
            item["tags"] = _tags_to_item(self.tags)
        return item

    def to_api(self) -> dict[str, Any]:
        model: dict[str, Any] = {
            "id": self.id,
            "useCaseId": self.use_case_id,
            "environmentId": self.environment_id,
            "productId": self.product_id,
            "lastUploadedTimestamp": self.last_uploaded_timestamp,
        }
        if self.jenkins_job_url:
            model["jenkinsJobUrl"] = self.jenkins_job_url
        if self.tags is not None:
            model["tags"] = _tags_to_item(self.tags)
        return model

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> BenchmarkDefinitionRecord:
        return cls(
            org_id=str(item["orgId"]),
            id=str(item["id"]),
            use_case_id=str(item["useCaseId"]),
            environment_id=str(item["environmentId"]),
            product_id=str(item["productId"]),
            last_uploaded_timestamp=_as_int(item.get("lastUploadedTimestamp")),
            jenkins_job_url=_opt_str(item.get("jenkinsJobUrl")),
            tags=_tags_from_item(item.get("tags")),
        )

    @classmethod
    def from_body(
        cls,
        org_id: str,
        entity_id: str,
        body: BenchmarkDefinitionBody,
        *,
        last_uploaded_timestamp: int,
    ) -> BenchmarkDefinitionRecord:
        return cls(
            org_id=org_id,
            id=entity_id,
            use_case_id=body.use_case_id,
            environment_id=body.environment_id,
            product_id=body.product_id,
            last_uploaded_timestamp=last_uploaded_timestamp,
            jenkins_job_url=body.jenkins_job_url,
            tags=_tags_from_api(body.tags),
        )


# ---------------------------------------------------------------------------
# Table: benchmark-runs
# PK: fullRunId = {orgId}#{benchmarkId}  SK: executedOn
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BenchmarkRunRecord:
    """One upload event of a benchmark; tags describe the run."""

    org_id: str
    benchmark_id: str
    executed_on: int
    tags: tuple[Tag, ...] = ()

    @property
    def full_run_id(self) -> str:
        return f"{self.org_id}{KEY_SEPARATOR}{self.benchmark_id}"

    @property
    def key(self) -> dict[str, Any]:
        return {"fullRunId": self.full_run_id, "executedOn": self.executed_on}

    def to_item(self) -> dict[str, Any]:
        return {**self.key, "tags": _tags_to_item(self.tags)}

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> BenchmarkRunRecord:
        org_id, benchmark_id = str(item["fullRunId"]).split(KEY_SEPARATOR, 1)
        return cls(
            org_id=org_id,
            benchmark_id=benchmark_id,
            executed_on=_as_int(item["executedOn"]),
            tags=_tags_from_item(item.get("tags")) or (),
        )

    @classmethod
    def from_result(cls, org_id: str, result: BenchmarkResultBody) -> BenchmarkRunRecord:
        return cls(
            org_id=org_id,
            benchmark_id=result.benchmark_id,
            executed_on=result.executed_on,
            tags=tuple(Tag.from_api(tag) for tag in result.tags),
        )


# ---------------------------------------------------------------------------
# Table: benchmark-values
# PK: fullValueId = {orgId}#{benchmarkId}#{metricDefinitionId}  SK: executedOn
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BenchmarkValueRecord:
    org_id: str
    benchmark_id: str
    metric_definition_id: str
    executed_on: int
    value: float | int

    @property
    def full_value_id(self) -> str:
        return KEY_SEPARATOR.join((self.org_id, self.benchmark_id, self.metric_definition_id))

    @property
    def key(self) -> dict[str, Any]:
        return {"fullValueId": self.full_value_id, "executedOn": self.executed_on}

    def to_item(self) -> dict[str, Any]:
        return {**self.key, "value": _ddb_number(self.value)}

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> BenchmarkValueRecord:
        org_id, benchmark_id, metric_definition_id = str(item["fullValueId"]).split(
            KEY_SEPARATOR, 2
        )
        return cls(
            org_id=org_id,
            benchmark_id=benchmark_id,
            metric_definition_id=metric_definition_id,
            executed_on=_as_int(item["executedOn"]),
            value=_as_number(item["value"]),
        )

    @classmethod
    def from_result(
        cls, org_id: str, result: BenchmarkResultBody, metric: ApiMetricValue
    ) -> BenchmarkValueRecord:
        return cls(
            org_id=org_id,
            benchmark_id=result.benchmark_id,
            metric_definition_id=metric.metric_definition_id,
            executed_on=result.executed_on,
            value=metric.value,
        )


# ---------------------------------------------------------------------------
# Table: monitored-metrics
# PK: orgId  SK: benchmarkId
# ---------------------------------------------------------------------------


def monitored_metrics_key(org_id: str, benchmark_id: str) -> dict[str, str]:
    return {"orgId": org_id, "benchmarkId": benchmark_id}


MONITORED_METRIC_IDS_ATTRIBUTE = "metricDefinitionIds"
LAST_UPLOADED_TIMESTAMP_ATTRIBUTE = "lastUploadedTimestamp"
