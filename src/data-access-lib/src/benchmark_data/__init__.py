"""
benchmark_data — Org-scoped data access and API helpers for the benchmark tracker.

The only permitted way for the entity handlers to reach DynamoDB; every key
is checked against the org id taken from authoriser claims.
"""

from benchmark_data.client import OrgScopedDynamoDB
from benchmark_data.config import ConfigurationError, TableNames
from benchmark_data.exceptions import OrgAccessViolation, RequestError
from benchmark_data.results import WriteOutcome, WriteResult

__all__ = [
    "ConfigurationError",
    "OrgAccessViolation",
    "OrgScopedDynamoDB",
    "RequestError",
    "TableNames",
    "WriteOutcome",
    "WriteResult",
]
