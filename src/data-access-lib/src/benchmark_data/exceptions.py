"""
benchmark_data.exceptions — Errors raised by the store and the API helpers.
"""


class OrgAccessViolation(Exception):
    """
    Raised when a store operation targets a key outside the caller's org.

    The org id on every key is derived from trusted claims, so a mismatch is
    a programming error rather than a client error; handlers surface it as a
    500 after it has been logged.

    Attributes:
        org_id:        Org whose data was protected (the access target).
        caller_org_id: Org the store was scoped to.
        attempted_key: repr of the key that was attempted.
    """

    def __init__(self, *, org_id: str, caller_org_id: str, attempted_key: str) -> None:
        self.org_id = org_id
        self.caller_org_id = caller_org_id
        self.attempted_key = attempted_key
        super().__init__(
            f"Org {caller_org_id!r} attempted to access {attempted_key!r} "
            f"belonging to org {org_id!r}"
        )


class RequestError(Exception):
    """A client error with a fixed status code and message."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(message)
