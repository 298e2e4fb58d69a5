"""
benchmark_data.ids — Server-side id and clock sources.

Kept in one module so tests can pin both with monkeypatch.
"""

from __future__ import annotations

import time
import uuid


def generate_id(prefix: str = "") -> str:
    return f"{prefix}{uuid.uuid4()}"


def current_timestamp_ms() -> int:
    return int(time.time() * 1000)
