"""
benchmark_data.api — API Gateway proxy-event helpers shared by every handler.

Reads the org id from authoriser claims, checks content type, parses bodies
into schema models, and builds the response envelope. Validation helpers raise
RequestError; handlers convert it to a response at their boundary.
"""

from __future__ import annotations

import base64
import binascii
import json
from decimal import Decimal
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from benchmark_data.exceptions import RequestError

ORG_ID_CLAIM = "custom:orgId"
JSON_MEDIA_TYPE = "application/json"

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}

UNSUPPORTED_MEDIA_TYPE = "Unsupported Media Type"
MISSING_ORG_ID = "Missing orgId"
MISSING_ID = "Missing id"
ID_MISMATCH = "Id mismatch"
NOT_FOUND = "Not Found"
INTERNAL_SERVER_ERROR = "Internal Server Error"
UNKNOWN_ROUTE = "Unknown path/method combination"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def response(status_code: int, body: Any) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {**CORS_HEADERS, "Content-Type": JSON_MEDIA_TYPE},
        "body": json.dumps(body, default=_json_default),
    }


def error(status_code: int, message: str, **extra: Any) -> dict[str, Any]:
    return response(status_code, {"message": message, **extra})


def internal_error(**extra: Any) -> dict[str, Any]:
    return error(500, INTERNAL_SERVER_ERROR, **extra)


def http_method(event: dict[str, Any]) -> str:
    method = event.get("httpMethod")
    if not method:
        method = (event.get("requestContext") or {}).get("http", {}).get("method")
    return str(method or "").upper()


def header(event: dict[str, Any], name: str) -> str | None:
    """Case-insensitive header lookup."""
    headers = event.get("headers") or {}
    wanted = name.lower()
    for key, value in headers.items():
        if str(key).lower() == wanted:
            return None if value is None else str(value)
    return None


def path_id(event: dict[str, Any]) -> str | None:
    path_params = event.get("pathParameters") or {}
    if not isinstance(path_params, dict):
        return None
    value = path_params.get("id")
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _claims(event: dict[str, Any]) -> dict[str, Any]:
    request_context = event.get("requestContext") or {}
    authorizer = request_context.get("authorizer") or {}
    if not isinstance(authorizer, dict):
        return {}
    claims = authorizer.get("claims")
    if claims is None and isinstance(authorizer.get("jwt"), dict):
        claims = authorizer["jwt"].get("claims")
    return claims if isinstance(claims, dict) else {}


def extract_org_id(event: dict[str, Any]) -> str | None:
    """Org id from the authoriser claims; never from the body."""
    value = _claims(event).get(ORG_ID_CLAIM)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def require_org_id(event: dict[str, Any]) -> str:
    org_id = extract_org_id(event)
    if org_id is None:
        raise RequestError(401, MISSING_ORG_ID)
    return org_id


def require_path_id(event: dict[str, Any]) -> str:
    entity_id = path_id(event)
    if entity_id is None:
        raise RequestError(400, MISSING_ID)
    return entity_id


def require_json_content_type(event: dict[str, Any]) -> None:
    content_type = header(event, "content-type") or ""
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type != JSON_MEDIA_TYPE:
        raise RequestError(415, UNSUPPORTED_MEDIA_TYPE)


def _raw_body(event: dict[str, Any]) -> str | None:
    raw_body = event.get("body")
    if raw_body is None or not event.get("isBase64Encoded"):
        return raw_body
    try:
        return base64.b64decode(raw_body).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise RequestError(400, "Malformed JSON body") from exc


def parse_json_body(event: dict[str, Any], *, required: bool = False) -> dict[str, Any]:
    """Decode the body as a JSON object.

    An absent body reads as ``{}`` unless ``required`` is set.
    """
    raw_body = _raw_body(event)
    if raw_body is None or raw_body == "":
        if required:
            raise RequestError(400, "Missing body")
        return {}
    try:
        body = json.loads(raw_body)
    except json.JSONDecodeError as exc:
        raise RequestError(400, "Malformed JSON body") from exc
    if not isinstance(body, dict):
        raise RequestError(400, "JSON body must be an object")
    return body


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ())) or "body"
        parts.append(f"{location}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def parse_body(
    event: dict[str, Any],
    model: type[ModelT],
    *,
    required: bool = False,
) -> ModelT:
    """Parse and validate the body into ``model``; 400 on any failure."""
    return validate_body(parse_json_body(event, required=required), model)


def validate_body(body: dict[str, Any], model: type[ModelT]) -> ModelT:
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        raise RequestError(400, f"Invalid body: {_describe(exc)}") from exc
