"""
post_confirmation.handler — Cognito post-confirmation trigger.

When a user confirms sign-up they become the first member of a new org:
  1. generate an org id (org-{uuid}) and an API key
  2. create the API Gateway key and attach it to the usage plan
  3. store both as the custom:orgId / custom:apiKey user attributes

The org id written here is the claim every CRUD handler reads. Failures are
logged and the event is still returned so Cognito does not fail the sign-up.
"""

from __future__ import annotations

import os
import secrets
from dataclasses import dataclass
from typing import Any

import boto3
from aws_lambda_powertools import Logger
from benchmark_data import ids
from benchmark_data.api import ORG_ID_CLAIM
from benchmark_data.config import aws_region
from botocore.exceptions import BotoCoreError, ClientError

logger = Logger(service="post-confirmation")

API_KEY_CLAIM = "custom:apiKey"
_USAGE_PLAN_ENV = "USAGE_PLAN_ID"


@dataclass(frozen=True)
class PostConfirmationDependencies:
    apigateway: Any
    cognito: Any
    usage_plan_id: str | None


def _dependencies() -> PostConfirmationDependencies:
    session = boto3.session.Session(region_name=aws_region())
    return PostConfirmationDependencies(
        apigateway=session.client("apigateway"),
        cognito=session.client("cognito-idp"),
        usage_plan_id=os.environ.get(_USAGE_PLAN_ENV) or None,
    )


def new_org_id() -> str:
    return ids.generate_id("org-")


def new_api_key() -> str:
    return f"api-{secrets.token_hex(16)}"


def _resolve_usage_plan_id(deps: PostConfirmationDependencies) -> str:
    if deps.usage_plan_id:
        return deps.usage_plan_id
    plans = deps.apigateway.get_usage_plans().get("items", [])
    if not plans:
        raise LookupError("No API Gateway usage plan available")
    return str(plans[0]["id"])


def assign_org(event: dict[str, Any], deps: PostConfirmationDependencies) -> tuple[str, str]:
    """Provision org id + API key for the confirmed user; returns both."""
    user_pool_id = str(event["userPoolId"])
    user_name = str(event["userName"])
    org_id = new_org_id()
    api_key = new_api_key()
    logger.debug(
        "Assigning ApiKey and orgId to user",
        extra={"user_name": user_name, "org_id": org_id},
    )

    key = deps.apigateway.create_api_key(
        name=user_name,
        value=api_key,
        enabled=True,
        generateDistinctId=False,
    )
    usage_plan_id = _resolve_usage_plan_id(deps)
    deps.apigateway.create_usage_plan_key(
        usagePlanId=usage_plan_id,
        keyId=key["id"],
        keyType="API_KEY",
    )
    logger.debug(
        "Associated ApiKey with UsagePlan",
        extra={"api_key_id": key["id"], "usage_plan_id": usage_plan_id},
    )

    deps.cognito.admin_update_user_attributes(
        UserPoolId=user_pool_id,
        Username=user_name,
        UserAttributes=[
            {"Name": ORG_ID_CLAIM, "Value": org_id},
            {"Name": API_KEY_CLAIM, "Value": api_key},
        ],
    )
    logger.info("Assigned orgId and apiKey to user", extra={"org_id": org_id})
    return org_id, api_key


@logger.inject_lambda_context(clear_state=True, log_event=False)
def lambda_handler(event: dict[str, Any], _context: Any) -> dict[str, Any]:
    try:
        assign_org(event, _dependencies())
    except (ClientError, BotoCoreError, LookupError):
        logger.exception("Failed to run post-confirmation trigger")
    return event
