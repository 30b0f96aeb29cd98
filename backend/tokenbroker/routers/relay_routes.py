from __future__ import annotations

import logging
from typing import Annotated, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from tokenbroker.auth import RELAY_SCOPES, RelayUser, TokenSigner, placeholder_name
from tokenbroker.deps import get_settings, get_tenant_secrets, get_token_signer
from tokenbroker.metrics import TOKEN_REQUESTS_REJECTED_TOTAL, TOKENS_ISSUED_TOTAL
from tokenbroker.models import RelayTokenBody, RelayTokenParams
from tokenbroker.secret_store import TenantSecrets
from tokenbroker.settings import Settings


log = logging.getLogger(__name__)

router = APIRouter(tags=["relay"])

ENDPOINT = "getAfrToken"

T = TypeVar("T")


def resolve_field(query: T | None, body: T | None, default: T) -> T:
    # Query wins even when it carries an empty string.
    if query is not None:
        return query
    if body is not None:
        return body
    return default


async def _read_body(request: Request) -> RelayTokenBody:
    try:
        payload = await request.json()
    except ValueError:
        return RelayTokenBody()
    if not isinstance(payload, dict):
        return RelayTokenBody()
    try:
        return RelayTokenBody.model_validate(payload)
    except ValidationError as e:
        TOKEN_REQUESTS_REJECTED_TOTAL.labels(endpoint=ENDPOINT, reason="malformed_body").inc()
        raise HTTPException(status_code=400, detail="Malformed request body.") from e


def _user_for(params: RelayTokenParams, cfg: Settings) -> RelayUser:
    if params.user_id is None and not cfg.synthesize_missing_user:
        TOKEN_REQUESTS_REJECTED_TOTAL.labels(endpoint=ENDPOINT, reason="missing_user").inc()
        raise HTTPException(status_code=400, detail="Missing userId in the request.")
    return RelayUser(
        id=params.user_id if params.user_id is not None else cfg.default_user_id,
        name=params.user_name if params.user_name is not None else placeholder_name(cfg.default_user_name_prefix),
    )


@router.api_route("/getAfrToken", methods=["GET", "POST"], response_class=PlainTextResponse)
async def get_afr_token(
    request: Request,
    cfg: Annotated[Settings, Depends(get_settings)],
    secrets: Annotated[TenantSecrets, Depends(get_tenant_secrets)],
    sign: Annotated[TokenSigner, Depends(get_token_signer)],
    tenant_id: Annotated[str | None, Query(alias="tenantId")] = None,
    document_id: Annotated[str | None, Query(alias="documentId")] = None,
    user_id: Annotated[str | None, Query(alias="userId")] = None,
    user_name: Annotated[str | None, Query(alias="userName")] = None,
) -> PlainTextResponse:
    """
    Mint a relay token for a tenant document.

    Each field is read from the query string first and the JSON body second.
    """
    log.info("processed request", extra={"url": str(request.url)})

    body = await _read_body(request)
    params = RelayTokenParams(
        tenant_id=resolve_field(tenant_id, body.tenant_id, None),
        document_id=resolve_field(document_id, body.document_id, cfg.default_document_id),
        user_id=resolve_field(user_id, body.user_id, None),
        user_name=resolve_field(user_name, body.user_name, None),
    )

    if not params.tenant_id:
        TOKEN_REQUESTS_REJECTED_TOTAL.labels(endpoint=ENDPOINT, reason="missing_tenant").inc()
        raise HTTPException(status_code=400, detail="Missing tenantId in the request.")

    tenant = await secrets.resolve(params.tenant_id)
    if tenant.key is None:
        TOKEN_REQUESTS_REJECTED_TOTAL.labels(endpoint=ENDPOINT, reason="unknown_tenant").inc()
        raise HTTPException(
            status_code=404, detail=f"No key found for the provided tenantId: {params.tenant_id}"
        )

    user = _user_for(params, cfg)
    token = sign(tenant.tenant_id, params.document_id, tenant.key, RELAY_SCOPES, user)
    TOKENS_ISSUED_TOTAL.labels(endpoint=ENDPOINT).inc()
    return PlainTextResponse(token)
