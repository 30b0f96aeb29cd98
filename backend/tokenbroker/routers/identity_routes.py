from __future__ import annotations

import logging
from typing import Annotated

from azure.core.credentials_async import AsyncTokenCredential
from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from tokenbroker.deps import get_credential, get_settings
from tokenbroker.metrics import TOKENS_ISSUED_TOTAL
from tokenbroker.settings import Settings


log = logging.getLogger(__name__)

router = APIRouter(tags=["identity"])


@router.api_route("/getOpenAiToken", methods=["GET", "POST"], response_class=PlainTextResponse)
async def get_openai_token(
    request: Request,
    cfg: Annotated[Settings, Depends(get_settings)],
    credential: Annotated[AsyncTokenCredential, Depends(get_credential)],
) -> PlainTextResponse:
    # Query and body are ignored; the token is for the service's own identity.
    log.info("processed request", extra={"url": str(request.url)})
    access = await credential.get_token(cfg.openai_token_scope)
    TOKENS_ISSUED_TOTAL.labels(endpoint="getOpenAiToken").inc()
    return PlainTextResponse(access.token)
