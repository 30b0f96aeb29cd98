from __future__ import annotations

from functools import partial
from typing import Annotated

from azure.core.credentials_async import AsyncTokenCredential
from azure.identity.aio import DefaultAzureCredential
from azure.keyvault.secrets.aio import SecretClient
from fastapi import Depends

from tokenbroker.auth import TokenSigner, generate_token
from tokenbroker.secret_store import TenantSecrets
from tokenbroker.settings import Settings, settings


_credential: DefaultAzureCredential | None = None
_secret_client: SecretClient | None = None


def get_settings() -> Settings:
    return settings


def get_credential() -> AsyncTokenCredential:
    global _credential
    if _credential is None:
        _credential = DefaultAzureCredential()
    return _credential


def get_secret_client(cfg: Annotated[Settings, Depends(get_settings)]) -> SecretClient | None:
    global _secret_client
    if not cfg.key_vault_url:
        return None
    if _secret_client is None:
        _secret_client = SecretClient(vault_url=cfg.key_vault_url, credential=get_credential())
    return _secret_client


def get_tenant_secrets(
    cfg: Annotated[Settings, Depends(get_settings)],
    client: Annotated[SecretClient | None, Depends(get_secret_client)],
) -> TenantSecrets:
    return TenantSecrets(cfg, client)


def get_token_signer(cfg: Annotated[Settings, Depends(get_settings)]) -> TokenSigner:
    return partial(generate_token, lifetime=cfg.afr_token_lifetime_seconds, ver=cfg.afr_token_version)


async def close_clients() -> None:
    global _credential, _secret_client
    if _secret_client is not None:
        await _secret_client.close()
        _secret_client = None
    if _credential is not None:
        await _credential.close()
        _credential = None
