from __future__ import annotations

import logging

from azure.core.exceptions import ResourceNotFoundError
from azure.keyvault.secrets.aio import SecretClient

from tokenbroker.metrics import SECRET_LOOKUPS_TOTAL
from tokenbroker.models import TenantCredential
from tokenbroker.settings import Settings


log = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    pass


class TenantSecrets:
    """
    Resolves the relay tenant credential for one request.

    The AFR_API_KEY override wins; otherwise the key is read from Key Vault
    once per call. Nothing is cached between requests.
    """

    def __init__(self, settings: Settings, client: SecretClient | None) -> None:
        self._settings = settings
        self._client = client

    async def tenant_key(self) -> str | None:
        if self._settings.afr_api_key:
            return self._settings.afr_api_key
        if self._client is None:
            raise ConfigurationError("KEY_VAULT_URL is not configured and AFR_API_KEY is empty")
        return await _fetch(self._client, self._settings.afr_tenant_key_secret_name)

    async def resolve(self, tenant_id: str) -> TenantCredential:
        return TenantCredential(tenant_id=tenant_id, key=await self.tenant_key())


async def _fetch(client: SecretClient, name: str) -> str | None:
    try:
        secret = await client.get_secret(name)
    except ResourceNotFoundError:
        SECRET_LOOKUPS_TOTAL.labels(secret=name, outcome="miss").inc()
        log.warning("secret not found in key vault", extra={"secret": name})
        return None
    SECRET_LOOKUPS_TOTAL.labels(secret=name, outcome="hit").inc()
    return secret.value or None
