from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=None, case_sensitive=False)

    # Tenant key override; when unset the key is read from Key Vault.
    afr_api_key: str | None = None
    key_vault_url: str | None = None
    afr_tenant_key_secret_name: str = "afrTenantKey"

    # Relay tokens
    afr_token_lifetime_seconds: int = 3600
    afr_token_version: str = "1.0"

    # Request defaults
    default_document_id: str = ""
    default_user_id: str = "test-user"
    default_user_name_prefix: str = "Test User"
    synthesize_missing_user: bool = True

    # Identity tokens
    openai_token_scope: str = "https://cognitiveservices.azure.com/.default"

    # HTTP surface
    api_route_prefix: str = ""
    cors_allow_origins: str = "http://localhost:3000"

    log_level: str = "INFO"


settings = Settings()
