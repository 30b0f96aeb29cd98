"""Shared fixtures: in-memory stand-ins for Key Vault and the Azure credential."""
import time
from types import SimpleNamespace

import pytest
from azure.core.credentials import AccessToken
from azure.core.exceptions import ResourceNotFoundError
from fastapi.testclient import TestClient

from tokenbroker.deps import get_credential, get_secret_client, get_settings, get_token_signer
from tokenbroker.main import app
from tokenbroker.settings import Settings


class FakeSecretClient:
    def __init__(self, secrets=None):
        self.secrets = dict(secrets or {})
        self.calls = []

    async def get_secret(self, name):
        self.calls.append(name)
        if name not in self.secrets:
            raise ResourceNotFoundError(f"Secret not found: {name}")
        return SimpleNamespace(name=name, value=self.secrets[name])


class FakeCredential:
    def __init__(self, token="fake-bearer-token", error=None):
        self.token = token
        self.error = error
        self.scopes = []

    async def get_token(self, *scopes, **kwargs):
        self.scopes.extend(scopes)
        if self.error is not None:
            raise self.error
        return AccessToken(self.token, int(time.time()) + 3600)


class RecordingSigner:
    def __init__(self):
        self.calls = []

    def __call__(self, tenant_id, document_id, key, scopes, user=None):
        self.calls.append(
            {
                "tenant_id": tenant_id,
                "document_id": document_id,
                "key": key,
                "scopes": list(scopes),
                "user": user,
            }
        )
        return "signed-token"


def make_settings(**overrides):
    values = {
        "afr_api_key": None,
        "key_vault_url": None,
        "default_document_id": "",
        "default_user_id": "test-user",
        "default_user_name_prefix": "Test User",
        "synthesize_missing_user": True,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings():
    return make_settings(afr_api_key="s3cr3t")


@pytest.fixture
def secret_client():
    return FakeSecretClient()


@pytest.fixture
def credential():
    return FakeCredential()


@pytest.fixture
def signer():
    return RecordingSigner()


@pytest.fixture
def overrides(settings, secret_client, credential):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_secret_client] = lambda: secret_client
    app.dependency_overrides[get_credential] = lambda: credential
    yield app.dependency_overrides
    app.dependency_overrides.clear()


@pytest.fixture
def client(overrides):
    return TestClient(app)


@pytest.fixture
def signing_client(overrides, signer):
    overrides[get_token_signer] = lambda: signer
    return TestClient(app)
