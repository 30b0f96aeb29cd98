from __future__ import annotations

import random
import time
import uuid
from dataclasses import asdict, dataclass
from typing import Literal, Protocol, Sequence

import jwt


Scope = Literal["doc:read", "doc:write", "summary:write"]

RELAY_SCOPES: tuple[Scope, ...] = ("doc:read", "doc:write", "summary:write")


@dataclass(frozen=True)
class RelayUser:
    id: str
    name: str


class TokenSigner(Protocol):
    def __call__(
        self,
        tenant_id: str,
        document_id: str,
        key: str,
        scopes: Sequence[Scope],
        user: RelayUser | None = None,
    ) -> str: ...


def placeholder_name(prefix: str = "Test User") -> str:
    return f"{prefix} {random.randrange(1000)}"


def generate_user() -> RelayUser:
    return RelayUser(id=str(uuid.uuid4()), name=placeholder_name())


def generate_token(
    tenant_id: str,
    document_id: str,
    key: str,
    scopes: Sequence[Scope],
    user: RelayUser | None = None,
    *,
    lifetime: int = 3600,
    ver: str = "1.0",
) -> str:
    """
    Sign a relay access token with the tenant key.

    The claim set is what the relay service validates: tenant, document,
    scopes and user, plus issue/expiry times, a format version and a unique
    token id. A user without an id is replaced by a generated one.
    """
    if user is None or not user.id:
        user = generate_user()
    now = int(time.time())
    claims = {
        "documentId": document_id,
        "scopes": list(scopes),
        "tenantId": tenant_id,
        "user": asdict(user),
        "iat": now,
        "exp": now + lifetime,
        "ver": ver,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(claims, key, algorithm="HS256")
