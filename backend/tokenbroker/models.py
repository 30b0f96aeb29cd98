from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


class RelayTokenBody(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    tenant_id: str | None = Field(default=None, alias="tenantId")
    document_id: str | None = Field(default=None, alias="documentId")
    user_id: str | None = Field(default=None, alias="userId")
    user_name: str | None = Field(default=None, alias="userName")


@dataclass(frozen=True)
class RelayTokenParams:
    tenant_id: str | None
    document_id: str
    user_id: str | None
    user_name: str | None


@dataclass(frozen=True)
class TenantCredential:
    tenant_id: str
    key: str | None
