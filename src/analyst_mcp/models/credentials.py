"""Identity models used to scope backend calls."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CredentialMode(str, Enum):
    """How tool invocations obtain their identity and credentials."""

    EXPLICIT = "explicit"  # caller passes profileId + credentials
    ENVIRONMENT = "environment"  # caller passes profileId, server holds credentials
    LEGACY = "legacy"  # single globally configured backend scope


class CredentialBundle(BaseModel):
    """Resolved identity for one in-flight request."""

    model_config = ConfigDict(frozen=True)

    profile_id: str = Field(..., min_length=1, description="Tenant/workspace scope")
    datasource_id: str | None = Field(default=None, description="Scope within the profile")
    credentials: str | None = Field(
        default=None, repr=False, description="Serialized service-account JSON"
    )

    def as_payload(self) -> dict[str, Any]:
        """Backend body fields for this bundle, omitting unset values."""
        payload: dict[str, Any] = {"profileId": self.profile_id}
        if self.datasource_id is not None:
            payload["datasourceId"] = self.datasource_id
        if self.credentials is not None:
            payload["credentials"] = self.credentials
        return payload
