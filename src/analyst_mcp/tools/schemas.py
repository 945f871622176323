# Shared JSON Schema fragments for tool input schemas

from typing import Any

from ..models.credentials import CredentialMode

PROFILE_ID = {"type": "string", "description": "Profile ID"}
DATASOURCE_ID = {"type": "string", "description": "Datasource ID"}
CREDENTIALS = {"type": "string", "description": "JSON string of BigQuery credentials"}


def object_schema(
    properties: dict[str, Any],
    required: list[str] | None = None,
    additional_properties: bool | None = None,
) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object"}
    if required:
        schema["required"] = list(required)
    schema["properties"] = properties
    if additional_properties is not None:
        schema["additionalProperties"] = additional_properties
    return schema


def scope_fields(
    mode: CredentialMode,
    datasource_required: bool = True,
    with_credentials: bool = True,
) -> tuple[dict[str, Any], list[str]]:
    """Profile, datasource and credential properties for a scoped tool.

    Returns (properties, required). Legacy mode has no scope fields; explicit
    mode adds a required credentials string; environment mode requires the
    datasource unless datasource_required is False.
    """
    if mode is CredentialMode.LEGACY:
        return {}, []

    properties: dict[str, Any] = {"profileId": PROFILE_ID, "datasourceId": DATASOURCE_ID}
    required = ["profileId"]
    if mode is CredentialMode.ENVIRONMENT and datasource_required:
        required.append("datasourceId")
    if mode is CredentialMode.EXPLICIT and with_credentials:
        properties["credentials"] = CREDENTIALS
        required.append("credentials")
    return properties, required


def scoped_schema(
    mode: CredentialMode,
    properties: dict[str, Any],
    required: list[str] | None = None,
    datasource_required: bool = True,
    with_credentials: bool = True,
) -> dict[str, Any]:
    """object_schema with the mode's scope fields placed first."""
    scope_properties, scope_required = scope_fields(mode, datasource_required, with_credentials)
    return object_schema(
        {**scope_properties, **properties},
        [*scope_required, *(required or [])],
    )


def compact(payload: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is None."""
    return {key: value for key, value in payload.items() if value is not None}
