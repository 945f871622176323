"""Credential resolution for backend calls.

The active :class:`CredentialMode` is chosen once at startup. Every scoped tool
runs its arguments through :func:`resolve_credentials`, which is the only place
that knows how the three deployment modes differ.
"""

import logging
from pathlib import Path
from typing import Any

from ..config import Settings
from ..models.credentials import CredentialBundle, CredentialMode
from ..models.tool import is_missing
from .error_handler import CredentialConfigurationError, MissingFieldError

logger = logging.getLogger(__name__)


def load_credentials_from_env(settings: Settings) -> str:
    """Credential blob from process configuration.

    GOOGLE_CREDENTIALS_JSON wins over the file named by
    GOOGLE_APPLICATION_CREDENTIALS.
    """
    if settings.google_credentials_json:
        return settings.google_credentials_json

    credentials_path = settings.google_application_credentials
    if credentials_path:
        try:
            return Path(credentials_path).read_text(encoding="utf-8")
        except OSError as e:
            raise CredentialConfigurationError(
                f"Failed to read credentials from {credentials_path}: {e}",
                {"path": credentials_path},
            ) from e

    raise CredentialConfigurationError(
        "No credentials found. Set either GOOGLE_CREDENTIALS_JSON or "
        "GOOGLE_APPLICATION_CREDENTIALS environment variable"
    )


def resolve_credentials(
    arguments: dict[str, Any],
    mode: CredentialMode,
    settings: Settings,
    tool_name: str | None = None,
) -> CredentialBundle | None:
    """Build the identity bundle for one invocation.

    Returns None in legacy mode, where calls carry no identity.
    """
    if mode is CredentialMode.LEGACY:
        return None

    profile_id = arguments.get("profileId")
    if is_missing(profile_id):
        raise MissingFieldError("profileId", tool_name)

    if mode is CredentialMode.EXPLICIT:
        credentials = arguments.get("credentials")
        if is_missing(credentials):
            raise MissingFieldError("credentials", tool_name)
    else:
        credentials = load_credentials_from_env(settings)

    datasource_id = arguments.get("datasourceId")
    return CredentialBundle(
        profile_id=profile_id,
        datasource_id=None if is_missing(datasource_id) else datasource_id,
        credentials=credentials,
    )
