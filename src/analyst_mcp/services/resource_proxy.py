"""Resource proxy forwarding resource CRUD and search to the analytics backend"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from ..models.resource import ResourceDescriptor, ResourceMatch
from .backend_client import BackendClient, build_query, encode_segment
from .error_handler import BackendDecodeError

logger = logging.getLogger(__name__)

RESOURCES_PATH = "/resources"


class ResourceProxy:
    """List, get, upsert and delete backend resources; one backend call each."""

    DEFAULT_TOP_K = 10

    def __init__(self, client: BackendClient):
        self.client = client

    async def list(
        self,
        query: str | None = None,
        type: str | None = None,
        top_k: int | None = None,
    ) -> list[ResourceMatch]:
        """List resources, optionally by semantic query and/or type tag

        Args:
            query: Natural language query for similarity search
            type: Resource type tag to filter on
            top_k: Result cap for semantic search (default 10)

        Returns:
            Matching resources, with similarity scores when a query was given
        """
        k = None
        if query:
            k = self.DEFAULT_TOP_K if top_k is None else top_k
        path = RESOURCES_PATH + build_query(query=query or None, k=k, type=type or None)
        rows = await self.client.get(path)
        return self._to_matches(rows, path)

    async def get(self, identifier: str) -> ResourceDescriptor | None:
        """Look up a resource by identifier; None when the backend has no such id."""
        for match in await self.list():
            if match.resource.id == identifier:
                return match.resource
        return None

    async def upsert(self, descriptor: ResourceDescriptor) -> Any:
        """Create or replace a resource keyed by its identifier.

        Text content is embedded by the backend.
        """
        logger.info(f"Upserting resource {descriptor.id}")
        return await self.client.post(RESOURCES_PATH, descriptor.to_payload())

    async def delete(self, identifier: str) -> Any:
        logger.info(f"Deleting resource {identifier}")
        return await self.client.delete(f"{RESOURCES_PATH}/{encode_segment(identifier)}")

    @staticmethod
    def _to_matches(rows: Any, path: str) -> list[ResourceMatch]:
        # Plain listings return bare descriptors, searches return {resource, similarity}
        if not isinstance(rows, list):
            raise BackendDecodeError(path, f"expected a list, got {type(rows).__name__}")

        matches = []
        try:
            for row in rows:
                if isinstance(row, dict) and isinstance(row.get("resource"), dict):
                    matches.append(ResourceMatch.model_validate(row))
                else:
                    matches.append(ResourceMatch(resource=ResourceDescriptor.model_validate(row)))
        except ValidationError as e:
            raise BackendDecodeError(path, f"invalid resource entry: {e.errors()[0]['msg']}") from e
        return matches
