"""Remote datastore speaking the PostgREST upsert dialect (e.g. a Supabase project)."""

import logging
from typing import Any, Optional

import httpx

from jobber_reconcile.errors import DatastoreError

from .base import Datastore

logger = logging.getLogger(__name__)


class RestStore(Datastore):
    """
    Upserts batches with POST /rest/v1/{table}?on_conflict={key} and
    ``Prefer: resolution=merge-duplicates``.
    """

    REST_PATH = "/rest/v1/{table}"

    DEFAULT_HEADERS = {
        "User-Agent": "jobber-reconcile/0.1",
        "Content-Type": "application/json",
        "Prefer": "resolution=merge-duplicates,return=minimal",
    }

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        headers = dict(self.DEFAULT_HEADERS)
        if api_key:
            headers["apikey"] = api_key
            headers["Authorization"] = f"Bearer {api_key}"
        self._headers = headers
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=60.0,
            headers=headers,
        )
        self._owns_client = client is None

    @staticmethod
    def _error_from_response(table: str, response: httpx.Response) -> DatastoreError:
        """Build a DatastoreError from a PostgREST error body ({message, code, hint})."""
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        message = body.get("message") or response.text or f"HTTP {response.status_code}"
        hint = body.get("hint")
        if hint:
            message = f"{message} (hint: {hint})"
        return DatastoreError(table, message, body.get("code") or str(response.status_code))

    async def upsert(self, table: str, rows: list[dict[str, Any]], conflict_key: str) -> None:
        if not rows:
            return
        try:
            response = await self._client.post(
                self.REST_PATH.format(table=table),
                params={"on_conflict": conflict_key},
                json=rows,
                headers=self._headers,
            )
        except httpx.RequestError as e:
            raise DatastoreError(table, f"Request failed: {e}") from e
        except (TypeError, ValueError) as e:
            # Rows that cannot be JSON-encoded
            raise DatastoreError(table, f"Invalid batch: {e}", type(e).__name__) from e
        if response.is_error:
            logger.warning("Upsert into %s rejected with HTTP %d", table, response.status_code)
            raise self._error_from_response(table, response)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
