"""Hosted database HTTP adapter (Notion REST API)"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from accountability_gateway.domain.exceptions import (
    ConfigurationError,
    RecordNotFoundError,
    StoreUnavailableError,
)
from accountability_gateway.infrastructure.observability.metrics import store_request_failures_counter
from accountability_gateway.infrastructure.store.base import Filter, Properties, Record, RecordStore, Sort
from accountability_gateway.infrastructure.store.properties import title_value
from accountability_gateway.infrastructure.store.schema import TITLE

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


class NotionRecordStore(RecordStore):
    """Record store backed by the Notion pages/databases endpoints"""

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://api.notion.com/v1",
        notion_version: str = "2022-06-28",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not api_key:
            raise ConfigurationError("NOTION_API_KEY environment variable is required")

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.headers = {
            "Authorization": f"Bearer {api_key}",
            "Notion-Version": notion_version,
            "Content-Type": "application/json",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=self.timeout,
            transport=self.transport,
        )

    async def _send(self, client: httpx.AsyncClient, method: str, path: str, **kwargs) -> Dict[str, Any]:
        """
        Issue one request and decode the JSON body.

        Raises:
            RecordNotFoundError: On 404
            StoreUnavailableError: On timeout, other HTTP errors, or network failure
        """
        try:
            response = await client.request(method, path, **kwargs)
            if response.status_code == 404:
                raise RecordNotFoundError(f"Record not found: {path}")
            response.raise_for_status()
            return response.json()

        except httpx.TimeoutException as e:
            store_request_failures_counter.labels(reason="timeout").inc()
            raise StoreUnavailableError(f"Record store timeout after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            store_request_failures_counter.labels(reason="http_status").inc()
            raise StoreUnavailableError(f"Record store error: {e.response.status_code}") from e
        except httpx.RequestError as e:
            store_request_failures_counter.labels(reason="network").inc()
            raise StoreUnavailableError(f"Record store unreachable: {e}") from e
        except ValueError as e:
            store_request_failures_counter.labels(reason="invalid_body").inc()
            raise StoreUnavailableError(f"Invalid response body from record store: {e}") from e

    async def create(self, collection_id: str, properties: Properties, title: Optional[str] = None) -> Record:
        payload_properties = dict(properties)
        if title:
            payload_properties[TITLE] = title_value(title)

        payload = {"parent": {"database_id": collection_id}, "properties": payload_properties}
        async with self._client() as client:
            return await self._send(client, "POST", "/pages", json=payload)

    async def update(self, record_id: str, properties: Properties) -> Record:
        async with self._client() as client:
            return await self._send(client, "PATCH", f"/pages/{record_id}", json={"properties": properties})

    async def query(
        self,
        collection_id: str,
        filter: Optional[Filter] = None,
        sorts: Optional[List[Sort]] = None,
    ) -> List[Record]:
        """Query a collection, following pagination cursors until exhausted"""
        body: Dict[str, Any] = {"page_size": PAGE_SIZE}
        if filter:
            body["filter"] = filter
        if sorts:
            body["sorts"] = sorts

        results: List[Record] = []
        async with self._client() as client:
            while True:
                data = await self._send(client, "POST", f"/databases/{collection_id}/query", json=body)
                results.extend(data.get("results", []))
                if not data.get("has_more") or not data.get("next_cursor"):
                    break
                body["start_cursor"] = data["next_cursor"]

        logger.debug("Record store query", extra={"collection_id": collection_id, "count": len(results)})
        return results

    async def get(self, record_id: str) -> Record:
        async with self._client() as client:
            return await self._send(client, "GET", f"/pages/{record_id}")
