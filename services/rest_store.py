import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from services.store import Store, StoreResult

logger = logging.getLogger(__name__)


class RestStore(Store):
    """
    Store backed by a hosted REST data API speaking the PostgREST dialect.

    Tables are exposed under /rest/v1/<table>. Equality filters are sent as
    column=eq.value query parameters and ordering as order=column.asc|desc.
    likes_count is maintained by a database trigger on the likes table.
    """

    def __init__(self, session: aiohttp.ClientSession, base_url: str, api_key: str,
                 timeout: Optional[aiohttp.ClientTimeout] = None):
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def _url(self, collection: str) -> str:
        return f"{self.base_url}/rest/v1/{collection}"

    def _headers(self, return_rows: bool = False) -> Dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
        }
        if return_rows:
            headers["Prefer"] = "return=representation"
        return headers

    @staticmethod
    def _filter_params(filters: Optional[Dict[str, Any]]) -> Dict[str, str]:
        return {key: f"eq.{value}" for key, value in (filters or {}).items()}

    async def _request(self, method: str, collection: str, *, params: Dict[str, str],
                       rows: Optional[List[Dict[str, Any]]] = None, return_rows: bool = False) -> StoreResult:
        try:
            async with self.session.request(
                    method,
                    self._url(collection),
                    params=params,
                    json=rows,
                    headers=self._headers(return_rows),
                    timeout=self.timeout,
            ) as response:
                if response.status >= 400:
                    body = await response.text()
                    logger.error("%s %s returned %s: %s", method, collection, response.status, body)
                    return StoreResult(error=_error_message(body, response.status))

                if response.status == 204:
                    return StoreResult()
                return StoreResult(data=await response.json())

        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error("%s %s failed: %s", method, collection, e)
            return StoreResult(error=str(e) or e.__class__.__name__)

    async def insert(self, collection: str, rows: List[Dict[str, Any]]) -> StoreResult:
        return await self._request("POST", collection, params={}, rows=rows, return_rows=True)

    async def select(
            self,
            collection: str,
            filters: Optional[Dict[str, Any]] = None,
            order_by: Optional[str] = None,
            ascending: bool = True
    ) -> StoreResult:
        params = {"select": "*", **self._filter_params(filters)}
        if order_by:
            params["order"] = f"{order_by}.{'asc' if ascending else 'desc'}"
        return await self._request("GET", collection, params=params)

    async def delete(self, collection: str, filters: Dict[str, Any]) -> StoreResult:
        if not filters:
            return StoreResult(error="DELETE requires a filter")
        return await self._request("DELETE", collection, params=self._filter_params(filters), return_rows=True)


def _error_message(body: str, status: int) -> str:
    """Pull the message out of a PostgREST error body, falling back to the raw text"""
    try:
        payload = json.loads(body)
    except json.JSONDecodeError:
        return body or f"HTTP {status}"

    if isinstance(payload, dict) and payload.get("message"):
        return payload["message"]
    return body
