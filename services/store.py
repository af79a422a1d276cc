import asyncio
import copy
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

POSTS = "posts"
COMMENTS = "comments"
LIKES = "likes"
COLLECTIONS = (POSTS, COMMENTS, LIKES)


@dataclass
class StoreResult:
    """Container for the outcome of a single store call"""
    data: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None


class StoreOperationError(Exception):
    """Raised when a store call comes back with an error value"""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
        self.message = message


class Store(ABC):
    """
    Narrow interface over the hosted data store.

    Implementations never raise for backend failures; they report them through
    StoreResult.error so callers can treat every failure the same way.
    """

    @abstractmethod
    async def insert(self, collection: str, rows: List[Dict[str, Any]]) -> StoreResult:
        """Insert rows; the store assigns ids and timestamps"""

    @abstractmethod
    async def select(
            self,
            collection: str,
            filters: Optional[Dict[str, Any]] = None,
            order_by: Optional[str] = None,
            ascending: bool = True
    ) -> StoreResult:
        """Select rows matching every equality filter, optionally ordered by one column"""

    @abstractmethod
    async def delete(self, collection: str, filters: Dict[str, Any]) -> StoreResult:
        """Delete every row matching all equality filters"""

    async def close(self) -> None:
        """Release any resources held by the store"""


def matches_filters(row: Dict[str, Any], filters: Optional[Dict[str, Any]]) -> bool:
    return all(row.get(key) == value for key, value in (filters or {}).items())


class MemoryStore(Store):
    """
    Process-local store with the same contract as the hosted backends.

    likes_count on posts is kept up to date whenever likes are inserted or
    deleted, matching the trigger on the hosted database.
    """

    def __init__(self):
        self._tables: Dict[str, List[Dict[str, Any]]] = {name: [] for name in COLLECTIONS}
        self._last_timestamp = datetime.fromtimestamp(0, tz=timezone.utc)

    def _next_timestamp(self) -> datetime:
        # strictly increasing so ordering by created_at is never ambiguous
        now = datetime.now(timezone.utc)
        if now <= self._last_timestamp:
            now = self._last_timestamp + timedelta(microseconds=1)
        self._last_timestamp = now
        return now

    def _table(self, collection: str) -> Optional[List[Dict[str, Any]]]:
        return self._tables.get(collection)

    def _adjust_likes(self, post_id: Any, delta: int) -> None:
        for post in self._tables[POSTS]:
            if post["id"] == post_id:
                post["likes_count"] = max(0, post.get("likes_count", 0) + delta)

    async def insert(self, collection: str, rows: List[Dict[str, Any]]) -> StoreResult:
        table = self._table(collection)
        if table is None:
            return StoreResult(error=f"relation '{collection}' does not exist")

        # yield like a network round trip would
        await asyncio.sleep(0)

        inserted = []
        for row in rows:
            record = dict(row)
            record["id"] = str(uuid.uuid4())
            if collection == POSTS:
                record["created_at"] = self._next_timestamp()
                record["likes_count"] = 0
            elif collection == COMMENTS:
                record["created_at"] = self._next_timestamp()
            else:
                self._adjust_likes(record.get("post_id"), 1)
            table.append(record)
            inserted.append(copy.deepcopy(record))

        logger.debug("Inserted %s row(s) into %s", len(inserted), collection)
        return StoreResult(data=inserted)

    async def select(
            self,
            collection: str,
            filters: Optional[Dict[str, Any]] = None,
            order_by: Optional[str] = None,
            ascending: bool = True
    ) -> StoreResult:
        table = self._table(collection)
        if table is None:
            return StoreResult(error=f"relation '{collection}' does not exist")

        await asyncio.sleep(0)

        rows = [copy.deepcopy(row) for row in table if matches_filters(row, filters)]
        if order_by:
            rows.sort(key=lambda row: row.get(order_by), reverse=not ascending)
        return StoreResult(data=rows)

    async def delete(self, collection: str, filters: Dict[str, Any]) -> StoreResult:
        table = self._table(collection)
        if table is None:
            return StoreResult(error=f"relation '{collection}' does not exist")
        if not filters:
            return StoreResult(error="DELETE requires a filter")

        await asyncio.sleep(0)

        removed = [row for row in table if matches_filters(row, filters)]
        self._tables[collection] = [row for row in table if not matches_filters(row, filters)]
        if collection == LIKES:
            for like in removed:
                self._adjust_likes(like.get("post_id"), -1)

        logger.debug("Deleted %s row(s) from %s", len(removed), collection)
        return StoreResult(data=removed)
