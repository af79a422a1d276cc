import asyncio
from collections import Counter
from typing import Any, Callable, Dict, List, Optional, Tuple
from unittest.mock import Mock

from components.context import FeedContext
from services.store import MemoryStore, StoreResult


class RecordingStore(MemoryStore):
    """MemoryStore that counts calls and can be told to fail specific operations"""

    def __init__(self):
        super().__init__()
        self.calls: Counter = Counter()
        self.failures: Dict[Tuple[str, str], str] = {}
        self.on_call: Optional[Callable[[str, str], None]] = None

    def fail(self, operation: str, collection: str, message: str = "network error") -> None:
        self.failures[(operation, collection)] = message

    def heal(self) -> None:
        self.failures.clear()

    def count(self, operation: str, collection: str) -> int:
        return self.calls[(operation, collection)]

    def _record(self, operation: str, collection: str) -> Optional[StoreResult]:
        self.calls[(operation, collection)] += 1
        if self.on_call is not None:
            self.on_call(operation, collection)
        message = self.failures.get((operation, collection))
        return StoreResult(error=message) if message is not None else None

    async def insert(self, collection: str, rows: List[Dict[str, Any]]) -> StoreResult:
        return self._record("insert", collection) or await super().insert(collection, rows)

    async def select(self, collection: str, filters=None, order_by=None, ascending=True) -> StoreResult:
        return self._record("select", collection) or await super().select(collection, filters, order_by, ascending)

    async def delete(self, collection: str, filters: Dict[str, Any]) -> StoreResult:
        return self._record("delete", collection) or await super().delete(collection, filters)


class GatedStore(MemoryStore):
    """MemoryStore whose selects read immediately but only answer once their gate is opened"""

    def __init__(self):
        super().__init__()
        self.gates: List[asyncio.Event] = []

    async def select(self, collection: str, filters=None, order_by=None, ascending=True) -> StoreResult:
        result = await super().select(collection, filters, order_by, ascending)
        gate = asyncio.Event()
        self.gates.append(gate)
        await gate.wait()
        return result

    async def wait_for_gates(self, count: int) -> None:
        while len(self.gates) < count:
            await asyncio.sleep(0)


def make_context(store: MemoryStore, confirmed: bool = True) -> FeedContext:
    return FeedContext.for_store(store, confirm=Mock(return_value=confirmed))
