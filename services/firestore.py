import logging
from typing import Any, Dict, List, Optional

import firebase_admin
from firebase_admin import firestore_async
from google.api_core.exceptions import GoogleAPICallError
from google.auth.exceptions import GoogleAuthError
from google.cloud import firestore
from google.cloud.firestore_v1 import FieldFilter

from services.store import COLLECTIONS, LIKES, POSTS, Store, StoreResult, matches_filters

logger = logging.getLogger(__name__)


def _to_row(snapshot) -> Dict[str, Any]:
    row = snapshot.to_dict() or {}
    row["id"] = snapshot.id
    return row


class FirestoreStore(Store):
    """
    Store backed by Cloud Firestore.

    Each table is a top-level collection. Document ids are the row ids, and
    created_at is set from the server clock. Firestore has no triggers, so
    likes_count is adjusted in a transaction alongside every like write.
    """

    def __init__(self, app: firebase_admin.App):
        self.db = firestore_async.client(app)

    def collection(self, name: str):
        return self.db.collection(name)

    def _query(self, collection: str, filters: Optional[Dict[str, Any]]):
        query = self.collection(collection)
        for key, value in (filters or {}).items():
            query = query.where(filter=FieldFilter(key, "==", value))
        return query

    async def _matching_snapshots(self, collection: str, filters: Dict[str, Any]) -> list:
        """Documents matching the filters; an id filter is resolved by document reference"""
        filters = dict(filters)
        doc_id = filters.pop("id", None)
        if doc_id is None:
            return [doc async for doc in self._query(collection, filters).stream()]

        snapshot = await self.collection(collection).document(doc_id).get()
        if not snapshot.exists or not matches_filters(snapshot.to_dict() or {}, filters):
            return []
        return [snapshot]

    async def update_post_likes(self, post_id: str, increment: int = 1) -> Optional[int]:
        """Update the like count for a post"""
        post_ref = self.collection(POSTS).document(post_id)
        transaction = self.db.transaction()

        @firestore.async_transactional
        async def update_in_transaction(transaction, post_ref):
            snapshot = await post_ref.get(transaction=transaction)
            if not snapshot.exists:
                return None

            post_data = snapshot.to_dict()
            new_likes = max(0, post_data.get("likes_count", 0) + increment)

            transaction.update(post_ref, {"likes_count": new_likes})
            return new_likes

        return await update_in_transaction(transaction, post_ref)

    async def insert(self, collection: str, rows: List[Dict[str, Any]]) -> StoreResult:
        if collection not in COLLECTIONS:
            return StoreResult(error=f"Unknown collection '{collection}'")

        try:
            inserted = []
            for row in rows:
                doc_ref = self.collection(collection).document()
                data = dict(row)
                if collection == POSTS:
                    data["likes_count"] = 0
                if collection != LIKES:
                    data["created_at"] = firestore.SERVER_TIMESTAMP
                await doc_ref.set(data)

                if collection == LIKES:
                    await self.update_post_likes(data["post_id"], 1)

                # re-read so server timestamps come back resolved
                inserted.append(_to_row(await doc_ref.get()))
            return StoreResult(data=inserted)
        except (GoogleAPICallError, GoogleAuthError) as e:
            logger.error("Firestore insert into %s failed: %s", collection, e)
            return StoreResult(error=str(e))

    async def select(
            self,
            collection: str,
            filters: Optional[Dict[str, Any]] = None,
            order_by: Optional[str] = None,
            ascending: bool = True
    ) -> StoreResult:
        if collection not in COLLECTIONS:
            return StoreResult(error=f"Unknown collection '{collection}'")

        query = self._query(collection, filters)
        if order_by:
            direction = firestore.Query.ASCENDING if ascending else firestore.Query.DESCENDING
            query = query.order_by(order_by, direction=direction)

        try:
            return StoreResult(data=[_to_row(doc) async for doc in query.stream()])
        except (GoogleAPICallError, GoogleAuthError) as e:
            logger.error("Firestore select from %s failed: %s", collection, e)
            return StoreResult(error=str(e))

    async def delete(self, collection: str, filters: Dict[str, Any]) -> StoreResult:
        if collection not in COLLECTIONS:
            return StoreResult(error=f"Unknown collection '{collection}'")
        if not filters:
            return StoreResult(error="DELETE requires a filter")

        try:
            removed = []
            for snapshot in await self._matching_snapshots(collection, filters):
                row = _to_row(snapshot)
                await snapshot.reference.delete()
                if collection == LIKES:
                    await self.update_post_likes(row["post_id"], -1)
                removed.append(row)
            return StoreResult(data=removed)
        except (GoogleAPICallError, GoogleAuthError) as e:
            logger.error("Firestore delete from %s failed: %s", collection, e)
            return StoreResult(error=str(e))
