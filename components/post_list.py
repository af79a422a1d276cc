import logging
from datetime import datetime
from typing import Any, Callable, Dict, Hashable, List, Optional

from components.context import FeedContext
from components.post_item import PostItem
from models.post import Post
from services.store import StoreOperationError

logger = logging.getLogger(__name__)

_UNSEEN = object()


class PostList:
    """
    Every post, newest first, re-fetched in full whenever the refresh token changes.

    Items are matched to fetched posts by id, so an item that survives a
    re-fetch keeps its like flag and open comment section.
    """

    empty_message = "No posts yet. Be the first to share something!"

    def __init__(self, context: FeedContext, on_changed: Callable[[], None]):
        self.context = context
        self.on_changed = on_changed
        self.items: List[PostItem] = []
        self.is_loading = True
        self._seen_token: Any = _UNSEEN

    @property
    def posts(self) -> List[Post]:
        return [item.post for item in self.items]

    def item(self, post_id: str) -> Optional[PostItem]:
        return next((item for item in self.items if item.post.id == post_id), None)

    async def sync(self, token: Hashable) -> None:
        """Re-fetch if the token differs from the last one seen"""
        if token == self._seen_token:
            return
        self._seen_token = token
        await self.fetch()

    async def fetch(self) -> None:
        try:
            posts = await self.context.posts.list_posts()
        except StoreOperationError as e:
            logger.error("Error fetching posts: %s", e)
        else:
            self._reconcile(posts)
        finally:
            self.is_loading = False

    def _reconcile(self, posts: List[Post]) -> None:
        existing = {item.post.id: item for item in self.items}
        items = []
        for post in posts:
            item = existing.get(post.id)
            if item is None:
                item = PostItem(post, self.context, on_deleted=self.on_changed, on_updated=self.on_changed)
            else:
                item.update(post)
            items.append(item)
        self.items = items

    def render(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        if self.is_loading:
            return {"state": "loading", "items": []}
        if not self.items:
            return {"state": "empty", "message": self.empty_message, "items": []}
        return {"state": "populated", "items": [item.render(now) for item in self.items]}
