import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from components.context import Confirm, FeedContext
from models.post import Comment
from services.store import StoreOperationError
from utils.display import avatar_initial
from utils.relative_time import format_relative_time

logger = logging.getLogger(__name__)


class CommentList:
    """
    Comments on one post, oldest first.

    The list is keyed by its post id: it fetches when mounted and is not
    re-fetched by the feed's refresh token.
    """

    empty_message = "No comments yet. Be the first to comment!"

    def __init__(self, post_id: str, context: FeedContext):
        self.post_id = post_id
        self.context = context
        self.comments: List[Comment] = []
        self.is_loading = True

    async def mount(self) -> None:
        await self.fetch()

    async def fetch(self) -> None:
        try:
            self.comments = await self.context.comments.list_comments(self.post_id)
        except StoreOperationError as e:
            logger.error("Error fetching comments: %s", e)
        finally:
            self.is_loading = False

    async def delete_comment(self, comment_id: str, confirm: Optional[Confirm] = None) -> bool:
        """Delete one comment and drop it from the held list without re-fetching"""
        confirm = confirm or self.context.confirm
        if not confirm("Are you sure you want to delete this comment?"):
            return False

        try:
            await self.context.comments.delete_comment(comment_id)
        except StoreOperationError as e:
            logger.error("Error deleting comment: %s", e)
            self.context.notifier.error("Failed to delete comment. Please try again.")
            return False

        self.comments = [comment for comment in self.comments if comment.id != comment_id]
        self.context.notifier.toast("Comment deleted", "The comment has been removed successfully.")
        return True

    def render(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        if self.is_loading:
            return {"state": "loading", "message": "Loading comments...", "comments": []}
        if not self.comments:
            return {"state": "empty", "message": self.empty_message, "comments": []}

        return {
            "state": "populated",
            "comments": [
                {
                    "id": comment.id,
                    "author_name": comment.author_name,
                    "avatar": avatar_initial(comment.author_name),
                    "content": comment.content,
                    "created_at": comment.created_at.isoformat(),
                    "age": format_relative_time(comment.created_at, now),
                }
                for comment in self.comments
            ],
        }
