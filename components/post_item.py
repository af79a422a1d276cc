import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from components.comment_form import CommentForm
from components.comment_list import CommentList
from components.context import Confirm, FeedContext
from models.post import Post
from services.store import StoreOperationError
from utils.display import avatar_initial
from utils.relative_time import format_relative_time

logger = logging.getLogger(__name__)


class PostItem:
    """
    One post in the feed with its like toggle, delete action and comment section.

    is_liked lives only in this object. It is never loaded from the likes
    collection, so a freshly mounted item always starts unliked.
    """

    def __init__(
            self,
            post: Post,
            context: FeedContext,
            on_deleted: Callable[[], None],
            on_updated: Callable[[], None]
    ):
        self.post = post
        self.context = context
        self.on_deleted = on_deleted
        self.on_updated = on_updated
        self.is_liked = False
        self.is_deleting = False
        self.show_comments = False
        self.comment_form: Optional[CommentForm] = None
        self.comment_list: Optional[CommentList] = None

    def update(self, post: Post) -> None:
        """Take fresh data for the same post after a re-fetch"""
        self.post = post

    async def toggle_like(self) -> None:
        # flipped up front and left flipped if the store call fails
        self.is_liked = not self.is_liked
        try:
            if self.is_liked:
                await self.context.likes.like(self.post.id)
            else:
                await self.context.likes.unlike(self.post.id)
        except StoreOperationError as e:
            logger.error("Error toggling like: %s", e)
            self.context.notifier.error("Failed to update like. Please try again.")
            return

        self.on_updated()

    async def delete(self, confirm: Optional[Confirm] = None) -> bool:
        if self.is_deleting:
            return False
        confirm = confirm or self.context.confirm
        if not confirm("Are you sure you want to delete this post?"):
            return False

        self.is_deleting = True
        try:
            await self.context.posts.delete_post(self.post.id)
        except StoreOperationError as e:
            logger.error("Error deleting post: %s", e)
            self.context.notifier.error("Failed to delete post. Please try again.")
            return False
        finally:
            self.is_deleting = False

        logger.info("Deleted post %s", self.post.id)
        self.on_deleted()
        self.context.notifier.toast("Post deleted", "The post has been removed successfully.")
        return True

    def toggle_comments(self) -> None:
        """Expand or collapse the comment section; expanding mounts a fresh one"""
        self.show_comments = not self.show_comments
        if not self.show_comments:
            self.comment_form = None
            self.comment_list = None
            return

        # new comments bump the whole feed, not this comment list
        self.comment_form = CommentForm(self.post.id, self.context, on_comment_added=self.on_updated)
        self.comment_list = CommentList(self.post.id, self.context)
        self.context.scheduler.schedule(self.comment_list.mount())

    def render(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        rendered = {
            "id": self.post.id,
            "author_name": self.post.author_name,
            "avatar": avatar_initial(self.post.author_name),
            "content": self.post.content,
            "created_at": self.post.created_at.isoformat(),
            "age": format_relative_time(self.post.created_at, now),
            "likes_count": self.post.likes_count,
            "is_liked": self.is_liked,
            "is_deleting": self.is_deleting,
            "show_comments": self.show_comments,
        }
        if self.show_comments:
            rendered["comment_form"] = self.comment_form.render()
            rendered["comments"] = self.comment_list.render(now)
        return rendered
