from typing import Callable

from components.context import FeedContext
from components.form import SubmitForm


class CommentForm(SubmitForm):
    """Reply box under one post"""

    submit_label = "Reply"
    action = "creating comment"
    success_title = "Comment added!"
    success_description = "Your comment has been posted successfully."
    failure_description = "Failed to post comment. Please try again."

    def __init__(self, post_id: str, context: FeedContext, on_comment_added: Callable[[], None]):
        super().__init__(context, on_success=on_comment_added)
        self.post_id = post_id

    async def _save(self, content: str, author_name: str):
        return await self.context.comments.create_comment(self.post_id, content, author_name)
