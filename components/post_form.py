from typing import Any, Callable, Dict

from components.context import FeedContext
from components.form import SubmitForm

MAX_POST_LENGTH = 280


class PostForm(SubmitForm):
    submit_label = "Post"
    submitting_label = "Posting..."
    action = "creating post"
    success_title = "Post created!"
    success_description = "Your post has been shared successfully."
    failure_description = "Failed to create post. Please try again."

    def __init__(self, context: FeedContext, on_created: Callable[[], None]):
        super().__init__(context, on_success=on_created)

    def set_content(self, content: str) -> None:
        # the ceiling is only enforced here, on input
        self.content = content[:MAX_POST_LENGTH]

    @property
    def remaining(self) -> int:
        return MAX_POST_LENGTH - len(self.content)

    async def _save(self, content: str, author_name: str):
        return await self.context.posts.create_post(content, author_name)

    def render(self) -> Dict[str, Any]:
        rendered = super().render()
        rendered["remaining"] = self.remaining
        rendered["remaining_label"] = f"{self.remaining} characters remaining"
        return rendered
