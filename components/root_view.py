import logging
from datetime import datetime
from typing import Any, Dict, Optional

from components.context import FeedContext
from components.post_form import PostForm
from components.post_list import PostList

logger = logging.getLogger(__name__)


class RootView:
    """
    The feed page. Owns the refresh token: every change schedules a full
    re-fetch of the posts list.
    """

    title = "Social Feed"
    subtitle = "Share your thoughts with the world"

    def __init__(self, context: FeedContext):
        self.context = context
        self.refresh_token = 0
        self.post_form = PostForm(context, on_created=self.request_refresh)
        self.post_list = PostList(context, on_changed=self.request_refresh)

    def mount(self) -> None:
        self.context.scheduler.schedule(self.post_list.sync(self.refresh_token))

    def request_refresh(self) -> None:
        self.refresh_token += 1
        logger.debug("Refresh token now %s", self.refresh_token)
        self.context.scheduler.schedule(self.post_list.sync(self.refresh_token))

    def render(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        return {
            "title": self.title,
            "subtitle": self.subtitle,
            "refresh_token": self.refresh_token,
            "post_form": self.post_form.render(),
            "posts": self.post_list.render(now),
        }
