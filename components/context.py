from dataclasses import dataclass, field
from typing import Callable

from components.notifications import Notifier
from components.scheduler import RefreshScheduler
from services.repositories import CommentRepository, LikeRepository, PostRepository
from services.store import Store

# Blocking yes/no prompt shown before destructive actions
Confirm = Callable[[str], bool]


@dataclass
class FeedContext:
    """Collaborators shared by every component in one feed view"""
    posts: PostRepository
    comments: CommentRepository
    likes: LikeRepository
    confirm: Confirm
    notifier: Notifier = field(default_factory=Notifier)
    scheduler: RefreshScheduler = field(default_factory=RefreshScheduler)

    @classmethod
    def for_store(cls, store: Store, **kwargs) -> "FeedContext":
        return cls(
            posts=PostRepository(store),
            comments=CommentRepository(store),
            likes=LikeRepository(store),
            **kwargs,
        )
