from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from models.post import Comment, Post
from services.store import COMMENTS, LIKES, POSTS, Store, StoreOperationError, StoreResult

ANONYMOUS = "Anonymous"

# Placeholder identity for likes until there is a real user model
LIKE_AUTHOR = "You"

ModelType = TypeVar("ModelType", bound=BaseModel)


def author_or_default(author_name: str) -> str:
    """Trimmed author name, or the anonymous label when blank"""
    return author_name.strip() or ANONYMOUS


def _unwrap(result: StoreResult, operation: str) -> List[Dict[str, Any]]:
    if result.error is not None:
        raise StoreOperationError(operation, result.error)
    return result.data or []


def _parse(model: Type[ModelType], rows: List[Dict[str, Any]], operation: str) -> List[ModelType]:
    """Validate store rows, reporting malformed ones as a failed store operation"""
    try:
        return [model.model_validate(row) for row in rows]
    except ValidationError as e:
        raise StoreOperationError(operation, str(e)) from e


class PostRepository:
    def __init__(self, store: Store):
        self.store = store

    async def list_posts(self) -> List[Post]:
        """All posts, newest first"""
        rows = _unwrap(
            await self.store.select(POSTS, order_by="created_at", ascending=False),
            "list posts"
        )
        return _parse(Post, rows, "list posts")

    async def create_post(self, content: str, author_name: str) -> Optional[Post]:
        rows = _unwrap(
            await self.store.insert(POSTS, [{"content": content, "author_name": author_name}]),
            "create post"
        )
        return _parse(Post, rows[:1], "create post")[0] if rows else None

    async def delete_post(self, post_id: str) -> None:
        _unwrap(await self.store.delete(POSTS, {"id": post_id}), "delete post")


class CommentRepository:
    def __init__(self, store: Store):
        self.store = store

    async def list_comments(self, post_id: str) -> List[Comment]:
        """Comments on one post, oldest first"""
        rows = _unwrap(
            await self.store.select(COMMENTS, filters={"post_id": post_id}, order_by="created_at", ascending=True),
            "list comments"
        )
        return _parse(Comment, rows, "list comments")

    async def create_comment(self, post_id: str, content: str, author_name: str) -> Optional[Comment]:
        rows = _unwrap(
            await self.store.insert(COMMENTS, [{
                "post_id": post_id,
                "content": content,
                "author_name": author_name,
            }]),
            "create comment"
        )
        return _parse(Comment, rows[:1], "create comment")[0] if rows else None

    async def delete_comment(self, comment_id: str) -> None:
        _unwrap(await self.store.delete(COMMENTS, {"id": comment_id}), "delete comment")


class LikeRepository:
    def __init__(self, store: Store, author_name: str = LIKE_AUTHOR):
        self.store = store
        self.author_name = author_name

    async def like(self, post_id: str) -> None:
        _unwrap(
            await self.store.insert(LIKES, [{"post_id": post_id, "author_name": self.author_name}]),
            "like post"
        )

    async def unlike(self, post_id: str) -> None:
        _unwrap(
            await self.store.delete(LIKES, {"post_id": post_id, "author_name": self.author_name}),
            "unlike post"
        )
