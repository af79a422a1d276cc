from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException, Request

from components.comment_list import CommentList
from components.context import Confirm, FeedContext
from components.post_item import PostItem
from components.root_view import RootView
from dependencies import Context, Feed, mount_root_view
from models.post import FormFields
from models.toast import Toast

router = APIRouter()


def _answer(confirmed: bool) -> Confirm:
    """Confirmation prompt already answered by the client"""
    return lambda message: confirmed


def _post_item(feed: RootView, post_id: str) -> PostItem:
    item = feed.post_list.item(post_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return item


def _comment_section(feed: RootView, post_id: str) -> PostItem:
    item = _post_item(feed, post_id)
    if not item.show_comments:
        raise HTTPException(status_code=404, detail="Comments are not open for this post")
    return item


async def _settled(feed: RootView, context: FeedContext) -> Dict[str, Any]:
    """Wait for scheduled re-fetches, then render"""
    await context.scheduler.drain()
    return feed.render()


@router.get("")
async def get_feed(feed: Feed, context: Context) -> Dict[str, Any]:
    """Render the feed"""
    return await _settled(feed, context)


@router.post("/reload")
async def reload_feed(request: Request, context: Context) -> Dict[str, Any]:
    """Mount a new feed; like flags and open comment sections are lost"""
    feed = mount_root_view(request.app)
    return await _settled(feed, context)


@router.put("/form")
async def update_post_form(feed: Feed, context: Context, fields: FormFields) -> Dict[str, Any]:
    feed.post_form.set_fields(fields.content, fields.author_name)
    return await _settled(feed, context)


@router.post("/form/submit")
async def submit_post_form(feed: Feed, context: Context) -> Dict[str, Any]:
    await feed.post_form.submit()
    return await _settled(feed, context)


@router.post("/posts/{post_id}/like")
async def toggle_like(feed: Feed, context: Context, post_id: str) -> Dict[str, Any]:
    await _post_item(feed, post_id).toggle_like()
    return await _settled(feed, context)


@router.delete("/posts/{post_id}")
async def delete_post(feed: Feed, context: Context, post_id: str, confirm: bool = False) -> Dict[str, Any]:
    await _post_item(feed, post_id).delete(confirm=_answer(confirm))
    return await _settled(feed, context)


@router.post("/posts/{post_id}/comments/toggle")
async def toggle_comments(feed: Feed, context: Context, post_id: str) -> Dict[str, Any]:
    _post_item(feed, post_id).toggle_comments()
    return await _settled(feed, context)


@router.put("/posts/{post_id}/comments/form")
async def update_comment_form(feed: Feed, context: Context, post_id: str, fields: FormFields) -> Dict[str, Any]:
    item = _comment_section(feed, post_id)
    item.comment_form.set_fields(fields.content, fields.author_name)
    return await _settled(feed, context)


@router.post("/posts/{post_id}/comments/form/submit")
async def submit_comment_form(feed: Feed, context: Context, post_id: str) -> Dict[str, Any]:
    await _comment_section(feed, post_id).comment_form.submit()
    return await _settled(feed, context)


@router.delete("/posts/{post_id}/comments/{comment_id}")
async def delete_comment(
        feed: Feed,
        context: Context,
        post_id: str,
        comment_id: str,
        confirm: bool = False
) -> Dict[str, Any]:
    comment_list: CommentList = _comment_section(feed, post_id).comment_list
    await comment_list.delete_comment(comment_id, confirm=_answer(confirm))
    return await _settled(feed, context)


@router.get("/notifications")
async def get_notifications(context: Context) -> List[Toast]:
    """Pending toasts; each is returned once"""
    return context.notifier.drain()
