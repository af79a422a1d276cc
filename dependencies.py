from typing import Annotated

from fastapi import Depends, FastAPI, Request

from components.context import FeedContext
from components.root_view import RootView


def mount_root_view(app: FastAPI) -> RootView:
    """Replace the hosted feed with a freshly mounted one, dropping all local view state"""
    root_view = RootView(app.state.feed_context)
    root_view.mount()
    app.state.root_view = root_view
    return root_view


async def get_feed_context(request: Request) -> FeedContext:
    """Get the shared feed context from app state"""
    return request.app.state.feed_context


async def get_root_view(request: Request) -> RootView:
    """Get the mounted feed from app state"""
    return request.app.state.root_view


# Type annotations for dependency injection
Context = Annotated[FeedContext, Depends(get_feed_context)]
Feed = Annotated[RootView, Depends(get_root_view)]
