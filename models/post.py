from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Post(BaseModel):
    id: str
    content: str
    author_name: str
    created_at: datetime
    likes_count: int = 0


class Comment(BaseModel):
    id: str
    post_id: str
    content: str
    author_name: str
    created_at: datetime


class Like(BaseModel):
    id: str
    post_id: str
    author_name: str


class FormFields(BaseModel):
    """Partial update of a form's input fields; omitted fields are left as they are"""
    content: Optional[str] = None
    author_name: Optional[str] = None
