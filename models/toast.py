from enum import Enum

from pydantic import BaseModel


class ToastVariant(str, Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


class Toast(BaseModel):
    title: str
    description: str
    variant: ToastVariant = ToastVariant.DEFAULT
