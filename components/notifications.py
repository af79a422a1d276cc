from typing import List

from models.toast import Toast, ToastVariant


class Notifier:
    """Queue of transient toasts waiting to be shown to the user"""

    def __init__(self):
        self._toasts: List[Toast] = []

    def toast(self, title: str, description: str, variant: ToastVariant = ToastVariant.DEFAULT) -> Toast:
        toast = Toast(title=title, description=description, variant=variant)
        self._toasts.append(toast)
        return toast

    def error(self, description: str) -> Toast:
        return self.toast("Error", description, ToastVariant.DESTRUCTIVE)

    @property
    def pending(self) -> List[Toast]:
        return list(self._toasts)

    def drain(self) -> List[Toast]:
        """Hand over every pending toast and forget them"""
        toasts, self._toasts = self._toasts, []
        return toasts
