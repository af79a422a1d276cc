import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

from components.context import FeedContext
from services.repositories import author_or_default
from services.store import StoreOperationError

logger = logging.getLogger(__name__)


class SubmitForm(ABC):
    """
    Free-text form with an optional author name.

    Subclasses provide the store write and the messages; the submit flow is
    shared: blank content is ignored, success clears the fields and notifies
    the parent, failure keeps the fields so the user can retry.
    """

    submit_label = "Submit"
    submitting_label = "..."
    action = "submitting form"
    success_title = ""
    success_description = ""
    failure_description = ""

    def __init__(self, context: FeedContext, on_success: Callable[[], None]):
        self.context = context
        self.on_success = on_success
        self.content = ""
        self.author_name = ""
        self.is_submitting = False

    def set_content(self, content: str) -> None:
        self.content = content

    def set_author_name(self, author_name: str) -> None:
        self.author_name = author_name

    def set_fields(self, content: Optional[str] = None, author_name: Optional[str] = None) -> None:
        if content is not None:
            self.set_content(content)
        if author_name is not None:
            self.set_author_name(author_name)

    @property
    def can_submit(self) -> bool:
        return bool(self.content.strip()) and not self.is_submitting

    @abstractmethod
    async def _save(self, content: str, author_name: str) -> Any:
        """Write the trimmed submission to the store"""

    async def submit(self) -> bool:
        """
        Submit the form

        Returns:
            True if the store accepted the submission
        """
        if not self.can_submit:
            return False

        self.is_submitting = True
        try:
            saved = await self._save(self.content.strip(), author_or_default(self.author_name))
        except StoreOperationError as e:
            logger.error("Error %s: %s", self.action, e)
            self.context.notifier.error(self.failure_description)
            return False
        finally:
            self.is_submitting = False

        logger.info("Finished %s, id=%s", self.action, getattr(saved, "id", None))
        self.content = ""
        self.author_name = ""
        self.on_success()
        self.context.notifier.toast(self.success_title, self.success_description)
        return True

    def render(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "author_name": self.author_name,
            "is_submitting": self.is_submitting,
            "can_submit": self.can_submit,
            "submit_label": self.submitting_label if self.is_submitting else self.submit_label,
        }
