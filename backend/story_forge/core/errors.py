"""Exception types shared by the services and the API layer."""
from typing import Optional


class StoryForgeError(Exception):
    """Base class for application errors."""


class GenerationError(StoryForgeError):
    """The generation backend failed or returned an incomplete result.

    Raised for transport/model errors and for responses missing a required
    field. Never retried; the caller resubmits.
    """

    def __init__(self, flow: str, reason: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"{flow}: {reason}")
        self.flow = flow
        self.reason = reason
        self.cause = cause


class RecordNotFoundError(StoryForgeError):
    """A record addressed explicitly by id does not exist in its collection."""

    def __init__(self, collection: str, record_id: str) -> None:
        super().__init__(f"{collection}/{record_id} not found")
        self.collection = collection
        self.record_id = record_id
