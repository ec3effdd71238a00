"""User-facing notices (shown by the client as toasts)."""

from enum import Enum

from pydantic import BaseModel, Field

from flowcanvas.utils.identifiers import utc_timestamp


class NoticeVariant(str, Enum):
    default = "default"
    destructive = "destructive"


class Notice(BaseModel):
    """a short transient message about the outcome of a user action."""

    model_config = {"extra": "forbid"}

    title: str
    description: str = ""
    variant: NoticeVariant = NoticeVariant.default
    created_at: str = Field(default_factory=utc_timestamp)
