"""
Review Actions Schemas

Pydantic models for the data carried inside signed review links.
"""

import enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ReviewAction(str, enum.Enum):
    """What the reviewer chose in the notification email."""

    APPROVE = "approve"
    ISSUE = "issue"


class Actor(str, enum.Enum):
    """Internal group a link was issued to."""

    ADMIN = "admin"
    TOWN = "town"


class ActionPayload(BaseModel):
    """
    Everything needed to act on a submission, carried inside the link.

    Serialized with camelCase keys (`veteranName`, `sponsorEmail`, ...).
    Untrusted until the link signature has been verified.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    actor: str = ""
    veteran_name: str = ""
    sponsor_name: str = ""
    sponsor_email: str = ""
    contract_url: str = ""
    recipient_email: str = ""

    def to_wire(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)
