"""
Submissions Schemas

Pydantic schemas for the banner intake endpoints. JSON bodies and responses
use the camelCase keys the form front-end sends.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PhotoMetadata(CamelModel):
    """A photo the browser already uploaded through a pre-signed URL."""

    public_url: str = ""
    content_type: str = ""
    filename: str = ""


class BannerSubmission(BaseModel):
    """Fields of the multi-step banner form."""

    sponsor_name: str = ""
    sponsor_email: str = ""
    relationship_to_veteran: str = ""
    veteran_name: str = ""
    veteran_address: str = ""
    veteran_years_in_town: str = ""
    veteran_town_connection: str = ""
    service_branch: str = ""
    is_reserve: bool = False
    service_period_or_conflict: str = ""
    consent_given: bool = False
    unknown_branch_info: str = ""
    photos: list[PhotoMetadata] = Field(default_factory=list)

    @property
    def service_branch_label(self) -> str:
        branch = self.service_branch or "N/A"
        return f"{branch} (Reserve)" if self.is_reserve else branch


class UploadImageRequest(CamelModel):
    """Request body for POST /api/upload-image."""

    filename: str | None = None
    content_type: str | None = None


class UploadImageResponse(CamelModel):
    upload_url: str
    object_key: str
    public_url: str


class CopiedPhoto(CamelModel):
    original_url: str
    copied_url: str
    filename: str
    content_type: str


class SubmissionResponse(CamelModel):
    """Response for POST /api/submit-banner."""

    message: str
    contract_url: str
    contract_folder: str
    copied_photos: list[CopiedPhoto]
    total_photos: int
    photos_copied: int


class SendEmailRequest(BaseModel):
    """Request body for POST /api/send-email."""

    model_config = ConfigDict(populate_by_name=True)

    to: str | list[str] | None = None
    subject: str | None = None
    text: str | None = None
    html: str | None = None
    from_email: str | None = Field(None, alias="from")
