from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from contentcore.domain.entities import ContentType


# --- Content ---
class SaveContentRequest(BaseModel):
    title: str
    content: str
    editor_id: UUID
    header_script: str = ""
    footer_script: str = ""
    banner_image: str = ""
    content_type: ContentType = ContentType.GENERAL
    category: str = ""
    introduction: str = ""
    published_at: datetime | None = None
    url_path: str | None = None


class CdnResultModel(BaseModel):
    provider: str
    paths: list[str] = []
    success: bool
    message: str = ""


class SaveContentResponse(BaseModel):
    success: bool
    article_number: int
    new_version_number: int
    cdn_results: list[CdnResultModel] = []


# --- Designs ---
class PublishDesignRequest(BaseModel):
    editor_id: UUID


class PublishDesignResponse(BaseModel):
    success: bool
    template_id: UUID
    updated: list[int] = Field(default_factory=list)
    failed: list[int] = Field(default_factory=list)
    republished: list[int] = Field(default_factory=list)


# --- Catalog ---
class CatalogEntryResponse(BaseModel):
    article_number: int
    title: str
    banner_image: str = ""
    status: str
    published_at: datetime | None = None
    updated_at: datetime
    url_path: str = ""
    template_id: UUID | None = None
    introduction: str = ""
    author_info: str = ""
    blog_key: str = "default"
