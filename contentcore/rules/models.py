from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class VersioningRules(BaseModel):
    title_max: int = 254
    category_max: int = 64
    introduction_max: int = 512
    # Total append attempts per save: the first write plus one retry.
    save_retry_attempts: int = Field(default=2, ge=1)


class MarkupRules(BaseModel):
    editable_attr: str = "contenteditable"
    region_id_attr: str = "data-ccms-ceid"
    region_index_attr: str = "data-ccms-index"


class CatalogRules(BaseModel):
    active_label: str = "Active"
    inactive_label: str = "Inactive"


class RedirectRules(BaseModel):
    status_code: int = 301
    reserved_paths: list[str] = Field(default_factory=list)


class PublishingRules(BaseModel):
    cdn_provider: str = "none"  # none | logging


class Rules(BaseModel):
    project: ProjectRules
    versioning: VersioningRules = Field(default_factory=VersioningRules)
    markup: MarkupRules = Field(default_factory=MarkupRules)
    catalog: CatalogRules = Field(default_factory=CatalogRules)
    redirects: RedirectRules = Field(default_factory=RedirectRules)
    publishing: PublishingRules = Field(default_factory=PublishingRules)


def default_rules() -> Rules:
    """Rules with every section at its default, for tests and embedding."""
    return Rules(project=ProjectRules(slug="contentcore", rules_version="1.0"))
