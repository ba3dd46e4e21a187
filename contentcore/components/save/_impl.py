"""
Pure helpers for the save handler: validation and next-version construction.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from contentcore.components.redirects import slugify
from contentcore.domain.entities import ContentVersion
from contentcore.domain.result import FieldError

from .models import DEFAULT_LIMITS, SaveContentCommand, SaveLimits

_NIL_UUID = UUID(int=0)


def validate_save_command(
    command: SaveContentCommand,
    limits: SaveLimits = DEFAULT_LIMITS,
) -> list[FieldError]:
    """Return every field-level problem with a save command."""
    errors: list[FieldError] = []

    if command.article_number <= 0:
        errors.append(
            FieldError(
                "invalid_article_number",
                "Article number must be positive.",
                "article_number",
            )
        )

    title = command.title or ""
    if not title.strip():
        errors.append(FieldError("required", "Title is required.", "title"))
    elif len(title) > limits.title_max:
        errors.append(
            FieldError(
                "too_long",
                f"Title cannot exceed {limits.title_max} characters.",
                "title",
            )
        )

    if not (command.content or "").strip():
        errors.append(FieldError("required", "Content is required.", "content"))

    if command.editor_id is None or command.editor_id == _NIL_UUID:
        errors.append(FieldError("required", "Editor id is required.", "editor_id"))

    if command.category and len(command.category) > limits.category_max:
        errors.append(
            FieldError(
                "too_long",
                f"Category cannot exceed {limits.category_max} characters.",
                "category",
            )
        )

    if command.introduction and len(command.introduction) > limits.introduction_max:
        errors.append(
            FieldError(
                "too_long",
                f"Introduction cannot exceed {limits.introduction_max} characters.",
                "introduction",
            )
        )

    return errors


def derive_url_path(prior: ContentVersion, command: SaveContentCommand) -> str:
    """
    URL path for the version that follows `prior`.

    An explicit path on the command wins. Otherwise a retitled page takes the
    slug of its new title as its last path segment, so 'company/about-us'
    retitled "Our Team" becomes 'company/our-team'. The home page keeps
    'root', and a change of letter case alone keeps the current path.
    """
    if command.url_path:
        return command.url_path

    current = prior.url_path or ""
    if current.strip("/").lower() == "root":
        return current
    if current and command.title.strip().casefold() == prior.title.strip().casefold():
        return current

    slug = slugify(command.title)
    if not slug:
        return current
    parent = current.strip("/").rpartition("/")[0]
    return f"{parent}/{slug}" if parent else slug


def next_version(
    prior: ContentVersion,
    command: SaveContentCommand,
    body: str,
    updated_at: datetime,
) -> ContentVersion:
    """
    Build the version that follows `prior`.

    Editor-supplied fields come from the command. Template id, expiration,
    redirect target, blog key and status carry forward from the prior version,
    as does the URL path unless the command names one or the title changed
    (see `derive_url_path`).
    """
    introduction = command.introduction
    if not introduction or not introduction.strip():
        introduction = prior.introduction

    url_path = derive_url_path(prior, command)

    return ContentVersion(
        article_number=prior.article_number,
        version_number=prior.version_number + 1,
        title=command.title,
        content=body,
        header_script=command.header_script,
        footer_script=command.footer_script,
        banner_image=command.banner_image,
        status_code=prior.status_code,
        content_type=command.content_type,
        category=command.category,
        introduction=introduction,
        published_at=command.published_at,
        updated_at=updated_at,
        editor_id=command.editor_id,
        template_id=prior.template_id,
        expires_at=prior.expires_at,
        redirect_target=prior.redirect_target,
        url_path=url_path,
        blog_key=prior.blog_key,
    )
