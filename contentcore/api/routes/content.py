from fastapi import APIRouter, Depends

from contentcore.api.deps import get_context
from contentcore.api.result_utils import conflict, unwrap
from contentcore.api.schemas import (
    CatalogEntryResponse,
    CdnResultModel,
    SaveContentRequest,
    SaveContentResponse,
)
from contentcore.app_shell.context import ServiceContext
from contentcore.components.save import SaveContentCommand, SaveContentOutcome
from contentcore.domain.errors import BusinessRuleViolation

router = APIRouter()


@router.put("/content/{article_number}", response_model=SaveContentResponse)
async def save_content(
    article_number: int,
    req: SaveContentRequest,
    ctx: ServiceContext = Depends(get_context),
) -> SaveContentResponse:
    """Save a new version of an existing content entry."""
    command = SaveContentCommand(article_number=article_number, **req.model_dump())
    try:
        result = await ctx.execute(command)
    except BusinessRuleViolation as e:
        raise conflict(e) from e

    outcome: SaveContentOutcome = unwrap(result)
    return SaveContentResponse(
        success=outcome.success,
        article_number=article_number,
        new_version_number=outcome.new_version_number,
        cdn_results=[CdnResultModel(**r.model_dump()) for r in outcome.cdn_results],
    )


@router.get("/catalog", response_model=list[CatalogEntryResponse])
async def list_catalog(
    ctx: ServiceContext = Depends(get_context),
) -> list[CatalogEntryResponse]:
    """List every catalog row, ordered by article number."""
    async with ctx.unit_of_work() as uow:
        entries = await uow.catalog.list_all()
    return [CatalogEntryResponse(**e.model_dump()) for e in entries]
