from uuid import UUID

from fastapi import APIRouter, Depends

from contentcore.api.deps import get_context
from contentcore.api.result_utils import unwrap
from contentcore.api.schemas import PublishDesignRequest, PublishDesignResponse
from contentcore.app_shell.context import ServiceContext
from contentcore.components.propagation import PublishDesignCommand, PublishDesignOutcome

router = APIRouter()


@router.post("/{design_version_id}/publish", response_model=PublishDesignResponse)
async def publish_design(
    design_version_id: UUID,
    req: PublishDesignRequest,
    ctx: ServiceContext = Depends(get_context),
) -> PublishDesignResponse:
    """Publish a design version and regenerate every dependent entry."""
    command = PublishDesignCommand(design_version_id=design_version_id, editor_id=req.editor_id)
    outcome: PublishDesignOutcome = unwrap(await ctx.execute(command))
    return PublishDesignResponse(
        success=outcome.success,
        template_id=outcome.template_id,
        updated=outcome.updated,
        failed=outcome.failed,
        republished=outcome.republished,
    )
