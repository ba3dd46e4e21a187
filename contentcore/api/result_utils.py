"""
Translate command results into HTTP responses.

200 success, 422 validation, 404 not found, 500 fault. Business rule
violations are raised, not returned; routes map them to 409.
"""

from typing import Any

from fastapi import HTTPException, status

from contentcore.domain.errors import BusinessRuleViolation
from contentcore.domain.result import Fault, NotFound, Success, ValidationFailure


def unwrap(result: Any) -> Any:
    """Return the Success value or raise the matching HTTPException."""
    if isinstance(result, Success):
        return result.value
    if isinstance(result, ValidationFailure):
        raise HTTPException(
            status_code=422,
            detail={"errors": result.by_field()},
        )
    if isinstance(result, NotFound):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.message)
    if isinstance(result, Fault):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=result.message
        )
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unexpected result"
    )


def conflict(e: BusinessRuleViolation) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={"code": e.code, "message": e.message, "field": e.field},
    )
