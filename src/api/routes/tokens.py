"""Access token routes."""

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_wedding
from src.api.schemas.webhook_schemas import ApiTokenCreate, ApiTokenIssueResponse, ApiTokenResponse
from src.core.exceptions import DatabaseException, NotFoundException, ValidationException
from src.core.logging import get_logger
from src.storage.database.base import get_db
from src.storage.database.models import Wedding
from src.storage.database.webhook_repository import TokenRepository

logger = get_logger(__name__)
router = APIRouter(prefix="/weddings/{wedding_id}/tokens", tags=["tokens"])


@router.get("", response_model=list[ApiTokenResponse])
async def list_tokens(
    wedding: Wedding = Depends(get_wedding),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """List access tokens (masked), newest first."""
    return await TokenRepository(db).list_tokens(wedding.id)


@router.post("", response_model=ApiTokenIssueResponse, status_code=201)
async def issue_token(
    token_data: ApiTokenCreate,
    wedding: Wedding = Depends(get_wedding),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """Issue a new access token. The plaintext is returned only in this response."""
    try:
        api_token = await TokenRepository(db).issue_token(wedding.id, token_data.name)
        await db.commit()
    except ValidationException as e:
        return JSONResponse(
            status_code=e.status_code,
            content=ApiTokenIssueResponse(success=False, error=e.message).model_dump(),
        )
    except (DatabaseException, SQLAlchemyError) as e:
        await db.rollback()
        logger.error("api_token_issue_failed", wedding_id=wedding.id, error=str(e))
        return JSONResponse(
            status_code=500,
            content=ApiTokenIssueResponse(success=False, error="Could not generate the token").model_dump(),
        )

    return ApiTokenIssueResponse(success=True, token=api_token.token)


@router.delete("/{token_id}", status_code=204)
async def delete_token(
    token_id: int,
    wedding: Wedding = Depends(get_wedding),
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete an access token. Deliveries stop authenticating with it immediately."""
    deleted = await TokenRepository(db).delete_token(wedding.id, token_id)
    if not deleted:
        raise NotFoundException("Token not found")
    await db.commit()
