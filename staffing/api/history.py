"""이력 라우터: 급여, 가용성, 행동 이력 조회.

History Router: Read-only salary, availability and action history.
Users read their own records; admins may pass ``user_id``.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from staffing.api.deps import get_current_user
from staffing.config import settings
from staffing.database import get_db
from staffing.models.user import User
from staffing.schemas.common import PaginatedResponse
from staffing.services.history_service import history_service

router: APIRouter = APIRouter()


@router.get("/salary", response_model=PaginatedResponse)
async def list_salary(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    user_id: Annotated[UUID | None, Query(description="대상 사용자 (관리자 전용)")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=settings.MAX_PAGE_SIZE)] = settings.DEFAULT_PAGE_SIZE,
) -> dict:
    """급여 기록 목록: 최신 지급일 순."""
    target: UUID = await history_service.resolve_target(db, current_user, user_id)
    items, total = await history_service.list_salary(db, target, page, per_page)
    return {"items": items, "total": total, "page": page, "per_page": per_page}


@router.get("/availability", response_model=PaginatedResponse)
async def list_availability(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    user_id: Annotated[UUID | None, Query(description="대상 사용자 (관리자 전용)")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=settings.MAX_PAGE_SIZE)] = settings.DEFAULT_PAGE_SIZE,
) -> dict:
    """가용성 이력 목록을 조회합니다.

    List availability history entries, newest first.
    """
    target: UUID = await history_service.resolve_target(db, current_user, user_id)
    items, total = await history_service.list_availability(db, target, page, per_page)
    return {"items": items, "total": total, "page": page, "per_page": per_page}


@router.get("/actions", response_model=PaginatedResponse)
async def list_actions(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    user_id: Annotated[UUID | None, Query(description="대상 사용자 (관리자 전용)")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=settings.MAX_PAGE_SIZE)] = settings.DEFAULT_PAGE_SIZE,
) -> dict:
    target: UUID = await history_service.resolve_target(db, current_user, user_id)
    items, total = await history_service.list_actions(db, target, page, per_page)
    return {"items": items, "total": total, "page": page, "per_page": per_page}
