"""사용자 라우터: 사용자 목록, 프로필, 삭제, 가용성, 급여 기록.

User Router: User listing and detail (admin), own profile editing, hard
delete, manual availability override and salary record creation.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from staffing.api.deps import get_current_user, require_admin
from staffing.config import settings
from staffing.database import get_db
from staffing.models.enums import UserRole
from staffing.models.user import User
from staffing.schemas.common import ImageUploadResponse, MessageResponse, PaginatedResponse
from staffing.schemas.history import SalaryRecordResponse
from staffing.schemas.user import (
    AvailabilityUpdateRequest,
    ProfileUpdate,
    SalaryRecordCreate,
    UserResponse,
)
from staffing.services.history_service import history_service
from staffing.services.user_service import user_service

router: APIRouter = APIRouter()


@router.get("", response_model=PaginatedResponse)
async def list_users(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    search: Annotated[str | None, Query(description="사용자명/이메일 검색")] = None,
    role: Annotated[UserRole | None, Query(description="역할 필터")] = None,
    is_available: Annotated[bool | None, Query(description="가용 상태 필터")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=settings.MAX_PAGE_SIZE)] = settings.DEFAULT_PAGE_SIZE,
) -> dict:
    """사용자 목록을 필터 조건으로 조회합니다.

    List users with optional search, role and availability filters.
    """
    items, total = await user_service.list_users(
        db,
        search=search,
        role=role.value if role else None,
        is_available=is_available,
        page=page,
        per_page=per_page,
    )
    return {"items": items, "total": total, "page": page, "per_page": per_page}


@router.get("/profile", response_model=UserResponse)
async def get_profile(
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserResponse:
    return user_service.to_response(current_user)


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    data: ProfileUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserResponse:
    """본인 프로필 수정: 비밀번호 변경 시 리프레시 토큰 폐기.

    Update the caller's own profile. Changing the password revokes every
    refresh token.
    """
    result: UserResponse = await user_service.update_profile(db, current_user, data)
    await db.commit()
    return result


@router.post("/profile/image", response_model=ImageUploadResponse)
async def upload_profile_image(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    file: UploadFile = File(...),
) -> ImageUploadResponse:
    content: bytes = await file.read()
    location: str = await user_service.upload_profile_image(
        db, current_user, file.filename or "", content, file.content_type
    )
    await db.commit()
    return ImageUploadResponse(image=location)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> UserResponse:
    """사용자 상세 정보를 조회합니다."""
    return await user_service.get_user(db, user_id)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict:
    """사용자 영구 삭제: 로스터와 모든 기록 함께 제거.

    Hard-delete a user together with roster rows and every owned record.
    """
    await user_service.delete_user(db, user_id, current_user)
    await db.commit()
    return {"message": "User deleted"}


@router.put("/{user_id}/availability", response_model=UserResponse)
async def set_availability(
    user_id: UUID,
    data: AvailabilityUpdateRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> UserResponse:
    """수동 가용성 설정: 불가 설정 시 현재 근무지에서 해제.

    Set or clear the manual availability override. Marking a user
    unavailable takes them off every roster of their site.
    """
    result: UserResponse = await user_service.set_availability(db, user_id, data)
    await db.commit()
    return result


@router.post("/{user_id}/salary", response_model=SalaryRecordResponse, status_code=201)
async def create_salary_record(
    user_id: UUID,
    data: SalaryRecordCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> SalaryRecordResponse:
    """급여 기록 생성: 커밋 후 알림 발송 (베스트 에포트).

    Create a salary record. The user is notified after the commit; a failed
    notification does not undo the record.
    """
    result: SalaryRecordResponse = await history_service.create_salary_record(db, user_id, data)
    await db.commit()
    await history_service.notify_salary_record(result)
    return result
