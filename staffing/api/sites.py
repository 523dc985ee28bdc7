"""근무지 라우터: 주방/매장 CRUD, 복구, 시프트 배정, 이미지 업로드.

Site Router: Kitchen and shop endpoints. Both resources share one
implementation; :func:`build_site_router` binds it to a site kind.
Reads need any authenticated user, writes need an Admin.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from staffing.api.deps import get_current_user, require_admin
from staffing.config import settings
from staffing.database import get_db
from staffing.models.enums import SiteKind
from staffing.models.user import User
from staffing.schemas.common import ImageUploadResponse, MessageResponse, PaginatedResponse
from staffing.schemas.site import (
    AssignUsersRequest,
    AssignUsersResponse,
    SiteCreate,
    SiteDetailResponse,
    SiteResponse,
    SiteUpdate,
)
from staffing.services.assignment_service import kind_label
from staffing.services.site_service import site_service


def build_site_router(kind: SiteKind) -> APIRouter:
    """근무지 종류별 라우터를 생성합니다.

    Build the router for one site kind (``/kitchens`` or ``/shops``).

    Args:
        kind: 근무지 종류 (Site kind bound to every endpoint)

    Returns:
        APIRouter: 종류가 고정된 라우터 (Router with the kind bound)
    """
    router: APIRouter = APIRouter()
    label: str = kind_label(kind)

    @router.post("", response_model=SiteResponse, status_code=201)
    async def create_site(
        data: SiteCreate,
        db: Annotated[AsyncSession, Depends(get_db)],
        current_user: Annotated[User, Depends(require_admin)],
    ) -> SiteResponse:
        result: SiteResponse = await site_service.create_site(db, kind, data)
        await db.commit()
        return result

    @router.get("", response_model=PaginatedResponse)
    async def list_sites(
        db: Annotated[AsyncSession, Depends(get_db)],
        current_user: Annotated[User, Depends(get_current_user)],
        search: Annotated[str | None, Query(description="이름/주소 검색")] = None,
        include_deleted: Annotated[bool, Query(description="삭제된 항목 포함")] = False,
        page: Annotated[int, Query(ge=1)] = 1,
        per_page: Annotated[int, Query(ge=1, le=settings.MAX_PAGE_SIZE)] = settings.DEFAULT_PAGE_SIZE,
    ) -> dict:
        """근무지 목록: Paginated list with optional search."""
        items, total = await site_service.list_sites(
            db, kind, search=search, include_deleted=include_deleted, page=page, per_page=per_page
        )
        return {"items": items, "total": total, "page": page, "per_page": per_page}

    @router.get("/{site_id}", response_model=SiteDetailResponse)
    async def get_site(
        site_id: UUID,
        db: Annotated[AsyncSession, Depends(get_db)],
        current_user: Annotated[User, Depends(get_current_user)],
    ) -> SiteDetailResponse:
        """근무지 상세: Detail with the team of every shift."""
        return await site_service.get_site(db, kind, site_id)

    @router.put("/{site_id}", response_model=SiteResponse)
    async def update_site(
        site_id: UUID,
        data: SiteUpdate,
        db: Annotated[AsyncSession, Depends(get_db)],
        current_user: Annotated[User, Depends(require_admin)],
    ) -> SiteResponse:
        result: SiteResponse = await site_service.update_site(db, kind, site_id, data)
        await db.commit()
        return result

    @router.delete("/{site_id}", response_model=MessageResponse)
    async def delete_site(
        site_id: UUID,
        db: Annotated[AsyncSession, Depends(get_db)],
        current_user: Annotated[User, Depends(require_admin)],
    ) -> dict:
        """근무지 소프트 삭제: 배정된 사용자 전원 해제.

        Soft-delete the site and release every assigned user.
        """
        released: int = await site_service.delete_site(db, kind, site_id)
        await db.commit()
        return {"message": f"{label} deleted ({released} users unassigned)"}

    @router.put("/{site_id}/restore", response_model=SiteResponse)
    async def restore_site(
        site_id: UUID,
        db: Annotated[AsyncSession, Depends(get_db)],
        current_user: Annotated[User, Depends(require_admin)],
    ) -> SiteResponse:
        result: SiteResponse = await site_service.restore_site(db, kind, site_id)
        await db.commit()
        return result

    @router.post("/{site_id}/assign-users", response_model=AssignUsersResponse)
    async def assign_users(
        site_id: UUID,
        data: AssignUsersRequest,
        db: Annotated[AsyncSession, Depends(get_db)],
        current_user: Annotated[User, Depends(require_admin)],
    ) -> AssignUsersResponse:
        """시프트 로스터 설정: 요청 목록이 해당 시프트의 전체 인원이 됩니다.

        Set the full roster of one shift. Users missing from the list are
        unassigned; an empty list clears the shift.
        """
        result: AssignUsersResponse = await site_service.assign_users(db, kind, site_id, data)
        await db.commit()
        return result

    @router.post("/{site_id}/image", response_model=ImageUploadResponse)
    async def upload_image(
        site_id: UUID,
        db: Annotated[AsyncSession, Depends(get_db)],
        current_user: Annotated[User, Depends(require_admin)],
        file: UploadFile = File(...),
    ) -> ImageUploadResponse:
        content: bytes = await file.read()
        location: str = await site_service.upload_image(
            db, kind, site_id, file.filename or "", content, file.content_type
        )
        await db.commit()
        return ImageUploadResponse(image=location)

    return router
