"""API 라우터 패키지: 모든 엔드포인트 통합.

API Router package: Aggregates every endpoint into a single router for
inclusion in the FastAPI application under ``/api/v1``.

Included routers:
    - auth: 인증 (Registration, login, token refresh)
    - kitchens / shops: 근무지 관리 (Site CRUD and shift rosters)
    - users: 사용자 관리 (Users, profile, availability, salary)
    - history: 이력 조회 (Salary, availability and action history)
    - notifications: 알림 (Notifications)
"""

from fastapi import APIRouter

from staffing.api.auth import router as auth_router
from staffing.api.history import router as history_router
from staffing.api.notifications import router as notifications_router
from staffing.api.sites import build_site_router
from staffing.api.users import router as users_router
from staffing.models.enums import SiteKind

api_router: APIRouter = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Auth"])
api_router.include_router(build_site_router(SiteKind.KITCHEN), prefix="/kitchens", tags=["Kitchens"])
api_router.include_router(build_site_router(SiteKind.SHOP), prefix="/shops", tags=["Shops"])
api_router.include_router(users_router, prefix="/users", tags=["Users"])
api_router.include_router(history_router, prefix="/history", tags=["History"])
api_router.include_router(notifications_router, prefix="/notifications", tags=["Notifications"])
