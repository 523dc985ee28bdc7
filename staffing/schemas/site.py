"""근무지(주방/매장) 관련 Pydantic 요청/응답 스키마 정의.

Site (kitchen / shop) Pydantic request/response schema definitions.
Covers site CRUD and the roster assignment request.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from staffing.models.enums import ShiftType


def _unique_shifts(shifts: list[ShiftType] | None) -> list[ShiftType] | None:
    """중복 시프트 제거, 순서 유지: Drop duplicate shifts keeping order."""
    if shifts is None:
        return None
    return list(dict.fromkeys(shifts))


class SiteCreate(BaseModel):
    """근무지 생성 요청 스키마.

    Site creation request schema. The kind comes from the URL
    (``/kitchens`` or ``/shops``).

    Attributes:
        name: 이름 (Site name)
        address: 주소 (Street address)
        operating_shifts: 운영 시프트 (Operated shift types)
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=255)  # 근무지 이름 (Site name)
    address: str = Field(..., min_length=1, max_length=500)  # 주소 (Address)
    operating_shifts: list[ShiftType] = Field(default_factory=list, alias="operatingShifts")  # 운영 시프트 (Shift types)

    @field_validator("operating_shifts")
    @classmethod
    def dedupe_shifts(cls, value: list[ShiftType] | None) -> list[ShiftType] | None:
        return _unique_shifts(value)


class SiteUpdate(BaseModel):
    """근무지 수정 요청 스키마 (부분 업데이트).

    Site update request schema (partial update). Removing a shift from
    ``operating_shifts`` unassigns everyone rostered on it.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(None, min_length=1, max_length=255)  # 변경할 이름 (New name, optional)
    address: str | None = Field(None, min_length=1, max_length=500)  # 변경할 주소 (New address, optional)
    operating_shifts: list[ShiftType] | None = Field(None, alias="operatingShifts")  # 변경할 운영 시프트 (optional)

    @field_validator("operating_shifts")
    @classmethod
    def dedupe_shifts(cls, value: list[ShiftType] | None) -> list[ShiftType] | None:
        return _unique_shifts(value)


class SiteResponse(BaseModel):
    """근무지 응답 스키마.

    Attributes:
        id: 근무지 UUID (Site unique identifier)
        kind: 종류 (kitchen | shop)
        name: 이름 (Site name)
        address: 주소 (Address)
        operating_shifts: 운영 시프트 (Operated shift types)
        image: 이미지 (Image path or URL)
        is_deleted: 삭제 여부 (Soft delete flag)
        version: 버전 (Optimistic locking counter)
        created_at: 생성 일시 (Creation timestamp)
    """

    id: str  # 근무지 UUID 문자열 (Site UUID as string)
    kind: str  # 종류: "kitchen"|"shop"
    name: str  # 이름 (Name)
    address: str  # 주소 (Address)
    operating_shifts: list[str]  # 운영 시프트 (Shift types)
    image: str | None  # 이미지 경로 (Image path or URL)
    is_deleted: bool  # 삭제 여부 (Soft-deleted flag)
    version: int  # 버전 (Version counter)
    created_at: datetime  # 생성 일시 UTC (Creation timestamp)


class TeamMemberResponse(BaseModel):
    """팀원 응답 스키마: Rostered user summary."""

    id: str  # 사용자 UUID 문자열 (User UUID as string)
    username: str  # 사용자명 (Username)
    email: str  # 이메일 (Email)
    role: str  # 역할 (Role)
    image: str | None  # 프로필 이미지 (Profile image)
    is_available: bool  # 가용 여부 (Derived availability)


class SiteDetailResponse(SiteResponse):
    """근무지 상세 응답: 시프트별 팀 포함.

    Site detail with teams keyed by shift type. Every operated shift is
    present, empty rosters included.
    """

    teams: dict[str, list[TeamMemberResponse]] = {}  # 시프트별 팀원 (Members per shift)


class AssignUsersRequest(BaseModel):
    """시프트 배정 요청 스키마.

    Roster assignment request: the full desired roster of one shift.
    Accepts both ``userIds``/``shiftType`` and snake_case field names.

    Attributes:
        user_ids: 원하는 배정 인원 (Desired roster, in order)
        shift_type: 대상 시프트 (Target shift type)
    """

    model_config = ConfigDict(populate_by_name=True)

    user_ids: list[UUID] = Field(..., alias="userIds")  # 원하는 배정 인원: 빈 목록이면 전원 해제 (Empty clears the shift)
    shift_type: ShiftType = Field(..., alias="shiftType")  # 대상 시프트 (Shift type)


class AssignUsersResponse(BaseModel):
    """시프트 배정 결과 응답: Roster change outcome."""

    message: str  # 결과 메시지 (Result message)
    site_id: str  # 근무지 UUID (Site UUID)
    shift_type: str  # 시프트 (Shift type)
    roster: list[str]  # 최종 로스터 (Resulting roster, in order)
    assigned: list[str]  # 새로 배정된 사용자 (Newly assigned users)
    unassigned: list[str]  # 해제된 사용자 (Unassigned users)
