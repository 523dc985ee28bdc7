"""사용자 관련 Pydantic 요청/응답 스키마 정의.

User Pydantic request/response schema definitions.
Covers the user list, profile reads and edits, and admin-only
availability and salary requests.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from staffing.models.enums import SalaryStatus


class UserResponse(BaseModel):
    """사용자 응답 스키마.

    User response schema. ``is_available`` is the derived value, never
    editable directly.

    Attributes:
        id: 사용자 UUID (User unique identifier)
        username: 사용자명 (Username)
        email: 이메일 (Email)
        role: 역할 (Role)
        is_available: 파생 가용성 (Derived availability)
        manual_availability: 수동 설정 (Manual override or null)
        kitchen_id: 배정 주방 (Assigned kitchen UUID or null)
        shop_id: 배정 매장 (Assigned shop UUID or null)
    """

    id: str  # 사용자 UUID 문자열 (User UUID as string)
    username: str  # 사용자명 (Username)
    email: str  # 이메일 (Email)
    role: str  # 역할: Admin|Chef|Cashier|Cleaner|TraineeChef|Driver
    is_available: bool  # 파생 가용성 (Derived availability)
    manual_availability: str | None  # 수동 설정: "Unavailable" 또는 null
    kitchen_id: str | None  # 배정 주방 UUID (Assigned kitchen)
    shop_id: str | None  # 배정 매장 UUID (Assigned shop)
    image: str | None  # 프로필 이미지 (Profile image)
    visa_status: str | None  # 비자 상태 (Visa status)
    visa_expiry_date: date | None  # 비자 만료일 (Visa expiry date)
    nationality: str | None  # 국적 (Nationality)
    sex: str | None  # 성별 (Sex)
    salary: float | None  # 급여 (Salary)
    created_at: datetime  # 생성 일시 UTC (Creation timestamp)


class ProfileUpdate(BaseModel):
    """프로필 수정 요청 스키마 (부분 업데이트).

    Profile update request schema (partial update). Site references,
    role and availability are not editable here. Changing the password
    revokes every refresh token of the user.
    """

    username: str | None = Field(None, min_length=3, max_length=100)  # 변경할 사용자명 (optional)
    email: EmailStr | None = None  # 변경할 이메일 (optional)
    password: str | None = Field(None, min_length=6, max_length=128)  # 변경할 비밀번호 (optional)
    visa_status: str | None = None  # 비자 상태 (optional)
    visa_expiry_date: date | None = None  # 비자 만료일 (optional)
    nationality: str | None = None  # 국적 (optional)
    sex: str | None = None  # 성별 (optional)


class AvailabilityUpdateRequest(BaseModel):
    """수동 가용성 변경 요청 스키마.

    Manual availability request. ``isAvailable=false`` sets the Unavailable
    override; ``true`` clears it.

    Attributes:
        is_available: 가용 여부 (False sets the override, True clears it)
        reason: 사유 (Reason recorded in history)
    """

    model_config = ConfigDict(populate_by_name=True)

    is_available: bool = Field(..., alias="isAvailable")  # 가용 여부 (Requested availability)
    reason: str | None = Field(None, max_length=1000)  # 사유 (Reason, optional)


class SalaryRecordCreate(BaseModel):
    """급여 기록 생성 요청 스키마: Salary record creation request."""

    date: date  # 지급일 (Pay date)
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)  # 금액 (Amount, positive)
    status: SalaryStatus = SalaryStatus.PENDING  # 상태: Pending|Paid
    notes: str | None = None  # 비고 (Notes, optional)
