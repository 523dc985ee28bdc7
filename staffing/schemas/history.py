"""이력 관련 Pydantic 응답 스키마 정의.

History Pydantic response schema definitions: availability history,
action history and salary records.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel


class AvailabilityHistoryResponse(BaseModel):
    """가용성 이력 응답 스키마."""

    id: str  # 이력 UUID 문자열 (Entry UUID as string)
    user_id: str  # 사용자 UUID (Owner user)
    date: datetime  # 기록 시각 UTC (Change timestamp)
    status: str  # 상태: Available|Unavailable
    reason: str | None  # 사유 (Reason)


class ActionHistoryResponse(BaseModel):
    """행동 이력 응답 스키마."""

    id: str  # 이력 UUID 문자열 (Entry UUID as string)
    user_id: str  # 사용자 UUID (Owner user)
    timestamp: datetime  # 기록 시각 UTC (Action timestamp)
    action: str  # 행동: AssignedToKitchen 등 (ActionType value)
    details: dict[str, Any]  # 상세 (Structured details)


class SalaryRecordResponse(BaseModel):
    """급여 기록 응답 스키마."""

    id: str  # 급여 기록 UUID 문자열 (Record UUID as string)
    user_id: str  # 사용자 UUID (Owner user)
    date: date  # 지급일 (Pay date)
    amount: float  # 금액 (Amount)
    status: str  # 상태: Pending|Paid
    notes: str | None  # 비고 (Notes)
    created_at: datetime  # 생성 일시 UTC (Creation timestamp)
