"""이력 레포지토리: 가용성/행동 이력 및 급여 기록 쿼리.

History Repository: Append and read availability history, action history
and salary records. History rows are never updated.
"""

from datetime import datetime, timezone
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from staffing.models.history import ActionHistory, AvailabilityHistory, SalaryRecord
from staffing.repositories.base import BaseRepository


class AvailabilityHistoryRepository(BaseRepository[AvailabilityHistory]):
    """가용성 이력 레포지토리: Availability history repository."""

    def __init__(self) -> None:
        super().__init__(AvailabilityHistory)

    def append(
        self,
        db: AsyncSession,
        user_id: UUID,
        status: str,
        reason: str | None,
        when: datetime | None = None,
    ) -> AvailabilityHistory:
        """이력 항목을 세션에 추가합니다 (flush는 호출자가 수행).

        Stage one entry in the session. The caller flushes, so a batch of
        entries goes out together with the user rows.
        """
        entry: AvailabilityHistory = AvailabilityHistory(
            user_id=user_id,
            status=status,
            reason=reason,
            date=when or datetime.now(timezone.utc),
        )
        db.add(entry)
        return entry

    async def get_for_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[AvailabilityHistory], int]:
        """사용자의 가용성 이력을 최신순으로 조회합니다."""
        query: Select = (
            select(AvailabilityHistory)
            .where(AvailabilityHistory.user_id == user_id)
            .order_by(AvailabilityHistory.date.desc())
        )
        return await self.get_paginated(db, query, page, per_page)


class ActionHistoryRepository(BaseRepository[ActionHistory]):
    """행동 이력 레포지토리: Action history repository."""

    def __init__(self) -> None:
        super().__init__(ActionHistory)

    def append(
        self,
        db: AsyncSession,
        user_id: UUID,
        action: str,
        details: dict[str, Any],
        when: datetime | None = None,
    ) -> ActionHistory:
        """행동 이력 항목을 세션에 추가합니다: Stage one action entry."""
        entry: ActionHistory = ActionHistory(
            user_id=user_id,
            action=action,
            details=details,
            timestamp=when or datetime.now(timezone.utc),
        )
        db.add(entry)
        return entry

    async def get_for_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[ActionHistory], int]:
        """사용자의 행동 이력을 최신순으로 조회합니다."""
        query: Select = (
            select(ActionHistory)
            .where(ActionHistory.user_id == user_id)
            .order_by(ActionHistory.timestamp.desc())
        )
        return await self.get_paginated(db, query, page, per_page)


class SalaryRecordRepository(BaseRepository[SalaryRecord]):
    """급여 기록 레포지토리: Salary record repository."""

    def __init__(self) -> None:
        super().__init__(SalaryRecord)

    async def get_for_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[SalaryRecord], int]:
        """사용자의 급여 기록을 지급일 최신순으로 조회합니다."""
        query: Select = (
            select(SalaryRecord)
            .where(SalaryRecord.user_id == user_id)
            .order_by(SalaryRecord.date.desc(), SalaryRecord.created_at.desc())
        )
        return await self.get_paginated(db, query, page, per_page)


# 싱글턴 인스턴스: Singleton instances
availability_history_repository: AvailabilityHistoryRepository = AvailabilityHistoryRepository()
action_history_repository: ActionHistoryRepository = ActionHistoryRepository()
salary_record_repository: SalaryRecordRepository = SalaryRecordRepository()
