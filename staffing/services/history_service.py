"""이력 서비스: 가용성/행동 이력 조회 및 급여 기록 관리.

History Service: Reads of availability and action history, and salary
record creation. Users read their own history; admins may read anyone's.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from staffing.models.enums import NotificationType, UserRole
from staffing.models.history import SalaryRecord
from staffing.models.user import User
from staffing.repositories.history_repository import (
    action_history_repository,
    availability_history_repository,
    salary_record_repository,
)
from staffing.repositories.user_repository import user_repository
from staffing.schemas.history import (
    ActionHistoryResponse,
    AvailabilityHistoryResponse,
    SalaryRecordResponse,
)
from staffing.schemas.user import SalaryRecordCreate
from staffing.services.notification_service import notification_service
from staffing.utils.exceptions import ForbiddenError, NotFoundError


class HistoryService:
    """이력 관련 비즈니스 로직을 처리하는 서비스."""

    async def resolve_target(
        self,
        db: AsyncSession,
        current_user: User,
        user_id: UUID | None,
    ) -> UUID:
        """조회 대상 사용자를 결정합니다.

        Decide whose history to read. Without ``user_id`` it is the caller;
        only admins may name another user.

        Raises:
            ForbiddenError: 관리자가 아닌 사용자가 타인 조회 시 (Non-admin reading someone else)
            NotFoundError: 대상 사용자가 없을 때 (Target user not found)
        """
        if user_id is None or user_id == current_user.id:
            return current_user.id
        if current_user.role != UserRole.ADMIN:
            raise ForbiddenError("Only admins can view other users' history")
        if await user_repository.get_by_id(db, user_id) is None:
            raise NotFoundError("User not found")
        return user_id

    async def list_availability(
        self,
        db: AsyncSession,
        user_id: UUID,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[list[AvailabilityHistoryResponse], int]:
        entries, total = await availability_history_repository.get_for_user(db, user_id, page, per_page)
        items: list[AvailabilityHistoryResponse] = [
            AvailabilityHistoryResponse(
                id=str(e.id), user_id=str(e.user_id), date=e.date, status=e.status, reason=e.reason
            )
            for e in entries
        ]
        return items, total

    async def list_actions(
        self,
        db: AsyncSession,
        user_id: UUID,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[list[ActionHistoryResponse], int]:
        entries, total = await action_history_repository.get_for_user(db, user_id, page, per_page)
        items: list[ActionHistoryResponse] = [
            ActionHistoryResponse(
                id=str(e.id),
                user_id=str(e.user_id),
                timestamp=e.timestamp,
                action=e.action,
                details=e.details or {},
            )
            for e in entries
        ]
        return items, total

    def _salary_response(self, record: SalaryRecord) -> SalaryRecordResponse:
        return SalaryRecordResponse(
            id=str(record.id),
            user_id=str(record.user_id),
            date=record.date,
            amount=float(record.amount),
            status=record.status,
            notes=record.notes,
            created_at=record.created_at,
        )

    async def list_salary(
        self,
        db: AsyncSession,
        user_id: UUID,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[list[SalaryRecordResponse], int]:
        records, total = await salary_record_repository.get_for_user(db, user_id, page, per_page)
        return [self._salary_response(r) for r in records], total

    async def create_salary_record(
        self,
        db: AsyncSession,
        user_id: UUID,
        data: SalaryRecordCreate,
    ) -> SalaryRecordResponse:
        """급여 기록을 생성합니다.

        Create a salary record for a user. The notification is sent
        separately by :meth:`notify_salary_record` after the commit.

        Raises:
            NotFoundError: 사용자가 없을 때 (User not found)
        """
        if await user_repository.get_by_id(db, user_id) is None:
            raise NotFoundError("User not found")
        record: SalaryRecord = await salary_record_repository.create(
            db,
            {
                "user_id": user_id,
                "date": data.date,
                "amount": data.amount,
                "status": data.status.value,
                "notes": data.notes,
            },
        )
        return self._salary_response(record)

    async def notify_salary_record(self, record: SalaryRecordResponse) -> None:
        """급여 기록 알림 (베스트 에포트): Best-effort salary notice."""
        message: str = f"A salary record of {record.amount:.2f} dated {record.date.isoformat()} has been added ({record.status})."
        await notification_service.notify_best_effort(
            UUID(record.user_id),
            NotificationType.SALARY,
            message,
            salary_record_id=UUID(record.id),
        )


# 싱글턴 인스턴스: Singleton instance
history_service: HistoryService = HistoryService()
