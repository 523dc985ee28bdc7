"""기본 레포지토리: 모델별 레포지토리가 공유하는 조회/저장 헬퍼.

Base Repository shared by the per-model repositories.

Writes only flush; the router owns the commit. Subclasses that keep derived
columns override :meth:`BaseRepository._before_flush`, which runs on every
object this class inserts or updates.

Usage:
    class SiteRepository(BaseRepository[Site]):
        def __init__(self) -> None:
            super().__init__(Site)
"""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import Select, exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from staffing.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """제네릭 레포지토리.

    Attributes:
        model: 관리 대상 SQLAlchemy 모델 (Mapped model class)
    """

    def __init__(self, model: type[ModelType]) -> None:
        self.model: type[ModelType] = model

    def _before_flush(self, obj: ModelType) -> None:
        """저장 직전 훅: recompute derived columns. No-op by default."""

    async def get_by_id(
        self,
        db: AsyncSession,
        record_id: UUID,
    ) -> ModelType | None:
        """UUID로 레코드 하나를 조회합니다. 없으면 None."""
        return await db.get(self.model, record_id)

    async def get_paginated(
        self,
        db: AsyncSession,
        query: Select,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[ModelType], int]:
        """쿼리 결과의 한 페이지와 전체 개수를 반환합니다.

        Run ``query`` for one page and count its full result set.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            query: 정렬까지 적용된 SELECT (Fully filtered and ordered SELECT)
            page: 1부터 시작하는 페이지 번호 (1-based page number)
            per_page: 페이지 크기 (Page size)

        Returns:
            tuple[Sequence[ModelType], int]: (현재 페이지 항목, 전체 개수)
        """
        total: int = (await db.execute(
            select(func.count()).select_from(query.order_by(None).subquery())
        )).scalar_one()
        rows = await db.execute(query.limit(per_page).offset((page - 1) * per_page))
        return rows.scalars().all(), total

    async def create(
        self,
        db: AsyncSession,
        obj_data: dict[str, Any],
    ) -> ModelType:
        """레코드를 추가하고 flush 후 서버 기본값까지 다시 읽습니다."""
        obj: ModelType = self.model(**obj_data)
        self._before_flush(obj)
        db.add(obj)
        await db.flush()
        await db.refresh(obj)
        return obj

    async def update(
        self,
        db: AsyncSession,
        obj: ModelType,
        changes: dict[str, Any],
    ) -> ModelType:
        """변경 사항을 적용합니다.

        Apply ``changes`` (typically ``model_dump(exclude_unset=True)``, so an
        explicit None clears a column). Keys the model does not map are
        ignored.
        """
        mapped: set[str] = set(self.model.__mapper__.attrs.keys())
        for field, value in changes.items():
            if field in mapped:
                setattr(obj, field, value)
        self._before_flush(obj)
        await db.flush()
        await db.refresh(obj)
        return obj

    async def exists(
        self,
        db: AsyncSession,
        exclude_id: UUID | None = None,
        **filters: Any,
    ) -> bool:
        """컬럼 값이 일치하는 레코드 존재 여부.

        ``exclude_id`` skips the record being edited, so a user can keep
        their own username on update.
        """
        conditions: list = [getattr(self.model, column) == value for column, value in filters.items()]
        if exclude_id is not None:
            conditions.append(self.model.id != exclude_id)
        return bool((await db.execute(select(exists().where(*conditions)))).scalar())
