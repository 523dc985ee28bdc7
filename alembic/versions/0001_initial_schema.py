"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000

초기 스키마 생성: sites, users, roster_entries, 이력/급여/알림/토큰 테이블.
Create the initial schema: sites, users, roster entries, availability and
action history, salary records, notifications and refresh tokens.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # sites: 주방/매장 공용 테이블 (kind 컬럼으로 구분)
    op.create_table(
        'sites',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('kind', sa.String(20), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('address', sa.String(500), nullable=False),
        sa.Column('operating_shifts', JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column('image', sa.String(500), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_sites_kind', 'sites', ['kind'])
    # 살아 있는 근무지 이름 중복 방지: Case-insensitive unique name among live sites
    op.create_index(
        'uq_sites_kind_lower_name_live',
        'sites',
        ['kind', sa.text('lower(name)')],
        unique=True,
        postgresql_where=sa.text('NOT is_deleted'),
        sqlite_where=sa.text('NOT is_deleted'),
    )

    # users: 계정, 파생 가용성, 근무지 참조 (주방 또는 매장 하나)
    op.create_table(
        'users',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('username', sa.String(100), nullable=False, unique=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('manual_availability', sa.String(20), nullable=True),
        sa.Column('kitchen_id', UUID(as_uuid=True), sa.ForeignKey('sites.id', ondelete='SET NULL'), nullable=True),
        sa.Column('shop_id', UUID(as_uuid=True), sa.ForeignKey('sites.id', ondelete='SET NULL'), nullable=True),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('image', sa.String(500), nullable=True),
        sa.Column('visa_status', sa.String(100), nullable=True),
        sa.Column('visa_expiry_date', sa.Date(), nullable=True),
        sa.Column('nationality', sa.String(100), nullable=True),
        sa.Column('sex', sa.String(20), nullable=True),
        sa.Column('salary', sa.Numeric(12, 2), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint('kitchen_id IS NULL OR shop_id IS NULL', name='ck_user_single_site'),
    )
    op.create_index('ix_users_kitchen_id', 'users', ['kitchen_id'])
    op.create_index('ix_users_shop_id', 'users', ['shop_id'])

    # roster_entries: 근무지 × 시프트별 정렬된 배정 목록
    op.create_table(
        'roster_entries',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('site_id', UUID(as_uuid=True), sa.ForeignKey('sites.id', ondelete='CASCADE'), nullable=False),
        sa.Column('shift_type', sa.String(20), nullable=False),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('site_id', 'shift_type', 'user_id', name='uq_roster_site_shift_user'),
    )
    op.create_index('ix_roster_entries_site_id', 'roster_entries', ['site_id'])
    op.create_index('ix_roster_entries_user_id', 'roster_entries', ['user_id'])

    # availability_history / action_history: 추가 전용 감사 기록
    op.create_table(
        'availability_history',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('reason', sa.String(1000), nullable=True),
    )
    op.create_index('ix_availability_history_user_id', 'availability_history', ['user_id'])

    op.create_table(
        'action_history',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('action', sa.String(50), nullable=False),
        sa.Column('details', JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
    )
    op.create_index('ix_action_history_user_id', 'action_history', ['user_id'])

    # salary_records: 급여 기록
    op.create_table(
        'salary_records',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='Pending'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_salary_records_user_id', 'salary_records', ['user_id'])

    # notifications: 사용자 알림
    op.create_table(
        'notifications',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('message', sa.String(1000), nullable=False),
        sa.Column('reference_type', sa.String(50), nullable=True),
        sa.Column('reference_id', UUID(as_uuid=True), nullable=True),
        sa.Column('is_read', sa.Boolean(), server_default=sa.text('false')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])

    # refresh_tokens: 저장된 리프레시 토큰 (회전/폐기용)
    op.create_table(
        'refresh_tokens',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('token', sa.String(512), nullable=False, unique=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table('refresh_tokens')
    op.drop_index('ix_notifications_user_id', table_name='notifications')
    op.drop_table('notifications')
    op.drop_index('ix_salary_records_user_id', table_name='salary_records')
    op.drop_table('salary_records')
    op.drop_index('ix_action_history_user_id', table_name='action_history')
    op.drop_table('action_history')
    op.drop_index('ix_availability_history_user_id', table_name='availability_history')
    op.drop_table('availability_history')
    op.drop_index('ix_roster_entries_user_id', table_name='roster_entries')
    op.drop_index('ix_roster_entries_site_id', table_name='roster_entries')
    op.drop_table('roster_entries')
    op.drop_index('ix_users_shop_id', table_name='users')
    op.drop_index('ix_users_kitchen_id', table_name='users')
    op.drop_table('users')
    op.drop_index('uq_sites_kind_lower_name_live', table_name='sites')
    op.drop_index('ix_sites_kind', table_name='sites')
    op.drop_table('sites')
