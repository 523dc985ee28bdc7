"""가용성 파생 규칙: 사용자 is_available 계산.

Availability derivation. ``is_available`` is never written directly: the
user repository calls :func:`refresh_availability` right before every
user flush, so the cached column always matches the rule below.
"""

from uuid import UUID

from staffing.models.enums import AvailabilityStatus
from staffing.models.user import User


def compute_availability(
    manual_availability: str | None,
    kitchen_id: UUID | None,
    shop_id: UUID | None,
) -> bool:
    """수동 설정과 근무지 배정으로 가용성을 계산합니다.

    Compute a user's availability.

    1. A manual "Unavailable" override always wins.
    2. Otherwise any site reference makes the user unavailable.
    3. Otherwise the user is available.

    Args:
        manual_availability: 수동 설정 값 (Manual override, "Unavailable" or None)
        kitchen_id: 배정된 주방 ID (Assigned kitchen or None)
        shop_id: 배정된 매장 ID (Assigned shop or None)

    Returns:
        bool: 가용 여부 (True when the user can be assigned)
    """
    if manual_availability == AvailabilityStatus.UNAVAILABLE:
        return False
    if kitchen_id is not None or shop_id is not None:
        return False
    return True


def refresh_availability(user: User) -> bool:
    """사용자 행의 is_available 값을 다시 계산하여 기록합니다.

    Recompute and store ``user.is_available``. Returns the new value.
    """
    user.is_available = compute_availability(
        user.manual_availability, user.kitchen_id, user.shop_id
    )
    return user.is_available


def availability_status(user: User) -> AvailabilityStatus:
    """이력 기록용 상태 문자열: Status label for history entries."""
    if user.is_available:
        return AvailabilityStatus.AVAILABLE
    return AvailabilityStatus.UNAVAILABLE
