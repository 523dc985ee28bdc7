"""가용성 계산 테스트.

Availability deriver tests: the manual override wins, then any site
reference, otherwise the user is available.
"""

import uuid

import pytest

from staffing.models.enums import AvailabilityStatus
from staffing.models.user import User
from staffing.services.availability import (
    availability_status,
    compute_availability,
    refresh_availability,
)

SITE = uuid.uuid4()


class TestComputeAvailability:
    """가용성 진리표."""

    @pytest.mark.parametrize(
        ("manual", "kitchen_id", "shop_id", "expected"),
        [
            (None, None, None, True),
            (None, SITE, None, False),
            (None, None, SITE, False),
            ("Unavailable", None, None, False),
            ("Unavailable", SITE, None, False),
            ("Unavailable", None, SITE, False),
        ],
    )
    def test_truth_table(self, manual, kitchen_id, shop_id, expected):
        assert compute_availability(manual, kitchen_id, shop_id) is expected

    def test_enum_override_matches_string(self):
        """enum 값과 문자열 모두 수동 불가로 인식."""
        assert compute_availability(AvailabilityStatus.UNAVAILABLE, None, None) is False


class TestRefreshAvailability:
    """모델 값 갱신."""

    def test_cleared_override_without_site_is_available(self):
        user = User(manual_availability="Unavailable", kitchen_id=None, shop_id=None, is_available=False)
        user.manual_availability = None
        assert refresh_availability(user) is True
        assert user.is_available is True
        assert availability_status(user) == AvailabilityStatus.AVAILABLE

    def test_site_reference_makes_unavailable(self):
        user = User(manual_availability=None, kitchen_id=None, shop_id=SITE, is_available=True)
        assert refresh_availability(user) is False
        assert availability_status(user) == AvailabilityStatus.UNAVAILABLE
