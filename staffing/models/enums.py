"""도메인 열거형: 역할, 시프트, 가용성 상태 등 문자열 값 집합.

Domain enumerations. Stored as plain strings in the database; StrEnum
members compare equal to their raw values, so rows read back as ``str``
work with every comparison below.
"""

from enum import StrEnum


class UserRole(StrEnum):
    """사용자 역할: User roles. Only Admin has elevated permissions."""

    ADMIN = "Admin"
    CHEF = "Chef"
    CASHIER = "Cashier"
    CLEANER = "Cleaner"
    TRAINEE_CHEF = "TraineeChef"
    DRIVER = "Driver"


class ShiftType(StrEnum):
    """시프트 유형: Shift types a site can operate."""

    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    NIGHT = "Night"
    BOTH = "Both"


class SiteKind(StrEnum):
    """근무지 종류: Kitchen or shop."""

    KITCHEN = "kitchen"
    SHOP = "shop"


class AvailabilityStatus(StrEnum):
    AVAILABLE = "Available"
    UNAVAILABLE = "Unavailable"


class ActionType(StrEnum):
    """행동 이력 유형: Action history entry kinds."""

    ASSIGNED_TO_KITCHEN = "AssignedToKitchen"
    UNASSIGNED_FROM_KITCHEN = "UnassignedFromKitchen"
    ASSIGNED_TO_SHOP = "AssignedToShop"
    UNASSIGNED_FROM_SHOP = "UnassignedFromShop"
    AVAILABILITY_UPDATED = "AvailabilityUpdated"


class SalaryStatus(StrEnum):
    PENDING = "Pending"
    PAID = "Paid"


class NotificationType(StrEnum):
    """알림 유형: Notification type values."""

    ASSIGNMENT = "assignment"
    UNASSIGNMENT = "unassignment"
    AVAILABILITY = "availability"
    SITE_DELETED = "site_deleted"
    SALARY = "salary"
    ADMIN = "admin"
