# hackathon_service/constants/statuses.py
"""
String constants for enum-like columns.

Kept as plain classes so the same values feed SQLAlchemy ``Enum`` columns,
pydantic ``Literal`` checks and query filters.
"""


class ParticipantStatus:
    """Registration status of a participant over the event lifecycle."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    WAITLISTED = "waitlisted"
    DENIED = "denied"
    DECLINED = "declined"

    @classmethod
    def all_values(cls) -> list[str]:
        return [cls.CONFIRMED, cls.PENDING, cls.WAITLISTED, cls.DENIED, cls.DECLINED]


class YearOfStudy:
    FIRST = "1st"
    SECOND = "2nd"
    THIRD = "3rd"
    FOURTH_PLUS = "4th+"
    RECENT_GRAD = "Recent Grad"

    @classmethod
    def all_values(cls) -> list[str]:
        return [cls.FIRST, cls.SECOND, cls.THIRD, cls.FOURTH_PLUS, cls.RECENT_GRAD]


class Parking:
    YES = "Yes"
    NO = "No"
    NOT_SURE = "Not sure"

    @classmethod
    def all_values(cls) -> list[str]:
        return [cls.YES, cls.NO, cls.NOT_SURE]


class AdminRole:
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"
    VOLUNTEER = "volunteer"

    @classmethod
    def all_values(cls) -> list[str]:
        return [cls.ADMIN, cls.SUPER_ADMIN, cls.VOLUNTEER]


class AdminStatus:
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"

    @classmethod
    def all_values(cls) -> list[str]:
        return [cls.ACTIVE, cls.INACTIVE, cls.SUSPENDED]
