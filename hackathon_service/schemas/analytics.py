# hackathon_service/schemas/analytics.py
import datetime as dt
from typing import Optional

from pydantic import Field

from hackathon_service.schemas.common import CamelModel


class DistributionEntry(CamelModel):
    label: str
    count: int
    percentage: float


class PreviousAttendance(CamelModel):
    attended: int = 0
    not_attended: int = 0


class DailyCount(CamelModel):
    date: str
    count: int


class ParticipantStats(CamelModel):
    total_participants: int = 0
    confirmed_participants: int = 0
    pending_participants: int = 0
    waitlisted_participants: int = 0
    checked_in_participants: int = 0
    gender_distribution: list[DistributionEntry] = []
    university_distribution: list[DistributionEntry] = []
    major_distribution: list[DistributionEntry] = []
    year_of_study_distribution: list[DistributionEntry] = []
    experience_distribution: list[DistributionEntry] = []
    marketing_distribution: list[DistributionEntry] = []
    dietary_restrictions_distribution: list[DistributionEntry] = []
    interests_distribution: list[DistributionEntry] = []
    previous_attendance: PreviousAttendance = PreviousAttendance()
    registration_trends: list[DailyCount] = []
    average_registration_time: str = "N/A"


class TrendFilters(CamelModel):
    marketing: Optional[str] = None
    experience: Optional[str] = None
    major: Optional[str] = None
    gender: Optional[str] = None
    university: Optional[str] = None
    days: int = Field(default=30, ge=1, le=365)


class TrendPoint(CamelModel):
    date: dt.date
    count: int
    formatted_date: str


class FilterOption(CamelModel):
    value: str
    label: str


class TrendFilterOptions(CamelModel):
    marketing: list[FilterOption] = []
    experience: list[FilterOption] = []
    major: list[FilterOption] = []
    gender: list[FilterOption] = []
    university: list[FilterOption] = []


class RegistrationTrends(CamelModel):
    trends: list[TrendPoint]
    total_registrations: int
    filter_options: TrendFilterOptions
    applied_filters: TrendFilters
