# hackathon_service/services/analytics_service.py
"""
Participant statistics and registration trends for the admin dashboard.

Read-only. Aggregates run one after another on the request session;
the stats payload is cached briefly in Redis.
"""

import logging
from collections import Counter
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hackathon_service import crud
from hackathon_service.constants.statuses import ParticipantStatus
from hackathon_service.core.exceptions import UpstreamFailure
from hackathon_service.models.lookups import LABEL_COLUMNS, DietaryRestriction, Interest
from hackathon_service.models.user import User, UserDietRestriction, UserInterest
from hackathon_service.schemas.analytics import (
    DailyCount,
    DistributionEntry,
    FilterOption,
    ParticipantStats,
    PreviousAttendance,
    RegistrationTrends,
    TrendFilterOptions,
    TrendFilters,
    TrendPoint,
)
from hackathon_service.schemas.participant import ParticipantSummary
from hackathon_service.services.dashboard_cache import DashboardCache

logger = logging.getLogger(__name__)

TREND_FILTERS = ("marketing", "experience", "major", "gender", "university")
FILTER_LOOKUPS = {
    "marketing": crud.lookup.marketing_type,
    "experience": crud.lookup.experience_type,
    "major": crud.lookup.major,
    "gender": crud.lookup.gender,
    "university": crud.lookup.university,
}


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Some drivers hand back naive datetimes; ours are always stored as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def distribution(counts: Counter, total: int) -> list[DistributionEntry]:
    """Label/count/percentage rows, largest first. ``None`` labels become "Unknown"."""
    merged = Counter()
    for label, count in counts.items():
        merged[label or "Unknown"] += count
    return [
        DistributionEntry(
            label=label,
            count=count,
            percentage=round(count / total * 100, 2) if total else 0.0,
        )
        for label, count in merged.most_common()
    ]


def format_day(day: date) -> str:
    """'Oct 19' style label without a zero-padded day."""
    return f"{day.strftime('%b')} {day.day}"


def participant_summary(row: tuple) -> ParticipantSummary:
    user, gender, university, major, experience, marketing = row
    return ParticipantSummary(
        id=user.id,
        first_name=user.f_name,
        last_name=user.l_name,
        email=user.email,
        gender=gender,
        university=university,
        major=major,
        year_of_study=user.year_of_study,
        experience=experience,
        marketing=marketing,
        previous_attendance=bool(user.prev_attendance),
        status=user.status,
        checked_in=bool(user.checked_in),
        timestamp=user.timestamp,
        updated_at=user.updated_at,
    )


class AnalyticsService:
    def __init__(self, cache: DashboardCache):
        self.cache = cache

    def get_participant_stats(
        self, db: Session, *, now: Optional[datetime] = None
    ) -> ParticipantStats:
        key = self.cache.admin_key("participant_stats")
        cached = self.cache.get(key)
        if cached is not None:
            return ParticipantStats.model_validate(cached)
        try:
            stats = self._compute_stats(db, now or datetime.now(timezone.utc))
        except SQLAlchemyError as e:
            logger.error(f"Failed to compute participant stats: {str(e)}", exc_info=True)
            raise UpstreamFailure("fetch participant statistics") from e
        self.cache.set(key, stats.model_dump(mode="json"))
        return stats

    def _compute_stats(self, db: Session, now: datetime) -> ParticipantStats:
        rows = crud.user.get_multi_with_labels(db)
        total = len(rows)
        if total == 0:
            return ParticipantStats()

        users = [row[0] for row in rows]
        statuses = Counter(user.status for user in users)
        attended = sum(1 for user in users if user.prev_attendance)

        window_start = (now - timedelta(days=30)).date()
        daily = Counter(
            as_utc(user.timestamp).date().isoformat()
            for user in users
            if user.timestamp and as_utc(user.timestamp).date() >= window_start
        )

        ages = [
            (now - as_utc(user.timestamp)).total_seconds() / 86400
            for user in users
            if user.timestamp
        ]
        average_age = (
            f"{round(sum(ages) / len(ages))} days ago" if ages else "N/A"
        )

        return ParticipantStats(
            total_participants=total,
            confirmed_participants=statuses[ParticipantStatus.CONFIRMED],
            pending_participants=statuses[ParticipantStatus.PENDING],
            waitlisted_participants=statuses[ParticipantStatus.WAITLISTED],
            checked_in_participants=sum(1 for user in users if user.checked_in),
            gender_distribution=distribution(Counter(row[1] for row in rows), total),
            university_distribution=distribution(Counter(row[2] for row in rows), total),
            major_distribution=distribution(Counter(row[3] for row in rows), total),
            year_of_study_distribution=distribution(
                Counter(user.year_of_study for user in users), total
            ),
            experience_distribution=distribution(Counter(row[4] for row in rows), total),
            marketing_distribution=distribution(Counter(row[5] for row in rows), total),
            dietary_restrictions_distribution=distribution(
                self._association_counts(
                    db, UserDietRestriction, UserDietRestriction.restriction, DietaryRestriction
                ),
                total,
            ),
            interests_distribution=distribution(
                self._association_counts(db, UserInterest, UserInterest.interest, Interest),
                total,
            ),
            previous_attendance=PreviousAttendance(
                attended=attended, not_attended=total - attended
            ),
            registration_trends=[
                DailyCount(date=day, count=count) for day, count in sorted(daily.items())
            ],
            average_registration_time=average_age,
        )

    def _association_counts(self, db: Session, join_model, fk_column, lookup_model) -> Counter:
        """How many participants picked each option of a many-to-many field."""
        label_column = LABEL_COLUMNS[lookup_model]
        rows = (
            db.query(label_column, func.count())
            .select_from(join_model)
            .outerjoin(lookup_model, lookup_model.id == fk_column)
            .group_by(label_column)
            .all()
        )
        return Counter({label: count for label, count in rows})

    def get_registration_trends(
        self, db: Session, *, filters: TrendFilters, today: Optional[date] = None
    ) -> RegistrationTrends:
        """
        Daily registration counts for the last ``filters.days`` days, zero
        filled, optionally narrowed to one label per lookup dimension.
        Labels that match no lookup row are ignored.
        """
        today = today or datetime.now(timezone.utc).date()
        start_day = today - timedelta(days=filters.days - 1)
        since = datetime.combine(start_day, datetime.min.time(), tzinfo=timezone.utc)
        try:
            applied = {}
            for name in TREND_FILTERS:
                label = getattr(filters, name)
                if label and FILTER_LOOKUPS[name].get_id_by_label(db, label=label) is not None:
                    applied[name] = label
            rows = crud.user.get_multi_with_labels(db, filters=applied, since=since)
            filter_options = TrendFilterOptions(
                **{
                    name: [
                        FilterOption(value=label, label=label)
                        for label in FILTER_LOOKUPS[name].get_labels(db)
                    ]
                    for name in TREND_FILTERS
                }
            )
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to fetch registration trends: {str(e)}",
                exc_info=True,
                extra={"filters": filters.model_dump()},
            )
            raise UpstreamFailure("fetch registration trends") from e

        daily = Counter(
            as_utc(row[0].timestamp).date() for row in rows if row[0].timestamp
        )
        trends = []
        for offset in range(filters.days - 1, -1, -1):
            day = today - timedelta(days=offset)
            trends.append(
                TrendPoint(date=day, count=daily.get(day, 0), formatted_date=format_day(day))
            )

        return RegistrationTrends(
            trends=trends,
            total_registrations=len(rows),
            filter_options=filter_options,
            applied_filters=filters,
        )

    def list_participants(self, db: Session) -> list[ParticipantSummary]:
        try:
            rows = crud.user.get_multi_with_labels(db)
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch participants: {str(e)}", exc_info=True)
            raise UpstreamFailure("fetch participants") from e
        return [participant_summary(row) for row in rows]

