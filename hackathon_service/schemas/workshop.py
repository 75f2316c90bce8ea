# hackathon_service/schemas/workshop.py
import datetime as dt
from typing import Annotated, Optional

from pydantic import AfterValidator, Field

from hackathon_service.schemas.common import CamelModel


def _check_title(value: str) -> str:
    if not value.strip():
        raise ValueError("Title is required")
    return value.strip()


def _check_description(value: str) -> str:
    if len(value.strip()) < 10:
        raise ValueError("Description must be at least 10 characters")
    return value


def _check_location(value: str) -> str:
    if not value.strip():
        raise ValueError("Location is required")
    return value


def _check_capacity(value: int) -> int:
    if value < 1:
        raise ValueError("Capacity must be at least 1")
    return value


Title = Annotated[str, AfterValidator(_check_title)]
Description = Annotated[str, AfterValidator(_check_description)]
Location = Annotated[str, AfterValidator(_check_location)]
Capacity = Annotated[int, AfterValidator(_check_capacity)]


class WorkshopCreate(CamelModel):
    """Admin workshop form."""

    title: Title
    description: Description
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    location: Location
    max_capacity: Capacity
    is_active: bool = True


class WorkshopUpdate(CamelModel):
    """Partial admin edit; only the fields sent are applied."""

    title: Optional[Title] = None
    description: Optional[Description] = None
    date: Optional[dt.date] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    location: Optional[Location] = None
    max_capacity: Optional[Capacity] = None
    is_active: Optional[bool] = None


class Workshop(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    event_name: str
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    location: Optional[str] = None
    max_capacity: int
    is_active: bool
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class WorkshopWithStatus(Workshop):
    """A workshop as a participant sees it."""

    current_registrations: int
    is_registered: bool
    is_full: bool


class AdminWorkshop(Workshop):
    current_registrations: int
    is_full: bool


class RegistrationOutcome(CamelModel):
    workshop_id: str
    current_registrations: int
    is_full: bool


class WorkshopRegistrant(CamelModel):
    """One registration row joined with its workshop, for staff views and export."""

    id: str
    user_id: str
    workshop_id: str
    workshop_title: str
    workshop_date: dt.date
    start_time: dt.time
    end_time: dt.time
    location: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    year_of_study: Optional[str] = None
    gender: Optional[str] = None
    major: Optional[str] = None
    registered_at: Optional[dt.datetime] = None


class AdminWorkshopDetail(AdminWorkshop):
    registrations: list[WorkshopRegistrant] = []


class WorkshopBulkDelete(CamelModel):
    workshop_ids: list[str] = Field(min_length=1)


class WorkshopDashboardStats(CamelModel):
    total_workshops: int
    active_workshops: int
    total_registrations: int
    average_capacity: float
