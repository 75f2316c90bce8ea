# hackathon_service/schemas/registration.py
import datetime as dt
from typing import Annotated, Literal, Optional

from pydantic import AfterValidator, AnyHttpUrl, Field, TypeAdapter
from pydantic.networks import validate_email

from hackathon_service.schemas.common import CamelModel, LookupOption

YearOfStudyValue = Literal["1st", "2nd", "3rd", "4th+", "Recent Grad"]
ParkingValue = Literal["Yes", "No", "Not sure"]

_url_adapter = TypeAdapter(AnyHttpUrl)


def _required(message: str):
    def check(value: str) -> str:
        if not value.strip():
            raise ValueError(message)
        return value.strip()

    return AfterValidator(check)


def _lookup_id(message: str):
    def check(value: int) -> int:
        if value < 1:
            raise ValueError(message)
        return value

    return AfterValidator(check)


def _check_email(value: str) -> str:
    try:
        _, normalized = validate_email(value)
    except ValueError:
        raise ValueError("Please enter a valid email address")
    return normalized


def _check_resume(value: str) -> str:
    if value == "":
        return value
    try:
        _url_adapter.validate_python(value)
    except ValueError:
        raise ValueError("Please enter a valid URL")
    return value


def _check_interests(value: list[int]) -> list[int]:
    if len(value) < 1:
        raise ValueError("Please select at least one interest")
    return value


FirstName = Annotated[str, _required("Please enter your first name")]
LastName = Annotated[str, _required("Please enter your last name")]
Email = Annotated[str, AfterValidator(_check_email)]
GenderId = Annotated[int, _lookup_id("Please select your gender")]
UniversityId = Annotated[int, _lookup_id("Please select your university")]
MajorId = Annotated[int, _lookup_id("Please select your major")]
ExperienceId = Annotated[int, _lookup_id("Please select your experience level")]
MarketingId = Annotated[int, _lookup_id("Please tell us how you heard about us")]
Interests = Annotated[list[int], AfterValidator(_check_interests)]
ResumeUrl = Annotated[str, AfterValidator(_check_resume)]


class ParticipantRegistration(CamelModel):
    """The full multi-step registration form."""

    first_name: FirstName
    last_name: LastName
    email: Email
    gender: GenderId
    university: UniversityId
    major: MajorId
    experience: ExperienceId
    marketing: MarketingId
    year_of_study: YearOfStudyValue
    previous_attendance: bool
    parking: ParkingValue
    accommodations: str = ""
    dietary_restrictions: list[int] = Field(default_factory=list)
    interests: Interests
    resume: ResumeUrl = ""


class ProfileUpdate(CamelModel):
    """
    Sparse profile edit. Only fields present in the request body are applied,
    so callers should read ``model_fields_set`` rather than test for None.
    """

    first_name: Optional[FirstName] = None
    last_name: Optional[LastName] = None
    email: Optional[Email] = None
    gender: Optional[GenderId] = None
    university: Optional[UniversityId] = None
    major: Optional[MajorId] = None
    experience: Optional[ExperienceId] = None
    marketing: Optional[MarketingId] = None
    year_of_study: Optional[YearOfStudyValue] = None
    previous_attendance: Optional[bool] = None
    parking: Optional[ParkingValue] = None
    accommodations: Optional[str] = None
    dietary_restrictions: Optional[list[int]] = None
    interests: Optional[list[int]] = None
    resume: Optional[ResumeUrl] = None


class ParticipantProfile(CamelModel):
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: str
    gender: Optional[int] = None
    university: Optional[int] = None
    major: Optional[int] = None
    experience: Optional[int] = None
    marketing: Optional[int] = None
    year_of_study: Optional[str] = None
    previous_attendance: bool = False
    parking: Optional[str] = None
    accommodations: str = ""
    resume: Optional[str] = None
    status: str
    checked_in: bool = False
    timestamp: Optional[dt.datetime] = None
    pending_email: Optional[str] = None
    email_change_requested_at: Optional[dt.datetime] = None
    interests: list[int] = []
    dietary_restrictions: list[int] = []

    # Display labels resolved from the lookup tables
    gender_label: Optional[str] = None
    university_label: Optional[str] = None
    major_label: Optional[str] = None
    experience_label: Optional[str] = None
    marketing_label: Optional[str] = None


class RegistrationStatus(CamelModel):
    is_registered: bool
    status: Optional[str] = None


class FormOptions(CamelModel):
    gender: list[LookupOption]
    universities: list[LookupOption]
    majors: list[LookupOption]
    interests: list[LookupOption]
    dietary_restrictions: list[LookupOption]
    marketing_types: list[LookupOption]
