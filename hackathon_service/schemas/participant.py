# hackathon_service/schemas/participant.py
import datetime as dt
from typing import Literal, Optional

from pydantic import Field, model_validator

from hackathon_service.schemas.common import CamelModel

AdminSettableStatus = Literal["pending", "confirmed", "waitlisted"]


class ParticipantSummary(CamelModel):
    """A participant row in the admin table, lookups resolved to labels."""

    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: str
    gender: Optional[str] = None
    university: Optional[str] = None
    major: Optional[str] = None
    year_of_study: Optional[str] = None
    experience: Optional[str] = None
    marketing: Optional[str] = None
    previous_attendance: bool = False
    status: str
    checked_in: bool = False
    timestamp: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class ParticipantAdminUpdate(CamelModel):
    status: Optional[AdminSettableStatus] = None
    checked_in: Optional[bool] = None

    @model_validator(mode="after")
    def require_a_change(self):
        if self.status is None and self.checked_in is None:
            raise ValueError("Provide a status or checkedIn value to update")
        return self


class ParticipantBulkUpdate(ParticipantAdminUpdate):
    participant_ids: list[str] = Field(min_length=1)


class ParticipantBulkUpdateResult(CamelModel):
    updated_count: int
    updated_participants: list[str]
    not_found_ids: list[str] = []
    warning: Optional[str] = None


class ParticipantBulkDelete(CamelModel):
    participant_ids: list[str] = Field(min_length=1)
