# hackathon_service/schemas/rsvp.py
from typing import Literal, Optional

from hackathon_service.schemas.common import CamelModel

RsvpMode = Literal["direct", "first_come", "confirmed", "hidden"]


class RsvpState(CamelModel):
    """What the RSVP panel should show for one participant."""

    status: str
    directly_eligible: bool
    mode: RsvpMode
    confirmed_count: int
    capacity: int
    spots_left: int
    is_full: bool
    can_confirm: bool
    can_decline: bool
    message: Optional[str] = None


class DeclineRequest(CamelModel):
    # Declining cannot be undone, so the client must say it asked the user.
    acknowledge_irreversible: bool = False


class LiveCount(CamelModel):
    confirmed_count: int
    capacity: int
    spots_left: int
    is_full: bool
