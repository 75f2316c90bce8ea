from datetime import date, time, timedelta

from sqlalchemy.orm import Session

from hackathon_service import crud
from hackathon_service.models.workshop import Workshop
from hackathon_service.schemas.workshop import WorkshopCreate


def create_random_workshop(
    db: Session,
    *,
    title: str = "Intro to Git",
    max_capacity: int = 30,
    is_active: bool = True,
    days_from_now: int = 10,
    start: time = time(10, 0),
) -> Workshop:
    """
    Creates a workshop for testing purposes.
    """
    workshop_in = WorkshopCreate(
        title=title,
        description="Hands-on session covering the basics.",
        date=date.today() + timedelta(days=days_from_now),
        start_time=start,
        end_time=time(start.hour + 1, start.minute),
        location="EB 1010",
        max_capacity=max_capacity,
        is_active=is_active,
    )
    return crud.workshop.create(db, obj_in=workshop_in, event_name="mruhacks2025")
