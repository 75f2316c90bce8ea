# tests/services/test_export.py

from datetime import date, datetime, time

from hackathon_service.schemas.participant import ParticipantSummary
from hackathon_service.schemas.workshop import WorkshopRegistrant
from hackathon_service.services.export import (
    PARTICIPANT_EXPORT_COLUMNS,
    WORKSHOP_EXPORT_COLUMNS,
    participants_csv,
    workshop_export_filename,
    workshop_registrations_csv,
)


def _registrant(**overrides):
    data = dict(
        id="wreg_1",
        user_id="user_1",
        workshop_id="wks_1",
        workshop_title="Intro to Git",
        workshop_date=date(2025, 10, 18),
        start_time=time(10, 0),
        end_time=time(11, 30),
        location="EB 1010",
        first_name="Ada",
        last_name="Lovelace",
        year_of_study="3rd",
        gender="Female",
        major="BCIS",
        registered_at=datetime(2025, 10, 1, 9, 15, 0),
    )
    data.update(overrides)
    return WorkshopRegistrant(**data)


def test_empty_export_is_header_only():
    assert workshop_registrations_csv([]) == ",".join(WORKSHOP_EXPORT_COLUMNS) + "\n"
    assert participants_csv([]) == ",".join(PARTICIPANT_EXPORT_COLUMNS) + "\n"


def test_workshop_export_quotes_every_value():
    lines = workshop_registrations_csv([_registrant()]).splitlines()

    assert len(lines) == 2
    assert lines[0] == ",".join(WORKSHOP_EXPORT_COLUMNS)
    assert lines[1] == (
        '"Intro to Git","2025-10-18","10:00 - 11:30","EB 1010","Ada Lovelace",'
        '"Ada","Lovelace","3rd","Female","BCIS","2025-10-01 09:15:00"'
    )


def test_workshop_export_escapes_embedded_quotes():
    lines = workshop_registrations_csv(
        [_registrant(workshop_title='Say "hello"', location=None)]
    ).splitlines()

    assert lines[1].startswith('"Say ""hello""","2025-10-18","10:00 - 11:30","",')


def test_participant_export_fallbacks():
    participant = ParticipantSummary(
        id="user_1",
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        status="confirmed",
        previous_attendance=True,
        checked_in=False,
    )

    row = participants_csv([participant]).splitlines()[1]

    assert row == (
        '"user_1","Ada","Lovelace","ada@example.com","Unknown","Unknown","Unknown",'
        '"","Unknown","Unknown","Yes","confirmed","No","",""'
    )


def test_export_filenames():
    assert (
        workshop_export_filename(None, "mruhacks2025")
        == "workshop-registrations-mruhacks2025.csv"
    )
    assert workshop_export_filename("AI & ML: Intro", "mruhacks2025") == (
        "AI___ML__Intro_registrations.csv"
    )
