# hackathon_service/services/export.py
"""CSV rendering for staff exports."""

import csv
import re
from io import StringIO
from typing import Optional

import pandas as pd

from hackathon_service.schemas.participant import ParticipantSummary
from hackathon_service.schemas.workshop import WorkshopRegistrant

WORKSHOP_EXPORT_COLUMNS = [
    "Workshop Title",
    "Date",
    "Time",
    "Location",
    "Participant Name",
    "First Name",
    "Last Name",
    "Year of Study",
    "Gender",
    "Major",
    "Registration Date",
]

PARTICIPANT_EXPORT_COLUMNS = [
    "ID",
    "First Name",
    "Last Name",
    "Email",
    "Gender",
    "University",
    "Major",
    "Year of Study",
    "Experience Level",
    "Marketing Source",
    "Previous Attendance",
    "Status",
    "Checked In",
    "Registration Date",
    "Updated At",
]


def _format_datetime(value) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else ""


def _render(columns: list[str], rows: list[list]) -> str:
    """Plain header line, then every value quoted. No rows still yields the header."""
    df = pd.DataFrame(rows, columns=columns)
    output = StringIO()
    df.head(0).to_csv(output, index=False, lineterminator="\n")
    df.to_csv(
        output,
        index=False,
        header=False,
        quoting=csv.QUOTE_ALL,
        lineterminator="\n",
    )
    return output.getvalue()


def workshop_registrations_csv(registrants: list[WorkshopRegistrant]) -> str:
    rows = []
    for reg in registrants:
        first_name = reg.first_name or ""
        last_name = reg.last_name or ""
        rows.append(
            [
                reg.workshop_title,
                reg.workshop_date.isoformat(),
                f"{reg.start_time.strftime('%H:%M')} - {reg.end_time.strftime('%H:%M')}",
                reg.location or "",
                f"{first_name} {last_name}".strip(),
                first_name,
                last_name,
                reg.year_of_study or "",
                reg.gender or "",
                reg.major or "",
                _format_datetime(reg.registered_at),
            ]
        )
    return _render(WORKSHOP_EXPORT_COLUMNS, rows)


def participants_csv(participants: list[ParticipantSummary]) -> str:
    rows = [
        [
            p.id,
            p.first_name or "",
            p.last_name or "",
            p.email or "",
            p.gender or "Unknown",
            p.university or "Unknown",
            p.major or "Unknown",
            p.year_of_study or "",
            p.experience or "Unknown",
            p.marketing or "Unknown",
            "Yes" if p.previous_attendance else "No",
            p.status or "",
            "Yes" if p.checked_in else "No",
            _format_datetime(p.timestamp),
            _format_datetime(p.updated_at),
        ]
        for p in participants
    ]
    return _render(PARTICIPANT_EXPORT_COLUMNS, rows)


def workshop_export_filename(title: Optional[str], event_name: str) -> str:
    if title is None:
        return f"workshop-registrations-{event_name}.csv"
    return f"{re.sub(r'[^a-zA-Z0-9]', '_', title)}_registrations.csv"
