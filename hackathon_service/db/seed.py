# hackathon_service/db/seed.py
"""
Seeds the lookup tables behind the registration form.

Safe to run repeatedly: labels that already exist are skipped.

Usage:
    python -m hackathon_service.db.seed
"""

import logging

from sqlalchemy.orm import Session

from hackathon_service import crud
from hackathon_service.crud.crud_lookup import CRUDLookup
from hackathon_service.db.session import SessionLocal

logger = logging.getLogger(__name__)

LOOKUP_VALUES: list[tuple[CRUDLookup, list[str]]] = [
    (
        crud.lookup.marketing_type,
        [
            "Poster",
            "Social Media",
            "Word of Mouth",
            "Website/Googling it",
            "Attended the event before",
            "Other",
        ],
    ),
    (
        crud.lookup.university,
        ["MRU", "U of C", "SAIT", "Athabasca", "UBC", "Mount Royal University"],
    ),
    (
        crud.lookup.major,
        [
            "BCIS",
            "Data Science",
            "Computer Science",
            "Mathematics",
            "Accounting",
            "Data Analytics",
        ],
    ),
    (crud.lookup.interest, ["AI/ML", "Web Dev", "Mobile", "Games"]),
    (
        crud.lookup.dietary_restriction,
        ["Vegan", "Vegetarian", "Halal", "Gluten-free", "Nut-free", "Dairy-free"],
    ),
    (crud.lookup.gender, ["Male", "Female", "Non-binary", "Prefer not to say"]),
    (crud.lookup.experience_type, ["Beginner", "Intermediate", "Advanced"]),
]


def seed_lookups(db: Session) -> int:
    """Inserts missing lookup labels. Returns how many rows were added."""
    added = 0
    for lookup, labels in LOOKUP_VALUES:
        for label in labels:
            if lookup.get_id_by_label(db, label=label) is not None:
                continue
            db.add(lookup.model(**{lookup.label_column.key: label}))
            added += 1
    crud.rsvp.lock_counter(db)
    db.commit()
    return added


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    with SessionLocal() as db:
        added = seed_lookups(db)
    logger.info(f"Seeding complete, {added} lookup rows added")


if __name__ == "__main__":
    main()
