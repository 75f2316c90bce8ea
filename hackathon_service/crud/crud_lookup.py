# hackathon_service/crud/crud_lookup.py
from typing import Optional

from sqlalchemy.orm import Session

from hackathon_service.models.lookups import (
    LABEL_COLUMNS,
    DietaryRestriction,
    ExperienceType,
    Gender,
    Interest,
    Major,
    MarketingType,
    University,
)


class CRUDLookup:
    """Read access to one id + label reference table."""

    def __init__(self, model):
        self.model = model
        self.label_column = LABEL_COLUMNS[model]

    def get_options(self, db: Session) -> list[dict]:
        rows = (
            db.query(self.model.id, self.label_column)
            .order_by(self.model.id.asc())
            .all()
        )
        return [{"id": row_id, "label": label} for row_id, label in rows]

    def get_labels(self, db: Session) -> list[str]:
        rows = db.query(self.label_column).order_by(self.label_column.asc()).all()
        return list(dict.fromkeys(row[0] for row in rows))

    def missing_ids(self, db: Session, *, ids: list[int]) -> list[int]:
        """Returns the ids in ``ids`` that have no row in this table."""
        if not ids:
            return []
        found = {
            row[0]
            for row in db.query(self.model.id).filter(self.model.id.in_(ids)).all()
        }
        return [value for value in ids if value not in found]

    def get_id_by_label(self, db: Session, *, label: str) -> Optional[int]:
        row = db.query(self.model.id).filter(self.label_column == label).first()
        return row[0] if row else None


gender = CRUDLookup(Gender)
university = CRUDLookup(University)
major = CRUDLookup(Major)
interest = CRUDLookup(Interest)
dietary_restriction = CRUDLookup(DietaryRestriction)
marketing_type = CRUDLookup(MarketingType)
experience_type = CRUDLookup(ExperienceType)
