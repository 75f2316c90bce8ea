# hackathon_service/models/lookups.py
"""
Static reference tables behind the registration form dropdowns.

Each table is an id + label pair; the label column name differs per table,
so ``LABEL_COLUMNS`` records which attribute holds the display text.
"""

from sqlalchemy import Column, Integer, String

from hackathon_service.db.base_class import Base


class Gender(Base):
    __tablename__ = "gender"

    id = Column(Integer, primary_key=True, autoincrement=True)
    gender = Column(String(255), nullable=False)


class University(Base):
    __tablename__ = "universities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    uni = Column(String(255), nullable=False)


class Major(Base):
    __tablename__ = "majors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    major = Column(String(255), nullable=False)


class Interest(Base):
    __tablename__ = "interests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    interest = Column(String(255), nullable=False)


class DietaryRestriction(Base):
    __tablename__ = "dietary_restrictions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    restriction = Column(String(255), nullable=False)


class MarketingType(Base):
    __tablename__ = "marketing_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    marketing = Column(String(255), nullable=False)


class ExperienceType(Base):
    __tablename__ = "experience_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    experience = Column(String(255), nullable=False)


LABEL_COLUMNS = {
    Gender: Gender.gender,
    University: University.uni,
    Major: Major.major,
    Interest: Interest.interest,
    DietaryRestriction: DietaryRestriction.restriction,
    MarketingType: MarketingType.marketing,
    ExperienceType: ExperienceType.experience,
}
