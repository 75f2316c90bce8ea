# hackathon_service/models/__init__.py
# Import all models so Base.metadata knows every table and relationships resolve.

from hackathon_service.db.base_class import Base
from hackathon_service.models.lookups import (
    DietaryRestriction,
    ExperienceType,
    Gender,
    Interest,
    Major,
    MarketingType,
    University,
)
from hackathon_service.models.user import User, UserDietRestriction, UserInterest
from hackathon_service.models.workshop import Workshop
from hackathon_service.models.workshop_registration import WorkshopRegistration
from hackathon_service.models.admin import Admin
from hackathon_service.models.rsvp import ConfirmedCount, PreRegistration
