# hackathon_service/crud/__init__.py

from .crud_admin import admin
from .crud_rsvp import rsvp
from .crud_user import user
from .crud_workshop import workshop
from .crud_workshop_registration import workshop_registration
from . import crud_lookup as lookup
