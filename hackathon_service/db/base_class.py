# hackathon_service/db/base_class.py

from sqlalchemy.orm import declarative_base

# Every model in the project inherits from this declarative base.
Base = declarative_base()
