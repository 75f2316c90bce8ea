# hackathon_service/db/session.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from hackathon_service.core.config import settings

# The engine owns the connection pool.
engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)

# SessionLocal is a factory for per-request Session objects.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        # Always close, even if the endpoint raised.
        db.close()
