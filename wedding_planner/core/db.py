"""
SQLAlchemy engine and session factory for the SQL table store
"""

import uuid

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from wedding_planner.core.config import settings

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autoflush=False, bind=engine)

Base = declarative_base()


def generate_id() -> str:
    """Primary keys are opaque UUID strings so SQL and Firestore records share one shape"""
    return str(uuid.uuid4())
