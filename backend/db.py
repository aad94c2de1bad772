from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from backend.utils.config import DATABASE_URL

# Base class for all ORM models
Base = declarative_base()

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args)
sessionlocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = sessionlocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Create tables for all registered ORM models."""
    # Import models so that SQLAlchemy knows about them
    import backend.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
