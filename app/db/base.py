import uuid
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Models import Base from here; app.db.models registers them all for create_all()


def generate_id() -> str:
    """Opaque string id for documents (users, jobs, applications)."""
    return uuid.uuid4().hex
