# signup/db/base.py
from sqlalchemy.orm import declarative_base

# ------------------------------------------------------------
# SQLALCHEMY DECLARATIVE BASE
# ------------------------------------------------------------
Base = declarative_base()


def import_models() -> None:
    """Import every model so Base.metadata (create_all, alembic) sees them."""
    from signup.models import attendance, session  # noqa: F401
