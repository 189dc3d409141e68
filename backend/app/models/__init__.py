# Import all models so SQLAlchemy and Alembic see every table
from app.models.database import Base  # noqa: F401
from app.models.template import Template  # noqa: F401
from app.models.report import Report  # noqa: F401
