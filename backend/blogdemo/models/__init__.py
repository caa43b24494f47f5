"""
SQLAlchemy models
"""
from blogdemo.core.database import Base  # noqa: F401
# Import all models here so Alembic can detect them
from blogdemo.models.article import Article  # noqa: F401
from blogdemo.models.comment import Comment  # noqa: F401
