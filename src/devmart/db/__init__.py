"""Database models and schema initialisation."""

from .db_models import Base

__all__ = ["Base"]
