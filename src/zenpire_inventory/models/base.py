"""
Base model class for all database models.

Provides common functionality for all models:
- String primary key holding a UUID (identifiers travel verbatim in snapshots)
- Utility methods (to_dict, __repr__)
- SQLAlchemy declarative base
"""

import uuid as uuid_lib
from datetime import datetime
from typing import Any, Dict

from sqlalchemy import Column, String
from sqlalchemy.orm import declarative_base

# Create the declarative base for all models
Base = declarative_base()


def new_id() -> str:
    """Generate a new record identifier."""
    return str(uuid_lib.uuid4())


class BaseModel(Base):
    """
    Abstract base model with common fields and methods.

    All models inherit from this class to get:
    - id: Primary key (UUID string, stable across export/import)
    - to_dict(): Convert model to a JSON-compatible dictionary
    """

    __abstract__ = True

    id = Column(String(36), primary_key=True, default=new_id)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert model instance to dictionary.

        Returns:
            Dictionary of column values, datetimes as ISO strings
        """
        result = {}
        for column in self.__table__.columns:
            value = getattr(self, column.name)
            if isinstance(value, datetime):
                value = value.isoformat()
            result[column.name] = value
        return result

    def __repr__(self) -> str:
        """
        String representation of model instance.

        Returns:
            String like "ClassName(id=..., name='...')"
        """
        class_name = self.__class__.__name__
        attrs = []

        if getattr(self, "id", None) is not None:
            attrs.append(f"id={self.id}")

        if getattr(self, "name", None) is not None:
            attrs.append(f"name='{self.name}'")

        attrs_str = ", ".join(attrs)
        return f"{class_name}({attrs_str})"
