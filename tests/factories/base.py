"""Base factory configuration for polyfactory."""

from datetime import UTC, datetime
from uuid import uuid4

from polyfactory.factories.sqlalchemy_factory import SQLAlchemyFactory


def utc_now() -> datetime:
    """Generate current UTC time (naive, matching the TIMESTAMP columns)."""
    return datetime.now(UTC).replace(tzinfo=None)


def generate_uuid():
    """Generate UUID4 for primary keys."""
    return uuid4()


class BaseFactory(SQLAlchemyFactory):
    """Base factory with common configuration for all models.

    Relationships and foreign keys are never filled in automatically;
    tests set them explicitly.
    """

    __is_base_factory__ = True
    __set_relationships__ = False
    __set_foreign_keys__ = False
