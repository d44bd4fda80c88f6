"""Declarative base shared by all tables of the service."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):  # pylint: disable=too-few-public-methods
    """Base class for SQLAlchemy ORM models stored in the accounts database."""
