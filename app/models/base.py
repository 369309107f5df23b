"""Declarative base shared by all model modules."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
