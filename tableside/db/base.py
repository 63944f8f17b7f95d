"""Declarative base for the ordering API tables."""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION: dict[str, str] = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


# Every table must be registered before create_all runs at startup.
from tableside.models import cart as _cart  # noqa: E402,F401
from tableside.models import coupon as _coupon  # noqa: E402,F401
from tableside.models import menu as _menu  # noqa: E402,F401
from tableside.models import order as _order  # noqa: E402,F401
from tableside.models import restaurant as _restaurant  # noqa: E402,F401
