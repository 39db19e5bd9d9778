from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

# Index names match the op.f() names in the Alembic migrations
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)
