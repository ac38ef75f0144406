from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models in this package inherit from this base class so that alembic
    sees a single metadata object for the ``booking`` schema.
    """

    pass
