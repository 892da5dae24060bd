"""Shared SQLAlchemy `MetaData` for BLOCKDIR tables.

Constraint names are derived from a naming convention so the names Alembic
writes in migrations match what the models declare:

    - Check:         ck_<table>_<constraint_name>
    - Primary key:   pk_<table>
"""

from sqlalchemy import MetaData

metadata = MetaData(
    naming_convention={
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "pk": "pk_%(table_name)s",
    }
)
