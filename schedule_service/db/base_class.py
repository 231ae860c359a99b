# schedule_service/db/base_class.py

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.orm import declarative_base

# Single declarative base shared by every model in the service.
Base = declarative_base()

# JSONB / ARRAY on PostgreSQL, plain JSON elsewhere (SQLite in tests).
JSONType = JSON().with_variant(JSONB(), "postgresql")


def ArrayType(item_type):
    return JSON().with_variant(ARRAY(item_type), "postgresql")
