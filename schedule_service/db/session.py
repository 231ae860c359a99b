from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from schedule_service.core.config import settings

# The engine owns the connection pool. Connections are opened lazily, so
# importing this module never touches the database.
engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)

# SessionLocal is the factory for request/job scoped ORM sessions.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        # Always release the connection, even if the caller raised.
        db.close()
