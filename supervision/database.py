from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session, declarative_base

from supervision.config.settings import settings

DATABASE_URL = settings.DATABASE_URL

connect_args = {}
if settings.is_sqlite():
    # SQLite connections are shared across the request threadpool
    connect_args["check_same_thread"] = False
elif settings.DB_SSLMODE:
    # Hosted PostgreSQL (Render and similar) usually wants sslmode=require
    connect_args["sslmode"] = settings.DB_SSLMODE

engine = create_engine(DATABASE_URL, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# This is required to be imported wherever DB session is needed
def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
