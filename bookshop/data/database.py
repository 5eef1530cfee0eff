# bookshop/data/database.py
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

from bookshop.utils.settings import DATABASE_URL

Base = declarative_base()


def make_engine(url: str = DATABASE_URL) -> Engine:
    if url.startswith("sqlite"):
        #sessions are handed between request threads and the sweeper
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True)


engine = make_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(bind: Engine = engine) -> None:
    #models have to be imported before create_all so they land in Base.metadata
    import bookshop.data.models  # noqa: F401

    Base.metadata.create_all(bind=bind)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
