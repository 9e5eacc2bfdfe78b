from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from freshharvest.core_settings import get_settings
from freshharvest.domain.models import Base

settings = get_settings()
DATABASE_URL = settings.database_url

engine_options = {"echo": False, "future": True}
if DATABASE_URL.startswith("sqlite"):
    # One shared connection so an in-memory database survives across sessions
    engine_options.update(connect_args={"check_same_thread": False}, poolclass=StaticPool)
else:
    engine_options.update(pool_pre_ping=True)

engine = create_engine(DATABASE_URL, **engine_options)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

def get_db() -> Session:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_models():
    Base.metadata.create_all(engine)
