from typing import Generator
import importlib
import logging

from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import sessionmaker, Session, declarative_base
from sqlalchemy.pool import StaticPool

from isoyard.config import DATABASE_URL, DEFAULT_ADMIN_ID, DEFAULT_ADMIN_PASSWORD

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)

# ---------------------------------------------------------------------------
# SQLAlchemy Configuration for ORM Models
# ---------------------------------------------------------------------------
if DATABASE_URL.startswith("sqlite"):
    # in-memory sqlite must share a single connection across threads
    engine = create_engine(
        DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    engine = create_engine(
        DATABASE_URL,
        echo=False,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,
    )

Base = declarative_base()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


MODEL_MODULES = [
    "zone_model",
    "inventory_model",
    "registry_model",
    "log_model",
    "user_model",
    "login_session_model",
]


def seed_default_admin(db: Session):
    """
    Create the bootstrap super admin when the users table is empty so a fresh
    install can log in and create the real accounts.
    """
    from isoyard.models.user_model import User
    from isoyard.security import hash_password

    if db.query(User).count() > 0:
        return

    pwd_hash, salt = hash_password(DEFAULT_ADMIN_PASSWORD)
    db.add(User(
        id=DEFAULT_ADMIN_ID.lower(),
        name="Administrator",
        password_hash=pwd_hash,
        password_salt=salt,
        role="admin",
        is_super=True,
    ))
    db.commit()
    logger.warning("Seeded default admin user '%s'. Change its password.", DEFAULT_ADMIN_ID)


# ---------------------------------------------------------------------------
# init_db: create ORM tables and seed the bootstrap user
# ---------------------------------------------------------------------------
def init_db():
    for mod in MODEL_MODULES:
        importlib.import_module(f"isoyard.models.{mod}")

    Base.metadata.create_all(bind=engine)
    tables = inspect(engine).get_table_names()
    logger.info(f"Existing tables after create_all: {tables}")

    db = SessionLocal()
    try:
        seed_default_admin(db)
    except Exception:
        db.rollback()
        logger.exception("Could not seed default admin user")
        raise
    finally:
        db.close()
