# storefront/data/database.py
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from storefront.domain.errors import Conflict, InternalError, StorefrontError
from storefront.utils.logging import get_logger
from storefront.utils.settings import DATABASE_URL

logger = get_logger(__name__)


def make_engine(url: str):
    # SQLAlchemy wymaga postgresql://
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)

    if "sqlite" in url:
        connect_args = {"check_same_thread": False}
    else:
        connect_args = {}

    return create_engine(url, connect_args=connect_args)


engine = make_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    # modele musza byc zarejestrowane w Base.metadata przed create_all
    import storefront.data.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


@contextmanager
def unit_of_work(db: Session):
    """
    Jedna operacja = jedna transakcja.
    Commit na koniec, rollback przy dowolnym bledzie.
    Bledy bazy mapowane na Conflict (lock / wyscig na unique) albo InternalError.
    """
    try:
        yield db
        db.commit()
    except StorefrontError:
        db.rollback()
        raise
    except (OperationalError, IntegrityError) as e:
        db.rollback()
        logger.error(f"Transaction rolled back after database conflict: {e}")
        raise Conflict("Concurrent modification, retry the operation") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Transaction rolled back after database error: {e}")
        raise InternalError("Unexpected persistence failure") from e
    except Exception:
        db.rollback()
        raise
