from sqlalchemy import create_engine, event, MetaData
from sqlalchemy.orm import (
    sessionmaker,
    DeclarativeBase,
    scoped_session,
    Session as SqlalchemySession,
)


from core.helper import get_current_time_in_timezone
from settings import DATABASE_ECHO, DATABASE_URL, TZ


if DATABASE_URL.startswith("sqlite"):
    engine = create_engine(
        DATABASE_URL,
        echo=DATABASE_ECHO,
        connect_args={"check_same_thread": False},
    )

    # let sqlalchemy own BEGIN so SAVEPOINT works with pysqlite
    @event.listens_for(engine, "connect")
    def _sqlite_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _sqlite_begin(conn):
        conn.exec_driver_sql("BEGIN")

else:
    engine = create_engine(
        DATABASE_URL,
        echo=DATABASE_ECHO,
        pool_size=20,
        max_overflow=0,
        pool_timeout=300,
    )
db = sessionmaker(engine, future=True)
factory_session = scoped_session(db)


def get_db_sync():
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_db_sync_for_test(db: SqlalchemySession):
    def inner():
        yield db

    return inner


class Base(DeclarativeBase):
    metadata = MetaData()


def current_time():
    return get_current_time_in_timezone(TZ)


# define all model for alembic migration
from models.Ticket import Ticket  # NOQA
from models.Sale import Sale  # NOQA
from models.SaleDetail import SaleDetail  # NOQA
