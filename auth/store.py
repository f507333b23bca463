"""
auth/store.py -- SQLAlchemy Core persistence layer for administrators.

Pattern: Repository + Data Mapper (same as fleet/store.py).
AdministratorStore is the repository; _row_to_administrator is the mapper.
Service and route code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

  Passwords are stored and compared as plaintext to keep the existing data
  layout. Replacing this with a salted hash changes the stored format and
  must be done as a migration, not silently.

  UNIQUE(email) is enforced in SQL. AdministratorService also checks before
  inserting, but only the constraint is safe across processes.

Email comparison is exact and case-sensitive (SQLite BINARY collation). Other
backends may collate differently -- MySQL's default collation does not.

Layer rule: no imports from api/ or fleet/.
"""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import Column, Integer, MetaData, String, Table, create_engine, event, func, select
from sqlalchemy.engine import Engine

from auth.models import Administrator, Role

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parent.parent / 'carmanager.db'}"

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_administrators = Table(
    "administrators",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", String(100), nullable=False, unique=True),
    Column("password", String(50), nullable=False),
    Column("role", String(20), nullable=False),  # Role value: "Adm" | "Editor"
)


# ---------------------------------------------------------------------------
# WAL mode
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class AdministratorStore:
    """Repository for Administrator entities (the credential store).

    Usage:
        store = AdministratorStore()
        admin_id = store.create_administrator(Administrator("a@b.com", "secret", Role.ADM))
        admin = store.get_by_email("a@b.com")
        store.close()
    """

    def __init__(self, db_url: str = _DEFAULT_DB_URL) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        _metadata.create_all(self.engine)

    def has_administrators(self) -> bool:
        """Return True if at least one administrator exists. Used by first-run seeding."""
        with self.engine.connect() as conn:
            result = conn.execute(select(func.count()).select_from(_administrators)).scalar()
        return (result or 0) > 0

    def create_administrator(self, administrator: Administrator) -> int:
        """Insert a new administrator and return its assigned database ID.

        Raises sqlalchemy.exc.IntegrityError if the email already exists.
        """
        with self.engine.connect() as conn:
            result = conn.execute(
                _administrators.insert().values(
                    email=administrator.email,
                    password=administrator.password,
                    role=administrator.role.value,
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def get_by_email(self, email: str) -> Administrator | None:
        """Look up an administrator by exact email. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_administrators.select().where(_administrators.c.email == email)).fetchone()
        return _row_to_administrator(row) if row is not None else None

    def get_by_credentials(self, email: str, password: str) -> Administrator | None:
        """Return the first administrator (lowest id) matching both fields exactly."""
        with self.engine.connect() as conn:
            row = conn.execute(
                _administrators.select()
                .where((_administrators.c.email == email) & (_administrators.c.password == password))
                .order_by(_administrators.c.id)
                .limit(1)
            ).fetchone()
        return _row_to_administrator(row) if row is not None else None

    def get_by_id(self, administrator_id: int) -> Administrator | None:
        """Look up an administrator by primary key. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(
                _administrators.select().where(_administrators.c.id == administrator_id)
            ).fetchone()
        return _row_to_administrator(row) if row is not None else None

    def list_administrators(self) -> list[Administrator]:
        """Return all administrators in ascending id order.

        The order is part of the contract: pagination windows are computed on
        this sequence and must be stable between calls.
        """
        with self.engine.connect() as conn:
            rows = conn.execute(_administrators.select().order_by(_administrators.c.id)).fetchall()
        return [_row_to_administrator(r) for r in rows]

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_administrator(row) -> Administrator:
    return Administrator(
        id=row.id,
        email=row.email,
        password=row.password,
        role=Role.parse(row.role),
    )
