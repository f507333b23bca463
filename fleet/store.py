"""
fleet/store.py -- SQLAlchemy-backed persistence layer for vehicles.

Uses SQLAlchemy Core (not ORM) so the domain dataclass in fleet/models.py
remains the authoritative domain representation. Swapping SQLite for
PostgreSQL or MySQL is a connection string change, not a rewrite.

Pattern: Repository + Data Mapper. VehicleStore is the repository;
_row_to_vehicle is the mapper. Route handlers never touch SQL directly.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = VehicleStore()                               # SQLite default
    store = VehicleStore("postgresql://user:pw@host/db") # PostgreSQL
    vehicle_id = store.create_vehicle(Vehicle(name="Uno", brand="Fiat", year=2010))
    vehicles = store.list_vehicles()
    store.close()
"""

from pathlib import Path
from typing import Optional

from sqlalchemy import Column, Integer, MetaData, String, Table, create_engine, event
from sqlalchemy.engine import Engine

from fleet.models import Vehicle

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parent.parent / 'carmanager.db'}"

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_vehicles = Table(
    "vehicles",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(100), nullable=False),
    Column("brand", String(100), nullable=False),
    Column("year", Integer, nullable=False),
)


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class VehicleStore:
    """Repository for Vehicle entities."""

    def __init__(self, db_url: str = _DEFAULT_DB_URL) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        metadata.create_all(self.engine)

    def create_vehicle(self, vehicle: Vehicle) -> int:
        """Insert a new vehicle and return its assigned database ID."""
        with self.engine.connect() as conn:
            result = conn.execute(
                _vehicles.insert().values(
                    name=vehicle.name,
                    brand=vehicle.brand,
                    year=vehicle.year,
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def get_vehicle(self, vehicle_id: int) -> Optional[Vehicle]:
        """Look up a vehicle by primary key. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_vehicles.select().where(_vehicles.c.id == vehicle_id)).fetchone()
        return _row_to_vehicle(row) if row is not None else None

    def list_vehicles(self) -> list[Vehicle]:
        """Return all vehicles in ascending id order (stable for pagination)."""
        with self.engine.connect() as conn:
            rows = conn.execute(_vehicles.select().order_by(_vehicles.c.id)).fetchall()
        return [_row_to_vehicle(r) for r in rows]

    def update_vehicle(self, vehicle: Vehicle) -> bool:
        """Replace name, brand, and year. Returns True if a row was updated."""
        with self.engine.connect() as conn:
            result = conn.execute(
                _vehicles.update()
                .where(_vehicles.c.id == vehicle.id)
                .values(name=vehicle.name, brand=vehicle.brand, year=vehicle.year)
            )
            conn.commit()
        return result.rowcount > 0

    def delete_vehicle(self, vehicle_id: int) -> bool:
        """Permanently delete a vehicle. Returns True if deleted, False if not found."""
        with self.engine.connect() as conn:
            result = conn.execute(_vehicles.delete().where(_vehicles.c.id == vehicle_id))
            conn.commit()
        return result.rowcount > 0

    def close(self) -> None:
        self.engine.dispose()


def _row_to_vehicle(row) -> Vehicle:
    return Vehicle(
        id=row.id,
        name=row.name,
        brand=row.brand,
        year=row.year,
    )
