"""
fleet/service.py -- Vehicle orchestration over VehicleStore and core.query.

Null records are rejected with InvalidArgument before the store is called.
Listing filters by name and brand (case-insensitive substring, AND) before
applying the page window.
"""

import logging
from typing import Optional

from core.errors import InvalidArgument
from core.query import query
from fleet.models import Vehicle
from fleet.store import VehicleStore

logger = logging.getLogger("carmanager.fleet")


class VehicleService:
    def __init__(self, store: VehicleStore, clamp_pagination: bool = False) -> None:
        self._store = store
        self._clamp = clamp_pagination

    def add(self, vehicle: Vehicle) -> Vehicle:
        if vehicle is None:
            raise InvalidArgument("vehicle is required")
        vehicle.id = self._store.create_vehicle(vehicle)
        logger.info("Vehicle %d created", vehicle.id)
        return vehicle

    def update(self, vehicle: Vehicle) -> Vehicle:
        """Replace all mutable fields of an existing vehicle."""
        if vehicle is None:
            raise InvalidArgument("vehicle is required")
        self._store.update_vehicle(vehicle)
        logger.info("Vehicle %s updated", vehicle.id)
        return vehicle

    def delete(self, vehicle: Vehicle) -> None:
        if vehicle is None:
            raise InvalidArgument("vehicle is required")
        self._store.delete_vehicle(vehicle.id)
        logger.info("Vehicle %s deleted", vehicle.id)

    def get_by_id(self, vehicle_id: int) -> Optional[Vehicle]:
        return self._store.get_vehicle(vehicle_id)

    def get_all(
        self,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
        name: Optional[str] = None,
        brand: Optional[str] = None,
    ) -> list[Vehicle]:
        """Filter by name and brand, then window by page/page_size."""
        return query(
            self._store.list_vehicles(),
            page,
            page_size,
            clamp=self._clamp,
            name=name,
            brand=brand,
        )
