"""
api/routes/vehicles.py -- Vehicle CRUD routes.

Routes:
  POST   /vehicles        -- create vehicle
  GET    /vehicles        -- list vehicles, 5 per page, optional name/brand filters
  GET    /vehicles/{id}   -- vehicle detail
  PUT    /vehicles/{id}   -- replace name, brand, year
  DELETE /vehicles/{id}   -- delete vehicle

PUT checks existence before validating the body: an unknown id is a 404 even
when the body is also invalid.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response

from api.models import VehicleBody, VehicleResponse
from api.validation import validate_vehicle
from auth.dependencies import require_session
from core.errors import NotFound
from core.query import DEFAULT_PAGE_SIZE
from fleet.models import Vehicle
from fleet.service import VehicleService

# All vehicle routes require authentication.
# Router-level dependency applies to every route registered on this router,
# so individual handlers don't each need to repeat Depends(require_session).
router = APIRouter(dependencies=[Depends(require_session)])

_NOT_FOUND = "Vehicle not found"


def _get_or_404(service: VehicleService, vehicle_id: int) -> Vehicle:
    vehicle = service.get_by_id(vehicle_id)
    if vehicle is None:
        raise NotFound(_NOT_FOUND)
    return vehicle


@router.post("/vehicles", response_model=VehicleResponse, status_code=201)
def create_vehicle(request: Request, response: Response, body: VehicleBody) -> VehicleResponse:
    service: VehicleService = request.app.state.vehicle_service
    validate_vehicle(body)
    created = service.add(Vehicle(name=body.name, brand=body.brand, year=body.year))
    response.headers["Location"] = f"/vehicles/{created.id}"
    return VehicleResponse.from_domain(created)


@router.get("/vehicles", response_model=list[VehicleResponse])
def list_vehicles(
    request: Request,
    page: Optional[int] = None,
    name: Optional[str] = None,
    brand: Optional[str] = None,
) -> list[VehicleResponse]:
    """List vehicles in id order.

    Query params:
      page  -- 1-based page number; omit for the full list
      name  -- case-insensitive substring filter on name
      brand -- case-insensitive substring filter on brand
    """
    service: VehicleService = request.app.state.vehicle_service
    vehicles = service.get_all(page, DEFAULT_PAGE_SIZE, name=name, brand=brand)
    return [VehicleResponse.from_domain(v) for v in vehicles]


@router.get("/vehicles/{vehicle_id}", response_model=VehicleResponse)
def get_vehicle(request: Request, vehicle_id: int) -> VehicleResponse:
    service: VehicleService = request.app.state.vehicle_service
    return VehicleResponse.from_domain(_get_or_404(service, vehicle_id))


@router.put("/vehicles/{vehicle_id}", response_model=VehicleResponse)
def update_vehicle(request: Request, vehicle_id: int, body: VehicleBody) -> VehicleResponse:
    service: VehicleService = request.app.state.vehicle_service
    vehicle = _get_or_404(service, vehicle_id)
    validate_vehicle(body)

    vehicle.name = body.name
    vehicle.brand = body.brand
    vehicle.year = body.year
    service.update(vehicle)
    return VehicleResponse.from_domain(vehicle)


@router.delete("/vehicles/{vehicle_id}", status_code=204)
def delete_vehicle(request: Request, vehicle_id: int) -> Response:
    service: VehicleService = request.app.state.vehicle_service
    service.delete(_get_or_404(service, vehicle_id))
    return Response(status_code=204)
