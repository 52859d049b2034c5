"""Property endpoints."""

from fastapi import APIRouter, Depends, Response

from taxpack.api.deps import get_portfolio_service
from taxpack.api.schemas import (
    PropertyCreateRequest,
    PropertyUpdateRequest,
    PropertyResponse,
    PropertyListResponse,
)
from taxpack.services import PortfolioService, PropertyCreate, PropertyUpdate

router = APIRouter(prefix="/properties", tags=["properties"])


@router.post("/", response_model=PropertyResponse, status_code=201)
def create_property(
    data: PropertyCreateRequest,
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Create a new property."""
    prop = service.create_property(PropertyCreate(**data.model_dump()))
    return PropertyResponse.model_validate(prop)


@router.get("/", response_model=PropertyListResponse)
def list_properties(service: PortfolioService = Depends(get_portfolio_service)):
    """List all properties."""
    properties = service.list_properties()
    return PropertyListResponse(
        properties=[PropertyResponse.model_validate(p) for p in properties],
        count=len(properties),
    )


@router.get("/{property_id}", response_model=PropertyResponse)
def get_property(
    property_id: str,
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Get a single property."""
    return PropertyResponse.model_validate(service.get_property(property_id))


@router.patch("/{property_id}", response_model=PropertyResponse)
def update_property(
    property_id: str,
    data: PropertyUpdateRequest,
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Update status, valuation, name or type of a property."""
    patch = PropertyUpdate(**data.model_dump(exclude_unset=True))
    return PropertyResponse.model_validate(service.update_property(property_id, patch))


@router.delete("/{property_id}", status_code=204)
def delete_property(
    property_id: str,
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Delete a property and all of its transactions."""
    service.delete_property(property_id)
    return Response(status_code=204)
