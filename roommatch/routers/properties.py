# properties.py
from fastapi import APIRouter, Depends, Query, status
from roommatch.routers.dependencies import get_current_user, get_storage
from roommatch.schemas.property import Property, PropertyCreate, PropertyFilters, RoomType
from roommatch.services import property_service
from roommatch.storage.base import Storage, StoredUser


router = APIRouter(prefix="/properties", tags=["properties"])


def _property_filters(
    location: str | None = Query(default=None),
    room_type: RoomType | None = Query(default=None),
    max_price: int | None = Query(default=None, ge=0),
    available_only: bool = Query(default=False),
) -> PropertyFilters:
    return PropertyFilters(location=location, room_type=room_type, max_price=max_price, available_only=available_only)


@router.get("", response_model=list[Property])
def list_properties(
    filters: PropertyFilters = Depends(_property_filters),
    storage: Storage = Depends(get_storage),
) -> list[Property]:
    return property_service.list_listings(storage, filters)


@router.get("/{property_id}", response_model=Property)
def read_property(property_id: int, storage: Storage = Depends(get_storage)) -> Property:
    return property_service.get_listing(storage, property_id)


@router.post("", response_model=Property, status_code=status.HTTP_201_CREATED)
def create_property(
    payload: PropertyCreate,
    storage: Storage = Depends(get_storage),
    current_user: StoredUser = Depends(get_current_user),
) -> Property:
    return property_service.create_listing(storage, current_user.id, payload)
