# property_service.py
import logging

from roommatch.errors import NotFoundError
from roommatch.schemas.property import Property, PropertyCreate, PropertyFilters
from roommatch.storage.base import Storage


logger = logging.getLogger(__name__)


def _passes_filters(listing: Property, filters: PropertyFilters) -> bool:
    if filters.location and filters.location.strip().lower() not in listing.location.lower():
        return False
    if filters.room_type and listing.room_type != filters.room_type:
        return False
    if filters.max_price is not None and listing.price > filters.max_price:
        return False
    if filters.available_only and not listing.available:
        return False
    return True


def list_listings(storage: Storage, filters: PropertyFilters | None = None) -> list[Property]:
    listings = storage.list_properties()
    if filters is None:
        return listings
    return [listing for listing in listings if _passes_filters(listing, filters)]


def get_listing(storage: Storage, property_id: int) -> Property:
    listing = storage.get_property(property_id)
    if listing is None:
        raise NotFoundError("property", "Property not found")
    return listing


def create_listing(storage: Storage, user_id: int, payload: PropertyCreate) -> Property:
    if storage.get_user(user_id) is None:
        raise NotFoundError("user", "User not found")
    listing = storage.create_property(user_id, payload.model_dump())
    logger.info("property.created id=%s user_id=%s room_type=%s", listing.id, user_id, listing.room_type)
    return listing
