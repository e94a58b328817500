"""Coupon offers: models, record stores, resolution engine and admin service."""

from .engine import OfferEngine, apply_offer, describe_offer
from .migration import migrate_offer_record
from .models import DiscountResult, DiscountType, Offer, OfferApplicability, OfferValidity, normalize_code
from .repository import InMemoryOfferRepository, JsonFileOfferRepository, OfferRepository, OfferStoreError
from .service import OfferAdminService, OfferNotFound, OfferValidationError

__all__ = [
    "DiscountResult",
    "DiscountType",
    "InMemoryOfferRepository",
    "JsonFileOfferRepository",
    "Offer",
    "OfferAdminService",
    "OfferApplicability",
    "OfferEngine",
    "OfferNotFound",
    "OfferRepository",
    "OfferStoreError",
    "OfferValidationError",
    "OfferValidity",
    "apply_offer",
    "describe_offer",
    "migrate_offer_record",
    "normalize_code",
]
