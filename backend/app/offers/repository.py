"""Record stores for coupon offers."""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from threading import Lock
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Union

from pydantic import ValidationError

from .migration import migrate_offer_record
from .models import Offer, normalize_code

logger = logging.getLogger(__name__)


class OfferStoreError(RuntimeError):
    """Raised when the backing record store cannot be read or written."""


class OfferRepository(Protocol):
    """Persistence operations required by the offer engine and admin service."""

    def list_offers(self) -> Sequence[Offer]:
        ...

    def upsert_offer(self, offer: Offer) -> Offer:
        ...

    def set_active(self, code: str, active: bool) -> Optional[Offer]:
        ...

    def delete_offer(self, code: str) -> bool:
        ...


class InMemoryOfferRepository:
    """Offer store kept in process memory, suitable for tests and local development."""

    def __init__(self, offers: Optional[Iterable[Offer]] = None) -> None:
        self._lock = Lock()
        self._offers: Dict[str, Offer] = {}
        for offer in offers or ():
            self._offers[offer.code] = offer

    def list_offers(self) -> Sequence[Offer]:
        with self._lock:
            return list(self._offers.values())

    def upsert_offer(self, offer: Offer) -> Offer:
        with self._lock:
            snapshot = dict(self._offers)
            self._offers[offer.code] = offer
            self._commit(snapshot)
        return offer

    def set_active(self, code: str, active: bool) -> Optional[Offer]:
        key = normalize_code(code)
        with self._lock:
            offer = self._offers.get(key)
            if offer is None:
                return None
            updated = offer.model_copy(update={"active": active})
            snapshot = dict(self._offers)
            self._offers[key] = updated
            self._commit(snapshot)
        return updated

    def delete_offer(self, code: str) -> bool:
        with self._lock:
            snapshot = dict(self._offers)
            removed = self._offers.pop(normalize_code(code), None)
            if removed is not None:
                self._commit(snapshot)
        return removed is not None

    def _commit(self, snapshot: Dict[str, Offer]) -> None:
        """Persist a mutation, restoring ``snapshot`` if the write fails."""
        try:
            self._after_write()
        except Exception:
            self._offers = snapshot
            raise

    def _after_write(self) -> None:
        """Hook invoked with the lock held after every mutation."""


class JsonFileOfferRepository(InMemoryOfferRepository):
    """Offer store persisted as a JSON array in a flat file.

    The file is read once on first access; legacy record shapes are migrated at
    that point and written back in canonical form on the next mutation.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        super().__init__()
        self._path = Path(path)
        self._loaded = False

    @property
    def path(self) -> Path:
        return self._path

    def list_offers(self) -> Sequence[Offer]:
        self._ensure_loaded()
        return super().list_offers()

    def upsert_offer(self, offer: Offer) -> Offer:
        self._ensure_loaded()
        return super().upsert_offer(offer)

    def set_active(self, code: str, active: bool) -> Optional[Offer]:
        self._ensure_loaded()
        return super().set_active(code, active)

    def delete_offer(self, code: str) -> bool:
        self._ensure_loaded()
        return super().delete_offer(code)

    def _ensure_loaded(self) -> None:
        with self._lock:
            if self._loaded:
                return
            for offer in self._read_records():
                self._offers[offer.code] = offer
            self._loaded = True

    def _read_records(self) -> List[Offer]:
        if not self._path.exists():
            return []
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8") or "[]")
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise OfferStoreError(f"Unable to read offers from {self._path}") from exc
        if not isinstance(payload, list):
            raise OfferStoreError(f"Offer file {self._path} must contain a JSON array")

        offers: List[Offer] = []
        for index, raw in enumerate(payload):
            if not isinstance(raw, dict):
                logger.warning("Skipping malformed offer record", extra={"offer_index": index})
                continue
            try:
                offers.append(migrate_offer_record(raw))
            except ValidationError as exc:
                logger.warning(
                    "Skipping invalid offer record %s: %s",
                    raw.get("code"),
                    exc.errors(include_url=False),
                )
        return offers

    def _after_write(self) -> None:
        records = [offer.to_record() for offer in self._offers.values()]
        directory = self._path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".offers-", suffix=".json")
        except OSError as exc:
            raise OfferStoreError(f"Unable to write offers to {self._path}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(records, handle, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self._path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise OfferStoreError(f"Unable to write offers to {self._path}") from exc


__all__ = [
    "InMemoryOfferRepository",
    "JsonFileOfferRepository",
    "OfferRepository",
    "OfferStoreError",
]
