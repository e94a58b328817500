"""Short-lived storage for thank-you contracts."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from threading import Lock
from typing import Callable, Dict, Optional, Protocol

from .models import ThankYouContract


class ContractStore(Protocol):
    """Storage operations used by the contract service."""

    def put(self, order_id: str, payment_id: str, contract: ThankYouContract) -> None:
        ...

    def get(self, order_id: str, payment_id: str) -> Optional[ThankYouContract]:
        ...


@dataclass
class _StoredContract:
    contract: ThankYouContract
    stored_at: datetime

    def is_expired(self, now: datetime, ttl: timedelta) -> bool:
        return now - self.stored_at > ttl


def contract_key(order_id: str, payment_id: str) -> str:
    return f"{order_id}|{payment_id}"


class InMemoryContractStore:
    """Process-local contract store with a time-to-live.

    Expired entries are swept on every ``put`` and ``get`` instead of by a
    background timer, so an entry may linger until the next access of any key.
    Contracts stored here are not visible to other processes.
    """

    def __init__(
        self,
        *,
        ttl_seconds: int = 30 * 60,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._entries: Dict[str, _StoredContract] = {}
        self._lock = Lock()

    def put(self, order_id: str, payment_id: str, contract: ThankYouContract) -> None:
        with self._lock:
            now = self._clock()
            self._purge(now)
            self._entries[contract_key(order_id, payment_id)] = _StoredContract(contract=contract, stored_at=now)

    def get(self, order_id: str, payment_id: str) -> Optional[ThankYouContract]:
        with self._lock:
            self._purge(self._clock())
            entry = self._entries.get(contract_key(order_id, payment_id))
            return entry.contract if entry else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _purge(self, now: datetime) -> None:
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now, self._ttl)]
        for key in expired:
            self._entries.pop(key, None)


__all__ = ["ContractStore", "InMemoryContractStore", "contract_key"]
