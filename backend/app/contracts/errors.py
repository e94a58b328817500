"""Errors raised while issuing or redeeming thank-you contracts."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from fastapi import HTTPException, status

CONTRACT_VERSION = "v1"


@dataclass
class ContractError(Exception):
    """Represents a contract failure surfaced to API callers."""

    message: str
    code: str = "internal_error"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __post_init__(self) -> None:
        super().__init__(self.message)

    @property
    def payload(self) -> Mapping[str, Any]:
        """Serialized representation suitable for JSON responses."""

        body: Dict[str, Any] = {
            "version": CONTRACT_VERSION,
            "error": {"code": self.code, "message": self.message},
        }
        return body

    def to_http_exception(self) -> HTTPException:
        return HTTPException(status_code=self.status_code, detail=dict(self.payload))


@dataclass
class MissingParams(ContractError):
    message: str = "version, order_id, payment_id, ts and sig are required"
    code: str = "missing_params"
    status_code: int = status.HTTP_400_BAD_REQUEST


@dataclass
class InvalidTimestamp(ContractError):
    message: str = "ts must be an epoch timestamp"
    code: str = "invalid_timestamp"
    status_code: int = status.HTTP_400_BAD_REQUEST


@dataclass
class Expired(ContractError):
    message: str = "This link has expired"
    code: str = "expired"
    status_code: int = status.HTTP_401_UNAUTHORIZED


@dataclass
class BadSignature(ContractError):
    message: str = "Invalid signature"
    code: str = "bad_signature"
    status_code: int = status.HTTP_401_UNAUTHORIZED


@dataclass
class NotFound(ContractError):
    message: str = "Purchase summary not found"
    code: str = "not_found"
    status_code: int = status.HTTP_404_NOT_FOUND


@dataclass
class SigningSecretMissing(ContractError):
    message: str = "Thank-you signing secret is not configured"
    code: str = "server_misconfigured"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR


__all__ = [
    "BadSignature",
    "CONTRACT_VERSION",
    "ContractError",
    "Expired",
    "InvalidTimestamp",
    "MissingParams",
    "NotFound",
    "SigningSecretMissing",
]
