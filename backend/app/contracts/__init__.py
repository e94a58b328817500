"""Signed, short-lived purchase contracts for the thank-you page."""

from .errors import (
    CONTRACT_VERSION,
    BadSignature,
    ContractError,
    Expired,
    InvalidTimestamp,
    MissingParams,
    NotFound,
    SigningSecretMissing,
)
from .models import (
    ContractContext,
    ContractDisplay,
    ContractDraft,
    ContractIds,
    ContractKind,
    EnterpriseContext,
    OneTimeContext,
    PricingSnapshot,
    StarterProContext,
    ThankYouContract,
)
from .service import ContractService, parse_timestamp_ms
from .signer import ContractSigner, canonical_string, constant_time_equals
from .store import ContractStore, InMemoryContractStore, contract_key

__all__ = [
    "BadSignature",
    "CONTRACT_VERSION",
    "ContractContext",
    "ContractDisplay",
    "ContractDraft",
    "ContractError",
    "ContractIds",
    "ContractKind",
    "ContractService",
    "ContractSigner",
    "ContractStore",
    "EnterpriseContext",
    "Expired",
    "InMemoryContractStore",
    "InvalidTimestamp",
    "MissingParams",
    "NotFound",
    "OneTimeContext",
    "PricingSnapshot",
    "SigningSecretMissing",
    "StarterProContext",
    "ThankYouContract",
    "canonical_string",
    "constant_time_equals",
    "contract_key",
    "parse_timestamp_ms",
]
