"""Credential Store and Token Ledger — contracts and backends."""

from tokengate.stores.base import CredentialStore, TokenLedger
from tokengate.stores.memory import InMemoryCredentialStore, InMemoryTokenLedger

__all__ = [
    "CredentialStore",
    "InMemoryCredentialStore",
    "InMemoryTokenLedger",
    "TokenLedger",
]
