"""Data access helpers for identities and the history ledger."""

from .credentials import CredentialStore
from .history import HistoryLedger, UnknownIdentityError

__all__ = ["CredentialStore", "HistoryLedger", "UnknownIdentityError"]
