"""Protocols for infrastructure adapters."""

from transferquota.core.protocols.accounts import AccountDirectory
from transferquota.core.protocols.email import EmailSender
from transferquota.core.protocols.idempotency import IdempotencyStore
from transferquota.core.protocols.notifications import InAppNotifier

__all__ = ["AccountDirectory", "EmailSender", "IdempotencyStore", "InAppNotifier"]
