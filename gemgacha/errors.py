from __future__ import annotations


class LedgerError(ValueError):
    """Base class for account ledger failures.

    Each subclass carries the HTTP status the API layer should answer with.
    """

    status_code: int = 400


class NotFoundError(LedgerError):
    status_code = 404


class InsufficientFundsError(LedgerError):
    pass


class AlreadyOwnedError(LedgerError):
    pass


class NotOwnedError(LedgerError):
    pass


class SlotFullError(LedgerError):
    pass


class NotEquippedError(LedgerError):
    pass


class InvalidArgumentError(LedgerError):
    pass


class AccountBusyError(LedgerError):
    status_code = 409
