"""Error taxonomy for notification processing."""

from enum import Enum


class BankNotiError(Exception):
    """Base class for all banknoti errors."""


class ParseError(BankNotiError):
    """Notification text could not be turned into a transaction.

    Never fatal: callers fall back to manual entry with ``text``.
    """

    reason = "parse_error"

    def __init__(self, message: str, text: str = "") -> None:
        super().__init__(message)
        self.text = text


class NoMatchingBank(ParseError):
    """No enabled bank config accepts the source package."""

    reason = "no_matching_bank"


class AmbiguousDirection(ParseError):
    """Neither income nor expense keywords were found."""

    reason = "ambiguous_direction"


class AmountNotFound(ParseError):
    """The bank's amount pattern did not yield an amount."""

    reason = "amount_not_found"


class StoreError(BankNotiError):
    """A document store operation failed."""


class ReviewReason(str, Enum):
    """Recoverable conditions that flag a result for user review."""

    LOW_CONFIDENCE_MATCH = "low_confidence_match"
    DUPLICATE_CONFLICT = "duplicate_conflict"
    HIGH_AMOUNT = "high_amount"
