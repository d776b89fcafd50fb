"""Utility modules for banknoti."""

from banknoti.utils.parsing import (
    extract_account_number,
    extract_description,
    extract_merchant_name,
    extract_sender_name,
    first_keyword_index,
    normalize_merchant_name,
    parse_amount,
)

__all__ = [
    "extract_account_number",
    "extract_description",
    "extract_merchant_name",
    "extract_sender_name",
    "first_keyword_index",
    "normalize_merchant_name",
    "parse_amount",
]
