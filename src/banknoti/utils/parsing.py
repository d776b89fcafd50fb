"""Parsing utilities for bank and card notification text."""

import logging
import re
from collections.abc import Iterable, Sequence

logger = logging.getLogger(__name__)

MERCHANT_NAME_MAX_LENGTH = 30

# Words that show up around amounts in notifications but never name a merchant
_MERCHANT_EXCLUDE = (
    "은행", "카드", "국민", "신한", "우리", "하나", "농협", "신협", "새마을금고",
    "카카오뱅크", "토스뱅크", "KB",
    "승인", "거절", "결제", "출금", "입금", "일시불", "할부", "취소", "잔액",
    "체크", "신용", "사용", "계좌", "이체",
    "님", "고객", "본인", "해외", "온라인", "오프라인",
)

_SENDER_EXCLUDE = ("은행", "카드", "입금", "출금", "잔액", "계좌")

_MERCHANT_PATTERNS = [
    # "[카드사] 홍길동 쿠팡 50,000원"
    re.compile(r"\]\s*[가-힣]{2,4}\s+([가-힣a-zA-Z0-9][가-힣a-zA-Z0-9\s]{0,20}?)\s+[0-9,]+원"),
    # "삼성카드 스타벅스 12,500원"
    re.compile(r"(?:삼성|현대|롯데|BC|KB|NH|IBK)(?:카드)?\s+([가-힣a-zA-Z][가-힣a-zA-Z0-9\s]{1,20}?)\s+[0-9,]+원"),
    # "일시불 CU편의점 3,500원"
    re.compile(r"(?:일시불|[0-9]+개월)\s+([가-힣a-zA-Z][가-힣a-zA-Z0-9\s]{1,20}?)\s+[0-9,]+원"),
    # "스타벅스 12,500원 승인"
    re.compile(r"([가-힣a-zA-Z][가-힣a-zA-Z0-9\s]{1,20}?)\s+[0-9,]+원\s*(?:승인|결제|출금)"),
    # "결제 배달의민족 25,000원"
    re.compile(r"(?:결제|승인|사용)\s+([가-힣a-zA-Z][가-힣a-zA-Z0-9\s]{1,20}?)\s+[0-9,]+원"),
    # "승인 12,500원 스타벅스"
    re.compile(r"(?:승인|결제)\s+[0-9,]+원\s+([가-힣a-zA-Z][가-힣a-zA-Z0-9]{1,20})(?:\s|$)"),
    # "스타벅스 체크카드출금"
    re.compile(r"([가-힣a-zA-Z0-9()]{2,20})\s*(?:체크카드출금|신용카드출금|카드출금)"),
    # "(쿠팡) 승인"
    re.compile(r"\(([가-힣a-zA-Z0-9][가-힣a-zA-Z0-9\s]{0,20}?)\)\s*(?:[0-9,]+원)?\s*(?:승인|결제|출금)?"),
    # "가맹점: 스타벅스"
    re.compile(r"(?:사용처|가맹점|매장)[:\s]+([가-힣a-zA-Z0-9][가-힣a-zA-Z0-9\s]{1,20}?)(?:\s|,|\n|$)"),
    # "카카오페이 스타벅스 5,000원"
    re.compile(
        r"(?:네이버페이|카카오페이|토스|페이코|삼성페이|현대페이|신한페이)\s+"
        r"([가-힣a-zA-Z0-9][가-힣a-zA-Z0-9\s]{1,20}?)\s+[0-9,]+원"
    ),
    # "스타벅스에서"
    re.compile(r"([가-힣a-zA-Z0-9]{2,15})에서"),
    # "[스타벅스]" but not "[KB국민]승인"
    re.compile(r"\[([가-힣a-zA-Z0-9][가-힣a-zA-Z0-9\s]{1,15}?)\](?!카드|은행|승인|거절)"),
    # "GS25 3,500원"
    re.compile(r"([가-힣a-zA-Z][가-힣a-zA-Z0-9]{1,15})\s+[0-9,]+원"),
]

_SENDER_PATTERNS = [
    re.compile(r"([가-힣]{2,4})님이.+보냈"),
    re.compile(r"([가-힣]{2,4})님으로부터"),
    re.compile(r"([가-힣]{2,4})님이\s*입금"),
    re.compile(r"입금\s*[0-9,]+원\s+([가-힣]{2,4})(?:\s|$)"),
    re.compile(r"\]\s*([가-힣]{2,4})\s+[0-9,]+원\s*입금"),
    re.compile(r"([가-힣]{2,4})님\s+[0-9,]+원\s*입금"),
    re.compile(r"입금[^가-힣]*([가-힣]{2,4})(?:\s|잔액|$)"),
    re.compile(r"([가-힣]\*[가-힣])"),
    re.compile(r"(?:보낸분|보내신 분|송금자)[:\s]*([가-힣]{2,4})"),
    re.compile(r"FROM\s*([가-힣]{2,4})"),
]

ACCOUNT_NUMBER_PATTERNS = [
    re.compile(r"(\d{3,4}-\d{2,4}-\d{4,6})"),
    re.compile(r"(\*{2,4}-\*{2,4}-\d{4,6})"),
    re.compile(r"(\d{3,4}\*{2,4}\d{3,6})"),
    re.compile(r"\((\d{4})\)\s*(?:계좌|입금|출금)"),
    re.compile(r"계좌[:\s]*(\d{3,4}[\-*]?\d{2,4}[\-*]?\d{4,6})"),
]

_DESCRIPTION_PATTERNS = [
    re.compile(r"\[(.+?)\]"),
    re.compile(r"(.+?)에서"),
    re.compile(r"(.+?)결제"),
    re.compile(r"잔액[:\s]*([0-9,]+원)"),
]

_MASKED_OWNER_PATTERNS = [
    re.compile(r"[가-힣]\*[가-힣]님?"),
    re.compile(r"[가-힣]\*[가-힣]{2}님?"),
    re.compile(r"[가-힣]{2}\*[가-힣]님?"),
]


def parse_amount(amount_str: str) -> int | None:
    """
    Parse a notification amount string to an integer.

    Grouping separators (commas) and whitespace are stripped; the result
    is in the smallest currency unit and never negative.

    Args:
        amount_str: Amount string such as "12,345"

    Returns:
        int if successful, None otherwise
    """
    if not amount_str:
        return None

    cleaned = re.sub(r"[,\s]", "", amount_str)
    if not cleaned.isdigit() or not cleaned.isascii():
        return None
    return int(cleaned)


def first_keyword_index(text: str, keywords: Iterable[str]) -> int | None:
    """Return the earliest position in text at which any keyword occurs."""
    positions = [text.find(keyword) for keyword in keywords if keyword]
    found = [pos for pos in positions if pos >= 0]
    return min(found) if found else None


def normalize_merchant_name(name: str) -> str:
    """
    Normalize a merchant name for learned-mapping lookups.

    Lowercases, drops whitespace, hyphens, underscores and (half or full
    width) parentheses, then anything that is not a Korean syllable, ASCII
    letter or digit, and truncates to 30 characters. Idempotent.
    """
    name = name.lower()
    name = re.sub(r"[\s\-_()（）]", "", name)
    name = re.sub(r"[^가-힣a-z0-9]", "", name)
    return name[:MERCHANT_NAME_MAX_LENGTH]


def _is_excluded_merchant(candidate: str) -> bool:
    folded = candidate.casefold()
    return any(word.casefold() in folded for word in _MERCHANT_EXCLUDE)


def _is_masked_owner_name(candidate: str) -> bool:
    return any(pattern.fullmatch(candidate) for pattern in _MASKED_OWNER_PATTERNS)


def _is_account_number(candidate: str) -> bool:
    return re.fullmatch(r"\d+\*+\d*", candidate) is not None


def clean_merchant_name(name: str) -> str:
    """Remove amounts, dates and times left in an extracted merchant name."""
    name = re.sub(r"[\d,]+원", "", name)
    name = re.sub(r"\d{1,2}[/.-]\d{1,2}", "", name)
    name = re.sub(r"\d{2}:\d{2}", "", name)
    return " ".join(name.split())[:20]


def extract_merchant_name(text: str, custom_patterns: Sequence[str] = ()) -> str:
    """
    Extract a free-text merchant name from notification text.

    User supplied patterns are tried first, then the built-in formats in
    priority order. Candidates naming a bank, an action word, a masked
    account owner or an account number are skipped.

    Args:
        text: Raw notification text
        custom_patterns: Regexes from a custom bank pattern; group 1 (or the
            whole match) is the merchant

    Returns:
        Merchant name, or "" if nothing plausible was found
    """
    compiled: list[re.Pattern[str]] = []
    for pattern in custom_patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            logger.warning("Ignoring invalid merchant regex %r: %s", pattern, e)
    compiled.extend(_MERCHANT_PATTERNS)

    for pattern in compiled:
        match = pattern.search(text)
        if match is None:
            continue
        candidate = (match.group(1) if pattern.groups else match.group(0)) or ""
        candidate = clean_merchant_name(candidate.strip())

        if not 2 <= len(candidate) <= 25:
            continue
        if candidate.isdigit():
            continue
        if _is_excluded_merchant(candidate) or _is_masked_owner_name(candidate):
            continue
        if _is_account_number(candidate):
            continue
        return candidate

    return ""


def extract_sender_name(text: str) -> str:
    """Extract the sender of an incoming transfer (2-4 Korean syllables or masked)."""
    for pattern in _SENDER_PATTERNS:
        match = pattern.search(text)
        if match is None:
            continue
        sender = match.group(1).strip()
        if not 2 <= len(sender) <= 5:
            continue
        if any(word in sender for word in _SENDER_EXCLUDE):
            continue
        return sender
    return ""


def extract_account_number(text: str) -> str:
    """Extract a (possibly masked) account number from notification text."""
    for pattern in ACCOUNT_NUMBER_PATTERNS:
        match = pattern.search(text)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return ""


def extract_description(text: str) -> str:
    """Extract a short description, falling back to the first 50 characters."""
    for pattern in _DESCRIPTION_PATTERNS:
        match = pattern.search(text)
        if match:
            desc = match.group(1).strip()
            if desc and len(desc) <= 50:
                return desc
    return text[:50]
