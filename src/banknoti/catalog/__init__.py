"""Bank and merchant catalog.

A ``CatalogSnapshot`` is an immutable, ordered view of the bank configs and
merchants used for one parse call. Refreshing settings means building a
new snapshot; snapshots are never mutated in place.

Ordering contract:
    banks      enabled custom patterns (in the order given), then defaults
               not shadowed by a custom entry with the same id
    merchants  custom merchants, then defaults not shadowed by id, then
               every keywordless fallback entry
"""

import time
from collections.abc import Iterable
from dataclasses import dataclass

from banknoti.catalog.banks import DEFAULT_BANKS
from banknoti.catalog.categories import CATEGORY_KEYWORDS, match_category_keyword
from banknoti.catalog.merchants import DEFAULT_MERCHANTS, OTHER_MERCHANT_ID
from banknoti.models import DEFAULT_AMOUNT_REGEX, BankConfig, CustomBankPattern, Merchant


@dataclass(frozen=True)
class CatalogSnapshot:
    """Ordered, immutable bank and merchant catalog."""

    banks: tuple[BankConfig, ...]
    merchants: tuple[Merchant, ...]

    @classmethod
    def build(
        cls,
        custom_patterns: Iterable[CustomBankPattern] = (),
        custom_merchants: Iterable[Merchant] = (),
        selected_bank_ids: Iterable[str] | None = None,
    ) -> "CatalogSnapshot":
        """
        Build a snapshot from defaults and user customizations.

        Args:
            custom_patterns: User bank patterns; an entry shadows the default
                with the same id, and a disabled entry removes that bank
            custom_merchants: User merchants, matched before the defaults
            selected_bank_ids: Default bank ids the user enabled; None keeps
                all defaults. User-created patterns are unaffected.

        Returns:
            New CatalogSnapshot
        """
        patterns = list(custom_patterns)
        shadowed = {pattern.id for pattern in patterns}
        selected = set(selected_bank_ids) if selected_bank_ids is not None else None

        banks: list[BankConfig] = []
        for pattern in patterns:
            if not pattern.is_enabled:
                continue
            if selected is not None and not pattern.is_custom and pattern.id not in selected:
                continue
            banks.append(pattern.to_bank_config())
        for bank in DEFAULT_BANKS:
            if bank.bank_id in shadowed:
                continue
            if selected is not None and bank.bank_id not in selected:
                continue
            banks.append(bank)

        user_merchants = list(custom_merchants)
        user_ids = {merchant.id for merchant in user_merchants}
        ordered = user_merchants + [m for m in DEFAULT_MERCHANTS if m.id not in user_ids]
        specific = [m for m in ordered if not m.is_fallback]
        fallbacks = [m for m in ordered if m.is_fallback]
        if not any(m.id == OTHER_MERCHANT_ID for m in fallbacks):
            fallbacks.append(default_other_merchant())

        return cls(banks=tuple(banks), merchants=tuple(specific + fallbacks))

    @classmethod
    def default(cls) -> "CatalogSnapshot":
        return cls.build()

    def candidates_for(self, package_name: str) -> list[BankConfig]:
        """Return bank configs accepting the package, in catalog order."""
        return [bank for bank in self.banks if bank.accepts(package_name)]

    def bank(self, bank_id: str) -> BankConfig | None:
        for bank in self.banks:
            if bank.bank_id == bank_id:
                return bank
        return None

    def merchant(self, merchant_id: str) -> Merchant | None:
        for merchant in self.merchants:
            if merchant.id == merchant_id:
                return merchant
        return None

    @property
    def fallback_merchant(self) -> Merchant:
        for merchant in self.merchants:
            if merchant.id == OTHER_MERCHANT_ID:
                return merchant
        return default_other_merchant()

    def detect_merchant(self, text: str) -> Merchant:
        """First merchant whose keyword appears in text; the fallback otherwise."""
        for merchant in self.merchants:
            if not merchant.is_fallback and merchant.matches(text):
                return merchant
        return self.fallback_merchant


def default_other_merchant() -> Merchant:
    return next(m for m in DEFAULT_MERCHANTS if m.id == OTHER_MERCHANT_ID)


def new_pattern_template() -> CustomBankPattern:
    """Starting point for a user-created bank pattern."""
    return CustomBankPattern(
        id=f"custom_{int(time.time() * 1000)}",
        display_name="새 패턴",
        package_names=("com.kakao.talk",),
        amount_regex=DEFAULT_AMOUNT_REGEX,
        income_keywords=("입금", "받으셨"),
        expense_keywords=("출금", "결제", "승인"),
        merchant_regex_list=(
            r"\(([가-힣a-zA-Z0-9\s]+)\)\s*(?:승인|결제)",
            r"(?:사용처|가맹점)[:\s]*([가-힣a-zA-Z0-9\s]+)",
        ),
        is_custom=True,
    )


__all__ = [
    "CATEGORY_KEYWORDS",
    "CatalogSnapshot",
    "DEFAULT_BANKS",
    "DEFAULT_MERCHANTS",
    "OTHER_MERCHANT_ID",
    "default_other_merchant",
    "match_category_keyword",
    "new_pattern_template",
]
