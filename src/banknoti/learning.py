"""Learned merchant-to-category mappings and category suggestions."""

import hashlib
import logging
from dataclasses import dataclass
from enum import Enum

from banknoti.catalog import match_category_keyword
from banknoti.models import (
    LearnedMapping,
    Merchant,
    SpendingCategory,
    TransactionType,
    utcnow,
)
from banknoti.storage import LEARNED_MAPPINGS, DocumentStore
from banknoti.utils.parsing import normalize_merchant_name

logger = logging.getLogger(__name__)


def mapping_id(group_id: str, transaction_type: TransactionType, normalized_name: str) -> str:
    """Deterministic document id: one mapping per (group, type, merchant)."""
    data = f"{group_id}|{transaction_type.value}|{normalized_name}"
    return hashlib.sha256(data.encode()).hexdigest()[:40]


def merchant_key(merchant_name: str, description: str = "") -> str:
    """Name a transaction is learned and looked up under: the merchant, else the description."""
    return merchant_name.strip() or description.strip()


class LearnedMappingStore:
    """Merchant to category associations for one group, learned from corrections."""

    def __init__(self, store: DocumentStore, group_id: str) -> None:
        self.store = store
        self.group_id = group_id

    def find_mapping(
        self, merchant_name: str, transaction_type: TransactionType
    ) -> LearnedMapping | None:
        """Return the mapping whose normalized name equals merchant_name's."""
        normalized = normalize_merchant_name(merchant_name)
        if not normalized:
            return None
        doc_id = mapping_id(self.group_id, transaction_type, normalized)
        data = self.store.get(LEARNED_MAPPINGS, doc_id)
        return LearnedMapping.from_dict(doc_id, data) if data is not None else None

    def find_partial_match(
        self, merchant_name: str, transaction_type: TransactionType
    ) -> LearnedMapping | None:
        """Return a mapping whose normalized name contains, or is contained in, merchant_name's."""
        normalized = normalize_merchant_name(merchant_name)
        if len(normalized) < 2:
            return None

        candidates = [
            mapping
            for mapping in self.mappings()
            if mapping.transaction_type is transaction_type and mapping.merchant_name
        ]
        for mapping in candidates:
            if mapping.merchant_name == normalized:
                return mapping
        for mapping in candidates:
            if mapping.merchant_name in normalized or normalized in mapping.merchant_name:
                return mapping
        return None

    def suggest_category(
        self, merchant_name: str, transaction_type: TransactionType
    ) -> str | None:
        """Return the remembered category for the merchant, if any."""
        mapping = self.find_mapping(merchant_name, transaction_type)
        return mapping.category if mapping else None

    def record_correction(
        self,
        merchant_name: str,
        transaction_type: TransactionType,
        category: str,
    ) -> LearnedMapping | None:
        """
        Remember a user's category choice for a merchant.

        Creates the mapping on first use. Later corrections atomically bump
        ``useCount`` and overwrite the category with the newest choice.

        Args:
            merchant_name: Merchant name as shown to the user
            transaction_type: Direction of the corrected transaction
            category: Category key the user picked

        Returns:
            The stored mapping, or None if the name normalizes to nothing
        """
        normalized = normalize_merchant_name(merchant_name)
        if not normalized or not category.strip():
            return None

        doc_id = mapping_id(self.group_id, transaction_type, normalized)
        now = utcnow()
        mapping = LearnedMapping(
            id=doc_id,
            group_id=self.group_id,
            merchant_name=normalized,
            original_merchant_name=merchant_name,
            category=category,
            transaction_type=transaction_type,
            use_count=1,
            last_used_at=now,
            created_at=now,
        )

        # A concurrent delete between create and increment is retried once.
        for _ in range(2):
            if self.store.create_if_absent(LEARNED_MAPPINGS, doc_id, mapping.to_dict()):
                logger.debug("Learned %s -> %s", normalized, category)
                return mapping
            data = self.store.increment(
                LEARNED_MAPPINGS,
                doc_id,
                "useCount",
                1,
                extra={"category": category, "lastUsedAt": now},
            )
            if data is not None:
                return LearnedMapping.from_dict(doc_id, data)
        return mapping

    def mappings(self) -> list[LearnedMapping]:
        """All mappings learned by this group."""
        return [
            LearnedMapping.from_dict(doc_id, data)
            for doc_id, data in self.store.query(LEARNED_MAPPINGS, groupId=self.group_id)
        ]

    def delete_mapping(self, mapping_id: str) -> bool:
        return self.store.delete(LEARNED_MAPPINGS, mapping_id)


class CategorySource(str, Enum):
    LEARNED = "learned"
    LEARNED_PARTIAL = "learned_partial"
    KEYWORD = "keyword"
    MERCHANT_DEFAULT = "merchant_default"
    DEFAULT = "default"


@dataclass(frozen=True)
class CategorySuggestion:
    """A category guess and how much to trust it."""

    category: str
    confidence: float
    source: CategorySource
    reason: str = ""
    auto_apply: bool = False


class SmartCategorizer:
    """
    Suggest a category for a parsed transaction.

    Lookup order: learned exact mapping, learned partial mapping, the
    category keyword table, the detected merchant's default category, and
    finally UNCATEGORIZED. Only learned mappings confirmed often enough, or
    a catalog merchant's own default, are marked ``auto_apply``.
    """

    def __init__(
        self,
        mappings: LearnedMappingStore | None = None,
        auto_apply_min_use_count: int = 2,
    ) -> None:
        self.mappings = mappings
        self.auto_apply_min_use_count = auto_apply_min_use_count

    def categorize(
        self,
        merchant_name: str,
        transaction_type: TransactionType,
        merchant: Merchant | None = None,
    ) -> CategorySuggestion:
        if self.mappings is not None and merchant_name.strip():
            exact = self.mappings.find_mapping(merchant_name, transaction_type)
            if exact is not None:
                return CategorySuggestion(
                    category=exact.category,
                    confidence=0.95 + min(exact.use_count * 0.01, 0.04),
                    source=CategorySource.LEARNED,
                    reason=f"Learned mapping (used {exact.use_count} times)",
                    auto_apply=exact.use_count >= self.auto_apply_min_use_count,
                )

            partial = self.mappings.find_partial_match(merchant_name, transaction_type)
            if partial is not None:
                return CategorySuggestion(
                    category=partial.category,
                    confidence=0.8,
                    source=CategorySource.LEARNED_PARTIAL,
                    reason=f"Similar merchant learned: {partial.original_merchant_name}",
                )

        if transaction_type is TransactionType.EXPENSE:
            keyword_match = match_category_keyword(merchant_name)
            if keyword_match is not None:
                category, keyword = keyword_match
                return CategorySuggestion(
                    category=category.value,
                    confidence=0.85,
                    source=CategorySource.KEYWORD,
                    reason=f"Keyword match: {keyword}",
                )

            if merchant is not None and not merchant.is_fallback:
                return CategorySuggestion(
                    category=merchant.default_category.value,
                    confidence=0.7,
                    source=CategorySource.MERCHANT_DEFAULT,
                    reason=f"Default category for {merchant.display_name}",
                    auto_apply=True,
                )

        return CategorySuggestion(
            category=SpendingCategory.UNCATEGORIZED.value,
            confidence=0.1,
            source=CategorySource.DEFAULT,
            reason="No match",
        )


__all__ = [
    "CategorySource",
    "CategorySuggestion",
    "LearnedMappingStore",
    "SmartCategorizer",
    "mapping_id",
    "merchant_key",
]
