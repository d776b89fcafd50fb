"""Tests for the bank and merchant catalog."""

from banknoti.catalog import (
    DEFAULT_BANKS,
    DEFAULT_MERCHANTS,
    OTHER_MERCHANT_ID,
    CatalogSnapshot,
    match_category_keyword,
    new_pattern_template,
)
from banknoti.models import CustomBankPattern, Merchant, SpendingCategory


def _custom(bank_id: str, is_enabled: bool = True, is_custom: bool = True) -> CustomBankPattern:
    return CustomBankPattern(
        id=bank_id,
        display_name=f"Custom {bank_id}",
        package_names=("com.example.custom",),
        amount_regex=r"([0-9,]+)원",
        income_keywords=("입금",),
        expense_keywords=("출금",),
        is_enabled=is_enabled,
        is_custom=is_custom,
    )


class TestDefaults:
    """Tests for the default tables."""

    def test_bank_ids_unique(self) -> None:
        """Test that every default bank id is unique."""
        ids = [bank.bank_id for bank in DEFAULT_BANKS]
        assert len(ids) == len(set(ids))

    def test_other_merchant_is_last(self) -> None:
        """Test that the catch-all merchant has no keywords and comes last."""
        assert DEFAULT_MERCHANTS[-1].id == OTHER_MERCHANT_ID
        assert DEFAULT_MERCHANTS[-1].keywords == ()


class TestCatalogSnapshot:
    """Tests for CatalogSnapshot.build ordering and shadowing."""

    def test_custom_pattern_shadows_default(self) -> None:
        """Test that a custom entry with a default's id replaces it."""
        catalog = CatalogSnapshot.build(custom_patterns=[_custom("kb_kookmin", is_custom=False)])

        kb = [bank for bank in catalog.banks if bank.bank_id == "kb_kookmin"]
        assert len(kb) == 1
        assert kb[0].display_name == "Custom kb_kookmin"
        assert catalog.banks[0].bank_id == "kb_kookmin"

    def test_disabled_pattern_removes_bank(self) -> None:
        """Test that a disabled custom entry is excluded along with the default it shadows."""
        catalog = CatalogSnapshot.build(custom_patterns=[_custom("kb_kookmin", is_enabled=False)])

        assert catalog.bank("kb_kookmin") is None
        assert catalog.candidates_for("com.kbstar.kbbank") == []

    def test_custom_before_defaults(self) -> None:
        """Test that custom patterns are evaluated first."""
        catalog = CatalogSnapshot.build(custom_patterns=[_custom("custom_1")])
        assert catalog.banks[0].bank_id == "custom_1"
        assert catalog.banks[0].is_custom

    def test_selected_banks_filter_defaults_only(self) -> None:
        """Test that bank selection keeps user-created patterns."""
        catalog = CatalogSnapshot.build(
            custom_patterns=[_custom("custom_1")],
            selected_bank_ids=["toss"],
        )
        assert [bank.bank_id for bank in catalog.banks] == ["custom_1", "toss"]

    def test_custom_merchant_first_and_fallback_last(self) -> None:
        """Test merchant ordering contract."""
        mine = Merchant("corner_shop", "동네가게", ("동네가게", "스타벅스"), SpendingCategory.GROCERY)
        catalog = CatalogSnapshot.build(custom_merchants=[mine])

        assert catalog.merchants[0].id == "corner_shop"
        assert catalog.merchants[-1].id == OTHER_MERCHANT_ID
        assert catalog.detect_merchant("스타벅스 강남점").id == "corner_shop"

    def test_detect_merchant_falls_back_to_other(self, catalog: CatalogSnapshot) -> None:
        """Test that unknown text yields the other merchant, never an error."""
        assert catalog.detect_merchant("zzqq 1,000원").id == OTHER_MERCHANT_ID

    def test_detect_merchant_case_insensitive(self, catalog: CatalogSnapshot) -> None:
        """Test that merchant keywords ignore case."""
        assert catalog.detect_merchant("starbucks 12,000원").id == "starbucks"

    def test_short_brand_needs_full_keyword(self, catalog: CatalogSnapshot) -> None:
        """Test that a short brand name does not match inside longer words."""
        assert catalog.detect_merchant("KTX 승차권 59,800원").id == "korail"
        assert catalog.detect_merchant("ktown4u 결제 30,000원").id == OTHER_MERCHANT_ID
        assert catalog.detect_merchant("KT통신요금 자동이체 33,000원").id == "kt"

    def test_build_returns_new_snapshot(self) -> None:
        """Test that refreshing produces an independent snapshot."""
        first = CatalogSnapshot.default()
        second = CatalogSnapshot.build(custom_patterns=[_custom("custom_1")])
        assert first != second
        assert first.bank("custom_1") is None


class TestCategoryKeywords:
    """Tests for match_category_keyword."""

    def test_matches_keyword(self) -> None:
        """Test a known merchant name."""
        result = match_category_keyword("스타벅스 강남점")
        assert result is not None
        assert result[0] is SpendingCategory.CAFE_SNACK

    def test_no_match(self) -> None:
        """Test an unknown name."""
        assert match_category_keyword("zzqq") is None


class TestNewPatternTemplate:
    """Tests for new_pattern_template."""

    def test_template_is_custom(self) -> None:
        """Test that templates are user-created patterns with an id."""
        pattern = new_pattern_template()
        assert pattern.is_custom
        assert pattern.id.startswith("custom_")
