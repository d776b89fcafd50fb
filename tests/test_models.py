"""Tests for data models."""

from datetime import datetime, timezone

import pytest

from banknoti.models import (
    CustomBankPattern,
    DuplicateResolution,
    DuplicateRule,
    LearnedDepositPattern,
    MatchConfidence,
    Merchant,
    PendingDuplicate,
    SavingsContribution,
    SpendingCategory,
    Transaction,
    TransactionType,
    child_id_from_category,
    parse_timestamp,
)


class TestEnumParsing:
    """Tests for total enum parsing of stored strings."""

    def test_known_value(self) -> None:
        """Test that known names parse to their member."""
        assert TransactionType.parse("INCOME") is TransactionType.INCOME
        assert SpendingCategory.parse("CAFE_SNACK") is SpendingCategory.CAFE_SNACK

    def test_case_and_whitespace_insensitive(self) -> None:
        """Test that stored values are matched after trimming and uppercasing."""
        assert DuplicateResolution.parse(" keep_first ") is DuplicateResolution.KEEP_FIRST
        assert MatchConfidence.parse("High") is MatchConfidence.HIGH

    def test_unknown_values_fall_back(self) -> None:
        """Test that unknown or missing values never raise."""
        assert SpendingCategory.parse("SPACE_TRAVEL") is SpendingCategory.UNCATEGORIZED
        assert TransactionType.parse(None) is TransactionType.EXPENSE
        assert DuplicateResolution.parse(42) is DuplicateResolution.PENDING
        assert MatchConfidence.parse("") is MatchConfidence.LOW

    def test_child_category_key(self) -> None:
        """Test that per-child keys map to the allowance category."""
        assert SpendingCategory.parse("CHILD_abc123") is SpendingCategory.CHILD_ALLOWANCE
        assert child_id_from_category("CHILD_abc123") == "abc123"
        assert child_id_from_category("CHILD_ALLOWANCE") is None
        assert child_id_from_category("FOOD") is None

    def test_resolution_swapped(self) -> None:
        """Test mirroring of keep-first and keep-second."""
        assert DuplicateResolution.KEEP_FIRST.swapped() is DuplicateResolution.KEEP_SECOND
        assert DuplicateResolution.KEEP_SECOND.swapped() is DuplicateResolution.KEEP_FIRST
        assert DuplicateResolution.DELETE_BOTH.swapped() is DuplicateResolution.DELETE_BOTH

    def test_confidence_rank_order(self) -> None:
        """Test that confidence ranks sort manual > high > medium > low."""
        ranked = sorted(MatchConfidence, key=lambda c: c.rank, reverse=True)
        assert ranked == [
            MatchConfidence.MANUAL,
            MatchConfidence.HIGH,
            MatchConfidence.MEDIUM,
            MatchConfidence.LOW,
        ]


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    def test_epoch_millis(self) -> None:
        """Test epoch milliseconds as written by the mobile client."""
        result = parse_timestamp(1_700_000_000_000)
        assert result == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

    def test_iso_string_with_z(self) -> None:
        """Test ISO strings with a Z suffix."""
        result = parse_timestamp("2024-03-01T12:00:00Z")
        assert result == datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

    def test_naive_datetime_assumed_utc(self) -> None:
        """Test that naive datetimes become aware."""
        result = parse_timestamp(datetime(2024, 3, 1, 12, 0))
        assert result is not None
        assert result.tzinfo is timezone.utc

    def test_garbage(self) -> None:
        """Test that unparseable values yield None."""
        assert parse_timestamp("not a date") is None
        assert parse_timestamp(True) is None
        assert parse_timestamp(None) is None


class TestTransaction:
    """Tests for Transaction model."""

    def test_negative_amount_rejected(self) -> None:
        """Test that amounts are never negative."""
        with pytest.raises(ValueError, match="non-negative"):
            Transaction(amount=-1)

    def test_dict_round_trip_uses_camel_case(self) -> None:
        """Test persisted field names and restoration."""
        when = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
        tx = Transaction(
            group_id="g1",
            user_id="u1",
            type=TransactionType.INCOME,
            amount=50000,
            bank_id="toss",
            merchant_name="홍길동",
            linked_child_id="kid1",
            transaction_date=when,
        )
        data = tx.to_dict()

        assert data["groupId"] == "g1"
        assert data["merchantName"] == "홍길동"
        assert data["type"] == "INCOME"
        assert Transaction.from_dict("tx1", data) == Transaction(**{**tx.__dict__, "id": "tx1"})

    def test_from_dict_defaults_missing_fields(self) -> None:
        """Test that old partial documents load with defaults."""
        tx = Transaction.from_dict("old", {"amount": "1500", "type": "SOMETHING"})

        assert tx.id == "old"
        assert tx.amount == 1500
        assert tx.type is TransactionType.EXPENSE
        assert tx.is_confirmed is True
        assert tx.transaction_date is None

    def test_event_time_prefers_transaction_date(self) -> None:
        """Test that event_time falls back to created_at."""
        created = datetime(2024, 3, 1, tzinfo=timezone.utc)
        assert Transaction(created_at=created).event_time == created
        later = datetime(2024, 3, 2, tzinfo=timezone.utc)
        assert Transaction(created_at=created, transaction_date=later).event_time == later


class TestCustomBankPattern:
    """Tests for CustomBankPattern model."""

    def test_round_trip_with_millis(self) -> None:
        """Test that lastModified is stored in epoch milliseconds."""
        pattern = CustomBankPattern(
            id="custom_1",
            display_name="My bank",
            package_names=("com.example.bank",),
            amount_regex=r"([0-9,]+)원",
            income_keywords=("입금",),
            expense_keywords=("출금",),
            is_custom=True,
            last_modified=datetime(2024, 3, 1, tzinfo=timezone.utc),
        )
        data = pattern.to_dict()

        assert data["lastModified"] == 1709251200000
        assert CustomBankPattern.from_dict(data) == pattern

    def test_to_bank_config(self) -> None:
        """Test conversion to a parsing config."""
        pattern = CustomBankPattern.from_dict(
            {"id": "x", "packageNames": ["a.b"], "incomeKeywords": ["입금"]}
        )
        config = pattern.to_bank_config()

        assert config.bank_id == "x"
        assert config.accepts("a.b")
        assert not config.accepts("c.d")
        assert config.amount_regex == r"([0-9,]+)\s*원"


class TestMerchant:
    """Tests for Merchant model."""

    def test_matches_case_insensitive(self) -> None:
        """Test keyword matching ignores case."""
        merchant = Merchant("starbucks", "스타벅스", ("STARBUCKS",), SpendingCategory.CAFE_SNACK)
        assert merchant.matches("starbucks coffee")
        assert not merchant.is_fallback

    def test_keywordless_is_fallback(self) -> None:
        """Test that an entry without keywords never matches."""
        merchant = Merchant("other", "기타", (), SpendingCategory.OTHER)
        assert merchant.is_fallback
        assert not merchant.matches("anything")


class TestDuplicateRule:
    """Tests for DuplicateRule.resolution_for."""

    def test_same_order(self) -> None:
        """Test the rule's own bank order."""
        rule = DuplicateRule(bank1_id="kb_kookmin", bank2_id="kb_card", resolution=DuplicateResolution.KEEP_FIRST)
        assert rule.resolution_for("kb_kookmin", "kb_card") is DuplicateResolution.KEEP_FIRST

    def test_reverse_order_mirrors(self) -> None:
        """Test that reversed pairs keep the same bank's transaction."""
        rule = DuplicateRule(bank1_id="kb_kookmin", bank2_id="kb_card", resolution=DuplicateResolution.KEEP_FIRST)
        assert rule.resolution_for("kb_card", "kb_kookmin") is DuplicateResolution.KEEP_SECOND

    def test_unrelated_pair(self) -> None:
        """Test that other pairs are not covered."""
        rule = DuplicateRule(bank1_id="kb_kookmin", bank2_id="kb_card")
        assert rule.resolution_for("shinhan", "kb_card") is None

    def test_unknown_stored_resolution_defaults_to_keep_first(self) -> None:
        """Test the stored-rule fallback."""
        rule = DuplicateRule.from_dict("r1", {"bank1Id": "a", "bank2Id": "b", "resolution": "??"})
        assert rule.resolution is DuplicateResolution.KEEP_FIRST


class TestRecordsFromDict:
    """Tests for defaults of other persisted records."""

    def test_pending_duplicate_defaults(self) -> None:
        """Test that an empty document is an unresolved pending record."""
        pending = PendingDuplicate.from_dict("p1", {})
        assert pending.is_resolved is False
        assert pending.resolution is DuplicateResolution.PENDING
        assert pending.transaction1.transaction_id == ""

    def test_deposit_pattern_defaults(self) -> None:
        """Test that patterns default to active with zero counters."""
        pattern = LearnedDepositPattern.from_dict("d1", {"savingsGoalId": "goal"})
        assert pattern.is_active is True
        assert pattern.total_applications == 0

    def test_contribution_edit_sets_audit_trail(self) -> None:
        """Test that edits record who changed the contribution."""
        contribution = SavingsContribution(goal_id="goal", amount=10000)
        edited = contribution.edit("parent-1", amount=20000)

        assert edited.amount == 20000
        assert edited.is_modified is True
        assert edited.modified_by == "parent-1"
        assert edited.modified_at is not None
        assert contribution.is_modified is False
