"""Tests for the notification parser."""

import logging

import pytest

from banknoti.catalog import OTHER_MERCHANT_ID, CatalogSnapshot
from banknoti.exceptions import AmbiguousDirection, AmountNotFound, NoMatchingBank, ParseError
from banknoti.models import BankConfig, CustomBankPattern, InputSource, TransactionType
from banknoti.parser import NotificationParser, determine_direction, extract_amount
from banknoti.parser import test_pattern as try_pattern

KB_PURCHASE = "[KB국民]승인 12,345원 스타벅스 사용"
KB_PACKAGE = "com.kbstar.kbbank"


def _config(
    bank_id: str = "test_bank",
    income: tuple[str, ...] = ("입금",),
    expense: tuple[str, ...] = ("출금", "승인"),
    amount_regex: str = r"([0-9,]+)\s*원",
    packages: tuple[str, ...] = ("com.example.bank",),
) -> BankConfig:
    return BankConfig(
        bank_id=bank_id,
        display_name=bank_id,
        package_names=packages,
        income_keywords=income,
        expense_keywords=expense,
        amount_regex=amount_regex,
    )


class TestExtractAmount:
    """Tests for extract_amount function."""

    def test_strips_grouping_separators(self) -> None:
        """Test that "12,345원" yields 12345."""
        assert extract_amount("승인 12,345원", r"([0-9,]+)\s*원") == 12345

    def test_first_occurrence_wins(self) -> None:
        """Test that the transaction amount beats a later balance."""
        assert extract_amount("승인 12,345원 잔액 100,000원", r"([0-9,]+)\s*원") == 12345

    def test_no_match(self) -> None:
        """Test that None is returned when the pattern does not match."""
        assert extract_amount("승인 완료", r"([0-9,]+)\s*원") is None

    def test_pattern_without_group(self) -> None:
        """Test that a pattern without a capturing group yields nothing."""
        assert extract_amount("승인 12,345원", r"[0-9,]+원") is None


class TestDetermineDirection:
    """Tests for determine_direction function."""

    @pytest.mark.parametrize(
        "text",
        ["입금 5,000원", "[은행] 입금 5,000원 후 출금 가능", "급여 입금 3,000,000원 승인"],
    )
    def test_income_before_expense(self, text: str) -> None:
        """Test that an earlier income keyword means INCOME."""
        assert determine_direction(text, _config()) is TransactionType.INCOME

    def test_expense_before_income(self) -> None:
        """Test that an earlier expense keyword means EXPENSE."""
        assert determine_direction("출금 5,000원 입금계좌", _config()) is TransactionType.EXPENSE

    def test_tie_goes_to_expense(self) -> None:
        """Test that keywords at the same position resolve to EXPENSE."""
        config = _config(income=("입금",), expense=("입금취소",))
        assert determine_direction("입금취소 5,000원", config) is TransactionType.EXPENSE

    def test_neither(self) -> None:
        """Test that no keyword gives None."""
        assert determine_direction("잔액 5,000원", _config()) is None


class TestNotificationParser:
    """Tests for NotificationParser."""

    def test_kb_purchase_end_to_end(self, catalog: CatalogSnapshot) -> None:
        """Test the KB card purchase scenario."""
        parsed = NotificationParser(catalog).parse(KB_PURCHASE, KB_PACKAGE)

        assert parsed.type is TransactionType.EXPENSE
        assert parsed.amount == 12345
        assert parsed.bank.bank_id == "kb_kookmin"
        assert parsed.merchant.id == "starbucks"
        assert parsed.merchant_name == "스타벅스"
        assert parsed.source is InputSource.NOTIFICATION
        assert parsed.source_package == KB_PACKAGE

        tx = parsed.to_transaction(group_id="g1", user_id="u1")
        assert tx.bank_id == "kb_kookmin"
        assert tx.merchant == "starbucks"
        assert tx.original_text == KB_PURCHASE
        assert tx.group_id == "g1"

    def test_unknown_package(self, catalog: CatalogSnapshot) -> None:
        """Test that an unrecognized app fails with NoMatchingBank."""
        with pytest.raises(NoMatchingBank) as exc_info:
            NotificationParser(catalog).parse(KB_PURCHASE, "com.example.unknown")
        assert exc_info.value.text == KB_PURCHASE
        assert exc_info.value.reason == "no_matching_bank"

    def test_ambiguous_direction(self) -> None:
        """Test that text without keywords fails with AmbiguousDirection."""
        parser = NotificationParser(CatalogSnapshot.default())
        with pytest.raises(AmbiguousDirection):
            parser.parse("잔액 5,000원", "com.example.bank", [_config()])

    def test_amount_not_found(self) -> None:
        """Test that a non-matching amount pattern fails with AmountNotFound."""
        parser = NotificationParser(CatalogSnapshot.default())
        with pytest.raises(AmountNotFound):
            parser.parse("입금 완료", "com.example.bank", [_config()])

    def test_invalid_amount_regex(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that a broken stored regex is reported as AmountNotFound."""
        parser = NotificationParser(CatalogSnapshot.default())
        with caplog.at_level(logging.WARNING), pytest.raises(AmountNotFound):
            parser.parse("입금 5,000원", "com.example.bank", [_config(amount_regex="([0-9")])
        assert "Invalid amount regex" in caplog.text

    def test_next_candidate_tried(self) -> None:
        """Test that a later config is used when an earlier one cannot parse."""
        first = _config("first", amount_regex=r"USD ([0-9.]+)")
        second = _config("second")
        parsed = NotificationParser(CatalogSnapshot.default()).parse(
            "출금 7,000원", "com.example.bank", [first, second]
        )
        assert parsed.bank.bank_id == "second"

    def test_first_error_raised(self) -> None:
        """Test that the first config's failure is raised when none parses."""
        first = _config("first", amount_regex=r"USD ([0-9.]+)")
        second = _config("second")
        with pytest.raises(AmountNotFound, match="first"):
            NotificationParser(CatalogSnapshot.default()).parse(
                "잔액 없음", "com.example.bank", [first, second]
            )

    def test_disabled_custom_pattern_excluded(self) -> None:
        """Test that a disabled custom pattern is never a candidate."""
        disabled = CustomBankPattern(
            id="mine",
            display_name="Mine",
            package_names=("com.example.mine",),
            amount_regex=r"([0-9,]+)원",
            income_keywords=("입금",),
            expense_keywords=("출금",),
            is_enabled=False,
            is_custom=True,
        )
        catalog = CatalogSnapshot.build(custom_patterns=[disabled])
        with pytest.raises(NoMatchingBank):
            NotificationParser(catalog).parse("출금 1,000원", "com.example.mine")

    def test_unknown_merchant_uses_extracted_name(self, catalog: CatalogSnapshot) -> None:
        """Test that free-text merchant names are used with the fallback merchant."""
        parsed = NotificationParser(catalog).parse("[KB국민]승인 8,000원 동네빵집 사용", KB_PACKAGE)

        assert parsed.merchant.id == OTHER_MERCHANT_ID
        assert parsed.merchant_name == "동네빵집"

    def test_income_extracts_sender(self, catalog: CatalogSnapshot) -> None:
        """Test that deposits carry the sender and account number."""
        text = "[카카오뱅크] 110-123-456789 입금 50,000원 홍길동"
        parsed = NotificationParser(catalog).parse(text, "com.kakaobank.channel")

        assert parsed.type is TransactionType.INCOME
        assert parsed.amount == 50000
        assert parsed.sender_name == "홍길동"
        assert parsed.account_number == "110-123-456789"

    def test_expense_has_no_sender(self, catalog: CatalogSnapshot) -> None:
        """Test that sender names are only extracted for income."""
        parsed = NotificationParser(catalog).parse(KB_PURCHASE, KB_PACKAGE)
        assert parsed.sender_name == ""


class TestParseManualInput:
    """Tests for parse_manual_input."""

    def test_tries_every_config(self, catalog: CatalogSnapshot) -> None:
        """Test that pasted text is parsed without a package."""
        parsed = NotificationParser(catalog).parse_manual_input(KB_PURCHASE)

        assert parsed.source is InputSource.MANUAL_TEXT_INPUT
        assert parsed.amount == 12345
        assert parsed.type is TransactionType.EXPENSE

    def test_empty_catalog(self) -> None:
        """Test that an empty catalog fails with NoMatchingBank."""
        parser = NotificationParser(CatalogSnapshot(banks=(), merchants=()))
        with pytest.raises(NoMatchingBank):
            parser.parse_manual_input(KB_PURCHASE)

    def test_unparseable_text(self, catalog: CatalogSnapshot) -> None:
        """Test that failures surface as ParseError."""
        with pytest.raises(ParseError):
            NotificationParser(catalog).parse_manual_input("hello")

    def test_first_failure_is_raised(self, catalog: CatalogSnapshot) -> None:
        """Test that the first config's failure is reported when none can parse."""
        configs = [
            _config("dollars", amount_regex=r"([0-9]+)\s*달러"),
            _config("no_keywords", income=(), expense=()),
        ]

        with pytest.raises(AmountNotFound) as exc_info:
            NotificationParser(catalog).parse_manual_input("출금 1,000원", candidate_configs=configs)

        assert "dollars" in str(exc_info.value)


class TestPatternTester:
    """Tests for trying a bank pattern against sample text."""

    def _pattern(self, amount_regex: str = r"([0-9,]+)원", merchant_regex: tuple[str, ...] = ()) -> CustomBankPattern:
        return CustomBankPattern(
            id="custom_1",
            display_name="Test",
            package_names=("com.example.bank",),
            amount_regex=amount_regex,
            income_keywords=("입금",),
            expense_keywords=("결제",),
            merchant_regex_list=merchant_regex,
            is_custom=True,
        )

    def test_success(self) -> None:
        """Test a pattern that extracts everything."""
        result = try_pattern(self._pattern(merchant_regex=(r"\(([^)]+)\)",)), "(동네빵집) 결제 3,000원")

        assert result.success
        assert result.amount == 3000
        assert result.transaction_type is TransactionType.EXPENSE
        assert result.merchant_name == "동네빵집"

    def test_invalid_regex_reported(self) -> None:
        """Test that an invalid regex is reported, not raised."""
        result = try_pattern(self._pattern(amount_regex="([0-9"), "결제 3,000원")
        assert not result.success
        assert result.error_message is not None
        assert "Invalid amount regex" in result.error_message

    def test_missing_group(self) -> None:
        """Test that a pattern without a group is explained."""
        result = try_pattern(self._pattern(amount_regex=r"[0-9,]+원"), "결제 3,000원")
        assert not result.success
        assert "capturing group" in (result.error_message or "")

    def test_no_direction(self) -> None:
        """Test that the amount is still reported when direction fails."""
        result = try_pattern(self._pattern(), "잔액 3,000원")
        assert not result.success
        assert result.amount == 3000
