"""Tests for parsing utilities."""

import logging

import pytest

from banknoti.utils import (
    extract_account_number,
    extract_description,
    extract_merchant_name,
    extract_sender_name,
    first_keyword_index,
    normalize_merchant_name,
    parse_amount,
)


class TestParseAmount:
    """Tests for parse_amount function."""

    def test_grouping_separators(self) -> None:
        """Test that commas are removed."""
        assert parse_amount("12,345") == 12345
        assert parse_amount("1,234,567") == 1234567

    def test_plain_number(self) -> None:
        """Test a number without separators."""
        assert parse_amount("500") == 500

    def test_whitespace(self) -> None:
        """Test that surrounding whitespace is ignored."""
        assert parse_amount(" 3,000 ") == 3000

    def test_invalid(self) -> None:
        """Test strings that are not amounts."""
        assert parse_amount("") is None
        assert parse_amount("abc") is None
        assert parse_amount("-500") is None
        assert parse_amount("１２３") is None


class TestFirstKeywordIndex:
    """Tests for first_keyword_index function."""

    def test_earliest_position(self) -> None:
        """Test that the earliest occurrence of any keyword is returned."""
        assert first_keyword_index("출금 후 입금", ("입금", "출금")) == 0

    def test_no_keyword(self) -> None:
        """Test that None is returned when nothing matches."""
        assert first_keyword_index("잔액 1,000원", ("입금",)) is None

    def test_empty_keywords_ignored(self) -> None:
        """Test that empty strings never match at position 0."""
        assert first_keyword_index("입금", ("", "입금")) == 0
        assert first_keyword_index("abc", ("",)) is None


class TestNormalizeMerchantName:
    """Tests for normalize_merchant_name function."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("스타벅스 강남점", "스타벅스강남점"),
            ("GS25(역삼점)", "gs25역삼점"),
            ("Coupang-Eats_주문", "coupangeats주문"),
            ("（주）배달의민족", "주배달의민족"),
            ("★BEST★ 마트!!", "best마트"),
        ],
    )
    def test_normalization(self, name: str, expected: str) -> None:
        """Test lowercasing and stripping of separators and symbols."""
        assert normalize_merchant_name(name) == expected

    def test_truncates_to_30(self) -> None:
        """Test that long names are truncated."""
        assert len(normalize_merchant_name("가" * 40)) == 30

    @pytest.mark.parametrize(
        "name",
        ["스타벅스 강남점", "  Mixed-Case (Store) ", "★" * 5, "가" * 40, "ÀBC déf"],
    )
    def test_idempotent(self, name: str) -> None:
        """Test normalize(normalize(x)) == normalize(x)."""
        once = normalize_merchant_name(name)
        assert normalize_merchant_name(once) == once


class TestExtractMerchantName:
    """Tests for extract_merchant_name function."""

    def test_merchant_after_amount(self) -> None:
        """Test the "승인 12,345원 가게" format."""
        assert extract_merchant_name("[KB국민]승인 12,345원 스타벅스 사용") == "스타벅스"

    def test_location_suffix(self) -> None:
        """Test the "...에서" format."""
        assert extract_merchant_name("동네빵집에서 4,500원") == "동네빵집"

    def test_custom_pattern_first(self) -> None:
        """Test that user patterns take priority over built-ins."""
        text = "상호[빵굽는집] 결제 3,000원 동네빵집"
        assert extract_merchant_name(text) == "동네빵집"
        assert extract_merchant_name(text, [r"상호\[(.+?)\]"]) == "빵굽는집"

    def test_invalid_custom_pattern_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that broken user regexes are skipped with a warning."""
        with caplog.at_level(logging.WARNING):
            result = extract_merchant_name("동네빵집에서 4,500원", ["([unclosed"])

        assert result == "동네빵집"
        assert "Ignoring invalid merchant regex" in caplog.text

    def test_nothing_found(self) -> None:
        """Test that empty string is returned when no merchant is found."""
        assert extract_merchant_name("잔액 1,000") == ""


class TestExtractSenderName:
    """Tests for extract_sender_name function."""

    def test_after_amount(self) -> None:
        """Test the "입금 50,000원 이름" format."""
        assert extract_sender_name("입금 50,000원 홍길동") == "홍길동"

    def test_honorific(self) -> None:
        """Test the "이름님이 ... 보냈어요" format."""
        assert extract_sender_name("김철수님이 10,000원을 보냈어요") == "김철수"

    def test_masked(self) -> None:
        """Test a masked name."""
        assert extract_sender_name("[토스] 김*수 30,000원") == "김*수"

    def test_none(self) -> None:
        """Test text without a sender."""
        assert extract_sender_name("승인 12,000원") == ""


class TestExtractAccountNumber:
    """Tests for extract_account_number function."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("110-123-456789 입금 1,000원", "110-123-456789"),
            ("***-***-123456 입금", "***-***-123456"),
            ("계좌 110***456789 입금", "110***456789"),
            ("(1234) 입금 5,000원", "1234"),
        ],
    )
    def test_formats(self, text: str, expected: str) -> None:
        """Test supported account number formats."""
        assert extract_account_number(text) == expected

    def test_none(self) -> None:
        """Test text without an account number."""
        assert extract_account_number("승인 12,000원") == ""


class TestExtractDescription:
    """Tests for extract_description function."""

    def test_bracketed(self) -> None:
        """Test that a bracketed prefix is used."""
        assert extract_description("[KB국민]승인 12,345원") == "KB국민"

    def test_fallback_first_50(self) -> None:
        """Test the fallback to the first 50 characters."""
        text = "x" * 80
        assert extract_description(text) == "x" * 50
