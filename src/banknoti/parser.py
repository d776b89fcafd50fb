"""Notification parser: raw notification text to a classified transaction."""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from banknoti.catalog import CatalogSnapshot
from banknoti.exceptions import AmbiguousDirection, AmountNotFound, NoMatchingBank, ParseError
from banknoti.models import (
    BankConfig,
    CustomBankPattern,
    InputSource,
    Merchant,
    PatternTestResult,
    Transaction,
    TransactionType,
)
from banknoti.utils.parsing import (
    extract_account_number,
    extract_description,
    extract_merchant_name,
    extract_sender_name,
    first_keyword_index,
    parse_amount,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedTransaction:
    """Result of parsing one notification against one bank config."""

    amount: int
    type: TransactionType
    bank: BankConfig
    merchant: Merchant
    merchant_name: str
    description: str
    original_text: str
    sender_name: str = ""
    account_number: str = ""
    source_package: str = ""
    source: InputSource = InputSource.NOTIFICATION

    def to_transaction(self, **fields: Any) -> Transaction:
        """
        Build a Transaction from the parse result.

        Args:
            **fields: Extra Transaction fields (group_id, user_id, category...)

        Returns:
            Transaction populated with the parsed values
        """
        return Transaction(
            type=self.type,
            amount=self.amount,
            bank_id=self.bank.bank_id,
            bank_name=self.bank.display_name,
            description=self.description,
            merchant=self.merchant.id,
            merchant_name=self.merchant_name,
            source=self.source,
            original_text=self.original_text,
            **fields,
        )


def extract_amount(text: str, amount_regex: str) -> int | None:
    """
    Extract the transaction amount using a bank's amount pattern.

    The first match in text order wins; its first capturing group, with
    grouping separators removed, is the amount.

    Args:
        text: Notification text
        amount_regex: Pattern with one capturing group around the numeral

    Returns:
        Non-negative amount, or None if the pattern does not match

    Raises:
        re.error: If amount_regex is not a valid pattern
    """
    match = re.search(amount_regex, text)
    if match is None or not match.groups() or match.group(1) is None:
        return None
    return parse_amount(match.group(1))


def determine_direction(text: str, bank: BankConfig) -> TransactionType | None:
    """
    Classify a notification as income or expense.

    The keyword found earliest in the text decides; a tie goes to expense.
    Returns None when neither keyword set occurs.
    """
    income_at = first_keyword_index(text, bank.income_keywords)
    expense_at = first_keyword_index(text, bank.expense_keywords)

    if income_at is None and expense_at is None:
        return None
    if expense_at is None:
        return TransactionType.INCOME
    if income_at is None:
        return TransactionType.EXPENSE
    return TransactionType.INCOME if income_at < expense_at else TransactionType.EXPENSE


class NotificationParser:
    """
    Parse bank and card notifications against a catalog snapshot.

    Usage:
        parser = NotificationParser(CatalogSnapshot.default())
        parsed = parser.parse("[KB국민]승인 12,345원 스타벅스 사용", "com.kbstar.kbbank")
    """

    def __init__(self, catalog: CatalogSnapshot) -> None:
        self.catalog = catalog

    def parse(
        self,
        text: str,
        source_package: str,
        candidate_configs: Sequence[BankConfig] | None = None,
    ) -> ParsedTransaction:
        """
        Parse a notification posted by the given app.

        Args:
            text: Raw notification text
            source_package: Identifier of the app that posted the notification
            candidate_configs: Configs to consider (defaults to the catalog's banks)

        Returns:
            ParsedTransaction

        Raises:
            NoMatchingBank: No config accepts source_package
            AmbiguousDirection: No income or expense keyword found
            AmountNotFound: The amount pattern did not match
        """
        configs = self.catalog.banks if candidate_configs is None else candidate_configs
        candidates = [config for config in configs if config.accepts(source_package)]
        if not candidates:
            raise NoMatchingBank(f"No enabled bank config for package {source_package!r}", text)

        return self._parse_first(text, candidates, source_package, InputSource.NOTIFICATION)

    def parse_manual_input(
        self,
        text: str,
        candidate_configs: Sequence[BankConfig] | None = None,
    ) -> ParsedTransaction:
        """
        Parse notification text pasted by the user, trying every config in order.

        Raises:
            NoMatchingBank: The catalog has no enabled configs
            ParseError: No config could parse the text
        """
        configs = list(self.catalog.banks if candidate_configs is None else candidate_configs)
        if not configs:
            raise NoMatchingBank("No enabled bank configs", text)

        return self._parse_first(text, configs, "", InputSource.MANUAL_TEXT_INPUT)

    def _parse_first(
        self,
        text: str,
        configs: Sequence[BankConfig],
        source_package: str,
        source: InputSource,
    ) -> ParsedTransaction:
        first_error: ParseError | None = None
        for config in configs:
            try:
                return self.parse_with_config(text, config, source_package, source)
            except ParseError as e:
                logger.debug("Config %s could not parse notification: %s", config.bank_id, e)
                if first_error is None:
                    first_error = e
        if first_error is None:
            raise NoMatchingBank("No bank config to try", text)
        raise first_error

    def parse_with_config(
        self,
        text: str,
        config: BankConfig,
        source_package: str = "",
        source: InputSource = InputSource.NOTIFICATION,
    ) -> ParsedTransaction:
        """Parse text with a single bank config."""
        try:
            amount = extract_amount(text, config.amount_regex)
        except re.error as e:
            logger.warning("Invalid amount regex for %s: %s", config.bank_id, e)
            raise AmountNotFound(f"Invalid amount pattern for {config.bank_id}: {e}", text) from e
        if amount is None:
            raise AmountNotFound(f"Amount pattern for {config.bank_id} did not match", text)

        direction = determine_direction(text, config)
        if direction is None:
            raise AmbiguousDirection(
                f"No income or expense keyword for {config.bank_id} found", text
            )

        merchant = self.catalog.detect_merchant(text)
        if merchant.is_fallback:
            merchant_name = extract_merchant_name(text, config.merchant_regex_list)
        else:
            merchant_name = merchant.display_name

        sender_name = ""
        if direction is TransactionType.INCOME:
            sender_name = extract_sender_name(text)

        return ParsedTransaction(
            amount=amount,
            type=direction,
            bank=config,
            merchant=merchant,
            merchant_name=merchant_name,
            description=extract_description(text),
            original_text=text,
            sender_name=sender_name,
            account_number=extract_account_number(text),
            source_package=source_package,
            source=source,
        )


def test_pattern(pattern: CustomBankPattern, text: str) -> PatternTestResult:
    """
    Try a bank pattern against sample text without raising.

    Args:
        pattern: Bank pattern being edited
        text: Sample notification text

    Returns:
        PatternTestResult describing what was extracted or what went wrong
    """
    try:
        match = re.search(pattern.amount_regex, text)
    except re.error as e:
        return PatternTestResult(success=False, error_message=f"Invalid amount regex: {e}")

    if match is None:
        return PatternTestResult(success=False, error_message="Amount not found; check the amount regex")
    if not match.groups() or match.group(1) is None:
        return PatternTestResult(
            success=False,
            error_message="Amount regex needs a capturing group around the number",
        )

    amount = parse_amount(match.group(1))
    if amount is None:
        return PatternTestResult(
            success=False,
            error_message=f"Could not convert amount to a number: {match.group(1)}",
        )

    config = pattern.to_bank_config()
    direction = determine_direction(text, config)
    if direction is None:
        return PatternTestResult(
            success=False,
            amount=amount,
            matched_pattern=pattern.amount_regex,
            error_message="No income or expense keyword found",
        )

    merchant_name: str | None = None
    for merchant_regex in pattern.merchant_regex_list:
        try:
            merchant_match = re.search(merchant_regex, text)
        except re.error:
            continue
        if merchant_match and merchant_match.groups() and merchant_match.group(1):
            merchant_name = merchant_match.group(1).strip() or None
            if merchant_name:
                break

    return PatternTestResult(
        success=True,
        amount=amount,
        transaction_type=direction,
        merchant_name=merchant_name,
        matched_pattern=pattern.amount_regex,
    )


# Keep pytest from collecting the function above when imported into a test module.
test_pattern.__test__ = False  # type: ignore[attr-defined]
