#!/usr/bin/env python3
"""Command-line interface for banknoti."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from banknoti.catalog import CatalogSnapshot
from banknoti.config import (
    build_catalog,
    create_default_config,
    get_firestore_settings,
    get_policy,
    load_config,
    save_json_config,
)
from banknoti.exceptions import ParseError, StoreError
from banknoti.firestore import FirestoreStore
from banknoti.learning import CategorySuggestion, SmartCategorizer, merchant_key
from banknoti.logging_config import setup_logging
from banknoti.models import CustomBankPattern, Transaction
from banknoti.parser import NotificationParser, ParsedTransaction, test_pattern
from banknoti.pipeline import NotificationEvent, NotificationPipeline, PipelineResult

logger = logging.getLogger(__name__)


def _parsed_to_dict(parsed: ParsedTransaction, suggestion: CategorySuggestion | None) -> dict[str, Any]:
    data: dict[str, Any] = {
        "type": parsed.type.value,
        "amount": parsed.amount,
        "bankId": parsed.bank.bank_id,
        "bankName": parsed.bank.display_name,
        "merchant": parsed.merchant.id,
        "merchantName": parsed.merchant_name,
        "description": parsed.description,
        "senderName": parsed.sender_name,
        "accountNumber": parsed.account_number,
        "source": parsed.source.value,
    }
    if suggestion is not None:
        data["category"] = suggestion.category
        data["categoryConfidence"] = round(suggestion.confidence, 2)
        data["categorySource"] = suggestion.source.value
        data["autoApply"] = suggestion.auto_apply
    return data


def _result_to_dict(
    result: PipelineResult, parsed: ParsedTransaction, transaction: Transaction
) -> dict[str, Any]:
    data = _parsed_to_dict(parsed, result.suggestion)
    data["transactionId"] = transaction.id
    data["isConfirmed"] = transaction.is_confirmed
    data["kept"] = result.kept
    data["duplicate"] = type(result.duplicate).__name__
    data["reviewReasons"] = [reason.value for reason in result.review_reasons]
    if result.contribution is not None:
        data["contribution"] = {
            "goalId": result.contribution.goal_id,
            "amount": result.contribution.amount,
            "matchConfidence": result.contribution.match_confidence.value,
            "needsReview": result.contribution.needs_review,
        }
    return data


def _print_data(data: dict[str, Any], as_json: bool) -> None:
    if as_json:
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return
    for key, value in data.items():
        if value in ("", None):
            continue
        print(f"  {key:<20} {value}")


def _list_banks(catalog: CatalogSnapshot) -> None:
    print("Available banks:")
    for bank in catalog.banks:
        marker = " (custom)" if bank.is_custom else ""
        print(f"  - {bank.bank_id}: {bank.display_name}{marker}")
        print(f"    Packages: {', '.join(bank.package_names)}")


def _list_merchants(catalog: CatalogSnapshot) -> None:
    print("Merchants (matched in this order):")
    for merchant in catalog.merchants:
        keywords = ", ".join(merchant.keywords) or "(fallback)"
        print(f"  - {merchant.id}: {merchant.display_name} [{merchant.default_category.value}]")
        print(f"    Keywords: {keywords}")


def _run_test_pattern(catalog: CatalogSnapshot, bank_id: str, text: str, as_json: bool) -> int:
    bank = catalog.bank(bank_id)
    if bank is None:
        print(f"Error: unknown bank id {bank_id!r}", file=sys.stderr)
        return 1

    result = test_pattern(CustomBankPattern.from_bank_config(bank), text)
    data = {
        "success": result.success,
        "amount": result.amount,
        "type": result.transaction_type.value if result.transaction_type else None,
        "merchantName": result.merchant_name,
        "matchedPattern": result.matched_pattern,
        "error": result.error_message,
    }
    _print_data(data, as_json)
    return 0 if result.success else 1


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Parse Korean bank and card notifications into transactions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  banknoti "[KB국민]승인 12,345원 스타벅스 사용" --package com.kbstar.kbbank
  banknoti "입금 50,000원 홍길동" --manual --json
  banknoti --test-pattern toss "토스 입금 30,000원"
  banknoti "[신한]출금 8,000원 GS25" --package com.shinhan.sbanking --save --group family-1
  banknoti --list-banks
        """,
    )

    parser.add_argument(
        "text",
        nargs="?",
        help="Notification text to parse",
    )
    parser.add_argument(
        "--package",
        help="Package name of the app that posted the notification",
    )
    parser.add_argument(
        "--manual",
        action="store_true",
        help="Parse as pasted text, trying every enabled bank",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config.json file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Write log lines to stderr as JSON",
    )

    # Catalog
    parser.add_argument(
        "--list-banks",
        action="store_true",
        help="List enabled bank configs",
    )
    parser.add_argument(
        "--list-merchants",
        action="store_true",
        help="List merchants in match order",
    )
    parser.add_argument(
        "--test-pattern",
        nargs=2,
        metavar=("BANK_ID", "TEXT"),
        help="Try a bank's pattern against sample text",
    )

    # Setup
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show current configuration",
    )
    parser.add_argument(
        "--init-config",
        action="store_true",
        help="Write a default config.json to the config directory",
    )

    # Firestore
    parser.add_argument(
        "--save",
        action="store_true",
        help="Run the full pipeline and store the result in Firestore",
    )
    parser.add_argument(
        "--group",
        help="Group id to store transactions under (with --save)",
    )
    parser.add_argument(
        "--id-token",
        help="Firebase ID token (or configure in config.json)",
    )

    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING, json_format=args.log_json)

    if args.init_config:
        path = save_json_config(create_default_config(), args.config)
        print(f"Wrote default configuration to {path}")
        return 0

    config: dict[str, Any] | None = load_config(args.config)

    if args.show_config:
        if config:
            print(json.dumps(config, ensure_ascii=False, indent=2))
        else:
            print("No configuration found.")
            print("Run 'banknoti --init-config' to create one.")
        return 0

    catalog = build_catalog(config)

    if args.list_banks:
        _list_banks(catalog)
        return 0

    if args.list_merchants:
        _list_merchants(catalog)
        return 0

    if args.test_pattern:
        bank_id, text = args.test_pattern
        return _run_test_pattern(catalog, bank_id, text, args.json)

    if not args.text:
        parser.print_help()
        return 1

    if not args.manual and not args.package:
        print("Error: --package is required unless --manual is given", file=sys.stderr)
        return 1

    if args.save:
        return _save(args, config, catalog)

    notification_parser = NotificationParser(catalog)
    try:
        if args.manual:
            parsed = notification_parser.parse_manual_input(args.text)
        else:
            parsed = notification_parser.parse(args.text, args.package)
    except ParseError as e:
        print(f"Could not parse notification ({e.reason}): {e}", file=sys.stderr)
        return 1

    suggestion = SmartCategorizer().categorize(
        merchant_key(parsed.merchant_name, parsed.description), parsed.type, parsed.merchant
    )
    _print_data(_parsed_to_dict(parsed, suggestion), args.json)
    return 0


def _save(args: argparse.Namespace, config: dict[str, Any] | None, catalog: CatalogSnapshot) -> int:
    settings = get_firestore_settings(config, args.id_token)
    if settings is None:
        print("Error: Firestore project_id and id_token are required. Use --id-token "
              "or configure in config.json", file=sys.stderr)
        return 1
    if not args.group:
        print("Error: --group is required with --save", file=sys.stderr)
        return 1

    store = FirestoreStore(settings["project_id"], settings["id_token"], settings["database"])
    pipeline = NotificationPipeline(catalog, store, args.group, policy=get_policy(config))

    try:
        if args.manual:
            result = pipeline.process_manual_text(args.text)
        else:
            result = pipeline.process(NotificationEvent(text=args.text, package=args.package))
    except StoreError as e:
        logger.debug("Store failure", exc_info=True)
        print(f"Error saving transaction: {e}", file=sys.stderr)
        return 1

    if result.error is not None:
        print(f"Could not parse notification ({result.error.reason}): {result.error}",
              file=sys.stderr)
        return 1
    if result.parsed is None or result.transaction is None:
        print("Error: no transaction was stored", file=sys.stderr)
        return 1

    _print_data(_result_to_dict(result, result.parsed, result.transaction), args.json)
    return 0


if __name__ == "__main__":
    sys.exit(main())
