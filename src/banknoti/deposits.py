"""Match incoming deposits to savings goals using learned patterns."""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, replace

from banknoti.models import (
    DEFAULT_AMOUNT_REGEX,
    LearnedDepositPattern,
    MatchConfidence,
    SavingsContribution,
    utcnow,
)
from banknoti.storage import LEARNED_DEPOSIT_PATTERNS, SAVINGS_CONTRIBUTIONS, DocumentStore
from banknoti.utils.parsing import ACCOUNT_NUMBER_PATTERNS, parse_amount

logger = logging.getLogger(__name__)

# Characters inspected on each side of a confirmed sender name
SENDER_CONTEXT_CHARS = 15


@dataclass(frozen=True)
class DepositMatch:
    """One learned pattern that matched a deposit notification."""

    pattern: LearnedDepositPattern
    amount: int
    sender_name: str
    confidence: MatchConfidence
    account_matched: bool = False
    needs_review: bool = True


def _compile(regex: str, pattern_id: str, label: str) -> re.Pattern[str] | None:
    try:
        return re.compile(regex)
    except re.error as e:
        logger.warning("Skipping deposit pattern %s: invalid %s regex %r: %s", pattern_id, label, regex, e)
        return None


def _matched_text(match: re.Match[str]) -> str:
    value = match.group(1) if match.re.groups else match.group(0)
    return (value or "").strip()


def account_pattern_regex(account_pattern: str) -> re.Pattern[str] | None:
    """
    Build a regex for a possibly masked account number.

    A digit matches itself or a mask character, ``*`` matches any digit or
    mask, and hyphens are optional, so ``***-***-123456`` also finds
    ``110-123-123456`` and ``110123123456``.
    """
    parts: list[str] = []
    for char in account_pattern.strip():
        if char.isdigit():
            parts.append(f"[{char}*]")
        elif char == "*":
            parts.append(r"[0-9*]")
        elif char == "-":
            parts.append("-?")
        elif char.isspace():
            continue
        else:
            parts.append(re.escape(char))
    if not any(part != "-?" for part in parts):
        return None
    return re.compile("".join(parts))


def account_matches(account_pattern: str, text: str) -> bool:
    regex = account_pattern_regex(account_pattern)
    return bool(regex and regex.search(text))


class DepositPatternMatcher:
    """
    Score learned deposit patterns against a notification.

    Confidence levels:
        high    sender regex, amount and account number pattern all match
        medium  sender regex and amount match
        low     amount matches and only the pattern's bank name appears

    Everything below high needs review, and so does every match whenever
    the top confidence is shared by more than one pattern.
    """

    def match(self, text: str, patterns: Iterable[LearnedDepositPattern]) -> list[DepositMatch]:
        matches = [
            result
            for result in (self._match_one(text, pattern) for pattern in patterns if pattern.is_active)
            if result is not None
        ]
        matches.sort(key=lambda m: m.confidence.rank, reverse=True)

        if len(matches) > 1 and matches[0].confidence is matches[1].confidence:
            matches = [replace(m, needs_review=True) for m in matches]
        return matches

    def _match_one(self, text: str, pattern: LearnedDepositPattern) -> DepositMatch | None:
        amount_regex = _compile(pattern.amount_regex or DEFAULT_AMOUNT_REGEX, pattern.id, "amount")
        if amount_regex is None:
            return None
        amount_match = amount_regex.search(text)
        amount = parse_amount(_matched_text(amount_match)) if amount_match else None
        if not amount:
            return None

        sender_name = ""
        if pattern.sender_name_regex:
            sender_regex = _compile(pattern.sender_name_regex, pattern.id, "sender name")
            if sender_regex is None:
                return None
            sender_match = sender_regex.search(text)
            if sender_match:
                sender_name = _matched_text(sender_match)

        account_matched = bool(pattern.account_number_pattern) and account_matches(
            pattern.account_number_pattern, text
        )

        if sender_name:
            confidence = MatchConfidence.HIGH if account_matched else MatchConfidence.MEDIUM
        elif pattern.bank_name and pattern.bank_name in text:
            confidence = MatchConfidence.LOW
        else:
            return None

        return DepositMatch(
            pattern=pattern,
            amount=amount,
            sender_name=sender_name,
            confidence=confidence,
            account_matched=account_matched,
            needs_review=confidence is not MatchConfidence.HIGH,
        )


def build_amount_regex(text: str, amount: int) -> str:
    if f"{amount:,}" in text:
        return r"([0-9,]+)\s*원"
    if str(amount) in text:
        return r"([0-9]+)\s*원"
    return DEFAULT_AMOUNT_REGEX


def build_sender_name_regex(text: str, sender_name: str) -> str:
    """Guess a sender regex from where the confirmed name sits in the text."""
    if not sender_name:
        return ""
    index = text.find(sender_name)
    if index < 0:
        return ""

    before = text[max(0, index - SENDER_CONTEXT_CHARS):index]
    end = index + len(sender_name)
    after = text[end:end + SENDER_CONTEXT_CHARS]

    if "입금" in before:
        return r"입금\s*[0-9,]*\s*원?\s*([가-힣]{2,4})"
    if "님" in after:
        return r"([가-힣]{2,4})님"
    if "입금" in after:
        return r"([가-힣]{2,4})\s+[0-9,]*\s*원?\s*입금"
    return f"({re.escape(sender_name)})"


def extract_account_number_pattern(text: str) -> str:
    # Only the full-number forms; bare last-four digits are too weak to learn.
    for pattern in ACCOUNT_NUMBER_PATTERNS[:3]:
        match = pattern.search(text)
        if match:
            return match.group(0)
    return ""


def learn_deposit_pattern(
    group_id: str,
    savings_goal_id: str,
    text: str,
    amount: int,
    sender_name: str,
    bank_name: str = "",
) -> LearnedDepositPattern:
    """
    Build a pattern from a deposit the user confirmed as a goal contribution.

    Args:
        group_id: Owning group
        savings_goal_id: Goal the deposit was credited to
        text: Original notification text
        amount: Amount the user confirmed
        sender_name: Sender the user confirmed
        bank_name: Display name of the bank that sent the notification

    Returns:
        Unsaved LearnedDepositPattern
    """
    return LearnedDepositPattern(
        group_id=group_id,
        savings_goal_id=savings_goal_id,
        sample_notification_text=text,
        bank_name=bank_name,
        account_number_pattern=extract_account_number_pattern(text),
        sender_name_regex=build_sender_name_regex(text, sender_name),
        amount_regex=build_amount_regex(text, amount),
        is_active=True,
        created_at=utcnow(),
    )


def to_contribution(
    match: DepositMatch,
    original_text: str,
    user_id: str = "",
    user_name: str = "",
) -> SavingsContribution:
    """Turn an automatic deposit match into a goal contribution."""
    return SavingsContribution(
        goal_id=match.pattern.savings_goal_id,
        user_id=user_id,
        user_name=user_name,
        amount=match.amount,
        is_auto_detected=True,
        detected_sender_name=match.sender_name,
        match_confidence=match.confidence,
        original_notification_text=original_text,
        needs_review=match.needs_review,
        created_at=utcnow(),
    )


def manual_contribution(
    goal_id: str,
    amount: int,
    original_text: str = "",
    user_id: str = "",
    user_name: str = "",
    sender_name: str = "",
) -> SavingsContribution:
    """A contribution entered or confirmed by the user; never needs review."""
    return SavingsContribution(
        goal_id=goal_id,
        user_id=user_id,
        user_name=user_name,
        amount=amount,
        is_auto_detected=False,
        detected_sender_name=sender_name,
        match_confidence=MatchConfidence.MANUAL,
        original_notification_text=original_text,
        needs_review=False,
        created_at=utcnow(),
    )


class DepositPatternStore:
    """Persistence and feedback bookkeeping for a group's deposit patterns."""

    def __init__(self, store: DocumentStore, group_id: str, deactivation_min_samples: int = 5) -> None:
        self.store = store
        self.group_id = group_id
        self.deactivation_min_samples = deactivation_min_samples

    def save(self, pattern: LearnedDepositPattern) -> LearnedDepositPattern:
        pattern = replace(pattern, group_id=self.group_id)
        doc_id = self.store.create(LEARNED_DEPOSIT_PATTERNS, pattern.to_dict(), doc_id=pattern.id or None)
        if doc_id is None:
            self.store.update(LEARNED_DEPOSIT_PATTERNS, pattern.id, pattern.to_dict())
            doc_id = pattern.id
        return replace(pattern, id=doc_id)

    def learn(
        self,
        savings_goal_id: str,
        text: str,
        amount: int,
        sender_name: str,
        bank_name: str = "",
    ) -> LearnedDepositPattern:
        """Learn and persist a pattern from a confirmed deposit."""
        pattern = learn_deposit_pattern(
            self.group_id, savings_goal_id, text, amount, sender_name, bank_name
        )
        return self.save(pattern)

    def get(self, pattern_id: str) -> LearnedDepositPattern | None:
        data = self.store.get(LEARNED_DEPOSIT_PATTERNS, pattern_id)
        return LearnedDepositPattern.from_dict(pattern_id, data) if data is not None else None

    def active_patterns(self, savings_goal_id: str | None = None) -> list[LearnedDepositPattern]:
        filters: dict[str, object] = {"groupId": self.group_id, "isActive": True}
        if savings_goal_id is not None:
            filters["savingsGoalId"] = savings_goal_id
        return [
            LearnedDepositPattern.from_dict(doc_id, data)
            for doc_id, data in self.store.query(LEARNED_DEPOSIT_PATTERNS, **filters)
        ]

    def record_outcome(self, pattern_id: str, accepted: bool) -> LearnedDepositPattern | None:
        """
        Count a user's acceptance or rejection of a pattern's match.

        Counters are incremented atomically. Once the pattern has been applied
        at least ``deactivation_min_samples`` times and failures outnumber
        successes it is deactivated; it is never reactivated here.

        Returns:
            Pattern state after the update, or None if it no longer exists
        """
        now = utcnow()
        if accepted:
            data = self.store.increment(
                LEARNED_DEPOSIT_PATTERNS, pattern_id, "successCount", 1, extra={"lastUsedAt": now}
            )
        else:
            data = self.store.increment(LEARNED_DEPOSIT_PATTERNS, pattern_id, "failCount", 1)
        if data is None:
            return None

        pattern = LearnedDepositPattern.from_dict(pattern_id, data)
        if (
            pattern.is_active
            and pattern.total_applications >= self.deactivation_min_samples
            and pattern.fail_count > pattern.success_count
        ):
            if self.store.compare_and_update(
                LEARNED_DEPOSIT_PATTERNS, pattern_id, {"isActive": True}, {"isActive": False}
            ):
                logger.info(
                    "Deactivated deposit pattern %s (%d successes, %d failures)",
                    pattern_id,
                    pattern.success_count,
                    pattern.fail_count,
                )
            pattern = replace(pattern, is_active=False)
        return pattern

    def deactivate_pattern(self, pattern_id: str) -> bool:
        return self.store.update(LEARNED_DEPOSIT_PATTERNS, pattern_id, {"isActive": False})

    def reactivate_pattern(self, pattern_id: str) -> bool:
        """Explicitly re-enable a pattern, starting its statistics over."""
        return self.store.update(
            LEARNED_DEPOSIT_PATTERNS,
            pattern_id,
            {"isActive": True, "successCount": 0, "failCount": 0},
        )

    def save_contribution(self, contribution: SavingsContribution) -> SavingsContribution:
        doc_id = self.store.create(SAVINGS_CONTRIBUTIONS, contribution.to_dict())
        return replace(contribution, id=doc_id or "")
