"""End-to-end processing of one notification: parse, categorize, store, deduplicate, match deposits."""

import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta

from banknoti.catalog import CatalogSnapshot
from banknoti.config import PipelinePolicy
from banknoti.deposits import DepositMatch, DepositPatternMatcher, DepositPatternStore, to_contribution
from banknoti.duplicates import (
    AutoResolved,
    DuplicateDetector,
    DuplicateOutcome,
    DuplicateResolver,
    NoDuplicate,
    PendingReview,
    transactions_to_delete,
)
from banknoti.exceptions import ParseError, ReviewReason
from banknoti.learning import (
    CategorySource,
    CategorySuggestion,
    LearnedMappingStore,
    SmartCategorizer,
    merchant_key,
)
from banknoti.models import (
    LearnedMapping,
    SavingsContribution,
    Transaction,
    TransactionType,
    child_id_from_category,
    parse_timestamp,
    utcnow,
)
from banknoti.parser import NotificationParser, ParsedTransaction
from banknoti.storage import TRANSACTIONS, DocumentStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationEvent:
    """Raw input from a notification listener."""

    text: str
    package: str = ""
    timestamp: datetime | None = None


@dataclass
class PipelineResult:
    """Everything the pipeline did for one event."""

    event: NotificationEvent
    parsed: ParsedTransaction | None = None
    transaction: Transaction | None = None
    suggestion: CategorySuggestion | None = None
    duplicate: DuplicateOutcome = field(default_factory=NoDuplicate)
    deleted_transaction_ids: list[str] = field(default_factory=list)
    deposit_matches: list[DepositMatch] = field(default_factory=list)
    contribution: SavingsContribution | None = None
    review_reasons: list[ReviewReason] = field(default_factory=list)
    error: ParseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kept(self) -> bool:
        """True if the stored transaction survived duplicate resolution."""
        return self.transaction is not None and self.transaction.id not in self.deleted_transaction_ids

    @property
    def needs_review(self) -> bool:
        return bool(self.review_reasons)


class NotificationPipeline:
    """
    Process notifications for one group.

    Usage:
        pipeline = NotificationPipeline(CatalogSnapshot.default(), InMemoryStore(), "family-1")
        result = pipeline.process(NotificationEvent(text, "com.kbstar.kbbank"))
        if not result.ok:
            ...  # result.event.text is queued for manual entry
    """

    def __init__(
        self,
        catalog: CatalogSnapshot,
        store: DocumentStore,
        group_id: str,
        user_id: str = "",
        user_name: str = "",
        policy: PipelinePolicy | None = None,
    ) -> None:
        """
        Initialize pipeline.

        Args:
            catalog: Catalog snapshot to parse against
            store: Document store for all records
            group_id: Group every record is written to
            user_id: User whose device produced the notifications
            user_name: Display name stored on transactions
            policy: Thresholds (defaults to PipelinePolicy())
        """
        self.catalog = catalog
        self.store = store
        self.group_id = group_id
        self.user_id = user_id
        self.user_name = user_name
        self.policy = policy or PipelinePolicy()

        self.parser = NotificationParser(catalog)
        self.mappings = LearnedMappingStore(store, group_id)
        self.categorizer = SmartCategorizer(self.mappings, self.policy.auto_apply_min_use_count)
        self.deposit_patterns = DepositPatternStore(store, group_id, self.policy.deactivation_min_samples)
        self.deposit_matcher = DepositPatternMatcher()
        self.detector = DuplicateDetector(self.policy.duplicate_window_seconds)
        self.resolver = DuplicateResolver(store, group_id)

        self._lock = threading.Lock()
        self._manual_queue: list[tuple[NotificationEvent, ParseError]] = []

    @property
    def manual_entry_queue(self) -> list[tuple[NotificationEvent, ParseError]]:
        """Events that could not be parsed, with the reason, oldest first."""
        with self._lock:
            return self._manual_queue.copy()

    def with_catalog(self, catalog: CatalogSnapshot) -> "NotificationPipeline":
        """Return a pipeline over a refreshed catalog sharing the same store."""
        return NotificationPipeline(
            catalog, self.store, self.group_id, self.user_id, self.user_name, self.policy
        )

    def process(self, event: NotificationEvent) -> PipelineResult:
        """Parse and store a notification posted by an app."""
        try:
            parsed = self.parser.parse(event.text, event.package)
        except ParseError as e:
            return self._failed(event, e)
        return self._commit(event, parsed)

    def process_manual_text(self, text: str, timestamp: datetime | None = None) -> PipelineResult:
        """Parse and store notification text pasted by the user."""
        event = NotificationEvent(text=text, timestamp=timestamp)
        try:
            parsed = self.parser.parse_manual_input(text)
        except ParseError as e:
            return self._failed(event, e)
        return self._commit(event, parsed)

    def _failed(self, event: NotificationEvent, error: ParseError) -> PipelineResult:
        logger.debug("Could not parse notification from %r: %s", event.package, error)
        with self._lock:
            self._manual_queue.append((event, error))
        return PipelineResult(event=event, error=error)

    def recent_transactions(self, amount: int, around: datetime) -> list[Transaction]:
        """Snapshot of stored transactions with this amount near the given time."""
        window = timedelta(seconds=self.policy.duplicate_window_seconds)
        recent = []
        for doc_id, data in self.store.query(TRANSACTIONS, groupId=self.group_id, amount=amount):
            tx = Transaction.from_dict(doc_id, data)
            if tx.event_time is not None and abs(tx.event_time - around) < window:
                recent.append(tx)
        return recent

    def _commit(self, event: NotificationEvent, parsed: ParsedTransaction) -> PipelineResult:
        result = PipelineResult(event=event, parsed=parsed)

        suggestion = self.categorizer.categorize(
            merchant_key(parsed.merchant_name, parsed.description), parsed.type, parsed.merchant
        )
        result.suggestion = suggestion
        if suggestion.source is CategorySource.DEFAULT:
            result.review_reasons.append(ReviewReason.LOW_CONFIDENCE_MATCH)

        is_confirmed = parsed.amount <= self.policy.high_amount_threshold
        if not is_confirmed:
            result.review_reasons.append(ReviewReason.HIGH_AMOUNT)

        now = utcnow()
        tx_date = parse_timestamp(event.timestamp) or now
        transaction = parsed.to_transaction(
            group_id=self.group_id,
            user_id=self.user_id,
            user_name=self.user_name,
            category=suggestion.category,
            linked_child_id=child_id_from_category(suggestion.category) or "",
            transaction_date=tx_date,
            created_at=now,
            is_confirmed=is_confirmed,
        )

        doc_id = self.store.create(TRANSACTIONS, transaction.to_dict())
        transaction = replace(transaction, id=doc_id or "")
        result.transaction = transaction

        # Read after our own write: a listener racing us on the same purchase
        # either sees our transaction or wrote before we read.
        recent = [
            tx for tx in self.recent_transactions(transaction.amount, tx_date) if tx.id != transaction.id
        ]

        outcome = self.detector.detect(transaction, recent, self.resolver.rules())
        result.duplicate = outcome
        if isinstance(outcome, AutoResolved):
            self.resolver.apply_auto(outcome)
            # Both racers reach the same decision; only one of them performs each delete.
            result.deleted_transaction_ids = transactions_to_delete(
                outcome.resolution, outcome.first.id, outcome.second.id
            )
        elif isinstance(outcome, PendingReview):
            result.duplicate = PendingReview(self.resolver.create_pending(outcome.pending))
            result.review_reasons.append(ReviewReason.DUPLICATE_CONFLICT)

        if transaction.type is TransactionType.INCOME and result.kept:
            self._match_deposit(result, transaction)

        return result

    def _match_deposit(self, result: PipelineResult, transaction: Transaction) -> None:
        matches = self.deposit_matcher.match(
            transaction.original_text, self.deposit_patterns.active_patterns()
        )
        result.deposit_matches = matches
        if not matches:
            return

        top = matches[0]
        contribution = to_contribution(
            top, transaction.original_text, user_id=self.user_id, user_name=self.user_name
        )
        result.contribution = self.deposit_patterns.save_contribution(contribution)
        if top.needs_review:
            result.review_reasons.append(ReviewReason.LOW_CONFIDENCE_MATCH)

    def record_correction(self, transaction: Transaction, category: str) -> LearnedMapping | None:
        """
        Apply a user's category change to a stored transaction and learn from it.

        Returns:
            The updated learned mapping, or None if the transaction has no
            usable merchant name
        """
        self.store.update(
            TRANSACTIONS,
            transaction.id,
            {"category": category, "linkedChildId": child_id_from_category(category) or ""},
        )
        return self.mappings.record_correction(
            merchant_key(transaction.merchant_name, transaction.description), transaction.type, category
        )

    def record_deposit_feedback(self, match: DepositMatch, accepted: bool) -> None:
        """Feed the user's verdict on an automatic contribution back into the pattern."""
        self.deposit_patterns.record_outcome(match.pattern.id, accepted)
