"""Duplicate detection and resolution for near-simultaneous notifications.

A purchase is often reported twice, once by the card issuer's app and once by
the bank's. Two transactions with the same amount whose event times are
closer than the duplicate window are treated as one suspected event. A
matching DuplicateRule resolves it immediately; otherwise a PendingDuplicate
waits for the user.
"""

import hashlib
import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace

from banknoti.models import (
    DuplicateResolution,
    DuplicateRule,
    DuplicateTransactionInfo,
    PendingDuplicate,
    Transaction,
    utcnow,
)
from banknoti.storage import DUPLICATE_RULES, PENDING_DUPLICATES, TRANSACTIONS, DocumentStore

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SECONDS = 120


@dataclass(frozen=True)
class NoDuplicate:
    pass


@dataclass(frozen=True)
class AutoResolved:
    """A stored rule decided which of the two transactions to keep."""

    resolution: DuplicateResolution
    rule: DuplicateRule
    first: Transaction
    second: Transaction


@dataclass(frozen=True)
class PendingReview:
    """No rule applies; the pair waits for the user."""

    pending: PendingDuplicate


DuplicateOutcome = NoDuplicate | AutoResolved | PendingReview


def pending_duplicate_id(group_id: str, first_id: str, second_id: str) -> str:
    """Same id for a pair whichever transaction arrived first."""
    data = "|".join([group_id, *sorted((first_id, second_id))])
    return hashlib.sha256(data.encode()).hexdigest()[:40]


def duplicate_rule_id(group_id: str, bank1_id: str, bank2_id: str) -> str:
    data = "|".join([group_id, *sorted((bank1_id, bank2_id))])
    return hashlib.sha256(data.encode()).hexdigest()[:40]


def transactions_to_delete(
    resolution: DuplicateResolution, first_id: str, second_id: str
) -> list[str]:
    if resolution is DuplicateResolution.KEEP_FIRST:
        return [second_id]
    if resolution is DuplicateResolution.KEEP_SECOND:
        return [first_id]
    if resolution is DuplicateResolution.DELETE_BOTH:
        return [first_id, second_id]
    return []


class DuplicateDetector:
    """
    Compare a new transaction with a snapshot of recent ones.

    Usage:
        detector = DuplicateDetector(window_seconds=120)
        outcome = detector.detect(new_tx, recent, rules)
    """

    def __init__(self, window_seconds: float = DEFAULT_WINDOW_SECONDS) -> None:
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.window_seconds = window_seconds

    def find_candidate(
        self, new: Transaction, recent: Iterable[Transaction]
    ) -> Transaction | None:
        """Return the closest-in-time transaction with the same amount inside the window."""
        new_time = new.event_time
        if new_time is None:
            return None

        best: Transaction | None = None
        best_gap = 0.0
        for tx in recent:
            if tx.amount != new.amount or (new.id and tx.id == new.id):
                continue
            tx_time = tx.event_time
            if tx_time is None:
                continue
            gap = abs((tx_time - new_time).total_seconds())
            if gap >= self.window_seconds:
                continue
            if best is None or gap < best_gap:
                best, best_gap = tx, gap
        return best

    def detect(
        self,
        new: Transaction,
        recent: Iterable[Transaction],
        rules: Iterable[DuplicateRule] = (),
    ) -> DuplicateOutcome:
        """
        Decide what to do about a newly stored transaction.

        Args:
            new: Transaction just parsed and saved
            recent: Point-in-time snapshot of the group's recent transactions
            rules: The group's duplicate rules

        Returns:
            NoDuplicate, AutoResolved or PendingReview. In the latter two the
            earlier transaction is "first" and the new one "second".
        """
        existing = self.find_candidate(new, recent)
        if existing is None:
            return NoDuplicate()

        for rule in rules:
            resolution = rule.resolution_for(existing.bank_id, new.bank_id)
            if resolution is None:
                continue
            if resolution is DuplicateResolution.PENDING:
                break
            return AutoResolved(resolution=resolution, rule=rule, first=existing, second=new)

        pending = PendingDuplicate(
            id=pending_duplicate_id(new.group_id, existing.id, new.id),
            group_id=new.group_id,
            user_id=new.user_id,
            amount=new.amount,
            transaction1=DuplicateTransactionInfo.from_transaction(existing),
            transaction2=DuplicateTransactionInfo.from_transaction(new),
            created_at=utcnow(),
        )
        return PendingReview(pending=pending)


class DuplicateResolver:
    """Apply duplicate outcomes and user decisions to a group's store."""

    def __init__(self, store: DocumentStore, group_id: str) -> None:
        self.store = store
        self.group_id = group_id

    def _delete_transactions(self, ids: Iterable[str]) -> list[str]:
        # Deleting an already deleted transaction is not an error.
        return [tx_id for tx_id in ids if tx_id and self.store.delete(TRANSACTIONS, tx_id)]

    def apply_auto(self, outcome: AutoResolved) -> list[str]:
        """
        Carry out a rule-based resolution.

        Returns:
            Ids of the transactions this call deleted
        """
        deleted = self._delete_transactions(
            transactions_to_delete(outcome.resolution, outcome.first.id, outcome.second.id)
        )
        logger.info(
            "Auto-resolved duplicate %s/%s with rule %s (%s, %s): %s, deleted %s",
            outcome.first.id,
            outcome.second.id,
            outcome.rule.id,
            outcome.first.bank_id,
            outcome.second.bank_id,
            outcome.resolution.value,
            deleted,
        )
        return deleted

    def create_pending(self, pending: PendingDuplicate) -> PendingDuplicate:
        """Store a pending duplicate once; a concurrent second creation is ignored."""
        pending = replace(
            pending,
            group_id=self.group_id,
            id=pending.id
            or pending_duplicate_id(
                self.group_id, pending.transaction1.transaction_id, pending.transaction2.transaction_id
            ),
        )
        if self.store.create_if_absent(PENDING_DUPLICATES, pending.id, pending.to_dict()):
            logger.info(
                "Pending duplicate %s: %s (%s) and %s (%s), amount %d",
                pending.id,
                pending.transaction1.transaction_id,
                pending.transaction1.bank_id,
                pending.transaction2.transaction_id,
                pending.transaction2.bank_id,
                pending.amount,
            )
        else:
            logger.debug("Pending duplicate %s already recorded", pending.id)
        return pending

    def get(self, pending_id: str) -> PendingDuplicate | None:
        data = self.store.get(PENDING_DUPLICATES, pending_id)
        return PendingDuplicate.from_dict(pending_id, data) if data is not None else None

    def unresolved(self) -> list[PendingDuplicate]:
        """Pending duplicates still awaiting a decision, oldest first."""
        pending = [
            PendingDuplicate.from_dict(doc_id, data)
            for doc_id, data in self.store.query(
                PENDING_DUPLICATES, groupId=self.group_id, isResolved=False
            )
        ]
        return sorted(pending, key=lambda p: p.created_at.timestamp() if p.created_at else 0.0)

    def resolve(
        self,
        pending_id: str,
        resolution: DuplicateResolution,
        apply_to_future: bool = False,
    ) -> bool:
        """
        Record the user's decision on a pending duplicate.

        Only the call that flips ``isResolved`` performs deletions, so
        resolving the same record twice deletes nothing the second time.

        Args:
            pending_id: PendingDuplicate id
            resolution: Any resolution except PENDING
            apply_to_future: Also store a rule for this bank pair

        Returns:
            True if this call resolved the record, False if it was already
            resolved or does not exist

        Raises:
            ValueError: If resolution is PENDING
        """
        if resolution is DuplicateResolution.PENDING:
            raise ValueError("Cannot resolve a duplicate as PENDING")

        pending = self.get(pending_id)
        if pending is None:
            return False

        won = self.store.compare_and_update(
            PENDING_DUPLICATES,
            pending_id,
            {"isResolved": False},
            {"isResolved": True, "resolvedAt": utcnow(), "resolution": resolution.value},
        )
        if not won:
            logger.debug("Pending duplicate %s was already resolved", pending_id)
            return False

        deleted = self._delete_transactions(
            transactions_to_delete(
                resolution, pending.transaction1.transaction_id, pending.transaction2.transaction_id
            )
        )
        logger.info("Resolved pending duplicate %s as %s, deleted %s", pending_id, resolution.value, deleted)

        if apply_to_future:
            self.upsert_rule(pending.transaction1.bank_id, pending.transaction2.bank_id, resolution)
        return True

    def rules(self) -> list[DuplicateRule]:
        return [
            DuplicateRule.from_dict(doc_id, data)
            for doc_id, data in self.store.query(DUPLICATE_RULES, groupId=self.group_id)
        ]

    def upsert_rule(
        self, bank1_id: str, bank2_id: str, resolution: DuplicateResolution
    ) -> DuplicateRule:
        """
        Store the resolution for a bank pair, replacing any rule for the same pair.

        A rule already stored in the reverse order keeps its orientation and
        receives the mirrored resolution.
        """
        doc_id = duplicate_rule_id(self.group_id, bank1_id, bank2_id)
        rule = DuplicateRule(
            id=doc_id,
            group_id=self.group_id,
            bank1_id=bank1_id,
            bank2_id=bank2_id,
            resolution=resolution,
            created_at=utcnow(),
        )
        if self.store.create_if_absent(DUPLICATE_RULES, doc_id, rule.to_dict()):
            return rule

        data = self.store.get(DUPLICATE_RULES, doc_id) or {}
        existing = DuplicateRule.from_dict(doc_id, data)
        if (existing.bank1_id, existing.bank2_id) == (bank2_id, bank1_id) and bank1_id != bank2_id:
            rule = replace(existing, resolution=resolution.swapped())
        else:
            rule = replace(existing, bank1_id=bank1_id, bank2_id=bank2_id, resolution=resolution)
        self.store.update(DUPLICATE_RULES, doc_id, rule.to_dict())
        return rule
