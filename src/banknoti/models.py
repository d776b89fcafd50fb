"""Data models for parsed notifications, learned state and duplicate records.

Persisted records round-trip through ``to_dict``/``from_dict`` using the
camelCase field names of the shared document store. ``from_dict`` never
raises on old or partial documents: missing fields take their defaults and
unknown enum names resolve to each enum's fallback member.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any

DEFAULT_AMOUNT_REGEX = r"([0-9,]+)\s*원"


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> datetime | None:
    """
    Convert a stored timestamp to an aware datetime.

    Accepts datetimes, ISO-8601 strings and epoch milliseconds (the mobile
    client's ``lastModified`` format). Anything else yields None.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return None


def _str(data: dict[str, Any], key: str, default: str = "") -> str:
    value = data.get(key)
    return value if isinstance(value, str) else default


def _int(data: dict[str, Any], key: str, default: int = 0) -> int:
    value = data.get(key)
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return default
    return default


def _bool(data: dict[str, Any], key: str, default: bool) -> bool:
    value = data.get(key)
    return value if isinstance(value, bool) else default


def _strings(data: dict[str, Any], key: str) -> tuple[str, ...]:
    value = data.get(key)
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(item for item in value if isinstance(item, str))


class StoredEnum(str, Enum):
    """Enum persisted by member name with a total parsing function."""

    @classmethod
    def fallback(cls) -> "StoredEnum":
        """Member used for unknown or missing stored values."""
        raise NotImplementedError

    @classmethod
    def parse(cls, value: Any) -> Any:
        """Parse a stored value, never raising on unknown names."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            member = cls.__members__.get(value.strip().upper())
            if member is not None:
                return member
        return cls.fallback()


class TransactionType(StoredEnum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"

    @classmethod
    def fallback(cls) -> "TransactionType":
        return cls.EXPENSE


class InputSource(StoredEnum):
    NOTIFICATION = "NOTIFICATION"
    MANUAL_TEXT_INPUT = "MANUAL_TEXT_INPUT"
    MANUAL_ENTRY = "MANUAL_ENTRY"

    @classmethod
    def fallback(cls) -> "InputSource":
        return cls.NOTIFICATION


class DuplicateResolution(StoredEnum):
    PENDING = "PENDING"
    KEEP_BOTH = "KEEP_BOTH"
    KEEP_FIRST = "KEEP_FIRST"
    KEEP_SECOND = "KEEP_SECOND"
    DELETE_BOTH = "DELETE_BOTH"

    @classmethod
    def fallback(cls) -> "DuplicateResolution":
        return cls.PENDING

    def swapped(self) -> "DuplicateResolution":
        """Return the same decision seen from the other transaction's side."""
        if self is DuplicateResolution.KEEP_FIRST:
            return DuplicateResolution.KEEP_SECOND
        if self is DuplicateResolution.KEEP_SECOND:
            return DuplicateResolution.KEEP_FIRST
        return self


class MatchConfidence(StoredEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    MANUAL = "manual"

    @classmethod
    def fallback(cls) -> "MatchConfidence":
        return cls.LOW

    @property
    def rank(self) -> int:
        """Ordering used to sort automatic matches (higher is stronger)."""
        return {"manual": 4, "high": 3, "medium": 2, "low": 1}[self.value]


class SpendingCategory(StoredEnum):
    FOOD = "FOOD"
    CAFE_SNACK = "CAFE_SNACK"
    DINING_OUT = "DINING_OUT"
    DELIVERY = "DELIVERY"
    GROCERY = "GROCERY"
    DAILY_NECESSITIES = "DAILY_NECESSITIES"
    HEALTH = "HEALTH"
    BEAUTY = "BEAUTY"
    PET = "PET"
    CLOTHING = "CLOTHING"
    SHOES_BAG = "SHOES_BAG"
    ELECTRONICS = "ELECTRONICS"
    ONLINE_SHOPPING = "ONLINE_SHOPPING"
    RENT = "RENT"
    MAINTENANCE_FEE = "MAINTENANCE_FEE"
    UTILITIES = "UTILITIES"
    INTERNET_PHONE = "INTERNET_PHONE"
    LOAN = "LOAN"
    INTEREST = "INTEREST"
    INSURANCE = "INSURANCE"
    SAVINGS = "SAVINGS"
    TAX = "TAX"
    TRANSPORTATION = "TRANSPORTATION"
    TAXI = "TAXI"
    CAR = "CAR"
    PARKING = "PARKING"
    OTT = "OTT"
    MUSIC = "MUSIC"
    GAME = "GAME"
    HOBBY = "HOBBY"
    MOVIE = "MOVIE"
    TRAVEL = "TRAVEL"
    SPORTS = "SPORTS"
    BOOK = "BOOK"
    EDUCATION = "EDUCATION"
    ACADEMY = "ACADEMY"
    ONLINE_COURSE = "ONLINE_COURSE"
    GIFT = "GIFT"
    FAMILY_EVENT = "FAMILY_EVENT"
    DONATION = "DONATION"
    ATM = "ATM"
    TRANSFER = "TRANSFER"
    OTHER = "OTHER"
    UNCATEGORIZED = "UNCATEGORIZED"
    CHILD_ALLOWANCE = "CHILD_ALLOWANCE"

    @classmethod
    def fallback(cls) -> "SpendingCategory":
        return cls.UNCATEGORIZED

    @classmethod
    def parse(cls, value: Any) -> "SpendingCategory":
        # Per-child keys ("CHILD_<childId>") are dynamic allowance categories.
        if isinstance(value, str) and child_id_from_category(value):
            return cls.CHILD_ALLOWANCE
        return super().parse(value)  # type: ignore[no-any-return]


class IncomeSubType(StoredEnum):
    MONTHLY_SALARY = "MONTHLY_SALARY"
    VACATION_PAY = "VACATION_PAY"
    HOLIDAY_BONUS = "HOLIDAY_BONUS"
    PERFORMANCE_BONUS = "PERFORMANCE_BONUS"
    OVERTIME_PAY = "OVERTIME_PAY"
    INCENTIVE = "INCENTIVE"
    TAX_REFUND = "TAX_REFUND"
    TRANSFER_RECEIVED = "TRANSFER_RECEIVED"
    INTEREST = "INTEREST"
    REFUND = "REFUND"
    ALLOWANCE = "ALLOWANCE"
    GIFT_MONEY = "GIFT_MONEY"
    OTHER = "OTHER"
    UNCATEGORIZED = "UNCATEGORIZED"

    @classmethod
    def fallback(cls) -> "IncomeSubType":
        return cls.UNCATEGORIZED


class ExpenseSubType(StoredEnum):
    TRANSFER_TO_FAMILY = "TRANSFER_TO_FAMILY"
    TRANSFER_TO_FRIEND = "TRANSFER_TO_FRIEND"
    TRANSFER_SAVINGS = "TRANSFER_SAVINGS"
    TRANSFER_LOAN = "TRANSFER_LOAN"
    TRANSFER_RENT = "TRANSFER_RENT"
    TRANSFER_INSURANCE = "TRANSFER_INSURANCE"
    TRANSFER_INVESTMENT = "TRANSFER_INVESTMENT"
    TRANSFER_OTHER = "TRANSFER_OTHER"
    CARD_PAYMENT = "CARD_PAYMENT"
    CASH_PAYMENT = "CASH_PAYMENT"
    AUTO_PAYMENT = "AUTO_PAYMENT"
    OTHER = "OTHER"
    UNCATEGORIZED = "UNCATEGORIZED"

    @classmethod
    def fallback(cls) -> "ExpenseSubType":
        return cls.UNCATEGORIZED


def child_id_from_category(category_key: str) -> str | None:
    """Return the child id encoded in a ``CHILD_<id>`` category key."""
    if category_key.startswith("CHILD_") and category_key != "CHILD_ALLOWANCE":
        return category_key.removeprefix("CHILD_") or None
    return None


@dataclass(frozen=True)
class BankConfig:
    """Parsing ruleset for one bank or card issuer."""

    bank_id: str
    display_name: str
    package_names: tuple[str, ...]
    income_keywords: tuple[str, ...]
    expense_keywords: tuple[str, ...]
    amount_regex: str = DEFAULT_AMOUNT_REGEX
    merchant_regex_list: tuple[str, ...] = ()
    is_custom: bool = False

    def accepts(self, package_name: str) -> bool:
        """Return True if notifications from this app may belong to the bank."""
        return package_name in self.package_names


@dataclass(frozen=True)
class CustomBankPattern:
    """User-editable bank pattern; shadows the default config with the same id."""

    id: str
    display_name: str
    package_names: tuple[str, ...]
    amount_regex: str
    income_keywords: tuple[str, ...]
    expense_keywords: tuple[str, ...]
    is_enabled: bool = True
    merchant_regex_list: tuple[str, ...] = ()
    is_custom: bool = False
    last_modified: datetime = field(default_factory=utcnow)

    def to_bank_config(self) -> BankConfig:
        return BankConfig(
            bank_id=self.id,
            display_name=self.display_name,
            package_names=self.package_names,
            income_keywords=self.income_keywords,
            expense_keywords=self.expense_keywords,
            amount_regex=self.amount_regex,
            merchant_regex_list=self.merchant_regex_list,
            is_custom=self.is_custom,
        )

    @classmethod
    def from_bank_config(cls, config: BankConfig) -> "CustomBankPattern":
        return cls(
            id=config.bank_id,
            display_name=config.display_name,
            package_names=config.package_names,
            amount_regex=config.amount_regex,
            income_keywords=config.income_keywords,
            expense_keywords=config.expense_keywords,
            merchant_regex_list=config.merchant_regex_list,
            is_custom=False,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "displayName": self.display_name,
            "isEnabled": self.is_enabled,
            "packageNames": list(self.package_names),
            "amountRegex": self.amount_regex,
            "incomeKeywords": list(self.income_keywords),
            "expenseKeywords": list(self.expense_keywords),
            "merchantRegexList": list(self.merchant_regex_list),
            "isCustom": self.is_custom,
            "lastModified": int(self.last_modified.timestamp() * 1000),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CustomBankPattern":
        return cls(
            id=_str(data, "id"),
            display_name=_str(data, "displayName"),
            package_names=_strings(data, "packageNames"),
            amount_regex=_str(data, "amountRegex", DEFAULT_AMOUNT_REGEX),
            income_keywords=_strings(data, "incomeKeywords"),
            expense_keywords=_strings(data, "expenseKeywords"),
            is_enabled=_bool(data, "isEnabled", True),
            merchant_regex_list=_strings(data, "merchantRegexList"),
            is_custom=_bool(data, "isCustom", False),
            last_modified=parse_timestamp(data.get("lastModified")) or utcnow(),
        )


@dataclass(frozen=True)
class PatternTestResult:
    """Outcome of trying a bank pattern against sample text."""

    success: bool
    amount: int | None = None
    transaction_type: TransactionType | None = None
    merchant_name: str | None = None
    matched_pattern: str | None = None
    error_message: str | None = None


@dataclass(frozen=True)
class Merchant:
    """A recognizable counterparty; keywords match case-insensitively."""

    id: str
    display_name: str
    keywords: tuple[str, ...]
    default_category: SpendingCategory
    icon: str = ""

    @property
    def is_fallback(self) -> bool:
        """The catch-all entry has no keywords and must be evaluated last."""
        return not self.keywords

    def matches(self, text: str) -> bool:
        folded = text.casefold()
        return any(keyword.casefold() in folded for keyword in self.keywords)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "displayName": self.display_name,
            "keywords": list(self.keywords),
            "defaultCategory": self.default_category.value,
            "icon": self.icon,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Merchant":
        return cls(
            id=_str(data, "id"),
            display_name=_str(data, "displayName"),
            keywords=_strings(data, "keywords"),
            default_category=SpendingCategory.parse(data.get("defaultCategory")),
            icon=_str(data, "icon"),
        )


@dataclass(frozen=True)
class Transaction:
    """A classified financial transaction, amounts in the smallest currency unit."""

    id: str = ""
    group_id: str = ""
    user_id: str = ""
    user_name: str = ""
    type: TransactionType = TransactionType.EXPENSE
    amount: int = 0
    bank_id: str = ""
    bank_name: str = ""
    description: str = ""
    category: str = ""
    income_sub_type: str = ""
    expense_sub_type: str = ""
    merchant: str = ""
    merchant_name: str = ""
    memo: str = ""
    source: InputSource = InputSource.NOTIFICATION
    original_text: str = ""
    linked_child_id: str = ""
    linked_child_name: str = ""
    transaction_date: datetime | None = None
    created_at: datetime | None = None
    is_confirmed: bool = True

    def __post_init__(self) -> None:
        """Validate transaction data."""
        if self.amount < 0:
            raise ValueError(f"Transaction amount must be non-negative: {self.amount}")

    @property
    def is_linked_to_child(self) -> bool:
        return bool(self.linked_child_id)

    @property
    def event_time(self) -> datetime | None:
        """Time used for duplicate comparison."""
        return self.transaction_date or self.created_at

    def to_dict(self) -> dict[str, Any]:
        return {
            "groupId": self.group_id,
            "userId": self.user_id,
            "userName": self.user_name,
            "type": self.type.value,
            "amount": self.amount,
            "bankId": self.bank_id,
            "bankName": self.bank_name,
            "description": self.description,
            "category": self.category,
            "incomeSubType": self.income_sub_type,
            "expenseSubType": self.expense_sub_type,
            "merchant": self.merchant,
            "merchantName": self.merchant_name,
            "memo": self.memo,
            "source": self.source.value,
            "originalText": self.original_text,
            "linkedChildId": self.linked_child_id,
            "linkedChildName": self.linked_child_name,
            "createdAt": self.created_at,
            "transactionDate": self.transaction_date,
            "isConfirmed": self.is_confirmed,
        }

    @classmethod
    def from_dict(cls, doc_id: str, data: dict[str, Any]) -> "Transaction":
        return cls(
            id=doc_id,
            group_id=_str(data, "groupId"),
            user_id=_str(data, "userId"),
            user_name=_str(data, "userName"),
            type=TransactionType.parse(data.get("type")),
            amount=max(_int(data, "amount"), 0),
            bank_id=_str(data, "bankId"),
            bank_name=_str(data, "bankName"),
            description=_str(data, "description"),
            category=_str(data, "category"),
            income_sub_type=_str(data, "incomeSubType"),
            expense_sub_type=_str(data, "expenseSubType"),
            merchant=_str(data, "merchant"),
            merchant_name=_str(data, "merchantName"),
            memo=_str(data, "memo"),
            source=InputSource.parse(data.get("source")),
            original_text=_str(data, "originalText"),
            linked_child_id=_str(data, "linkedChildId"),
            linked_child_name=_str(data, "linkedChildName"),
            transaction_date=parse_timestamp(data.get("transactionDate")),
            created_at=parse_timestamp(data.get("createdAt")),
            is_confirmed=_bool(data, "isConfirmed", True),
        )


@dataclass(frozen=True)
class LearnedMapping:
    """Merchant to category association taught by user corrections."""

    id: str = ""
    group_id: str = ""
    merchant_name: str = ""
    original_merchant_name: str = ""
    category: str = ""
    transaction_type: TransactionType = TransactionType.EXPENSE
    use_count: int = 1
    last_used_at: datetime | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "groupId": self.group_id,
            "merchantName": self.merchant_name,
            "originalMerchantName": self.original_merchant_name,
            "category": self.category,
            "transactionType": self.transaction_type.value,
            "useCount": self.use_count,
            "lastUsedAt": self.last_used_at,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, doc_id: str, data: dict[str, Any]) -> "LearnedMapping":
        return cls(
            id=doc_id,
            group_id=_str(data, "groupId"),
            merchant_name=_str(data, "merchantName"),
            original_merchant_name=_str(data, "originalMerchantName"),
            category=_str(data, "category"),
            transaction_type=TransactionType.parse(data.get("transactionType")),
            use_count=_int(data, "useCount", 1),
            last_used_at=parse_timestamp(data.get("lastUsedAt")),
            created_at=parse_timestamp(data.get("createdAt")),
        )


@dataclass(frozen=True)
class LearnedDepositPattern:
    """Regex rule linking incoming deposits to a savings goal."""

    id: str = ""
    group_id: str = ""
    savings_goal_id: str = ""
    sample_notification_text: str = ""
    bank_name: str = ""
    account_number_pattern: str = ""
    sender_name_regex: str = ""
    amount_regex: str = ""
    success_count: int = 0
    fail_count: int = 0
    last_used_at: datetime | None = None
    is_active: bool = True
    created_at: datetime | None = None

    @property
    def total_applications(self) -> int:
        return self.success_count + self.fail_count

    def to_dict(self) -> dict[str, Any]:
        return {
            "groupId": self.group_id,
            "savingsGoalId": self.savings_goal_id,
            "sampleNotificationText": self.sample_notification_text,
            "bankName": self.bank_name,
            "accountNumberPattern": self.account_number_pattern,
            "senderNameRegex": self.sender_name_regex,
            "amountRegex": self.amount_regex,
            "successCount": self.success_count,
            "failCount": self.fail_count,
            "lastUsedAt": self.last_used_at,
            "isActive": self.is_active,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, doc_id: str, data: dict[str, Any]) -> "LearnedDepositPattern":
        return cls(
            id=doc_id,
            group_id=_str(data, "groupId"),
            savings_goal_id=_str(data, "savingsGoalId"),
            sample_notification_text=_str(data, "sampleNotificationText"),
            bank_name=_str(data, "bankName"),
            account_number_pattern=_str(data, "accountNumberPattern"),
            sender_name_regex=_str(data, "senderNameRegex"),
            amount_regex=_str(data, "amountRegex"),
            success_count=_int(data, "successCount"),
            fail_count=_int(data, "failCount"),
            last_used_at=parse_timestamp(data.get("lastUsedAt")),
            is_active=_bool(data, "isActive", True),
            created_at=parse_timestamp(data.get("createdAt")),
        )


@dataclass(frozen=True)
class SavingsContribution:
    """A deposit attributed to a savings goal."""

    id: str = ""
    goal_id: str = ""
    user_id: str = ""
    user_name: str = ""
    amount: int = 0
    is_auto_detected: bool = False
    detected_sender_name: str = ""
    match_confidence: MatchConfidence = MatchConfidence.HIGH
    original_notification_text: str = ""
    needs_review: bool = False
    is_modified: bool = False
    modified_by: str = ""
    modified_at: datetime | None = None
    created_at: datetime | None = None

    def edit(
        self,
        modified_by: str,
        modified_at: datetime | None = None,
        **changes: Any,
    ) -> "SavingsContribution":
        """Return an edited copy carrying the audit trail."""
        return replace(
            self,
            is_modified=True,
            modified_by=modified_by,
            modified_at=modified_at or utcnow(),
            **changes,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "goalId": self.goal_id,
            "userId": self.user_id,
            "userName": self.user_name,
            "amount": self.amount,
            "isAutoDetected": self.is_auto_detected,
            "detectedSenderName": self.detected_sender_name,
            "matchConfidence": self.match_confidence.value,
            "originalNotificationText": self.original_notification_text,
            "needsReview": self.needs_review,
            "isModified": self.is_modified,
            "modifiedBy": self.modified_by,
            "modifiedAt": self.modified_at,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, doc_id: str, data: dict[str, Any]) -> "SavingsContribution":
        return cls(
            id=doc_id,
            goal_id=_str(data, "goalId"),
            user_id=_str(data, "userId"),
            user_name=_str(data, "userName"),
            amount=_int(data, "amount"),
            is_auto_detected=_bool(data, "isAutoDetected", False),
            detected_sender_name=_str(data, "detectedSenderName"),
            match_confidence=MatchConfidence.parse(data.get("matchConfidence")),
            original_notification_text=_str(data, "originalNotificationText"),
            needs_review=_bool(data, "needsReview", False),
            is_modified=_bool(data, "isModified", False),
            modified_by=_str(data, "modifiedBy"),
            modified_at=parse_timestamp(data.get("modifiedAt")),
            created_at=parse_timestamp(data.get("createdAt")),
        )


@dataclass(frozen=True)
class DuplicateTransactionInfo:
    """Snapshot of one side of a suspected duplicate."""

    transaction_id: str = ""
    bank_id: str = ""
    bank_name: str = ""
    description: str = ""
    type: TransactionType = TransactionType.EXPENSE
    notification_time: datetime | None = None
    original_text: str = ""

    @classmethod
    def from_transaction(cls, tx: Transaction) -> "DuplicateTransactionInfo":
        return cls(
            transaction_id=tx.id,
            bank_id=tx.bank_id,
            bank_name=tx.bank_name,
            description=tx.description,
            type=tx.type,
            notification_time=tx.event_time,
            original_text=tx.original_text,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "transactionId": self.transaction_id,
            "bankId": self.bank_id,
            "bankName": self.bank_name,
            "description": self.description,
            "type": self.type.value,
            "notificationTime": self.notification_time,
            "originalText": self.original_text,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DuplicateTransactionInfo":
        return cls(
            transaction_id=_str(data, "transactionId"),
            bank_id=_str(data, "bankId"),
            bank_name=_str(data, "bankName"),
            description=_str(data, "description"),
            type=TransactionType.parse(data.get("type")),
            notification_time=parse_timestamp(data.get("notificationTime")),
            original_text=_str(data, "originalText"),
        )


@dataclass(frozen=True)
class PendingDuplicate:
    """Two transactions suspected to describe one real-world event."""

    id: str = ""
    group_id: str = ""
    user_id: str = ""
    amount: int = 0
    transaction1: DuplicateTransactionInfo = field(default_factory=DuplicateTransactionInfo)
    transaction2: DuplicateTransactionInfo = field(default_factory=DuplicateTransactionInfo)
    created_at: datetime | None = None
    is_resolved: bool = False
    resolved_at: datetime | None = None
    resolution: DuplicateResolution = DuplicateResolution.PENDING

    def to_dict(self) -> dict[str, Any]:
        return {
            "groupId": self.group_id,
            "userId": self.user_id,
            "amount": self.amount,
            "transaction1": self.transaction1.to_dict(),
            "transaction2": self.transaction2.to_dict(),
            "createdAt": self.created_at,
            "isResolved": self.is_resolved,
            "resolvedAt": self.resolved_at,
            "resolution": self.resolution.value,
        }

    @classmethod
    def from_dict(cls, doc_id: str, data: dict[str, Any]) -> "PendingDuplicate":
        tx1 = data.get("transaction1")
        tx2 = data.get("transaction2")
        return cls(
            id=doc_id,
            group_id=_str(data, "groupId"),
            user_id=_str(data, "userId"),
            amount=_int(data, "amount"),
            transaction1=DuplicateTransactionInfo.from_dict(tx1 if isinstance(tx1, dict) else {}),
            transaction2=DuplicateTransactionInfo.from_dict(tx2 if isinstance(tx2, dict) else {}),
            created_at=parse_timestamp(data.get("createdAt")),
            is_resolved=_bool(data, "isResolved", False),
            resolved_at=parse_timestamp(data.get("resolvedAt")),
            resolution=DuplicateResolution.parse(data.get("resolution")),
        )


@dataclass(frozen=True)
class DuplicateRule:
    """Pre-authorized resolution for an ordered pair of bank ids."""

    id: str = ""
    group_id: str = ""
    bank1_id: str = ""
    bank2_id: str = ""
    resolution: DuplicateResolution = DuplicateResolution.KEEP_FIRST
    created_at: datetime | None = None

    def resolution_for(self, first_bank_id: str, second_bank_id: str) -> DuplicateResolution | None:
        """
        Return this rule's decision for a (first, second) pair of banks.

        The rule is written for (bank1, bank2); when the pair arrives in the
        reverse order the keep-first/keep-second decision is mirrored so the
        same bank's transaction is kept. Returns None if the rule does not
        cover the pair.
        """
        if (first_bank_id, second_bank_id) == (self.bank1_id, self.bank2_id):
            return self.resolution
        if (first_bank_id, second_bank_id) == (self.bank2_id, self.bank1_id):
            return self.resolution.swapped()
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "groupId": self.group_id,
            "bank1Id": self.bank1_id,
            "bank2Id": self.bank2_id,
            "resolution": self.resolution.value,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, doc_id: str, data: dict[str, Any]) -> "DuplicateRule":
        resolution = data.get("resolution")
        return cls(
            id=doc_id,
            group_id=_str(data, "groupId"),
            bank1_id=_str(data, "bank1Id"),
            bank2_id=_str(data, "bank2Id"),
            resolution=(
                DuplicateResolution.parse(resolution)
                if isinstance(resolution, str) and resolution.upper() in DuplicateResolution.__members__
                else DuplicateResolution.KEEP_FIRST
            ),
            created_at=parse_timestamp(data.get("createdAt")),
        )
