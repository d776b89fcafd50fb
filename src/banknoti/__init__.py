"""banknoti - Turn bank and card notifications into classified transactions."""

from banknoti.catalog import CatalogSnapshot
from banknoti.models import Transaction
from banknoti.parser import NotificationParser
from banknoti.pipeline import NotificationEvent, NotificationPipeline
from banknoti.storage import InMemoryStore

__version__ = "0.1.0"
__all__ = [
    "CatalogSnapshot",
    "InMemoryStore",
    "NotificationEvent",
    "NotificationParser",
    "NotificationPipeline",
    "Transaction",
]
