"""Document store backed by the Cloud Firestore REST API."""

import logging
import re
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

import requests

from banknoti.exceptions import StoreError
from banknoti.models import parse_timestamp
from banknoti.storage import DocumentStore

logger = logging.getLogger(__name__)


def encode_value(value: Any) -> dict[str, Any]:
    """Convert a Python value to a Firestore ``Value`` object."""
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        stamp = value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
        return {"timestampValue": stamp}
    if isinstance(value, dict):
        return {"mapValue": {"fields": encode_fields(value)}}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(item) for item in value]}}
    raise TypeError(f"Cannot store value of type {type(value).__name__}")


def encode_fields(data: dict[str, Any]) -> dict[str, Any]:
    return {key: encode_value(value) for key, value in data.items()}


def decode_value(value: dict[str, Any]) -> Any:
    """Convert a Firestore ``Value`` object to a Python value."""
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "stringValue" in value:
        return value["stringValue"]
    if "timestampValue" in value:
        # Python only parses microseconds; Firestore may send nanoseconds
        stamp = re.sub(r"(\.\d{6})\d+", r"\1", value["timestampValue"])
        return parse_timestamp(stamp)
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields", {}))
    if "arrayValue" in value:
        return [decode_value(item) for item in value["arrayValue"].get("values", [])]
    return None


def decode_fields(fields: dict[str, Any]) -> dict[str, Any]:
    return {key: decode_value(value) for key, value in fields.items()}


def _doc_id(name: str) -> str:
    return name.rsplit("/", 1)[-1]


class FirestoreStore(DocumentStore):
    """DocumentStore over Firestore's REST endpoints, authenticated with an ID token."""

    name = "firestore"
    BASE_URL = "https://firestore.googleapis.com/v1"
    MAX_CAS_ATTEMPTS = 5

    def __init__(self, project_id: str, id_token: str, database: str = "(default)") -> None:
        """Initialize client with project and ID token."""
        self.project_id = project_id
        self.database = database
        self._session = requests.Session()
        self._session.headers.update({
            "Authorization": f"Bearer {id_token}",
            "Content-Type": "application/json",
        })

    @property
    def database_path(self) -> str:
        return f"projects/{self.project_id}/databases/{self.database}"

    @property
    def documents_url(self) -> str:
        return f"{self.BASE_URL}/{self.database_path}/documents"

    def _document_name(self, collection: str, doc_id: str) -> str:
        return f"{self.database_path}/documents/{collection}/{quote(doc_id, safe='')}"

    def _document_url(self, collection: str, doc_id: str) -> str:
        return f"{self.documents_url}/{collection}/{quote(doc_id, safe='')}"

    def _send(
        self,
        method: str,
        url: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> requests.Response:
        """Make an API request, wrapping transport failures."""
        try:
            return self._session.request(method, url, json=json, params=params)
        except requests.RequestException as e:
            logger.error("Firestore %s %s failed: %s", method, url, e)
            raise StoreError(f"Firestore request failed: {e}") from e

    def _checked(self, response: requests.Response) -> Any:
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            logger.error("Firestore returned %s: %s", response.status_code, e)
            raise StoreError(f"Firestore request failed: {e}") from e
        return response.json()

    def create(self, collection: str, data: dict[str, Any], doc_id: str | None = None) -> str | None:
        params = {"documentId": doc_id} if doc_id else None
        response = self._send(
            "POST",
            f"{self.documents_url}/{collection}",
            json={"fields": encode_fields(data)},
            params=params,
        )
        if response.status_code == 409:
            return None
        result = self._checked(response)
        return _doc_id(result["name"])

    def _get_raw(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        response = self._send("GET", self._document_url(collection, doc_id))
        if response.status_code == 404:
            return None
        return self._checked(response)  # type: ignore[no-any-return]

    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        raw = self._get_raw(collection, doc_id)
        if raw is None:
            return None
        return decode_fields(raw.get("fields", {}))

    def _patch(
        self,
        collection: str,
        doc_id: str,
        fields: dict[str, Any],
        precondition: dict[str, str],
    ) -> requests.Response:
        params: dict[str, Any] = {"updateMask.fieldPaths": list(fields)}
        params.update(precondition)
        return self._send(
            "PATCH",
            self._document_url(collection, doc_id),
            json={"fields": encode_fields(fields)},
            params=params,
        )

    def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> bool:
        response = self._patch(collection, doc_id, fields, {"currentDocument.exists": "true"})
        if response.status_code == 404:
            return False
        self._checked(response)
        return True

    def delete(self, collection: str, doc_id: str) -> bool:
        response = self._send(
            "DELETE",
            self._document_url(collection, doc_id),
            params={"currentDocument.exists": "true"},
        )
        if response.status_code == 404:
            return False
        self._checked(response)
        return True

    def query(self, collection: str, **equals: Any) -> list[tuple[str, dict[str, Any]]]:
        structured: dict[str, Any] = {"from": [{"collectionId": collection}]}
        filters = [
            {
                "fieldFilter": {
                    "field": {"fieldPath": key},
                    "op": "EQUAL",
                    "value": encode_value(value),
                }
            }
            for key, value in equals.items()
        ]
        if len(filters) == 1:
            structured["where"] = filters[0]
        elif filters:
            structured["where"] = {"compositeFilter": {"op": "AND", "filters": filters}}

        response = self._send(
            "POST",
            f"{self.documents_url}:runQuery",
            json={"structuredQuery": structured},
        )
        results = self._checked(response)

        documents: list[tuple[str, dict[str, Any]]] = []
        for item in results:
            doc = item.get("document")
            if doc:
                documents.append((_doc_id(doc["name"]), decode_fields(doc.get("fields", {}))))
        return documents

    def increment(
        self,
        collection: str,
        doc_id: str,
        field: str,
        amount: int = 1,
        extra: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        extra = extra or {}
        write = {
            "update": {
                "name": self._document_name(collection, doc_id),
                "fields": encode_fields(extra),
            },
            "updateMask": {"fieldPaths": list(extra)},
            "updateTransforms": [
                {"fieldPath": field, "increment": {"integerValue": str(amount)}},
            ],
            "currentDocument": {"exists": True},
        }
        response = self._send("POST", f"{self.documents_url}:commit", json={"writes": [write]})
        if response.status_code == 404:
            return None
        self._checked(response)
        return self.get(collection, doc_id)

    def compare_and_update(
        self,
        collection: str,
        doc_id: str,
        expected: dict[str, Any],
        fields: dict[str, Any],
    ) -> bool:
        # Firestore preconditions only cover existence and update time, so
        # compare locally and guard the write with the read's updateTime.
        for _ in range(self.MAX_CAS_ATTEMPTS):
            raw = self._get_raw(collection, doc_id)
            if raw is None:
                return False
            current = decode_fields(raw.get("fields", {}))
            if any(current.get(key) != value for key, value in expected.items()):
                return False

            response = self._patch(
                collection,
                doc_id,
                fields,
                {"currentDocument.updateTime": raw["updateTime"]},
            )
            if response.status_code in (400, 409, 412):
                logger.debug("Concurrent write on %s/%s, retrying", collection, doc_id)
                continue
            if response.status_code == 404:
                return False
            self._checked(response)
            return True

        logger.error("Gave up updating %s/%s after repeated conflicts", collection, doc_id)
        raise StoreError(f"Too many concurrent updates to {collection}/{doc_id}")
