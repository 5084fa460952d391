"""
Assessment lookup by child name.

Assessments live in a Firestore collection; each document carries the
child's display name at `assessmentData.basicInfo.childName`. Names are
typed inconsistently (extra spaces, Arabic diacritics), so the lookup
tries progressively looser strategies:

1. Exact match, newest first
2. Exact match on the trimmed name
3. Prefix range match
4. Scan a bounded window and compare normalized names
"""

import base64
import binascii
import json
import logging
import re
import unicodedata
from pathlib import Path
from typing import Any

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core import exceptions as google_exceptions
from google.cloud.firestore_v1.base_query import FieldFilter
from starlette.concurrency import run_in_threadpool

from planwise.config import Settings, get_settings
from planwise.core.coercion import get_path

logger = logging.getLogger(__name__)

CHILD_NAME_FIELD = "assessmentData.basicInfo.childName"
CREATED_AT_FIELD = "createdAt"
FIREBASE_APP_NAME = "planwise"

# Highest BMP private-use code point; sorts after any real name suffix
PREFIX_RANGE_END = "\uf8ff"

ARABIC_DIACRITICS = re.compile("[\u064B-\u065F\u0610-\u061A\u06D6-\u06ED]")
WHITESPACE = re.compile(r"\s+")


def normalize_arabic_name(name: Any) -> str:
    """NFC, strip tashkeel, collapse whitespace, trim and lowercase."""
    if not name:
        return ""
    text = unicodedata.normalize("NFC", str(name))
    text = ARABIC_DIACRITICS.sub("", text)
    return WHITESPACE.sub(" ", text).strip().lower()


def load_service_account(settings: Settings) -> dict[str, Any] | None:
    """
    Service account JSON from the first configured source.

    Sources: a file path (relative to the working directory), raw JSON,
    then base64-encoded JSON. Invalid sources are logged and skipped.
    """
    if settings.firebase_service_account_path:
        path = Path(settings.firebase_service_account_path)
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to read service account at %s: %s", path, e)

    raw = settings.firebase_service_account or settings.firebase_service_account_json
    if raw:
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("FIREBASE_SERVICE_ACCOUNT is not valid JSON: %s", e)

    if settings.firebase_service_account_b64:
        try:
            decoded = base64.b64decode(settings.firebase_service_account_b64).decode("utf-8")
            return json.loads(decoded)
        except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("FIREBASE_SERVICE_ACCOUNT_B64 is invalid: %s", e)

    return None


class AssessmentsStore:
    """
    Read-only access to stored assessments.

    The Firestore client is created lazily on first use and held by this
    instance. When no credentials are available every lookup returns an
    empty list.
    """

    def __init__(self, settings: Settings | None = None, client: Any = None):
        self.settings = settings or get_settings()
        self._client = client
        self._init_tried = client is not None

    @property
    def collection_name(self) -> str:
        return self.settings.assessments_collection

    def _get_client(self) -> Any:
        """Initialize the Firestore client once; None if unavailable."""
        if self._init_tried:
            return self._client
        self._init_tried = True

        service_account = load_service_account(self.settings)
        if not service_account:
            logger.warning("No Firebase service account configured, assessment lookup disabled")
            return None

        try:
            try:
                app = firebase_admin.get_app(FIREBASE_APP_NAME)
            except ValueError:
                app = firebase_admin.initialize_app(
                    credentials.Certificate(service_account), name=FIREBASE_APP_NAME
                )
            self._client = firestore.client(app)
            logger.info("Firestore client initialized")
        except (ValueError, google_exceptions.GoogleAPIError) as e:
            logger.error("Failed to initialize Firestore client: %s", e)
            self._client = None
        return self._client

    async def find_by_child_name(
        self,
        child_name: str,
        limit: int = 1,
        order_by_created_at: bool = True,
        fallback_limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        Find assessments for a child.

        Args:
            child_name: Display name as typed by the user
            limit: Maximum results for the indexed strategies
            order_by_created_at: Newest first on the exact-match strategy
            fallback_limit: Documents scanned by the normalization strategy

        Returns:
            List of {"id": ..., "data": {...}} records (possibly empty)
        """
        return await run_in_threadpool(
            self._find_sync, child_name, limit, order_by_created_at, fallback_limit
        )

    def _find_sync(
        self,
        child_name: str,
        limit: int,
        order_by_created_at: bool,
        fallback_limit: int | None,
    ) -> list[dict[str, Any]]:
        name = str(child_name or "").strip()
        if not name:
            return []

        client = self._get_client()
        if client is None:
            return []

        collection = client.collection(self.collection_name)
        strategies = (
            ("exact", lambda: self._exact(collection, child_name, limit, order_by_created_at)),
            ("trimmed", lambda: self._exact(collection, name, limit, False)),
            ("prefix", lambda: self._prefix(collection, name, limit)),
        )

        for label, strategy in strategies:
            try:
                docs = strategy()
            except google_exceptions.GoogleAPIError as e:
                logger.warning("Assessment %s lookup failed: %s", label, e)
                continue
            if docs:
                logger.debug("Assessment %s lookup matched %d docs", label, len(docs))
                return [self._record(doc) for doc in docs]

        return self._scan(collection, normalize_arabic_name(name), fallback_limit)

    def _exact(self, collection: Any, name: str, limit: int, ordered: bool) -> list[Any]:
        query = collection.where(filter=FieldFilter(CHILD_NAME_FIELD, "==", name))
        if ordered:
            query = query.order_by(CREATED_AT_FIELD, direction="DESCENDING")
        if limit and limit > 0:
            query = query.limit(limit)
        return list(query.get())

    def _prefix(self, collection: Any, name: str, limit: int) -> list[Any]:
        query = collection.where(filter=FieldFilter(CHILD_NAME_FIELD, ">=", name)).where(
            filter=FieldFilter(CHILD_NAME_FIELD, "<=", name + PREFIX_RANGE_END)
        )
        if limit and limit > 0:
            query = query.limit(limit)
        return list(query.get())

    def _scan(self, collection: Any, normalized: str, fallback_limit: int | None) -> list[dict]:
        """Client-side match over a bounded window of documents."""
        window = fallback_limit or self.settings.assessments_fallback_limit
        try:
            docs = list(collection.limit(window).get())
        except google_exceptions.GoogleAPIError as e:
            logger.warning("Assessment scan failed: %s", e)
            return []

        return [
            self._record(doc)
            for doc in docs
            if normalize_arabic_name(get_path(doc.to_dict() or {}, CHILD_NAME_FIELD)) == normalized
        ]

    @staticmethod
    def _record(doc: Any) -> dict[str, Any]:
        return {"id": doc.id, "data": doc.to_dict() or {}}
