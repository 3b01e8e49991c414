"""
Backup Codec

DESIGN DECISION: A backup is one JSON document holding every collection
exactly as stored, tagged with `{version, appName, exportDate}`.

Import rules:
1. The document must parse and carry the expected `appName`;
   otherwise nothing is touched and "Invalid backup file" is raised
2. No further schema or version checks: a version-1 document without
   `loans`/`fixedExpenses` imports fine
3. Each collection present in the document replaces the stored one
   wholesale; collections absent from the document are left as they are

KNOWN LIMITATION: Validation is all-or-nothing, but the writes are not.
Collections are written one after another, and a storage failure
partway through leaves earlier collections replaced and later ones old.
There is no rollback. The failure is logged with both lists and re-raised.
"""

import asyncio
import json
from typing import Any, Union

import structlog

from expensedaddy.models.backup import BackupDocument
from expensedaddy.models.base import utc_now_iso
from expensedaddy.repositories.profile import UserProfileRepository
from expensedaddy.services.storage import (
    Collection,
    KeyValueStoreInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)


# Document field -> stored collection, in document order
BACKUP_FIELDS: list[tuple[str, Collection]] = [
    ("expenses", Collection.EXPENSES),
    ("profile", Collection.USER_PROFILE),
    ("savingsGoals", Collection.SAVINGS_GOALS),
    ("savedCards", Collection.SAVED_CARDS),
    ("activityLog", Collection.ACTIVITY_LOG),
    ("budgetHistory", Collection.BUDGET_HISTORY),
    ("shoppingList", Collection.SHOPPING_LIST),
    ("loans", Collection.LOANS),
    ("fixedExpenses", Collection.FIXED_EXPENSES),
]

INVALID_BACKUP_MESSAGE = "Invalid backup file"


class InvalidBackupError(ValueError):
    """The document is not an ExpenseDaddy backup."""

    def __init__(self, reason: str = ""):
        self.reason = reason
        super().__init__(INVALID_BACKUP_MESSAGE)


class BackupCodec:
    """
    Exports and restores the full set of collections.

    Works on the store directly, below the repositories, so records
    travel untouched and no activity entries are generated.
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        profiles: UserProfileRepository,
        app_name: str = "ExpenseDaddy",
        version: int = 2,
    ):
        self._store = store
        self._profiles = profiles
        self._app_name = app_name
        self._version = version

    async def export_document(self) -> BackupDocument:
        """Gather every collection into one tagged document."""
        collections = [
            collection for _, collection in BACKUP_FIELDS
            if collection != Collection.USER_PROFILE
        ]
        values = await asyncio.gather(
            *(self._store.get(collection, []) for collection in collections)
        )
        by_collection = dict(zip(collections, values))

        profile = await self._store.get(Collection.USER_PROFILE)
        if profile is None:
            profile = (await self._profiles.get()).to_storage()

        document = BackupDocument(
            version=self._version,
            export_date=utc_now_iso(),
            app_name=self._app_name,
            expenses=by_collection[Collection.EXPENSES],
            profile=profile,
            savings_goals=by_collection[Collection.SAVINGS_GOALS],
            saved_cards=by_collection[Collection.SAVED_CARDS],
            activity_log=by_collection[Collection.ACTIVITY_LOG],
            budget_history=by_collection[Collection.BUDGET_HISTORY],
            shopping_list=by_collection[Collection.SHOPPING_LIST],
            loans=by_collection[Collection.LOANS],
            fixed_expenses=by_collection[Collection.FIXED_EXPENSES],
        )
        logger.info(
            "backup_exported",
            expenses=len(document.expenses),
            loans=len(document.loans),
            fixed_expenses=len(document.fixed_expenses),
        )
        return document

    async def export_json(self, indent: int = 2) -> str:
        return (await self.export_document()).to_json(indent=indent)

    def parse(self, document: Union[str, bytes, dict[str, Any]]) -> dict[str, Any]:
        """
        Decode and identify a backup document.

        Raises:
            InvalidBackupError: Unparseable, not an object, or wrong appName
        """
        if isinstance(document, (str, bytes)):
            try:
                document = json.loads(document)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                logger.warning("backup_rejected", reason="malformed_json", error=str(e))
                raise InvalidBackupError("malformed JSON") from e

        if not isinstance(document, dict):
            logger.warning("backup_rejected", reason="not_an_object")
            raise InvalidBackupError("document is not a JSON object")

        if document.get("appName") != self._app_name:
            logger.warning("backup_rejected", reason="app_name", app_name=document.get("appName"))
            raise InvalidBackupError(f"appName is {document.get('appName')!r}")

        return document

    async def import_document(
        self,
        document: Union[str, bytes, dict[str, Any]],
    ) -> list[str]:
        """
        Restore collections from a backup.

        Returns the document fields that were written, in write order.
        """
        data = self.parse(document)

        written: list[str] = []
        for field, collection in BACKUP_FIELDS:
            if data.get(field) is None:
                continue
            try:
                async with self._store.lock(collection):
                    await self._store.set(collection, data[field])
            except StorageError as e:
                logger.error(
                    "backup_import_partial",
                    written=written,
                    failed=field,
                    error=str(e),
                )
                raise
            written.append(field)

        logger.info(
            "backup_imported",
            version=data.get("version"),
            export_date=data.get("exportDate"),
            collections=written,
        )
        return written
