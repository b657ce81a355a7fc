"""
MTG Appointment Store - Persistent JSON Storage

Handles reading and writing appointments to ~/.mtgrc.json

Design:
- The whole appointment list lives in one JSON document
- Every save rewrites the full document (temp file, then rename)
- The store owns the in-memory list; callers mutate records through it
- No concurrent write handling (one process owns the file at a time)
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

from .appointment_models import AppointmentRecord, MtgError

logger = logging.getLogger(__name__)


class PersistenceError(MtgError):
    """Raised when the appointment file cannot be read or written"""
    pass


class JsonFilePersistence:
    """
    Blob load/save of the appointment document.

    Knows nothing about appointments: it moves a list of plain dicts
    to and from a JSON file.
    """

    DEFAULT_STORAGE_FILE = Path.home() / ".mtgrc.json"

    def __init__(self, storage_path: Optional[Path] = None):
        """
        Args:
            storage_path: Custom storage file path (default: ~/.mtgrc.json)
        """
        self.storage_path = Path(storage_path) if storage_path else self.DEFAULT_STORAGE_FILE

    def exists(self) -> bool:
        return self.storage_path.exists()

    def load_blob(self) -> Optional[Any]:
        """
        Read the stored document.

        Returns:
            Decoded JSON, or None if the file does not exist

        Raises:
            PersistenceError: If the file exists but cannot be read or decoded
        """
        try:
            with open(self.storage_path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except FileNotFoundError:
            return None
        except json.JSONDecodeError as e:
            raise PersistenceError(f"Corrupted JSON in {self.storage_path}: {e}") from e
        except OSError as e:
            raise PersistenceError(f"Cannot read {self.storage_path}: {e}") from e

    def save_blob(self, data: Any):
        """
        Write the document atomically.

        The previous file is left untouched if anything fails before the
        final rename.

        Raises:
            PersistenceError: If the file cannot be written
        """
        temp_name = None
        try:
            self.storage_path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(
                dir=str(self.storage_path.parent),
                prefix=self.storage_path.name,
                suffix='.tmp'
            )
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)

            os.replace(temp_name, self.storage_path)
            temp_name = None

        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"Cannot save {self.storage_path}: {e}") from e

        finally:
            if temp_name and os.path.exists(temp_name):
                os.unlink(temp_name)


class AppointmentStore:
    """
    Ordered, in-memory appointment list backed by a persistence adapter.

    Lifecycle:
    - load() (or load_or_empty()) once at process start
    - append / remove_where / in-place acknowledgment
    - save() immediately after each mutation
    """

    def __init__(self, persistence: Optional[JsonFilePersistence] = None):
        """
        Initialize appointment store.

        Args:
            persistence: Blob adapter (default: JSON file at ~/.mtgrc.json)
        """
        self.persistence = persistence or JsonFilePersistence()
        self.records: List[AppointmentRecord] = []

        logger.info(f"AppointmentStore initialized: {self.persistence.storage_path}")

    def init(self) -> bool:
        """
        Create the storage file with an empty list if it does not exist.

        Returns:
            True if the file was created, False if it already existed
        """
        if self.persistence.exists():
            return False

        self.persistence.save_blob([])
        logger.info("Initialized empty appointment storage")
        return True

    def load(self) -> List[AppointmentRecord]:
        """
        Load all appointments from storage, replacing the in-memory list.

        Returns:
            List of AppointmentRecord objects (empty if no file exists)

        Raises:
            PersistenceError: If the file is unreadable or malformed
        """
        data = self.persistence.load_blob()

        if data is None:
            logger.info("No appointment storage found, starting empty")
            self.records = []
            return self.records

        if not isinstance(data, list):
            raise PersistenceError(
                f"Expected a list of appointments, got {type(data).__name__}"
            )

        records = []
        for index, item in enumerate(data):
            try:
                records.append(AppointmentRecord.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                raise PersistenceError(f"Invalid appointment at position {index}: {e}") from e

        self.records = records
        logger.info(f"Loaded {len(records)} appointments")
        return self.records

    def load_or_empty(self) -> List[AppointmentRecord]:
        """
        Lenient load policy: an unreadable store is treated as empty.

        The broken file stays on disk until the next save overwrites it.
        """
        try:
            return self.load()
        except PersistenceError as e:
            logger.warning(f"Ignoring unreadable appointment storage: {e}")
            self.records = []
            return self.records

    def save(self):
        """
        Persist the full appointment list.

        Raises:
            PersistenceError: If storage cannot be written
        """
        self.persistence.save_blob([r.to_dict() for r in self.records])
        logger.debug(f"Saved {len(self.records)} appointments")

    def append(self, record: AppointmentRecord):
        """Add an appointment to the end of the list"""
        self.records.append(record)

    def remove_where(
        self,
        predicate: Callable[[AppointmentRecord], bool]
    ) -> Tuple[List[AppointmentRecord], List[AppointmentRecord]]:
        """
        Drop every appointment matching predicate.

        Args:
            predicate: Returns True for appointments to remove

        Returns:
            (survivors, removed), both in original relative order
        """
        survivors = []
        removed = []
        for record in self.records:
            if predicate(record):
                removed.append(record)
            else:
                survivors.append(record)

        self.records = survivors
        return survivors, removed
