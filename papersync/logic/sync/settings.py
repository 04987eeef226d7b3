"""Settings sync: push subjects and timetable to the vault, or load them back.

Stored and incoming settings are merged by id, so a client that only knows
some subjects or slots never removes the others.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from papersync.domain.Errors import PaperSyncError
from papersync.infra.Config_Repository import ConfigRepository
from papersync.infra.paths import SUBJECTS_PATH, TIMETABLE_PATH
from papersync.logic.sync.service import SyncOptions, make_store, validate_vault_options

logger = logging.getLogger(__name__)

SUBJECTS_COMMIT_MESSAGE = "Update subjects configuration"
TIMETABLE_COMMIT_MESSAGE = "Update timetable configuration"


@dataclass
class SettingsResult:
    success: bool
    paths: List[str] = field(default_factory=list)
    subjects: Optional[list] = None
    timetable: Optional[list] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        if not self.success:
            return {"success": False, "error": self.error}
        data = {"success": True}
        if self.paths:
            data["paths"] = list(self.paths)
        if self.subjects is not None:
            data["subjects"] = self.subjects
        if self.timetable is not None:
            data["timetable"] = self.timetable
        return data


def _merge_by_id(existing: list, incoming: list) -> list:
    incoming_by_id = {item.get("id"): item for item in incoming}
    existing_ids = {item.get("id") for item in existing}
    merged = [incoming_by_id.get(item.get("id"), item) for item in existing]
    return merged + [item for item in incoming if item.get("id") not in existing_ids]


def merge_subjects(existing: list, incoming: list) -> list:
    """Replace stored subjects by id and append unseen ones, keeping stored order."""
    return _merge_by_id(existing, incoming)


def merge_timetable(existing: list, incoming: list) -> list:
    existing_days = {day.get("day"): day for day in existing}
    incoming_days = {day.get("day"): day for day in incoming}
    merged = []
    for name in list(existing_days) + [d for d in incoming_days if d not in existing_days]:
        old, new = existing_days.get(name), incoming_days.get(name)
        if new is None or old is None:
            merged.append(new or old)
            continue
        merged.append({"day": name, "slots": _merge_by_id(old.get("slots", []), new.get("slots", []))})
    return merged


def _open_store(options: SyncOptions, store):
    if store is not None:
        return store, False
    validate_vault_options(options)
    return make_store(options), True


def sync_settings_to_vault(subjects: list, timetable: list, options: SyncOptions, store=None) -> SettingsResult:
    try:
        store, owns_store = _open_store(options, store)
    except PaperSyncError as e:
        return SettingsResult(success=False, error=e.message)
    try:
        repository = ConfigRepository(store)
        merged_subjects = merge_subjects(repository.read_subjects(), subjects)
        merged_timetable = merge_timetable(repository.read_timetable(), timetable)
        repository.write_subjects(merged_subjects, message=SUBJECTS_COMMIT_MESSAGE)
        repository.write_timetable(merged_timetable, message=TIMETABLE_COMMIT_MESSAGE)
    except PaperSyncError as e:
        logger.error("Settings sync to %s vault failed: %s", options.method, e)
        return SettingsResult(success=False, error=str(e))
    finally:
        if owns_store and hasattr(store, "close"):
            store.close()
    logger.info("Synced %d subjects and %d timetable days", len(merged_subjects), len(merged_timetable))
    return SettingsResult(success=True, paths=[SUBJECTS_PATH, TIMETABLE_PATH])


def load_settings_from_vault(options: SyncOptions, store=None) -> SettingsResult:
    try:
        store, owns_store = _open_store(options, store)
    except PaperSyncError as e:
        return SettingsResult(success=False, error=e.message)
    try:
        repository = ConfigRepository(store)
        subjects = repository.read_subjects()
        timetable = repository.read_timetable()
    except PaperSyncError as e:
        logger.error("Loading settings from %s vault failed: %s", options.method, e)
        return SettingsResult(success=False, error=str(e))
    finally:
        if owns_store and hasattr(store, "close"):
            store.close()
    return SettingsResult(success=True, subjects=subjects, timetable=timetable)


__all__ = [
    'SettingsResult', 'merge_subjects', 'merge_timetable', 'sync_settings_to_vault', 'load_settings_from_vault',
]
