"""Sync use case: read the stored week note, merge new entries, write it back.

Every failure is reported through SyncResult rather than raised, so the API
and any caller get one shape back. Creating the overview document is best
effort: when only that step fails the sync still succeeds, with a warning.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from papersync.domain.Errors import NotFoundError, PaperSyncError, SyncValidationError
from papersync.domain.WeeklyNote import ExtractedEntry, WeeklyNote
from papersync.events.event_helpers import publish_sync_failed, publish_synced
from papersync.infra.GitHub_Repository import GitHubVaultStore, split_repository
from papersync.infra.Vault_Repository import LocalVaultStore
from papersync.infra.WeeklyNote_Repository import WeeklyNoteRepository
from papersync.infra.paths import OVERVIEW_PATH
from papersync.logic.notes.merge import merge_entries
from papersync.logic.notes.overview import generate_overview_content
from papersync.logic.week.arithmetic import current_week_id, is_week_id

logger = logging.getLogger(__name__)

OVERVIEW_COMMIT_MESSAGE = "Create homework overview"


@dataclass
class SyncOptions:
    method: str = "local"
    local_path: Optional[str] = None
    github_token: Optional[str] = None
    github_repo: Optional[str] = None
    week_id: Optional[str] = None


@dataclass
class SyncResult:
    success: bool
    note_path: Optional[str] = None
    error: Optional[str] = None
    warning: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"success": self.success}
        if self.note_path is not None:
            data["notePath"] = self.note_path
        if self.error is not None:
            data["error"] = self.error
        if self.warning is not None:
            data["warning"] = self.warning
        return data


def validate_vault_options(options: SyncOptions) -> None:
    if options.method == "local":
        if not options.local_path:
            raise SyncValidationError("Vault path not configured")
    elif options.method == "github":
        if not options.github_token:
            raise SyncValidationError("GitHub not connected")
        if not options.github_repo:
            raise SyncValidationError("GitHub repository not selected")
        try:
            split_repository(options.github_repo)
        except ValueError as e:
            raise SyncValidationError("Invalid repository name") from e
    else:
        raise SyncValidationError("Invalid vault method")
    if options.week_id and not is_week_id(options.week_id):
        raise SyncValidationError(f"Invalid week id: {options.week_id}")


def validate_options(entries: List[ExtractedEntry], options: SyncOptions) -> None:
    if not entries:
        raise SyncValidationError("No entries to sync")
    validate_vault_options(options)


def make_store(options: SyncOptions):
    """Build the vault store for already-validated options."""
    if options.method == "github":
        owner, repo = split_repository(options.github_repo)
        return GitHubVaultStore(options.github_token, owner, repo)
    return LocalVaultStore(options.local_path)


def read_existing_note(repository: WeeklyNoteRepository, week_id: str) -> Optional[WeeklyNote]:
    """The stored note, or None when it is missing or cannot be parsed.

    Transport errors propagate; the sync fails rather than overwrite the note.
    """
    try:
        return repository.get_week_note(week_id)
    except NotFoundError:
        return None
    except ValueError as e:
        logger.warning("Could not parse weekly note %s, starting fresh: %s", week_id, e)
        return None


def ensure_overview(store) -> Optional[str]:
    """Write the overview when absent; returns a warning message on failure."""
    try:
        if not store.file_exists(OVERVIEW_PATH):
            store.write_file(OVERVIEW_PATH, generate_overview_content(), message=OVERVIEW_COMMIT_MESSAGE)
            logger.info("Created %s", OVERVIEW_PATH)
    except PaperSyncError as e:
        logger.warning("Weekly note saved but overview could not be created: %s", e)
        return f"Weekly note saved, but the overview could not be created: {e}"
    return None


def sync_entries(entries: Iterable[ExtractedEntry], options: SyncOptions, store=None) -> SyncResult:
    """Merge entries into the week's note. Raises PaperSyncError on failure."""
    entries = list(entries)
    validate_options(entries, options)
    week_id = options.week_id or current_week_id()

    owns_store = store is None
    if owns_store:
        store = make_store(options)
    try:
        repository = WeeklyNoteRepository(store)
        existing = read_existing_note(repository, week_id)
        note = merge_entries(entries, week_id, existing)
        note_path = repository.save_week_note(note)
        logger.info("Synced %d entries into %s", len(entries), note_path)
        warning = ensure_overview(store)
    finally:
        if owns_store and hasattr(store, "close"):
            store.close()
    return SyncResult(success=True, note_path=note_path, warning=warning)


def sync_entries_to_vault(entries: Iterable[ExtractedEntry], options: SyncOptions, store=None) -> SyncResult:
    week_id = options.week_id or current_week_id()
    try:
        result = sync_entries(entries, options, store=store)
    except PaperSyncError as e:
        logger.error("Sync to %s vault failed: %s", options.method, e)
        publish_sync_failed(week_id, options.method, str(e))
        return SyncResult(success=False, error=str(e))
    publish_synced(week_id, result.note_path, options.method, result.warning)
    return result


__all__ = [
    'SyncOptions', 'SyncResult', 'validate_vault_options', 'validate_options', 'make_store',
    'sync_entries', 'sync_entries_to_vault',
]
