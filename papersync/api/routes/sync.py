import logging
from typing import Iterator

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from papersync.api.errors import http_error
from papersync.domain.Errors import PaperSyncError
from papersync.infra.WeeklyNote_Repository import WeeklyNoteRepository
from papersync.logic.sync.service import (
    SyncOptions, make_store, sync_entries_to_vault, validate_options, validate_vault_options,
)
from papersync.logic.notes.markdown import parse_weekly_note
from papersync.logic.week.arithmetic import (
    current_week_id, date_for_weekday, is_week_id, week_date_range,
)
from papersync.utilities.config import GITHUB_REPO, GITHUB_TOKEN, VAULT_METHOD, VAULT_PATH
from papersync.utilities.constants import DAY_NAMES
from papersync.utilities.validators import SyncRequest

router = APIRouter()
logger = logging.getLogger(__name__)


def check_week_id(week_id: str) -> str:
    if not is_week_id(week_id):
        raise HTTPException(status_code=400, detail=f"Invalid week id: {week_id} (expected YYYY-Www)")
    return week_id


def default_options() -> SyncOptions:
    return SyncOptions(
        method=VAULT_METHOD,
        local_path=VAULT_PATH or None,
        github_token=GITHUB_TOKEN or None,
        github_repo=GITHUB_REPO or None,
    )


def get_vault_store() -> Iterator:
    """Vault store built from server configuration; overridden in tests."""
    options = default_options()
    try:
        validate_vault_options(options)
        store = make_store(options)
    except PaperSyncError as e:
        raise http_error(e)
    try:
        yield store
    finally:
        if hasattr(store, "close"):
            store.close()


def get_sync_store():
    """Store used by POST /api/sync; None lets the service build one from the request."""
    return None


@router.post("/api/sync")
def api_sync(payload: SyncRequest, store=Depends(get_sync_store)):
    defaults = default_options()
    options = SyncOptions(
        method=payload.method or defaults.method,
        local_path=payload.local_path or defaults.local_path,
        github_token=payload.github_token or defaults.github_token,
        github_repo=payload.github_repo or defaults.github_repo,
        week_id=payload.week_id,
    )
    try:
        validate_options(payload.entries, options)
    except PaperSyncError as e:
        return JSONResponse(status_code=400, content={"success": False, "error": e.message})
    result = sync_entries_to_vault(payload.entries, options, store=store)
    return JSONResponse(status_code=200 if result.success else 502, content=result.to_dict())


@router.get("/api/notes/{week_id}")
def api_get_note(week_id: str, store=Depends(get_vault_store)):
    check_week_id(week_id)
    repository = WeeklyNoteRepository(store)
    try:
        markdown = repository.read_markdown(week_id)
    except PaperSyncError as e:
        raise http_error(e)
    if markdown is None:
        raise HTTPException(status_code=404, detail=f"No weekly note for {week_id}")
    note = parse_weekly_note(markdown, week_id)
    return {"note": note.to_dict(), "markdown": markdown}


def _week_payload(week_id: str) -> dict:
    rng = week_date_range(week_id)
    return {
        "week": week_id,
        "dateRange": {"start": rng.start, "end": rng.end},
        "days": [{"dayName": day, "date": date_for_weekday(day, week_id)} for day in DAY_NAMES],
    }


@router.get("/api/weeks/current")
def api_current_week():
    return _week_payload(current_week_id())


@router.get("/api/weeks/{week_id}")
def api_week(week_id: str):
    check_week_id(week_id)
    return _week_payload(week_id)
