import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from papersync.api.routes.sync import default_options, get_sync_store, get_vault_store
from papersync.domain.Errors import PaperSyncError
from papersync.logic.sync.service import SyncOptions, validate_vault_options
from papersync.logic.sync.settings import load_settings_from_vault, sync_settings_to_vault
from papersync.utilities.validators import SettingsRequest

router = APIRouter(prefix="/api/settings")
logger = logging.getLogger(__name__)


@router.post("")
def api_sync_settings(payload: SettingsRequest, store=Depends(get_sync_store)):
    defaults = default_options()
    options = SyncOptions(
        method=payload.method or defaults.method,
        local_path=payload.local_path or defaults.local_path,
        github_token=payload.github_token or defaults.github_token,
        github_repo=payload.github_repo or defaults.github_repo,
    )
    try:
        validate_vault_options(options)
    except PaperSyncError as e:
        return JSONResponse(status_code=400, content={"success": False, "error": e.message})
    result = sync_settings_to_vault(
        [s.model_dump() for s in payload.subjects],
        [d.model_dump() for d in payload.timetable],
        options, store=store,
    )
    return JSONResponse(status_code=200 if result.success else 502, content=result.to_dict())


@router.get("")
def api_load_settings(store=Depends(get_vault_store)):
    result = load_settings_from_vault(default_options(), store=store)
    if not result.success:
        logger.warning("Could not load settings: %s", result.error)
        return JSONResponse(status_code=502, content=result.to_dict())
    return result.to_dict()
