"""Map domain errors onto HTTP errors for the API routes."""
from fastapi import HTTPException

from papersync.domain.Errors import NotFoundError, PaperSyncError, SyncValidationError, TransportError


def http_error(e: PaperSyncError) -> HTTPException:
    if isinstance(e, SyncValidationError):
        return HTTPException(status_code=400, detail=e.message)
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=e.message)
    if isinstance(e, TransportError):
        return HTTPException(status_code=502, detail=str(e))
    return HTTPException(status_code=500, detail=e.message)
