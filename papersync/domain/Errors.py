"""Error hierarchy shared by the sync, vault and scanner layers.

Three families, matching how callers react to them:
  - SyncValidationError: bad input, reported verbatim and never retried.
  - NotFoundError: a missing file; callers recover with a default value.
  - TransportError: I/O or network failure, optionally carrying an HTTP status.
"""
from typing import Optional


class PaperSyncError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SyncValidationError(PaperSyncError):
    pass


class NotFoundError(PaperSyncError):
    def __init__(self, path: str, message: Optional[str] = None):
        super().__init__(message or f"File not found: {path}")
        self.path = path


class VaultFileNotFoundError(NotFoundError):
    pass


class GitHubFileNotFoundError(NotFoundError):
    pass


class TransportError(PaperSyncError):
    def __init__(self, message: str, status_code: Optional[int] = None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.status_code = status_code
        self.cause = cause

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class VaultError(TransportError):
    pass


class GitHubAPIError(TransportError):
    pass


class ESCLError(TransportError):
    pass


class ESCLCapabilitiesError(TransportError):
    pass


class ScannerDiscoveryError(TransportError):
    pass


__all__ = [
    'PaperSyncError', 'SyncValidationError',
    'NotFoundError', 'VaultFileNotFoundError', 'GitHubFileNotFoundError',
    'TransportError', 'VaultError', 'GitHubAPIError',
    'ESCLError', 'ESCLCapabilitiesError', 'ScannerDiscoveryError',
]
