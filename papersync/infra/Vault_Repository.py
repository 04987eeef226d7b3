"""Local vault store: UTF-8 text files addressed by vault-relative paths."""
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional

from papersync.domain.Errors import VaultError, VaultFileNotFoundError

logger = logging.getLogger(__name__)


class LocalVaultStore:
    def __init__(self, vault_path: str):
        if not vault_path:
            raise VaultError("Vault path not configured")
        self.root = Path(vault_path).expanduser().resolve()

    def _resolve(self, relative_path: str) -> Path:
        full = (self.root / relative_path).resolve()
        if full != self.root and self.root not in full.parents:
            raise VaultError(f"Path escapes the vault: {relative_path}")
        return full

    def read_file(self, relative_path: str) -> str:
        full = self._resolve(relative_path)
        if not full.is_file():
            raise VaultFileNotFoundError(relative_path)
        try:
            return full.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise VaultError(f"Failed to read file: {relative_path}", cause=e) from e

    def write_file(self, relative_path: str, content: str, message: Optional[str] = None) -> None:
        """Atomic write via a temp file in the target directory. ``message`` is unused locally."""
        full = self._resolve(relative_path)
        tmp_path = None
        try:
            full.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(full.parent), prefix=".papersync_", suffix=full.suffix)
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as tmp:
                tmp.write(content)
            shutil.move(tmp_path, str(full))
        except OSError as e:
            raise VaultError(f"Failed to write file: {relative_path}", cause=e) from e
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
        logger.debug("Wrote %s (%d chars)", relative_path, len(content))

    def file_exists(self, relative_path: str) -> bool:
        return self._resolve(relative_path).is_file()

    def ensure_directory(self, relative_path: str) -> None:
        try:
            self._resolve(relative_path).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise VaultError(f"Failed to create directory: {relative_path}", cause=e) from e

    def list_files(self, relative_path: str) -> List[str]:
        full = self._resolve(relative_path)
        if not full.is_dir():
            return []
        return sorted(p.name for p in full.iterdir() if p.is_file())

    def delete_file(self, relative_path: str, message: Optional[str] = None) -> None:
        full = self._resolve(relative_path)
        if not full.is_file():
            raise VaultFileNotFoundError(relative_path)
        try:
            full.unlink()
        except OSError as e:
            raise VaultError(f"Failed to delete file: {relative_path}", cause=e) from e

    def __repr__(self) -> str:
        return f"LocalVaultStore({str(self.root)!r})"
