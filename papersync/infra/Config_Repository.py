"""Vault-side JSON settings: app config, subjects and timetable."""
import copy
import json
import logging
from typing import Any, Optional

from papersync.domain.Errors import NotFoundError, VaultError
from papersync.infra.paths import (
    CONFIG_DIR_PATH, CONFIG_PATH, SUBJECTS_PATH, TIMETABLE_PATH, VAULT_DIRECTORIES,
)
from papersync.utilities.constants import DEFAULT_APP_CONFIG, DEFAULT_SUBJECTS

logger = logging.getLogger(__name__)


class ConfigRepository:
    def __init__(self, store):
        self.store = store

    def _read_json(self, path: str, fallback: Any) -> Any:
        try:
            content = self.store.read_file(path)
        except NotFoundError:
            return fallback
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise VaultError(f"Invalid JSON in {path}", cause=e) from e

    def _write_json(self, path: str, value: Any, message: Optional[str] = None) -> None:
        self.store.ensure_directory(CONFIG_DIR_PATH)
        self.store.write_file(path, json.dumps(value, indent=2, ensure_ascii=False),
                              message=message or f"Update {path}")

    def read_config(self) -> Optional[dict]:
        return self._read_json(CONFIG_PATH, None)

    def write_config(self, config: dict) -> None:
        self._write_json(CONFIG_PATH, config)

    def read_subjects(self) -> list:
        return self._read_json(SUBJECTS_PATH, [])

    def write_subjects(self, subjects: list, message: Optional[str] = None) -> None:
        self._write_json(SUBJECTS_PATH, subjects, message)

    def read_timetable(self) -> list:
        """Timetable: [{"day": "Monday", "slots": [{"id": ..., "subjectId": ...}]}]."""
        return self._read_json(TIMETABLE_PATH, [])

    def write_timetable(self, timetable: list, message: Optional[str] = None) -> None:
        self._write_json(TIMETABLE_PATH, timetable, message)

    def initialize_vault(self) -> None:
        """Create the folder skeleton and seed config/subjects when absent. Existing files are kept."""
        for directory in VAULT_DIRECTORIES:
            self.store.ensure_directory(directory)
        if not self.store.file_exists(CONFIG_PATH):
            self.write_config(copy.deepcopy(DEFAULT_APP_CONFIG))
            logger.info("Seeded default config at %s", CONFIG_PATH)
        if not self.store.file_exists(SUBJECTS_PATH):
            self.write_subjects(copy.deepcopy(DEFAULT_SUBJECTS))
            logger.info("Seeded default subjects at %s", SUBJECTS_PATH)


def initialize_vault(store) -> None:
    ConfigRepository(store).initialize_vault()
