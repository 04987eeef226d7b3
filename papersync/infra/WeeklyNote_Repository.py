"""Weekly note persistence on top of any vault store (local or GitHub)."""
import logging
from typing import Optional

from papersync.domain.Errors import NotFoundError
from papersync.domain.WeeklyNote import WeeklyNote
from papersync.infra.paths import WEEKLY_DIR_PATH, weekly_note_path
from papersync.logic.notes.markdown import parse_weekly_note, serialize_weekly_note

logger = logging.getLogger(__name__)


class WeeklyNoteRepository:
    def __init__(self, store):
        self.store = store

    def read_markdown(self, week_id: str) -> Optional[str]:
        try:
            return self.store.read_file(weekly_note_path(week_id))
        except NotFoundError:
            return None

    def get_week_note(self, week_id: str) -> Optional[WeeklyNote]:
        """Return the stored note, or None when the week has never been synced."""
        content = self.read_markdown(week_id)
        if content is None:
            logger.info("No weekly note for %s yet", week_id)
            return None
        return parse_weekly_note(content, week_id)

    def save_week_note(self, note: WeeklyNote) -> str:
        path = weekly_note_path(note.week)
        self.store.ensure_directory(WEEKLY_DIR_PATH)
        self.store.write_file(path, serialize_weekly_note(note), message=f"Update weekly note: {note.week}")
        return path


def read_weekly_note(store, week_id: str) -> Optional[WeeklyNote]:
    return WeeklyNoteRepository(store).get_week_note(week_id)


def write_weekly_note(store, note: WeeklyNote) -> str:
    return WeeklyNoteRepository(store).save_week_note(note)
