"""Vault-relative file locations (fixed; not configurable)."""

PAPERSYNC_ROOT = 'PaperSync'
CONFIG_DIR = '.papersync'
CONFIG_FILE = 'config.json'
SUBJECTS_FILE = 'subjects.json'
TIMETABLE_FILE = 'timetable.json'
WEEKLY_DIR = 'Weekly'
OVERVIEW_FILE = 'Overview.md'

CONFIG_DIR_PATH = f'{PAPERSYNC_ROOT}/{CONFIG_DIR}'
WEEKLY_DIR_PATH = f'{PAPERSYNC_ROOT}/{WEEKLY_DIR}'
CONFIG_PATH = f'{CONFIG_DIR_PATH}/{CONFIG_FILE}'
SUBJECTS_PATH = f'{CONFIG_DIR_PATH}/{SUBJECTS_FILE}'
TIMETABLE_PATH = f'{CONFIG_DIR_PATH}/{TIMETABLE_FILE}'
OVERVIEW_PATH = OVERVIEW_FILE
VAULT_DIRECTORIES = (CONFIG_DIR_PATH, WEEKLY_DIR_PATH, f'{PAPERSYNC_ROOT}/Tasks', f'{PAPERSYNC_ROOT}/Subjects')


def weekly_note_path(week_id: str) -> str:
    return f'{WEEKLY_DIR_PATH}/{week_id}.md'


__all__ = [
    'PAPERSYNC_ROOT', 'CONFIG_DIR', 'CONFIG_FILE', 'SUBJECTS_FILE', 'TIMETABLE_FILE', 'WEEKLY_DIR',
    'OVERVIEW_FILE', 'CONFIG_DIR_PATH', 'WEEKLY_DIR_PATH', 'CONFIG_PATH', 'SUBJECTS_PATH',
    'TIMETABLE_PATH', 'OVERVIEW_PATH', 'VAULT_DIRECTORIES', 'weekly_note_path',
]
