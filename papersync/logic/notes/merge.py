"""Merge freshly extracted planner entries into an existing weekly note.

merge_entries(entries, week_id, existing) -> WeeklyNote

Rules:
  - Additive: days, subjects and tasks already in ``existing`` are never dropped,
    even when this round's entries do not mention them.
  - Tasks are deduplicated by exact ``content``; when a task already exists its
    completion flag and due date win over the incoming copy.
  - Entries whose subject is empty or "General Tasks" go to the week-level
    general task list, never under a day.
  - Output days are in Monday..Sunday order; updated subjects come first (in
    order of first appearance), untouched existing subjects follow.
"""
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from papersync.domain.WeeklyNote import DayRecord, ExtractedEntry, SubjectEntry, Task, WeeklyNote
from papersync.logic.week.arithmetic import date_for_weekday, normalize_day_name, week_date_range
from papersync.utilities.constants import DAY_NAMES, GENERAL_TASKS_SUBJECT


def iso_timestamp(now: Optional[datetime] = None) -> str:
    """UTC timestamp with millisecond precision and a trailing 'Z'."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def is_general_entry(entry: ExtractedEntry) -> bool:
    return not entry.subject or entry.subject == GENERAL_TASKS_SUBJECT


def _append_unique(base: List[Task], incoming: Iterable[Task]) -> List[Task]:
    merged = list(base)
    seen = {t.content for t in merged}
    for task in incoming:
        if task.content not in seen:
            merged.append(task)
            seen.add(task.content)
    return merged


def group_by_day_and_subject(entries: Iterable[ExtractedEntry]) -> Dict[str, Dict[str, List[ExtractedEntry]]]:
    """{normalized day: {subject: [entries]}}, both levels in first-seen order."""
    grouped: Dict[str, Dict[str, List[ExtractedEntry]]] = {}
    for entry in entries:
        day = normalize_day_name(entry.day)
        grouped.setdefault(day, {}).setdefault(entry.subject, []).append(entry)
    return grouped


def _merge_day(day_name: str, week_id: str, new_subjects: Dict[str, List[ExtractedEntry]],
               existing_day: Optional[DayRecord]) -> Optional[DayRecord]:
    merged: List[SubjectEntry] = []
    for subject, items in new_subjects.items():
        existing_entry = existing_day.find_entry(subject) if existing_day else None
        base = existing_entry.tasks if existing_entry else []
        merged.append(SubjectEntry(subject, _append_unique(base, (i.to_task() for i in items))))

    if existing_day:
        for entry in existing_day.entries:
            if entry.subject not in new_subjects:
                merged.append(SubjectEntry(entry.subject, list(entry.tasks)))

    if not merged:
        return None
    return DayRecord(date=date_for_weekday(day_name, week_id), day_name=day_name, entries=merged)


def merge_entries(entries: Iterable[ExtractedEntry], week_id: str,
                  existing: Optional[WeeklyNote], now: Optional[datetime] = None) -> WeeklyNote:
    entries = list(entries)
    subject_entries = [e for e in entries if not is_general_entry(e)]
    general_entries = [e for e in entries if is_general_entry(e)]

    by_day = group_by_day_and_subject(subject_entries)

    days: List[DayRecord] = []
    for day_name in DAY_NAMES:
        new_subjects = by_day.get(day_name, {})
        if not new_subjects and existing is None:
            continue
        existing_day = existing.find_day(day_name) if existing else None
        record = _merge_day(day_name, week_id, new_subjects, existing_day)
        if record is not None:
            days.append(record)

    existing_general = existing.general_tasks if existing else []
    general_tasks = _append_unique(existing_general, (e.to_task() for e in general_entries))

    return WeeklyNote(
        week=week_id,
        date_range=week_date_range(week_id),
        days=days,
        general_tasks=general_tasks,
        synced_at=iso_timestamp(now),
    )


__all__ = ['merge_entries', 'group_by_day_and_subject', 'is_general_entry', 'iso_timestamp']
