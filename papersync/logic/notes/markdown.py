"""Weekly note <-> Markdown codec.

File layout (what serialize_weekly_note writes and parse_weekly_note reads):

    ---
    week: 2026-W05
    date_range: 2026-01-26 to 2026-02-01
    synced_at: 2026-01-27T10:00:00.000Z
    ---

    ## Monday, January 26

    ### Math
    - [ ] Do HW [due:: 2026-01-28]
    - [x] Read chapter 3

    ---

    ## General Tasks

    - [ ] Buy supplies

Parsing is tolerant: missing frontmatter, unknown lines and tasks outside any
day/subject never raise. Days or subjects that end up with no tasks are dropped.

Task contents and subject names are stripped on parse, so a note round-trips
exactly only when those values carry no surrounding whitespace or line breaks.
"""
import re
from datetime import date, timedelta
from typing import Dict, List, Optional

from papersync.domain.WeeklyNote import DateRange, DayRecord, SubjectEntry, Task, WeeklyNote
from papersync.logic.week.arithmetic import date_for_weekday, parse_week_id, week_start_date
from papersync.utilities.constants import GENERAL_TASKS_SUBJECT, ISO_DATE_FORMAT, MONTH_NAMES

_FRONTMATTER_RE = re.compile(r"---\n(.*?)\n---", re.S)
_GENERAL_HEADING_RE = re.compile(r"^##\s*General Tasks\s*$", re.I)
_DAY_HEADING_RE = re.compile(r"^## ([A-Za-z]+),?\s*(.*)$")
_SUBJECT_HEADING_RE = re.compile(r"^### (.+)$")
_TASK_RE = re.compile(r"^- \[([ xX])\]\s*(.+)$")
_DUE_RE = re.compile(r"\[due::\s*(\d{4}-\d{2}-\d{2})\]")
_MONTH_DAY_RE = re.compile(r"^([A-Za-z]+)\.?\s+(\d{1,2})$")
_MONTHS = {name.lower(): i for i, name in enumerate(MONTH_NAMES, start=1)}


# -------------------- Serialize --------------------
def format_human_date(iso_date: str) -> str:
    """``2026-01-26`` -> ``January 26``."""
    d = date.fromisoformat(iso_date)
    return f"{MONTH_NAMES[d.month - 1]} {d.day}"


def _task_line(task: Task) -> str:
    checkbox = "[x]" if task.is_completed else "[ ]"
    due = f" [due:: {task.due_date}]" if task.due_date else ""
    return f"- {checkbox} {task.content}{due}"


def serialize_weekly_note(note: WeeklyNote) -> str:
    lines: List[str] = [
        "---",
        f"week: {note.week}",
        f"date_range: {note.date_range.start} to {note.date_range.end}",
    ]
    if note.synced_at:
        lines.append(f"synced_at: {note.synced_at}")
    lines += ["---", ""]

    for index, day in enumerate(note.days):
        if index > 0:
            lines += ["---", ""]
        lines += [f"## {day.day_name}, {format_human_date(day.date)}", ""]
        for entry in day.entries:
            lines.append(f"### {entry.subject}")
            lines += [_task_line(t) for t in entry.tasks]
            lines.append("")

    if note.general_tasks:
        lines += ["---", "", f"## {GENERAL_TASKS_SUBJECT}", ""]
        lines += [_task_line(t) for t in note.general_tasks]
        lines.append("")

    return "\n".join(lines)


# -------------------- Parse --------------------
def _parse_frontmatter(block: str) -> Dict[str, str]:
    meta: Dict[str, str] = {}
    for line in block.split("\n"):
        key, sep, value = line.partition(":")
        if key and sep:
            meta[key.strip()] = value.strip()
    return meta


def _parse_heading_date(text: str, week_id: str, day_name: str) -> str:
    """Resolve ``January 26`` against the week's year, else fall back to the weekday."""
    m = _MONTH_DAY_RE.match(text.strip())
    month = _MONTHS.get(m.group(1).lower()) if m else None
    if month:
        year, _ = parse_week_id(week_id)
        anchor = week_start_date(week_id)
        candidates = []
        # Week 1 / week 52-53 straddle New Year: pick the year that lands nearest the week
        for y in (year - 1, year, year + 1):
            try:
                candidates.append(date(y, month, int(m.group(2))))
            except ValueError:
                continue
        if candidates:
            best = min(candidates, key=lambda d: abs((d - (anchor + timedelta(days=3))).days))
            return best.strftime(ISO_DATE_FORMAT)
    return date_for_weekday(day_name, week_id)


class _NoteParser:
    """Line-by-line state machine over the note body."""

    def __init__(self, week_id: str):
        self.week_id = week_id
        self.days: List[DayRecord] = []
        self.general_tasks: List[Task] = []
        self.current_day: Optional[DayRecord] = None
        self.current_subject: Optional[str] = None
        self.subject_tasks: List[Task] = []
        self.in_general = False

    def flush_subject(self):
        if self.current_day is not None and self.current_subject and self.subject_tasks:
            self.current_day.entries.append(SubjectEntry(self.current_subject, self.subject_tasks))
        self.subject_tasks = []

    def flush_day(self):
        self.flush_subject()
        if self.current_day is not None and self.current_day.entries:
            self.days.append(self.current_day)
        self.current_day = None
        self.current_subject = None

    def feed(self, line: str):
        if _GENERAL_HEADING_RE.match(line):
            self.flush_day()
            self.in_general = True
            return

        m = _DAY_HEADING_RE.match(line)
        if m and GENERAL_TASKS_SUBJECT not in line:
            self.flush_day()
            self.in_general = False
            day_name, date_text = m.group(1), m.group(2).strip()
            day_date = (_parse_heading_date(date_text, self.week_id, day_name)
                        if date_text else date_for_weekday(day_name, self.week_id))
            self.current_day = DayRecord(date=day_date, day_name=day_name)
            return

        m = _SUBJECT_HEADING_RE.match(line)
        if m and self.current_day is not None and not self.in_general:
            self.flush_subject()
            self.current_subject = m.group(1).strip()
            return

        m = _TASK_RE.match(line)
        if not m:
            return
        content = m.group(2).strip()
        due_date = None
        due = _DUE_RE.search(content)
        if due:
            due_date = due.group(1)
            content = _DUE_RE.sub("", content, count=1).strip()
        task = Task(content=content, is_completed=m.group(1).lower() == "x", due_date=due_date)

        if self.in_general:
            self.general_tasks.append(task)
        elif self.current_day is not None and self.current_subject:
            self.subject_tasks.append(task)
        # tasks outside any day/subject are dropped

    def finish(self):
        self.flush_day()


def parse_weekly_note(markdown: str, week_id: str) -> WeeklyNote:
    fm = _FRONTMATTER_RE.match(markdown)
    meta = _parse_frontmatter(fm.group(1)) if fm else {}
    body = markdown[fm.end():] if fm else markdown

    parser = _NoteParser(week_id)
    for line in body.strip().split("\n"):
        parser.feed(line)
    parser.finish()

    start, _, end = meta.get("date_range", "").partition(" to ")
    return WeeklyNote(
        week=week_id,
        date_range=DateRange(start=start, end=end),
        days=parser.days,
        general_tasks=parser.general_tasks,
        synced_at=meta.get("synced_at") or None,
    )


__all__ = ['serialize_weekly_note', 'parse_weekly_note', 'format_human_date']
