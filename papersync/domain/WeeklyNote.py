"""Weekly note aggregate: days -> subjects -> tasks, plus week-level general tasks.

The to_dict/from_dict pair uses the camelCase keys the web client speaks
(isCompleted, dueDate, dayName, dateRange, syncedAt, generalTasks).
"""
from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


@dataclass
class Task:
    content: str
    is_completed: bool = False
    due_date: Optional[str] = None

    @staticmethod
    def from_dict(data):
        d = data if isinstance(data, dict) else {}
        return Task(
            content=str(d.get("content", "")),
            is_completed=bool(d.get("isCompleted", d.get("is_completed", False))),
            due_date=d.get("dueDate", d.get("due_date")) or None,
        )

    def to_dict(self):
        out = {"content": self.content, "isCompleted": self.is_completed}
        if self.due_date:
            out["dueDate"] = self.due_date
        return out


# General tasks share the task shape; they just live at week level
GeneralTask = Task


@dataclass
class SubjectEntry:
    subject: str
    tasks: List[Task] = field(default_factory=list)

    @staticmethod
    def from_dict(data):
        return SubjectEntry(
            subject=str(data.get("subject", "")),
            tasks=[Task.from_dict(t) for t in data.get("tasks", [])],
        )

    def to_dict(self):
        return {"subject": self.subject, "tasks": [t.to_dict() for t in self.tasks]}


@dataclass
class DayRecord:
    date: str
    day_name: str
    entries: List[SubjectEntry] = field(default_factory=list)

    def find_entry(self, subject: str) -> Optional[SubjectEntry]:
        for entry in self.entries:
            if entry.subject == subject:
                return entry
        return None

    @staticmethod
    def from_dict(data):
        return DayRecord(
            date=str(data.get("date", "")),
            day_name=str(data.get("dayName", data.get("day_name", ""))),
            entries=[SubjectEntry.from_dict(e) for e in data.get("entries", [])],
        )

    def to_dict(self):
        return {
            "date": self.date,
            "dayName": self.day_name,
            "entries": [e.to_dict() for e in self.entries],
        }


@dataclass
class DateRange:
    start: str = ""
    end: str = ""


@dataclass
class WeeklyNote:
    week: str
    date_range: DateRange = field(default_factory=DateRange)
    days: List[DayRecord] = field(default_factory=list)
    general_tasks: List[Task] = field(default_factory=list)
    synced_at: Optional[str] = None

    def find_day(self, day_name: str) -> Optional[DayRecord]:
        for day in self.days:
            if day.day_name == day_name:
                return day
        return None

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        rng = d.get("dateRange", d.get("date_range")) or {}
        return WeeklyNote(
            week=str(d.get("week", "")),
            date_range=DateRange(start=rng.get("start", ""), end=rng.get("end", "")),
            days=[DayRecord.from_dict(day) for day in d.get("days", [])],
            general_tasks=[Task.from_dict(t) for t in d.get("generalTasks", d.get("general_tasks", []))],
            synced_at=d.get("syncedAt", d.get("synced_at")) or None,
        )

    def to_dict(self):
        out = {
            "week": self.week,
            "dateRange": {"start": self.date_range.start, "end": self.date_range.end},
            "days": [day.to_dict() for day in self.days],
            "generalTasks": [t.to_dict() for t in self.general_tasks],
        }
        if self.synced_at:
            out["syncedAt"] = self.synced_at
        return out


class ExtractedEntry(BaseModel):
    """One line read off a scanned planner page by the OCR step."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = ""
    day: str = ""
    subject: Optional[str] = ""
    content: str = Field(..., min_length=1)
    is_task: bool = True
    is_completed: bool = False
    is_new: bool = True
    due_date: Optional[str] = None

    def to_task(self) -> Task:
        return Task(content=self.content, is_completed=self.is_completed, due_date=self.due_date or None)
