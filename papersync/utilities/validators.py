"""
Request schemas for the HTTP API, using Pydantic for input validation.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional

from papersync.domain.Scanner import DiscoveredScanner, ScanSettings
from papersync.domain.WeeklyNote import ExtractedEntry


class _RequestModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SyncRequest(_RequestModel):
    """Body of POST /api/sync. Missing vault options fall back to the server config."""
    entries: List[ExtractedEntry] = Field(default_factory=list)
    method: Optional[str] = None
    local_path: Optional[str] = None
    github_token: Optional[str] = None
    github_repo: Optional[str] = None
    week_id: Optional[str] = None

    @field_validator('method', 'local_path', 'github_repo', 'week_id')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace; blank becomes None."""
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class ScanRequest(_RequestModel):
    """Body of POST /api/scanners/scan."""
    scanner: DiscoveredScanner
    settings: ScanSettings = Field(default_factory=ScanSettings)


class SubjectSetting(BaseModel):
    """One subject; fields beyond id and name are kept as sent."""
    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1)
    name: str


class TimetableSlot(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1)


class TimetableDay(BaseModel):
    day: str
    slots: List[TimetableSlot] = Field(default_factory=list)


class SettingsRequest(_RequestModel):
    """Body of POST /api/settings."""
    subjects: List[SubjectSetting] = Field(default_factory=list)
    timetable: List[TimetableDay] = Field(default_factory=list)
    method: Optional[str] = None
    local_path: Optional[str] = None
    github_token: Optional[str] = None
    github_repo: Optional[str] = None

    @field_validator('method', 'local_path', 'github_repo')
    @classmethod
    def strip_whitespace(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v
