# socials/schemas.py
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt


class KeywordLists(BaseModel):
    model_config = ConfigDict(extra="ignore")

    reddit: List[str] = Field(default_factory=list)
    hn: List[str] = Field(default_factory=list)
    ddg: List[str] = Field(default_factory=list)


class SettingsFile(BaseModel):
    """On-disk settings format; field names match the JSON keys."""

    keywords: KeywordLists                          # required
    limits: Dict[str, NonNegativeInt]               # required, may be empty
    globalResultLimit: int = Field(default=10, ge=0)
    fetchIntervalMinutes: int = Field(gt=0)         # required


class CommandRequest(BaseModel):
    command: str = Field(min_length=1)


class CommandResponse(BaseModel):
    command: str
    changed: bool
    exit_requested: bool
    lines: List[str]


class ResultItem(BaseModel):
    source: str
    title: str
    link: Optional[str] = None
    published_at: Optional[datetime] = None
    snippet: str = ""
    matched_keywords: List[str]
    highlighted_snippet: str = ""


class ResultsResponse(BaseModel):
    fetched_at: Optional[datetime] = None
    n_items: int
    failed: List[str] = Field(default_factory=list)
    items: List[ResultItem]


class StatusResponse(BaseModel):
    state: str
    keywords: Dict[str, List[str]]
    limits: Dict[str, int]
    global_limit: int
    fetch_interval_minutes: int
