from datetime import datetime
from typing import Any, Callable, NamedTuple

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_validator, model_validator

from xmltv_grid.config import settings
from xmltv_grid.utils.timezone import parse_iso8601_to_utc, DateFormatError


class ScheduleEntry(NamedTuple):
    """One programme occurrence as the grid renderer sees it"""
    start: datetime
    stop: datetime
    text: str
    category: str | None = None


class ChannelSettings(BaseModel):
    """Per-channel overrides, keyed by XMLTV id or by default display name"""
    model_config = ConfigDict(extra="allow")

    name: str | None = Field(None, description="Channel name as it should appear in the grid")
    number: int | None = Field(None, description="Sort key controlling channel order")
    lines: int | None = Field(None, ge=1, description="Lines used for program listings")


class Channel(BaseModel):
    """Channel data model"""
    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Channel ID assigned by XMLTV")
    name: str = Field(..., description="Display name of the channel")
    number: int = Field(..., description="Sort key controlling channel order")
    lines: int = Field(..., description="Lines used for program listings")
    schedule: list[ScheduleEntry] = Field(default_factory=list, description="Programs in arrival order")


class GridInput(BaseModel):
    """Input handed to the grid renderer"""
    model_config = ConfigDict(extra="allow")

    resource_title: str = "Channel"
    resources: list[Channel] = Field(..., description="Channels sorted by number")
    start_date: datetime
    end_date: datetime


class GridOptions(BaseModel):
    """Construction options of an XMLTVSchedule"""

    start_date: AwareDatetime = Field(..., description="Date and time at which the listings begin")
    end_date: AwareDatetime = Field(..., description="Date and time at which the listings end")
    channel_settings: dict[str, ChannelSettings] = Field(default_factory=dict)
    lines_per_channel: int = Field(default_factory=lambda: settings.lines_per_channel, ge=1)
    program_callback: Callable[[Any], None] | None = None
    languages: list[str] = Field(default_factory=lambda: list(settings.languages), min_length=1)

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def parse_date(cls, v: Any) -> Any:
        """Accept ISO8601 strings using centralized parser"""
        if isinstance(v, str):
            try:
                return parse_iso8601_to_utc(v)
            except DateFormatError as e:
                raise ValueError(str(e)) from e
        return v

    @model_validator(mode='after')
    def validate_date_range(self):
        """Validate that start_date is not after end_date"""
        if self.start_date > self.end_date:
            raise ValueError(f"start_date ({self.start_date}) must not be after end_date ({self.end_date})")
        return self
