"""
Shared dataclasses used across the XMLTV to grid pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from xmltv_grid.schemas import Channel

# (text, language or scheme); text may still be raw bytes
TextChoice = tuple[str | bytes | None, str | None]


@dataclass(slots=True)
class ChannelRecord:
    """A <channel> element as delivered by the XML parser."""
    id: str | bytes
    display_names: list[TextChoice] = field(default_factory=list)


@dataclass(slots=True)
class ProgrammeRecord:
    """A <programme> element as delivered by the XML parser."""
    channel: str | bytes | None
    start: str | None
    stop: str | None
    titles: list[TextChoice] = field(default_factory=list)
    sub_titles: list[TextChoice] = field(default_factory=list)
    descriptions: list[TextChoice] = field(default_factory=list)
    categories: list[TextChoice] = field(default_factory=list)
    episode_nums: list[TextChoice] = field(default_factory=list)
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class ProgramEvent:
    """
    Mutable view of one occurrence handed to the program callback.

    The callback may change show, episode, part and category
    (and start/stop, though it probably shouldn't).
    """
    show: str | None
    episode: str | None
    start: datetime
    stop: datetime
    channel: Channel
    dd_progid: str | None
    xml: ProgrammeRecord
    parser: Any
    part: str | None = None
    category: str = ""


__all__ = ["TextChoice", "ChannelRecord", "ProgrammeRecord", "ProgramEvent"]
