"""
Program Assigner

Normalizes one XMLTV programme occurrence and appends it to its channel's schedule.
"""
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Callable
import logging
import re

from xmltv_grid.errors import UnknownChannelError
from xmltv_grid.schemas import Channel, ScheduleEntry
from xmltv_grid.services.grid_types import ProgramEvent, ProgrammeRecord
from xmltv_grid.services.text_resolver import TextResolver
from xmltv_grid.utils.timezone import parse_xmltv_datetime

logger = logging.getLogger(__name__)

# Schedules Direct program id, e.g. 'EP01234567.0003.0/2'
DD_PROGID_SYSTEM = 'dd_progid'

_PART_RE = re.compile(r"\.(\d+)/(\d+)$")


def format_part(dd_progid: str | None) -> str | None:
    """'EP0123.0001.0/2' -> '(1/2)'; None if not a multi-part episode"""
    if dd_progid is None:
        return None
    match = _PART_RE.search(dd_progid)
    if match is None:
        return None
    return f"({int(match.group(1)) + 1}/{int(match.group(2))})"


def compose_title(show: str | None, episode: str | None, part: str | None) -> str:
    """Show title followed by ': episode' and ' part' when present"""
    text = show or ''
    if episode:
        text += f": {episode}"
    if part:
        text += f" {part}"
    return text


def assign_program(
    record: ProgrammeRecord,
    channels: Mapping[str, Channel],
    window_start: datetime,
    window_end: datetime,
    resolver: TextResolver,
    callback: Callable[[ProgramEvent], Any] | None = None,
    parser: Any = None
) -> None:
    """
    Add one programme occurrence to its channel's schedule

    Occurrences ending before window_start or starting after window_end
    are skipped without error.

    Args:
        record: Programme record from the XML parser
        channels: Channels built so far, keyed by XMLTV id
        window_start: Start of the requested listings window
        window_end: End of the requested listings window
        resolver: Text resolver for the current document
        callback: Optional hook allowed to modify the ProgramEvent
        parser: Object exposed to the hook as event.parser

    Raises:
        UnknownChannelError: If the channel was never declared
        DateFormatError: If start or stop is not a valid XMLTV datetime
    """
    channel_id = resolver.decode(record.channel)
    channel = channels.get(channel_id)

    dd_progid = resolver.get_text(record.episode_nums, DD_PROGID_SYSTEM)

    if channel is None:
        logger.error(f"Unknown channel {channel_id} for episode {dd_progid}")
        raise UnknownChannelError(channel_id, dd_progid)

    event = ProgramEvent(
        show=resolver.get_text(record.titles),
        episode=resolver.get_text(record.sub_titles),
        start=parse_xmltv_datetime(record.start),
        stop=parse_xmltv_datetime(record.stop),
        channel=channel,
        dd_progid=dd_progid,
        xml=record,
        parser=parser,
    )

    if event.stop < window_start or event.start > window_end:
        logger.debug(f"Skipping {event.show} on {channel_id} at {event.start.isoformat()} (outside window)")
        return

    event.part = format_part(dd_progid)

    if callback:
        callback(event)

    channel.schedule.append(ScheduleEntry(
        event.start,
        event.stop,
        compose_title(event.show, event.episode, event.part),
        event.category or None,
    ))
