"""
Channel Builder

Turns XMLTV <channel> records into grid channels, applying per-channel settings.
"""
from collections.abc import Mapping, MutableMapping
import logging
import re

from xmltv_grid.errors import MissingChannelNameError, MissingChannelNumberError
from xmltv_grid.schemas import Channel, ChannelSettings
from xmltv_grid.services.grid_types import ChannelRecord
from xmltv_grid.services.text_resolver import TextResolver

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"[0-9]+")


def extract_channel_number(name: str | None) -> int | None:
    """First run of digits in a display name ('285 EWTN' -> 285, 'Ch7' -> 7)"""
    if name is None:
        return None
    match = _NUMBER_RE.search(name)
    return int(match.group()) if match else None


def build_channel(
    record: ChannelRecord,
    channels: MutableMapping[str, Channel],
    resolver: TextResolver,
    *,
    channel_settings: Mapping[str, ChannelSettings],
    lines_per_channel: int
) -> Channel:
    """
    Build a channel from its XMLTV record and register it

    Settings keyed by display name are applied first, then settings keyed
    by XMLTV id, so the id wins where both set the same key.
    An existing channel with the same id is replaced.

    Raises:
        MissingChannelNameError: If no name is available after merging settings
        MissingChannelNumberError: If no number is available after merging settings
    """
    xml_id = resolver.decode(record.id)
    name = resolver.decode(record.display_names[0][0]) if record.display_names else None

    by_id = channel_settings.get(xml_id)
    by_name = channel_settings.get(name if name is not None else '')

    info = {
        'name': name,
        'number': extract_channel_number(name),
        'lines': lines_per_channel,
        'schedule': [],
    }
    if by_name:
        info.update(by_name.model_dump(exclude_unset=True))
    if by_id:
        info.update(by_id.model_dump(exclude_unset=True))
    info['id'] = xml_id

    if info['name'] is None:
        logger.error(f"Channel id {xml_id} has no name")
        raise MissingChannelNameError(xml_id)
    if info['number'] is None:
        logger.error(f"Channel id {xml_id} has no number")
        raise MissingChannelNumberError(xml_id)

    if xml_id in channels:
        logger.debug(f"Replacing channel {xml_id} declared earlier")

    channel = Channel(**info)
    channels[xml_id] = channel
    logger.debug(f"Built channel {xml_id}: {channel.name} (number {channel.number})")

    return channel
