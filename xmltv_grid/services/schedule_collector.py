"""
Schedule Collector

Drives the XML parser over one or more XMLTV documents, building channels and
their schedules, then assembles the input for the grid renderer.
"""
from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Sequence
import logging

from xmltv_grid.errors import GridAlreadyBuiltError
from xmltv_grid.schemas import Channel, ChannelSettings, GridInput, GridOptions
from xmltv_grid.services.channel_builder import build_channel
from xmltv_grid.services.grid_types import ChannelRecord, ProgramEvent, ProgrammeRecord, TextChoice
from xmltv_grid.services.program_assigner import assign_program
from xmltv_grid.services.text_resolver import TextResolver
from xmltv_grid.services.xmltv_parser_service import (
    XMLTVCallbacks,
    parse_xmltv_file,
    parse_xmltv_string,
)
from xmltv_grid.utils.logging_helpers import (
    log_grid_stats,
    log_parse_summary,
    log_section_end,
    log_section_start,
    log_source_processing,
)


logger = logging.getLogger(__name__)


def build_grid_input(
    channels: Mapping[str, Channel],
    start_date: datetime,
    end_date: datetime,
    extra: Mapping[str, Any] | None = None
) -> GridInput:
    """
    Package channels for the grid renderer

    Channels are sorted by number; channels sharing a number keep
    their insertion order. Keys in extra override the defaults.
    """
    resources = sorted(channels.values(), key=lambda channel: channel.number)
    log_grid_stats(logger, len(resources), sum(len(channel.schedule) for channel in resources))

    fields: dict[str, Any] = {
        'resource_title': 'Channel',
        'resources': resources,
        'start_date': start_date,
        'end_date': end_date,
    }
    fields.update(extra or {})

    return GridInput(**fields)


class XMLTVSchedule:
    """
    Collects XMLTV listings into per-channel schedules.

    parse() and parse_files() may be called repeatedly to accumulate data;
    grid() may only be called once.
    """

    def __init__(
        self,
        start_date: datetime | str,
        end_date: datetime | str,
        *,
        channel_settings: Mapping[str, ChannelSettings | Mapping[str, Any]] | None = None,
        lines_per_channel: int | None = None,
        program_callback: Callable[[ProgramEvent], Any] | None = None,
        languages: Sequence[str] | None = None
    ) -> None:
        options: dict[str, Any] = {
            'start_date': start_date,
            'end_date': end_date,
            'channel_settings': dict(channel_settings or {}),
            'program_callback': program_callback,
        }
        if lines_per_channel is not None:
            options['lines_per_channel'] = lines_per_channel
        if languages:
            options['languages'] = list(languages)

        self.options = GridOptions(**options)
        self.channels: dict[str, Channel] = {}
        self.resolver = TextResolver(self.options.languages)
        self._grid_built = False
        self._kept = 0
        self._skipped = 0

    @property
    def start_date(self) -> datetime:
        return self.options.start_date

    @property
    def end_date(self) -> datetime:
        return self.options.end_date

    @property
    def languages(self) -> list[str]:
        return self.resolver.languages

    def decode(self, value: str | bytes | None) -> str | None:
        """Decode text using the encoding declared by the current document."""
        return self.resolver.decode(value)

    def get_text(self, choices: Sequence[TextChoice] | None, exact: str | None = None) -> str | None:
        """Pick and decode the best (text, lang) pair; see TextResolver.get_text."""
        return self.resolver.get_text(choices, exact)

    def parse(self, document: str | bytes) -> XMLTVSchedule:
        """Parse XMLTV data held in memory, adding its listings to the schedule."""
        log_section_start(logger, "XMLTV document parsing")
        self._reset_counters()
        parse_xmltv_string(document, self._callbacks())
        self._log_summary()
        log_section_end(logger, "XMLTV document parsing")
        return self

    def parse_files(self, *file_paths: Path | str) -> XMLTVSchedule:
        """Parse one or more XMLTV files, adding their listings to the schedule."""
        log_section_start(logger, "XMLTV file parsing")
        self._reset_counters()
        for idx, file_path in enumerate(file_paths, start=1):
            log_source_processing(logger, idx, len(file_paths), str(file_path))
            parse_xmltv_file(file_path, self._callbacks())
        self._log_summary()
        log_section_end(logger, "XMLTV file parsing")
        return self

    def grid(self, extra: Mapping[str, Any] | None = None, **kwargs: Any) -> GridInput:
        """
        Build the grid renderer input from the listings collected so far

        Accepts renderer parameters either as a single mapping or as keywords.

        Raises:
            GridAlreadyBuiltError: If called a second time
        """
        if self._grid_built:
            raise GridAlreadyBuiltError("You can only call 'grid' once")
        self._grid_built = True

        return build_grid_input(
            self.channels,
            self.start_date,
            self.end_date,
            {**(extra or {}), **kwargs},
        )

    def _callbacks(self) -> XMLTVCallbacks:
        return XMLTVCallbacks(
            encoding=self.resolver.set_encoding,
            credits=None,
            channel=self._on_channel,
            programme=self._on_programme,
        )

    def _on_channel(self, record: ChannelRecord) -> None:
        build_channel(
            record,
            self.channels,
            self.resolver,
            channel_settings=self.options.channel_settings,
            lines_per_channel=self.options.lines_per_channel,
        )

    def _on_programme(self, record: ProgrammeRecord) -> None:
        # Looked up again only to tell kept from skipped occurrences for the summary
        channel = self.channels.get(self.resolver.decode(record.channel))
        entries_before = len(channel.schedule) if channel else 0
        assign_program(
            record,
            self.channels,
            self.start_date,
            self.end_date,
            self.resolver,
            self.options.program_callback,
            self,
        )
        if channel is not None and len(channel.schedule) > entries_before:
            self._kept += 1
        else:
            self._skipped += 1

    def _reset_counters(self) -> None:
        self._kept = 0
        self._skipped = 0

    def _log_summary(self) -> None:
        log_parse_summary(logger, len(self.channels), self._kept, self._skipped)
