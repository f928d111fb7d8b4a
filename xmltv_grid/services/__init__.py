"""
Services package for xmltv_grid

This package contains the parsing, channel and schedule building components.
"""
from xmltv_grid.services.text_resolver import TextResolver, best_name
from xmltv_grid.services.channel_builder import build_channel
from xmltv_grid.services.program_assigner import assign_program
from xmltv_grid.services.schedule_collector import XMLTVSchedule, build_grid_input
from xmltv_grid.services.xmltv_parser_service import (
    XMLTVCallbacks,
    parse_xmltv_file,
    parse_xmltv_files,
    parse_xmltv_string,
)

__all__ = [
    'TextResolver',
    'best_name',
    'build_channel',
    'assign_program',
    'XMLTVSchedule',
    'build_grid_input',
    'XMLTVCallbacks',
    'parse_xmltv_file',
    'parse_xmltv_files',
    'parse_xmltv_string',
]
