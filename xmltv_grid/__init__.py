"""
xmltv_grid

Turns XMLTV listings into channel schedules ready for a TV listings grid renderer.
"""
from xmltv_grid.errors import (
    GridAlreadyBuiltError,
    MissingChannelNameError,
    MissingChannelNumberError,
    TextDecodeError,
    UnknownChannelError,
    UnknownEncodingError,
    XMLTVFormatError,
    XMLTVGridError,
)
from xmltv_grid.schemas import Channel, ChannelSettings, GridInput, ScheduleEntry
from xmltv_grid.services import XMLTVSchedule
from xmltv_grid.services.grid_types import ProgramEvent
from xmltv_grid.utils.timezone import DateFormatError

__version__ = "0.1.0"

__all__ = [
    'XMLTVSchedule',
    'Channel',
    'ChannelSettings',
    'GridInput',
    'ScheduleEntry',
    'ProgramEvent',
    'XMLTVGridError',
    'XMLTVFormatError',
    'UnknownEncodingError',
    'TextDecodeError',
    'MissingChannelNameError',
    'MissingChannelNumberError',
    'UnknownChannelError',
    'GridAlreadyBuiltError',
    'DateFormatError',
]
