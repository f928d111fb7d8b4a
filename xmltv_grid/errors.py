"""
Exceptions raised while turning XMLTV data into grid input.

Every error aborts the current parse; nothing is recovered locally.
"""


class XMLTVGridError(Exception):
    """Base class for all xmltv_grid errors"""
    pass


class XMLTVFormatError(XMLTVGridError, ValueError):
    """Raised when a document is well-formed XML but not XMLTV"""
    pass


class UnknownEncodingError(XMLTVGridError, LookupError):
    """Raised when the declared document encoding is not recognized"""
    pass


class TextDecodeError(XMLTVGridError, UnicodeError):
    """Raised when raw text is not valid in the declared encoding"""
    pass


class ChannelDataError(XMLTVGridError, ValueError):
    """Raised when a channel record cannot be normalized"""

    def __init__(self, channel_id: str, message: str):
        super().__init__(message)
        self.channel_id = channel_id


class MissingChannelNameError(ChannelDataError):
    """Raised when a channel ends up without a display name"""

    def __init__(self, channel_id: str):
        super().__init__(channel_id, f"Channel id {channel_id} has no name")


class MissingChannelNumberError(ChannelDataError):
    """Raised when a channel ends up without a sort number"""

    def __init__(self, channel_id: str):
        super().__init__(channel_id, f"Channel id {channel_id} has no number")


class UnknownChannelError(XMLTVGridError, KeyError):
    """Raised when a programme references a channel that was never declared"""

    def __init__(self, channel_id: str, dd_progid: str | None):
        super().__init__(f"Unknown channel {channel_id} for episode {dd_progid}")
        self.channel_id = channel_id
        self.dd_progid = dd_progid

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class GridAlreadyBuiltError(XMLTVGridError, RuntimeError):
    """Raised when the grid input is requested a second time"""
    pass
