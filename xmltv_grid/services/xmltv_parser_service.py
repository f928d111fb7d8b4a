from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable
import codecs
import logging
import re

from lxml import etree # type: ignore

from xmltv_grid.errors import TextDecodeError, UnknownEncodingError, XMLTVFormatError
from xmltv_grid.services.grid_types import ChannelRecord, ProgrammeRecord, TextChoice

logger = logging.getLogger(__name__)

# Default system of <episode-num> per the XMLTV DTD
DEFAULT_EPISODE_SYSTEM = "onscreen"

_DECLARED_ENCODING_RE = re.compile(
    r"""^\s*<\?xml\s[^>]*?encoding\s*=\s*["']([^"']+)["']"""
)

_UNKNOWN_ENCODING_CODES = frozenset({
    etree.ErrorTypes.ERR_UNKNOWN_ENCODING,
    etree.ErrorTypes.ERR_UNSUPPORTED_ENCODING,
})


@dataclass(slots=True)
class XMLTVCallbacks:
    """Handlers invoked while walking an XMLTV document (None = skip)."""
    encoding: Callable[[str], Any] | None = None
    credits: Callable[[dict[str, str]], Any] | None = None
    channel: Callable[[ChannelRecord], Any] | None = None
    programme: Callable[[ProgrammeRecord], Any] | None = None


def _make_parser(encoding: str | None = None) -> etree.XMLParser:
    return etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True, encoding=encoding)


def _translate_syntax_error(error: etree.XMLSyntaxError, source: str) -> Exception:
    """Map lxml's encoding failures onto the package errors; anything else is kept"""
    logger.error(f"  XML parsing error in {source}: {error}")
    if error.code in _UNKNOWN_ENCODING_CODES:
        return UnknownEncodingError(f"Unknown encoding in {source}: {error.msg}")
    if error.code == etree.ErrorTypes.ERR_INVALID_ENCODING:
        return TextDecodeError(f"Cannot decode {source}: {error.msg}")
    return error


def _check_declared_encoding(document: str) -> str | None:
    """
    Encoding named by the XML declaration of a text document

    Raises:
        UnknownEncodingError: If Python has no codec for the declared name
    """
    match = _DECLARED_ENCODING_RE.match(document)
    if match is None:
        return None

    declared = match.group(1)
    try:
        codecs.lookup(declared)
    except LookupError as e:
        logger.error(f"Unknown encoding {declared}")
        raise UnknownEncodingError(f"Unknown encoding {declared}") from e
    return declared


def parse_xmltv_file(file_path: Path | str, callbacks: XMLTVCallbacks) -> None:
    """
    Parse XMLTV file and dispatch its records to the callbacks

    Args:
        file_path: Path to XMLTV file
        callbacks: Handlers for encoding, credits, channels and programmes

    Raises:
        UnknownEncodingError: If the declared encoding is not supported
        TextDecodeError: If the file holds bytes invalid in its encoding
        etree.XMLSyntaxError: If XML is otherwise malformed
        OSError: If file can't be read
        XMLTVFormatError: If the root element is not <tv>
    """
    logger.debug(f"Parsing XMLTV file: {file_path}")

    try:
        tree = etree.parse(str(file_path), _make_parser())
    except etree.XMLSyntaxError as e:
        error = _translate_syntax_error(e, str(file_path))
        if error is e:
            raise
        raise error from e

    _dispatch(tree, callbacks)


def parse_xmltv_string(document: str | bytes, callbacks: XMLTVCallbacks) -> None:
    """
    Parse XMLTV data held in memory and dispatch its records to the callbacks

    Text input is already decoded, so its declared encoding is only
    checked for being known and then reported to the encoding callback.

    Args:
        document: XMLTV document as text or raw bytes
        callbacks: Handlers for encoding, credits, channels and programmes

    Raises:
        UnknownEncodingError: If the declared encoding is not supported
        TextDecodeError: If raw bytes are invalid in the declared encoding
        etree.XMLSyntaxError: If XML is otherwise malformed
        XMLTVFormatError: If the root element is not <tv>
    """
    declared = None
    parser = _make_parser()
    if isinstance(document, str):
        declared = _check_declared_encoding(document)
        # lxml refuses str input carrying an encoding declaration
        document = document.encode("utf-8")
        parser = _make_parser(encoding="utf-8")

    try:
        root = etree.fromstring(document, parser)
    except etree.XMLSyntaxError as e:
        error = _translate_syntax_error(e, "document")
        if error is e:
            raise
        raise error from e

    _dispatch(root.getroottree(), callbacks, declared)


def parse_xmltv_files(file_paths: Iterable[Path | str], callbacks: XMLTVCallbacks) -> None:
    """Parse several XMLTV files one after another with the same callbacks"""
    for file_path in file_paths:
        parse_xmltv_file(file_path, callbacks)


def _dispatch(tree: etree._ElementTree, callbacks: XMLTVCallbacks, encoding: str | None = None) -> None:
    """Invoke the callbacks for one document, encoding first"""
    root = tree.getroot()
    if root.tag != 'tv':
        raise XMLTVFormatError(f"Not an XMLTV document (root element is <{root.tag}>)")

    encoding = encoding or tree.docinfo.encoding or "UTF-8"
    logger.debug(f"  XML document loaded (encoding: {encoding})")

    if callbacks.encoding:
        callbacks.encoding(encoding)

    if callbacks.credits:
        callbacks.credits(dict(root.attrib))

    for element in root:
        if element.tag == 'channel':
            if callbacks.channel:
                callbacks.channel(_channel_record(element))
        elif element.tag == 'programme':
            if callbacks.programme:
                callbacks.programme(_programme_record(element))


def _channel_record(channel: etree._Element) -> ChannelRecord:
    """Convert a <channel> element"""
    return ChannelRecord(
        id=channel.get('id', ''),
        display_names=_get_choices(channel, 'display-name'),
    )


def _programme_record(programme: etree._Element) -> ProgrammeRecord:
    """Convert a <programme> element"""
    return ProgrammeRecord(
        channel=programme.get('channel'),
        start=programme.get('start'),
        stop=programme.get('stop'),
        titles=_get_choices(programme, 'title'),
        sub_titles=_get_choices(programme, 'sub-title'),
        descriptions=_get_choices(programme, 'desc'),
        categories=_get_choices(programme, 'category'),
        episode_nums=_get_choices(programme, 'episode-num', attr='system', default=DEFAULT_EPISODE_SYSTEM),
        attributes=dict(programme.attrib),
    )


def _get_choices(
    element: etree._Element,
    tag: str,
    attr: str = 'lang',
    default: str | None = None
) -> list[TextChoice]:
    """Collect (text, attribute) pairs for every child with the given tag"""
    return [(_text(child), child.get(attr, default)) for child in element.findall(tag)]


def _text(element: etree._Element) -> str:
    """Element text with surrounding whitespace removed"""
    return (element.text or '').strip()
