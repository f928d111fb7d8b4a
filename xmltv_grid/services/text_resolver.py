"""
Text Resolver

Picks the best localized text out of XMLTV (text, lang) pairs and decodes it
with the encoding declared by the document.
"""
from collections.abc import Sequence
import codecs
import logging

from xmltv_grid.config import default_languages
from xmltv_grid.errors import TextDecodeError, UnknownEncodingError
from xmltv_grid.services.grid_types import TextChoice


logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "UTF-8"


def _normalize_tag(tag: str) -> str:
    """'en-GB' and 'en_gb' compare equal"""
    return tag.replace("-", "_").lower()


def best_name(languages: Sequence[str], choices: Sequence[TextChoice]) -> TextChoice | None:
    """
    Choose the pair whose language best matches the preferred languages

    Preferred languages are tried in order: first an exact tag match,
    then a match on the base language ('en_GB' accepts 'en' or 'en_US').
    An untagged pair is the last resort.

    Args:
        languages: Preferred language codes, most wanted first
        choices: (text, lang) pairs in document order

    Returns:
        The first pair carrying the chosen language, or None if nothing is acceptable
    """
    wanted = [_normalize_tag(lang) for lang in languages]
    tagged = [(choice, _normalize_tag(choice[1])) for choice in choices if choice[1] is not None]

    for lang in wanted:
        for choice, tag in tagged:
            if tag == lang:
                return choice

    for lang in wanted:
        base = lang.split("_", 1)[0]
        for choice, tag in tagged:
            if tag == base or tag.startswith(base + "_"):
                return choice

    for choice in choices:
        if choice[1] is None:
            return choice

    return None


class TextResolver:
    """
    Resolves and decodes XMLTV text fields.

    The codec is looked up once per document from its declared encoding;
    until a document declares one, UTF-8 is assumed.
    """

    def __init__(self, languages: Sequence[str] | None = None):
        self.languages = list(languages) if languages else default_languages()
        self._codec = codecs.lookup(DEFAULT_ENCODING)

    @property
    def encoding(self) -> str:
        return self._codec.name

    def set_encoding(self, name: str) -> None:
        """
        Select the codec used by decode()

        Raises:
            UnknownEncodingError: If Python has no codec for the name
        """
        try:
            self._codec = codecs.lookup(name)
        except LookupError as e:
            logger.error(f"Unknown encoding {name}")
            raise UnknownEncodingError(f"Unknown encoding {name}") from e
        logger.debug(f"Document encoding set to {self._codec.name}")

    def decode(self, value: str | bytes | None) -> str | None:
        """
        Decode raw text using the declared encoding

        None stays None and str is already native text. Bytes are decoded
        strictly; nothing is substituted or dropped.

        Raises:
            TextDecodeError: If the bytes are invalid in the declared encoding
        """
        if value is None or isinstance(value, str):
            return value

        try:
            text, _ = self._codec.decode(value, "strict")
        except UnicodeDecodeError as e:
            raise TextDecodeError(f"Cannot decode {value!r} as {self._codec.name}: {e.reason}") from e
        return text

    def get_text(self, choices: Sequence[TextChoice] | None, exact: str | None = None) -> str | None:
        """
        Return the decoded text of the best choice

        Args:
            choices: (text, lang) pairs, possibly empty or None
            exact: If given, only a pair whose tag equals it literally is accepted

        Returns:
            Decoded text, or None when no pair is acceptable
        """
        if not choices:
            return None

        if exact is not None:
            for text, tag in choices:
                if tag == exact:
                    return self.decode(text)
            return None

        best = best_name(self.languages, choices)
        if best is None:
            return None
        return self.decode(best[0])
