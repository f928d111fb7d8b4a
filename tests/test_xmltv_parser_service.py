import pytest
from lxml import etree

from xmltv_grid.errors import TextDecodeError, UnknownEncodingError, XMLTVFormatError
from xmltv_grid.services.xmltv_parser_service import (
    XMLTVCallbacks,
    parse_xmltv_file,
    parse_xmltv_files,
    parse_xmltv_string,
)
from tests.factories import make_document


class Recorder:
    """Collects every callback invocation in order"""

    def __init__(self):
        self.calls = []

    def callbacks(self, credits=True) -> XMLTVCallbacks:
        return XMLTVCallbacks(
            encoding=lambda name: self.calls.append(("encoding", name)),
            credits=(lambda attrs: self.calls.append(("credits", attrs))) if credits else None,
            channel=lambda record: self.calls.append(("channel", record)),
            programme=lambda record: self.calls.append(("programme", record)),
        )

    def kinds(self):
        return [kind for kind, _ in self.calls]


FULL_DOCUMENT = make_document(
    '<channel id="I10183.labs.zap2it.com">'
    '<display-name>285 EWTN</display-name>'
    '<display-name lang="en">EWTN</display-name>'
    '<icon src="http://example.com/ewtn.png"/>'
    '<url>http://www.ewtn.com</url>'
    '</channel>'
    '<!-- listings -->'
    '<programme channel="I10183.labs.zap2it.com" start="20261019200000 -0500" stop="20261019210000 -0500">'
    '<title lang="en"> Mother Angelica Live </title>'
    '<title lang="es">Madre Angélica</title>'
    '<sub-title lang="en">Classics</sub-title>'
    '<desc lang="en">Talk show.</desc>'
    '<category lang="en">Religious</category>'
    '<episode-num system="dd_progid">EP00012345.0042</episode-num>'
    '<episode-num>S1E42</episode-num>'
    '</programme>'
)


def test_callbacks_fire_in_document_order():
    recorder = Recorder()
    parse_xmltv_string(FULL_DOCUMENT, recorder.callbacks())

    assert recorder.kinds() == ["encoding", "credits", "channel", "programme"]
    assert recorder.calls[0] == ("encoding", "UTF-8")
    assert recorder.calls[1] == ("credits", {"generator-info-name": "tests"})


def test_channel_record():
    recorder = Recorder()
    parse_xmltv_string(FULL_DOCUMENT, recorder.callbacks())
    channel = recorder.calls[2][1]

    assert channel.id == "I10183.labs.zap2it.com"
    assert channel.display_names == [("285 EWTN", None), ("EWTN", "en")]


def test_programme_record():
    recorder = Recorder()
    parse_xmltv_string(FULL_DOCUMENT, recorder.callbacks())
    programme = recorder.calls[3][1]

    assert programme.channel == "I10183.labs.zap2it.com"
    assert programme.start == "20261019200000 -0500"
    assert programme.stop == "20261019210000 -0500"
    assert programme.titles == [("Mother Angelica Live", "en"), ("Madre Angélica", "es")]
    assert programme.sub_titles == [("Classics", "en")]
    assert programme.descriptions == [("Talk show.", "en")]
    assert programme.categories == [("Religious", "en")]
    assert programme.episode_nums == [("EP00012345.0042", "dd_progid"), ("S1E42", "onscreen")]
    assert programme.attributes["channel"] == "I10183.labs.zap2it.com"


def test_skipped_callbacks():
    recorder = Recorder()
    callbacks = recorder.callbacks(credits=False)
    callbacks.programme = None
    parse_xmltv_string(FULL_DOCUMENT, callbacks)

    assert recorder.kinds() == ["encoding", "channel"]


def test_declared_encoding_is_reported():
    recorder = Recorder()
    document = make_document(
        '<channel id="tele"><display-name>12 Télé</display-name></channel>',
        encoding="ISO-8859-1",
    )
    parse_xmltv_string(document, recorder.callbacks())

    assert recorder.calls[0][1].upper() == "ISO-8859-1"
    assert recorder.calls[2][1].display_names == [("12 Télé", None)]


def test_text_input():
    recorder = Recorder()
    parse_xmltv_string('<tv><channel id="C1"><display-name>7 News</display-name></channel></tv>', recorder.callbacks())

    assert recorder.kinds() == ["encoding", "credits", "channel"]
    assert recorder.calls[0][1]


def test_text_input_reports_declared_encoding():
    recorder = Recorder()
    parse_xmltv_string(
        '<?xml version="1.0" encoding="ISO-8859-1"?><tv><channel id="C1"><display-name>12 Télé</display-name></channel></tv>',
        recorder.callbacks(),
    )

    assert recorder.calls[0] == ("encoding", "ISO-8859-1")
    assert recorder.calls[2][1].display_names == [("12 Télé", None)]


@pytest.mark.parametrize("document", [
    b'<?xml version="1.0" encoding="x-no-such-charset"?><tv/>',
    '<?xml version="1.0" encoding="x-no-such-charset"?><tv/>',
])
def test_unsupported_encoding(document):
    recorder = Recorder()
    with pytest.raises(UnknownEncodingError):
        parse_xmltv_string(document, recorder.callbacks())
    assert recorder.calls == []


def test_invalid_bytes_for_declared_encoding(tmp_path):
    document = b'<?xml version="1.0" encoding="UTF-8"?><tv><channel id="C1"><display-name>Caf\xe9</display-name></channel></tv>'
    with pytest.raises(TextDecodeError) as excinfo:
        parse_xmltv_string(document, Recorder().callbacks())
    assert isinstance(excinfo.value.__cause__, etree.XMLSyntaxError)

    listings = tmp_path / "listings.xml"
    listings.write_bytes(document)
    with pytest.raises(TextDecodeError):
        parse_xmltv_file(listings, Recorder().callbacks())


def test_not_xmltv():
    with pytest.raises(XMLTVFormatError, match="root element is <rss>"):
        parse_xmltv_string(b"<rss/>", Recorder().callbacks())


def test_malformed_xml():
    with pytest.raises(etree.XMLSyntaxError):
        parse_xmltv_string(b"<tv><channel></tv>", Recorder().callbacks())


def test_callback_errors_propagate():
    def explode(record):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        parse_xmltv_string(FULL_DOCUMENT, XMLTVCallbacks(channel=explode))


def test_files(tmp_path):
    first = tmp_path / "first.xml"
    second = tmp_path / "second.xml"
    first.write_bytes(FULL_DOCUMENT)
    second.write_bytes(make_document('<channel id="C1"><display-name>7 News</display-name></channel>'))

    recorder = Recorder()
    parse_xmltv_file(first, recorder.callbacks())
    assert recorder.kinds() == ["encoding", "credits", "channel", "programme"]

    recorder = Recorder()
    parse_xmltv_files([str(first), second], recorder.callbacks(credits=False))
    assert recorder.kinds() == ["encoding", "channel", "programme", "encoding", "channel"]


def test_missing_file(tmp_path):
    with pytest.raises(OSError):
        parse_xmltv_file(tmp_path / "missing.xml", Recorder().callbacks())
