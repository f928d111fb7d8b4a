import pytest

from xmltv_grid.errors import UnknownChannelError
from xmltv_grid.schemas import ScheduleEntry
from xmltv_grid.services.channel_builder import build_channel
from xmltv_grid.services.program_assigner import assign_program, compose_title, format_part
from xmltv_grid.utils.timezone import DateFormatError
from tests.factories import at, make_programme, xmltv_time


@pytest.fixture
def channels(resolver, news_channel_record):
    channels = {}
    build_channel(news_channel_record, channels, resolver, channel_settings={}, lines_per_channel=2)
    return channels


def assign(record, channels, resolver, window=(at(0), at(23, 59)), callback=None, parser=None):
    assign_program(record, channels, window[0], window[1], resolver, callback, parser)
    return channels["C1"].schedule


class TestWindowFilter:
    def morning_show(self):
        return make_programme(start=xmltv_time(10), stop=xmltv_time(11), title="Morning Show")

    def test_inside_window(self, channels, resolver):
        schedule = assign(self.morning_show(), channels, resolver, window=(at(9), at(12)))
        assert schedule == [ScheduleEntry(at(10), at(11), "Morning Show")]

    def test_ends_before_window(self, channels, resolver):
        assert assign(self.morning_show(), channels, resolver, window=(at(11, 1), at(23, 59))) == []

    def test_starts_after_window(self, channels, resolver):
        assert assign(self.morning_show(), channels, resolver, window=(at(0), at(9, 59))) == []

    def test_touching_bounds_are_kept(self, channels, resolver):
        assign(self.morning_show(), channels, resolver, window=(at(11), at(23)))
        schedule = assign(self.morning_show(), channels, resolver, window=(at(0), at(10)))
        assert len(schedule) == 2

    def test_partial_overlap_is_kept(self, channels, resolver):
        assert len(assign(self.morning_show(), channels, resolver, window=(at(10, 30), at(12)))) == 1


class TestMultiPart:
    @pytest.mark.parametrize("dd_progid, part", [
        ("EP01234567.0003.0/2", "(1/2)"),
        ("EP01234567.0003.1/2", "(2/2)"),
        ("EP01234567.0003", None),
        (None, None),
    ])
    def test_format_part(self, dd_progid, part):
        assert format_part(dd_progid) == part

    def test_part_is_appended(self, channels, resolver):
        record = make_programme(title="Drama", sub_title="Pilot", dd_progid="EP0001.0001.0/2")
        assert assign(record, channels, resolver)[0].text == "Drama: Pilot (1/2)"


@pytest.mark.parametrize("show, episode, part, text", [
    ("Game Show", "", None, "Game Show"),
    ("Game Show", None, "", "Game Show"),
    ("Drama", "Pilot", "(1/2)", "Drama: Pilot (1/2)"),
    ("Drama", None, "(2/2)", "Drama (2/2)"),
])
def test_compose_title(show, episode, part, text):
    assert compose_title(show, episode, part) == text


def test_entries_keep_arrival_order(channels, resolver):
    assign(make_programme(start=xmltv_time(21), stop=xmltv_time(22), title="Late"), channels, resolver)
    schedule = assign(make_programme(title="Early"), channels, resolver)
    assert [entry.text for entry in schedule] == ["Late", "Early"]


def test_unknown_channel(channels, resolver):
    record = make_programme(channel="C9", dd_progid="EP0042.0001")
    with pytest.raises(UnknownChannelError, match="Unknown channel C9 for episode EP0042.0001"):
        assign_program(record, channels, at(0), at(23), resolver)


def test_malformed_time(channels, resolver):
    with pytest.raises(DateFormatError):
        assign(make_programme(start="tonight"), channels, resolver)


class TestCallback:
    def test_event_contents(self, channels, resolver):
        seen = []
        parser = object()
        record = make_programme(title="Drama", sub_title="Pilot", dd_progid="EP1.2.1/3")
        assign(record, channels, resolver, callback=seen.append, parser=parser)

        event = seen[0]
        assert (event.show, event.episode, event.part) == ("Drama", "Pilot", "(2/3)")
        assert event.category == ""
        assert (event.start, event.stop) == (at(20), at(21))
        assert event.channel is channels["C1"]
        assert event.dd_progid == "EP1.2.1/3"
        assert event.xml is record
        assert event.parser is parser

    def test_callback_changes_entry(self, channels, resolver):
        def retitle(event):
            event.show = event.show.upper()
            event.episode = None
            event.part = None
            event.category = "news"

        schedule = assign(make_programme(sub_title="Headlines"), channels, resolver, callback=retitle)
        assert schedule == [ScheduleEntry(at(20), at(21), "EVENING NEWS", "news")]

    def test_not_called_outside_window(self, channels, resolver):
        seen = []
        assign(make_programme(), channels, resolver, window=(at(0), at(1)), callback=seen.append)
        assert seen == []

    def test_empty_category_is_omitted(self, channels, resolver):
        entry = assign(make_programme(), channels, resolver, callback=lambda event: None)[0]
        assert entry.category is None
        assert entry == (at(20), at(21), "Evening News", None)
