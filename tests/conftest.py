import pytest

from xmltv_grid.services.grid_types import ChannelRecord
from xmltv_grid.services.text_resolver import TextResolver
from tests.factories import make_document


@pytest.fixture
def resolver() -> TextResolver:
    return TextResolver(["en"])


@pytest.fixture
def news_channel_record() -> ChannelRecord:
    return ChannelRecord(id="C1", display_names=[("7 News", None)])


@pytest.fixture
def sample_document() -> bytes:
    return make_document(
        '<channel id="C1"><display-name>7 News</display-name></channel>'
        '<programme channel="C1" start="20261019200000 +0000" stop="20261019210000 +0000">'
        '<title lang="en">Evening News</title>'
        '</programme>'
    )
