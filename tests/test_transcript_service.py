import logging

import pytest
import requests

from yt_timedtext.core.errors import (
    CaptionsNotFoundError,
    MalformedTranscriptError,
    NetworkError,
    TranscriptError,
)
from yt_timedtext.models.transcript import CaptionEntry
from yt_timedtext.providers.youtube import WindowCaptionURLExtractor, YouTubeClient
from yt_timedtext.services.transcript import TranscriptService

from conftest import WATCH, FakeResponse, caption_url_for, watch_page


@pytest.fixture
def test_logger():
    return logging.getLogger("tests.transcript_service")


def make_service(session, logger, **kwargs):
    return TranscriptService(client=YouTubeClient(session=session), logger=logger, **kwargs)


def test_scenario_skips_video_without_captions(scenario_session, test_logger):
    result = make_service(scenario_session, test_logger).get("abc123", "noCaptions999")
    assert result == {
        "abc123": [
            CaptionEntry(text="Hello", start=0.0, duration=1.5),
            CaptionEntry(text="World", start=1.5, duration=2.0),
        ]
    }
    assert "noCaptions999" not in result


def test_window_strategy_gives_same_result(scenario_session, test_logger):
    service = make_service(scenario_session, test_logger, extractor=WindowCaptionURLExtractor())
    assert list(service.get("abc123", "noCaptions999")) == ["abc123"]


def test_outcomes_distinguish_failure_kinds(scenario_session, test_logger):
    scenario_session.routes[WATCH.format("offline")] = requests.exceptions.ConnectTimeout("slow")
    outcomes = make_service(scenario_session, test_logger).get_outcomes("abc123", "noCaptions999", "offline")
    assert outcomes["abc123"].ok
    assert isinstance(outcomes["noCaptions999"].error, CaptionsNotFoundError)
    assert outcomes["noCaptions999"].error.video_id == "noCaptions999"
    assert not outcomes["noCaptions999"].ok
    assert outcomes["noCaptions999"].entries is None
    assert isinstance(outcomes["offline"].error, NetworkError)


def test_malformed_feed_does_not_affect_later_videos(scenario_session, test_logger):
    scenario_session.routes[WATCH.format("broken")] = FakeResponse(watch_page(caption_url_for("broken")))
    scenario_session.routes[caption_url_for("broken")] = FakeResponse("<transcript><text>")
    service = make_service(scenario_session, test_logger)

    outcomes = service.get_outcomes("broken", "abc123")
    assert isinstance(outcomes["broken"].error, MalformedTranscriptError)
    assert outcomes["abc123"].ok
    assert service.get("broken", "abc123").keys() == {"abc123"}


def test_network_and_http_failures_are_omitted(scenario_session, test_logger):
    scenario_session.routes[WATCH.format("down")] = requests.exceptions.ConnectionError("down")
    result = make_service(scenario_session, test_logger).get("down", "gone", "abc123")
    assert list(result) == ["abc123"]


def test_failure_is_logged(scenario_session, test_logger, caplog):
    with caplog.at_level(logging.WARNING, logger=test_logger.name):
        make_service(scenario_session, test_logger).get("noCaptions999")
    assert any("noCaptions999" in r.getMessage() for r in caplog.records)


def test_unexpected_errors_are_contained(scenario_session, test_logger):
    class ExplodingExtractor(WindowCaptionURLExtractor):
        def extract_caption_url(self, page_text):
            raise RuntimeError("layout changed")

    outcomes = make_service(scenario_session, test_logger, extractor=ExplodingExtractor()).get_outcomes("abc123")
    error = outcomes["abc123"].error
    assert type(error) is TranscriptError
    assert isinstance(error.__cause__, RuntimeError)


def test_fetch_transcript_raises_typed_error(scenario_session, test_logger):
    service = make_service(scenario_session, test_logger)
    assert len(service.fetch_transcript("abc123")) == 2
    with pytest.raises(CaptionsNotFoundError) as info:
        service.fetch_transcript("noCaptions999")
    assert "video_id=noCaptions999" in str(info.value)


def test_each_id_is_fetched_once_and_in_order(scenario_session, test_logger):
    make_service(scenario_session, test_logger).get("noCaptions999", "abc123", "noCaptions999")
    assert [c["url"] for c in scenario_session.calls] == [
        WATCH.format("noCaptions999"),
        WATCH.format("abc123"),
        caption_url_for("abc123"),
    ]


def test_empty_call_returns_empty_mapping(fake_session, test_logger):
    assert make_service(fake_session, test_logger).get() == {}
    assert fake_session.calls == []


def test_service_leaves_injected_client_open(fake_session, test_logger):
    with make_service(fake_session, test_logger):
        pass
    assert not fake_session.closed
