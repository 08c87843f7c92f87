import pytest
import requests

WATCH = "https://www.youtube.com/watch?v={}"

HELLO_WORLD_FEED = (
    '<transcript><text start="0.0" dur="1.5">Hello</text>'
    '<text start="1.5" dur="2.0">World</text></transcript>'
)


def caption_url_for(video_id: str) -> str:
    return f"https://www.youtube.com/api/timedtext?v={video_id}&lang=en&fmt=srv1"


def watch_page(caption_url: str = None) -> str:
    """A trimmed-down watch page; the player response escapes '&' as \\u0026."""
    if caption_url is None:
        return '<html><script>var ytInitialPlayerResponse = {"playabilityStatus":{"status":"OK"}};</script></html>'
    escaped = caption_url.replace("&", "\\u0026")
    return (
        '<html><script>var ytInitialPlayerResponse = {"responseContext":{},'
        '"captions":{"playerCaptionsTracklistRenderer":{"captionTracks":[{"baseUrl":"'
        + escaped
        + '","name":{"simpleText":"English"},"languageCode":"en"}]}}};</script></html>'
    )


class FakeResponse:
    def __init__(self, body="", status_code=200, encoding="utf-8", read_error=None):
        self._body = body.encode(encoding) if isinstance(body, str) else body
        self.status_code = status_code
        self.encoding = encoding
        self.headers = {"Content-Type": f"text/html; charset={encoding}"}
        self.read_error = read_error
        self.closed = False

    @property
    def content(self):
        if self.read_error is not None:
            raise self.read_error
        return self._body

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class FakeSession:
    """Routes GETs by exact URL; a route may be a FakeResponse or an exception to raise."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.headers = {}
        self.calls = []
        self.responses = []
        self.closed = False

    def get(self, url, timeout=None, stream=False):
        self.calls.append({"url": url, "timeout": timeout, "stream": stream})
        route = self.routes.get(url)
        if isinstance(route, Exception):
            raise route
        response = route if route is not None else FakeResponse("not found", status_code=404)
        self.responses.append(response)
        return response

    def close(self):
        self.closed = True


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def scenario_session():
    """abc123 has captions, noCaptions999 does not."""
    return FakeSession({
        WATCH.format("abc123"): FakeResponse(watch_page(caption_url_for("abc123"))),
        caption_url_for("abc123"): FakeResponse(HELLO_WORLD_FEED),
        WATCH.format("noCaptions999"): FakeResponse(watch_page()),
    })
