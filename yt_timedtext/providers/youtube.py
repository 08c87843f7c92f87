import re
from typing import Optional
from urllib.parse import urlparse, parse_qs
import requests
from urllib3.exceptions import ReadTimeoutError
from yt_timedtext.core.extractor import CaptionURLExtractor, unescape_caption_url
from yt_timedtext.core.errors import CaptionsNotFoundError, NetworkError, ReadError
from yt_timedtext.utils.logger import get_logger
from yt_timedtext.config import settings

logger = get_logger("youtube")

_VIDEO_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11}$")
_XML_ENCODING_RE = re.compile(rb"<\?xml[^>]*?encoding=[\"']([A-Za-z0-9._-]+)[\"']")

def parse_video_id(value: str) -> str:
    """Accept a bare video id or a watch / shorts / youtu.be URL."""
    value = value.strip().strip('`').strip('"').strip("'").strip()
    if _VIDEO_ID_RE.match(value):
        return value
    p = urlparse(value if "://" in value else f"https://{value}")
    host = (p.hostname or "").lower()
    if host == "youtube.com" or host.endswith(".youtube.com"):
        if p.path == "/watch":
            v = (parse_qs(p.query or "").get("v") or [None])[0]
            if v:
                return v
        m = re.match(r"^/(?:shorts|embed|live)/([A-Za-z0-9_-]+)", p.path or "")
        if m:
            return m.group(1)
    elif host in ("youtu.be", "www.youtu.be"):
        vid = (p.path or "").strip("/").split("/")[0]
        if vid:
            return vid
    # Opaque token; let the watch page decide whether it exists.
    return value

class PatternCaptionURLExtractor(CaptionURLExtractor):
    """Reads ``baseUrl`` of the first caption track from the player response JSON."""

    name = "pattern"
    pattern = re.compile(
        r'"captions":\{"playerCaptionsTracklistRenderer":\{"captionTracks":\[\{"baseUrl":"(.*?)"'
    )

    def extract_caption_url(self, page_text: str) -> str:
        m = self.pattern.search(page_text or "")
        if not m or not m.group(1):
            raise CaptionsNotFoundError("Caption track marker not found in page")
        return unescape_caption_url(m.group(1))

class WindowCaptionURLExtractor(CaptionURLExtractor):
    """Takes a fixed-size window of page text starting at the ``timedtext`` marker."""

    name = "window"
    marker = "timedtext"

    def __init__(self, window_size: Optional[int] = None, api_base_url: Optional[str] = None):
        self.window_size = window_size or settings.WINDOW_SIZE
        self.api_base_url = api_base_url or settings.API_BASE_URL

    def extract_caption_url(self, page_text: str) -> str:
        idx = (page_text or "").find(self.marker)
        if idx == -1:
            raise CaptionsNotFoundError(f"'{self.marker}' marker not found in page")
        fragment = page_text[idx:idx + self.window_size]
        # The URL is a JSON string value; it ends at the first unescaped quote.
        end = re.search(r'(?<!\\)"', fragment)
        if end:
            fragment = fragment[:end.start()]
        return unescape_caption_url(fragment, base_url=self.api_base_url)

EXTRACTORS = {
    PatternCaptionURLExtractor.name: PatternCaptionURLExtractor,
    WindowCaptionURLExtractor.name: WindowCaptionURLExtractor,
}

def make_extractor(strategy: Optional[str] = None) -> CaptionURLExtractor:
    strategy = strategy or settings.EXTRACTION_STRATEGY
    try:
        return EXTRACTORS[strategy]()
    except KeyError:
        raise ValueError(f"Unknown extraction strategy: {strategy!r} (expected one of {sorted(EXTRACTORS)})")

class YouTubeClient:
    """Blocking HTTP access to the watch page and the caption feed."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        self._owns_session = session is None
        self.session = session or requests.Session()
        if self._owns_session:
            self.session.headers.update({
                'User-Agent': settings.USER_AGENT,
                'Accept-Language': settings.ACCEPT_LANGUAGE,
            })
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT

    def watch_url(self, video_id: str) -> str:
        return settings.WATCH_URL_TEMPLATE.format(video_id=video_id)

    def fetch_page(self, video_id: str) -> str:
        url = self.watch_url(video_id)
        logger.debug(f"Fetching watch page {url}")
        return self._get_text(url, video_id=video_id)

    def fetch_captions(self, caption_url: str, video_id: Optional[str] = None) -> str:
        logger.debug(f"Fetching caption feed {caption_url}")
        return self._get_text(caption_url, video_id=video_id)

    def _get_text(self, url: str, video_id: Optional[str] = None) -> str:
        try:
            resp = self.session.get(url, timeout=self.timeout, stream=True)
        except requests.exceptions.Timeout as e:
            raise NetworkError(f"Request timed out after {self.timeout}s", video_id=video_id, url=url) from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Request failed: {e}", video_id=video_id, url=url) from e

        with resp:
            try:
                resp.raise_for_status()
            except requests.exceptions.HTTPError as e:
                raise NetworkError(f"HTTP {resp.status_code}", video_id=video_id, url=url) from e
            try:
                body = resp.content
            except requests.exceptions.ConnectionError as e:
                if e.args and isinstance(e.args[0], ReadTimeoutError):
                    raise NetworkError(f"Read timed out after {self.timeout}s", video_id=video_id, url=url) from e
                raise ReadError(f"Failed to read response body: {e}", video_id=video_id, url=url) from e
            except requests.exceptions.RequestException as e:
                raise ReadError(f"Failed to read response body: {e}", video_id=video_id, url=url) from e
            try:
                return body.decode(self._body_encoding(resp, body), errors="replace")
            except LookupError:
                return body.decode("utf-8", errors="replace")

    def _body_encoding(self, resp, body: bytes) -> str:
        content_type = (resp.headers.get("Content-Type") or "").lower()
        if "charset=" in content_type and resp.encoding:
            return resp.encoding
        # Without a charset requests assumes ISO-8859-1 for text/*; XML names its own or is UTF-8.
        if "xml" in content_type or body.lstrip().startswith(b"<?xml"):
            m = _XML_ENCODING_RE.match(body.lstrip())
            return m.group(1).decode("ascii") if m else "utf-8"
        return resp.apparent_encoding or "utf-8"

    def close(self):
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
