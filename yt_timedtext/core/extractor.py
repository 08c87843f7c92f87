from abc import ABC, abstractmethod
from typing import Optional
from urllib.parse import urljoin
from yt_timedtext.config import settings

_ESCAPED_AMPERSANDS = ("\\\\u0026", "\\u0026", "&amp;")

def unescape_caption_url(fragment: str, base_url: Optional[str] = None) -> str:
    """Turn an escaped URL fragment lifted from page source into a fetchable URL."""
    url = fragment.strip()
    for seq in _ESCAPED_AMPERSANDS:
        url = url.replace(seq, "&")
    url = url.replace("\\", "")
    return urljoin(base_url or settings.BASE_URL, url)

class CaptionURLExtractor(ABC):
    """Locates the caption-track URL embedded in a watch page.

    The page layout is undocumented and changes without notice, so each
    strategy lives behind this one method.
    """

    name = "base"

    @abstractmethod
    def extract_caption_url(self, page_text: str) -> str:
        """Return an absolute caption feed URL or raise CaptionsNotFoundError."""
        pass
