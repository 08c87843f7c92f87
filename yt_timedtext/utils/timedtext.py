import html
import math
import xml.etree.ElementTree as ET
from typing import Dict, Iterable, List, Optional
from yt_timedtext.models.transcript import CaptionEntry
from yt_timedtext.core.errors import MalformedTranscriptError
from yt_timedtext.utils.logger import get_logger
from yt_timedtext.config import settings

logger = get_logger("timedtext")

class TranscriptParser:
    """Decodes a timed-text feed: ``<transcript><text start=".." dur="..">..</text>...</transcript>``."""

    node_tag = "text"

    def __init__(self, unescape_html: Optional[bool] = None):
        # Live feeds HTML-escape caption text inside the XML (``&amp;#39;``); opt in to decode it.
        self.unescape_html = settings.UNESCAPE_HTML if unescape_html is None else unescape_html

    def parse(self, content: str) -> List[CaptionEntry]:
        logger.debug("Parsing timed-text feed")
        try:
            root = ET.fromstring(content)
        except ET.ParseError as e:
            raise MalformedTranscriptError(f"Caption feed is not well-formed XML: {e}") from e

        entries = []
        for index, node in enumerate(root):
            entries.append(self._parse_node(node, index))
        logger.debug(f"Parsed {len(entries)} caption entries")
        return entries

    def _parse_node(self, node: ET.Element, index: int) -> CaptionEntry:
        tag = node.tag.split("}")[-1]
        if tag != self.node_tag:
            raise MalformedTranscriptError(f"Unexpected <{tag}> node at position {index}")
        start = self._seconds(node, "start", index)
        duration = self._seconds(node, "dur", index)
        text = "".join(node.itertext())
        if self.unescape_html:
            text = html.unescape(text)
        return CaptionEntry(text=text, start=start, duration=duration)

    def _seconds(self, node: ET.Element, attr: str, index: int) -> float:
        raw = node.attrib.get(attr)
        if raw is None:
            raise MalformedTranscriptError(f"Caption node {index} has no '{attr}' attribute")
        try:
            value = float(raw)
        except ValueError:
            raise MalformedTranscriptError(f"Caption node {index} has non-numeric '{attr}': {raw!r}")
        if value < 0 or math.isnan(value) or math.isinf(value):
            raise MalformedTranscriptError(f"Caption node {index} has invalid '{attr}': {raw!r}")
        return value

def parse_transcript(content: str, unescape_html: Optional[bool] = None) -> List[CaptionEntry]:
    return TranscriptParser(unescape_html=unescape_html).parse(content)

def to_timedtext_xml(entries: Iterable[CaptionEntry], root_tag: str = "transcript", escape_html: bool = False) -> str:
    """Render entries as a timed-text document that ``TranscriptParser`` reads back.

    With ``escape_html`` the text is escaped twice, as the live feed does;
    read such a document back with ``unescape_html=True``.
    """
    root = ET.Element(root_tag)
    for entry in entries:
        node = ET.SubElement(root, "text", start=repr(entry.start), dur=repr(entry.duration))
        node.text = html.escape(entry.text, quote=False) if escape_html else entry.text
    return ET.tostring(root, encoding="unicode")

def entries_by_start(entries: Iterable[CaptionEntry]) -> Dict[float, CaptionEntry]:
    """Key entries by start time; a later entry with the same start replaces an earlier one."""
    return {entry.start: entry for entry in entries}
