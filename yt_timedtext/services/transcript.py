import logging
from typing import Dict, List, Optional
from yt_timedtext.core.extractor import CaptionURLExtractor
from yt_timedtext.core.errors import TranscriptError
from yt_timedtext.models.transcript import CaptionEntry, TranscriptCollection, TranscriptOutcome
from yt_timedtext.providers.youtube import YouTubeClient, make_extractor
from yt_timedtext.utils.timedtext import TranscriptParser
from yt_timedtext.utils.logger import logger as default_logger

class TranscriptService:
    """Runs page -> caption URL -> caption feed -> entries for each video id, one at a time."""

    def __init__(
        self,
        client: Optional[YouTubeClient] = None,
        extractor: Optional[CaptionURLExtractor] = None,
        parser: Optional[TranscriptParser] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._owns_client = client is None
        self.client = client or YouTubeClient()
        self.extractor = extractor or make_extractor()
        self.parser = parser or TranscriptParser()
        self.logger = logger or default_logger

    def fetch_transcript(self, video_id: str) -> List[CaptionEntry]:
        """Run the pipeline for one id. Raises a TranscriptError subclass on failure."""
        try:
            self.logger.info(f"Fetching watch page for {video_id}...")
            page = self.client.fetch_page(video_id)
            caption_url = self.extractor.extract_caption_url(page)
            self.logger.debug(f"Caption URL for {video_id}: {caption_url}")
            feed = self.client.fetch_captions(caption_url, video_id=video_id)
            return self.parser.parse(feed)
        except TranscriptError as e:
            if e.video_id is None:
                e.video_id = video_id
                e.details = {"video_id": video_id, **e.details}
            raise

    def get_outcomes(self, *video_ids: str) -> Dict[str, TranscriptOutcome]:
        outcomes: Dict[str, TranscriptOutcome] = {}
        for video_id in video_ids:
            if video_id in outcomes:
                self.logger.debug(f"Skipping duplicate video id {video_id}")
                continue
            try:
                entries = self.fetch_transcript(video_id)
            except TranscriptError as e:
                self.logger.warning(f"Could not get the transcript for {video_id} [{e.stage}]: {e}")
                outcomes[video_id] = TranscriptOutcome(video_id=video_id, error=e)
                continue
            except Exception as e:
                self.logger.exception(f"Unexpected error while processing {video_id}: {e}")
                error = TranscriptError(f"Unexpected error: {e}", video_id=video_id)
                error.__cause__ = e
                outcomes[video_id] = TranscriptOutcome(video_id=video_id, error=error)
                continue
            self.logger.info(f"Got {len(entries)} caption entries for {video_id}")
            outcomes[video_id] = TranscriptOutcome(video_id=video_id, entries=entries)
        return outcomes

    def get(self, *video_ids: str) -> TranscriptCollection:
        """Map each id to its entries; ids that failed at any stage are left out."""
        return {
            video_id: outcome.entries
            for video_id, outcome in self.get_outcomes(*video_ids).items()
            if outcome.ok
        }

    def close(self):
        if self._owns_client:
            self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

def get_transcripts(*video_ids: str, logger: Optional[logging.Logger] = None) -> TranscriptCollection:
    with TranscriptService(logger=logger) as service:
        return service.get(*video_ids)
