from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from yt_timedtext.core.errors import TranscriptError

class CaptionEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    start: float = Field(ge=0)
    duration: float = Field(ge=0)

    @property
    def end(self) -> float:
        return self.start + self.duration

TranscriptResult = List[CaptionEntry]
TranscriptCollection = Dict[str, TranscriptResult]

class TranscriptOutcome(BaseModel):
    """Result-or-error for one video id."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    video_id: str
    entries: Optional[List[CaptionEntry]] = None
    error: Optional[TranscriptError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.entries is not None
