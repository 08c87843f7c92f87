"""
Exception hierarchy for the caption extraction pipeline.

Every stage raises a subclass of ``TranscriptError``; the service catches
them per video id, so a single failure never aborts a batch.
"""

from typing import Any, Dict, Optional


class TranscriptError(Exception):
    """Base class for all pipeline errors."""

    stage = "transcript"

    def __init__(self, message: str, video_id: Optional[str] = None, **details: Any):
        super().__init__(message)
        self.message = message
        self.video_id = video_id
        self.details: Dict[str, Any] = {k: v for k, v in details.items() if v is not None}
        if video_id:
            self.details = {"video_id": video_id, **self.details}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class NetworkError(TranscriptError):
    """Connection could not be established, timed out, or the server refused the request."""

    stage = "network"


class ReadError(TranscriptError):
    """The response body could not be fully drained."""

    stage = "read"


class CaptionsNotFoundError(TranscriptError):
    """The watch page carries no caption-track reference.

    Expected for videos with captions disabled or that are unavailable.
    """

    stage = "extract"


class MalformedTranscriptError(TranscriptError):
    """The caption feed is not well-formed XML or has an unexpected shape."""

    stage = "parse"
