import argparse
import json
import sys
from typing import Dict, List
from rich.console import Console
from rich.table import Table
from yt_timedtext.config import settings
from yt_timedtext.models.transcript import CaptionEntry, TranscriptOutcome
from yt_timedtext.providers.youtube import EXTRACTORS, YouTubeClient, make_extractor, parse_video_id
from yt_timedtext.services.transcript import TranscriptService
from yt_timedtext.utils.timedtext import entries_by_start
from yt_timedtext.utils.logger import setup_logger

console = Console()

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

def format_time(seconds: float) -> str:
    m, s = divmod(seconds, 60)
    h, m = divmod(int(m), 60)
    if h > 0:
        return f"{h:02d}:{m:02d}:{s:06.3f}"
    return f"{m:02d}:{s:06.3f}"

def to_json(outcomes: Dict[str, TranscriptOutcome], by_start: bool = False) -> str:
    data = {}
    for video_id, outcome in outcomes.items():
        if not outcome.ok:
            continue
        if by_start:
            data[video_id] = {str(start): e.model_dump() for start, e in entries_by_start(outcome.entries).items()}
        else:
            data[video_id] = [e.model_dump() for e in outcome.entries]
    return json.dumps(data, ensure_ascii=False, indent=2)

def render_transcript(video_id: str, entries: List[CaptionEntry]):
    table = Table(title=f"Transcript for {video_id}", show_header=True, header_style="bold magenta")
    table.add_column("Start", style="cyan", width=12)
    table.add_column("Duration", style="cyan", width=9, justify="right")
    table.add_column("Text", style="white")
    for entry in entries:
        table.add_row(format_time(entry.start), f"{entry.duration:.2f}", entry.text)
    console.print(table)

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Fetch timed-text captions for YouTube videos")
    parser.add_argument("videos", nargs="+", help="Video ids or watch URLs")
    parser.add_argument("--json", action="store_true", help="Print entries as JSON instead of tables")
    parser.add_argument("--by-start", action="store_true", help="Key entries by start time (implies --json)")
    parser.add_argument("--strategy", choices=sorted(EXTRACTORS), help="Caption URL extraction strategy")
    parser.add_argument("--timeout", type=float, help="Per-request timeout in seconds")
    parser.add_argument("--log-level", help="Logging level", type=str.upper,
                        choices=LOG_LEVELS, default=settings.LOG_LEVEL.upper())
    parser.add_argument("--log-file", help="Also write logs to this file")

    args = parser.parse_args(argv)

    logger = setup_logger(args.log_level, log_file=args.log_file)
    video_ids = [parse_video_id(v) for v in args.videos]

    with YouTubeClient(timeout=args.timeout) as client:
        service = TranscriptService(client=client, extractor=make_extractor(args.strategy), logger=logger)
        outcomes = service.get_outcomes(*video_ids)

    if args.json or args.by_start:
        print(to_json(outcomes, by_start=args.by_start))
    else:
        for video_id, outcome in outcomes.items():
            if outcome.ok:
                render_transcript(video_id, outcome.entries)
            else:
                console.print(f"[bold red]{video_id}:[/bold red] {outcome.error}")

    if not any(o.ok for o in outcomes.values()):
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
