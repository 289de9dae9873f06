"""Command-line interface for the RSVP Reader.

WHY: Users need a quick way to speed-read a text file (or piped text) in
the terminal, and to see how long a text will take at a given speed
without sitting through it. The CLI wires the tokenizer, the playback
controller, and a terminal frame loop behind a single command.

HOW: Uses argparse to accept an input file (or ``-`` for stdin) and speed
options. Three modes:
  default     — live playback on a RealtimeFrameSource, one word redrawn in
                place with the ORP character highlighted on a fixed column
  --stats     — print the precomputed timeline summary and exit
  --simulate  — run the real controller on a simulated clock and print
                when each word would appear
Status messages go to stderr; words, stats, and traces go to stdout.

RULES:
- Positional argument: input text file path, ``-`` (default) reads stdin
- --wpm is clamped into the supported range, never rejected
- Empty input is an error (exit 1); Ctrl+C pauses and exits with 130
- Status output goes to stderr (not stdout)
"""

from __future__ import annotations

import argparse
import logging
import math
import sys
from pathlib import Path
from typing import List, Optional

from rsvp_reader.config import DEFAULT_WPM, FRAME_INTERVAL_MS, MAX_WPM, MIN_WPM
from rsvp_reader.core.metrics import clamp_wpm, speed_label
from rsvp_reader.core.model import PlaybackSnapshot, PlaybackStatus, WordDisplaySplit
from rsvp_reader.core.timeline import build_timeline
from rsvp_reader.core.tokenizer import tokenize
from rsvp_reader.engine.controller import PlaybackController
from rsvp_reader.engine.frames import ManualFrameSource, RealtimeFrameSource

logger = logging.getLogger(__name__)

# Column the focus character is drawn on; prefixes up to this width stay aligned
_FOCUS_COLUMN = 12
_FOCUS_STYLE = "\033[1;31m"
_RESET_STYLE = "\033[0m"
_CLEAR_LINE = "\r\033[K"


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _format_duration(ms: float) -> str:
    """Format milliseconds as m:ss, e.g. 95000 -> '1:35'."""
    total_s = int(round(ms / 1000.0))
    return "{}:{:02d}".format(total_s // 60, total_s % 60)


def render_split(split: WordDisplaySplit, color: bool = True) -> str:
    """Render a split word so its focus character lands on a fixed column.

    RULES:
    - Prefixes shorter than _FOCUS_COLUMN are left-padded with spaces
    - Longer prefixes are drawn unpadded (alignment is lost, text is not)
    - With color=False the focus character is wrapped in brackets instead
      of ANSI styling
    """
    padding = " " * max(0, _FOCUS_COLUMN - len(split.prefix))
    if color:
        focus = "{}{}{}".format(_FOCUS_STYLE, split.focus_char, _RESET_STYLE)
    else:
        focus = "[{}]".format(split.focus_char)
    return "{}{}{}{}".format(padding, split.prefix, focus, split.suffix)


def _read_input(input_file: str) -> str:
    """Read the text to play from a file path or stdin (``-``).

    Raises:
        FileNotFoundError: If the path does not point to a file.
    """
    if input_file == "-":
        return sys.stdin.read()
    path = Path(input_file)
    if not path.is_file():
        raise FileNotFoundError("File not found: {}".format(path.resolve()))
    return path.read_text(encoding="utf-8")


def _print_stats(words: List[str], wpm: int) -> None:
    timeline = build_timeline(words, wpm)
    print("Words:          {}".format(timeline.word_count))
    print("Speed:          {} WPM ({})".format(timeline.wpm, speed_label(timeline.wpm)))
    print("Pauses:         {}".format(timeline.pause_count))
    print("Reading time:   {}".format(_format_duration(timeline.total_ms)))
    print("Effective rate: {:.0f} WPM".format(timeline.effective_wpm))


def _simulate(words: List[str], wpm: int, frame_ms: float) -> int:
    """Play the words on a simulated clock and print when each one appears.

    WHY: Shows exactly what live playback would do, frame quantisation
    included, in milliseconds and instantly.

    RULES:
    - The clock may run one frame per word past the ideal timeline; a run
      that still has not finished is an error (exit 1)
    """
    frames = ManualFrameSource(frame_ms=frame_ms)
    controller = PlaybackController.on_frames(frames, wpm=wpm)
    controller.load_text(words)

    def on_change(snapshot: PlaybackSnapshot) -> None:
        if snapshot.status == PlaybackStatus.FINISHED:
            print("{:>10.1f} ms  finished".format(frames.now_ms()))
        elif snapshot.current_split is not None:
            print("{:>10.1f} ms  #{:<5d} {}".format(
                frames.now_ms(), snapshot.word_index, snapshot.current_split.word
            ))

    controller.add_listener(on_change)
    controller.play()
    bound_ms = build_timeline(words, wpm).total_ms + (len(words) + 1) * frame_ms
    finished = frames.run_until(
        lambda: controller.status == PlaybackStatus.FINISHED, max_ms=bound_ms
    )
    if not finished:
        print("Error: Simulation stopped at word {} of {} after {:.1f} ms.".format(
            controller.word_index + 1, controller.word_count, frames.now_ms()
        ), file=sys.stderr)
        return 1
    return 0


def _play(words: List[str], wpm: int, frame_ms: float, color: bool) -> int:
    """Live terminal playback. Returns the process exit code."""
    frames = RealtimeFrameSource(frame_ms=frame_ms)
    controller = PlaybackController.on_frames(frames, wpm=wpm)
    controller.load_text(words)

    def on_change(snapshot: PlaybackSnapshot) -> None:
        if snapshot.current_split is None:
            return
        sys.stdout.write(_CLEAR_LINE + render_split(snapshot.current_split, color=color))
        sys.stdout.flush()

    controller.add_listener(on_change)
    _status("Reading {} words at {} WPM ({}). Ctrl+C to stop.".format(
        controller.word_count, controller.wpm, speed_label(controller.wpm)
    ))

    started_ms = frames.now_ms()
    try:
        controller.play()
        frames.run()
    except KeyboardInterrupt:
        controller.pause()
        sys.stdout.write("\n")
        _status("Stopped at word {} of {}.".format(
            controller.word_index + 1, controller.word_count
        ))
        return 130

    sys.stdout.write("\n")
    elapsed = frames.now_ms() - started_ms
    target = build_timeline(words, controller.wpm).total_ms
    _status("Done! Read {} words in {} (target {}).".format(
        controller.word_count, _format_duration(elapsed), _format_duration(target)
    ))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable; tests can inspect the parser without playing anything.
    """
    parser = argparse.ArgumentParser(
        prog="rsvp-reader",
        description="Speed-read a text one word at a time, with the optimal "
                    "recognition point highlighted.",
    )

    parser.add_argument(
        "input_file",
        nargs="?",
        default="-",
        help="Text file to read. Use '-' (the default) to read from stdin.",
    )

    parser.add_argument(
        "--wpm",
        type=float,
        default=DEFAULT_WPM,
        help="Reading speed in words per minute, {}-{} (default: %(default)s).".format(
            MIN_WPM, MAX_WPM
        ),
    )

    parser.add_argument(
        "--frame-ms",
        type=float,
        default=FRAME_INTERVAL_MS,
        help="Frame period of the playback loop in milliseconds (default: %(default)s).",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--stats",
        action="store_true",
        help="Print word count and reading time instead of playing.",
    )
    mode.add_argument(
        "--simulate",
        action="store_true",
        help="Print when each word would appear, using a simulated clock.",
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Mark the focus letter with brackets instead of terminal colors.",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log playback transitions to stderr.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if not (math.isfinite(args.frame_ms) and args.frame_ms > 0):
        print("Error: --frame-ms must be a finite number greater than 0", file=sys.stderr)
        sys.exit(1)

    try:
        text = _read_input(args.input_file)
    except (FileNotFoundError, UnicodeDecodeError) as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    words = tokenize(text)
    if not words:
        print("Error: No words to read.", file=sys.stderr)
        sys.exit(1)

    wpm = clamp_wpm(args.wpm)
    if wpm != args.wpm:
        _status("Speed clamped to {} WPM.".format(wpm))

    code = 0
    if args.stats:
        _print_stats(words, wpm)
    elif args.simulate:
        code = _simulate(words, wpm, args.frame_ms)
    else:
        code = _play(words, wpm, args.frame_ms, color=not args.no_color)
    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
