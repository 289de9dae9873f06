"""Tkinter desktop GUI for the RSVP Reader.

WHY: Most readers want to paste a text, pick a speed with a slider, and
press space, not use a terminal. The GUI wraps the playback controller
behind a single window with a text box, a reading pane, speed and playback
controls, a progress bar, and a distraction-free focus mode.

HOW: A single ReaderApp class builds the UI and subscribes to the
controller. The controller's scheduler runs on a TkFrameSource, so every
deadline poll is a ``.after()`` callback on the Tk main loop; no threads are
involved. The reading pane is a Canvas: the focus character is drawn
centred on a fixed x position with the prefix right-anchored to its left
and the suffix left-anchored to its right, so the eye never moves between
words.

RULES:
- All state changes go through the PlaybackController; widgets only render
  snapshots delivered to _on_snapshot()
- Editing the text reloads it (back to IDLE at word 0)
- Keyboard: Space play/pause, R reset, F focus mode, Escape leave focus
  mode, Up/Down change speed; all are ignored while typing in the text box
- Closing the window cancels any pending deadline before destroying Tk
"""

from __future__ import annotations

import logging
import tkinter as tk
from tkinter import font as tkfont
from tkinter import ttk
from typing import Optional

from rsvp_reader.config import DEFAULT_WPM, FRAME_INTERVAL_MS, MAX_WPM, MIN_WPM, WPM_STEP
from rsvp_reader.core.metrics import speed_label
from rsvp_reader.core.model import PlaybackSnapshot, PlaybackStatus, WordDisplaySplit
from rsvp_reader.engine.controller import PlaybackController
from rsvp_reader.engine.frames import TkFrameSource

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_WINDOW_TITLE = "RSVP Speed Reader"
_WINDOW_MIN_WIDTH = 640
_WINDOW_MIN_HEIGHT = 520
_PAD = 8

_PANE_HEIGHT = 140
_WORD_FONT = ("Helvetica", 40)
_WORD_COLOR = "#202020"
_FOCUS_COLOR = "#e03131"
_READY_COLOR = "gray"
_READY_TEXT = "Ready to read"


class ReaderApp:
    """Main tkinter application for the RSVP Reader.

    RULES:
    - Only _on_snapshot() writes to the reading pane and progress widgets
    - _syncing_scale guards against the slider echoing set_wpm() back
    """

    def __init__(self, root: tk.Tk, wpm: int = DEFAULT_WPM) -> None:
        self._root = root
        self._root.title(_WINDOW_TITLE)
        self._root.minsize(_WINDOW_MIN_WIDTH, _WINDOW_MIN_HEIGHT)

        self._controller = PlaybackController.on_frames(
            TkFrameSource(root, frame_ms=FRAME_INTERVAL_MS), wpm=wpm
        )
        self._focus_mode = False
        self._syncing_scale = False

        self._build_ui()
        self._bind_keys()

        self._controller.add_listener(self._on_snapshot)
        self._on_snapshot(self._controller.snapshot())
        self._root.protocol("WM_DELETE_WINDOW", self._on_close)

    # ------------------------------------------------------------------
    # UI Construction
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        """Build the main window layout."""
        main = ttk.Frame(self._root, padding=_PAD)
        main.pack(fill=tk.BOTH, expand=True)

        # --- Text Input ---
        self._input_frame = ttk.LabelFrame(main, text="Text", padding=_PAD)
        self._input_frame.pack(fill=tk.BOTH, expand=True, pady=(0, _PAD))

        self._text = tk.Text(self._input_frame, height=8, wrap=tk.WORD, undo=True)
        scrollbar = ttk.Scrollbar(
            self._input_frame, orient=tk.VERTICAL, command=self._text.yview
        )
        self._text.configure(yscrollcommand=scrollbar.set)

        input_btns = ttk.Frame(self._input_frame)
        input_btns.pack(side=tk.BOTTOM, fill=tk.X, pady=(4, 0))
        scrollbar.pack(side=tk.RIGHT, fill=tk.Y)
        self._text.pack(fill=tk.BOTH, expand=True)
        self._text.bind("<<Modified>>", self._on_text_modified)

        ttk.Button(input_btns, text="Paste", command=self._paste,
                   takefocus=False).pack(side=tk.LEFT)
        ttk.Button(input_btns, text="Clear", command=self._clear_text,
                   takefocus=False).pack(side=tk.LEFT, padx=(4, 0))
        self._word_count_label = ttk.Label(input_btns, text="0 words", foreground="gray")
        self._word_count_label.pack(side=tk.RIGHT)

        # --- Reading Pane ---
        self._word_font = tkfont.Font(family=_WORD_FONT[0], size=_WORD_FONT[1])
        self._canvas = tk.Canvas(main, height=_PANE_HEIGHT, background="white",
                                 highlightthickness=1, highlightbackground="#cccccc")
        self._canvas.pack(fill=tk.X, pady=(0, _PAD))
        self._canvas.bind("<Configure>", lambda _e: self._on_snapshot(self._controller.snapshot()))
        self._canvas.bind("<Button-1>", lambda _e: self._canvas.focus_set())

        # --- Controls ---
        controls = ttk.Frame(main)
        controls.pack(fill=tk.X, pady=(0, _PAD))

        ttk.Label(controls, text="Reading speed").pack(side=tk.LEFT)
        self._wpm_var = tk.DoubleVar(value=self._controller.wpm)
        self._scale = ttk.Scale(
            controls,
            from_=MIN_WPM,
            to=MAX_WPM,
            orient=tk.HORIZONTAL,
            variable=self._wpm_var,
            command=self._on_scale,
        )
        self._scale.pack(side=tk.LEFT, fill=tk.X, expand=True, padx=(_PAD, _PAD))
        self._wpm_label = ttk.Label(controls, width=16)
        self._wpm_label.pack(side=tk.LEFT)

        buttons = ttk.Frame(main)
        buttons.pack(fill=tk.X, pady=(0, _PAD))
        self._play_btn = ttk.Button(buttons, text="Play", command=self._controller.toggle,
                                    takefocus=False)
        self._play_btn.pack(side=tk.LEFT)
        self._reset_btn = ttk.Button(buttons, text="Reset", command=self._controller.reset,
                                     takefocus=False)
        self._reset_btn.pack(side=tk.LEFT, padx=(_PAD, 0))
        self._focus_btn = ttk.Button(buttons, text="Focus Mode",
                                     command=self._toggle_focus_mode, takefocus=False)
        self._focus_btn.pack(side=tk.RIGHT)

        # --- Progress ---
        self._progress_frame = ttk.Frame(main)
        self._progress_frame.pack(fill=tk.X)
        self._progress = ttk.Progressbar(self._progress_frame, maximum=100.0)
        self._progress.pack(fill=tk.X)
        stats = ttk.Frame(self._progress_frame)
        stats.pack(fill=tk.X, pady=(4, 0))
        self._read_label = ttk.Label(stats, text="0 / 0 words")
        self._read_label.pack(side=tk.LEFT)
        self._remaining_label = ttk.Label(stats, text="")
        self._remaining_label.pack(side=tk.RIGHT)

    def _bind_keys(self) -> None:
        self._root.bind("<space>", self._on_key_toggle)
        self._root.bind("<KeyPress-r>", self._on_key_reset)
        self._root.bind("<KeyPress-f>", self._on_key_focus)
        self._root.bind("<Escape>", self._on_key_escape)
        self._root.bind("<Up>", lambda e: self._on_key_speed(e, WPM_STEP))
        self._root.bind("<Down>", lambda e: self._on_key_speed(e, -WPM_STEP))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _on_snapshot(self, snapshot: PlaybackSnapshot) -> None:
        """Redraw every widget that reflects playback state."""
        self._draw_word(snapshot.current_split)

        self._play_btn.configure(
            text="Pause" if snapshot.status == PlaybackStatus.PLAYING else "Play",
            state=tk.NORMAL if snapshot.word_count else tk.DISABLED,
        )
        self._reset_btn.configure(state=tk.NORMAL if snapshot.word_count else tk.DISABLED)

        self._progress["value"] = snapshot.progress
        self._read_label.configure(
            text="{} / {} words".format(snapshot.word_index, snapshot.word_count)
        )
        if snapshot.status == PlaybackStatus.FINISHED:
            self._remaining_label.configure(text="Finished")
        elif snapshot.minutes_remaining > 0:
            self._remaining_label.configure(
                text="{} min remaining".format(snapshot.minutes_remaining)
            )
        else:
            self._remaining_label.configure(text="")

        self._wpm_label.configure(
            text="{} WPM ({})".format(snapshot.wpm, speed_label(snapshot.wpm))
        )
        if int(round(self._wpm_var.get())) != snapshot.wpm:
            self._syncing_scale = True
            self._wpm_var.set(snapshot.wpm)
            self._syncing_scale = False

    def _draw_word(self, split: Optional[WordDisplaySplit]) -> None:
        self._canvas.delete("word")
        center_x = self._canvas.winfo_width() // 2 or _WINDOW_MIN_WIDTH // 2
        center_y = _PANE_HEIGHT // 2

        if split is None:
            self._canvas.create_text(
                center_x, center_y, text=_READY_TEXT, fill=_READY_COLOR,
                font=self._word_font, tags="word",
            )
            return

        half_focus = self._word_font.measure(split.focus_char) / 2
        self._canvas.create_text(
            center_x - half_focus, center_y, text=split.prefix, anchor=tk.E,
            fill=_WORD_COLOR, font=self._word_font, tags="word",
        )
        self._canvas.create_text(
            center_x, center_y, text=split.focus_char, anchor=tk.CENTER,
            fill=_FOCUS_COLOR, font=self._word_font, tags="word",
        )
        self._canvas.create_text(
            center_x + half_focus, center_y, text=split.suffix, anchor=tk.W,
            fill=_WORD_COLOR, font=self._word_font, tags="word",
        )

    # ------------------------------------------------------------------
    # Input handlers
    # ------------------------------------------------------------------

    def _on_text_modified(self, _event: tk.Event) -> None:
        if not self._text.edit_modified():
            return
        self._text.edit_modified(False)
        self._controller.load_raw_text(self._text.get("1.0", tk.END))
        self._word_count_label.configure(text="{} words".format(self._controller.word_count))

    def _paste(self) -> None:
        try:
            clipboard = self._root.clipboard_get()
        except tk.TclError:
            logger.info("Clipboard is empty or holds no text")
            return
        self._text.delete("1.0", tk.END)
        self._text.insert("1.0", clipboard)
        # Hand the keyboard to the reading pane so Space plays instead of typing
        self._canvas.focus_set()

    def _clear_text(self) -> None:
        self._text.delete("1.0", tk.END)

    def _on_scale(self, value: str) -> None:
        if self._syncing_scale:
            return
        self._controller.set_wpm(float(value))

    def _toggle_focus_mode(self) -> None:
        """Hide the text box and progress bar so only the word remains."""
        if not self._focus_mode and not self._controller.word_count:
            return
        self._focus_mode = not self._focus_mode
        if self._focus_mode:
            self._input_frame.pack_forget()
            self._progress_frame.pack_forget()
            self._focus_btn.configure(text="Exit Focus")
            self._canvas.focus_set()
        else:
            self._input_frame.pack(before=self._canvas, fill=tk.BOTH, expand=True, pady=(0, _PAD))
            self._progress_frame.pack(fill=tk.X)
            self._focus_btn.configure(text="Focus Mode")

    # Keyboard shortcuts are ignored while the user is typing in the text box

    def _typing(self, event: tk.Event) -> bool:
        return event.widget is self._text

    def _on_key_toggle(self, event: tk.Event) -> Optional[str]:
        if self._typing(event):
            return None
        self._controller.toggle()
        return "break"

    def _on_key_reset(self, event: tk.Event) -> Optional[str]:
        if self._typing(event):
            return None
        self._controller.reset()
        return "break"

    def _on_key_focus(self, event: tk.Event) -> Optional[str]:
        if self._typing(event):
            return None
        self._toggle_focus_mode()
        return "break"

    def _on_key_escape(self, _event: tk.Event) -> None:
        if self._focus_mode:
            self._toggle_focus_mode()

    def _on_key_speed(self, event: tk.Event, delta: int) -> Optional[str]:
        if self._typing(event):
            return None
        self._controller.set_wpm(self._controller.wpm + delta)
        return "break"

    def _on_close(self) -> None:
        self._controller.reset()
        self._root.destroy()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main() -> None:
    """Launch the Tkinter GUI application.

    RULES:
    - This function blocks until the window is closed
    - Must be called from the main thread
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    root = tk.Tk()
    ReaderApp(root)
    root.mainloop()


if __name__ == "__main__":
    main()
