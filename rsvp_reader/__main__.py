"""Package entry point for ``python -m rsvp_reader``.

WHY: Users run the reader as ``python -m rsvp_reader book.txt`` for
terminal playback, or ``python -m rsvp_reader --gui`` for the desktop GUI.

HOW: Checks sys.argv for the ``--gui`` flag. If present, launches the
Tkinter GUI. Otherwise, delegates to the CLI's main() function.

RULES:
- ``--gui`` flag launches the Tkinter GUI
- Without ``--gui``, falls through to the CLI
"""

import sys

if __name__ == "__main__":
    if "--gui" in sys.argv:
        from rsvp_reader.gui import main as gui_main
        gui_main()
    else:
        from rsvp_reader.cli import main
        main()
