"""docbot main loop.

Loads the documentation index, registers the commands, starts the Telegram
bot (if configured) and then reads commands from the console:

    !doc String#strip        typed command
    /doc --long List         structured command
    @doc short 1 c3          press a button (its payload is shown next to it)
    quit                     exit

Usage:
    python -m docbot [-index data/docs.json]
"""

import itertools
import time
from pathlib import Path

from docbot.commands import router, ALL_COMMANDS
from docbot.commands.source import ButtonSource, MessageSource, SlashSource, slash_options
from docbot.index import DocIndex

_INDEX_PATH = Path(__file__).resolve().parent.parent / "data" / "docs.json"
_BUTTON_MARK = "@"
_QUIT_WORDS = ("quit", "exit")


def log(msg):
    print(msg, flush=True)


def load_index(path=None):
    path = Path(path or _INDEX_PATH)
    log(f"Loading index from {path}...")
    t0 = time.time()
    index = DocIndex.load(path)
    log(f"  {len(index)} elements from {index} ({time.time() - t0:.1f}s)")
    return index


def console_source(line, source_id):
    """Build the source a console line stands for."""
    if line.startswith(_BUTTON_MARK):
        return ButtonSource(source_id, line[len(_BUTTON_MARK):].strip())
    if line.startswith("/"):
        name, _, rest = line[1:].partition(" ")
        return SlashSource(source_id, name, slash_options(rest.split()))
    return MessageSource(source_id, line)


def print_replies(source):
    for reply in source.replies:
        log(reply.text)
        for row in reply.rows:
            log("  " + "   ".join(f"[{c.label}] {_BUTTON_MARK}{c.payload}" for c in row))


def main(index_path=None):
    try:
        index = load_index(index_path)
    except (OSError, ValueError, TypeError) as e:
        log(f"Could not load the index: {e}")
        return 1

    # Register commands
    for cmd in ALL_COMMANDS:
        router.register(cmd(index))

    # Start Telegram bot (if token is configured)
    try:
        from docbot.telegram_bot import start_telegram
        start_telegram()
    except Exception as e:
        log(f"Telegram bot failed to start: {e}")

    log("Ready. Try: !doc String#strip\n")

    ids = itertools.count(1)
    try:
        while True:
            line = input("> ").strip()
            if not line:
                continue
            if line.lower() in _QUIT_WORDS:
                break
            source = console_source(line, f"c{next(ids)}")
            if router.dispatch(source) is None and not source.replies:
                log("  (not a command; try !doc <query>)")
            print_replies(source)
    except (KeyboardInterrupt, EOFError):
        log("\nShutting down.")
    return 0


if __name__ == "__main__":
    main()
