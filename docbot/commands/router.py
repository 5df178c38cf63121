"""Command router: finds the command a source is addressed to and runs it.

Each registered command must provide:
    keyword                         Parser for its keyword(s), e.g. "doc"; also
                                    matched against structured command names
    button_keyword                  first word of its button payloads
    handle_message(cursor, source)  typed text, cursor just past the keyword
    handle_slash(source)            structured command with named options
    handle_button(cursor, source)   button payload, cursor just past the keyword

Handlers return Ok(...) or a failure value (Err, SessionMiss, AmbiguousLoad).
This is the one place failures become replies.
"""

import os
from datetime import datetime

from docbot.commands.cursor import TextCursor
from docbot.commands.parse import Err, SessionMiss, AmbiguousLoad
from docbot.commands.parsers import literal, whitespace

_PREFIX = "!"

_commands = []

# Log file: lives next to the docbot package directory
_LOG_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "docbot.log")


def _log(msg):
    print(msg, flush=True)


def _describe(result):
    if result is None:
        return "none"
    if isinstance(result, Err):
        return f"parse error: {result.describe()}"
    if isinstance(result, SessionMiss):
        return f"session miss: {result.key} #{result.index}"
    if isinstance(result, AmbiguousLoad):
        return f"ambiguous load: {result.qualified_name} x{result.count}"
    value = result.value
    return getattr(value, "state", None) or type(value).__name__


def _log_request(source, command, result):
    """Append a compact 2-line entry to the log file."""
    ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    if command is None:
        parse_line = "  -> none"
    else:
        name = type(command).__name__
        parse_line = f"  -> {name}.{source.kind}, {_describe(result)}"
    try:
        with open(_LOG_PATH, "a") as f:
            f.write(f"{ts} {source.tag}  {source.kind}: {source.text}\n{parse_line}\n")
    except OSError:
        pass


def register(command):
    """Register a command object (see module docstring for what it needs)."""
    _commands.append(command)


def reset():
    """Forget all registered commands."""
    _commands.clear()


def _skip_keyword(cursor, keyword):
    """Consume keyword plus following whitespace; rewind and return False if absent.

    The keyword must be a whole word: "!docs" is not addressed to "doc".
    """
    start = cursor.position
    if keyword.parse(cursor).ok:
        if not cursor.can_read() or whitespace().parse(cursor).ok:
            return True
    cursor.position = start
    return False


def _find(source):
    """Return (command, handler) for the source, or (None, None)."""
    if source.kind == "slash":
        for cmd in _commands:
            if _skip_keyword(TextCursor(source.name), cmd.keyword):
                return cmd, cmd.handle_slash
        return None, None

    cursor = TextCursor(source.text)
    if source.kind == "message":
        if not literal(_PREFIX).parse(cursor).ok:
            return None, None
        for cmd in _commands:
            if _skip_keyword(cursor, cmd.keyword):
                return cmd, lambda src: cmd.handle_message(cursor, src)
    elif source.kind == "button":
        for cmd in _commands:
            if _skip_keyword(cursor, literal(cmd.button_keyword)):
                return cmd, lambda src: cmd.handle_button(cursor, src)
    return None, None


def _report(result, source):
    """Turn a failure value into a reply."""
    if isinstance(result, Err):
        source.edit_or_reply(f"Sorry, I couldn't understand that: {result.message}")
    elif isinstance(result, SessionMiss):
        source.edit_or_reply(
            "Sorry, those choices have expired or that choice is invalid. "
            "Please ask again.")
    elif isinstance(result, AmbiguousLoad):
        source.edit_or_reply("I found multiple elements for this qualified name.")


def dispatch(source):
    """Run the command the source is addressed to.

    Args:
        source: a MessageSource, SlashSource or ButtonSource.

    Returns:
        The handler's result (Ok or a failure value, already turned into a
        reply on the source), or None when no command claims the source
        or the command raised.
    """
    command, handler = _find(source)
    if command is None:
        _log_request(source, None, None)
        return None

    try:
        result = handler(source)
    except Exception as e:
        _log(f"  {source.tag} {type(command).__name__} failed: {e}")
        source.edit_or_reply("Sorry, something went wrong looking that up.")
        _log_request(source, command, None)
        return None

    _report(result, source)
    _log_request(source, command, result)
    return result
