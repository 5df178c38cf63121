"""Command sources: where a command came from and where its answer goes.

Three kinds of input reach the router:
    MessageSource  a typed message, e.g. "!doc long String#strip"
    SlashSource    a structured command with named options (/doc)
    ButtonSource   a button press carrying only its short payload

Commands answer through reply() / edit_or_reply(). Answers are collected on
the source and sent by the front end once dispatch returns, so the command
layer never waits on the network.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Choice:
    label: str     # text on the button
    payload: str   # what the button sends back when pressed


@dataclass
class Reply:
    text: str
    rows: list = field(default_factory=list)  # rows of Choice buttons
    edit: bool = False  # edit the message the source came from, if possible


class CommandSource:
    kind = None

    def __init__(self, source_id, tag="[console]"):
        self.id = str(source_id)  # identifies the originating message
        self.tag = tag            # for logs, e.g. "[Telegram:Ada]"
        self.replies = []

    @property
    def text(self):
        raise NotImplementedError

    def reply(self, text, rows=None):
        self.replies.append(Reply(text, list(rows or [])))

    def edit_or_reply(self, text, rows=None):
        self.replies.append(Reply(text, list(rows or []), edit=True))

    @property
    def last_reply(self):
        return self.replies[-1] if self.replies else None


class MessageSource(CommandSource):
    kind = "message"

    def __init__(self, source_id, message, tag="[console]"):
        super().__init__(source_id, tag)
        self.message = message

    @property
    def text(self):
        return self.message


class SlashSource(CommandSource):
    kind = "slash"

    def __init__(self, source_id, name, options=None, tag="[console]"):
        super().__init__(source_id, tag)
        self.name = name
        self.options = dict(options or {})

    @property
    def text(self):
        return self.options.get("query", "")

    def option(self, name, default=None):
        return self.options.get(name, default)


class ButtonSource(CommandSource):
    kind = "button"

    def __init__(self, source_id, data, tag="[console]"):
        super().__init__(source_id, tag)
        self.data = data

    @property
    def text(self):
        return self.data


_FLAGS = {"--long": "long", "-l": "long", "--omit-tags": "omit-tags"}


def slash_options(args):
    """Split /doc arguments into options: leading flags, then the query.

    >>> slash_options(["--long", "String#strip"])
    {'long': True, 'omit-tags': False, 'query': 'String#strip'}
    """
    options = {"long": False, "omit-tags": False}
    words = list(args)
    while words and words[0] in _FLAGS:
        options[_FLAGS[words.pop(0)]] = True
    options["query"] = " ".join(words)
    return options
