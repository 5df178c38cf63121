"""Doc command: look up documentation and disambiguate between matches.

Handles:
    "!doc String#strip"            short answer
    "!doc long String#strip"       answer with the full description
    "!javadoc List"                several matches -> one button per match
    /doc --long --omit-tags query  structured form
    button "doc short 1 <key>"     pick match 1 of an earlier ambiguous query

A query ends in one of four states:
    resolved         one match, or exactly one exact match among several
    unresolved       no match
    ambiguous_small  fewer than CHOICE_LIMIT matches: buttons plus a session
    ambiguous_large  too many for buttons: list the first PREVIEW_LIMIT names

Button payloads are "<long|short> <index> <session key>". Only the index of
the candidate travels with the button; SessionRegistry maps it back to the
qualified name.
"""

from dataclasses import dataclass, field

from docbot.commands.parse import Ok, AmbiguousLoad, SessionMiss
from docbot.commands.parsers import (
    integer, literal, remaining, sequence, whitespace, word,
)
from docbot.commands.sessions import SessionRegistry
from docbot.commands.source import Choice
from docbot.index import shorten_names

CHOICES_PER_ROW = 5
CHOICE_LIMIT = CHOICES_PER_ROW * 5
PREVIEW_LIMIT = 10
LABEL_LIMIT = 80
MAX_PAYLOAD_LENGTH = 64  # Telegram callback_data limit, in bytes

RESOLVED = "resolved"
UNRESOLVED = "unresolved"
AMBIGUOUS_SMALL = "ambiguous_small"
AMBIGUOUS_LARGE = "ambiguous_large"

_LONG = "long"
_SHORT = "short"

_QUERY = remaining(2)
_LONG_FLAG = sequence(literal(_LONG), whitespace()).optional()


def _log(msg):
    print(msg, flush=True)


@dataclass(frozen=True)
class FollowUp:
    long: bool
    index: int
    key: str


_FOLLOW_UP = sequence(word(), whitespace(), integer(), whitespace(), word()).map(
    lambda v: FollowUp(long=v[0] == _LONG, index=v[2], key=v[4]))


def parse_payload(cursor):
    """Parse "<long|short> <index> <key>". Anything but "long" means short."""
    return _FOLLOW_UP.parse(cursor)


def encode_payload(long, index, key):
    return f"{_LONG if long else _SHORT} {index} {key}"


# --- Deciding what to answer ---

@dataclass
class Decision:
    state: str
    match: object = None  # the QueryResult answered directly when resolved
    candidates: list = field(default_factory=list)  # unique qualified names, in result order


def decide(results, choice_limit=CHOICE_LIMIT):
    """Pick the answer state for an ordered list of QueryResults."""
    if len(results) == 1:
        return Decision(RESOLVED, match=results[0])

    exact = [r for r in results if r.exact]
    if len(exact) == 1:
        return Decision(RESOLVED, match=exact[0])

    if not results:
        return Decision(UNRESOLVED)

    candidates = list(dict.fromkeys(r.qualified_name for r in results))
    if len(results) < choice_limit:
        return Decision(AMBIGUOUS_SMALL, candidates=candidates)
    return Decision(AMBIGUOUS_LARGE, candidates=candidates)


def abbreviate(text, limit=LABEL_LIMIT):
    if len(text) <= limit:
        return text
    return text[:limit - 3] + "..."


def build_choices(candidates, key, long, keyword, shortener=shorten_names):
    """One button per candidate, sorted by name, CHOICES_PER_ROW to a row.

    The button index is the candidate's position in `candidates`, which is
    the index the session stores it under.
    """
    labels = shortener(candidates)
    choices = []
    for index, name in sorted(enumerate(candidates), key=lambda c: c[1].lower()):
        data = f"{keyword} {encode_payload(long, index, key)}"
        choices.append(Choice(abbreviate(labels.get(name, name)), data))
    return [choices[i:i + CHOICES_PER_ROW] for i in range(0, len(choices), CHOICES_PER_ROW)]


def preview(candidates, limit=PREVIEW_LIMIT):
    return "\n".join(f"* `{name}`" for name in candidates[:limit])


def render_element(element, short=True, omit_tags=False, origin=None):
    """Plain-text answer for one documented element."""
    parts = [f"{element.kind} {element.qualified_name}"]
    if element.declaration:
        parts.append(element.declaration)
    if element.summary:
        parts.append(element.summary)
    if not short and element.description:
        parts.append(element.description)
    if not omit_tags and element.tags:
        parts.append("\n".join(f"@{name} {text}" for name, text in element.tags.items()))
    if origin:
        parts.append(f"-- {origin}")
    return "\n\n".join(parts)


# --- The command ---

class DocCommand:
    """Answers doc queries from typed messages, /doc and buttons.

    index must provide query(text) -> [QueryResult] and
    find_by_qualified_name(name) -> [DocElement].
    """

    keyword = literal("javadoc") | literal("doc")
    button_keyword = "doc"

    def __init__(self, index, sessions=None, choice_limit=CHOICE_LIMIT,
                 shortener=shorten_names):
        self.index = index
        self.sessions = sessions if sessions is not None else SessionRegistry()
        self.choice_limit = choice_limit
        self.shortener = shortener

    def handle_message(self, cursor, source):
        """Typed form: "[long ]<query>" after the keyword."""
        long_flag = _LONG_FLAG.parse(cursor)
        query = _QUERY.parse(cursor)
        if not query.ok:
            return query
        return self.handle_query(source, query.value, short=long_flag.value is None)

    def handle_slash(self, source):
        query = _QUERY.parse_text(source.option("query", ""))
        if not query.ok:
            return query
        return self.handle_query(
            source, query.value,
            short=not source.option("long", False),
            omit_tags=source.option("omit-tags", False),
        )

    def handle_button(self, cursor, source):
        """Button form: the payload after the keyword."""
        payload = parse_payload(cursor)
        if not payload.ok:
            return payload
        follow_up = payload.value
        name = self.sessions.resolve(follow_up.key, follow_up.index)
        if name is None:
            return SessionMiss(follow_up.key, follow_up.index)
        return self.handle_query(source, name, short=not follow_up.long)

    def handle_query(self, source, query, short=True, omit_tags=False):
        results = self.index.query(query.strip())
        decision = decide(results, self.choice_limit)
        _log(f"  [doc] {query!r}: {len(results)} result(s) -> {decision.state}")

        if decision.state == RESOLVED:
            loaded = self._reply_element(source, decision.match.qualified_name, short, omit_tags)
            return loaded if not loaded.ok else Ok(decision)

        if decision.state == UNRESOLVED:
            source.edit_or_reply(f"I couldn't find any result for '{query}'")
            return Ok(decision)

        if decision.state == AMBIGUOUS_SMALL and not self._offer_choices(source, decision, short):
            decision.state = AMBIGUOUS_LARGE
        if decision.state == AMBIGUOUS_LARGE:
            source.reply("I found at least the following types:\n\n" + preview(decision.candidates))
        return Ok(decision)

    def _reply_element(self, source, qualified_name, short, omit_tags):
        elements = self.index.find_by_qualified_name(qualified_name)
        if len(elements) != 1:
            return AmbiguousLoad(qualified_name, len(elements))
        text = render_element(elements[0], short=short, omit_tags=omit_tags,
                              origin=str(self.index))
        source.edit_or_reply(text)
        return Ok(elements[0])

    def _offer_choices(self, source, decision, short):
        """Send one button per candidate and store the session. False if a payload won't fit."""
        rows = build_choices(decision.candidates, source.id, not short,
                             self.button_keyword, self.shortener)
        too_long = [c.payload for row in rows for c in row
                    if len(c.payload.encode("utf-8")) > MAX_PAYLOAD_LENGTH]
        if too_long:
            _log(f"  [doc] payload too long for buttons: {too_long[0]!r}")
            return False
        self.sessions.create(source.id, decision.candidates)
        source.reply("I found multiple types:", rows)
        return True
