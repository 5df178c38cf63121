"""Data-driven test suite for typed command parsing.

Reads test cases from test_cases.txt and checks which command claims each
input and which lookup arguments it extracts, without running any lookup.

See test_cases.txt for the file format.
"""

import pytest
from pathlib import Path

from docbot.commands import router
from docbot.commands.doc import DocCommand
from docbot.commands.parse import Ok, Err
from docbot.commands.source import MessageSource
from docbot.index import DocIndex


class RecordingDoc(DocCommand):
    """Doc command that records the lookup instead of doing it."""

    def __init__(self):
        super().__init__(DocIndex())
        self.calls = []

    def handle_query(self, source, query, short=True, omit_tags=False):
        self.calls.append({"query": query, "long": not short, "omit_tags": omit_tags})
        return Ok(None)


def _parse_value(s):
    """Parse a string value into the appropriate Python type."""
    if s == "true":
        return True
    if s == "false":
        return False
    return s


def _load_test_cases():
    """Load test cases from test_cases.txt."""
    path = Path(__file__).parent / "test_cases.txt"
    cases = []
    current = None

    for line_num, line in enumerate(path.read_text().splitlines(), 1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        if stripped.startswith(">"):
            if current:
                cases.append(current)
            current = {
                "input": stripped[1:].strip(),
                "command": "none",
                "error": None,
                "args": {},
                "line": line_num,
            }
            continue

        if current is None:
            continue

        # key: value (values may contain colons or runs of spaces)
        key, _, value = line.partition(":")
        key = key.strip()
        value = value[1:] if value.startswith(" ") else value

        if key == "command":
            current["command"] = value.strip()
        elif key == "error":
            current["error"] = value.strip()
        else:
            current["args"][key] = _parse_value(value)

    if current:
        cases.append(current)

    return cases


_CASES = _load_test_cases()


@pytest.mark.parametrize("case", _CASES, ids=[c["input"] or "<empty>" for c in _CASES])
def test_parse(case):
    text = case["input"]
    cmd = RecordingDoc()
    router.register(cmd)

    source = MessageSource("t1", text)
    result = router.dispatch(source)

    if case["command"] == "none":
        assert result is None, (
            f"\n  Input:    {text!r}"
            f"\n  Expected: no command"
            f"\n  Got:      {result!r}"
        )
        assert cmd.calls == []
        assert source.replies == []
        return

    if case["error"] is not None:
        assert isinstance(result, Err), (
            f"\n  Input:    {text!r}"
            f"\n  Expected: error {case['error']!r}"
            f"\n  Got:      {result!r}, calls={cmd.calls!r}"
        )
        assert result.message == case["error"]
        assert cmd.calls == []
        # The router answers parse failures itself
        assert source.last_reply.text.endswith(case["error"])
        return

    assert result is not None and result.ok, (
        f"\n  Input:    {text!r}"
        f"\n  Expected: {case['args']!r}"
        f"\n  Got:      {result!r}"
    )
    assert cmd.calls == [case["args"]], (
        f"\n  Input:    {text!r}"
        f"\n  Expected: {case['args']!r}"
        f"\n  Got:      {cmd.calls!r}"
    )
