"""In-memory documentation index.

Loads documented elements from a JSON file and answers the three questions
the doc command asks:
    query(text)                  -> [QueryResult(qualified_name, exact), ...]
    find_by_qualified_name(name) -> [DocElement, ...]
    shorten_names(names)         -> {name: short label}

The JSON file is either a list of elements or {"name": ..., "elements": [...]}.
Each element has "qualified_name" plus optional "kind", "declaration",
"summary", "description" and "tags" (tag name -> text).

Matching is deliberately simple: a case-insensitive substring match, ranked
by difflib similarity. Swap in a real index for anything serious.
"""

import json
from dataclasses import dataclass, field
from difflib import SequenceMatcher
from pathlib import Path


@dataclass(frozen=True)
class QueryResult:
    qualified_name: str
    exact: bool = False


@dataclass
class DocElement:
    qualified_name: str
    kind: str = "class"
    declaration: str = ""
    summary: str = ""
    description: str = ""
    tags: dict = field(default_factory=dict)


class DocIndex:

    def __init__(self, elements=(), name="docs"):
        self.name = name
        self._elements = list(elements)

    @classmethod
    def load(cls, path):
        """Load an index from a JSON file. Raises OSError / ValueError."""
        path = Path(path)
        data = json.loads(path.read_text())
        name = path.stem
        if isinstance(data, dict):
            name = data.get("name", name)
            data = data.get("elements", [])
        elements = [DocElement(**entry) for entry in data]
        return cls(elements, name=name)

    def __len__(self):
        return len(self._elements)

    def __str__(self):
        return self.name

    def query(self, text):
        q = text.strip()
        q_lower = q.lower()
        if not q:
            return []
        scored = []
        for el in self._elements:
            name = el.qualified_name
            if q_lower not in name.lower():
                continue
            short = simple_name(name)
            exact = q in (name, short, short.split("(")[0])
            ratio = SequenceMatcher(None, q_lower, short.lower()).ratio()
            scored.append((not exact, -ratio, name))
        scored.sort()
        return [QueryResult(name, exact=not inexact) for inexact, _, name in scored]

    def find_by_qualified_name(self, name):
        return [el for el in self._elements if el.qualified_name == name]


# --- Names ---

def _segments(name):
    """Split a qualified name on dots, ignoring dots inside parentheses.

    "java.util.List#of(java.lang.Object)" -> ["java", "util", "List#of(java.lang.Object)"]
    """
    parts = []
    depth = 0
    current = []
    for ch in name:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        if ch == "." and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    parts.append("".join(current))
    return parts


def _suffix(name, n):
    return ".".join(_segments(name)[-n:])


def simple_name(name):
    return _segments(name)[-1]


def shorten_names(names):
    """Map each name to its shortest trailing dotted suffix that no other name shares."""
    names = set(names)
    shortened = {}
    for name in names:
        depth = len(_segments(name))
        label = name
        for n in range(1, depth + 1):
            candidate = _suffix(name, n)
            if all(_suffix(other, n) != candidate for other in names if other != name):
                label = candidate
                break
        shortened[name] = label
    return shortened


if __name__ == "__main__":
    names = [
        "java.util.List",
        "java.awt.List",
        "java.lang.String#indexOf(int)",
        "java.lang.String#indexOf(java.lang.String)",
    ]
    for name, label in sorted(shorten_names(names).items()):
        print(f"  {name:50s} => {label}")
