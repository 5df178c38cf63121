"""Pending choice sessions for ambiguous queries.

When a query matches several names, the doc command stores the candidates
here under a session key and sends one button per candidate. A button only
carries "<long|short> <index> <key>", so the index is mapped back to the full
name when the button is pressed.

Sessions are single use: any resolve on a known key removes the session,
even one with a bad index. At most CAPACITY sessions are kept; storing one
more drops the oldest (by insertion, reads do not refresh anything).
Everything lives in memory and is lost on restart.
"""

import threading
from collections import OrderedDict

CAPACITY = 60


def _log(msg):
    print(msg, flush=True)


class Session:
    """The candidates of one ambiguous query, indexed 0..n-1 in input order."""

    def __init__(self, key, candidates):
        self.key = key
        self.candidates = tuple(candidates)
        if len(set(self.candidates)) != len(self.candidates):
            raise ValueError("session candidates must be unique")
        self._indices = {name: i for i, name in enumerate(self.candidates)}

    def __len__(self):
        return len(self.candidates)

    def __repr__(self):
        return f"Session({self.key!r}, {list(self.candidates)!r})"

    def index_of(self, candidate):
        return self._indices.get(candidate)

    def choice(self, index):
        if 0 <= index < len(self.candidates):
            return self.candidates[index]
        return None


class SessionRegistry:
    """Bounded, insertion-ordered map of session key -> Session.

    create() and resolve() each run under one lock, so two presses of buttons
    from the same session cannot both get the candidate.
    """

    def __init__(self, capacity=CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._sessions = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self):
        with self._lock:
            return len(self._sessions)

    def __contains__(self, key):
        with self._lock:
            return key in self._sessions

    def keys(self):
        """Session keys, oldest first."""
        with self._lock:
            return list(self._sessions)

    def create(self, key, candidates):
        """Store candidates under key, replacing any session with that key."""
        session = Session(key, candidates)
        with self._lock:
            self._sessions.pop(key, None)
            if len(self._sessions) >= self.capacity:
                evicted, _ = self._sessions.popitem(last=False)
                _log(f"  [sessions] evicted {evicted}")
            self._sessions[key] = session
        return session

    def resolve(self, key, index):
        """Drop the session under key and return its candidate at index.

        Returns None on a miss: an unknown key (never created, already used,
        or evicted) or an index outside the session's range. Any press on a
        known key uses the session up, even with a bad index.
        """
        with self._lock:
            session = self._sessions.pop(key, None)
        if session is None:
            _log(f"  [sessions] no session {key}")
            return None
        candidate = session.choice(index)
        if candidate is None:
            _log(f"  [sessions] index {index} out of range for {key}")
        return candidate
