import logging
from collections import Counter, deque

from ..ansi import DEFAULT_COLOR, parse

log = logging.getLogger(__name__)


class LogBuffer:
    """Fixed-capacity FIFO of raw console lines, oldest first.

    ``total`` counts every line ever appended.  When the buffer is full and a
    line is evicted from the front this counter keeps growing, so a reader's
    cursor (since=N) still points at the right offset after old lines are
    gone.
    """

    def __init__(self, capacity):
        if not isinstance(capacity, int) or isinstance(capacity, bool) or capacity < 1:
            raise ValueError(f'capacity must be a positive integer, got {capacity!r}')
        self.capacity = capacity
        self.total = 0
        self._lines = deque()

    def __len__(self):
        return len(self._lines)

    def __iter__(self):
        return iter(list(self._lines))

    def append(self, line):
        """Append *line* and return the lines evicted to make room for it."""
        self._lines.append(line)
        self.total += 1
        evicted = []
        while len(self._lines) > self.capacity:
            evicted.append(self._lines.popleft())
        return evicted

    def clear(self):
        """Drop every entry.  ``total`` is not rewound."""
        dropped = list(self._lines)
        self._lines.clear()
        return dropped

    def snapshot(self):
        return list(self._lines)

    def start(self):
        """Sequence number of the oldest surviving line."""
        return self.total - len(self._lines)

    def since(self, cursor):
        """Return (lines appended at or after *cursor*, total).

        The cursor is clamped to the surviving window, so a stale cursor gets
        everything still buffered and one past the end gets nothing.
        """
        buf = list(self._lines)
        start = self.total - len(buf)
        cursor = max(start, min(cursor, self.total))
        return buf[cursor - start:], self.total

    def page(self, page, page_size):
        """1-based paging over the surviving lines: (lines, len(buffer))."""
        if page < 1 or page_size < 1:
            raise ValueError('page and page_size must be >= 1')
        buf = list(self._lines)
        first = (page - 1) * page_size
        return buf[first:first + page_size], len(buf)


class ConsoleRenderer:
    """Owns a :class:`LogBuffer` and turns it into styled display rows.

    Every :meth:`append` re-renders synchronously, then tells render
    listeners about the new rows and scroll listeners to jump to the bottom.
    The jump is unconditional, even if the viewer has scrolled up.

    Parsed segments are cached per distinct raw line.  Cache entries are
    reference counted against the buffer and dropped with the last copy of
    their line, so the cache never holds more than ``capacity`` keys.
    """

    def __init__(self, capacity, palette=None, default_color=DEFAULT_COLOR):
        self.buffer = LogBuffer(capacity)
        self.palette = palette
        self.default_color = default_color
        self._segments = {}
        self._refs = Counter()
        self._render_listeners = []
        self._scroll_listeners = []

    @property
    def capacity(self):
        return self.buffer.capacity

    @property
    def total(self):
        return self.buffer.total

    def __len__(self):
        return len(self.buffer)

    # ── listeners ────────────────────────────────────────────────────────────

    def on_render(self, callback):
        """Call ``callback(rows)`` after every append.  Returns an unsubscribe."""
        return self._subscribe(self._render_listeners, callback)

    def on_scroll(self, callback):
        """Call ``callback()`` after every append.  Returns an unsubscribe."""
        return self._subscribe(self._scroll_listeners, callback)

    @staticmethod
    def _subscribe(listeners, callback):
        listeners.append(callback)

        def unsubscribe():
            if callback in listeners:
                listeners.remove(callback)
        return unsubscribe

    def _notify(self, listeners, *args):
        for callback in list(listeners):
            try:
                callback(*args)
            except Exception:
                log.exception('Console listener %r failed', callback)

    # ── mutation ─────────────────────────────────────────────────────────────

    def append(self, line):
        if '\n' in line:
            raise ValueError('append() takes a single line without line breaks')
        evicted = self.buffer.append(line)
        self._retain(line)
        self._release(evicted)
        if evicted:
            log.debug('Evicted %d console line(s), %d buffered', len(evicted), len(self.buffer))

        rows = self.render()
        self._notify(self._render_listeners, rows)
        self._notify(self._scroll_listeners)

    def clear(self):
        self._release(self.buffer.clear())

    def _retain(self, line):
        self._refs[line] += 1

    def _release(self, lines):
        for line in lines:
            self._refs[line] -= 1
            if self._refs[line] <= 0:
                del self._refs[line]
                self._segments.pop(line, None)

    # ── rendering ────────────────────────────────────────────────────────────

    def segments(self, line):
        """Parsed segments for *line*, from the cache while it is buffered."""
        cached = self._segments.get(line)
        if cached is None:
            cached = tuple(parse(line))
            if line in self._refs:
                self._segments[line] = cached
        return list(cached)

    def render(self):
        """One row of segments per surviving line, oldest first."""
        return [self.segments(line) for line in self.buffer.snapshot()]

    def row_dicts(self, lines):
        return [
            [seg.to_dict(self.palette, self.default_color) for seg in self.segments(line)]
            for line in lines
        ]

    def render_dicts(self):
        return self.row_dicts(self.buffer.snapshot())

    def rows_since(self, cursor):
        """Return (display rows for lines at or after *cursor*, total)."""
        lines, total = self.buffer.since(cursor)
        return self.row_dicts(lines), total
