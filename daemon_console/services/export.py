import logging
import os

from ..ansi import strip_sgr

log = logging.getLogger(__name__)


def save_logs_to_file(renderer, path, strip=False):
    """Write the buffered console lines to *path*, one per line.

    With *strip* the SGR sequences are removed so the file reads as plain
    text.  Returns the number of lines written.  I/O errors propagate.
    """
    lines = renderer.buffer.snapshot()
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        for line in lines:
            f.write((strip_sgr(line) if strip else line) + '\n')
    log.info('Exported %d console line(s) to %s', len(lines), path)
    return len(lines)
