"""
Scraper for chip-tool's human-readable read output.

chip-tool prints list attributes one element per log line, e.g.

    [1700000000.123] [4242:4242] [TOO]   [1]: 6 (OnOff)

Only the decimal value before the symbolic-name annotation is kept.
"""
import re
from typing import List

# Compiled at import: a broken pattern must stop the service from starting
LIST_ENTRY_RE = re.compile(r"\[TOO\].*?\[\d+\]:\s+(\d+)\s+\(")


def parse_ids(text: str) -> List[int]:
    """
    Extract every list-entry value from chip-tool output.

    Values are returned in source order. Duplicates are kept; lines that
    don't match contribute nothing.
    """
    ids = []
    for line in text.splitlines():
        for match in LIST_ENTRY_RE.finditer(line):
            ids.append(int(match.group(1)))
    return ids
