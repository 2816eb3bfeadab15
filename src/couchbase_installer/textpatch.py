"""Line-level edits of key = value configuration files."""

from __future__ import annotations

import re


def key_pattern(key: str) -> re.Pattern[str]:
    """Build a pattern matching an active `key = value` line.

    The key is matched literally and case-sensitively; whitespace around it
    and around the `=` is arbitrary. Commented-out lines do not match.

    Args:
        key: Setting name, e.g. "vm.swappiness".

    Returns:
        Compiled pattern for use with `replace_or_append_line`.
    """
    return re.compile(rf"^\s*{re.escape(key)}\s*=")


def replace_or_append_line(content: str, pattern: re.Pattern[str], new_line: str) -> str:
    """Set a single line in file content.

    The first line matching `pattern` is replaced by `new_line`; further
    matching lines are dropped. If nothing matches, `new_line` is appended.

    Args:
        content: Current file content.
        pattern: Pattern identifying the line to set.
        new_line: Replacement line without trailing newline.

    Returns:
        New file content, newline-terminated.

    Example:
        >>> replace_or_append_line("a = 1\\n", key_pattern("a"), "a = 2")
        'a = 2\\n'
    """
    result: list[str] = []
    replaced = False
    for line in content.splitlines():
        if pattern.match(line):
            if not replaced:
                result.append(new_line)
                replaced = True
            continue
        result.append(line)

    if not replaced:
        result.append(new_line)

    return "\n".join(result) + "\n"
