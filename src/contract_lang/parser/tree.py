"""Resource pattern tree.

Front ends build resource patterns one path segment at a time; each node's
pattern is its parent's pattern joined with the segment.
"""

import posixpath
import re

VARIABLE_RE = re.compile(r"\((.*?)\)")


def to_placeholders(segment: str) -> str:
    """Rewrite every '(name)' in a raw segment to a ':name' placeholder."""
    return VARIABLE_RE.sub(lambda m: ":" + m.group(1), segment)


def join_pattern(parent: str, segment: str) -> str:
    """Join a segment onto a pattern with path semantics: no double or trailing slashes."""
    joined = posixpath.normpath(f"{parent}/{segment}")
    # normpath keeps a leading '//' as POSIX allows it
    return "/" + joined.lstrip("/")


class Node:
    """A pattern node; the root's pattern is '/'."""

    def __init__(self, pattern: str = "/"):
        self.pattern = pattern
        self.children: list["Node"] = []

    def append(self, child: "Node", segment: str) -> None:
        self.children.append(child)
        child.pattern = join_pattern(self.pattern, to_placeholders(segment))

    def __repr__(self) -> str:
        return f"Node({self.pattern!r})"
