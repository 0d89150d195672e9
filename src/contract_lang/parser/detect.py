"""Auto-detect which front end a contract directory is written for."""

from pathlib import Path

from contract_lang.parser.file import RESOURCE_RE
from contract_lang.parser.grammar import to_case_name


def _is_file_tree(root: Path) -> bool:
    """Check whether the root holds a resource or case directory."""
    for entry in root.iterdir():
        if entry.is_dir() and (RESOURCE_RE.match(entry.name) or to_case_name(entry.name)):
            return True
    return False


def detect_format(root: Path) -> str:
    """Detect the grammar of a contract directory.

    Returns: 'file' if the root holds resource or case directories, otherwise
    'markdown' if the tree holds Markdown documents, otherwise 'file'.
    """
    if not root.is_dir():
        raise NotADirectoryError(f"Contract root '{root}' is not a directory")

    if _is_file_tree(root):
        return "file"
    if any(p.is_file() for p in root.rglob("*.md")):
        return "markdown"
    return "file"
