"""Front-end selection.

Pick a parser for a contract directory, parse it, and build the Manifest.
"""

from pathlib import Path

from contract_lang.manifest.contract import Manifest
from contract_lang.parser.base import ParseResult, Parser
from contract_lang.parser.detect import detect_format
from contract_lang.parser.file import FileParser
from contract_lang.parser.markdown import MarkdownParser

FORMATS = ("auto", "file", "markdown")


def file_parser(root: Path | str, name: str | None = None) -> Parser:
    return FileParser(root, name=name)


def markdown_parser(root: Path | str, name: str | None = None) -> Parser:
    return MarkdownParser(root, name=name)


def parse_contract(root: Path | str, fmt: str = "auto", name: str | None = None) -> ParseResult:
    """Parse a contract directory with the front end named by fmt."""
    root = Path(root)
    if fmt == "auto":
        fmt = detect_format(root)

    if fmt == "file":
        return file_parser(root, name=name).parse()
    elif fmt == "markdown":
        return markdown_parser(root, name=name).parse()
    raise ValueError(f"Unknown contract format '{fmt}', expected one of: {', '.join(FORMATS)}")


def compile_manifest(root: Path | str, fmt: str = "auto", name: str | None = None) -> tuple[Manifest, ParseResult]:
    """Parse a contract directory and build its Manifest."""
    result = parse_contract(root, fmt=fmt, name=name)
    return Manifest(result.data), result
