"""File-tree contract parser.

Compiles a directory tree into manifest data. Directory names carry the
structure and extensionless files carry the case contents:

    - users/                 resource segment 'users'
        'list users'/        case named 'list users'
            given            <provider>: '<state>'
            when             GET /users ...
            then             200 OK ...
            while            <dependency id> '<case name>'
        - (id)/              resource segment ':id' -> /users/:id

Nesting is reconstructed purely from visitation order, so the tree is walked
in a stable pre-order: entries sorted by name, directories descended as soon
as they are visited.
"""

import logging
import re
from pathlib import Path

from contract_lang.errors import (
    CaseFileOutsideCaseError,
    CaseOutsideResourceError,
    DuplicateCaseNameError,
    IncompleteCaseError,
    MissingParentError,
    UnexpectedDirError,
    UnexpectedFileError,
)
from contract_lang.manifest.data import CaseData, ManifestData, ResourceData
from contract_lang.parser.base import ParseResult, load_archetypes
from contract_lang.parser.grammar import parse_given, parse_then, parse_when, parse_while, to_case_name
from contract_lang.parser.tree import Node

logger = logging.getLogger(__name__)

RESOURCE_RE = re.compile(r"^- (.*)")

CASE_FILES = ("given", "when", "then", "while")


def to_resource_segment(basename: str) -> str | None:
    """Return the raw path segment of a resource directory name, or None.

    A bare "- " yields an empty segment, which maps to the parent pattern.
    """
    match = RESOURCE_RE.match(basename)
    if not match:
        return None
    return match.group(1)


class FileParser:
    """Parses a contract directory tree into ManifestData.

    A parser instance holds cursor state while it walks; parse() resets it
    before and after each run, so instances must not be shared between
    concurrent parses.
    """

    def __init__(self, root: Path | str, name: str | None = None):
        self.root = Path(root)
        self.name = name or self.root.resolve().name
        self._reset()

    def _reset(self) -> None:
        self._root_node = Node()
        self._root_resource = ResourceData(pattern=self._root_node.pattern)
        self._data = ManifestData(name=self.name)
        self._nodes: dict[Path, Node] = {Path("."): self._root_node}
        self._cases: dict[str, str] = {}
        self._current_resource: ResourceData | None = None
        self._current_case: CaseData | None = None
        self._current_case_source = ""
        self._current_case_dir: Path | None = None

    def parse(self) -> ParseResult:
        self._reset()
        try:
            self._enter_root()
            self._walk(self.root)
            self._close_case()

            data = self._data
            if not self._root_resource.cases:
                data.resources = [r for r in data.resources if r is not self._root_resource]
            logger.debug("Parsed %d resources from %s", len(data.resources), self.root)
            return ParseResult(data=data)
        finally:
            self._reset()

    def _walk(self, directory: Path) -> None:
        for entry in sorted(directory.iterdir(), key=lambda p: p.name):
            self._visit(entry)
            if entry.is_dir():
                self._walk(entry)

    def _enter_root(self) -> None:
        self._data.resources.append(self._root_resource)
        self._current_resource = self._root_resource
        self._data.archetypes = load_archetypes(self.root)

    def _visit(self, path: Path) -> None:
        rel = path.relative_to(self.root)

        # directories are either resources or cases
        if path.is_dir():
            if (segment := to_resource_segment(path.name)) is not None:
                self._enter_resource(rel, path, segment)
            elif name := to_case_name(path.name):
                self._enter_case(path, name)
            else:
                raise UnexpectedDirError(str(path), path.name)
            return

        # files with an extension are reserved for data attachments
        if "." in path.name:
            logger.debug("Ignoring %s", path)
            return

        if path.name not in CASE_FILES:
            raise UnexpectedFileError(str(path), path.name)
        # only files directly inside the open case directory belong to it
        if self._current_case is None or path.parent != self._current_case_dir:
            raise CaseFileOutsideCaseError(str(path))

        text = path.read_text(encoding="utf-8")
        source = str(path)
        case = self._current_case
        if path.name == "given":
            case.given = parse_given(text, source)
        elif path.name == "when":
            case.when = parse_when(text, source)
        elif path.name == "then":
            case.then = parse_then(text, source)
        else:
            case.while_ = parse_while(text, source)

    def _enter_resource(self, rel: Path, path: Path, segment: str) -> None:
        parent = self._nodes.get(rel.parent)
        if parent is None:
            raise MissingParentError(str(path))

        self._close_case()
        node = Node()
        parent.append(node, segment)
        self._nodes[rel] = node

        self._current_resource = ResourceData(pattern=node.pattern)
        self._data.resources.append(self._current_resource)
        logger.debug("Opened resource %s (%s)", node.pattern, path)

    def _enter_case(self, path: Path, name: str) -> None:
        self._close_case()

        if self._current_resource is None:
            raise CaseOutsideResourceError(str(path), name)
        if name in self._cases:
            raise DuplicateCaseNameError(str(path), name, self._cases[name])

        self._current_case = CaseData(name=name)
        self._current_case_source = str(path)
        self._current_case_dir = path
        self._current_resource.cases.append(self._current_case)
        self._cases[name] = str(path)
        logger.debug("Opened case '%s' under %s", name, self._current_resource.pattern)

    def _close_case(self) -> None:
        case = self._current_case
        if case is None:
            return

        missing = case.missing_sections()
        if missing:
            raise IncompleteCaseError(self._current_case_source, case.name, missing)
        self._current_case = None
        self._current_case_dir = None
