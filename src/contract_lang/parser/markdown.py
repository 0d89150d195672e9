"""Markdown contract parser.

Renders every `.md` document under a root directory to HTML with mistune and
intercepts the block-level callbacks to extract contract data:

    # /users/(id)                  h1: resource pattern
    ## 'get a user'                h2: case name
    > mongo has: 'a single user'   first quote: given / while declarations
    > pit-token responds: 'authorized'
    ### when:                      h3: the next code block is the request
    ```
    GET /users/31
    ```
    ### then:                      h3: the next code block is the response
    ```
    200 OK
    ```

Malformed declaration lines are reported as warnings; structural problems
abort the parse.
"""

import logging
import re
from pathlib import Path

import mistune

from contract_lang.errors import (
    CaseOutsideResourceError,
    DuplicateCaseNameError,
    DuplicateSectionError,
    IncompleteCaseError,
    SectionOutsideCaseError,
)
from contract_lang.manifest.data import CaseData, Given, ManifestData, ResourceData, While
from contract_lang.parser.base import Diagnostic, ParseResult, load_archetypes
from contract_lang.parser.grammar import parse_then, parse_when, to_case_name
from contract_lang.parser.tree import Node

logger = logging.getLogger(__name__)

RESOURCE_RE = re.compile(r"^(/.*)")
SECTION_RE = re.compile(r"^(when|then):$")
GIVEN_STATE_RE = re.compile(r"^(?P<provider>.+?)\s+has:\s*'(?P<state>.*)'$")
GIVEN_DEPENDENCY_RE = re.compile(r"^(?P<dependency>.+?)\s+responds:\s*'(?P<case>.*)'$")

# blocks that end the paragraph a quote may fall back to
BLOCK_TYPES = ("paragraph", "heading", "block_code", "block_quote", "list", "thematic_break", "block_html")


def parse_given_prose(text: str) -> tuple[dict[str, Given], list[While], list[str]]:
    """Split declaration prose into givens, whiles and the lines matching neither."""
    givens: dict[str, Given] = {}
    whiles: list[While] = []
    unmatched: list[str] = []

    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue

        if m := GIVEN_DEPENDENCY_RE.match(line):
            whiles.append(While(id=m.group("dependency").strip(), case=m.group("case").strip()))
        elif m := GIVEN_STATE_RE.match(line):
            givens[m.group("provider").strip()] = Given(name=m.group("state").strip())
        else:
            unmatched.append(line)

    return givens, whiles, unmatched


class ContractRenderer(mistune.HTMLRenderer):
    """HTML renderer that records contract data for one document.

    mistune renders children before their parent, so the plain text of a
    heading or paragraph is recorded from its text callbacks and read back
    in the heading/paragraph callback.
    """

    def __init__(self, data: ManifestData, source: str, cases: dict[str, str], warnings: list[Diagnostic]):
        super().__init__()
        self.data = data
        self.source = source
        self.cases = cases
        self.warnings = warnings

        self.open_resource: ResourceData | None = None
        self.open_case: CaseData | None = None

        self._root = Node()
        self._armed: str | None = None
        self._recorder: list[str] | None = None
        self._paragraphs: list[str] = []
        self._quotes: list[tuple[int, str]] = []
        self._last_block = ""

    def _record(self) -> None:
        self._recorder = []

    def _rewind(self) -> str:
        text = "".join(self._recorder or [])
        self._recorder = None
        return text.strip()

    def render_token(self, token, state):
        kind = token["type"]
        if kind in ("heading", "paragraph"):
            self._record()
        elif kind == "block_quote":
            preceding = self._paragraphs[-1] if self._last_block == "paragraph" and self._paragraphs else ""
            self._quotes.append((len(self._paragraphs), preceding))

        html = super().render_token(token, state)
        if kind in BLOCK_TYPES:
            self._last_block = kind
        return html

    def text(self, text: str) -> str:
        if self._recorder is not None:
            self._recorder.append(text)
        return super().text(text)

    def codespan(self, text: str) -> str:
        if self._recorder is not None:
            self._recorder.append(text)
        return super().codespan(text)

    def softbreak(self) -> str:
        if self._recorder is not None:
            self._recorder.append("\n")
        return super().softbreak()

    def linebreak(self) -> str:
        if self._recorder is not None:
            self._recorder.append("\n")
        return super().linebreak()

    def heading(self, text: str, level: int, **attrs) -> str:
        title = self._rewind()
        if level == 1:
            self._open_resource(title)
        elif level == 2:
            self._open_case(title)
        elif level == 3:
            self._arm(title)
        return super().heading(text, level, **attrs)

    def paragraph(self, text: str) -> str:
        self._paragraphs.append(self._rewind())
        return super().paragraph(text)

    def block_quote(self, text: str) -> str:
        start, preceding = self._quotes.pop()
        case = self.open_case

        # the first quote of a case declares its givens and whiles
        if case is not None and not case.given and not case.while_:
            inside = self._paragraphs[start:]
            prose = "\n".join(inside) if inside else preceding
            case.given, case.while_, unmatched = parse_given_prose(prose)
            for line in unmatched:
                self._warn(f"Unexpected line in given of case '{case.name}': {line}")

        return super().block_quote(text)

    def block_code(self, code: str, info: str | None = None) -> str:
        if self.open_case is not None and self._armed:
            if self._armed == "when":
                self.open_case.when = parse_when(code, self.source)
            else:
                self.open_case.then = parse_then(code, self.source)
            self._armed = None
        return super().block_code(code, info)

    def _open_resource(self, title: str) -> None:
        self.close()
        self.open_resource = None

        if not RESOURCE_RE.match(title):
            return

        node = Node()
        self._root.append(node, title)
        self.open_resource = ResourceData(pattern=node.pattern)
        self.data.resources.append(self.open_resource)
        logger.debug("Opened resource %s (%s)", node.pattern, self.source)

    def _open_case(self, title: str) -> None:
        self.close()

        name = to_case_name(title)
        if not name:
            return
        if self.open_resource is None:
            raise CaseOutsideResourceError(self.source, name)
        if name in self.cases:
            raise DuplicateCaseNameError(self.source, name, self.cases[name])

        self.open_case = CaseData(name=name)
        self.cases[name] = self.source
        self._paragraphs = []
        logger.debug("Opened case '%s' under %s", name, self.open_resource.pattern)

    def _arm(self, title: str) -> None:
        match = SECTION_RE.match(title)
        if not match:
            return

        section = match.group(1)
        case = self.open_case
        if case is None:
            raise SectionOutsideCaseError(self.source, section)
        if getattr(case, section) is not None or self._armed == section:
            raise DuplicateSectionError(self.source, section, case.name)
        self._armed = section

    def close(self) -> None:
        """Finalize the open case; only complete cases reach the resource."""
        case = self.open_case
        if case is None:
            return

        missing = case.missing_sections()
        if missing:
            raise IncompleteCaseError(self.source, case.name, missing)

        self.open_resource.cases.append(case)
        self.open_case = None
        self._armed = None

    def _warn(self, message: str) -> None:
        diagnostic = Diagnostic(source=self.source, message=message)
        logger.warning("%s", diagnostic)
        self.warnings.append(diagnostic)


class MarkdownParser:
    """Parses every Markdown document under root into one ManifestData."""

    def __init__(self, root: Path | str, name: str | None = None):
        self.root = Path(root)
        self.name = name or self.root.resolve().name
        self._reset()

    def _reset(self) -> None:
        self._data = ManifestData(name=self.name)
        self._cases: dict[str, str] = {}
        self._warnings: list[Diagnostic] = []
        self._pages: dict[str, str] = {}

    def parse(self) -> ParseResult:
        self._reset()
        try:
            self._data.archetypes = load_archetypes(self.root)
            for path in self._documents():
                self._render(path)

            return ParseResult(data=self._data, warnings=self._warnings, pages=self._pages)
        finally:
            self._reset()

    def _documents(self) -> list[Path]:
        paths = [p for p in self.root.rglob("*.md") if p.is_file()]
        return sorted(paths, key=lambda p: p.relative_to(self.root).parts)

    def _render(self, path: Path) -> None:
        renderer = ContractRenderer(self._data, str(path), self._cases, self._warnings)
        markdown = mistune.create_markdown(renderer=renderer)

        html = markdown(path.read_text(encoding="utf-8"))
        renderer.close()

        self._pages[path.relative_to(self.root).as_posix()] = html
        logger.debug("Rendered %s", path)
