"""Contract data models.

Both front ends (file tree and Markdown) compile their input into these
models. The Manifest domain object is built from a ManifestData.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator


def canonical_header_key(key: str) -> str:
    """Canonical form of a header name: 'accept-language' -> 'Accept-Language'."""
    return "-".join(part.capitalize() for part in key.strip().split("-"))


class Headers(RootModel[dict[str, list[str]]]):
    """HTTP headers keyed by canonical name, each with an ordered list of values."""

    root: dict[str, list[str]] = {}

    @field_validator("root")
    @classmethod
    def _canonicalize(cls, value: dict[str, list[str]]) -> dict[str, list[str]]:
        headers: dict[str, list[str]] = {}
        for key, values in value.items():
            headers.setdefault(canonical_header_key(key), []).extend(values)
        return headers

    def add(self, key: str, value: str) -> None:
        self.root.setdefault(canonical_header_key(key), []).append(value)

    def get(self, key: str) -> str:
        """First value for the header, or "" if absent."""
        values = self.root.get(canonical_header_key(key))
        return values[0] if values else ""

    def get_all(self, key: str) -> list[str]:
        return list(self.root.get(canonical_header_key(key), []))

    def items(self):
        return self.root.items()

    def __contains__(self, key: str) -> bool:
        return canonical_header_key(key) in self.root

    def __len__(self) -> int:
        return len(self.root)


class Given(BaseModel):
    """A state a state provider must set up before the case runs."""

    name: str


class While(BaseModel):
    """A dependency that must be in the named case while this case runs."""

    id: str
    case: str


class When(BaseModel):
    """The example request."""

    method: str = ""
    path: str = ""
    headers: Headers = Field(default_factory=Headers)
    body: str = ""


class Then(BaseModel):
    """The expected response."""

    status_code: int = 0
    status: str = ""
    headers: Headers = Field(default_factory=Headers)
    body: str = ""


class CaseData(BaseModel):
    """One named example interaction."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    given: dict[str, Given] = {}
    while_: list[While] = Field(default=[], alias="while")
    when: When | None = None
    then: Then | None = None

    def missing_sections(self) -> list[str]:
        return [section for section in ("when", "then") if getattr(self, section) is None]


class ResourceData(BaseModel):
    """One addressable endpoint pattern, e.g. /users/:id, and its cases."""

    pattern: str
    cases: list[CaseData] = []


class ManifestData(BaseModel):
    """Top-level container produced by a parser."""

    name: str = ""
    resources: list[ResourceData] = []
    archetypes: list[dict[str, Any]] = []  # opaque, owned by the content matcher
