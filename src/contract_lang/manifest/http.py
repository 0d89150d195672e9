"""Example requests and responses as re-readable values.

A Case pairs the request of an example with its expected response. Bodies
are immutable bytes so mock serving and response matching can each read
them as often as they need.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from contract_lang.errors import AssertError
from contract_lang.manifest.data import CaseData, Given, Headers, ManifestData, While

if TYPE_CHECKING:
    from contract_lang.manifest.contract import Action


class ContentMatcher(Protocol):
    """Compares an actual body to an example body; returns an error message or None."""

    def __call__(self, expected: bytes, actual: bytes, content_type: str) -> str | None: ...


@dataclass(frozen=True)
class Request:
    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""


@dataclass(frozen=True)
class Response:
    status_code: int
    status: str = ""
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""

    def content_type(self) -> str:
        """Media type from the Content-Type header, else sniffed from the body."""
        header = self.headers.get("Content-Type")
        if header:
            return header.split(";", 1)[0].strip().lower()
        try:
            self.body.decode("utf-8")
        except UnicodeDecodeError:
            return "application/octet-stream"
        return "text/plain"


@dataclass(frozen=True)
class MockResponse:
    """What a mock server answers for an action."""

    status_code: int
    headers: dict[str, list[str]]
    body: bytes


class Case:
    """A named example: request, expected response, givens and whiles."""

    def __init__(
        self,
        name: str,
        request: Request,
        response: Response,
        given: dict[str, Given] | None = None,
        while_: list[While] | None = None,
        archetypes: list[dict[str, Any]] | None = None,
    ):
        self.name = name
        self.request = request
        self.response = response
        self.given = given or {}
        self.while_ = while_ or []
        self.archetypes = archetypes or []

    @classmethod
    def from_data(cls, data: CaseData, manifest: ManifestData) -> "Case":
        when, then = data.when, data.then
        request = Request(
            method=when.method,
            path=when.path,
            headers=when.headers.model_copy(deep=True),
            body=when.body.encode("utf-8"),
        )
        response = Response(
            status_code=then.status_code,
            status=then.status,
            headers=then.headers.model_copy(deep=True),
            body=then.body.encode("utf-8"),
        )
        return cls(data.name, request, response, dict(data.given), list(data.while_), manifest.archetypes)

    def belongs_to(self, action: "Action") -> bool:
        return self.request.method == action.method

    def is_success_like(self) -> bool:
        return 200 <= self.response.status_code < 300

    def mock_response(self) -> MockResponse:
        headers = {key: list(values) for key, values in self.response.headers.items()}
        return MockResponse(status_code=self.response.status_code, headers=headers, body=self.response.body)

    def is_expected_response(self, actual: Response, matcher: ContentMatcher) -> None:
        """Assert that actual follows this example; raises AssertError if not."""
        expected = self.response

        if expected.status_code != actual.status_code:
            raise AssertError(
                f"StatusCode not equal, expected '{expected.status_code}' but got "
                f"'{actual.status_code}' with content: '{actual.body.decode('utf-8', 'replace')}'"
            )

        err = matcher(expected.body, actual.body, expected.content_type())
        if err:
            raise AssertError(f"Content Assertion: {err}\n Archetypes: {self.archetypes}")

        # actual must carry at least the expected headers
        for key, values in expected.headers.items():
            value = actual.headers.get(key)
            if not value:
                raise AssertError(f"Expected response with '{key}' header")
            if value not in values:
                raise AssertError(
                    f"Expected '{key}' header to have one of the following values: {values}, received: {value}"
                )

    def __repr__(self) -> str:
        return f"Case({self.name!r}, {self.request.method} {self.request.path} -> {self.response.status_code})"
