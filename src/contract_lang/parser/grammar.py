"""Line grammars shared by the front ends.

`when` and `then` blocks are loosely based on HTTP messages: a request or
status line, `Key: Value` header lines up to the first blank line, and
the body. `given` and `while` files hold one declaration per line.
"""

import re

from contract_lang.errors import (
    CodeError,
    HeaderLineError,
    LinkLineCaseNameError,
    LinkLineError,
    MethodError,
    PathError,
    RequestLineError,
    ResponseLineError,
    StateLineError,
)
from contract_lang.manifest.data import Given, Headers, Then, When, While

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS")

CASE_NAME_RE = re.compile(r"^'(.*)'$")


def to_case_name(text: str) -> str:
    """Return the name inside single quotes, or "" if text is not quoted."""
    match = CASE_NAME_RE.match(text)
    if not match:
        return ""
    return match.group(1)


def parse_http_message(text: str, source: str) -> tuple[str, Headers, str]:
    """Split a block into its first line, headers and body."""
    first_line = ""
    header_lines: list[str] = []
    body_lines: list[str] = []
    in_body = False

    for line in text.splitlines():
        if in_body:
            body_lines.append(line)
        elif not first_line:
            first_line = line.strip()
        elif not line.strip():
            in_body = True
        else:
            header_lines.append(line)

    headers = Headers()
    for line in header_lines:
        key, sep, value = line.partition(":")
        if not sep or not key.strip():
            raise HeaderLineError(source, line)
        headers.add(key, value.strip())

    return first_line, headers, "\n".join(body_lines)


def parse_method(token: str, source: str, kind: str = "when") -> str:
    if token not in HTTP_METHODS:
        raise MethodError(source, token, HTTP_METHODS, kind=kind)
    return token


def parse_path(token: str, source: str, kind: str = "when") -> str:
    if not token.startswith("/"):
        raise PathError(source, token, kind=kind)
    return token


def parse_when(text: str, source: str) -> When:
    """Parse a request block: '<METHOD> <path>', headers, body."""
    line, headers, body = parse_http_message(text, source)

    parts = line.split(" ", 1)
    if len(parts) != 2:
        raise RequestLineError(source, line)

    return When(
        method=parse_method(parts[0], source),
        path=parse_path(parts[1].strip(), source),
        headers=headers,
        body=body,
    )


def parse_then(text: str, source: str) -> Then:
    """Parse a response block: '<code> <status text>', headers, body."""
    line, headers, body = parse_http_message(text, source)

    parts = line.split(" ", 1)
    if len(parts) != 2:
        raise ResponseLineError(source, line)

    try:
        code = int(parts[0])
    except ValueError as e:
        raise CodeError(source, parts[0], e) from e

    return Then(status_code=code, status=parts[1].strip(), headers=headers, body=body)


def parse_given(text: str, source: str) -> dict[str, Given]:
    """Parse `<provider>: '<state name>'` lines."""
    givens: dict[str, Given] = {}
    for line in text.splitlines():
        if not line.strip():
            continue

        provider, sep, state = line.partition(":")
        provider = provider.strip()
        name = to_case_name(state.strip())
        if not sep or not provider or not name:
            raise StateLineError(source, line)

        givens[provider] = Given(name=name)
    return givens


def parse_while(text: str, source: str) -> list[While]:
    """Parse `<dependency id> '<case name>'` lines."""
    whiles: list[While] = []
    for line in text.splitlines():
        if not line.strip():
            continue

        parts = line.strip().split(" ", 1)
        if len(parts) != 2:
            raise LinkLineError(source, line)

        case = parts[1].strip()
        name = to_case_name(case)
        if not name:
            raise LinkLineCaseNameError(source, case)

        whiles.append(While(id=parts[0], case=name))
    return whiles
