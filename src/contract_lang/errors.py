"""Error taxonomy for contract parsing and manifest building.

Parse errors name the offending source (file, directory or document),
the malformed content and the expected format. None of them are retried:
the first one raised aborts the parse.
"""


class ContractLangError(Exception):
    """Base class for all errors raised by contract_lang."""


class ParseError(ContractLangError):
    """A contract source could not be compiled into manifest data."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(message)


class ManifestError(ContractLangError):
    """Manifest data is inconsistent, or a derived view cannot be built."""


class UnexpectedDirError(ParseError):
    def __init__(self, source: str, name: str):
        self.name = name
        super().__init__(
            source,
            f"Parser encountered an unexpected directory: '{name}', expected a resource "
            f"directory (starting with '- '), or a case directory formatted as 'case name'",
        )


class UnexpectedFileError(ParseError):
    def __init__(self, source: str, name: str):
        self.name = name
        super().__init__(
            source,
            f"Parser encountered a file without an extension: '{name}', "
            f"only 'given', 'when', 'then' or 'while' is allowed",
        )


class CaseOutsideResourceError(ParseError):
    def __init__(self, source: str, case_name: str):
        self.case_name = case_name
        super().__init__(source, f"Case '{case_name}' ({source}) is outside a resource")


class CaseFileOutsideCaseError(ParseError):
    def __init__(self, source: str):
        super().__init__(source, f"Case file '{source}' was found outside a case folder")


class MissingParentError(ParseError):
    def __init__(self, source: str):
        super().__init__(source, f"No parent resource found for '{source}'")


class DuplicateCaseNameError(ParseError):
    def __init__(self, source: str, case_name: str, previous: str):
        self.case_name = case_name
        self.previous = previous
        super().__init__(
            source,
            f"Case with name '{case_name}' ({source}) already exists in '{previous}'",
        )


class IncompleteCaseError(ParseError):
    def __init__(self, source: str, case_name: str, missing: list[str]):
        self.case_name = case_name
        self.missing = missing
        super().__init__(
            source,
            f"Case '{case_name}' ({source}) is incomplete, missing: {', '.join(missing)}",
        )


class SectionOutsideCaseError(ParseError):
    def __init__(self, source: str, section: str):
        self.section = section
        super().__init__(source, f"Encountered '{section}' outside a case in '{source}'")


class DuplicateSectionError(ParseError):
    def __init__(self, source: str, section: str, case_name: str):
        self.section = section
        self.case_name = case_name
        super().__init__(
            source,
            f"Encountered multiple '{section}' sections in case '{case_name}' ({source})",
        )


class ArchetypeError(ParseError):
    def __init__(self, source: str, reason: str):
        super().__init__(
            source,
            f"Archetypes file '{source}' is invalid: {reason}, expected a JSON list of objects",
        )


class HeaderLineError(ParseError):
    def __init__(self, source: str, line: str):
        self.line = line
        super().__init__(
            source,
            f"File '{source}' has an unexpected header line: '{line}', "
            f"expected format 'Header-Key: Value'",
        )


class RequestLineError(ParseError):
    def __init__(self, source: str, line: str):
        self.line = line
        super().__init__(
            source,
            f"Parser encountered a 'when' block '{source}' with an unexpected first line: "
            f"'{line}', expected format '<HTTP method> <path>'",
        )


class MethodError(ParseError):
    def __init__(self, source: str, method: str, allowed: tuple[str, ...], kind: str = "when"):
        self.method = method
        self.allowed = allowed
        super().__init__(
            source,
            f"Parser encountered a '{kind}' block '{source}' with an unexpected HTTP method: "
            f"'{method}', expected one of: {', '.join(allowed)}",
        )


class PathError(ParseError):
    def __init__(self, source: str, path: str, kind: str = "when"):
        self.path = path
        super().__init__(
            source,
            f"Parser encountered a '{kind}' block '{source}' with an unexpected path: "
            f"'{path}', expected absolute path (starting with '/')",
        )


class ResponseLineError(ParseError):
    def __init__(self, source: str, line: str):
        self.line = line
        super().__init__(
            source,
            f"Parser encountered a 'then' block '{source}' with an unexpected first line: "
            f"'{line}', expected format '<HTTP Status Code> <Status Text>'",
        )


class CodeError(ParseError):
    def __init__(self, source: str, code: str, cause: Exception):
        self.code = code
        self.cause = cause
        super().__init__(
            source,
            f"Parser encountered a 'then' block '{source}' with an unexpected status code: "
            f"'{code}', expected a number. ({cause})",
        )


class StateLineError(ParseError):
    def __init__(self, source: str, line: str):
        self.line = line
        super().__init__(
            source,
            f"Parser encountered a 'given' file '{source}' with an invalid line: '{line}', "
            f"expected format \"<state provider name>: '<state name>'\"",
        )


class LinkLineError(ParseError):
    def __init__(self, source: str, line: str):
        self.line = line
        super().__init__(
            source,
            f"Parser encountered a 'while' file '{source}' with an unexpected line: '{line}', "
            f"expected format \"<service id> '<case name>'\"",
        )


class LinkLineCaseNameError(ParseError):
    def __init__(self, source: str, case_name: str):
        self.case_name = case_name
        super().__init__(
            source,
            f"Parser encountered a 'while' file '{source}' with an invalid case name: "
            f"\"{case_name}\", expected single-quoted name: e.g 'name of the case'",
        )


class InvalidPatternError(ManifestError):
    def __init__(self, pattern: str):
        self.pattern = pattern
        super().__init__(f"Resource pattern '{pattern}' is not an absolute path")


class NoSuccessExampleError(ManifestError):
    def __init__(self, method: str):
        self.method = method
        super().__init__(f"{method} action has no 'success-like' example")


class AssertError(ManifestError):
    """An actual response does not follow the example it was compared to."""
