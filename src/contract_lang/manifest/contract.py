"""The Manifest domain model.

Built once from ManifestData and read-only afterwards. Actions, States and
Dependencies are projections computed on demand from the same cases.
"""

from typing import Callable

from contract_lang.errors import DuplicateCaseNameError, IncompleteCaseError, InvalidPatternError, NoSuccessExampleError
from contract_lang.manifest.data import ManifestData, ResourceData
from contract_lang.manifest.http import Case, MockResponse, Request


class Action:
    """Cases of one resource that share an HTTP method."""

    def __init__(self, case: Case):
        self._method = case.request.method
        self._cases = [case]

    @property
    def method(self) -> str:
        return self._method

    @property
    def cases(self) -> list[Case]:
        return list(self._cases)

    def add(self, case: Case) -> None:
        self._cases.append(case)

    def example(self) -> Case:
        """The first case with a 2xx response, used for mocking."""
        for case in self._cases:
            if case.is_success_like():
                return case
        raise NoSuccessExampleError(self._method)

    def handler(self) -> Callable[[Request | None], MockResponse]:
        """A handler that answers any request with the representative example."""
        response = self.example().mock_response()

        def handle(request: Request | None = None) -> MockResponse:
            return response

        return handle


class Resource:
    def __init__(self, pattern: str, cases: list[Case]):
        self._pattern = pattern
        self._cases = cases

    @property
    def pattern(self) -> str:
        return self._pattern

    @property
    def cases(self) -> list[Case]:
        return list(self._cases)

    def actions(self) -> list[Action]:
        """Group cases by method, in order of first appearance."""
        actions: list[Action] = []
        for case in self._cases:
            for action in actions:
                if case.belongs_to(action):
                    action.add(case)
                    break
            else:
                actions.append(Action(case))
        return actions


class Manifest:
    """A validated service contract."""

    def __init__(self, data: ManifestData):
        self._name = data.name

        seen: dict[str, str] = {}
        self._resources = [self._build_resource(r, data, seen) for r in data.resources]

    @staticmethod
    def _build_resource(resource: ResourceData, data: ManifestData, seen: dict[str, str]) -> Resource:
        if not resource.pattern.startswith("/"):
            raise InvalidPatternError(resource.pattern)

        cases = []
        for c in resource.cases:
            if c.name in seen:
                raise DuplicateCaseNameError(resource.pattern, c.name, seen[c.name])
            missing = c.missing_sections()
            if missing:
                raise IncompleteCaseError(resource.pattern, c.name, missing)

            seen[c.name] = resource.pattern
            cases.append(Case.from_data(c, data))
        return Resource(resource.pattern, cases)

    @property
    def name(self) -> str:
        return self._name

    def resources(self) -> list[Resource]:
        return list(self._resources)

    def states(self) -> dict[str, list[str]]:
        """Map each state provider to every state name the cases require.

        Names are not deduplicated: two cases needing the same state yield it twice.
        """
        states: dict[str, list[str]] = {}
        for resource in self._resources:
            for action in resource.actions():
                for case in action.cases:
                    for provider, given in case.given.items():
                        states.setdefault(provider, []).append(given.name)
        return states

    def dependencies(self) -> dict[str, list[str]]:
        """Map each dependency that must be mocked for isolation to an empty list."""
        deps: dict[str, list[str]] = {}
        for resource in self._resources:
            for action in resource.actions():
                for case in action.cases:
                    for while_ in case.while_:
                        deps.setdefault(while_.id, [])
        return deps
