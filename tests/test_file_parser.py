import pytest

from contract_lang.errors import (
    ArchetypeError,
    CaseFileOutsideCaseError,
    DuplicateCaseNameError,
    HeaderLineError,
    IncompleteCaseError,
    MissingParentError,
    UnexpectedDirError,
    UnexpectedFileError,
)
from contract_lang.parser.file import FileParser, to_resource_segment


class TestResourceSegment:
    def test_marker(self):
        assert to_resource_segment("- users") == "users"
        assert to_resource_segment("- /users") == "/users"
        assert to_resource_segment("- (id)") == "(id)"

    def test_empty_segment(self):
        assert to_resource_segment("- ") == ""

    def test_not_a_marker(self):
        assert to_resource_segment("users") is None
        assert to_resource_segment("'list users'") is None


class TestParseNoteService:
    def test_resources(self, note_service):
        data = FileParser(note_service).parse().data
        assert data.name == "note_service"
        assert [r.pattern for r in data.resources] == [
            "/notes",
            "/notes/note-:note_id-:author_id",
            "/users",
            "/users/:id",
        ]
        assert [len(r.cases) for r in data.resources] == [0, 0, 2, 2]

    def test_cases_follow_sorted_order(self, note_service):
        data = FileParser(note_service).parse().data
        users, user = data.resources[2], data.resources[3]
        assert [c.name for c in users.cases] == ["create user", "list users"]
        assert [c.name for c in user.cases] == ["get user", "missing user"]

    def test_case_contents(self, note_service):
        data = FileParser(note_service).parse().data
        case = data.resources[2].cases[1]

        assert case.given["mongodb"].name == "some users"
        assert case.given["redis"].name == "no cached users"
        assert case.while_[0].id == "auth-service"
        assert case.while_[0].case == "authorized"

        assert case.when.method == "GET"
        assert case.when.path == "/users"
        assert case.when.headers.get("Accept-Language") == "en"
        assert case.when.headers.get("accept-language") == "en"
        assert case.when.body == "[{}, {}]"

        assert case.then.status_code == 200
        assert case.then.status == "OK"
        assert case.then.headers.get("Content-Type") == "text/html"
        assert case.then.body == "<html></html>"

    def test_archetypes_loaded(self, note_service):
        data = FileParser(note_service).parse().data
        assert data.archetypes == [{"name": "user-id", "pattern": "\\d+"}]

    def test_name_override(self, note_service):
        assert FileParser(note_service, name="notes").parse().data.name == "notes"

    def test_parser_can_be_reused(self, note_service):
        parser = FileParser(note_service)
        first = parser.parse().data
        second = parser.parse().data
        assert first == second
        assert first is not second


class TestParseSingleResource:
    def test_end_to_end(self, make_tree):
        root = make_tree({
            "- users/'list users'/when": "GET /users",
            "- users/'list users'/then": "200 OK\n\n[]",
        })
        result = FileParser(root).parse()

        assert len(result.data.resources) == 1
        resource = result.data.resources[0]
        assert resource.pattern == "/users"
        assert len(resource.cases) == 1
        assert resource.cases[0].name == "list users"
        assert resource.cases[0].then.status_code == 200
        assert resource.cases[0].then.body == "[]"
        assert result.warnings == []
        assert result.data.archetypes == []

    def test_empty_segment_keeps_parent_pattern(self, make_tree):
        root = make_tree({
            "- users/- /'list users'/when": "GET /users",
            "- users/- /'list users'/then": "200 OK",
        })
        data = FileParser(root).parse().data
        assert [r.pattern for r in data.resources] == ["/users", "/users"]
        assert data.resources[1].cases[0].name == "list users"

    def test_cases_directly_under_root(self, make_tree):
        root = make_tree({
            "'health'/when": "GET /",
            "'health'/then": "200 OK",
        })
        data = FileParser(root).parse().data
        assert [r.pattern for r in data.resources] == ["/"]
        assert data.resources[0].cases[0].name == "health"

    def test_files_with_extension_ignored(self, make_tree):
        root = make_tree({
            "README.md": "# docs",
            "- users/.gitkeep": "",
            "- users/'list users'/when": "GET /users",
            "- users/'list users'/then": "200 OK",
            "- users/'list users'/body.json": "[]",
        })
        data = FileParser(root).parse().data
        assert len(data.resources[0].cases) == 1


class TestParseErrors:
    def test_duplicate_case_name_anywhere(self, make_tree):
        root = make_tree({
            "- users/'list'/when": "GET /users",
            "- users/'list'/then": "200 OK",
            "- users/- (id)/'list'/when": "GET /users/1",
            "- users/- (id)/'list'/then": "200 OK",
        })
        with pytest.raises(DuplicateCaseNameError) as exc:
            FileParser(root).parse()
        assert exc.value.case_name == "list"
        assert exc.value.previous == str(root / "- users" / "'list'")
        assert exc.value.previous in str(exc.value)

    def test_unexpected_dir(self, make_tree):
        root = make_tree({"users": None})
        with pytest.raises(UnexpectedDirError) as exc:
            FileParser(root).parse()
        assert exc.value.name == "users"

    def test_unexpected_file(self, make_tree):
        root = make_tree({
            "- users/'list'/when": "GET /users",
            "- users/'list'/then": "200 OK",
            "- users/'list'/notes": "remember",
        })
        with pytest.raises(UnexpectedFileError) as exc:
            FileParser(root).parse()
        assert "'notes'" in str(exc.value)

    def test_case_file_outside_case(self, make_tree):
        root = make_tree({"- users/when": "GET /users"})
        with pytest.raises(CaseFileOutsideCaseError):
            FileParser(root).parse()

    def test_entering_resource_closes_case(self, make_tree):
        root = make_tree({
            "- users/'list'/when": "GET /users",
            "- users/'list'/then": "200 OK",
            "- users/- (id)/then": "200 OK",
        })
        with pytest.raises(CaseFileOutsideCaseError):
            FileParser(root).parse()

    def test_case_file_beside_case_dir(self, make_tree):
        root = make_tree({
            "- users/'list'/when": "GET /users",
            "- users/'list'/then": "200 OK",
            "- users/then": "500 Internal Server Error",
        })
        with pytest.raises(CaseFileOutsideCaseError) as exc:
            FileParser(root).parse()
        assert exc.value.source == str(root / "- users" / "then")

    def test_resource_inside_case(self, make_tree):
        root = make_tree({
            "- users/'list'/when": "GET /users",
            "- users/'list'/then": "200 OK",
            "- users/'list'/- nested": None,
        })
        with pytest.raises(MissingParentError):
            FileParser(root).parse()

    def test_incomplete_case(self, make_tree):
        root = make_tree({"- users/'list'/when": "GET /users"})
        with pytest.raises(IncompleteCaseError) as exc:
            FileParser(root).parse()
        assert exc.value.missing == ["then"]

    def test_line_grammar_error_propagates(self, make_tree):
        root = make_tree({
            "- users/'list'/when": "GET /users\nbroken header\n",
            "- users/'list'/then": "200 OK",
        })
        with pytest.raises(HeaderLineError) as exc:
            FileParser(root).parse()
        assert exc.value.source.endswith("when")

    def test_invalid_archetypes(self, make_tree):
        root = make_tree({"archetypes.json": '{"not": "a list"}'})
        with pytest.raises(ArchetypeError):
            FileParser(root).parse()
