import pytest

from contract_lang.lang import compile_manifest, parse_contract
from contract_lang.parser.detect import detect_format


class TestDetectFormat:
    def test_markdown_tree(self, make_tree):
        assert detect_format(make_tree({"docs/users.md": "# /users\n"})) == "markdown"

    def test_file_tree(self, note_service):
        assert detect_format(note_service) == "file"

    def test_readme_in_file_tree(self, make_tree):
        root = make_tree({
            "README.md": "# Users service\n",
            "- users/'list users'/when": "GET /users",
            "- users/'list users'/then": "200 OK",
        })
        assert detect_format(root) == "file"

    def test_markdown_beside_plain_dirs(self, make_tree):
        root = make_tree({"users.md": "# /users\n", "assets": None})
        assert detect_format(root) == "markdown"

    def test_not_a_directory(self, tmp_path):
        f = tmp_path / "users.md"
        f.write_text("# /users\n")
        with pytest.raises(NotADirectoryError):
            detect_format(f)


class TestParseContract:
    def test_auto_selects_file_parser(self, note_service):
        result = parse_contract(note_service)
        assert len(result.data.resources) == 4
        assert result.pages == {}

    def test_auto_ignores_readme_in_file_tree(self, make_tree):
        root = make_tree({
            "README.md": "# Users service\n",
            "- users/'list users'/when": "GET /users",
            "- users/'list users'/then": "200 OK",
        })
        result = parse_contract(root)
        assert [r.pattern for r in result.data.resources] == ["/users"]
        assert result.data.resources[0].cases[0].name == "list users"

    def test_auto_selects_markdown_parser(self, make_tree):
        root = make_tree({"users.md": "# /users\n"})
        result = parse_contract(root)
        assert [r.pattern for r in result.data.resources] == ["/users"]
        assert "users.md" in result.pages

    def test_unknown_format(self, note_service):
        with pytest.raises(ValueError):
            parse_contract(note_service, fmt="yaml")

    def test_compile_manifest(self, note_service):
        manifest, result = compile_manifest(note_service, fmt="file", name="notes")
        assert manifest.name == "notes"
        assert len(manifest.resources()) == len(result.data.resources)
