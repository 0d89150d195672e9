from pathlib import Path

import pytest


@pytest.fixture
def make_tree(tmp_path):
    """Build a directory tree from {relative path: file content}; None makes a directory."""

    def _make(files: dict[str, str | None], name: str = "service") -> Path:
        root = tmp_path / name
        root.mkdir()
        for rel, content in files.items():
            path = root / rel
            if content is None:
                path.mkdir(parents=True, exist_ok=True)
            else:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(content, encoding="utf-8")
        return root

    return _make


NOTE_SERVICE = {
    "- users/'list users'/given": "mongodb: 'some users'\nredis: 'no cached users'\n",
    "- users/'list users'/when": "GET /users\nAccept-Language: en\n\n[{}, {}]",
    "- users/'list users'/then": "200 OK\nContent-Type: text/html\n\n<html></html>",
    "- users/'list users'/while": "auth-service 'authorized'\n",
    "- users/'create user'/when": "POST /users\nContent-Type: application/json\n\n{}",
    "- users/'create user'/then": "201 Created",
    "- users/- (id)/'get user'/given": "mongodb: 'some users'\n",
    "- users/- (id)/'get user'/when": "GET /users/1",
    "- users/- (id)/'get user'/then": "200 OK\n\n{\"id\": 1}",
    "- users/- (id)/'missing user'/when": "GET /users/2",
    "- users/- (id)/'missing user'/then": "404 Not Found",
    "- notes/- note-(note_id)-(author_id)": None,
    "archetypes.json": '[{"name": "user-id", "pattern": "\\\\d+"}]',
}


@pytest.fixture
def note_service(make_tree) -> Path:
    return make_tree(NOTE_SERVICE, name="note_service")
