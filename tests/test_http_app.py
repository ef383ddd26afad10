import asyncio
import json

from app.config import Settings
from app.di import build_container
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient
from pathlib import Path
import pytest

from server.http_app import ERRORS, create_app


@pytest.fixture
def client(tmp_path: Path) -> TestClient:
    container = build_container(Settings(STORAGE_ROOT=tmp_path / "filesys"))
    return TestClient(create_app(container))


def test_create_read_delete_cycle(client: TestClient):
    r = client.post("/file", json={"path": "/notes/day1.txt", "data": "hello there"})
    assert r.status_code == 200

    r = client.get("/file", params={"path": "/notes/day1.txt"})
    assert r.status_code == 200
    assert r.json() == {"data": "hello there"}

    r = client.delete("/file", params={"path": "/notes/day1.txt"})
    assert r.status_code == 200

    r = client.get("/file", params={"path": "/notes/day1.txt"})
    assert r.status_code == 404
    assert r.json() == {"error": "File not found."}


def test_post_overwrites(client: TestClient):
    client.post("/file", json={"path": "/x.txt", "data": "first"})
    client.post("/file", json={"path": "/x.txt", "data": "second"})
    assert client.get("/file", params={"path": "/x.txt"}).json()["data"] == "second"


def test_traversal_stays_inside_root(client: TestClient, tmp_path: Path):
    r = client.post("/file", json={"path": "/../../escape.txt", "data": "x"})
    assert r.status_code == 200
    assert (tmp_path / "filesys" / "escape.txt").is_file()
    assert not (tmp_path / "escape.txt").exists()


def test_symlink_escape_is_forbidden(client: TestClient, tmp_path: Path):
    (tmp_path / "filesys" / "out").symlink_to(tmp_path, target_is_directory=True)
    r = client.post("/file", json={"path": "/out/evil.txt", "data": "x"})
    assert r.status_code == 403
    assert not (tmp_path / "evil.txt").exists()


@pytest.mark.parametrize(
    "body, message",
    [
        ({"path": "no-slash.txt", "data": "x"}, "Verify your path"),
        ({"path": "/file.md", "data": "x"}, "Invalid filename."),
        ({"path": "/file.txt", "data": ""}, "There is no data to write to file."),
        ({"data": "x"}, "Verify your path"),
    ],
)
def test_post_validation_errors(client: TestClient, body, message):
    r = client.post("/file", json=body)
    assert r.status_code == 400
    assert r.json()["error"].startswith(message)


def test_post_bad_json(client: TestClient):
    r = client.post("/file", content=b"{not json", headers={"content-type": "application/json"})
    assert r.status_code == 400
    assert r.json() == {"error": "Verify your JSON payload."}


def test_missing_query_param_is_bad_request(client: TestClient):
    assert client.get("/file").status_code == 400
    assert client.get("/stats").status_code == 400


def test_delete_missing_is_404(client: TestClient):
    r = client.delete("/file", params={"path": "/ghost.txt"})
    assert r.status_code == 404


def test_write_failure_is_500(client: TestClient, tmp_path: Path):
    (tmp_path / "filesys" / "taken.txt").mkdir()
    r = client.post("/file", json={"path": "/taken.txt", "data": "x"})
    assert r.status_code == 500
    assert r.json() == {"error": "Error creating/writing file."}


def test_stats_endpoint(client: TestClient):
    client.post("/file", json={"path": "/dir/a.txt", "data": "ab1"})
    client.post("/file", json={"path": "/dir/b.txt", "data": "cd 22"})

    r = client.get("/stats", params={"path": "/dir/"})
    assert r.status_code == 200
    body = r.json()
    assert body["file_count"] == 2
    assert body["bytes_total"] == 8
    assert body["alphanum_chars_percentage"] == {"a.txt": 1.0, "b.txt": 0.8}
    assert body["word_length_avg"] == pytest.approx(7 / 3)
    assert set(body) == {
        "file_count",
        "alphanum_chars_percentage",
        "alphanum_chars_stddev",
        "word_length_avg",
        "word_length_stddev",
        "bytes_total",
    }


def test_stats_missing_path_is_404(client: TestClient):
    r = client.get("/stats", params={"path": "/nowhere"})
    assert r.status_code == 404
    assert r.json() == {"error": "Path not found."}


def test_stats_root(client: TestClient):
    r = client.get("/stats", params={"path": "/"})
    assert r.status_code == 200
    assert r.json()["word_length_avg"] == -1


def test_stats_io_failure_is_500(client: TestClient, monkeypatch):
    client.post("/file", json={"path": "/dir/a.txt", "data": "ab1"})
    real_read_bytes = Path.read_bytes

    def read_bytes(self):
        if self.name == "a.txt":
            raise PermissionError(13, "Permission denied", str(self))
        return real_read_bytes(self)

    monkeypatch.setattr(Path, "read_bytes", read_bytes)
    r = client.get("/stats", params={"path": "/dir"})
    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error."}


def test_validation_error_without_location_is_bad_request(client: TestClient):
    handler = client.app.exception_handlers[RequestValidationError]
    exc = RequestValidationError([{"loc": (), "msg": "broken", "type": "value_error"}])
    r = asyncio.run(handler(None, exc))
    assert r.status_code == 400
    assert json.loads(r.body) == {"error": ERRORS["invalid_path"]}
