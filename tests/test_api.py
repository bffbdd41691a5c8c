import importlib
import time

import pytest
from fastapi.testclient import TestClient

from teamowners.core.config import Settings
from teamowners.core.dependencies import get_query_evaluator
import teamowners.main
from teamowners.main import create_app

from conftest import write_links, write_manifest


@pytest.fixture
def app(data_dir):
    return create_app(Settings(data_dir=data_dir))


@pytest.fixture
def client(app, sample_ownership):
    with TestClient(app) as client:
        yield client


def test_greeting_without_query(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "<h1>Hello!</h1>" in response.text


def test_empty_query_has_no_greeting(client):
    response = client.get("/", params={"q": ""})

    assert response.status_code == 200
    assert "Hello!" not in response.text


def test_query_renders_owner_links(client):
    response = client.get("/", params={"q": "com.acme.billing.Invoice.charge(Invoice.java:42)"})

    assert response.status_code == 200
    assert "com.acme.billing -- " in response.text
    assert '<a href="https://wiki/payments">payments</a>' in response.text


def test_query_output_is_escaped(client):
    response = client.get("/", params={"q": "<script>alert(1)</script>"})

    assert "<script>alert" not in response.text
    assert "&lt;script&gt;" in response.text


def test_api_lookup_returns_structured_results(client):
    response = client.get(
        "/api/lookup",
        params={"q": "com.acme.core.Boot.main(Boot.java:1)\norg.unknown"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "query": "com.acme.core.Boot.main(Boot.java:1)\norg.unknown",
        "elements": [
            {
                "package": "com.acme.core",
                "matches": [{"team": "Platform", "link": "https://wiki/platform"}],
            },
            {"package": "org.unknown", "matches": []},
        ],
    }


def test_api_lookup_absent_and_empty_query(client):
    assert client.get("/api/lookup").json() == {"query": None, "elements": []}
    assert client.get("/api/lookup", params={"q": ""}).json() == {"query": "", "elements": []}


def test_init_reloads_manifests(client, packages_dir, links_file):
    assert client.get("/api/lookup", params={"q": "org.search"}).json()["elements"][0]["matches"] == []

    write_manifest(packages_dir, "Search", ["org.search"])
    write_links(links_file, {"search": "https://wiki/search"})
    response = client.get("/init")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "refreshed"
    assert body["generation"] == 2
    assert body["team_count"] == 3

    matches = client.get("/api/lookup", params={"q": "org.search"}).json()["elements"][0]["matches"]
    assert matches == [{"team": "Search", "link": "https://wiki/search"}]


def test_init_with_missing_manifests_keeps_registry(client, packages_dir):
    for manifest in packages_dir.iterdir():
        manifest.unlink()
    packages_dir.rmdir()

    body = client.get("/init").json()

    assert body["status"] == "failed"
    assert body["generation"] == 1
    assert body["team_count"] == 2


def test_health(client):
    assert client.get("/health").json() == {"status": "ok", "generation": 1, "teams": 2}


def test_unknown_route_is_not_found(client):
    response = client.get("/does/not/exist")

    assert response.status_code == 404
    assert response.text == "Not found"


def test_request_failure_renders_degraded_page(app, client):
    class BrokenEvaluator:
        def evaluate(self, query):
            raise RuntimeError("boom")

    app.dependency_overrides[get_query_evaluator] = lambda: BrokenEvaluator()
    try:
        response = client.get("/", params={"q": "com.acme"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert "Something went wrong" in response.text
    # Other requests keep working.
    assert client.get("/health").status_code == 200


def test_apps_have_independent_registries(data_dir, sample_ownership, tmp_path_factory):
    other_dir = tmp_path_factory.mktemp("other")
    (other_dir / "packages").mkdir()

    with TestClient(create_app(Settings(data_dir=data_dir))) as first, TestClient(
        create_app(Settings(data_dir=other_dir))
    ) as second:
        assert first.get("/health").json()["teams"] == 2
        assert second.get("/health").json()["teams"] == 0


def test_periodic_refresh_picks_up_changes(data_dir, sample_ownership, packages_dir):
    app = create_app(Settings(data_dir=data_dir, refresh_interval_seconds=0.05))

    with TestClient(app) as client:
        assert client.get("/health").json()["teams"] == 2
        write_manifest(packages_dir, "search", ["org.search"])

        deadline = time.monotonic() + 5
        health = client.get("/health").json()
        while health["teams"] != 3 and time.monotonic() < deadline:
            time.sleep(0.05)
            health = client.get("/health").json()

        assert health["teams"] == 3
        assert health["generation"] >= 2
        task = app.state.refresh_task
        assert not task.done()

    assert task.cancelled()


def test_periodic_refresh_disabled_by_default(client, app):
    assert app.state.refresh_task is None


def test_import_does_not_read_environment(monkeypatch, data_dir):
    monkeypatch.setenv("TEAMOWNERS_PORT", "not-a-port")

    module = importlib.reload(teamowners.main)

    assert not hasattr(module, "app")
    with TestClient(module.create_app(Settings(data_dir=data_dir))) as client:
        assert client.get("/health").status_code == 200
