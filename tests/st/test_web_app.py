"""Web 打包服务测试"""

from __future__ import annotations

from pathlib import Path

import pytest

from jim.core.config import Config
from jim.web.app import create_app


@pytest.fixture()
def project(tmp_path: Path, store_factory) -> Config:
    home = tmp_path / "jimhome"
    store_factory(home / "lib", {
        "jquery-1.4.1": "var jq = '1.4.1';",
        "sammy-0.5.0": "var sammy = '0.5.0';",
    })
    jimfile = tmp_path / "Jimfile"
    jimfile.write_text("jquery\nsammy\n", encoding="utf-8")
    return Config(jimhome=str(home), jimfile=str(jimfile), extra_paths=[])


@pytest.fixture()
def client(project: Config):
    app = create_app(project)
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


class TestBundleRoutes:
    def test_bundle(self, client) -> None:
        resp = client.get("/javascripts/bundled.js")
        assert resp.status_code == 200
        assert resp.mimetype == "text/javascript"
        assert resp.get_data(as_text=True) == "var jq = '1.4.1';\nvar sammy = '0.5.0';"

    def test_compress(self, client) -> None:
        resp = client.get("/javascripts/bundled.min.js")
        assert resp.status_code == 200
        assert resp.get_data(as_text=True) == "var jq='1.4.1';\nvar sammy='0.5.0';"

    def test_any_name_serves_the_jimfile(self, client) -> None:
        assert client.get("/javascripts/whatever.js").status_code == 200

    def test_non_js_is_404(self, client) -> None:
        assert client.get("/javascripts/bundled.css").status_code == 404
        assert client.get("/other/bundled.js").status_code == 404

    def test_rebuilds_every_request(self, client, project: Config) -> None:
        client.get("/javascripts/bundled.js")
        Path(project.jimfile).write_text("sammy\n", encoding="utf-8")
        resp = client.get("/javascripts/bundled.js")
        assert resp.get_data(as_text=True) == "var sammy = '0.5.0';"

    def test_failure_renders_500(self, client, project: Config) -> None:
        Path(project.jimfile).write_text("jquery\n<nope>\n", encoding="utf-8")
        resp = client.get("/javascripts/bundled.js")
        assert resp.status_code == 500
        assert resp.mimetype == "text/html"
        body = resp.get_data(as_text=True)
        assert "ResolutionError" in body
        assert "&lt;nope&gt;" in body
        assert "<nope>" not in body


def test_custom_prefix_and_suffix(project: Config) -> None:
    project.bundle_uri = "/js/"
    project.compressed_suffix = "-min"
    client = create_app(project).test_client()
    assert client.get("/js/app.js").status_code == 200
    resp = client.get("/js/app-min.js")
    assert resp.get_data(as_text=True) == "var jq='1.4.1';\nvar sammy='0.5.0';"
    assert client.get("/javascripts/app.js").status_code == 404
