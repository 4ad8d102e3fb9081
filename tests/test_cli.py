"""
CLI tests (typer.testing.CliRunner).
"""
from __future__ import annotations

import json

from typer.testing import CliRunner

from cli.main import app

runner = CliRunner()

WIDE = {"COLUMNS": "200"}


class TestShowCommand:
    """`show` renders the three page states"""

    def test_show_snapshot(self, sample_catalog_path):
        result = runner.invoke(app, ["show", "--snapshot", str(sample_catalog_path), "--no-banner"], env=WIDE)

        assert result.exit_code == 0, result.output
        assert "Summer" in result.output
        assert "Essentials" in result.output
        assert "Hoodie" in result.output

    def test_show_empty_catalog(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text('{"collections": []}', encoding="utf-8")

        result = runner.invoke(app, ["show", "--snapshot", str(path), "--no-banner"], env=WIDE)

        assert result.exit_code == 0
        assert "No collections available yet." in result.output

    def test_show_failed_listing(self, tmp_path):
        result = runner.invoke(app, ["show", "--snapshot", str(tmp_path / "missing.json")], env=WIDE)

        assert result.exit_code == 1
        assert "Error loading collections" in result.output

    def test_json_export(self, sample_catalog_path, tmp_path):
        out = tmp_path / "out" / "collections.json"

        result = runner.invoke(
            app,
            ["show", "--snapshot", str(sample_catalog_path), "--sample-size", "2", "--json", str(out)],
            env=WIDE,
        )

        assert result.exit_code == 0, result.output
        payload = json.loads(out.read_text(encoding="utf-8"))
        assert payload["status"] == "ready"
        summer = payload["collections"][0]
        assert summer["link"] == "/products?collection=summer"
        assert [p["name"] for p in summer["products"]] == ["Tee", "Cap"]


class TestInitDbCommand:
    """`init-db` creates and seeds the SQL catalog"""

    def test_init_then_show_from_sql(self, sample_catalog_path, tmp_path):
        url = f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}"

        init = runner.invoke(app, ["init-db", "--database-url", url, "--snapshot", str(sample_catalog_path)])
        assert init.exit_code == 0, init.output
        assert "3 collections seeded" in init.output

        env = {**WIDE, "COLLECTIONS_VIEW_DATABASE_URL": url, "COLLECTIONS_VIEW_SOURCE": "sql"}
        show = runner.invoke(app, ["show", "--no-banner"], env=env)

        assert show.exit_code == 0, show.output
        assert "Outerwear" in show.output


class TestMisconfiguredDatabase:
    """A bad database URL is reported, not raised"""

    def test_show_with_sync_driver_url(self):
        env = {**WIDE, "COLLECTIONS_VIEW_SOURCE": "sql", "COLLECTIONS_VIEW_DATABASE_URL": "sqlite:///./x.db"}

        result = runner.invoke(app, ["show", "--no-banner"], env=env)

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "Error loading collections" in result.output

    def test_doctor_reports_unparsable_url(self):
        env = {**WIDE, "COLLECTIONS_VIEW_SOURCE": "sql", "COLLECTIONS_VIEW_DATABASE_URL": "not a url"}

        result = runner.invoke(app, ["doctor", "run"], env=env)

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "FAIL" in result.output
