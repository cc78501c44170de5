"""Integration tests for SEO Monitor.

Covers database setup, model and module imports, configuration loading,
helper utilities, CLI commands end to end, and syntax validation of every
Python file in the project.
"""

import ast
import importlib
from datetime import datetime
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Project root (conftest.py already puts it on sys.path)
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent


# ===========================================================================
# 1. Database setup
# ===========================================================================
class TestDatabaseSetup:
    """Verify that the database can be initialised with in-memory SQLite."""

    def test_init_db_creates_tables(self, test_db):
        from seo_monitor.database import get_engine
        from sqlalchemy import inspect

        table_names = inspect(get_engine()).get_table_names()
        for table in (
            "users", "projects", "project_settings", "keywords",
            "competitors", "serp_changes", "content_gaps", "reports",
        ):
            assert table in table_names, (
                "Missing table: " + table + ". Found: " + str(table_names)
            )

    def test_get_session_context_manager(self, test_db):
        from seo_monitor.database import get_session
        from sqlalchemy import text as sa_text

        with get_session() as session:
            row = session.execute(sa_text("SELECT 1")).fetchone()
            assert row[0] == 1

    def test_get_session_rolls_back_on_error(self, test_db):
        from seo_monitor.database import get_session
        from seo_monitor.models import User

        with pytest.raises(RuntimeError):
            with get_session() as session:
                session.add(User(email="x@example.com", password_hash="h"))
                session.flush()
                raise RuntimeError("boom")
        with get_session() as session:
            assert session.query(User).count() == 0

    def test_foreign_keys_enabled(self, test_db):
        from seo_monitor.database import get_session
        from sqlalchemy import text as sa_text

        with get_session() as session:
            assert session.execute(sa_text("PRAGMA foreign_keys")).scalar() == 1

    def test_reset_db(self, test_db):
        from seo_monitor.database import get_engine, reset_db
        from sqlalchemy import inspect

        reset_db()
        assert len(inspect(get_engine()).get_table_names()) > 0


# ===========================================================================
# 2. Model and module imports
# ===========================================================================
class TestImports:

    @pytest.mark.parametrize("model_name", [
        "User", "Project", "ProjectSettings", "Keyword",
        "Competitor", "SerpChange", "ContentGap", "Report",
    ])
    def test_model_importable(self, model_name):
        import seo_monitor.models as models_pkg
        assert hasattr(models_pkg, model_name), (
            "Model not found in seo_monitor.models: " + model_name
        )

    @pytest.mark.parametrize("module_path,names", [
        ("seo_monitor.store", ["RecordStore", "StoreError", "RecordNotFound"]),
        ("seo_monitor.auth", ["AuthService", "AuthError", "AuthUser"]),
        ("seo_monitor.wizard", ["ProjectWizard", "WizardStep", "WizardData", "SubmissionResult"]),
        ("seo_monitor.dashboard_data", ["list_projects", "project_stats", "load_project_detail"]),
        ("seo_monitor.config", ["load_config"]),
    ])
    def test_module_importable(self, module_path, names):
        mod = importlib.import_module(module_path)
        for name in names:
            assert hasattr(mod, name), name + " not found in " + module_path


# ===========================================================================
# 3. Configuration
# ===========================================================================
class TestConfig:

    def test_settings_file_parseable(self):
        import yaml
        with open(PROJECT_ROOT / "config" / "settings.yaml") as fh:
            config = yaml.safe_load(fh)
        for section in ("app", "database", "auth", "wizard"):
            assert section in config, "Missing config section: " + section
        assert config["app"]["name"] == "SEO Monitor"

    def test_missing_file_uses_defaults(self, tmp_path, monkeypatch):
        from seo_monitor.config import load_config
        monkeypatch.delenv("DATABASE_URL", raising=False)
        config = load_config(str(tmp_path / "nope.yaml"), str(tmp_path / ".env"))
        assert config["auth"]["min_password_length"] == 6
        assert config["wizard"]["keyword_slots"] == 3
        assert config["database"]["url"] is None

    def test_yaml_merges_over_defaults(self, tmp_path, monkeypatch):
        from seo_monitor.config import load_config
        monkeypatch.delenv("DATABASE_URL", raising=False)
        path = tmp_path / "settings.yaml"
        path.write_text("wizard:\n  keyword_slots: 5\n", encoding="utf-8")
        config = load_config(str(path), str(tmp_path / ".env"))
        assert config["wizard"]["keyword_slots"] == 5
        assert config["wizard"]["competitor_slots"] == 3

    def test_env_file_overrides_database_url(self, tmp_path, monkeypatch):
        from seo_monitor.config import load_config
        monkeypatch.delenv("DATABASE_URL", raising=False)
        env = tmp_path / ".env"
        env.write_text("DATABASE_URL=sqlite:///from-env.db\n", encoding="utf-8")
        config = load_config(str(tmp_path / "nope.yaml"), str(env))
        assert config["database"]["url"] == "sqlite:///from-env.db"
        monkeypatch.delenv("DATABASE_URL", raising=False)


# ===========================================================================
# 4. Helpers and validators
# ===========================================================================
class TestHelpers:

    @pytest.mark.parametrize("url,expected", [
        ("https://x.com", "x.com"),
        ("https://WWW.Example.org:8080/path?q=1", "www.example.org"),
        ("http://sub.domain.co.uk/", "sub.domain.co.uk"),
    ])
    def test_extract_hostname(self, url, expected):
        from seo_monitor.utils.helpers import extract_hostname
        assert extract_hostname(url) == expected

    @pytest.mark.parametrize("url", ["x.com", "", "https://"])
    def test_extract_hostname_invalid(self, url):
        from seo_monitor.utils.helpers import extract_hostname
        with pytest.raises(ValueError):
            extract_hostname(url)

    @pytest.mark.parametrize("url", ["localhost:3000", "mailto:team@x.com"])
    def test_extract_hostname_hostless_scheme(self, url):
        from seo_monitor.utils.helpers import extract_hostname
        assert extract_hostname(url) == ""

    def test_format_date(self):
        from seo_monitor.utils.helpers import format_date
        stamp = datetime(2026, 1, 5, 14, 30)
        assert format_date(stamp) == "Jan 5, 2026"
        assert format_date(stamp, long=True) == "January 5, 2026"
        assert format_date(None) == ""

    def test_pluralize(self):
        from seo_monitor.utils.helpers import pluralize
        assert pluralize(0, "project") == "0 projects"
        assert pluralize(1, "project") == "1 project"

    def test_validate_url(self):
        from seo_monitor.utils.validators import validate_url
        assert validate_url("https://acme.com") == (True, "")
        ok, message = validate_url("ftp://acme.com")
        assert not ok and "scheme" in message
        assert validate_url("acme.com") == (False, "Invalid URL: acme.com")

    @pytest.mark.parametrize("url,expected", [
        ("https://x.com", (True, "")),
        ("localhost:3000", (True, "")),
        ("x.com", (False, "Invalid URL: x.com")),
        ("https://", (False, "Invalid URL: https://")),
        ("   ", (False, "URL is required.")),
    ])
    def test_validate_competitor_url(self, url, expected):
        from seo_monitor.utils.validators import validate_competitor_url
        assert validate_competitor_url(url) == expected

    def test_competitor_hint_matches_submit_error(self, store, auth):
        from seo_monitor.utils.validators import validate_competitor_url
        from seo_monitor.wizard import ProjectWizard

        wizard = ProjectWizard(store, auth)
        wizard.data.name = "Acme"
        wizard.data.website_url = "https://acme.com"
        wizard.set_keyword(0, "keyword", "seo tools")
        wizard.set_competitor(0, "url", "x.com")
        while wizard.next():
            pass

        _, hint = validate_competitor_url("x.com")
        assert wizard.submit().error == hint

    @pytest.mark.parametrize("email,ok", [
        ("a@example.com", True),
        ("a@localhost", False),
        ("not-an-email", False),
        ("", False),
    ])
    def test_validate_email(self, email, ok):
        from seo_monitor.utils.validators import validate_email
        assert validate_email(email)[0] is ok


# ===========================================================================
# 5. CLI commands (via CliRunner)
# ===========================================================================
class TestCLICommands:

    def _get_runner_and_app(self):
        from typer.testing import CliRunner
        from seo_monitor.cli import app
        return CliRunner(), app

    def test_main_help(self):
        runner, cli_app = self._get_runner_and_app()
        result = runner.invoke(cli_app, ["--help"])
        assert result.exit_code == 0
        assert "SEO Monitor" in result.output

    @pytest.mark.parametrize("command", [
        "init-db", "signup", "projects", "create-project", "show", "dashboard",
    ])
    def test_command_help(self, command):
        runner, cli_app = self._get_runner_and_app()
        result = runner.invoke(cli_app, [command, "--help"])
        assert result.exit_code == 0, (
            "Command '" + command + "' --help failed: " + result.output
        )

    @pytest.fixture()
    def cli_env(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("DATABASE_URL", "sqlite:///" + str(tmp_path / "cli.db"))
        return tmp_path

    def test_end_to_end(self, cli_env):
        runner, cli_app = self._get_runner_and_app()
        creds = ["--email", "cli@example.com", "--password", "password1"]

        result = runner.invoke(cli_app, ["signup", *creds])
        assert result.exit_code == 0, result.output

        result = runner.invoke(cli_app, [
            "create-project", *creds,
            "--name", "Acme", "--url", "https://acme.com",
            "--keyword", "seo tools", "--competitor", "https://x.com",
            "--frequency", "daily", "--threshold", "5",
        ])
        assert result.exit_code == 0, result.output
        assert "created" in result.output

        result = runner.invoke(cli_app, ["projects", *creds])
        assert result.exit_code == 0, result.output
        assert "Acme" in result.output

        from seo_monitor.store import RecordStore
        store = RecordStore()
        [project] = store.select("projects")
        [competitor] = store.select("competitors")
        assert competitor["name"] == "x.com"
        assert store.select_one("project_settings", {"project_id": project["id"]})[
            "monitoring_frequency"
        ] == "daily"

        result = runner.invoke(cli_app, ["show", str(project["id"]), *creds])
        assert result.exit_code == 0, result.output
        assert "Acme" in result.output

    def test_create_project_blocked_on_incomplete_step(self, cli_env):
        runner, cli_app = self._get_runner_and_app()
        creds = ["--email", "cli@example.com", "--password", "password1"]
        runner.invoke(cli_app, ["signup", *creds])

        result = runner.invoke(cli_app, [
            "create-project", *creds, "--name", "Acme", "--url", "https://acme.com",
            "--competitor", "https://x.com",
        ])
        assert result.exit_code == 1
        assert "Keywords" in result.output

    def test_bad_credentials(self, cli_env):
        runner, cli_app = self._get_runner_and_app()
        result = runner.invoke(cli_app, [
            "projects", "--email", "ghost@example.com", "--password", "password1",
        ])
        assert result.exit_code == 1
        assert "Invalid login credentials" in result.output

    def test_show_missing_project(self, cli_env):
        runner, cli_app = self._get_runner_and_app()
        creds = ["--email", "cli@example.com", "--password", "password1"]
        runner.invoke(cli_app, ["signup", *creds])
        result = runner.invoke(cli_app, ["show", "99", *creds])
        assert result.exit_code == 1
        assert "Project 99 not found" in result.output

    def test_show_requires_sign_in(self, cli_env):
        runner, cli_app = self._get_runner_and_app()
        result = runner.invoke(cli_app, [
            "show", "1", "--email", "ghost@example.com", "--password", "password1",
        ])
        assert result.exit_code == 1
        assert "Invalid login credentials" in result.output

    def test_show_hides_other_users_project(self, cli_env):
        runner, cli_app = self._get_runner_and_app()
        owner = ["--email", "owner@example.com", "--password", "password1"]
        other = ["--email", "other@example.com", "--password", "password1"]
        runner.invoke(cli_app, ["signup", *owner])
        runner.invoke(cli_app, ["signup", *other])
        result = runner.invoke(cli_app, [
            "create-project", *owner,
            "--name", "Acme", "--url", "https://acme.com",
            "--keyword", "seo tools", "--competitor", "https://x.com",
        ])
        assert result.exit_code == 0, result.output

        from seo_monitor.store import RecordStore
        [project] = RecordStore().select("projects")

        result = runner.invoke(cli_app, ["show", str(project["id"]), *other])
        assert result.exit_code == 1
        assert "not found" in result.output


# ===========================================================================
# 6. All Python files syntax validation
# ===========================================================================
class TestAllPythonFilesSyntax:
    """Every .py file in seo_monitor/, dashboard/ and tests/ should pass ast.parse."""

    def _collect_python_files(self):
        files = []
        for directory in ("seo_monitor", "dashboard", "tests"):
            base = PROJECT_ROOT / directory
            if base.exists():
                for py_file in base.rglob("*.py"):
                    parts = py_file.parts
                    if "venv" in parts or "__pycache__" in parts:
                        continue
                    files.append(py_file)
        return sorted(files)

    def test_all_python_files_parse(self):
        py_files = self._collect_python_files()
        assert len(py_files) > 0, "No Python files found"
        errors = []
        for py_file in py_files:
            try:
                ast.parse(py_file.read_text(encoding="utf-8"))
            except SyntaxError as exc:
                errors.append(str(py_file.relative_to(PROJECT_ROOT)) + ": " + str(exc))
        if errors:
            pytest.fail("Python syntax errors:\n" + "\n".join(errors[:20]))

    def test_dashboard_pages_present(self):
        pages = sorted((PROJECT_ROOT / "dashboard" / "pages").glob("*.py"))
        names = {p.stem for p in pages}
        assert {"login", "projects", "new_project", "project_detail"} <= names
