"""Unit tests for the catbreeds CLI commands."""

import json
import logging
import os
from unittest.mock import patch

import httpx
import pytest
from click.testing import CliRunner

from catbreeds.cli.main import cli
from catbreeds.session import CatalogSession


def _breed(breed_id: str, name: str) -> dict:
    return {"id": breed_id, "name": name, "origin": "Somewhere", "temperament": "Calm"}


PAGES = {
    "0": [_breed("abys", "Abyssinian"), _breed("aege", "Aegean")],
    "1": [_breed("bali", "Balinese")],
}


def catalog_handler(request: httpx.Request) -> httpx.Response:
    if request.headers.get("x-api-key") != "test-key":
        return httpx.Response(401, json={"message": "unauthorized"})
    if request.url.path.endswith("/breeds/search"):
        query = request.url.params["q"].lower()
        matches = [b for page in PAGES.values() for b in page if query in b["name"].lower()]
        return httpx.Response(200, json=matches)
    return httpx.Response(200, json=PAGES.get(request.url.params["page"], []))


def server_error_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(500, json={"message": "down"})


def _session_factory(handler):
    def factory(config):
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return CatalogSession(config, client=client)

    return factory


@pytest.fixture
def cli_runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run every command from an empty directory with only a test key set."""
    monkeypatch.chdir(tmp_path)
    logger = logging.getLogger("catbreeds")
    before = list(logger.handlers)
    with patch.dict(os.environ, {"CAT_API_KEY": "test-key"}, clear=True):
        yield
    for handler in list(logger.handlers):
        if handler not in before:
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


def _invoke(cli_runner, args, handler=catalog_handler):
    with patch("catbreeds.cli.main.CatalogSession", _session_factory(handler)):
        return cli_runner.invoke(cli, args)


class TestListCommand:
    """Tests for `catbreeds list`."""

    def test_lists_first_page(self, cli_runner):
        result = _invoke(cli_runner, ["list"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["success"] is True
        assert data["error"] is None
        assert [b["id"] for b in data["data"]["items"]] == ["abys", "aege"]
        assert data["data"]["page"] == 0
        assert data["data"]["has_reached_max"] is False

    def test_multiple_pages_until_exhausted(self, cli_runner):
        result = _invoke(cli_runner, ["list", "--pages", "5"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)["data"]
        assert [b["id"] for b in data["items"]] == ["abys", "aege", "bali"]
        assert data["count"] == 3
        assert data["page"] == 2
        assert data["has_reached_max"] is True

    def test_rejects_zero_pages(self, cli_runner):
        result = _invoke(cli_runner, ["list", "--pages", "0"])
        assert result.exit_code == 2

    def test_server_error_reports_failure(self, cli_runner):
        result = _invoke(cli_runner, ["list"], handler=server_error_handler)

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["success"] is False
        assert data["error"] == "Failed to load breeds: 500"
        assert data["data"]["error_code"] == "REQUEST_FAILED"

    def test_bad_key_reports_unauthorized(self, cli_runner):
        with patch.dict(os.environ, {"CAT_API_KEY": "wrong"}):
            result = _invoke(cli_runner, ["list"])

        assert result.exit_code == 1
        assert json.loads(result.stdout)["error"] == "Unauthorized: Invalid API Key"


class TestSearchCommand:
    """Tests for `catbreeds search`."""

    def test_search_matches(self, cli_runner):
        result = _invoke(cli_runner, ["search", "bal"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)["data"]
        assert data["query"] == "bal"
        assert [b["name"] for b in data["items"]] == ["Balinese"]
        assert data["count"] == 1

    def test_search_without_matches(self, cli_runner):
        result = _invoke(cli_runner, ["search", "zzz"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["success"] is True
        assert data["data"]["items"] == []

    def test_search_server_error(self, cli_runner):
        result = _invoke(cli_runner, ["search", "bal"], handler=server_error_handler)

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["error"] == "Failed to search breeds: 500"
        assert data["data"]["details"] == {"query": "bal"}


class TestConfiguration:
    """Tests for configuration handling at the CLI boundary."""

    def test_missing_api_key(self, cli_runner):
        with patch.dict(os.environ, {}, clear=True):
            result = cli_runner.invoke(cli, ["list"])

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["success"] is False
        assert data["data"]["error_code"] == "CONFIGURATION_ERROR"
        assert "CAT_API_KEY" in data["error"]
        assert "remediation" in data["data"]

    def test_out_of_range_retries_report_configuration_error(self, cli_runner):
        with patch.dict(os.environ, {"CATBREEDS_MAX_RETRIES": "0"}):
            result = cli_runner.invoke(cli, ["list"])

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["success"] is False
        assert data["data"]["error_code"] == "CONFIGURATION_ERROR"
        assert data["error"] == "max_retries must be >= 1, got 0"

    def test_out_of_range_page_size_in_toml(self, cli_runner, tmp_path):
        config_file = tmp_path / "bad.toml"
        config_file.write_text("[api]\npage_size = 0\n")

        result = cli_runner.invoke(cli, ["--config", str(config_file), "search", "bal"])

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["data"]["error_code"] == "CONFIGURATION_ERROR"
        assert "page_size" in data["error"]

    def test_config_option(self, cli_runner, tmp_path):
        config_file = tmp_path / "alt.toml"
        config_file.write_text('[api]\nkey = "test-key"\npage_size = 2\n')
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.params["limit"])
            return catalog_handler(request)

        with patch.dict(os.environ, {}, clear=True):
            result = _invoke(cli_runner, ["--config", str(config_file), "list"], handler=handler)

        assert result.exit_code == 0
        assert seen == ["2"]

    def test_version(self, cli_runner):
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "catbreeds" in result.output
