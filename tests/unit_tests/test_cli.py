import requests
from click.testing import CliRunner

from portfolio_api import cli as cli_module
from portfolio_api.cli import cli


class FakeResponse:
    def __init__(self, status_code, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


def test_check_endpoints_all_pass(monkeypatch):
    requested = []

    def fake_get(url, timeout):
        requested.append(url)
        return FakeResponse(200, payload=[])

    monkeypatch.setattr(cli_module.requests, "get", fake_get)

    result = CliRunner().invoke(cli, ["check-endpoints", "--base-url", "http://api.test/"])

    assert result.exit_code == 0
    assert requested == ["http://api.test/projects", "http://api.test/achievements"]
    assert "[PASS] GET /projects - Status: 200" in result.output
    assert "[PASS] GET /achievements - Valid JSON received." in result.output


def test_check_endpoints_warns_on_invalid_json(monkeypatch):
    monkeypatch.setattr(cli_module.requests, "get", lambda url, timeout: FakeResponse(502, text="<html>"))

    result = CliRunner().invoke(cli, ["check-endpoints", "--base-url", "http://api.test"])

    assert result.exit_code == 0
    assert "[PASS] GET /projects - Status: 502" in result.output
    assert "[WARN] GET /projects - Invalid JSON." in result.output


def test_check_endpoints_reports_connection_errors(monkeypatch):
    def refuse(url, timeout):
        raise requests.exceptions.ConnectionError("Connection refused")

    monkeypatch.setattr(cli_module.requests, "get", refuse)

    result = CliRunner().invoke(cli, ["check-endpoints", "--base-url", "http://localhost:1"])

    assert result.exit_code == 1
    assert "[FAIL] GET /projects - Error: Connection refused" in result.output
    assert "[FAIL] GET /achievements - Error: Connection refused" in result.output


def test_show_config_masks_secrets(monkeypatch):
    monkeypatch.setenv("ADMIN_PASSWORD", "super-secret")
    cli_module.get_settings.cache_clear()
    try:
        result = CliRunner().invoke(cli, ["show-config"])
    finally:
        cli_module.get_settings.cache_clear()

    assert result.exit_code == 0
    assert "admin_password: ********" in result.output
    assert "super-secret" not in result.output
