"""Unit tests for the command line entry point"""

import pytest
import responses

from fake_backend import FakeConsoleBackend
from main import DEFAULT_API_URL, build_parser, main, setup_env

API_URL = "https://api.example.com/api"
ENV_VARS = ("API_URL", "API_TIMEOUT", "API_RETRIES", "API_BACKOFF", "SSL_CERT")


@pytest.fixture(name="clean_env")
def fixture_clean_env(monkeypatch, tmp_path):
    """Empty configuration, restored after the test even if .env sets it"""
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


@pytest.fixture(name="backend")
def fixture_backend(clean_env):
    """Fake backend with three consoles, reachable through API_URL"""
    clean_env.setenv("API_URL", API_URL + "/")
    backend = FakeConsoleBackend(API_URL)
    backend.seed(["Lynx", "Atari", "Jaguar"], inactive=["Jaguar"])
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        backend.register(rsps)
        yield backend


def test_setup_env_defaults(clean_env):  # pylint: disable=unused-argument
    """
    Test the settings without any configuration
    """
    settings = setup_env()

    assert settings.api_url == DEFAULT_API_URL
    assert settings.timeout is None
    assert settings.retries == 0
    assert settings.backoff_factor == 0.0
    assert settings.ssl_cert is True


def test_setup_env_reads_dotenv(clean_env, tmp_path):
    """
    Test that the .env file of the working directory is loaded
    """
    (tmp_path / ".env").write_text(
        "API_URL=http://inventory.local/api/\n"
        "API_TIMEOUT=2.5\n"
        "API_RETRIES=3\n"
        "SSL_CERT=false\n",
        encoding="utf-8",
    )
    clean_env.setenv("API_BACKOFF", "0.2")

    settings = setup_env()

    assert settings.api_url == "http://inventory.local/api"
    assert settings.timeout == 2.5
    assert settings.retries == 3
    assert settings.backoff_factor == 0.2
    assert settings.ssl_cert is False


@pytest.mark.parametrize(
    "name, value",
    [("API_TIMEOUT", "soon"), ("API_RETRIES", "2.5"), ("API_RETRIES", "-1")],
)
def test_setup_env_rejects_invalid_numbers(clean_env, name, value):
    """
    Test that invalid numbers are reported with their variable name
    """
    clean_env.setenv(name, value)

    with pytest.raises(ValueError, match=name):
        setup_env()


def test_parser_status_flags_are_exclusive():
    """
    Test that --active and --include-inactive cannot be combined
    """
    parser = build_parser()

    assert parser.parse_args(["list", "--inactive"]).is_active is False
    assert parser.parse_args(["list"]).is_active is None
    with pytest.raises(SystemExit):
        parser.parse_args(["list", "--active", "--include-inactive"])
    with pytest.raises(SystemExit):
        parser.parse_args(["list", "--page", "0"])


def test_main_list(backend, capsys):  # pylint: disable=unused-argument
    """
    Test the list command output
    """
    assert main(["list", "--sort-by", "name", "--include-inactive"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert "Atari" in lines[0]
    assert "Jaguar" in lines[1] and lines[1].endswith("inactive")
    assert lines[-1] == "Page 1/1 - 3 consoles in total"


def test_main_create_and_deactivate(backend, capsys):
    """
    Test the write commands
    """
    create_args = [
        "create",
        "--name",
        "GameBox",
        "--manufacturer",
        "Acme",
        "--serial-number",
        "SN9",
    ]
    assert main(create_args) == 0
    assert main(["deactivate", "4"]) == 0
    assert main(["update", "4", "--name", "GameBox Pro"]) == 0

    out = capsys.readouterr().out
    assert "GameBox" in out
    assert backend.records[4]["isActive"] == 0
    assert backend.records[4]["name"] == "GameBox Pro"


def test_main_reports_service_errors(
    backend, capsys
):  # pylint: disable=unused-argument
    """
    Test that a failed operation prints the message and exits with 1
    """
    assert main(["get", "42"]) == 1
    assert main(["delete", "1"]) == 0
    assert main(["delete", "1"]) == 1

    assert "Console not found" in capsys.readouterr().err


def test_main_reports_invalid_configuration(clean_env):
    """
    Test that a broken configuration exits with 2 before any request
    """
    clean_env.setenv("API_TIMEOUT", "never")

    assert main(["list"]) == 2
