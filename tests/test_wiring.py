from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from pipeline.wiring import build_clients, configure_logging, load_config, load_config_file, load_env
from tools.dtrack import DTrackConfigError

YAML_CONFIG = """\
instance_a:
  url: https://file-a.example
  api_key: file-key-a
instance_b:
  url: https://file-b.example
  api_key: file-key-b
concurrency: 3
out: from-file
timeout: 12
page_size: 50
"""


def _write_config(tmp_path: Path, text: str = YAML_CONFIG) -> Path:
    p = tmp_path / "compare.yaml"
    p.write_text(text, encoding="utf-8")
    return p


def test_defaults_apply_when_nothing_is_set() -> None:
    cfg = load_config({}, environ={})

    assert cfg.concurrency == 5
    assert cfg.out == Path(".")
    assert cfg.timeout == 30.0
    assert cfg.page_size == 100
    assert cfg.url_a == ""


def test_config_file_is_flattened(tmp_path: Path) -> None:
    flat = load_config_file(_write_config(tmp_path))

    assert flat == {
        "url_a": "https://file-a.example",
        "apikey_a": "file-key-a",
        "url_b": "https://file-b.example",
        "apikey_b": "file-key-b",
        "concurrency": 3,
        "out": "from-file",
        "timeout": 12,
        "page_size": 50,
    }


def test_precedence_cli_over_env_over_file(tmp_path: Path) -> None:
    env = {"DTRACK_URL_A": "https://env-a.example", "DTRACK_COMPARE_CONCURRENCY": "8", "DTRACK_APIKEY_B": ""}

    cfg = load_config(
        {"url_a": None, "concurrency": 2, "out": None},
        config_path=_write_config(tmp_path),
        environ=env,
    )

    assert cfg.url_a == "https://env-a.example"
    assert cfg.concurrency == 2
    assert cfg.apikey_b == "file-key-b"
    assert cfg.out == Path("from-file")
    assert cfg.timeout == 12.0
    assert cfg.page_size == 50


def test_instance_configs_carry_transport_settings(tmp_path: Path) -> None:
    cfg = load_config({}, config_path=_write_config(tmp_path), environ={})

    a = cfg.instance_a()
    assert (a.base_url, a.api_key, a.timeout, a.page_size) == ("https://file-a.example", "file-key-a", 12.0, 50)
    assert cfg.instance_b().base_url == "https://file-b.example"


@pytest.mark.parametrize(
    "cli",
    [
        {"concurrency": 0},
        {"timeout": 0},
        {"page_size": 0},
        {"concurrency": "many"},
    ],
)
def test_invalid_values_raise(cli) -> None:
    with pytest.raises(ValueError):
        load_config(cli, environ={})


def test_non_mapping_yaml_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        load_config_file(_write_config(tmp_path, "- just\n- a list\n"))


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config_file(tmp_path / "nope.yaml")


def test_dotenv_does_not_override_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    dotenv = tmp_path / ".env"
    dotenv.write_text("DTRACK_URL_A=https://dotenv-a.example\nDTRACK_URL_B=https://dotenv-b.example\n", encoding="utf-8")
    monkeypatch.setenv("DTRACK_URL_A", "https://shell-a.example")
    # registered first so teardown removes the value load_env adds
    monkeypatch.setenv("DTRACK_URL_B", "placeholder")
    monkeypatch.delenv("DTRACK_URL_B")

    load_env(dotenv)

    assert os.environ["DTRACK_URL_A"] == "https://shell-a.example"
    assert os.environ["DTRACK_URL_B"] == "https://dotenv-b.example"


def test_build_clients_fails_on_bad_endpoint() -> None:
    cfg = load_config({"url_a": "https://a.example", "apikey_a": "k", "url_b": "not a url", "apikey_b": "k"}, environ={})

    with pytest.raises(DTrackConfigError):
        build_clients(cfg)


def test_configure_logging_rejects_unknown_level() -> None:
    with pytest.raises(ValueError):
        configure_logging("CHATTY")


def test_configure_logging_sets_root_level() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging("warning")

        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
    finally:
        for h in root.handlers[:]:
            root.removeHandler(h)
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)


def test_malformed_yaml_is_a_value_error(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        load_config_file(_write_config(tmp_path, "instance_a: [unclosed\n"))
