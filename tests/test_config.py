from pathlib import Path

import pytest
import yaml

from lz4_playground import config as cfg


def test_defaults(patched_config_paths: Path) -> None:
    conf = cfg.Config()
    val, src = conf.get_with_source("default_codec_version")
    assert val == cfg.DEFAULT_CONFIG["default_codec_version"]
    assert src == cfg.SOURCE_DEFAULT
    assert conf.get("data_path") == str(Path(cfg.DEFAULT_CONFIG["data_path"]).expanduser())


def test_user_and_local_files(patched_config_paths: Path) -> None:
    user_file = patched_config_paths / "user" / "config.yaml"
    user_file.parent.mkdir(parents=True)
    user_file.write_text(yaml.safe_dump({"history_page_size": 25, "registry_url": "https://u"}))
    (patched_config_paths / ".lz4playground.yaml").write_text(
        yaml.safe_dump({"registry_url": "https://local", "unknown_key": 1})
    )

    conf = cfg.Config()
    assert conf.get("history_page_size") == 25
    assert conf.get_with_source("history_page_size")[1] == cfg.SOURCE_USER_CONFIG
    assert conf.get("registry_url") == "https://local"
    assert conf.get_with_source("registry_url")[1] == cfg.SOURCE_LOCAL_CONFIG
    assert "unknown_key" not in conf.get_all_with_sources()


def test_env_vars_override_files(
    patched_config_paths: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (patched_config_paths / ".lz4playground.yaml").write_text(
        yaml.safe_dump({"history_page_size": 5})
    )
    monkeypatch.setenv("LZ4_PLAYGROUND_HISTORY_PAGE_SIZE", "42")
    monkeypatch.setenv("LZ4_PLAYGROUND_VERBOSE", "yes")

    conf = cfg.Config()
    assert conf.get("history_page_size") == 42
    assert conf.get("verbose") is True
    assert "LZ4_PLAYGROUND_HISTORY_PAGE_SIZE" in conf.get_with_source("history_page_size")[1]


def test_invalid_file_value_is_ignored(
    patched_config_paths: Path, capsys: pytest.CaptureFixture
) -> None:
    (patched_config_paths / ".lz4playground.yaml").write_text(
        yaml.safe_dump({"history_page_size": "many"})
    )
    conf = cfg.Config()
    assert conf.get("history_page_size") == cfg.DEFAULT_CONFIG["history_page_size"]
    assert "ignoring 'history_page_size'" in capsys.readouterr().err


def test_set_writes_user_file(patched_config_paths: Path) -> None:
    conf = cfg.Config()
    assert conf.set("history_page_size", "30")
    assert conf.get("history_page_size") == 30
    saved = yaml.safe_load(cfg.USER_CONFIG_PATH.read_text())
    assert saved == {"history_page_size": 30}

    assert cfg.Config().get_with_source("history_page_size") == (30, cfg.SOURCE_USER_CONFIG)


def test_set_rejects_bad_input(patched_config_paths: Path, capsys: pytest.CaptureFixture) -> None:
    conf = cfg.Config()
    assert not conf.set("no_such_key", "x")
    assert not conf.set("history_page_size", "ten")
    err = capsys.readouterr().err
    assert "not a recognized setting" in err
    assert "Invalid value" in err
    assert not cfg.USER_CONFIG_PATH.exists()


def test_update_from_cli(patched_config_paths: Path) -> None:
    conf = cfg.Config()
    conf.update_from_cli("default_codec_version", None)
    assert conf.get_with_source("default_codec_version")[1] == cfg.SOURCE_DEFAULT
    conf.update_from_cli("default_codec_version", "0.3.2")
    assert conf.get_with_source("default_codec_version") == ("0.3.2", cfg.SOURCE_CLI)
