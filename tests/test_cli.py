import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from lz4_playground import __version__
from lz4_playground.cli.main import app
from lz4_playground.history import HistoryStore
from lz4_playground.persistence import FileKeyValueStore
from lz4_playground.versions import VersionInfo, VersionRegistry

runner = CliRunner()


@pytest.fixture
def data_dir(patched_config_paths: Path) -> Path:
    return patched_config_paths / "data"


def _invoke(data_dir: Path, *args: str, **kwargs):
    return runner.invoke(app, ["--data-path", str(data_dir), *args], **kwargs)


def _json_line(output: str) -> dict:
    return json.loads(output.strip().splitlines()[-1])


def _history(data_dir: Path) -> HistoryStore:
    return HistoryStore(FileKeyValueStore(data_dir))


def test_version_option() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_compress_and_decompress_text(data_dir: Path) -> None:
    result = _invoke(data_dir, "process", "compress", "--text", "hello world", "--name", "greeting.txt", "--json")
    assert result.exit_code == 0, result.output
    payload = _json_line(result.output)
    assert payload["output_is_base64"] is True
    assert payload["file_name"] == "greeting.txt.lz4"
    assert payload["metrics"]["original_size"] == 11

    result = _invoke(data_dir, "process", "decompress", "--text", payload["output"], "--json")
    assert result.exit_code == 0, result.output
    back = _json_line(result.output)
    assert back["output"] == "hello world"

    entries = _history(data_dir).list()
    assert [e.mode.value for e in entries] == ["decompress", "compress"]


def test_compress_file_writes_output(data_dir: Path, tmp_path: Path) -> None:
    source = tmp_path / "input.txt"
    source.write_text("abc " * 100)
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    result = _invoke(data_dir, "process", "compress", "--file", str(source), "-o", str(out_dir))
    assert result.exit_code == 0, result.output
    assert (out_dir / "input.txt.lz4").exists()
    assert "Recorded as input.txt.lz4" in result.output


def test_compress_requires_one_input(data_dir: Path) -> None:
    result = _invoke(data_dir, "process", "compress")
    assert result.exit_code == 1
    assert "exactly ONE" in result.output


def test_decompress_invalid_input_fails(data_dir: Path) -> None:
    result = _invoke(data_dir, "process", "decompress", "--text", "aGVsbG8=")
    assert result.exit_code == 1
    assert "Error:" in result.output
    assert _history(data_dir).list() == []


def test_sample_decompress(data_dir: Path) -> None:
    result = _invoke(data_dir, "process", "decompress", "--sample", "csv-data", "--json")
    assert result.exit_code == 0, result.output
    payload = _json_line(result.output)
    assert payload["file_name"] == "employees.csv"
    assert payload["output"].startswith("id,name,department,salary")


def test_samples_listing(data_dir: Path) -> None:
    result = _invoke(data_dir, "process", "samples")
    assert result.exit_code == 0
    assert "lorem-ipsum" in result.output


def test_history_commands(data_dir: Path) -> None:
    result = _invoke(data_dir, "history", "list")
    assert "No history entries found." in result.output

    for name in ("a.txt", "b.txt"):
        assert _invoke(data_dir, "process", "compress", "--text", name, "--name", name).exit_code == 0

    result = _invoke(data_dir, "history", "list")
    assert result.exit_code == 0
    assert "No history entries found." not in result.output

    result = _invoke(data_dir, "history", "rename", "renamed.lz4", "--old-name", "a.txt.lz4")
    assert result.exit_code == 0
    assert [e.file_name for e in _history(data_dir).list()] == ["b.txt.lz4", "renamed.lz4"]

    result = _invoke(data_dir, "history", "stats")
    assert result.exit_code == 0
    assert "0.3.4" in result.output

    result = _invoke(data_dir, "history", "delete", "0", "--name", "renamed")
    assert result.exit_code == 0, result.output
    assert [e.file_name for e in _history(data_dir).list()] == ["b.txt.lz4"]

    result = _invoke(data_dir, "history", "delete", "5")
    assert result.exit_code == 1

    result = _invoke(data_dir, "history", "clear", "--yes")
    assert result.exit_code == 0
    assert _history(data_dir).list() == []


def test_share_create_and_open(data_dir: Path) -> None:
    result = _invoke(
        data_dir, "share", "create", "--text", "share me", "--name", "s.txt",
        "--base-url", "https://example.dev/",
    )
    assert result.exit_code == 0, result.output
    url = result.output.strip().splitlines()[0]
    assert url.startswith("https://example.dev/?state=")

    result = _invoke(data_dir, "share", "open", url, "--json")
    assert result.exit_code == 0, result.output
    payload = _json_line(result.output)
    assert payload["mode"] == "compress"
    assert payload["file_name"] == "s.txt"
    assert payload["result"]["file_name"] == "s.txt.lz4"


def test_share_create_large_input_warns(data_dir: Path) -> None:
    result = _invoke(data_dir, "share", "create", "--text", "x" * 3000)
    assert result.exit_code == 0
    assert "too large" in result.output


def test_share_open_invalid(data_dir: Path) -> None:
    result = _invoke(data_dir, "share", "open", "not-a-token")
    assert result.exit_code == 1
    assert "invalid" in result.output


def test_codec_list(data_dir: Path) -> None:
    result = _invoke(data_dir, "codec", "list")
    assert result.exit_code == 0
    assert "0.3.2" in result.output
    assert "0.3.4" in result.output


def test_codec_versions(data_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        VersionRegistry,
        "fetch_versions",
        lambda self, force_refresh=False: [VersionInfo("0.5.0", latest=True), VersionInfo("0.3.4")],
    )
    result = _invoke(data_dir, "codec", "versions")
    assert result.exit_code == 0
    assert "0.5.0" in result.output


def test_config_set_and_show(data_dir: Path) -> None:
    result = _invoke(data_dir, "config", "set", "history_page_size", "15")
    assert result.exit_code == 0, result.output

    result = _invoke(data_dir, "config", "show", "--key", "history_page_size")
    assert result.exit_code == 0
    assert "15" in result.output

    result = _invoke(data_dir, "config", "show", "--key", "bogus")
    assert result.exit_code == 1


def test_bad_codec_url_template_is_reported(data_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LZ4_PLAYGROUND_CODEC_URL_TEMPLATE", "https://codecs.example/codec.py")
    result = _invoke(data_dir, "process", "compress", "--text", "hi")
    assert result.exit_code == 1
    assert "placeholder" in result.output
