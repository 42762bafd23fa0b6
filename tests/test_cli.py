import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from conftest import FakeCatalog, online


SRC = Path(__file__).resolve().parent.parent / "src"
HASH = "abcd" * 10


def _run(*args):
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join([str(SRC), env.get("PYTHONPATH", "")])
    return subprocess.run(
        [sys.executable, "-m", "beatlist", *args],
        capture_output=True,
        text=True,
        env=env,
    )


@pytest.mark.parametrize("command", ["show", "convert", "env"])
def test_help_runs(command):
    result = _run(command, "--help")
    assert result.returncode == 0
    assert command in result.stdout


def test_help_command_runs():
    result = _run("help", "show")
    assert result.returncode == 0


@pytest.fixture
def offline_loader(monkeypatch):
    import cli.cli_playlist
    import cli.render
    from playlist.loader import PlaylistLoader

    catalog = FakeCatalog(by_hash={HASH: online(HASH, name="Offline Song")})
    # Keep table rows on one line
    monkeypatch.setattr(cli.render.RENDER, "width", 200)
    monkeypatch.setattr(
        cli.cli_playlist, "PlaylistLoader", lambda: PlaylistLoader(catalog, max_workers=2)
    )
    return catalog


def _legacy(path):
    path.write_text(
        json.dumps({"playlistTitle": "Old", "songs": [{"hash": HASH}, {"levelId": "x"}]}),
        encoding="utf-8",
    )
    return path


def test_show_lists_maps(tmp_path, capsys, offline_loader):
    from beatlist import main

    source = _legacy(tmp_path / "old.bplist")

    assert main(["show", "-q", str(source)]) == 0

    out = capsys.readouterr().out
    assert "Offline Song" in out
    assert "level-id references unsupported" in out
    assert "Resolved 2/2 maps" in out
    assert source.exists()


def test_show_prints_bracketed_text_literally(tmp_path, capsys, offline_loader):
    from beatlist import main

    offline_loader.by_hash[HASH] = online(HASH, name="Remix [/i]")
    source = tmp_path / "old.bplist"
    source.write_text(
        json.dumps(
            {
                "playlistTitle": "[bold]Title",
                "playlistAuthor": "[/red]",
                "playlistDescription": "Hard [/b] maps",
                "songs": [{"hash": HASH}],
            }
        ),
        encoding="utf-8",
    )

    assert main(["show", "-q", str(source)]) == 0

    out = capsys.readouterr().out
    assert "Hard [/b] maps" in out
    assert "[bold]Title" in out
    assert "Remix [/i]" in out


def test_show_missing_file_fails(tmp_path, offline_loader):
    from beatlist import main

    assert main(["show", "-q", str(tmp_path / "none.bplist")]) == 1


def test_convert_replaces_legacy_file(tmp_path, capsys, offline_loader):
    from beatlist import main

    source = _legacy(tmp_path / "old.bplist")

    assert main(["convert", "-q", str(source)]) == 0

    assert not source.exists()
    assert (tmp_path / "old.blist").exists()
    assert "Converted" in capsys.readouterr().out


def test_convert_binary_is_noop(tmp_path, capsys, offline_loader):
    from beatlist import main

    source = _legacy(tmp_path / "old.bplist")
    main(["convert", "-q", str(source)])
    capsys.readouterr()

    assert main(["convert", "-q", str(tmp_path / "old.blist")]) == 0
    assert "already a binary playlist" in capsys.readouterr().out


@pytest.fixture
def wide_render(monkeypatch):
    import cli.render

    monkeypatch.setattr(cli.render.RENDER, "width", 200)


def test_env_dump(capsys, wide_render):
    from beatlist import main

    assert main(["env", "dump"]) == 0

    out = capsys.readouterr().out
    for section in ("Logging", "Run", "Catalog", "Resolution"):
        assert section in out
    assert "beatsaver_api_url" in out
    assert "max_workers" in out


def test_env_dump_prints_values_literally(monkeypatch, capsys, wide_render):
    from beatlist import main

    monkeypatch.setenv("BEATSAVER_API_URL", "http://bs.local/[/b]")

    assert main(["env", "dump"]) == 0
    assert "http://bs.local/[/b]" in capsys.readouterr().out
