import json
from unittest import mock

from conftest import DATE, FakeCatalog, online


HASH = "abcd" * 10


def _loader(catalog=None):
    from playlist.loader import PlaylistLoader

    return PlaylistLoader(catalog or FakeCatalog(), max_workers=4)


def _write_legacy(path, doc):
    path.write_text(json.dumps(doc), encoding="utf-8")
    return path


def test_missing_file_returns_none(tmp_path):
    assert _loader().load(tmp_path / "nope.bplist") is None


def test_legacy_hash_is_resolved(tmp_path):
    entry = online(HASH, name="Song")
    catalog = FakeCatalog(by_hash={HASH: entry})
    path = _write_legacy(tmp_path / "old.bplist", {"songs": [{"hash": HASH.upper()}]})

    playlist = _loader(catalog).load(path)

    assert playlist is not None
    assert len(playlist.maps) == 1
    assert playlist.maps[0].online == entry
    assert playlist.maps[0].error is None
    assert playlist.path == path
    # Without force_convert the legacy file stays
    assert path.exists()


def test_malformed_legacy_returns_none(tmp_path):
    path = tmp_path / "broken.json"
    path.write_bytes(b'{"songs": [')

    assert _loader().load(path) is None


def test_corrupt_binary_returns_none(tmp_path):
    import config

    path = tmp_path / "broken.blist"
    path.write_bytes(config.BLISTER_MAGIC + b"garbage")

    assert _loader().load(path) is None


def test_load_reports_progress(tmp_path):
    from playlist.progress import Progress, ProgressStatus

    path = _write_legacy(
        tmp_path / "p.json",
        {"songs": [{"hash": HASH}, {"key": "ff"}, {"levelId": "x"}]},
    )
    progress = Progress()

    _loader().load(path, progress=progress)

    assert progress.status is ProgressStatus.COMPLETED
    assert progress.done == progress.total == 3


def test_save_writes_only_resolved_maps(tmp_path):
    from playlist.blister import deserialize
    from playlist.models import BeatmapType, LoadedMap, LoadedPlaylist

    playlist = LoadedPlaylist(
        title="t",
        author="a",
        maps=[LoadedMap(DATE, online=online("AB12" * 10)), LoadedMap(DATE)],
    )
    path = tmp_path / "out.blist"

    assert _loader().save(path, playlist) is True

    canonical = deserialize(path.read_bytes())
    assert len(canonical.maps) == 1
    assert canonical.maps[0].type is BeatmapType.HASH
    assert canonical.maps[0].hash.hex() == "ab12" * 10
    assert not list(tmp_path.glob(".*.tmp"))


def test_save_failure_returns_false_and_keeps_existing_file(tmp_path):
    from playlist.models import LoadedMap, LoadedPlaylist

    path = tmp_path / "out.blist"
    path.write_bytes(b"previous")
    playlist = LoadedPlaylist(title="t", author="a", maps=[LoadedMap(DATE, online=online("zz"))])

    assert _loader().save(path, playlist) is False
    assert path.read_bytes() == b"previous"


def test_save_into_missing_directory_returns_false(tmp_path):
    from playlist.models import LoadedPlaylist

    path = tmp_path / "missing" / "out.blist"

    assert _loader().save(path, LoadedPlaylist(title="t", author="a")) is False
    assert not path.exists()


def test_round_trip_preserves_metadata_and_hashes(tmp_path):
    from playlist.models import LoadedMap, LoadedPlaylist

    hashes = [f"{i:040x}" for i in range(1, 4)]
    entries = {h: online(h) for h in hashes}
    original = LoadedPlaylist(
        title="Round",
        author="trip",
        description="desc",
        cover=b"cover",
        maps=[LoadedMap(DATE, online=entries[h]) for h in hashes],
    )
    loader = _loader(FakeCatalog(by_hash=entries))
    path = tmp_path / "rt.blist"

    assert loader.save(path, original)
    reloaded = loader.load(path)

    assert (reloaded.title, reloaded.author, reloaded.description, reloaded.cover) == (
        "Round",
        "trip",
        "desc",
        b"cover",
    )
    assert [m.online.hash for m in reloaded.maps] == hashes
    assert [m.date_added for m in reloaded.maps] == [DATE] * 3


def test_legacy_dates_survive_save_and_reload(tmp_path):
    catalog = FakeCatalog(by_hash={HASH: online(HASH)})
    loader = _loader(catalog)
    source = _write_legacy(tmp_path / "old.bplist", {"songs": [{"hash": HASH}, {"hash": HASH}]})

    first = loader.load(source)
    target = tmp_path / "old.blist"
    assert loader.save(target, first)
    second = loader.load(target)

    assert [m.date_added for m in second.maps] == [m.date_added for m in first.maps]


def test_forced_conversion_replaces_legacy_file(tmp_path):
    from playlist.blister import is_legacy_format

    catalog = FakeCatalog(by_hash={HASH: online(HASH)})
    source = _write_legacy(tmp_path / "old.bplist", {"playlistTitle": "Old", "songs": [{"hash": HASH}]})

    playlist = _loader(catalog).load(source, force_convert=True)

    target = tmp_path / "old.blist"
    assert not source.exists()
    assert target.exists()
    assert is_legacy_format(target.read_bytes()) is False
    assert playlist.path == target
    assert sorted(p.name for p in tmp_path.iterdir()) == ["old.blist"]


def test_forced_conversion_is_ignored_for_binary_files(tmp_path):
    from playlist.models import LoadedPlaylist

    loader = _loader()
    path = tmp_path / "new.blist"
    loader.save(path, LoadedPlaylist(title="t", author="a"))

    with mock.patch.object(loader, "migrate_playlist_file") as migrate:
        playlist = loader.load(path, force_convert=True)

    migrate.assert_not_called()
    assert playlist.path == path


def test_failed_conversion_keeps_legacy_file(tmp_path):
    from playlist.models import MigrationStatus

    loader = _loader()
    source = _write_legacy(tmp_path / "old.json", {"songs": []})
    playlist = loader.load(source)

    with mock.patch.object(loader, "save", return_value=False):
        result = loader.migrate_playlist_file(source, playlist)

    assert result.status is MigrationStatus.SAVE_FAILED
    assert not result.ok
    assert source.exists()
    assert result.target == tmp_path / "old.blist"


def test_conversion_of_legacy_file_with_binary_extension(tmp_path):
    from playlist.blister import is_legacy_format
    from playlist.models import MigrationStatus

    loader = _loader()
    source = _write_legacy(tmp_path / "odd.blist", {"playlistTitle": "odd"})
    playlist = loader.load(source)

    result = loader.migrate_playlist_file(source, playlist)

    assert result.status is MigrationStatus.MIGRATED
    assert source.exists()
    assert is_legacy_format(source.read_bytes()) is False


def test_converted_playlist_path():
    from pathlib import Path

    from playlist.loader import converted_playlist_path

    assert converted_playlist_path("/x/y/My List.bplist") == Path("/x/y/My List.blist")
    assert converted_playlist_path("list.json") == Path("list.blist")
