"""
Tests for the takeout-sync command line entry point.
"""
import json

from scripts import sync_takeout

SAVED_PLACES = json.dumps({
    "type": "FeatureCollection",
    "features": [{
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [139.7, 35.6]},
        "properties": {
            "google_maps_url": "https://maps.google.com/?cid=1",
            "location": {"name": "Cafe Tokyo", "address": "Tokyo"},
        },
    }],
})


def _takeout(tmp_path):
    folder = tmp_path / "Takeout" / "Maps (your places)"
    folder.mkdir(parents=True)
    (folder / "Saved Places.json").write_text(SAVED_PLACES, encoding="utf-8")
    (folder / "Reviews.json").write_text("{}", encoding="utf-8")
    return tmp_path / "Takeout"


def test_cli_imports_directory(tmp_path, capsys):
    takeout = _takeout(tmp_path)
    vault = tmp_path / "vault"

    code = sync_takeout.main([str(takeout), "--vault", str(vault), "--no-snapshot"])

    assert code == 0
    assert "Import complete: 1 created, 0 updated" in capsys.readouterr().out
    note = (vault / "Google Maps" / "Places" / "Cafe Tokyo.md").read_text(encoding="utf-8")
    assert "coordinates: [35.6, 139.7]" in note


def test_cli_second_run_updates(tmp_path, capsys):
    takeout = _takeout(tmp_path)
    args = [
        str(takeout),
        "--vault", str(tmp_path / "vault"),
        "--output-folder", "Places",
        "--snapshot-db", str(tmp_path / "snapshots.sqlite"),
    ]

    assert sync_takeout.main(args) == 0
    assert sync_takeout.main(args) == 0

    out = capsys.readouterr().out
    assert "Import complete: 0 created, 1 updated" in out
    assert (tmp_path / "vault" / "Places" / "Cafe Tokyo.md").exists()


def test_cli_without_coordinates(tmp_path):
    takeout = _takeout(tmp_path)
    vault = tmp_path / "vault"

    sync_takeout.main([str(takeout), "--vault", str(vault), "--no-snapshot", "--no-coordinates"])

    note = (vault / "Google Maps" / "Places" / "Cafe Tokyo.md").read_text(encoding="utf-8")
    assert "coordinates:" not in note


def test_cli_no_files(tmp_path):
    empty = tmp_path / "empty"
    empty.mkdir()
    assert sync_takeout.main([str(empty), "--no-snapshot"]) == 1


def test_cli_no_places(tmp_path, capsys):
    csv = tmp_path / "Empty.csv"
    csv.write_text("title,memo,url,tags,comment\n", encoding="utf-8")

    code = sync_takeout.main([str(csv), "--vault", str(tmp_path / "vault"), "--no-snapshot"])

    assert code == 1
    assert "No places found" in capsys.readouterr().out
