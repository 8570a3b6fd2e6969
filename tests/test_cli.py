import json

import pytest

from planner_calendar.cli import main

from .conftest import write_json


def run(capsys, *argv):
    code = main(list(argv))
    out, err = capsys.readouterr()
    return code, out, err


def test_occurrences(capsys):
    code, out, _ = run(capsys, "occurrences", "--start", "2025-09-01T10:30", "--duration", "90",
                       "--weekdays", "1,4", "--count", "3")
    assert code == 0
    assert json.loads(out) == [
        {"start": "2025-09-01T10:30:00", "end": "2025-09-01T12:00:00"},
        {"start": "2025-09-04T10:30:00", "end": "2025-09-04T12:00:00"},
        {"start": "2025-09-08T10:30:00", "end": "2025-09-08T12:00:00"},
    ]


def test_occurrences_until(capsys):
    code, out, _ = run(capsys, "occurrences", "--start", "2025-09-03T08:00:00.000Z", "--duration", "50",
                       "--interval", "2", "--until", "2025-10-01")
    assert code == 0
    assert [o["start"] for o in json.loads(out)] == [
        "2025-09-03T08:00:00", "2025-09-17T08:00:00", "2025-10-01T08:00:00",
    ]


def test_occurrences_bad_until(capsys):
    code, out, err = run(capsys, "occurrences", "--start", "2025-09-01T10:30", "--duration", "90",
                         "--until", "next friday")
    assert code == 2
    assert out == ""
    assert err.startswith("Error:")


@pytest.mark.parametrize("extra", [
    ["--weekdays", "1,9", "--count", "3"],
    ["--weekdays", "mon", "--count", "3"],
    ["--count", "3", "--until", "2025-10-01"],
    [],
])
def test_occurrences_argument_errors(capsys, extra):
    with pytest.raises(SystemExit) as exc:
        main(["occurrences", "--start", "2025-09-01T10:30", "--duration", "90"] + extra)
    assert exc.value.code == 2


def test_holidays_offline(capsys, tmp_path):
    write_json(tmp_path / "holidays-IQ-2025.json", [{"date": "2025-01-06", "name": "Army Day", "localName": "Army Day"}])
    code, out, _ = run(capsys, "holidays", "--year", "2025", "--country", "iq", "--cache-dir", str(tmp_path), "--offline")
    assert code == 0
    rows = json.loads(out)
    assert [r["date"] for r in rows] == [
        "2025-01-06", "2025-03-21", "2025-03-31", "2025-04-20", "2025-06-07", "2025-10-03", "2025-12-25",
    ]


def test_holidays_bad_region(capsys, tmp_path):
    code, _, err = run(capsys, "holidays", "--year", "2025", "--country", "Iraq", "--cache-dir", str(tmp_path),
                       "--offline")
    assert code == 2
    assert "region" in err


def test_eid_lookup_writes_file(capsys, tmp_path):
    code, out, _ = run(capsys, "eid-lookup", "--start-year", "2025", "--end-year", "2026", "--cache-dir", str(tmp_path))
    assert code == 0
    assert "2 years" in out
    records = json.loads((tmp_path / "holiday-eid-lookup.json").read_text(encoding="utf-8"))
    assert records == [
        {"year": 2025, "eidFitr": "2025-03-31", "eidAdha": "2025-06-07"},
        {"year": 2026, "eidFitr": "2026-03-20", "eidAdha": "2026-05-27"},
    ]


def test_eid_lookup_dry_run(capsys, tmp_path):
    code, out, _ = run(capsys, "eid-lookup", "--start-year", "2025", "--end-year", "2025", "--cache-dir", str(tmp_path),
                       "--dry-run")
    assert code == 0
    assert json.loads(out) == [{"year": 2025, "eidFitr": "2025-03-31", "eidAdha": "2025-06-07"}]
    assert not (tmp_path / "holiday-eid-lookup.json").exists()


def test_eid_lookup_reversed_years(capsys, tmp_path):
    code, _, err = run(capsys, "eid-lookup", "--start-year", "2030", "--end-year", "2025", "--cache-dir", str(tmp_path))
    assert code == 2
    assert "--start-year" in err


def test_academic_extract(capsys, tmp_path):
    source = tmp_path / "calendar.txt"
    source.write_text("First Day of Classes: September 14, 2025 / Sunday\n21 March 2026 - Spring Break\n",
                      encoding="utf-8")
    code, out, _ = run(capsys, "academic-extract", str(source), "--label", "2025-2026", "--cache-dir", str(tmp_path))
    assert code == 0
    written = tmp_path / "holidays-academic-2025-2026-normalized.json"
    assert str(written) in out
    assert [r["name"] for r in json.loads(written.read_text(encoding="utf-8"))] == [
        "First Day of Classes", "Spring Break",
    ]


def test_academic_extract_dry_run(capsys, tmp_path):
    source = tmp_path / "calendar.txt"
    source.write_text("First Day of Classes: September 14, 2025 / Sunday\n21 March 2026 - Spring Break\n",
                      encoding="utf-8")
    code, out, _ = run(capsys, "academic-extract", str(source), "--label", "2025-2026", "--years", "2025",
                       "--cache-dir", str(tmp_path), "--dry-run")
    assert code == 0
    assert out.splitlines() == ["[DRY RUN] 2025-09-14: First Day of Classes"]
    assert not list(tmp_path.glob("holidays-academic-*"))


def test_academic_extract_missing_source(capsys, tmp_path):
    code, _, err = run(capsys, "academic-extract", str(tmp_path / "missing.txt"), "--label", "x",
                       "--cache-dir", str(tmp_path))
    assert code == 1
    assert "could not read" in err
