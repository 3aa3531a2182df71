from __future__ import annotations

from pathlib import Path

import pytest

from expense_core.csv_codec import HEADER
from expense_tracker.cli import main


def run(data_dir: Path, *argv: str) -> int:
    return main(["--data-dir", str(data_dir), *argv])


def test_add_and_list(data_dir: Path, capsys: pytest.CaptureFixture[str]):
    assert run(data_dir, "add", "12.5", "Food", "--date", "2024-03-01", "--note", "lunch, cafe") == 0
    assert run(data_dir, "add", "3", "Transport", "--date", "2024-03-02") == 0
    capsys.readouterr()

    assert run(data_dir, "list") == 0

    out = capsys.readouterr().out.splitlines()
    assert "Transport" in out[1]
    assert "lunch, cafe" in out[2]
    assert out[-1] == "Found 2 expenses (total 15.50)"


def test_list_empty(data_dir: Path, capsys: pytest.CaptureFixture[str]):
    assert run(data_dir, "list") == 0
    assert capsys.readouterr().out.strip() == "No expenses recorded."


def test_total(data_dir: Path, capsys: pytest.CaptureFixture[str]):
    run(data_dir, "add", "10.00", "Food", "--date", "2024-03-01")
    run(data_dir, "add", "20.50", "Food", "--date", "2024-03-01")
    run(data_dir, "add", "0", "Food", "--date", "2024-03-01")
    capsys.readouterr()

    assert run(data_dir, "total") == 0
    assert capsys.readouterr().out.strip() == "Total: 30.50"


def test_delete_uses_sorted_display_index(data_dir: Path, capsys: pytest.CaptureFixture[str]):
    run(data_dir, "add", "1", "Food", "--date", "2024-03-01")
    run(data_dir, "add", "100", "Bills", "--date", "2024-03-02")
    capsys.readouterr()

    assert run(data_dir, "delete", "0", "--sort", "amount", "--descending") == 0
    out = capsys.readouterr().out
    assert "Bills 100.00" in out
    assert "Total: 1.00" in out


def test_delete_out_of_range(data_dir: Path, capsys: pytest.CaptureFixture[str]):
    run(data_dir, "add", "1", "Food", "--date", "2024-03-01")
    capsys.readouterr()

    assert run(data_dir, "delete", "4") == 1
    assert "not found" in capsys.readouterr().err


def test_invalid_amount_is_rejected_by_parser(data_dir: Path):
    with pytest.raises(SystemExit) as excinfo:
        run(data_dir, "add", "ten", "Food")

    assert excinfo.value.code == 2


def test_invalid_date_is_rejected_by_parser(data_dir: Path):
    with pytest.raises(SystemExit):
        run(data_dir, "add", "1", "Food", "--date", "03/01/2024")


def test_export(data_dir: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    run(data_dir, "add", "2", "Food", "--date", "2024-03-01", "--note", 'a "quoted" note')
    destination = tmp_path / "export.csv"

    assert run(data_dir, "export", str(destination)) == 0

    lines = destination.read_text(encoding="utf-8").splitlines()
    assert lines[0] == HEADER
    assert lines[1].endswith('"a ""quoted"" note"')
    assert "Exported 1 expenses" in capsys.readouterr().out


def test_export_failure_reports_storage_error(
    data_dir: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
):
    assert run(data_dir, "export", str(tmp_path / "missing" / "x.csv")) == 1
    assert capsys.readouterr().err.startswith("Storage error:")


def test_categories(data_dir: Path, capsys: pytest.CaptureFixture[str]):
    assert run(data_dir, "categories") == 0
    assert capsys.readouterr().out.splitlines()[0] == "Food"


def test_data_dir_from_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
):
    monkeypatch.setenv("EXPENSE_TRACKER_DATA_DIR", str(tmp_path / "env-data"))

    assert main(["add", "4", "Food", "--date", "2024-03-01"]) == 0
    assert (tmp_path / "env-data" / "expenses.csv").exists()
