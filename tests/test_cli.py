import json

from click.testing import CliRunner

from timetally.main import cli
from timetally.tracker import format_timestamp, local_now


def _invoke(save_path, *args: str):
    runner = CliRunner()
    return runner.invoke(cli, list(args), env={"TIMETALLY_SAVE_FILE": str(save_path)})


def test_full_tracking_cycle(tmp_path) -> None:
    save_path = tmp_path / "tally.json"

    assert _invoke(save_path, "add-category", "work").exit_code == 0
    started = _invoke(save_path, "start", "work", "--start-time", "2024-03-04T09:00:00")
    assert started.exit_code == 0
    assert "Started tracking work at 2024-03-04T09:00:00." in started.output

    status = _invoke(save_path, "status")
    assert "Tracking work since 2024-03-04 09:00" in status.output

    stopped = _invoke(save_path, "stop", "planning", "--stop-time", "2024-03-04T09:30:00")
    assert stopped.exit_code == 0
    assert "after 00:30:00" in stopped.output

    assert "Not tracking anything." in _invoke(save_path, "status").output

    log = _invoke(save_path, "log", "--day", "2024-03-04")
    assert "09:00 - 09:30  work  (00:30:00)" in log.output
    assert "planning" in log.output

    summary = _invoke(save_path, "summary")
    assert "work: 00:30:00" in summary.output

    payload = json.loads(save_path.read_text(encoding="utf-8"))
    assert payload["active"] is None
    assert len(payload["sessions"]) == 1


def test_errors_have_distinct_exit_codes_and_do_not_save(tmp_path) -> None:
    save_path = tmp_path / "tally.json"
    _invoke(save_path, "add-category", "example")
    duplicate = _invoke(save_path, "add-category", "example")
    unknown = _invoke(save_path, "start", "missing")
    not_tracking = _invoke(save_path, "stop")

    _invoke(save_path, "start", "example")
    already = _invoke(save_path, "start", "example")

    assert duplicate.exit_code == 3
    assert "Category example already exists." in duplicate.output
    assert unknown.exit_code == 4
    assert not_tracking.exit_code == 6
    assert already.exit_code == 5
    assert json.loads(save_path.read_text(encoding="utf-8"))["categories"] == ["example"]


def test_corrupt_save_file_aborts(tmp_path) -> None:
    save_path = tmp_path / "tally.json"
    save_path.write_text("{broken", encoding="utf-8")

    result = _invoke(save_path, "add-category", "work")

    assert result.exit_code == 7
    assert save_path.read_text(encoding="utf-8") == "{broken"


def test_missing_environment_variable(tmp_path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["status"], env={"TIMETALLY_SAVE_FILE": None})

    assert result.exit_code == 1
    assert "TIMETALLY_SAVE_FILE" in result.output


def test_read_only_commands_do_not_create_save_file(tmp_path) -> None:
    save_path = tmp_path / "tally.json"

    result = _invoke(save_path, "categories")

    assert result.exit_code == 0
    assert not save_path.exists()


def test_add_and_cancel(tmp_path) -> None:
    save_path = tmp_path / "tally.json"
    _invoke(save_path, "add-category", "reading")

    added = _invoke(save_path, "add", "reading", "2024-03-04T20:00:00", "2024-03-04T21:15:00", "novel")
    assert added.exit_code == 0
    assert "Added 01:15:00 to reading." in added.output

    reversed_span = _invoke(save_path, "add", "reading", "2024-03-04T21:00:00", "2024-03-04T20:00:00")
    assert reversed_span.exit_code == 8

    _invoke(save_path, "start", "reading")
    cancelled = _invoke(save_path, "cancel")
    assert cancelled.exit_code == 0
    assert _invoke(save_path, "cancel").exit_code == 6

    summary = _invoke(save_path, "summary", "--category", "reading")
    assert summary.output.strip() == "reading: 01:15:00"


def test_log_defaults_to_today(tmp_path) -> None:
    save_path = tmp_path / "tally.json"
    _invoke(save_path, "add-category", "work")
    today = local_now().replace(hour=0, minute=0, second=0)
    _invoke(save_path, "add", "work", format_timestamp(today), format_timestamp(today.replace(minute=20)))
    _invoke(save_path, "add", "work", "2001-01-01T09:00:00", "2001-01-01T10:00:00")

    result = _invoke(save_path, "log")

    assert result.exit_code == 0
    assert "00:00 - 00:20  work" in result.output
    assert "2001" not in result.output


def test_start_time_must_match_timestamp_format(tmp_path) -> None:
    save_path = tmp_path / "tally.json"
    _invoke(save_path, "add-category", "work")

    result = _invoke(save_path, "start", "work", "--start-time", "04/03/2024 09:00")

    assert result.exit_code == 2


def test_unpadded_start_time_is_rejected(tmp_path) -> None:
    save_path = tmp_path / "tally.json"
    _invoke(save_path, "add-category", "work")

    result = _invoke(save_path, "start", "work", "--start-time", "2024-3-4T9:0:0")

    assert result.exit_code == 2
    assert "Not tracking anything." in _invoke(save_path, "status").output


def test_unreadable_save_file_reports_path(tmp_path) -> None:
    result = _invoke(tmp_path, "status")

    assert result.exit_code == 10
    assert f"Could not read save file '{tmp_path}'" in result.output
