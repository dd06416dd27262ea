"""Tests for the Satchel CLI."""

import pytest
from click.testing import CliRunner

from satchel.cli.main import cli
from satchel.domain import CalendarKey, EventItem, NoteItem
from satchel.infrastructure import load_container, read_envelope, write_envelope


@pytest.fixture
def runner():
    return CliRunner()


class TestDemo:
    """Test the demo command."""

    def test_demo_round_trip(self, runner, archive_path):
        result = runner.invoke(cli, ["demo", "--path", str(archive_path)])

        assert result.exit_code == 0, result.output
        assert result.output.count("Home events (1):") == 2
        assert result.output.count("Work events (1):") == 2
        assert result.output.count("Notes (1):") == 2
        assert "title1" in result.output
        assert "description2" in result.output
        assert "text3" in result.output
        assert f"Restored from {archive_path}" in result.output

        restored = load_container(archive_path)
        assert restored.items(CalendarKey.NOTES, NoteItem) == [NoteItem(text="text3")]

    def test_demo_uses_configured_path(self, runner, tmp_path):
        result = runner.invoke(cli, ["demo"])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "default.archive").exists()

    def test_demo_reports_write_errors(self, runner, tmp_path):
        path = tmp_path / "missing-dir" / "calendar.archive"
        result = runner.invoke(cli, ["demo", "--path", str(path)])

        assert result.exit_code == 1
        assert "Error: Cannot write archive" in result.output


class TestAddAndShow:
    """Test add-event, add-note and show."""

    def test_add_to_new_archive(self, runner, archive_path):
        result = runner.invoke(cli, ["add-note", "buy milk", "--path", str(archive_path)])

        assert result.exit_code == 0, result.output
        assert "Added note (1 total)" in result.output
        assert load_container(archive_path).items(CalendarKey.NOTES, NoteItem) == [
            NoteItem(text="buy milk")
        ]

    def test_add_event_with_date(self, runner, archive_path):
        result = runner.invoke(
            cli,
            [
                "add-event",
                "workEvents",
                "Standup",
                "--description",
                "daily",
                "--date",
                "2025-08-04T09:00:00+00:00",
                "--path",
                str(archive_path),
            ],
        )

        assert result.exit_code == 0, result.output
        [event] = load_container(archive_path).items(CalendarKey.WORK_EVENTS, EventItem)
        assert event.title == "Standup"
        assert event.description == "daily"
        assert event.date.isoformat().startswith("2025-08-04T09:00:00")

    def test_adds_accumulate(self, runner, archive_path):
        for text in ["one", "two"]:
            runner.invoke(cli, ["add-note", text, "--path", str(archive_path)])
        runner.invoke(cli, ["add-event", "homeEvents", "Dinner", "--path", str(archive_path)])

        result = runner.invoke(cli, ["show", "--path", str(archive_path)])

        assert result.exit_code == 0, result.output
        assert "Home events (1):" in result.output
        assert "Dinner" in result.output
        assert "Notes (2):" in result.output
        assert "Dropped" not in result.output

    def test_add_event_rejects_notes_key(self, runner, archive_path):
        result = runner.invoke(cli, ["add-event", "notes", "x", "--path", str(archive_path)])

        assert result.exit_code == 2
        assert not archive_path.exists()

    def test_add_event_rejects_bad_date(self, runner, archive_path):
        result = runner.invoke(
            cli,
            ["add-event", "homeEvents", "x", "--date", "someday", "--path", str(archive_path)],
        )

        assert result.exit_code == 2
        assert "Cannot parse datetime" in result.output

    def test_show_missing_archive(self, runner, tmp_path):
        result = runner.invoke(cli, ["show", "--path", str(tmp_path / "nope.archive")])

        assert result.exit_code == 1
        assert "Archive not found" in result.output

    def test_show_corrupt_archive(self, runner, archive_path):
        archive_path.write_bytes(b"\xc1\xc1\xc1")

        result = runner.invoke(cli, ["show", "--path", str(archive_path)])

        assert result.exit_code == 1
        assert "Not a valid archive" in result.output

    def test_show_reports_drops(self, runner, archive_path):
        write_envelope(
            {
                "notes": [NoteItem(text="kept").to_bytes(), b"{broken"],
                "reminders": [b"{}"],
            },
            archive_path,
        )

        result = runner.invoke(cli, ["show", "--path", str(archive_path)])

        assert result.exit_code == 0, result.output
        assert "kept" in result.output
        assert "Dropped 1 unknown key(s) and 1 unreadable item(s)." in result.output
        assert "unknown key: reminders" in result.output
        assert "notes: 1 item(s) dropped" in result.output

    @pytest.mark.parametrize(
        "args",
        [["add-note", "x"], ["add-event", "homeEvents", "Dinner"]],
    )
    def test_add_keeps_unknown_keys(self, runner, archive_path, args):
        envelope = {"notes": [], "birthdays": [b'{"who": "Alice"}']}
        write_envelope(envelope, archive_path)
        before = archive_path.read_bytes()

        result = runner.invoke(cli, [*args, "--path", str(archive_path)])

        assert result.exit_code == 1
        assert "1 unknown key(s)" in result.output
        assert "--force" in result.output
        assert archive_path.read_bytes() == before
        assert read_envelope(archive_path) == envelope

    def test_add_keeps_unreadable_items(self, runner, archive_path):
        write_envelope({"notes": [b'{"text": "ok"}', b"{broken"]}, archive_path)
        before = archive_path.read_bytes()

        result = runner.invoke(cli, ["add-note", "x", "--path", str(archive_path)])

        assert result.exit_code == 1
        assert "1 unreadable item(s)" in result.output
        assert archive_path.read_bytes() == before

    def test_add_with_force_discards_dropped_data(self, runner, archive_path):
        write_envelope({"notes": [], "birthdays": [b'{"who": "Alice"}']}, archive_path)

        result = runner.invoke(cli, ["add-note", "x", "--force", "--path", str(archive_path)])

        assert result.exit_code == 0, result.output
        assert read_envelope(archive_path) == {"notes": [b'{"text":"x"}']}

    def test_add_refuses_to_overwrite_corrupt_archive(self, runner, archive_path):
        archive_path.write_bytes(b"\xc1")

        result = runner.invoke(cli, ["add-note", "x", "--path", str(archive_path)])

        assert result.exit_code == 1
        assert archive_path.read_bytes() == b"\xc1"


class TestLogging:
    """Test logging configuration."""

    def test_json_logs(self, runner, archive_path, monkeypatch):
        monkeypatch.setenv("SATCHEL_LOG_FORMAT", "json")

        result = runner.invoke(cli, ["add-note", "x", "--path", str(archive_path)])

        assert result.exit_code == 0, result.output
        assert '"event": "container_saved"' in result.output

    def test_log_level_filters(self, runner, archive_path, monkeypatch):
        monkeypatch.setenv("SATCHEL_LOG_LEVEL", "ERROR")

        result = runner.invoke(cli, ["add-note", "x", "--path", str(archive_path)])

        assert result.exit_code == 0, result.output
        assert "container_saved" not in result.output
