"""Tests for issue_digest/sinks - file output and desktop integration."""

import json
import subprocess
from unittest.mock import AsyncMock, patch

import pytest

from issue_digest.exceptions import DeliveryError
from issue_digest.sinks import AppLauncher, DryRunDesktop, FileSink, Indexer, Notifier, Sinks, UrlSink

RUN_COMMAND = "issue_digest.sinks.desktop.run_command"


class TestFileSink:
    @pytest.mark.asyncio
    async def test_creates_parent_directories(self, tmp_path):
        target = tmp_path / "a" / "b" / "report.json"

        written = await FileSink().write('{"ok": true}\n', str(target))

        assert written == target
        assert target.read_text(encoding="utf-8") == '{"ok": true}\n'

    @pytest.mark.asyncio
    async def test_overwrites_existing_file(self, tmp_path):
        target = tmp_path / "report.json"
        target.write_text("old")

        await FileSink().write("new", str(target))

        assert target.read_text() == "new"

    @pytest.mark.asyncio
    async def test_path_with_shell_metacharacters_is_literal(self, tmp_path):
        target = tmp_path / "report $(whoami) & 'x'.json"

        await FileSink().write("{}", str(target))

        assert target.exists()

    @pytest.mark.asyncio
    async def test_expands_home(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))

        written = await FileSink().write("{}", "~/digest.json")

        assert written == tmp_path / "digest.json"

    @pytest.mark.asyncio
    async def test_unwritable_location_raises_delivery_error(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")

        with pytest.raises(DeliveryError) as exc_info:
            await FileSink().write("{}", str(blocker / "report.json"))

        assert exc_info.value.sink == "file"
        assert exc_info.value.message.startswith("Error saving data to file")

    @pytest.mark.asyncio
    async def test_lone_surrogate_is_written_as_json_escape(self, tmp_path):
        """Text decoded from a \\ud800 escape still produces a loadable report."""
        target = tmp_path / "report.json"
        content = json.dumps({"summary": "x\ud800y"}, ensure_ascii=False)

        await FileSink().write(content, str(target))

        assert json.loads(target.read_text(encoding="utf-8")) == {"summary": "x\ud800y"}


class TestUrlSink:
    @pytest.mark.asyncio
    @patch("issue_digest.sinks.desktop.webbrowser.open", return_value=True)
    async def test_opens_url(self, mock_open):
        await UrlSink().open("https://jira.example.com/browse/PROJ-1")

        mock_open.assert_called_once_with("https://jira.example.com/browse/PROJ-1")

    @pytest.mark.asyncio
    @patch("issue_digest.sinks.desktop.webbrowser.open", return_value=False)
    async def test_no_browser(self, mock_open):
        with pytest.raises(DeliveryError) as exc_info:
            await UrlSink().open("https://example.com")

        assert exc_info.value.target == "https://example.com"


class TestNotifier:
    """Platform-specific notification commands."""

    @pytest.mark.asyncio
    async def test_macos_passes_values_as_argv(self):
        with patch(RUN_COMMAND, new_callable=AsyncMock) as mock_run:
            await Notifier("darwin").notify('Say "hi"', "a\nb", tone="Glass")

        args = mock_run.await_args.args
        assert args[0] == "osascript"
        assert args[-3:] == ('Say "hi"', "a\nb", "Glass")
        script = " ".join(args[1:-3])
        assert "sound name (item 3 of argv)" in script
        assert 'Say "hi"' not in script

    @pytest.mark.asyncio
    async def test_macos_without_tone(self):
        with patch(RUN_COMMAND, new_callable=AsyncMock) as mock_run:
            await Notifier("darwin").notify("Title", "Body")

        args = mock_run.await_args.args
        assert args[-2:] == ("Title", "Body")
        assert "sound name" not in " ".join(args)

    @pytest.mark.asyncio
    async def test_linux_uses_notify_send(self):
        with patch(RUN_COMMAND, new_callable=AsyncMock) as mock_run:
            await Notifier("linux").notify("Title", "Body", tone="Glass")

        assert mock_run.await_args.args == ("notify-send", "--app-name=issue-digest", "Title", "Body")

    @pytest.mark.asyncio
    async def test_other_platforms_only_log(self):
        with patch(RUN_COMMAND, new_callable=AsyncMock) as mock_run:
            await Notifier("win32").notify("Title", "Body")

        mock_run.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_command_failure_becomes_delivery_error(self):
        failure = subprocess.CalledProcessError(1, ("notify-send",))
        with patch(RUN_COMMAND, new_callable=AsyncMock, side_effect=failure):
            with pytest.raises(DeliveryError) as exc_info:
                await Notifier("linux").notify("Title", "Body")

        assert exc_info.value.sink == "notifier"

    @pytest.mark.asyncio
    async def test_refused_argv_becomes_delivery_error(self):
        with patch(RUN_COMMAND, new_callable=AsyncMock, side_effect=ValueError("embedded null byte")):
            with pytest.raises(DeliveryError) as exc_info:
                await Notifier("linux").notify("Title", "bad\x00body")

        assert "embedded null byte" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_missing_executable_becomes_delivery_error(self):
        with patch(RUN_COMMAND, new_callable=AsyncMock, side_effect=FileNotFoundError("osascript")):
            with pytest.raises(DeliveryError):
                await Notifier("darwin").notify("Title", "Body")


class TestAppLauncherAndIndexer:
    @pytest.mark.asyncio
    async def test_macos_open_with_app(self):
        with patch(RUN_COMMAND, new_callable=AsyncMock) as mock_run:
            await AppLauncher("darwin").open_with("/tmp/report.json", "Visual Studio Code")

        assert mock_run.await_args.args == ("open", "-a", "Visual Studio Code", "/tmp/report.json")

    @pytest.mark.asyncio
    async def test_linux_uses_xdg_open(self):
        with patch(RUN_COMMAND, new_callable=AsyncMock) as mock_run:
            await AppLauncher("linux").open_with("/tmp/report.json", "TextEdit")

        assert mock_run.await_args.args == ("xdg-open", "/tmp/report.json")

    @pytest.mark.asyncio
    async def test_macos_indexes_with_mdimport(self):
        with patch(RUN_COMMAND, new_callable=AsyncMock) as mock_run:
            await Indexer("darwin").index("/tmp/report.json")

        assert mock_run.await_args.args == ("mdimport", "/tmp/report.json")

    @pytest.mark.asyncio
    async def test_linux_skips_indexing(self):
        with patch(RUN_COMMAND, new_callable=AsyncMock) as mock_run:
            await Indexer("linux").index("/tmp/report.json")

        mock_run.assert_not_awaited()


class TestSinkSets:
    def test_for_platform(self):
        sinks = Sinks.for_platform("darwin")

        assert isinstance(sinks.file, FileSink)
        assert isinstance(sinks.browser, UrlSink)
        assert sinks.notifier.platform == "darwin"

    @pytest.mark.asyncio
    async def test_dry_run_records_desktop_effects(self):
        desktop = DryRunDesktop()
        sinks = Sinks.dry_run(desktop)

        await sinks.browser.open("https://example.com")
        await sinks.notifier.notify("Title", "Body", "Glass")
        await sinks.launcher.open_with("/tmp/r.json", "TextEdit")
        await sinks.indexer.index("/tmp/r.json")

        assert isinstance(sinks.file, FileSink)
        assert desktop.opened_urls == ["https://example.com"]
        assert desktop.notifications == [("Title", "Body", "Glass")]
        assert desktop.launched == [("/tmp/r.json", "TextEdit")]
        assert desktop.indexed == ["/tmp/r.json"]
