"""
Tests for tool adapters — protocol, registry, mock and command tools.
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path

from waveform_installer.adapters.base import ToolInvocation
from waveform_installer.adapters.mock import MockTool
from waveform_installer.adapters.registry import ToolRegistry, default_registry
from waveform_installer.adapters.shell.command import CommandTool
from waveform_installer.core.models.receipt import Receipt

# ── Receipt Tests ────────────────────────────────────────────────────


class TestReceipt:
    def test_success_defaults(self):
        r = Receipt.success(tool="tar", output="done")
        assert r.ok
        assert r.exit_code == 0
        assert r.text() == "done"

    def test_failure_without_return_code(self):
        r = Receipt.failure(tool="tar", error="boom")
        assert r.failed
        assert r.exit_code == -1


# ── Mock Tool Tests ──────────────────────────────────────────────────


class TestMockTool:
    def test_default_success(self):
        mock = MockTool("tar")
        receipt = mock.run(["-xf", "a.tar"])
        assert receipt.ok
        assert receipt.command == ["-xf", "a.tar"]
        assert mock.call_count == 1

    def test_queued_outputs_consumed_in_order(self):
        mock = MockTool("ldd")
        mock.set_output("/bin/x", "first", "second")
        assert mock.run(["/bin/x"]).output == "first"
        assert mock.run(["/bin/x"]).output == "second"
        # last one repeats
        assert mock.run(["/bin/x"]).output == "second"

    def test_set_failure(self):
        mock = MockTool("apt-get")
        mock.set_failure("install", error="E: broken", return_code=100)
        receipt = mock.run(["install", "-y", "libmad0"])
        assert receipt.failed
        assert receipt.exit_code == 100
        assert "broken" in receipt.error

    def test_handler_fakes_side_effects(self, tmp_path: Path):
        def handler(inv: ToolInvocation):
            (Path(inv.cwd) / "data.tar.xz").write_bytes(b"x")
            return None

        mock = MockTool("ar", handler=handler)
        receipt = mock.run(["x", "pkg.deb"], cwd=str(tmp_path))
        assert receipt.ok
        assert (tmp_path / "data.tar.xz").exists()

    def test_elevated_flag_recorded(self):
        mock = MockTool("apt-get")
        mock.run(["update"], elevated=True)
        assert mock.call_log[0].elevated is True

    def test_availability_and_resolve(self):
        assert MockTool(available=True, path="/usr/bin/x").resolve() == "/usr/bin/x"
        assert MockTool(available=False, path="/usr/bin/x").resolve() is None
        assert not MockTool(available=False).is_available()

    def test_reset(self):
        mock = MockTool()
        mock.set_failure("x")
        mock.run(["x"])
        mock.reset()
        assert mock.call_count == 0
        assert mock.run(["x"]).ok


# ── Registry Tests ──────────────────────────────────────────────────


class TestToolRegistry:
    def test_register_and_get(self):
        registry = ToolRegistry()
        mock = MockTool("tar")
        registry.register(mock)
        assert registry.get("tar") is mock
        assert "tar" in registry.list_tools()

    def test_get_missing(self):
        assert ToolRegistry().get("nonexistent") is None

    def test_available_filters_unavailable(self):
        registry = ToolRegistry()
        registry.register(MockTool("ldd", available=False))
        assert registry.get("ldd") is not None
        assert registry.available("ldd") is None

    def test_tool_status(self):
        registry = ToolRegistry()
        registry.register(MockTool("up", available=True))
        registry.register(MockTool("down", available=False))
        status = registry.tool_status()
        assert status["up"]["available"] is True
        assert status["down"]["available"] is False
        assert status["up"]["type"] == "MockTool"

    def test_default_registry_tools(self):
        names = default_registry().list_tools()
        for expected in ("ar", "tar", "powershell", "ldd", "apt-get", "sudo", "brew"):
            assert expected in names


# ── Command Tool Tests ──────────────────────────────────────────────


class TestCommandTool:
    def _python(self) -> CommandTool:
        return CommandTool("python", sys.executable)

    def test_available_with_explicit_path(self):
        assert self._python().is_available()

    def test_unavailable_executable(self):
        assert not CommandTool("nope", "definitely-not-a-real-binary-xyz").is_available()

    def test_success_captures_stdout(self):
        receipt = self._python().run(["-c", "print('hello')"])
        assert receipt.ok
        assert receipt.output.strip() == "hello"
        assert receipt.exit_code == 0

    def test_non_utf8_output_is_replaced(self):
        receipt = self._python().run(
            ["-c", "import sys; sys.stdout.buffer.write(b'\\x89PNG\\xff\\xfe')"]
        )
        assert receipt.ok
        assert receipt.output.startswith("\ufffdPNG")
        assert receipt.output.endswith("\ufffd\ufffd")

    def test_timing_spans_the_command(self):
        receipt = self._python().run(["-c", "import time; time.sleep(0.2)"])
        started = datetime.fromisoformat(receipt.started_at)
        ended = datetime.fromisoformat(receipt.ended_at)
        assert ended - started >= timedelta(seconds=0.2)
        assert receipt.duration_ms >= 200

    def test_failure_captures_stderr_and_code(self):
        receipt = self._python().run(
            ["-c", "import sys; sys.stderr.write('bad'); sys.exit(3)"]
        )
        assert receipt.failed
        assert receipt.exit_code == 3
        assert "bad" in receipt.error

    def test_missing_cwd_fails_validation(self, tmp_path: Path):
        receipt = self._python().run(["-c", "pass"], cwd=str(tmp_path / "missing"))
        assert receipt.failed
        assert "Working directory does not exist" in receipt.error

    def test_missing_executable_never_raises(self, tmp_path: Path):
        receipt = CommandTool("ghost", tmp_path / "ghost").run(["--version"])
        assert receipt.failed
        assert "Command execution error" in receipt.error

    def test_elevation_prefix(self):
        tool = CommandTool("apt-get", elevate_with=["sudo", "-n"])
        argv = tool.build_argv(ToolInvocation(args=["update"], elevated=True))
        assert argv[:2] == ["sudo", "-n"]
        assert argv[-1] == "update"

    def test_elevation_without_wrapper_fails_validation(self):
        receipt = self._python().run(["-c", "pass"], elevated=True)
        assert receipt.failed
        assert "elevation" in receipt.error

    def test_prefix_arguments(self):
        tool = CommandTool("powershell", prefix=["-NoLogo", "-NoProfile", "-Command"])
        argv = tool.build_argv(ToolInvocation(args=["Expand-Archive"]))
        assert argv[1:] == ["-NoLogo", "-NoProfile", "-Command", "Expand-Archive"]
