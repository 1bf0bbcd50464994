"""
Tests for the Waveform façade — command building, running and generation.
"""

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

import waveform_installer
from waveform_installer.core import context
from waveform_installer.core.errors import WaveformGenerationError
from waveform_installer.core.models.config import InstallerConfig
from waveform_installer.core.models.receipt import Receipt
from waveform_installer.core.services.waveform import (
    GenerateOptions,
    Waveform,
    split_arguments,
)


@pytest.fixture
def installed(linux_config: InstallerConfig) -> Path:
    """Pretend the binary is already in place."""
    target = linux_config.install_dir / "audiowaveform"
    target.parent.mkdir(parents=True)
    target.write_bytes(b"\x7fELF")
    return target


class _RecordingWaveform(Waveform):
    """Waveform whose ``run`` is captured instead of executed."""

    def __init__(self, *args, receipt: Receipt | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls: list[list[str]] = []
        self.receipt = receipt or Receipt.success(tool="audiowaveform")

    def run(self, args=()):
        self.calls.append(list(args))
        return self.receipt


# ── Options ─────────────────────────────────────────────────────


class TestGenerateOptions:
    def test_defaults(self):
        opts = GenerateOptions(input=Path("audio/tone.wav"))
        assert opts.output == Path("audio/tone.png")
        assert opts.bits == 8
        assert opts.zoom == 64

    def test_to_args(self):
        opts = GenerateOptions(input=Path("a.mp3"), output=Path("b.png"), bits=16, zoom=256)
        assert opts.to_args() == ["-i", "a.mp3", "-o", "b.png", "--bits", "16", "--zoom", "256"]

    def test_output_path_follows_explicit_output(self):
        opts = GenerateOptions(input=Path("a.wav"), output=Path("out/b.png"))
        assert opts.output_path == Path("out/b.png")

    def test_output_path_defaults_from_input(self):
        opts = GenerateOptions.model_construct(input=Path("audio/tone.mp3"), output=None)
        assert opts.output_path == Path("audio/tone.png")
        assert opts.to_args()[3] == str(Path("audio/tone.png"))

    @pytest.mark.parametrize("field,value", [("bits", 12), ("zoom", 0), ("zoom", -5)])
    def test_rejects_bad_values(self, field, value):
        with pytest.raises(ValidationError):
            GenerateOptions(input=Path("a.wav"), **{field: value})


# ── Façade ──────────────────────────────────────────────────────


class TestWaveform:
    def test_binary_path(self, linux_config, mock_registry):
        wf = Waveform(linux_config, mock_registry)
        assert wf.binary_path == linux_config.install_dir / "audiowaveform"

    def test_build_command(self, linux_config, mock_registry):
        wf = Waveform(linux_config, mock_registry)
        assert wf.build_command(["--version"]) == [str(wf.binary_path), "--version"]
        assert wf.build_command() == [str(wf.binary_path)]

    def test_build_command_does_not_install(self, linux_config, mock_registry):
        wf = Waveform(linux_config, mock_registry)
        wf.build_command(["-h"])
        assert not wf.has_binary()

    def test_generate_with_mapping(self, linux_config, mock_registry):
        wf = _RecordingWaveform(linux_config, mock_registry)
        out = wf.generate({"input": "tone.wav"})
        assert out == Path("tone.png")
        assert wf.calls == [["-i", "tone.wav", "-o", "tone.png", "--bits", "8", "--zoom", "64"]]

    def test_generate_failure(self, linux_config, mock_registry):
        failed = Receipt.failure(tool="audiowaveform", error="Can't open input file", return_code=1)
        wf = _RecordingWaveform(linux_config, mock_registry, receipt=failed)
        with pytest.raises(WaveformGenerationError) as exc:
            wf.generate(GenerateOptions(input=Path("missing.wav")))
        assert exc.value.exit_code == 1
        assert str(exc.value) == "audiowaveform failed (exit 1): Can't open input file"


class TestWaveformRun:
    def _python_waveform(self, linux_config, mock_registry, installed, monkeypatch):
        # Point the "installed binary" at the running interpreter
        monkeypatch.setattr(Waveform, "ensure_installed", lambda self: Path(sys.executable))
        return Waveform(linux_config, mock_registry)

    def test_run_list_args(self, linux_config, mock_registry, installed, monkeypatch):
        wf = self._python_waveform(linux_config, mock_registry, installed, monkeypatch)
        receipt = wf.run(["-c", "print('hi')"])
        assert receipt.ok
        assert receipt.text().strip() == "hi"

    def test_run_shell_style_string(self, linux_config, mock_registry, installed, monkeypatch):
        wf = self._python_waveform(linux_config, mock_registry, installed, monkeypatch)
        receipt = wf.run("-c 'import sys; sys.exit(4)'")
        assert receipt.failed
        assert receipt.exit_code == 4

    def test_run_string_keeps_windows_paths(self, windows_config, mock_registry, monkeypatch):
        monkeypatch.setattr(Waveform, "ensure_installed", lambda self: Path(sys.executable))
        wf = Waveform(windows_config, mock_registry)
        receipt = wf.run(r"-c 'import sys; print(sys.argv[1])' C:\audio\tone.wav")
        assert receipt.ok, receipt.error
        assert receipt.text().strip() == r"C:\audio\tone.wav"

    def test_run_installs_on_first_use(self, linux_config, mock_registry, monkeypatch):
        wf = Waveform(linux_config, mock_registry)
        installs = []

        def fake_install():
            installs.append(True)
            target = wf.binary_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(b"")
            return target

        monkeypatch.setattr(wf.installer, "install", fake_install)
        wf.run(["--version"])
        wf.run(["--version"])
        assert len(installs) == 1


# ── Module-level helpers ────────────────────────────────────────


class TestModuleHelpers:
    def test_use_active_config(self, linux_config):
        context.set_config(linux_config)
        assert waveform_installer.get_binary_path() == linux_config.install_dir / "audiowaveform"
        assert waveform_installer.has_binary() is False

    def test_build_command(self, linux_config, installed):
        context.set_config(linux_config)
        assert waveform_installer.build_command(["-v"]) == [str(installed), "-v"]
        assert waveform_installer.has_binary() is True


# ── Argument splitting ──────────────────────────────────────────


class TestSplitArguments:
    def test_posix_quotes_and_escapes(self):
        assert split_arguments(r"-i 'my file.wav' -o a\ b.png") == ["-i", "my file.wav", "-o", "a b.png"]

    def test_windows_keeps_backslashes(self):
        assert split_arguments(r"-i C:\audio\tone.wav -o D:\out.png", windows=True) == [
            "-i", r"C:\audio\tone.wav", "-o", r"D:\out.png",
        ]

    def test_windows_strips_surrounding_quotes(self):
        line = r'-i "C:\My Music\tone.wav"' + r" -o 'D:\x y.png'"
        args = split_arguments(line, windows=True)
        assert args == ["-i", r"C:\My Music\tone.wav", "-o", r"D:\x y.png"]
