import subprocess
from pathlib import Path

import pytest

from yorisoi.config import LoudnessConfig
from yorisoi.domain.audio_normalizer import AudioNormalizer, NormalizeOptions
from yorisoi.exceptions import NoValidAudioError, TranscodeError


class FakeFfmpeg:
    """Records ffmpeg invocations and writes the output file of each one."""

    def __init__(self, failing: tuple[str, ...] = (), stderr_only: bool = False):
        self.calls: list[list[str]] = []
        self.concat_lists: list[str] = []
        self.failing = failing
        self.stderr_only = stderr_only

    def __call__(self, cmd, stdout=None, stderr=None, check=False):
        self.calls.append(list(cmd))
        if "concat" in cmd:
            self.concat_lists.append(Path(cmd[cmd.index("-i") + 1]).read_text(encoding="utf-8"))
        source = cmd[cmd.index("-i") + 1]
        if any(marker in source for marker in self.failing):
            if self.stderr_only:
                return subprocess.CompletedProcess(cmd, 0, b"", b"Invalid data found")
            return subprocess.CompletedProcess(cmd, 1, b"", b"Invalid data found")
        Path(cmd[-1]).write_bytes(b"RIFF")
        return subprocess.CompletedProcess(cmd, 0, b"", b"")


def _inputs(tmp_path: Path, names: list[str]) -> list[Path]:
    paths = []
    for name in names:
        path = tmp_path / name
        path.write_bytes(b"data")
        paths.append(path)
    return paths


def test_single_input_is_transcoded_in_one_pass(tmp_path: Path, monkeypatch) -> None:
    ffmpeg = FakeFfmpeg()
    monkeypatch.setattr(subprocess, "run", ffmpeg)
    [source] = _inputs(tmp_path, ["assembled.webm"])
    output = tmp_path / "audio.wav"

    AudioNormalizer("ffmpeg").normalize([source], output)

    assert len(ffmpeg.calls) == 1
    cmd = ffmpeg.calls[0]
    assert cmd[:6] == ["ffmpeg", "-y", "-hide_banner", "-nostats", "-loglevel", "error"]
    assert cmd[-7:] == ["-acodec", "pcm_s16le", "-ar", "16000", "-ac", "1", str(output)]
    assert "-af" not in cmd
    assert output.exists()


def test_chunks_are_transcoded_then_concatenated(tmp_path: Path, monkeypatch) -> None:
    ffmpeg = FakeFfmpeg()
    monkeypatch.setattr(subprocess, "run", ffmpeg)
    sources = _inputs(tmp_path, ["chunk-00001.webm", "chunk-00002.webm", "it's.webm"])
    output = tmp_path / "audio.wav"

    AudioNormalizer().normalize(sources, output)

    assert len(ffmpeg.calls) == 4
    concat = ffmpeg.calls[-1]
    assert concat[concat.index("-f") + 1] == "concat"
    assert concat[-3:] == ["-c", "copy", str(output)]
    listing = ffmpeg.concat_lists[0].splitlines()
    assert listing[0] == "ffconcat version 1.0"
    assert listing[1].endswith("chunk-00001.wav'")
    assert listing[3].endswith("it'\\''s.wav'")
    assert not (tmp_path / "audio.parts").exists()


def test_chunks_sharing_a_stem_keep_separate_parts(tmp_path: Path, monkeypatch) -> None:
    ffmpeg = FakeFfmpeg()
    monkeypatch.setattr(subprocess, "run", ffmpeg)
    sources = _inputs(tmp_path, ["chunk-00001.webm", "chunk-00001.mp4"])

    AudioNormalizer().normalize(sources, tmp_path / "audio.wav")

    listing = ffmpeg.concat_lists[0].splitlines()[1:]
    assert len(listing) == 2
    assert len(set(listing)) == 2
    outputs = [cmd[-1] for cmd in ffmpeg.calls[:-1]]
    assert len(set(outputs)) == 2


def test_failed_chunks_are_skipped(tmp_path: Path, monkeypatch) -> None:
    ffmpeg = FakeFfmpeg(failing=("bad",))
    monkeypatch.setattr(subprocess, "run", ffmpeg)
    sources = _inputs(tmp_path, ["chunk-00001.webm", "bad-00002.webm", "chunk-00003.webm"])

    AudioNormalizer().normalize(sources, tmp_path / "audio.wav")

    listing = ffmpeg.concat_lists[0].splitlines()
    assert len(listing) == 3
    assert not any("bad" in line for line in listing)


def test_no_valid_chunk_raises(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(subprocess, "run", FakeFfmpeg(failing=("bad",)))
    sources = _inputs(tmp_path, ["bad-1.webm", "bad-2.webm"])

    with pytest.raises(NoValidAudioError):
        AudioNormalizer().normalize(sources, tmp_path / "audio.wav")
    assert not (tmp_path / "audio.parts").exists()


def test_filters_are_applied_once_after_concatenation(tmp_path: Path, monkeypatch) -> None:
    ffmpeg = FakeFfmpeg()
    monkeypatch.setattr(subprocess, "run", ffmpeg)
    sources = _inputs(tmp_path, ["chunk-00001.webm", "chunk-00002.webm"])
    options = NormalizeOptions(loudness=LoudnessConfig(), trim_leading_silence=True)

    AudioNormalizer().normalize(sources, tmp_path / "audio.wav", options)

    assert all("-af" not in cmd for cmd in ffmpeg.calls[:-1])
    concat = ffmpeg.calls[-1]
    filters = concat[concat.index("-af") + 1]
    assert filters.startswith("silenceremove=start_periods=1")
    assert "loudnorm=I=-16.0:TP=-1.5:LRA=11.0" in filters


def test_diagnostic_output_counts_as_failure(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(subprocess, "run", FakeFfmpeg(failing=("bad",), stderr_only=True))
    [source] = _inputs(tmp_path, ["bad.webm"])

    with pytest.raises(TranscodeError) as exc_info:
        AudioNormalizer().normalize([source], tmp_path / "audio.wav")
    assert exc_info.value.returncode == 0
    assert "Invalid data" in exc_info.value.stderr


def test_missing_binary_raises_transcode_error(tmp_path: Path, monkeypatch) -> None:
    def missing(*args, **kwargs):
        raise FileNotFoundError("ffmpeg")

    monkeypatch.setattr(subprocess, "run", missing)
    [source] = _inputs(tmp_path, ["chunk.webm"])

    with pytest.raises(TranscodeError):
        AudioNormalizer().normalize([source], tmp_path / "audio.wav")
