"""Transcoding uploaded audio into the canonical recognition waveform."""

import subprocess
from pathlib import Path

from pydantic import BaseModel

from yorisoi.config import LoudnessConfig
from yorisoi.domain.cleanup import cleanup_local_paths
from yorisoi.exceptions import NoValidAudioError, TranscodeError
from yorisoi.logging import setup_logging

logger = setup_logging()


class NormalizeOptions(BaseModel, frozen=True):
    """Output format and optional clean-up filters for normalization."""

    sample_rate: int = 16000
    channels: int = 1
    loudness: LoudnessConfig | None = None
    trim_leading_silence: bool = False
    silence_threshold_db: float = -50.0
    min_silence_seconds: float = 0.3

    def audio_filters(self) -> str | None:
        filters = []
        if self.trim_leading_silence:
            filters.append(
                "silenceremove=start_periods=1"
                f":start_duration={self.min_silence_seconds}"
                f":start_threshold={self.silence_threshold_db}dB"
            )
        if self.loudness is not None:
            filters.append(
                f"loudnorm=I={self.loudness.integrated}"
                f":TP={self.loudness.true_peak}"
                f":LRA={self.loudness.loudness_range}"
            )
        return ",".join(filters) or None


def _escape_concat_path(path: Path) -> str:
    return str(path).replace("'", "'\\''")


class AudioNormalizer:
    """Runs ffmpeg to produce mono 16 kHz PCM WAV files."""

    def __init__(self, ffmpeg_path: str = "ffmpeg"):
        self._ffmpeg_path = ffmpeg_path

    def normalize(
        self,
        input_paths: list[Path],
        output_path: Path,
        options: NormalizeOptions | None = None,
    ) -> None:
        """
        Produces the canonical waveform from one or more inputs.

        A single input is transcoded in one pass; several inputs go through
        per-chunk transcoding followed by concatenation.

        Raises:
            ValueError: If no inputs are given.
            TranscodeError: If an ffmpeg invocation fails.
            NoValidAudioError: If every chunk fails to transcode.
        """
        options = options or NormalizeOptions()
        if not input_paths:
            raise ValueError("normalize needs at least one input")
        if len(input_paths) == 1:
            self.transcode(input_paths[0], output_path, options)
        else:
            self.transcode_and_concat(input_paths, output_path, options)

    def transcode(
        self, input_path: Path, output_path: Path, options: NormalizeOptions
    ) -> None:
        """Transcodes one container straight to PCM, applying any filters."""
        args = ["-i", str(input_path), "-vn"]
        filters = options.audio_filters()
        if filters:
            args += ["-af", filters]
        args += self._pcm_args(options) + [str(output_path)]
        self._run(args, input_path.name)

    def transcode_and_concat(
        self, input_paths: list[Path], output_path: Path, options: NormalizeOptions
    ) -> None:
        """
        Transcodes every chunk independently, then concatenates the results.

        Chunks that fail to transcode are logged and skipped. Filters are
        applied once, on the concatenated stream; without filters the
        concatenation is a lossless stream copy.
        """
        work_dir = output_path.parent / f"{output_path.stem}.parts"
        work_dir.mkdir(parents=True, exist_ok=True)
        plain = options.model_copy(update={"loudness": None, "trim_leading_silence": False})
        try:
            wav_paths = []
            for index, input_path in enumerate(input_paths):
                wav_path = work_dir / f"{index:05d}-{input_path.stem}.wav"
                try:
                    self.transcode(input_path, wav_path, plain)
                except TranscodeError as e:
                    logger.warning(
                        "Skipping chunk that failed to transcode",
                        extra={"chunk": input_path.name, "stderr": e.stderr[-500:]},
                    )
                    continue
                wav_paths.append(wav_path)

            if not wav_paths:
                raise NoValidAudioError(len(input_paths))

            list_path = work_dir / "wav-list.ffconcat"
            lines = ["ffconcat version 1.0"]
            lines += [f"file '{_escape_concat_path(p)}'" for p in wav_paths]
            list_path.write_text("\n".join(lines) + "\n", encoding="utf-8")

            args = ["-f", "concat", "-safe", "0", "-i", str(list_path)]
            filters = options.audio_filters()
            if filters:
                args += ["-af", filters] + self._pcm_args(options)
            else:
                args += ["-c", "copy"]
            self._run(args + [str(output_path)], list_path.name)

            logger.info(
                "Chunks concatenated",
                extra={
                    "output": output_path.name,
                    "chunks": len(input_paths),
                    "skipped": len(input_paths) - len(wav_paths),
                    "filters": filters,
                },
            )
        finally:
            report = cleanup_local_paths([work_dir])
            if report.failed:
                logger.warning("Scratch parts not removed", extra={"failed": report.failed})

    def _pcm_args(self, options: NormalizeOptions) -> list[str]:
        return [
            "-acodec",
            "pcm_s16le",
            "-ar",
            str(options.sample_rate),
            "-ac",
            str(options.channels),
        ]

    def _run(self, args: list[str], input_name: str) -> None:
        cmd = [
            self._ffmpeg_path,
            "-y",
            "-hide_banner",
            "-nostats",
            "-loglevel",
            "error",
            *args,
        ]
        try:
            completed = subprocess.run(
                cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, check=False
            )
        except OSError as e:
            raise TranscodeError(input_name, str(e)) from e

        stderr = completed.stderr.decode("utf-8", "ignore")
        if completed.returncode != 0 or stderr.strip():
            raise TranscodeError(input_name, stderr, completed.returncode)
