"""Handler that assembles a session's chunks and starts transcription."""

import tempfile
from pathlib import Path

from yorisoi.config import PipelineConfig
from yorisoi.domain.audio_normalizer import AudioNormalizer, NormalizeOptions
from yorisoi.domain.cleanup import cleanup_local_paths, cleanup_objects
from yorisoi.domain.job_manager import TranscriptionJobManager
from yorisoi.domain.models import (
    CHUNK_NAME_PATTERN,
    FinalizeResult,
    assembled_object_name,
    session_prefix,
    waveform_object_name,
)
from yorisoi.domain.object_combiner import ObjectCombiner
from yorisoi.exceptions import NoChunksFoundError
from yorisoi.infrastructure.interfaces.storage import ObjectStorage
from yorisoi.logging import setup_logging

logger = setup_logging()


def ordered_chunks(object_names: list[str]) -> list[tuple[str, int, str]]:
    """Chunk objects as ``(name, seq, ext)`` sorted by sequence number."""
    chunks = []
    for name in object_names:
        match = CHUNK_NAME_PATTERN.search(name)
        if match:
            chunks.append((name, int(match.group(1)), match.group(2)))
    return sorted(chunks, key=lambda chunk: (chunk[1], chunk[0]))


class FinalizeHandler:
    """Turns uploaded chunks into the canonical waveform and submits it."""

    def __init__(
        self,
        storage: ObjectStorage,
        normalizer: AudioNormalizer,
        job_manager: TranscriptionJobManager,
        pipeline: PipelineConfig,
        language_code: str,
    ):
        self._storage = storage
        self._normalizer = normalizer
        self._job_manager = job_manager
        self._pipeline = pipeline
        self._language_code = language_code

    def process(self, session_id: str, user_id: str) -> FinalizeResult:
        """
        Finalizes a recording session.

        Args:
            session_id: The session whose chunks were uploaded.
            user_id: Recipient of the eventual notification.

        Returns:
            FinalizeResult with the transcription job id.

        Raises:
            NoChunksFoundError: If no chunk objects exist for the session.
            StorageDownloadError: If a chunk cannot be downloaded.
            CapabilityUnavailableError: If compose is unsupported and the
                local fallback is disabled.
            TranscodeError: If the single-pass transcode fails.
            NoValidAudioError: If no chunk could be transcoded.
            StorageUploadError: If the waveform upload fails.
            TranscriptionError: If the recognition job cannot be submitted.
        """
        chunks = ordered_chunks(self._storage.list_objects(session_prefix(session_id)))
        if not chunks:
            raise NoChunksFoundError(session_id)

        logger.info(
            "Finalizing session",
            extra={"session_id": session_id, "chunks": len(chunks)},
        )

        self._pipeline.data_dir.mkdir(parents=True, exist_ok=True)
        scratch = Path(tempfile.mkdtemp(prefix=f"{session_id}-", dir=self._pipeline.data_dir))
        try:
            output = scratch / "audio.wav"
            self._assemble(session_id, chunks, scratch, output)
            audio_object = waveform_object_name(session_id)
            self._storage.upload_file(audio_object, output, "audio/wav")
        finally:
            report = cleanup_local_paths([scratch])
            logger.info(
                "Scratch files removed",
                extra={"session_id": session_id, "failed": report.failed},
            )

        job_id = self._job_manager.submit(
            audio_object, self._language_code, session_id, user_id
        )

        # chunks stay until a job exists so finalize can be retried
        if self._pipeline.delete_chunks:
            report = cleanup_objects(self._storage, [name for name, _, _ in chunks])
            logger.info(
                "Chunks removed",
                extra={
                    "session_id": session_id,
                    "deleted": len(report.succeeded),
                    "failed": report.failed,
                },
            )
        logger.info(
            "Session finalized",
            extra={"session_id": session_id, "job_id": job_id},
        )
        return FinalizeResult(
            job_id=job_id,
            session_id=session_id,
            audio_object_name=audio_object,
            chunk_count=len(chunks),
        )

    def _options(self) -> NormalizeOptions:
        return NormalizeOptions(
            loudness=self._pipeline.loudness if self._pipeline.normalize_loudness else None,
            trim_leading_silence=self._pipeline.trim_leading_silence,
        )

    def _assemble(
        self,
        session_id: str,
        chunks: list[tuple[str, int, str]],
        scratch: Path,
        output: Path,
    ) -> None:
        extensions = {ext for _, _, ext in chunks}
        if self._pipeline.assembly_strategy == "compose" and len(extensions) == 1:
            self._assemble_composed(session_id, chunks, extensions.pop(), scratch, output)
            return

        local_paths = []
        for name, seq, ext in chunks:
            path = scratch / f"chunk-{seq:05d}.{ext}"
            self._storage.download_to_file(name, path)
            local_paths.append(path)
        self._normalizer.normalize(local_paths, output, self._options())

    def _assemble_composed(
        self,
        session_id: str,
        chunks: list[tuple[str, int, str]],
        ext: str,
        scratch: Path,
        output: Path,
    ) -> None:
        assembled = assembled_object_name(session_id, ext)
        combiner = ObjectCombiner(
            self._storage,
            fan_in=self._pipeline.compose_fan_in,
            local_fallback=self._pipeline.compose_local_fallback,
            content_type=f"audio/{ext}",
        )
        try:
            combiner.combine([name for name, _, _ in chunks], assembled)
            local = scratch / f"assembled.{ext}"
            self._storage.download_to_file(assembled, local)
            self._normalizer.normalize([local], output, self._options())
        finally:
            cleanup_objects(self._storage, [assembled])
