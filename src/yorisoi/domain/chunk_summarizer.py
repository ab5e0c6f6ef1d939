"""Map step: one structured partial summary per transcript segment."""

from concurrent.futures import ThreadPoolExecutor

from yorisoi.domain.generation import normalize_record
from yorisoi.domain.models import PartialSummary, SummaryMode
from yorisoi.domain.prompts import chunk_prompt
from yorisoi.exceptions import GenerationParseError, LLMServiceError
from yorisoi.infrastructure.interfaces.llm_service import LLMService
from yorisoi.logging import setup_logging

logger = setup_logging()

FALLBACK_EXCERPT_CHARS = 400


def fallback_partial(transcript: str) -> PartialSummary:
    """Partial summary built from the raw transcript when generation gave nothing."""
    excerpt = transcript.strip()[:FALLBACK_EXCERPT_CHARS]
    return PartialSummary(summary=excerpt)


class ChunkSummarizer:
    """Summarizes transcript segments through the LLM, in parallel."""

    def __init__(self, llm_service: LLMService, max_workers: int = 4):
        self._llm = llm_service
        self._max_workers = max(1, max_workers)

    def summarize_chunk(self, segment: str, mode: SummaryMode) -> PartialSummary:
        """
        Summarizes one segment.

        Generation and parse failures are logged and turned into an
        empty-shaped summary; they never propagate.
        """
        return self._try_summarize(segment, mode) or PartialSummary()

    def summarize_all(
        self, segments: list[str], mode: SummaryMode, transcript: str
    ) -> list[PartialSummary]:
        """
        Summarizes every segment concurrently and waits for all of them.

        Failed or empty segment summaries are dropped. If every segment
        failed, a single fallback summary from a transcript excerpt is
        returned so reduction always has input.

        Returns:
            Partial summaries in segment order, never empty.
        """
        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            results = list(
                executor.map(lambda s: self._try_summarize(s, mode), segments)
            )

        partials = [p for p in results if p is not None and not p.is_empty()]
        logger.info(
            "Chunks summarized",
            extra={
                "mode": mode,
                "segments": len(segments),
                "failed": len(segments) - len(partials),
            },
        )
        if not partials:
            logger.warning("Every chunk summary failed, using transcript excerpt")
            return [fallback_partial(transcript)]
        return partials

    def _try_summarize(self, segment: str, mode: SummaryMode) -> PartialSummary | None:
        try:
            raw = self._llm.generate_json(chunk_prompt(segment, mode))
            return normalize_record(PartialSummary, raw)
        except GenerationParseError as e:
            logger.warning(
                "Chunk summary was not valid JSON",
                extra={"mode": mode, "raw": e.raw_text[:300]},
            )
        except LLMServiceError:
            logger.warning("Chunk summary generation failed", exc_info=True)
        return None
