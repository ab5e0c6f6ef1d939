"""Reduce step: folding partial summaries into one consolidated summary."""

from collections.abc import Iterable

from yorisoi.domain.generation import normalize_record
from yorisoi.domain.models import (
    SHORT_CARD_LIMIT,
    ConsolidatedSummary,
    DetailedSection,
    MedicalInfo,
    PartialSummary,
    ShortCard,
    SummaryMode,
    TopicBlock,
)
from yorisoi.domain.prompts import reduce_prompt
from yorisoi.exceptions import GenerationParseError, LLMServiceError
from yorisoi.infrastructure.interfaces.llm_service import LLMService
from yorisoi.logging import setup_logging

logger = setup_logging()

SAFETY_FOOTER = (
    "気になる症状が強くなったとき、いつもと違うと感じたときは、"
    "次回を待たずに病院へ連絡してください。"
)
GREETINGS: dict[str, str] = {
    "surgery": "手術についての説明をまとめました。",
    "bridge": "今回のやりとりをまとめました。",
    "normal": "今日の診察をまとめました。",
}


def _unique(items: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def _merge_medical(infos: Iterable[MedicalInfo]) -> MedicalInfo:
    infos = list(infos)
    return MedicalInfo(
        terms=_unique(t for i in infos for t in i.terms),
        medications=_unique(m for i in infos for m in i.medications),
        tests=_unique(t for i in infos for t in i.tests),
    )


def _missing_from_detail(
    detailed: DetailedSection, partials: list[PartialSummary]
) -> list[str]:
    """Action items and red flags from the partials that the detail never mentions."""
    covered = "\n".join(
        [point for topic in detailed.topics for point in topic.points]
        + detailed.timeline
        + detailed.lifestyle_notes
    )
    candidates = _unique(
        item for p in partials for item in p.action_items + p.red_flags
    )
    return [item for item in candidates if item not in covered]


def merge_partials(partials: list[PartialSummary], mode: SummaryMode) -> ConsolidatedSummary:
    """Deterministic consolidation used when the reduce call gives nothing usable."""
    summaries = [p.summary for p in partials if p.summary]
    actions = _unique(a for p in partials for a in p.action_items)
    red_flags = _unique(r for p in partials for r in p.red_flags)
    topics = [
        TopicBlock(title=f"パート{index}", points=[p.summary])
        for index, p in enumerate(partials, start=1)
        if p.summary
    ]
    if actions:
        topics.append(TopicBlock(title="すること", points=actions))
    if red_flags:
        topics.append(TopicBlock(title="注意サイン", points=red_flags))
    return ConsolidatedSummary(
        mode=mode,
        short=ShortCard(
            greeting=GREETINGS[mode],
            top_summary=summaries[:SHORT_CARD_LIMIT],
            top_actions=actions[:SHORT_CARD_LIMIT],
            top_red_flags=red_flags[:SHORT_CARD_LIMIT],
        ),
        detailed=DetailedSection(
            topics=topics,
            medical=_merge_medical(p.medical for p in partials),
            lifestyle_notes=_unique(n for p in partials for n in p.lifestyle_notes),
            questions_for_next_visit=_unique(
                q for p in partials for q in p.follow_up_questions
            ),
            safety_footer=SAFETY_FOOTER,
        ),
    )


class SummaryReducer:
    """Consolidates partial summaries through one LLM call."""

    def __init__(self, llm_service: LLMService):
        self._llm = llm_service

    def reduce(self, partials: list[PartialSummary], mode: SummaryMode) -> ConsolidatedSummary:
        """
        Reduces partial summaries into the short card and the detailed section.

        The short card lists are capped at three items. The detailed section
        is never truncated and is backfilled from the partials wherever the
        generated result left something out. Generation failures fall back to
        :func:`merge_partials`.
        """
        fallback = merge_partials(partials, mode)
        try:
            raw = self._llm.generate_json(reduce_prompt(partials, mode))
            summary = normalize_record(ConsolidatedSummary, raw, overrides={"mode": mode})
        except GenerationParseError as e:
            logger.warning(
                "Reduced summary was not valid JSON, merging locally",
                extra={"mode": mode, "raw": e.raw_text[:300]},
            )
            return fallback
        except LLMServiceError:
            logger.warning("Reduce generation failed, merging locally", exc_info=True)
            return fallback

        return self._backfill(summary, fallback, partials)

    def _backfill(
        self,
        summary: ConsolidatedSummary,
        fallback: ConsolidatedSummary,
        partials: list[PartialSummary],
    ) -> ConsolidatedSummary:
        short, detailed = summary.short, summary.detailed
        if not short.greeting:
            short.greeting = fallback.short.greeting
        if not short.top_summary:
            short.top_summary = fallback.short.top_summary
        if not short.top_actions:
            short.top_actions = fallback.short.top_actions
        if not short.top_red_flags:
            short.top_red_flags = fallback.short.top_red_flags

        if not detailed.topics:
            detailed.topics = fallback.detailed.topics
        detailed.medical = _merge_medical([detailed.medical, fallback.detailed.medical])
        detailed.lifestyle_notes = _unique(
            detailed.lifestyle_notes + fallback.detailed.lifestyle_notes
        )
        detailed.questions_for_next_visit = _unique(
            detailed.questions_for_next_visit
            + fallback.detailed.questions_for_next_visit
        )
        if not detailed.safety_footer:
            detailed.safety_footer = fallback.detailed.safety_footer

        if summary.mode == "surgery":
            missing = _missing_from_detail(detailed, partials)
            if missing:
                detailed.topics.append(TopicBlock(title="補足", points=missing))

        logger.info(
            "Summary reduced",
            extra={
                "mode": summary.mode,
                "topics": len(detailed.topics),
                "timeline": len(detailed.timeline),
            },
        )
        return summary
