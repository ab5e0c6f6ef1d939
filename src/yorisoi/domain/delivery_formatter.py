"""Rendering of consolidated summaries into push messages and documents."""

import re

from yorisoi.domain.models import ConsolidatedSummary, SummaryMode

MESSAGE_CHAR_LIMIT = 4999
SHORT_TRANSCRIPT_PLACEHOLDER = "（短い録音のためメモは作成しませんでした）"
DETAIL_FOLLOWS = "詳しい内容は続けて送ります。"

HEADERS: dict[str, str] = {
    "surgery": "■手術説明メモ",
    "bridge": "■やりとりメモ",
    "normal": "■診察メモ",
}

_PREAMBLES = (
    re.compile(r"^はい[、。]?(承知|了解)(いたしました|しました)。?\s*"),
    re.compile(r"^(要約|生成|まとめ)[：:]\s*"),
)


def strip_assistant_preamble(text: str) -> str:
    """Removes openers like ``はい、承知しました。`` or ``要約：`` from generated text."""
    for pattern in _PREAMBLES:
        text = pattern.sub("", text)
    return text.strip()


def _section(label: str, items: list[str]) -> str:
    cleaned = [strip_assistant_preamble(item) for item in items]
    cleaned = [item for item in cleaned if item]
    if not cleaned:
        return ""
    return f"【{label}】\n- " + "\n- ".join(cleaned)


def _join(blocks: list[str]) -> str:
    return "\n\n".join(block for block in blocks if block)


def format_short(
    summary: ConsolidatedSummary, mode: SummaryMode, limit: int = MESSAGE_CHAR_LIMIT
) -> str:
    """
    Renders the short card as one push message.

    Args:
        summary: The consolidated summary.
        mode: Mode that selects the header.
        limit: Maximum message length in characters.

    Returns:
        A single message of at most ``limit`` characters.
    """
    return _join([_short_body(summary, mode), DETAIL_FOLLOWS])[:limit]


def _short_body(summary: ConsolidatedSummary, mode: SummaryMode) -> str:
    short = summary.short
    summary_lines = [strip_assistant_preamble(line) for line in short.top_summary]
    return _join(
        [
            HEADERS[mode],
            strip_assistant_preamble(short.greeting),
            "\n".join(line for line in summary_lines if line),
            _section("すること", short.top_actions),
            _section("注意サイン", short.top_red_flags),
        ]
    )


def _detail_body(summary: ConsolidatedSummary, mode: SummaryMode) -> str:
    detailed = summary.detailed
    topic_blocks = [
        _section(topic.title or "話題", topic.points) for topic in detailed.topics
    ]
    return _join(
        [
            f"{HEADERS[mode]}（詳しい内容）",
            *topic_blocks,
            _section("日程・流れ", detailed.timeline),
            _section("お薬", detailed.medical.medications),
            _section("検査", detailed.medical.tests),
            _section("出てきた用語", detailed.medical.terms),
            _section("生活の注意", detailed.lifestyle_notes),
            _section("次回ききたいこと", detailed.questions_for_next_visit),
            strip_assistant_preamble(detailed.safety_footer),
        ]
    )


def format_detail(
    summary: ConsolidatedSummary, mode: SummaryMode, limit: int = MESSAGE_CHAR_LIMIT
) -> list[str]:
    """
    Renders the detailed section as push messages.

    The whole detail body is built first and then hard-sliced into windows of
    ``limit`` characters, so nothing is dropped.
    """
    if limit <= 0:
        raise ValueError("limit must be positive")
    body = _detail_body(summary, mode)
    return [body[start : start + limit] for start in range(0, len(body), limit)]


def format_document(summary: ConsolidatedSummary, transcript: str) -> str:
    """Renders the browsable plain-text document: short card, detail and transcript."""
    return _join(
        [
            _short_body(summary, summary.mode),
            _detail_body(summary, summary.mode),
            "■文字起こし\n" + transcript.strip(),
        ]
    )
