"""Keyword heuristics that pick the summarization mode of a transcript."""

import re

from yorisoi.domain.models import SummaryMode

SURGERY_KEYWORDS = (
    "手術",
    "術前",
    "術後",
    "オペ",
    "麻酔",
    "切除",
    "摘出",
    "開腹",
    "腹腔鏡",
    "内視鏡手術",
    "縫合",
    "執刀",
    "同意書",
    "surgery",
    "operation",
    "anesthesia",
)

PLAN_KEYWORDS = (
    "薬",
    "処方",
    "服用",
    "内服",
    "錠",
    "mg",
    "検査",
    "採血",
    "血液",
    "レントゲン",
    "CT",
    "MRI",
    "エコー",
    "診断",
    "治療",
    "投与",
    "点滴",
    "注射",
    "経過観察",
    "次回",
    "予約",
    "再診",
    "紹介状",
    "入院",
    "退院",
    "リハビリ",
)

BRIDGE_MAX_CHARS = 800
BRIDGE_MAX_PLAN_HITS = 1
# plan keyword hits per 1000 characters below which a transcript is sparse
SPARSE_DENSITY = 0.5

_WHITESPACE = re.compile(r"\s+")


def _count_hits(text: str, keywords: tuple[str, ...]) -> int:
    lowered = text.lower()
    return sum(lowered.count(keyword.lower()) for keyword in keywords)


def classify_mode(transcript: str) -> SummaryMode:
    """
    Classifies a transcript as ``surgery``, ``bridge`` or ``normal``.

    Surgical vocabulary wins outright. Otherwise a short transcript with
    almost no medical-plan vocabulary, or a long one where that vocabulary is
    sparse, is a ``bridge`` conversation.
    """
    compact = _WHITESPACE.sub("", transcript)
    if not compact:
        return "bridge"

    if _count_hits(compact, SURGERY_KEYWORDS) > 0:
        return "surgery"

    plan_hits = _count_hits(compact, PLAN_KEYWORDS)
    if len(compact) < BRIDGE_MAX_CHARS and plan_hits <= BRIDGE_MAX_PLAN_HITS:
        return "bridge"
    if plan_hits * 1000 / len(compact) < SPARSE_DENSITY:
        return "bridge"
    return "normal"
