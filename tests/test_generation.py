import pytest

from yorisoi.domain.generation import normalize_record, parse_json_object, strip_code_fence
from yorisoi.domain.models import ConsolidatedSummary, PartialSummary
from yorisoi.exceptions import GenerationParseError

BODY = '{"summary": "血圧の薬を続けます。", "action_items": ["毎朝血圧を測る"]}'


def test_fenced_json_parses_like_unfenced() -> None:
    fenced = f"```json\n{BODY}\n```"
    assert parse_json_object(fenced) == parse_json_object(BODY)


def test_strip_code_fence_leaves_plain_text() -> None:
    assert strip_code_fence("  {}  ") == "{}"
    assert strip_code_fence("```\n{}\n```") == "{}"


def test_object_is_extracted_from_surrounding_prose() -> None:
    raw = f"はい、以下がJSONです。\n{BODY}\n以上です。"
    assert parse_json_object(raw)["summary"] == "血圧の薬を続けます。"


def test_invalid_text_raises_parse_error() -> None:
    with pytest.raises(GenerationParseError) as exc_info:
        parse_json_object("要約できませんでした")
    assert exc_info.value.raw_text == "要約できませんでした"


def test_non_object_json_raises_parse_error() -> None:
    with pytest.raises(GenerationParseError):
        parse_json_object("[1, 2, 3]")


def test_normalize_record_coerces_every_field() -> None:
    raw = (
        '{"summary": ["一行目", "二行目"], "action_items": "薬を飲む",'
        ' "red_flags": null, "medical": "なし",'
        ' "lifestyle_notes": ["", "  ", "塩分を控える"],'
        ' "follow_up_questions": [{"q": "副作用は？"}]}'
    )
    partial = normalize_record(PartialSummary, raw)
    assert partial.summary == "一行目\n二行目"
    assert partial.action_items == ["薬を飲む"]
    assert partial.red_flags == []
    assert partial.medical.terms == []
    assert partial.lifestyle_notes == ["塩分を控える"]
    assert partial.follow_up_questions == ["副作用は？"]


def test_normalize_record_defaults_missing_sections() -> None:
    summary = normalize_record(ConsolidatedSummary, "{}", overrides={"mode": "bridge"})
    assert summary.mode == "bridge"
    assert summary.short.top_summary == []
    assert summary.detailed.topics == []


def test_short_card_lists_are_capped() -> None:
    raw = '{"short": {"top_actions": ["a", "b", "c", "d", "e"]}}'
    summary = normalize_record(ConsolidatedSummary, raw)
    assert summary.short.top_actions == ["a", "b", "c"]
