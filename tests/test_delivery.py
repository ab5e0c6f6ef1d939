import threading

import pytest
from conftest import InMemoryMarkerStore

from yorisoi.domain.delivery_formatter import (
    DETAIL_FOLLOWS,
    format_detail,
    format_document,
    format_short,
    strip_assistant_preamble,
)
from yorisoi.domain.delivery_gate import DeliveryGate
from yorisoi.domain.models import (
    ConsolidatedSummary,
    DetailedSection,
    ShortCard,
    TopicBlock,
)
from yorisoi.exceptions import MarkerStoreError
from yorisoi.infrastructure.interfaces import MarkerStore


def _summary(points: int = 3) -> ConsolidatedSummary:
    return ConsolidatedSummary(
        mode="normal",
        short=ShortCard(
            greeting="はい、承知しました。今日の診察をまとめました。",
            top_summary=["血圧の薬を続けます。"],
            top_actions=["毎朝血圧を測る"],
            top_red_flags=["めまいが続くとき"],
        ),
        detailed=DetailedSection(
            topics=[
                TopicBlock(title="お薬", points=[f"説明{i}です。" for i in range(points)])
            ],
            timeline=["二週間後に再診"],
            lifestyle_notes=["塩分を控える"],
            safety_footer="心配なときは病院へ連絡してください。",
        ),
    )


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("はい、承知しました。血圧の話でした。", "血圧の話でした。"),
        ("はい。了解いたしました。内容です", "内容です"),
        ("要約：内容です", "内容です"),
        ("まとめ: 内容です", "内容です"),
        ("内容です", "内容です"),
    ],
)
def test_strip_assistant_preamble(raw: str, expected: str) -> None:
    assert strip_assistant_preamble(raw) == expected


def test_format_short_renders_card() -> None:
    message = format_short(_summary(), "normal")
    assert message.startswith("■診察メモ\n\n今日の診察をまとめました。")
    assert "【すること】\n- 毎朝血圧を測る" in message
    assert "【注意サイン】\n- めまいが続くとき" in message
    assert message.endswith(DETAIL_FOLLOWS)


def test_format_short_header_follows_mode() -> None:
    assert format_short(_summary(), "surgery").startswith("■手術説明メモ")
    assert format_short(_summary(), "bridge").startswith("■やりとりメモ")


def test_format_short_respects_limit() -> None:
    assert len(format_short(_summary(), "normal", limit=20)) == 20


def test_format_detail_slices_without_losing_text() -> None:
    summary = _summary(points=400)
    whole = format_detail(summary, "normal", limit=1_000_000)
    messages = format_detail(summary, "normal", limit=500)

    assert len(whole) == 1
    assert len(messages) > 1
    assert all(len(m) <= 500 for m in messages)
    assert "".join(messages) == whole[0]
    assert "説明399です。" in whole[0]
    assert "【日程・流れ】\n- 二週間後に再診" in whole[0]


def test_format_document_includes_transcript() -> None:
    document = format_document(_summary(), "先生: 血圧はどうですか。")
    assert document.startswith("■診察メモ")
    assert "【お薬】" in document
    assert document.endswith("■文字起こし\n先生: 血圧はどうですか。")


def test_claim_succeeds_once_then_skips() -> None:
    gate = DeliveryGate(InMemoryMarkerStore())
    assert gate.try_claim("job-1").acquired is True
    assert gate.try_claim("job-1").acquired is False
    assert gate.try_claim("job-2").acquired is True


def test_claim_writes_delivery_marker() -> None:
    markers = InMemoryMarkerStore()
    DeliveryGate(markers).try_claim("job-1")
    assert list(markers.markers) == ["deliveries/job-1.done"]


def test_concurrent_claims_yield_exactly_one_winner() -> None:
    gate = DeliveryGate(InMemoryMarkerStore())
    barrier = threading.Barrier(16)
    results: list[bool] = []
    lock = threading.Lock()

    def claim() -> None:
        barrier.wait()
        acquired = gate.try_claim("job-race").acquired
        with lock:
            results.append(acquired)

    threads = [threading.Thread(target=claim) for _ in range(16)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(results) == [False] * 15 + [True]


def test_marker_store_failure_propagates() -> None:
    class BrokenStore(MarkerStore):
        def create_if_absent(self, key: str, value: str) -> bool:
            raise MarkerStoreError(key)

    with pytest.raises(MarkerStoreError):
        DeliveryGate(BrokenStore()).try_claim("job-1")
