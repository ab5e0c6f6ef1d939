import pytest

from yorisoi.domain.transcript_chunker import split_transcript


def test_short_text_is_one_segment() -> None:
    assert split_transcript("今日は検査の話でした。", max_chars=100) == ["今日は検査の話でした。"]


def test_cuts_after_sentence_end_near_boundary() -> None:
    text = "あ" * 8 + "。" + "い" * 10
    segments = split_transcript(text, max_chars=10, lookahead=3)
    assert segments == ["あ" * 8 + "。", "い" * 10]


def test_cut_keeps_closing_bracket_with_sentence() -> None:
    text = "あ" * 7 + "。」" + "い" * 10
    segments = split_transcript(text, max_chars=10, lookahead=3)
    assert segments[0] == "あ" * 7 + "。」"
    assert "".join(segments) == text


def test_falls_back_to_raw_boundary_without_sentence_end() -> None:
    segments = split_transcript("あ" * 25, max_chars=10, lookahead=3)
    assert segments == ["あ" * 10, "あ" * 10, "あ" * 5]


def test_text_of_exactly_max_chars_is_one_segment() -> None:
    assert split_transcript("あ" * 10, max_chars=10) == ["あ" * 10]


def test_one_char_over_max_chars_is_cut_at_the_boundary() -> None:
    assert split_transcript("あ" * 11, max_chars=10) == ["あ" * 10, "あ"]


def test_whitespace_only_text_yields_no_segments() -> None:
    assert split_transcript("  \n\t ", max_chars=10) == []
    assert split_transcript("", max_chars=10) == []


def test_blank_pieces_are_merged_into_neighbours() -> None:
    text = "あ" * 10 + " " * 10 + "いいい"
    segments = split_transcript(text, max_chars=10, lookahead=0)
    assert segments == ["あ" * 10 + " " * 10, "いいい"]
    assert all(segment.strip() for segment in segments)


def test_leading_blank_piece_is_merged_forward() -> None:
    text = " " * 10 + "あ" * 5
    assert split_transcript(text, max_chars=10, lookahead=0) == [text]


def test_segments_join_back_to_the_transcript() -> None:
    text = "".join(
        f"{i}回目の説明です。お薬は朝と夜に飲んでください！\n質問はありますか？"
        for i in range(200)
    )
    segments = split_transcript(text, max_chars=500, lookahead=80)
    assert "".join(segments) == text
    assert all(len(segment) <= 580 for segment in segments)
    assert len(segments) > 1


def test_rejects_non_positive_max_chars() -> None:
    with pytest.raises(ValueError):
        split_transcript("テキスト", max_chars=0)
