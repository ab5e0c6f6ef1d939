"""Prompt templates for chunk summarization and reduction."""

import json

from yorisoi.domain.models import PartialSummary, SummaryMode

_BASE = """あなたは「患者さんの付き添い者が後で見返すための診察メモ」を作る編集者です。
与えられた材料だけを根拠に、AI的な前置きや過剰な敬語は入れず、事実ベースでまとめてください。
憶測や診断は書かないでください。口調は落ち着いた丁寧体（〜です／ます）。出力は必ず JSON のみ。"""

_MODE_GUIDANCE: dict[str, str] = {
    "surgery": (
        "これは手術・処置の説明です。術式、リスク、合併症、術前術後の指示、"
        "日程、同意に関わる内容は一つも省略せず、すべて記録してください。"
    ),
    "bridge": (
        "これは短い会話や経過確認です。話された内容を無理に膨らませず、"
        "確認できた事実と次につながる点だけを簡潔にまとめてください。"
    ),
    "normal": (
        "優先するのは、不安、決まったこと、次回までの約束、注意サインです。"
    ),
}

_CHUNK_SCHEMA = """{
  "summary": "この部分の要点。2〜4行。",
  "action_items": ["患者・付き添い者がすること"],
  "medical": {"terms": ["用語"], "medications": ["薬剤名と用法"], "tests": ["検査"]},
  "lifestyle_notes": ["生活上の注意"],
  "red_flags": ["受診が必要な注意サイン"],
  "follow_up_questions": ["次回医師に確認したいこと"]
}"""

_REDUCE_SCHEMA = """{
  "short": {
    "greeting": "付き添い者への一言（1行）",
    "top_summary": ["最重要の要点（最大3つ）"],
    "top_actions": ["最重要のすること（最大3つ）"],
    "top_red_flags": ["最重要の注意サイン（最大3つ）"]
  },
  "detailed": {
    "topics": [{"title": "話題", "points": ["その話題で話されたことすべて"]}],
    "timeline": ["日程・時系列（例: 2週間後に再診）"],
    "medical": {"terms": [], "medications": [], "tests": []},
    "lifestyle_notes": ["生活上の注意すべて"],
    "questions_for_next_visit": ["次回確認したいこと"],
    "safety_footer": "注意サインが出たときの連絡・受診の目安"
  }
}"""


def chunk_prompt(segment: str, mode: SummaryMode) -> str:
    return (
        f"{_BASE}\n{_MODE_GUIDANCE[mode]}\n"
        "以下は診察の文字起こしの一部です。該当が無い項目は空配列にしてください。\n\n"
        f"# JSON 形式\n{_CHUNK_SCHEMA}\n\n【文字起こし（一部）】\n{segment}"
    )


def reduce_prompt(partials: list[PartialSummary], mode: SummaryMode) -> str:
    material = json.dumps(
        [p.model_dump() for p in partials], ensure_ascii=False, indent=1
    )
    return (
        f"{_BASE}\n{_MODE_GUIDANCE[mode]}\n"
        "以下は一回の診察を区切って要約した結果の一覧です。一つのメモに統合してください。\n"
        "short の各リストは最大3項目。detailed には一覧に含まれる内容を省略せずすべて残し、"
        "重複だけをまとめてください。\n\n"
        f"# JSON 形式\n{_REDUCE_SCHEMA}\n\n【部分要約】\n{material}"
    )
