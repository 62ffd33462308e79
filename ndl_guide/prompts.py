"""Prompt templates for intent extraction and grounded answers."""

from __future__ import annotations

from ndl_guide.models import EvidenceItem

CITE_TAG = "cite"


def build_intent_prompt(message: str) -> str:
    return f"""
ユーザーの質問から、国立国会図書館の歴史資料を検索するための情報を抽出してください。
あなたは歴史と地域文化に精通した案内人です。質問に含まれる単語を「歴史的な関連語」へ能動的に広げて抽出してください。

【知識拡張の例】
- 地名: 「愛知県」→「尾張」「三河」「名古屋」「犬山」「津島」など旧国名や主要都市
- 現象: 「体調不良」「病気」→「憑物」「狐憑」「障り」「祟り」「病魔」「邪気」「物の怪」「死霊」
- 事件: 「犯罪」「事件」→「裁判」「実録」「奇談」「珍事」「獄」「騒動」
- ジャンル: 「怪異」→「怪談」「奇談」「百物語」「怪異」「化物」「幽霊」「不思議」

【出力形式】
以下のJSON形式のみで出力してください：
{{
  "query": "書籍検索用のクエリ。地名やジャンルなどを組み合わせた2〜3語（例：'尾張 怪談'）",
  "focusKeywords": ["資料内検索用の具体的単語（5〜8個）。拡張した関連語を多く含める"],
  "isRandom": ユーザーが「ランダムに」「何か一つ」などを望んでいる場合は true、それ以外は false
}}

ユーザーの質問: {message}
""".strip()


def render_materials(evidence: list[EvidenceItem]) -> str:
    return "\n\n".join(
        f"資料{idx}: {item.title} (コマ番号: {item.page})\n内容: {item.snippet}"
        for idx, item in enumerate(evidence, start=1)
    )


def build_answer_prompt(message: str, evidence: list[EvidenceItem]) -> str:
    return f"""
あなたは江戸〜明治時代の資料に通じた歴史案内人です。
以下の資料断片（スニペット）だけを読み解き、ユーザーの問い「{message}」に対して、
興味深い物語を語るように、趣のある日本語で解説してください。資料にないことは語らないでください。

【資料内容】
{render_materials(evidence)}

【回答の重要ルール：インライン引用】
- 資料の内容に触れる際、その根拠となる資料の番号（1〜{len(evidence)}）を使い、対象の語句を必ず以下の形式で囲ってください。
- 形式: <{CITE_TAG} id="資料番号">対象語句</{CITE_TAG}>
- 上に示した番号以外は使わないでください。

【解説の指針】
- 珍事、奇談、世相を反映した事件の記録など、歴史の闇や不思議さに焦点を当てて語ってください。
- OCRの誤字は文脈から推測して補完し、当時の空気感が伝わるようにしてください。
- 歴史の案内人として、少し古風な（しかし分かりやすい）口調を崩さないでください。
""".strip()


def build_no_evidence_prompt(message: str) -> str:
    return f"""
ユーザーは「{message}」という質問をしましたが、資料が見つかりませんでした。
歴史案内人に成り代わり、お詫びしつつ、「珍事」「実録」「奇談」「裁判」などのキーワードや、
特定の地名を加えるなどの探索のアドバイスを趣のある口調で伝えてください。
""".strip()
