from __future__ import annotations

import json
import os
from typing import Any, Dict, Iterable

from openai import OpenAI

from sqlreviewer.core.findings import OK_CODE, Finding


def _model_name() -> str:
    return os.environ.get("OPENAI_MODEL", "gpt-5")


def generate_review_narrative(sql: str, findings: Iterable[Finding]) -> Dict[str, Any]:
    """
    Ask the model to turn rule findings into:
      - a one-paragraph summary
      - prioritized fixes
      - concrete rewrite hints for the statement
    Returns a JSON-safe dict; a non-JSON reply is kept as {"raw": text}.
    """
    client = OpenAI(api_key=os.environ.get("OPENAI_API_KEY"))

    rule_lines = [
        f"{f.item} [{f.severity}] {f.summary}: {f.content}"
        for f in findings
        if f.item != OK_CODE
    ]

    prompt_text = f"""
You are a senior MySQL DBA reviewing a statement before it ships.
Given the SQL and the rule-based findings below, explain what to fix first.

OUTPUT STRICT JSON with keys:
- "summary" (1 paragraph)
- "priorities" (array of short strings, most important first)
- "rewrite_hints" (array of short strings, concrete changes to the SQL)

SQL:
{sql}

RULE_BASED_FINDINGS:
{chr(10).join(rule_lines) or "none"}

Be practical. Do not repeat findings verbatim, do not invent schema details.
"""

    resp = client.responses.create(
        model=_model_name(),
        input=[
            {
                "role": "user",
                "content": [{"type": "input_text", "text": prompt_text}],
            }
        ],
    )

    text = getattr(resp, "output_text", None)
    if not text:
        text = str(resp)

    try:
        parsed = json.loads(text)
    except ValueError:
        return {"raw": text}
    if not isinstance(parsed, dict):
        return {"raw": text}
    parsed.setdefault("summary", "")
    parsed.setdefault("priorities", [])
    parsed.setdefault("rewrite_hints", [])
    return parsed
