"""Prompt templates for single and batch translation.

Responsibilities:
- Hold the default prompt templates.
- Render `{source}`, `{target}`, `{text}` and `{texts}` placeholders.
"""

from __future__ import annotations

import json
from typing import Sequence

DEFAULT_SINGLE_PROMPT = (
    'Translate the following text from {source} to {target}: "{text}". '
    "Preserve case sensitivity, keep all emojis as they are, "
    "and maintain capitalization of the first letter if it was in original text. "
    "No commentaries, no extra quotation marks or punctuation marks. "
    'Ex.: "hello", Resp: hola'
)

DEFAULT_BATCH_PROMPT = (
    "Translate the following texts from {source} to {target}. "
    "Preserve case sensitivity, keep all emojis as they are, "
    "and maintain capitalization of the first letter if it was in original text. "
    'Return a JSON object of the form {"translations": [...]} with the translated '
    "strings in the same order. "
    "No commentaries or explanations. Strictly follow the format. "
    "Input texts: {texts}"
)

SINGLE_PLACEHOLDERS = ("{source}", "{target}", "{text}")
BATCH_PLACEHOLDERS = ("{source}", "{target}", "{texts}")


class PromptLibrary:
    """Render configured prompt templates."""

    def __init__(
        self,
        single_template: str = DEFAULT_SINGLE_PROMPT,
        batch_template: str = DEFAULT_BATCH_PROMPT,
    ) -> None:
        self.single_template = single_template
        self.batch_template = batch_template

    def single_prompt(self, text: str, source: str, target: str) -> str:
        """Return the single-text prompt."""

        # Plain replacement; templates legitimately contain JSON braces.
        return (
            self.single_template.replace("{source}", source)
            .replace("{target}", target)
            .replace("{text}", text)
        )

    def batch_prompt(self, texts: Sequence[str], source: str, target: str) -> str:
        """Return the batch prompt with texts embedded as a JSON array."""

        texts_json = json.dumps(list(texts), ensure_ascii=False)
        return (
            self.batch_template.replace("{source}", source)
            .replace("{target}", target)
            .replace("{texts}", texts_json)
        )
