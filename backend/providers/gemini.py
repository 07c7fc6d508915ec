# providers/gemini.py
# Gemini text generation for venue recommendations (google-genai, async client)

from __future__ import annotations

from typing import Optional

from google import genai

import config

_client: Optional[genai.Client] = None


def _get_client() -> genai.Client:
    global _client
    if _client is None:
        if not config.GEMINI_API_KEY:
            raise RuntimeError("GEMINI_API_KEY missing")
        _client = genai.Client(api_key=config.GEMINI_API_KEY)
    return _client


async def generate_text(prompt: str) -> str:
    response = await _get_client().aio.models.generate_content(
        model=config.GEMINI_MODEL,
        contents=prompt,
    )
    if not response or not response.text:
        raise RuntimeError("Empty Gemini response")
    return response.text.strip()
