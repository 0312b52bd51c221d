"""Best-effort Gemini text helpers. Every call degrades to a fixed fallback."""
import logging
import re

import google.generativeai as genai

from lifeos.config import DEFAULT_AI_MODEL

logger = logging.getLogger(__name__)

QUOTE_NO_KEY = "Stay hungry, stay foolish. (API Key Missing)"
QUOTE_FALLBACK = "Consistency is the key to mastery."
HINT_NO_KEY = "Configure API Key for AI hints."
HINT_FALLBACK = "Could not fetch hint at this time."
BREAKDOWN_NO_KEY = ["Analyze requirements", "Draft solution", "Implement", "Test"]
BREAKDOWN_FALLBACK = ["Plan", "Execute", "Review"]

QUOTE_PROMPT = (
    "Give me a short, punchy, unique motivational quote for a software engineering "
    "student preparing for tough interviews. Do not include author, just the quote."
)
HINT_PROMPT = (
    'Provide a conceptual hint for the DSA problem "{title}" which involves topics: {topics}. '
    "Do not give the code directly. Explain the intuition or the data structure to use in 2-3 sentences."
)
BREAKDOWN_PROMPT = (
    'Break down the task "{title}" into 3-5 actionable subtasks for a student. '
    "Return only the subtasks as a bulleted list."
)

_BULLET = re.compile(r"^[-*]\s*")


def parse_bullets(text: str) -> list[str]:
    lines = (_BULLET.sub("", line).strip() for line in text.splitlines())
    return [line for line in lines if line]


class Assistant:
    def __init__(self, api_key: str | None = None, model: str = DEFAULT_AI_MODEL):
        self.api_key = api_key
        self.model = model

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _generate(self, prompt: str) -> str:
        genai.configure(api_key=self.api_key)
        response = genai.GenerativeModel(self.model).generate_content(prompt)
        return response.text

    def motivational_quote(self) -> str:
        if not self.enabled:
            return QUOTE_NO_KEY
        try:
            return self._generate(QUOTE_PROMPT).strip()
        except Exception:
            logger.exception("Gemini quote request failed")
            return QUOTE_FALLBACK

    def hint(self, title: str, topics) -> str:
        if not self.enabled:
            return HINT_NO_KEY
        try:
            return self._generate(HINT_PROMPT.format(title=title, topics=", ".join(topics))).strip()
        except Exception:
            logger.exception("Gemini hint request failed for %r", title)
            return HINT_FALLBACK

    def breakdown_task(self, title: str) -> list[str]:
        if not self.enabled:
            return list(BREAKDOWN_NO_KEY)
        try:
            steps = parse_bullets(self._generate(BREAKDOWN_PROMPT.format(title=title)))
        except Exception:
            logger.exception("Gemini task breakdown failed for %r", title)
            return list(BREAKDOWN_FALLBACK)
        return steps or list(BREAKDOWN_FALLBACK)
