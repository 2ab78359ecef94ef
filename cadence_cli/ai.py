"""
AI-Assisted Second Opinion
──────────────────────────
Optional. Asks a hosted model how likely a commit (or a page of text) was
machine-generated. It never feeds the detection engine; the CLI prints its
answer next to the engine's verdict.

Every public method returns ``{"score": float, "reason": str}``. A score of
-1.0 means no opinion: disabled, not configured, or the provider failed.
"""

import json
import logging
import re

from cadence_cli.config import AIConfig
from cadence_cli.errors import AIAnalysisError

logger = logging.getLogger(__name__)

NO_OPINION = -1.0
MAX_DIFF_CHARS = 6000
MAX_TEXT_CHARS = 8000

SUPPORTED_PROVIDERS = ("openai", "anthropic")

_SYSTEM_PROMPT = (
    "You are an expert reviewer who estimates whether content was written by an AI "
    "code assistant or by a human. Answer ONLY with JSON of the form "
    '{"score": <0.0-1.0 likelihood of AI generation>, "reason": "<one sentence>"}.'
)

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def parse_reply(text: str) -> dict:
    match = _JSON_OBJECT.search(text or "")
    if not match:
        raise AIAnalysisError(f"provider reply is not JSON: {text[:80]!r}")
    try:
        data = json.loads(match.group(0))
        score = float(data["score"])
    except (ValueError, KeyError, TypeError) as exc:
        raise AIAnalysisError(f"malformed provider reply: {text[:80]!r}") from exc
    return {"score": min(max(score, 0.0), 1.0), "reason": str(data.get("reason", "")).strip()}


class AIAnalyzer:
    def __init__(self, config: AIConfig):
        self.config = config
        self._client = None

    @property
    def available(self) -> bool:
        return (
            self.config.enabled
            and bool(self.config.api_key)
            and self.config.provider in SUPPORTED_PROVIDERS
        )

    def _load_client(self):
        if self._client is None:
            if self.config.provider == "anthropic":
                import anthropic

                self._client = anthropic.Anthropic(api_key=self.config.api_key)
            else:
                import openai

                self._client = openai.OpenAI(api_key=self.config.api_key)
        return self._client

    def _complete(self, prompt: str) -> str:
        client = self._load_client()
        if self.config.provider == "anthropic":
            response = client.messages.create(
                model=self.config.model,
                max_tokens=200,
                system=_SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            )
            return "".join(getattr(block, "text", "") for block in response.content)

        response = client.chat.completions.create(
            model=self.config.model,
            max_tokens=200,
            temperature=0,
            messages=[
                {"role": "system", "content": _SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
        )
        return response.choices[0].message.content or ""

    def _ask(self, prompt: str) -> dict:
        if not self.available:
            return {"score": NO_OPINION, "reason": "AI analysis disabled or not configured"}
        try:
            return parse_reply(self._complete(prompt))
        except AIAnalysisError as exc:
            logger.warning("AI analysis failed: %s", exc)
            return {"score": NO_OPINION, "reason": f"AI analysis failed: {str(exc)[:60]}"}
        except Exception as exc:  # provider SDKs raise their own hierarchies
            logger.warning("AI provider %s error: %s", self.config.provider, exc)
            return {"score": NO_OPINION, "reason": f"AI provider error: {str(exc)[:60]}"}

    def analyze_commit(self, message: str, diff: str) -> dict:
        prompt = (
            f"Commit message:\n{message.strip()}\n\n"
            f"Diff (truncated):\n{diff[:MAX_DIFF_CHARS]}"
        )
        return self._ask(prompt)

    def analyze_text(self, text: str) -> dict:
        return self._ask(f"Text (truncated):\n{text[:MAX_TEXT_CHARS]}")
