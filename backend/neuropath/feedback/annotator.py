import asyncio
import logging

from openai import AsyncOpenAI

from core.config import LLM_API_KEY, LLM_BASE_URL, LLM_ENABLED, LLM_MODEL, LLM_TIMEOUT_SEC
from neuropath.difficulty.advisor import difficulty_name
from neuropath.feedback.messages import encouragement_for
from neuropath.scoring.models import DifficultyDecision, ScoreBreakdown
from neuropath.system_metrics import increment_metric

logger = logging.getLogger("neuropath.feedback.annotator")

MAX_MESSAGE_CHARS = 280


def _build_prompt(decision: DifficultyDecision, breakdown: ScoreBreakdown | None) -> str:
    lines = [
        "Write one short, warm encouragement sentence for a patient doing cognitive rehabilitation games.",
        f"Outcome: {decision.reason_code.value}; next level: {difficulty_name(decision.recommended_level)}.",
    ]
    if breakdown is not None:
        lines.append(
            f"Latest session: score {breakdown.overall_score}/100, accuracy {breakdown.accuracy_percent:.0f}%."
        )
    lines.append("Do not mention numbers above 100. Reply with the sentence only.")
    return "\n".join(lines)


class EncouragementAnnotator:
    """Optional natural-language layer on top of a difficulty decision.

    Talks to an OpenAI-compatible local server (LM Studio, Ollama). The
    decision itself is never altered; any failure yields the static message.
    """

    def __init__(
        self,
        enabled: bool = LLM_ENABLED,
        client: AsyncOpenAI | None = None,
        model: str = LLM_MODEL,
        timeout_sec: float = LLM_TIMEOUT_SEC,
    ):
        self.enabled = bool(enabled)
        self.model = model
        self.timeout_sec = max(0.1, float(timeout_sec))
        self.client = client
        if self.client is None and self.enabled:
            self.client = AsyncOpenAI(base_url=LLM_BASE_URL, api_key=LLM_API_KEY)

    async def annotate(self, decision: DifficultyDecision, breakdown: ScoreBreakdown | None = None) -> str:
        fallback = encouragement_for(decision)
        if not self.enabled or self.client is None:
            return fallback

        try:
            response = await asyncio.wait_for(
                self.client.chat.completions.create(
                    model=self.model,
                    messages=[
                        {"role": "system", "content": "You are a supportive rehabilitation coach."},
                        {"role": "user", "content": _build_prompt(decision, breakdown)},
                    ],
                    temperature=0.7,
                    max_tokens=80,
                ),
                timeout=self.timeout_sec,
            )
            message = str(response.choices[0].message.content or "").strip()
        except asyncio.TimeoutError:
            logger.warning("annotate timeout | timeout_sec=%s", self.timeout_sec)
            increment_metric("annotation_fallbacks")
            return fallback
        except Exception as exc:
            logger.warning("annotate failure | err=%s", exc)
            increment_metric("annotation_fallbacks")
            return fallback

        if not message:
            increment_metric("annotation_fallbacks")
            return fallback

        increment_metric("annotations_generated")
        return message[:MAX_MESSAGE_CHARS]
