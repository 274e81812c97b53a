"""
Feedback generator backed by a local Ollama completion endpoint.

Every public method resolves to a value: a parsed payload when the model
answers with usable JSON, otherwise the deterministic fallback from
FallbackResponses. Failures are logged and never propagate, so saving a
response or recording a practice attempt cannot be blocked by the model.
"""
import asyncio
from typing import Any, Dict, List, Optional
import httpx
from answerbank.exceptions import AIServiceError, UpstreamUnavailableError, InvalidResponseError
from answerbank.models.schemas import ResponseFeedback, PracticeFeedback, StarValidation
from answerbank.utils.fallback_responses import FallbackResponses
from answerbank.utils.prompt_templates import PromptTemplates
from answerbank.utils.response_parser import parse_json_reply, parse_model, parse_string_list, validate_payload
from answerbank.utils.text_metrics import count_words, estimate_duration_seconds
from answerbank.utils.logger import get_logger

logger = get_logger(__name__)


class FeedbackGenerator:
    """Client for the feedback model with a bounded-time, never-raising contract."""

    def __init__(
        self,
        base_url: str,
        model: str = "llama3.2",
        timeout: float = 30.0,
        temperature: float = 0.7,
        max_tokens: int = 1500,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.api_url = f"{self.base_url}/api/generate"
        logger.info(f"Feedback generator using {self.model} at {self.base_url}")

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "FeedbackGenerator":
        return cls(**config)

    async def _generate(self, prompt: str, max_tokens: Optional[int] = None) -> str:
        """Issue one completion request and return the raw reply text."""
        payload = {
            "model": self.model,
            "prompt": PromptTemplates.with_json_instruction(prompt),
            "stream": False,
            "options": {
                "temperature": self.temperature,
                "num_predict": max_tokens or self.max_tokens,
            },
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await asyncio.wait_for(
                    client.post(self.api_url, json=payload),
                    timeout=self.timeout,
                )
        except asyncio.TimeoutError:
            raise UpstreamUnavailableError(f"Feedback service timed out after {self.timeout}s")
        except httpx.HTTPError as e:
            raise UpstreamUnavailableError(f"Feedback service unavailable: {e}")

        if response.status_code != 200:
            raise UpstreamUnavailableError(
                f"Feedback service returned {response.status_code}",
                context={"body": response.text[:200]},
            )

        try:
            body = response.json()
        except ValueError:
            raise InvalidResponseError("Feedback service returned a non-JSON envelope")
        if not isinstance(body, dict):
            raise InvalidResponseError("Feedback service envelope is not an object")
        return str(body.get("response", "")).strip()

    async def analyze(self, text: str, question_type: str) -> ResponseFeedback:
        """Score a prepared response; word count and duration are always computed locally."""
        word_count = count_words(text)
        local_metrics = {
            "word_count": word_count,
            "estimated_duration_seconds": estimate_duration_seconds(word_count),
        }

        try:
            reply = await self._generate(PromptTemplates.get_analysis_prompt(text, question_type))
            return parse_model(reply, ResponseFeedback, extra=local_metrics)
        except AIServiceError as e:
            logger.warning(f"Response analysis unavailable, using fallback: {e}")
        except Exception as e:
            logger.error(f"Unexpected error analyzing response: {e}")
        return FallbackResponses.get_fallback_analysis(text)

    async def compare_practice(self, original_text: str, practice_text: str, question_type: str) -> PracticeFeedback:
        """Score a practice attempt against the prepared response."""
        prompt = PromptTemplates.get_practice_comparison_prompt(original_text, practice_text, question_type)
        try:
            reply = await self._generate(prompt)
            return self._parse_practice_feedback(reply)
        except AIServiceError as e:
            logger.warning(f"Practice feedback unavailable, using fallback: {e}")
        except Exception as e:
            logger.error(f"Unexpected error comparing practice attempt: {e}")
        return FallbackResponses.get_fallback_practice_feedback()

    async def validate_star_method(self, text: str) -> StarValidation:
        """Check whether a response covers Situation, Task, Action and Result."""
        try:
            reply = await self._generate(PromptTemplates.get_star_validation_prompt(text), max_tokens=1200)
            return parse_model(reply, StarValidation)
        except AIServiceError as e:
            logger.warning(f"STAR validation unavailable, using fallback: {e}")
        except Exception as e:
            logger.error(f"Unexpected error validating STAR structure: {e}")
        return FallbackResponses.get_fallback_star_validation()

    async def suggest_improvements(self, text: str, question_type: str, tags: Optional[List[str]] = None) -> List[str]:
        """Free-form improvement suggestions for a response."""
        try:
            reply = await self._generate(
                PromptTemplates.get_improvements_prompt(text, question_type, tags),
                max_tokens=800,
            )
            suggestions = parse_string_list(reply)
            if suggestions:
                return suggestions
            logger.warning("Improvement suggestions were empty, using fallback")
        except AIServiceError as e:
            logger.warning(f"Improvement suggestions unavailable, using fallback: {e}")
        except Exception as e:
            logger.error(f"Unexpected error suggesting improvements: {e}")
        return FallbackResponses.get_fallback_improvements()

    def _parse_practice_feedback(self, reply: str) -> PracticeFeedback:
        # Models sometimes nest the lists under "feedback" and name the note
        # "comparison_to_original"; both shapes are accepted.
        data = parse_json_reply(reply, dict)
        nested = data.pop("feedback", None)
        if isinstance(nested, dict):
            for key, value in nested.items():
                data.setdefault(key, value)
        if "comparison_note" not in data and "comparison_to_original" in data:
            data["comparison_note"] = data.pop("comparison_to_original")
        return validate_payload(data, PracticeFeedback)

    async def health_check(self) -> bool:
        """Return True if the Ollama server answers its tags endpoint."""
        try:
            async with httpx.AsyncClient(timeout=5.0) as client:
                response = await client.get(f"{self.base_url}/api/tags")
            return response.status_code == 200
        except Exception as e:
            logger.warning(f"Feedback service health check failed: {e}")
            return False
