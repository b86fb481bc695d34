"""
Generative AI Client

Talks to any OpenAI-compatible chat completion API through the openai
library. The default base URL is Gemini's OpenAI-compatible endpoint.

AI is used ONLY for the readiness analysis: the model produces the score,
skill gaps, company matches and action plan. Nothing is scored locally.
"""
import json
import logging
import re

from openai import OpenAI
from app.core.config import get_settings
from app.services.prompts import SYSTEM_PROMPT, build_analysis_prompt

logger = logging.getLogger(__name__)

settings = get_settings()

# Outermost {...} block, greedy so nested objects stay intact
JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")


class AIResponseError(ValueError):
    """The model answered, but not with a usable JSON object."""


class GenerativeAIClient:
    """
    Wrapper around the chat completion API.
    """

    def __init__(self, client: OpenAI = None, model: str = None):
        self.client = client or OpenAI(
            api_key=settings.ai_api_key,
            base_url=settings.ai_base_url
        )
        self.model = model or settings.ai_model

    def _call_api(self, system_prompt: str, user_content: str, max_tokens: int = 1000) -> str:
        """
        Internal method to call the chat completion API.
        Returns raw text response.
        """
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content}
            ],
            max_tokens=max_tokens,
            temperature=settings.ai_temperature
        )
        return response.choices[0].message.content or ""

    def _extract_json(self, text: str) -> dict:
        """
        Extract JSON from API response.
        Handles markdown code fences and prose around the object.
        """
        text = text.strip()
        if text.startswith("```json"):
            text = text[7:]
        if text.startswith("```"):
            text = text[3:]
        if text.endswith("```"):
            text = text[:-3]

        match = JSON_OBJECT_PATTERN.search(text)
        if not match:
            raise AIResponseError("Invalid response format from AI model")

        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise AIResponseError(f"Invalid response format from AI model: {e.msg}") from e

        if not isinstance(data, dict):
            raise AIResponseError("Invalid response format from AI model")
        return data

    def analyze_profile(self, profile: dict, resume_text: str = None, requirements_text: str = None) -> dict:
        """
        Send profile + documents with the fixed analysis prompt.
        Returns the raw parsed JSON (validate before use).
        """
        prompt = build_analysis_prompt(profile, resume_text, requirements_text)
        logger.info("Requesting readiness analysis from %s (%d prompt chars)", self.model, len(prompt))
        response = self._call_api(SYSTEM_PROMPT, prompt, max_tokens=settings.ai_max_tokens)
        return self._extract_json(response)

    def test_connection(self) -> bool:
        """Test if the AI API is reachable"""
        try:
            response = self._call_api(
                "You are a test assistant.",
                "Reply with exactly: OK",
                max_tokens=10
            )
            return "OK" in response.upper()
        except Exception as e:
            logger.warning("AI connection failed: %s", e)
            return False


# Singleton instance
_ai_client: GenerativeAIClient = None


def get_ai_client() -> GenerativeAIClient:
    """Get or create the AI client (singleton pattern)"""
    global _ai_client
    if _ai_client is None:
        _ai_client = GenerativeAIClient()
    return _ai_client
