"""
Claude AI integration service for leaf disease classification.

Sends the leaf photo to the vision model, validates the structured JSON
answer against LeafClassificationSchema and retries conversationally when
the model returns malformed output.
"""

import json
import re
import base64
import asyncio
import random
import logging
from pathlib import Path
from functools import wraps

from anthropic import Anthropic
import anthropic
import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from phytoscan.config import settings
from phytoscan.services.ai_schemas import LeafClassificationSchema
from phytoscan.services.prompts import (
    LEAF_CLASSIFICATION_SYSTEM_PROMPT,
    LEAF_CLASSIFICATION_USER_PROMPT,
)


logger = logging.getLogger(__name__)


def _strip_markdown_json(text: str) -> str:
    """Strip markdown code block wrappers from JSON text."""
    if "```json" in text:
        text = text.split("```json")[1].split("```")[0].strip()
    elif "```" in text:
        text = text.split("```")[1].split("```")[0].strip()
    return text


def _fix_trailing_commas(text: str) -> str:
    """Fix trailing commas in JSON (common LLM error)."""
    text = re.sub(r",\s*}", "}", text)
    text = re.sub(r",\s*]", "]", text)
    return text


def retry_on_connection_error(max_attempts=3, base_delay=1.0):
    """
    Retry decorator for API calls that may fail due to transient network issues.

    Args:
        max_attempts: Maximum retry attempts (default 3)
        base_delay: Base delay in seconds for exponential backoff (default 1.0)
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            last_exception = None

            for attempt in range(max_attempts):
                try:
                    return await func(*args, **kwargs)
                except anthropic.APIConnectionError as e:
                    last_exception = e

                    if attempt < max_attempts - 1:
                        # Exponential backoff with jitter
                        delay = base_delay * (2**attempt)
                        jitter = delay * 0.1 * (2 * random.random() - 1)
                        sleep_time = delay + jitter

                        logger.warning(
                            "Connection error on attempt %d/%d, retrying in %.1fs...",
                            attempt + 1,
                            max_attempts,
                            sleep_time,
                        )
                        await asyncio.sleep(sleep_time)
                    else:
                        logger.error("All %d attempts failed", max_attempts)

            raise ServiceUnavailableError(
                "AI service temporarily unavailable after retries"
            ) from last_exception

        return wrapper

    return decorator


class ClaudeService:
    """Claude vision integration for leaf classification."""

    def __init__(self):
        timeout = httpx.Timeout(
            timeout=settings.anthropic_timeout,
            connect=settings.anthropic_connect_timeout,
        )
        self.client = Anthropic(api_key=settings.anthropic_api_key, timeout=timeout)
        self.vision_model = settings.vision_model

    # =========================================================================
    # SCHEMA VALIDATION + CONVERSATIONAL RETRY
    # =========================================================================

    def _call_with_schema_retry(
        self,
        messages: list[dict],
        schema_class: type[BaseModel],
        request_params: dict,
        max_retries: int = 2,
        prefill: str | None = "{",
    ) -> tuple[dict, str, object]:
        """
        Call Claude API with JSON schema validation and conversational retry.

        On schema failure: appends the bad response + error feedback to messages,
        re-calls with full conversation context so the LLM can self-correct.

        Args:
            messages: The messages list (will be mutated on retry)
            schema_class: Pydantic model class to validate against
            request_params: Dict of params for client.messages.create
                            (model, max_tokens, system, etc.)
                            NOTE: do NOT include 'messages' - they're passed separately
            max_retries: Number of retry attempts after initial call (default 2, so 3 total)
            prefill: Assistant prefill string, or None for no prefill

        Returns:
            (validated_dict, raw_response_text, response_object) tuple

        Raises:
            ValueError: If all attempts fail schema validation
        """
        for attempt in range(1 + max_retries):
            call_messages = list(messages)
            if prefill:
                call_messages.append({"role": "assistant", "content": prefill})

            response = self.client.messages.create(
                messages=call_messages,
                **request_params,
            )

            response_text = ""
            for block in response.content:
                if hasattr(block, "text"):
                    response_text += block.text

            if not response_text:
                if attempt < max_retries:
                    messages.append(
                        {"role": "assistant", "content": "(empty response)"}
                    )
                    messages.append(
                        {
                            "role": "user",
                            "content": "Your response contained no text. Please respond with valid JSON.",
                        }
                    )
                    continue
                raise ValueError("No text content in AI response after retries")

            # Reconstruct JSON (handle prefill)
            raw_text = response_text.strip()
            json_str = (prefill or "") + raw_text if prefill else raw_text

            json_str = _strip_markdown_json(json_str)
            json_str = _fix_trailing_commas(json_str)

            try:
                parsed = json.loads(json_str)
                adapter = TypeAdapter(schema_class)
                validated = adapter.validate_python(parsed)
                return validated.model_dump(), raw_text, response
            except (json.JSONDecodeError, ValidationError) as e:
                error_msg = str(e)
                logger.warning(
                    "AI response schema validation failed (attempt %d/%d) for %s: %s",
                    attempt + 1,
                    1 + max_retries,
                    schema_class.__name__,
                    error_msg,
                )

                if attempt < max_retries:
                    messages.append(
                        {
                            "role": "assistant",
                            "content": (prefill or "") + raw_text,
                        }
                    )
                    messages.append(
                        {
                            "role": "user",
                            "content": (
                                f"Your response had a schema error:\n{error_msg}\n\n"
                                f"Please fix and return valid JSON matching the required schema."
                            ),
                        }
                    )
                    continue

                raise ValueError(
                    f"AI response failed schema validation after {1 + max_retries} attempts: {error_msg}"
                )

        raise ValueError("AI response failed schema validation")

    # =========================================================================
    # LEAF CLASSIFICATION
    # =========================================================================

    @retry_on_connection_error(max_attempts=3, base_delay=1.0)
    async def classify_leaf_image(self, image_path: str) -> dict:
        """
        Classify the disease stage of a leaf photo.

        Args:
            image_path: Path to uploaded leaf image

        Returns:
            {
                "stage": DiseaseStage.SPREADING,
                "confidence": 0.87,
                "lesion_count": 9,
                "avg_lesion_size": 4.5,
                "explanation": "...",
                "reasoning_for_farmer": "...",
                "detected_symptoms": ["ringed brown spots"],
                "visual_evidence_regions": "center left",
                "raw_response": "...",
                "model": "claude-sonnet-4-5-20250929"
            }

        Raises:
            ServiceUnavailableError: AI service temporarily down
            RateLimitError: Too many requests
            ValueError: Invalid response or request error
        """
        image_data = self._load_image_base64(image_path)
        media_type = self._get_media_type(image_path)

        messages = [
            {
                "role": "user",
                "content": [
                    {
                        "type": "image",
                        "source": {
                            "type": "base64",
                            "media_type": media_type,
                            "data": image_data,
                        },
                    },
                    {"type": "text", "text": LEAF_CLASSIFICATION_USER_PROMPT},
                ],
            }
        ]

        try:
            validated, raw_text, _response = self._call_with_schema_retry(
                messages=messages,
                schema_class=LeafClassificationSchema,
                request_params={
                    "model": self.vision_model,
                    "max_tokens": 1024,
                    "system": LEAF_CLASSIFICATION_SYSTEM_PROMPT,
                },
            )
        except anthropic.RateLimitError as e:
            raise RateLimitError(
                "Too many requests, please try again in 1 minute"
            ) from e
        except anthropic.APIStatusError as e:
            if e.status_code >= 500:
                raise ServiceUnavailableError("AI service error") from e
            raise ValueError(f"Request error: {e.message}") from e

        logger.info(
            "Classified %s as %s (confidence %.2f)",
            Path(image_path).name,
            validated["stage"].value,
            validated["confidence"],
        )

        return {
            **validated,
            "raw_response": raw_text,
            "model": self.vision_model,
        }

    # =========================================================================
    # HELPER METHODS
    # =========================================================================

    def _load_image_base64(self, image_path: str) -> str:
        """Load image file and encode as base64."""
        with open(image_path, "rb") as f:
            return base64.standard_b64encode(f.read()).decode("utf-8")

    def _get_media_type(self, image_path: str) -> str:
        """Determine media type from file extension."""
        suffix = Path(image_path).suffix.lower()
        media_types = {
            ".jpg": "image/jpeg",
            ".jpeg": "image/jpeg",
            ".png": "image/png",
            ".gif": "image/gif",
            ".webp": "image/webp",
        }
        return media_types.get(suffix, "image/jpeg")


# =============================================================================
# CUSTOM EXCEPTIONS
# =============================================================================


class ServiceUnavailableError(Exception):
    """AI service is temporarily unavailable."""

    pass


class RateLimitError(Exception):
    """Rate limit exceeded."""

    pass
