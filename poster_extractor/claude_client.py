"""
Claude API client for competition poster extraction.
"""

import json
import logging
from typing import Any, Dict, List, Optional

import anthropic
from pydantic import ValidationError

from .data_models import LABELS, PosterMetadata
from .exceptions import ExtractionFailedError, MalformedResponseError, UnknownFieldError
from .image_encoder import EncodedImage
from .prompts import (
    EXTRACTION_PROMPT,
    EXTRACTION_TOOL_NAME,
    build_reanalysis_prompt,
    build_response_schema,
)


logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-3-5-sonnet-20241022"
DEFAULT_MAX_TOKENS = 4096


class ClaudePosterClient:
    """Claude AI client for extracting metadata from competition posters."""

    def __init__(self, api_key: Optional[str] = None, model: str = DEFAULT_MODEL,
                 max_tokens: int = DEFAULT_MAX_TOKENS,
                 client: Optional[anthropic.AsyncAnthropic] = None):
        """
        Initialize Claude client.

        Args:
            api_key: Anthropic API key
            model: Claude model identifier
            max_tokens: Output token limit per request
            client: Preconfigured async client, used instead of creating one
        """
        self.client = client or anthropic.AsyncAnthropic(api_key=api_key)
        self.model = model
        self.max_tokens = max_tokens

    async def extract_metadata(self, image: EncodedImage) -> PosterMetadata:
        """
        Extract all metadata fields from a poster.

        Args:
            image: Encoded poster image

        Returns:
            PosterMetadata with every field populated

        Raises:
            ExtractionFailedError: the model returned no content
            MalformedResponseError: the content is not valid metadata JSON
        """
        response = await self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=0.1,
            tools=[{
                "name": EXTRACTION_TOOL_NAME,
                "description": "Simpan metadata yang diekstrak dari poster kompetisi",
                "input_schema": build_response_schema(),
            }],
            tool_choice={"type": "tool", "name": EXTRACTION_TOOL_NAME},
            messages=[{
                "role": "user",
                "content": [
                    self._image_block(image),
                    {"type": "text", "text": EXTRACTION_PROMPT},
                ],
            }],
        )

        for block in response.content:
            if block.type == "tool_use" and block.name == EXTRACTION_TOOL_NAME:
                return self._parse_metadata(block.input)

        response_text = self._collect_text(response.content)
        if not response_text:
            logger.error("Claude returned no extraction content")
            raise ExtractionFailedError()

        return self._parse_metadata(self._parse_json_text(response_text))

    async def reanalyze_field(self, image: EncodedImage, field_key: str,
                              current: PosterMetadata) -> str:
        """
        Re-derive the value of a single field.

        The record itself is not modified; the caller applies the returned value.

        Args:
            image: Encoded poster image
            field_key: camelCase key of the field to re-analyse
            current: Current metadata, used as context

        Returns:
            Trimmed replacement value, or an empty string
        """
        if field_key not in LABELS:
            raise UnknownFieldError(field_key)

        prompt = build_reanalysis_prompt(field_key, current.get(field_key))

        response = await self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            messages=[{
                "role": "user",
                "content": [
                    self._image_block(image),
                    {"type": "text", "text": prompt},
                ],
            }],
        )

        value = self._collect_text(response.content).strip()
        logger.info(f"Re-analysed field {field_key} ({len(value)} chars)")
        return value

    @staticmethod
    def _image_block(image: EncodedImage) -> Dict[str, Any]:
        return {
            "type": "image",
            "source": {
                "type": "base64",
                "media_type": image.media_type,
                "data": image.data,
            },
        }

    @staticmethod
    def _collect_text(content: List[Any]) -> str:
        return "".join(block.text for block in content if block.type == "text")

    @staticmethod
    def _parse_json_text(response_text: str) -> Any:
        """Parse the JSON object embedded in a text response."""
        json_start = response_text.find('{')
        json_end = response_text.rfind('}') + 1

        if json_start == -1 or json_end <= json_start:
            logger.error("No JSON found in Claude response")
            logger.debug(f"Raw response: {response_text}")
            raise MalformedResponseError()

        try:
            return json.loads(response_text[json_start:json_end])
        except json.JSONDecodeError as e:
            logger.error(f"JSON decode error: {e}")
            logger.debug(f"Raw response: {response_text}")
            raise MalformedResponseError() from e

    @staticmethod
    def _parse_metadata(payload: Any) -> PosterMetadata:
        """Validate a decoded payload into PosterMetadata."""
        if not isinstance(payload, dict):
            logger.error(f"Expected a JSON object, got {type(payload).__name__}")
            raise MalformedResponseError()

        try:
            metadata = PosterMetadata.from_dict(payload)
        except ValidationError as e:
            logger.error(f"Invalid metadata from Claude: {e}")
            raise MalformedResponseError() from e

        logger.info(f"Successfully parsed poster: {metadata.competition_name}")
        return metadata
