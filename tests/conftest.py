"""
Pytest configuration and fixtures for poster extractor tests.
"""

import io
from typing import Any, Dict
from unittest.mock import AsyncMock, Mock

import pytest

from poster_extractor.claude_client import ClaudePosterClient
from poster_extractor.data_models import PosterMetadata
from poster_extractor.image_encoder import EncodedImage
from poster_extractor.prompts import EXTRACTION_TOOL_NAME


def tool_use_block(payload: Any, name: str = EXTRACTION_TOOL_NAME) -> Mock:
    """Content block as returned by a forced tool call."""
    block = Mock()
    block.type = "tool_use"
    block.name = name
    block.input = payload
    return block


def text_block(text: str) -> Mock:
    block = Mock()
    block.type = "text"
    block.text = text
    return block


def make_response(*blocks) -> Mock:
    response = Mock()
    response.content = list(blocks)
    return response


@pytest.fixture
def metadata_payload() -> Dict[str, str]:
    """Complete extraction payload as the model would return it."""
    return {
        "competitionName": "Lomba Desain Poster Nasional 2024",
        "category": "Desain",
        "registrationDeadline": "30 November 2024",
        "registrationDeadlineIso": "20241130",
        "eventDate": "31 Desember 2024",
        "eventDateIso": "20241231",
        "cost": "GRATIS",
        "teamType": "Individu",
        "status": "Luring",
        "location": "Jakarta",
        "broadcastMessage": "🔥🏆 Ikuti Lomba Desain Poster Nasional 2024! 🚀",
        "link": "https://example.id/daftar",
    }


@pytest.fixture
def sample_metadata(metadata_payload) -> PosterMetadata:
    return PosterMetadata.from_dict(metadata_payload)


@pytest.fixture
def sample_png_bytes() -> bytes:
    """A small real PNG image."""
    from PIL import Image

    buffer = io.BytesIO()
    Image.new('RGB', (64, 48), color='white').save(buffer, format='PNG')
    return buffer.getvalue()


@pytest.fixture
def sample_image_path(tmp_path) -> str:
    """Create a sample JPEG poster file for testing."""
    from PIL import Image

    img = Image.new('RGB', (800, 600), color='white')
    image_path = tmp_path / "test_poster.jpg"
    img.save(image_path)

    return str(image_path)


@pytest.fixture
def encoded_image() -> EncodedImage:
    return EncodedImage(data="aW1hZ2U=", media_type="image/png")


@pytest.fixture
def mock_anthropic_client(metadata_payload):
    """Mock AsyncAnthropic client answering with a forced tool call."""
    mock_client = Mock()
    mock_client.messages.create = AsyncMock(
        return_value=make_response(tool_use_block(metadata_payload))
    )
    return mock_client


@pytest.fixture
def claude_client(mock_anthropic_client) -> ClaudePosterClient:
    return ClaudePosterClient("mock-api-key-for-testing", client=mock_anthropic_client)
