"""
Main poster analyzer that coordinates encoding, extraction and session state.
"""

import logging
import time
from pathlib import Path
from typing import Optional, Tuple, Union

from .claude_client import ClaudePosterClient
from .data_models import LABELS, PosterMetadata
from .exceptions import (
    ExtractionError,
    FieldRefreshError,
    ImageEncodingError,
    RefreshInProgressError,
    UnknownFieldError,
)
from .image_encoder import EncodedImage, encode_image_bytes, encode_image_file
from .store import MetadataStore


logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "Terjadi kesalahan yang tidak diketahui."


class PosterAnalyzer:
    """Handles user interactions for one poster session."""

    def __init__(self, client: ClaudePosterClient, store: Optional[MetadataStore] = None):
        """
        Initialize poster analyzer.

        Args:
            client: Configured Claude poster client
            store: Session state, a fresh store if omitted
        """
        self.client = client
        self.store = store or MetadataStore()

    async def analyze_upload(self, data: bytes, filename: Optional[str] = None) -> Optional[PosterMetadata]:
        """
        Analyze an uploaded poster image.

        Args:
            data: Raw image bytes
            filename: Original filename

        Returns:
            PosterMetadata, or None when the analysis failed (see ``store.error``)
        """
        _, metadata = await self.upload(data, filename)
        return metadata

    async def upload(self, data: bytes,
                     filename: Optional[str] = None) -> Tuple[int, Optional[PosterMetadata]]:
        """
        Analyze an uploaded poster image within a new session.

        Returns:
            The session generation started by this upload and the metadata,
            or None in its place when the analysis failed or was superseded
        """
        generation = self.store.begin_session()
        try:
            image = encode_image_bytes(data, filename)
        except ImageEncodingError as e:
            return generation, self._fail(generation, e)
        return generation, await self._extract(image, generation)

    async def analyze_file(self, image_path: Union[str, Path]) -> Optional[PosterMetadata]:
        """
        Analyze a poster image file.

        Args:
            image_path: Path to the poster image file

        Returns:
            PosterMetadata, or None when the analysis failed (see ``store.error``)
        """
        generation = self.store.begin_session()
        try:
            image = encode_image_file(image_path)
        except ImageEncodingError as e:
            return self._fail(generation, e)
        return await self._extract(image, generation)

    async def _extract(self, image: EncodedImage, generation: int) -> Optional[PosterMetadata]:
        start_time = time.time()
        self.store.image = image
        logger.info(f"Analyzing poster ({image.media_type}, {len(image.data)} base64 chars)")

        try:
            metadata = await self.client.extract_metadata(image)
        except ExtractionError as e:
            return self._fail(generation, e)
        except Exception as e:
            logger.exception(f"Error during poster analysis: {e}")
            return self._fail(generation, e, UNEXPECTED_ERROR_MESSAGE)

        if not self.store.replace(metadata, generation):
            return None

        self.store.loading = False
        logger.info(f"Analysis completed in {time.time() - start_time:.2f} seconds")
        return metadata

    def _fail(self, generation: int, error: Exception, message: Optional[str] = None) -> None:
        logger.error(f"Poster analysis failed: {error}")
        if self.store.is_current(generation):
            self.store.error = message or str(error)
            self.store.loading = False
        return None

    def update_field(self, key: str, value: str) -> PosterMetadata:
        """Apply a user edit to one field."""
        return self.store.set_field(key, value)

    async def refresh_field(self, key: str) -> Optional[str]:
        """
        Re-analyse one field and apply the result.

        Args:
            key: camelCase field key

        Returns:
            New value, or None when the session changed while waiting

        Raises:
            RefreshInProgressError: a refresh of this field is already running
            FieldRefreshError: the model request failed; the field is unchanged
        """
        if key not in LABELS:
            raise UnknownFieldError(key)
        if self.store.metadata is None or self.store.image is None:
            raise LookupError("No poster has been analysed yet")
        if not self.store.begin_refresh(key):
            raise RefreshInProgressError(f"Field {key} is already being refreshed")

        generation = self.store.generation
        try:
            value = await self.client.reanalyze_field(self.store.image, key, self.store.metadata)
        except Exception as e:
            logger.error(f"Failed to refresh field {key}: {e}")
            raise FieldRefreshError() from e
        finally:
            if self.store.is_current(generation):
                self.store.end_refresh(key)

        if not self.store.is_current(generation) or self.store.metadata is None:
            logger.warning(f"Discarding stale refresh result for {key}")
            return None

        self.store.set_field(key, value)
        return value

    def reset(self) -> None:
        """Discard the current poster and record."""
        logger.info("Resetting poster session")
        self.store.clear()
