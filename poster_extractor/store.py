"""
In-memory state of the current poster session.
"""

import logging
from typing import Any, Dict, Optional, Set

from .data_models import LABELS, PosterMetadata
from .exceptions import UnknownFieldError
from .image_encoder import EncodedImage


logger = logging.getLogger(__name__)


class MetadataStore:
    """
    Holds the metadata record of the poster currently being worked on.

    Every new upload and every reset starts a new generation. Results of
    requests issued under an older generation must not be applied; callers
    check ``is_current`` before writing.
    """

    def __init__(self):
        self.metadata: Optional[PosterMetadata] = None
        self.image: Optional[EncodedImage] = None
        self.loading = False
        self.refreshing: Set[str] = set()
        self.error: Optional[str] = None
        self.generation = 0

    def begin_session(self) -> int:
        """Discard the current record and start extraction of a new poster."""
        self.generation += 1
        self.metadata = None
        self.image = None
        self.error = None
        self.refreshing.clear()
        self.loading = True
        return self.generation

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    def replace(self, metadata: PosterMetadata, generation: int) -> bool:
        """Replace the whole record. Returns False if the result is stale."""
        if not self.is_current(generation):
            logger.warning(f"Discarding stale extraction result (generation {generation})")
            return False
        self.metadata = metadata
        return True

    def set_field(self, key: str, value: str) -> PosterMetadata:
        """Set a single field value on the current record."""
        if key not in LABELS:
            raise UnknownFieldError(key)
        if self.metadata is None:
            raise LookupError("No metadata to update")
        self.metadata = self.metadata.with_field(key, value)
        return self.metadata

    def begin_refresh(self, key: str) -> bool:
        """Claim the refresh slot of a field. Returns False if it is taken."""
        if key in self.refreshing:
            return False
        self.refreshing.add(key)
        return True

    def end_refresh(self, key: str) -> None:
        self.refreshing.discard(key)

    def clear(self) -> None:
        """Reset: forget the image and record."""
        self.generation += 1
        self.metadata = None
        self.image = None
        self.loading = False
        self.error = None
        self.refreshing.clear()

    def snapshot(self) -> Dict[str, Any]:
        """Serializable view of the current state."""
        return {
            "generation": self.generation,
            "loading": self.loading,
            "refreshing": sorted(self.refreshing),
            "error": self.error,
            "image": self.image.to_data_uri() if self.image else None,
            "metadata": self.metadata.to_dict() if self.metadata else None,
        }
