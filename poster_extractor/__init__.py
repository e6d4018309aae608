"""
Poster Extractor - AI-powered metadata extraction for competition posters.

This package provides tools for:
- Encoding poster images for the Claude vision API
- Extracting competition details and a broadcast message with Claude
- Re-analysing single fields of an extracted record
- Building Google Calendar links for deadlines and event dates
- A small aiohttp web UI to upload, edit and copy the results
"""

__version__ = "0.1.0"
__author__ = "SOS Semesta"

from .analyzer import PosterAnalyzer
from .claude_client import ClaudePosterClient
from .data_models import PosterMetadata

__all__ = ["PosterAnalyzer", "ClaudePosterClient", "PosterMetadata"]
