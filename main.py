"""
Main entry point for the Poster Metadata Extractor.

Usage:
    python main.py --serve
    python main.py --image path/to/poster.jpg
    python main.py --image path/to/poster.jpg --field broadcastMessage --verbose
"""

import asyncio
import argparse
import json
import logging
import sys
from typing import List, Optional

from aiohttp import web

from poster_extractor import ClaudePosterClient, PosterAnalyzer
from poster_extractor.calendar_links import calendar_links
from poster_extractor.config import Settings
from poster_extractor.data_models import LABELS
from poster_extractor.exceptions import PosterExtractorError
from poster_extractor.web import create_app


logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler('poster_extractor.log', encoding='utf-8')
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Poster Metadata Extractor - Extract competition details from poster images using Claude AI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --serve --port 8080
  python main.py --image poster.jpg
  python main.py --image poster.jpg --field broadcastMessage --verbose
        """
    )

    mode_group = parser.add_mutually_exclusive_group(required=True)
    mode_group.add_argument('--image', type=str, help='Poster image to analyze')
    mode_group.add_argument('--serve', action='store_true', help='Start the web interface')

    parser.add_argument('--field', type=str, choices=sorted(LABELS),
                        help='Re-analyze one field after extraction (with --image)')
    parser.add_argument('--api-key', type=str,
                        help='Anthropic API key (or set ANTHROPIC_API_KEY environment variable)')
    parser.add_argument('--model', type=str, help='Claude model identifier')
    parser.add_argument('--host', type=str, help='Web server bind address')
    parser.add_argument('--port', type=int, help='Web server port')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable verbose logging')
    return parser


async def analyze_single_poster(analyzer: PosterAnalyzer, image_path: str,
                                field: Optional[str] = None) -> bool:
    """
    Analyze a poster and print the result as JSON.

    Args:
        analyzer: PosterAnalyzer instance
        image_path: Path to the image
        field: Optional field to re-analyze after extraction

    Returns:
        True if a record was extracted
    """
    metadata = await analyzer.analyze_file(image_path)
    if metadata is None:
        print(f"❌ Analysis failed: {analyzer.store.error}", file=sys.stderr)
        return False

    if field:
        await analyzer.refresh_field(field)
        metadata = analyzer.store.metadata

    result = {
        "metadata": metadata.to_dict(),
        "calendarLinks": calendar_links(metadata),
    }
    print(json.dumps(result, ensure_ascii=False, indent=2))
    return True


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose)

    try:
        settings = Settings.from_env(api_key=args.api_key, model=args.model,
                                     host=args.host, port=args.port)
        client = ClaudePosterClient(settings.require_api_key(), model=settings.model,
                                    max_tokens=settings.max_tokens)
        analyzer = PosterAnalyzer(client)

        if args.serve:
            logger.info(f"Starting web interface on http://{settings.host}:{settings.port}")
            runner = web.AppRunner(create_app(analyzer))
            await runner.setup()
            site = web.TCPSite(runner, settings.host, settings.port)
            await site.start()
            try:
                await asyncio.Event().wait()
            finally:
                await runner.cleanup()

        ok = await analyze_single_poster(analyzer, args.image, args.field)
        return 0 if ok else 1

    except (PosterExtractorError, ValueError) as e:
        logger.error(f"Error: {e}")
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1


def run() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\n⏹️  Stopped by user")
        sys.exit(1)


if __name__ == "__main__":
    run()
