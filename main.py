# main.py
"""
Entry point for the short-news pipeline.

Scrapes the configured listing pages, removes near-duplicate stories,
summarizes every article and syncs the results into the document store.
"""
import argparse
import asyncio
import os
import sys
from typing import List, Optional

from loguru import logger

from clients.document_store import InMemoryDocumentStore, QdrantDocumentStore
from clients.llm_client import SummaryModelClient
from crawler.core.pipeline import PipelineRunner
from crawler.interfaces import ConfigError, IDocumentStore, QuotaExhaustedError
from crawler.utils.config_loader import load_language_config
from utils.config.settings import PipelineSettings
from utils.logging_setup import configure_logging

# Define path to config
CONFIG_PATH = os.path.join(os.path.dirname(__file__), 'config', 'tamil.yaml')

EXIT_OK = 0
EXIT_FAILURE = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Short-news scrape → dedup → summarize → sync pipeline")
    parser.add_argument("--config", default=CONFIG_PATH, help="Per-language sources file (YAML or JSON)")
    parser.add_argument("--data-dir", help="Directory for caches, logs and snapshots (default: DATA_DIR or ./data)")
    parser.add_argument("--skip-summarize", action="store_true", help="Stop after ingestion and grouping")
    parser.add_argument("--skip-sync", action="store_true", help="Do not push summaries to the document store")
    parser.add_argument("--dry-run", action="store_true", help="Sync into an in-memory store instead of Qdrant")
    parser.add_argument("--log-level", help="Log level (default: LOG_LEVEL or INFO)")
    return parser


def build_store(settings: PipelineSettings, dry_run: bool) -> IDocumentStore:
    if dry_run:
        logger.info("🧪 Dry run: syncing into an in-memory store")
        return InMemoryDocumentStore()
    return QdrantDocumentStore(
        url=settings.qdrant_url,
        api_key=settings.qdrant_api_key,
        collection_name=settings.qdrant_collection_name,
    )


async def run_pipeline(args: argparse.Namespace, settings: PipelineSettings) -> int:
    config = load_language_config(args.config)
    logger.info(f"✅ Loaded config for: {config.language}")

    summarize = not args.skip_summarize
    sync = summarize and not args.skip_sync

    errors = settings.validate(summarize=summarize, sync=sync and not args.dry_run)
    if errors:
        raise ConfigError("; ".join(errors))

    model_client = None
    if summarize:
        model_client = SummaryModelClient(
            api_key=settings.openai_api_key,
            model=settings.summary_model,
            base_url=settings.openai_base_url,
        )

    store = build_store(settings, args.dry_run) if sync else None
    try:
        runner = PipelineRunner(config, settings, store=store, model_client=model_client,
                                summarize=summarize, sync=sync)
        await runner.run()
    finally:
        if store is not None:
            await store.close()

    logger.info(f"✅ {config.language} scraping, summarization & sync completed successfully!")
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = PipelineSettings.from_env()
    if args.data_dir:
        settings.data_dir = args.data_dir
    if args.log_level:
        settings.log_level = args.log_level

    configure_logging(settings.log_level, os.path.join(settings.data_dir, 'logs', 'pipeline.log'))
    logger.info("📰 SHORT NEWS PIPELINE - SCRAPE → GROUP → SUMMARIZE → SYNC")

    try:
        return asyncio.run(run_pipeline(args, settings))
    except QuotaExhaustedError as e:
        logger.critical(f"❌ Model quota exhausted, stopping the run: {e}")
        return EXIT_FAILURE
    except ConfigError as e:
        logger.critical(f"❌ Configuration error: {e}")
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
