from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from .config import Settings
from .exceptions import PromptPipelineError
from .llm_clients import create_chat_client
from .logging_setup import configure_logging, redact
from .service import PromptService
from .types import Prompt

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="memory-prompts", description="Generate reminiscence prompts.")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="generate, tag and store prompts for a category")
    gen.add_argument("--category", "-c", required=True)
    gen.add_argument("--language", "--lang", default="es", type=str.lower, choices=["es", "en"])
    gen.add_argument("--amount", "-n", default=5, type=int)
    gen.add_argument("--subcategories", "--subs", default="", help="comma-separated list")
    gen.add_argument("--mode", choices=["bulk", "per_item"], default="bulk")
    gen.add_argument("--db", type=Path, default=None, help="SQLite file (defaults to MEMORY_PROMPTS_DB)")
    gen.add_argument("--dry-run", action="store_true", help="print the prompts without storing them")
    gen.add_argument("--env-file", type=Path, default=None)
    return parser


def _to_json(prompts: list[Prompt]) -> str:
    return json.dumps([asdict(p) for p in prompts], ensure_ascii=False, indent=2, default=str)


async def _generate(args: argparse.Namespace, settings: Settings) -> list[Prompt]:
    llm = create_chat_client(settings)
    subcategories = [s.strip() for s in args.subcategories.split(",") if s.strip()]
    async with PromptService(llm, db_path=args.db or settings.db_path, settings=settings) as service:
        return await service.generate(
            args.category,
            args.language,
            args.amount,
            subcategories,
            mode=args.mode,
            dry_run=args.dry_run,
        )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    secrets: list[str] = []
    try:
        settings = Settings.from_env(args.env_file)
        secrets = settings.secrets()
        configure_logging(settings.log_level, secrets)
        prompts = asyncio.run(_generate(args, settings))
    except PromptPipelineError as exc:
        print(f"Error: {redact(str(exc), secrets)}", file=sys.stderr)
        return 1

    if args.dry_run:
        print(_to_json(prompts))
    else:
        logger.info("Stored %d prompts in category %r", len(prompts), args.category)
    return 0


if __name__ == "__main__":
    sys.exit(main())
