#!/usr/bin/env python3
"""
Generate a hackathon demo script from the command line.

Usage:
    demopitch generate --project NAME --problem TEXT --solution TEXT \\
        --tech-stack TEXT --target-users TEXT [--hackathon NAME] [--model MODEL]
    demopitch models [--revision v1|v1beta]

Options:
    --api-key KEY       Gemini API key (default: GEMINI_API_KEY / GOOGLE_API_KEY)
    --model MODEL       Model name; imprecise names are resolved automatically
    --output FORMAT     Output format: text, json (default: text)
    --verbose           Log every resolution attempt
"""

import argparse
import asyncio
import json
import logging
import sys

from config import Settings, configure_logging
from pitch import PitchContext, ScriptService
from providers import GeminiProvider
from resolution import (
    ApiRevision,
    CatalogCache,
    CatalogUnavailableError,
    ModelResolver,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    # Shared options are accepted before or after the subcommand; SUPPRESS
    # keeps a subcommand from overwriting a value given before it
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--api-key", type=str, default=argparse.SUPPRESS, help="Gemini API key"
    )
    common.add_argument(
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Log every resolution attempt",
    )

    parser = argparse.ArgumentParser(
        prog="demopitch",
        description="Generate two-minute hackathon demo scripts with Gemini",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
        parents=[common],
    )
    parser.set_defaults(api_key=None, verbose=False)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser(
        "generate", parents=[common], help="Generate a demo script"
    )
    generate.add_argument("--project", required=True, help="Project name")
    generate.add_argument("--problem", required=True, help="Problem statement")
    generate.add_argument("--solution", required=True, help="Solution summary")
    generate.add_argument("--tech-stack", required=True, help="Technologies used")
    generate.add_argument("--target-users", required=True, help="Who it is for")
    generate.add_argument("--hackathon", default="", help="Hackathon name")
    generate.add_argument("--model", default="", help="Gemini model name")
    generate.add_argument(
        "--output",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )

    models = subparsers.add_parser(
        "models", parents=[common], help="List available Gemini models"
    )
    models.add_argument(
        "--revision",
        choices=[r.value for r in ApiRevision],
        default=ApiRevision.PRIMARY.value,
        help="API revision to list (default: v1)",
    )
    return parser


def build_provider(settings: Settings) -> GeminiProvider:
    return GeminiProvider(
        base_url=settings.base_url,
        timeout=settings.timeout_seconds,
        safety_settings=[
            {
                "category": "HARM_CATEGORY_DANGEROUS_CONTENT",
                "threshold": settings.safety_threshold,
            }
        ],
    )


async def run_generate(args, settings: Settings, provider: GeminiProvider) -> int:
    context = PitchContext.from_form(
        {
            "projectName": args.project,
            "problem": args.problem,
            "solution": args.solution,
            "techStack": args.tech_stack,
            "targetUsers": args.target_users,
            "hackathonName": args.hackathon,
        }
    )
    resolver = ModelResolver(provider, default_model=settings.default_model)
    service = ScriptService(resolver, default_api_key=settings.api_key)
    script = await service.generate(context, args.api_key, args.model or None)

    if args.output == "json":
        print(json.dumps(script.to_dict(), indent=2))
    else:
        print(script.text)
        print()
        print(f"[{script.timing.label}]")
        if script.timing.over_limit:
            print("Trim ~20 seconds for a tighter delivery.")
        print(script.status, file=sys.stderr)

    return 1 if script.used_fallback else 0


async def run_models(args, settings: Settings, provider: GeminiProvider) -> int:
    api_key = args.api_key or settings.api_key
    if not api_key:
        logger.error("no Gemini API key found")
        return 2

    catalog = CatalogCache(provider)
    try:
        names = await catalog.get(ApiRevision(args.revision), api_key)
    except CatalogUnavailableError as e:
        logger.error(f"Failed to list {args.revision} models: {e}")
        return 1

    for name in names:
        print(name)
    return 0


async def run(args, settings: Settings) -> int:
    async with build_provider(settings) as provider:
        if args.command == "models":
            return await run_models(args, settings, provider)
        return await run_generate(args, settings, provider)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    configure_logging("DEBUG" if args.verbose else settings.log_level)

    try:
        return asyncio.run(run(args, settings))
    except ValueError as e:
        logger.error(str(e))
        return 2


if __name__ == "__main__":
    sys.exit(main())
