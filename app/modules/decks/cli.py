from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path

from app.modules.decks.errors import GenerationError
from app.modules.decks.generator import generate_cards
from app.modules.decks.models import DEFAULT_CARD_COUNT, GenerationRequest
from app.modules.decks.oracle import TextOracle


def _load_text(args: argparse.Namespace) -> str:
    if args.text and args.text_file:
        raise SystemExit("Provide either --text or --text-file, not both")
    if args.text_file:
        return Path(args.text_file).read_text(encoding="utf-8")
    if args.text:
        return args.text
    raise SystemExit("--text or --text-file is required")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="decks-gen", description="Flashcard deck generator CLI"
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    g = sub.add_parser("generate", help="Generate cards from source text (not saved)")
    g.add_argument("--text", "-t", help="Source text")
    g.add_argument("--text-file", help="Path to a file containing the source text")
    g.add_argument(
        "--count", "-n", default=DEFAULT_CARD_COUNT, help="Number of cards (1-25)"
    )

    args = parser.parse_args(argv)
    if args.cmd == "generate":
        text = _load_text(args)
        if not text.strip():
            raise SystemExit("Source text is empty")
        request = GenerationRequest(source_text=text, requested_count=args.count)
        try:
            cards = asyncio.run(generate_cards(TextOracle(), request))
        except GenerationError as e:
            print(f"Generation failed: {e}")
            return 1
        print(json.dumps([c.model_dump() for c in cards], indent=2))
        return 0

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
