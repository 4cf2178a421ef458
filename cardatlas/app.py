"""Primary entry point for the Card Atlas toolkit.

This module puts the relationship engine behind a small CLI so the package
can be invoked with ``python -m cardatlas`` once installed. Every command
reads an exported card catalog (a JSON array of cards) and prints JSON,
except ``list`` which prints a table unless asked for JSON.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Iterable

from cardatlas import __version__
from cardatlas.catalog import CatalogError, cards_to_dataframe, load_cards, load_taxonomy
from cardatlas.graph import components, connected_cards
from cardatlas.layout import grid_positions, layout
from cardatlas.logging_config import setup_logging
from cardatlas.lookup import ORPHAN_MODES
from cardatlas.orphans import filter_orphans
from cardatlas.settings import get_settings

logger = logging.getLogger(__name__)

EXIT_NOT_FOUND = 1
EXIT_USAGE = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cardatlas", description="Card Atlas relationship helpers")
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    conn = subparsers.add_parser("connected", help="Cards connected to a root card")
    conn.add_argument("cards", help="Card catalog JSON file")
    conn.add_argument("root", help="Root card id")

    orph = subparsers.add_parser("orphans", help="Orphaned endpoint or throughpoint cards")
    orph.add_argument("cards", help="Card catalog JSON file")
    orph.add_argument("--mode", choices=ORPHAN_MODES, required=True)
    orph.add_argument("--taxonomy", help="Taxonomy JSON file (defaults to settings)")

    lay = subparsers.add_parser("layout", help="Tree layout for a root card")
    lay.add_argument("cards", help="Card catalog JSON file")
    lay.add_argument("root", help="Root card id")
    lay.add_argument("--svg", action="store_true", help="Emit curves as SVG path strings")

    rend = subparsers.add_parser("render", help="Render a root card's tree to an image")
    rend.add_argument("cards", help="Card catalog JSON file")
    rend.add_argument("root", help="Root card id")
    rend.add_argument("output", help="Image path (.png, .svg, ...)")
    rend.add_argument("--light", action="store_true", help="Light background")

    grid = subparsers.add_parser("grid", help="Grid rows/columns for a root card's network")
    grid.add_argument("cards", help="Card catalog JSON file")
    grid.add_argument("root", help="Root card id")

    comp = subparsers.add_parser("components", help="All connected groups of cards")
    comp.add_argument("cards", help="Card catalog JSON file")

    lst = subparsers.add_parser("list", help="Table of every card in the catalog")
    lst.add_argument("cards", help="Card catalog JSON file")
    lst.add_argument("--json", action="store_true", help="Print records as JSON instead of a table")

    return parser


def _emit(payload) -> None:
    print(json.dumps(payload, indent=2))


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    settings = get_settings()
    setup_logging("DEBUG" if args.verbose else settings.log_level, settings.log_file)

    try:
        cards = load_cards(args.cards)

        if args.command == "connected":
            _emit([card.id for card in connected_cards(args.root, cards)])

        elif args.command == "orphans":
            taxonomy = load_taxonomy(args.taxonomy) if args.taxonomy else settings.taxonomy()
            _emit([card.to_dict() for card in filter_orphans(cards, args.mode, taxonomy)])

        elif args.command in ("layout", "render"):
            config = settings.layout_config()
            tree = layout(args.root, cards, config)
            if tree is None:
                print(f"Card '{args.root}' not found", file=sys.stderr)
                return EXIT_NOT_FOUND
            if args.command == "layout":
                _emit(tree.to_dict(svg=args.svg))
            else:
                from cardatlas.drawing import save_layout_figure

                save_layout_figure(tree, args.output, config=config, dark_mode=not args.light)
                logger.info("Wrote %s", args.output)

        elif args.command == "grid":
            cells = grid_positions(args.root, cards)
            if not cells:
                print(f"Card '{args.root}' not found", file=sys.stderr)
                return EXIT_NOT_FOUND
            _emit([
                {"id": card.id, **cells[card.id]._asdict()}
                for card in cards if card.id in cells
            ])

        elif args.command == "components":
            _emit([sorted(comp) for comp in components(cards)])

        elif args.command == "list":
            df = cards_to_dataframe(cards)
            if args.json:
                print(df.to_json(orient="records", indent=2))
            else:
                print(df.fillna("").to_string(index=False))

        else:
            parser.error("No command specified")

    except CatalogError as exc:
        logger.debug("Catalog error", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_USAGE
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
