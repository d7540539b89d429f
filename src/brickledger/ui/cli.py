from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from brickledger.app import import_vendor_export, search_catalog, sync_set_catalog
from brickledger.config import configure_logging
from brickledger.domain.model import CatalogSource, ImportMode
from brickledger.domain.reconciliation.policy import COLOR_FALLBACKS

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from brickledger.domain.reconciliation import ImportSummary

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile and import brick inventories")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_cmd = subparsers.add_parser("import", help="Import a BrickStore/BrickLink XML export")
    import_cmd.add_argument("file", type=str, help="Path to the .bsx/.xml export")
    import_cmd.add_argument(
        "--mode",
        choices=[mode.value for mode in ImportMode],
        default=ImportMode.ADD.value,
        help="Merge into existing lots in application code or at the store (default: %(default)s)",
    )
    import_cmd.add_argument(
        "--color-fallback",
        choices=sorted(COLOR_FALLBACKS),
        default="integer",
        help="How to treat vendor color ids without a cross-reference (default: %(default)s)",
    )

    sync_set = subparsers.add_parser("sync-set", help="Hydrate the catalog from a Rebrickable set")
    sync_set.add_argument("set_id", type=str, help="Set number, e.g. 75192 or 75192-1")
    sync_set.add_argument(
        "--no-minifigs",
        action="store_true",
        help="Skip the set's minifigures",
    )

    search = subparsers.add_parser("search", help="Search the catalog")
    search.add_argument("query", type=str, help="Part number or name fragment")
    search.add_argument(
        "--source",
        choices=[source.value for source in CatalogSource],
        default=CatalogSource.BRICKLINK.value,
        help="Identifier space to show next to each hit (default: %(default)s)",
    )

    return parser.parse_args(list(argv))


def _log_import_summary(summary: ImportSummary) -> None:
    log.info(
        f"Import batch {summary.batch_id} ({summary.file_name or 'unnamed'}): "
        f"rows={summary.total_lots}, pieces={summary.total_pieces}, "
        f"lots={summary.mapped_lots}, mapped_pieces={summary.mapped_pieces}, "
        f"unmapped={summary.unmapped_lots}"
    )
    for item in summary.unmapped_items:
        log.warning(
            f"Unmapped: part={item.vendor_part_id} color={item.vendor_color_id} "
            f"qty={item.quantity}"
        )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "import":
            summary = import_vendor_export(
                parsed_args.file,
                ImportMode(parsed_args.mode),
                color_fallback=COLOR_FALLBACKS[parsed_args.color_fallback],
            )
            _log_import_summary(summary)
        elif parsed_args.command == "sync-set":
            result = sync_set_catalog(
                parsed_args.set_id,
                include_minifigs=not parsed_args.no_minifigs,
            )
            log.info(
                f"Set {parsed_args.set_id}: parts={result.parts}, colors={result.colors}, "
                f"skipped={result.skipped}"
            )
        elif parsed_args.command == "search":
            hits = search_catalog(parsed_args.query, CatalogSource(parsed_args.source))
            for hit in hits:
                log.info(f"{hit.shape_key}\t{hit.name}\t{hit.source_id or '-'}")
            log.info(f"{len(hits)} hits")
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
