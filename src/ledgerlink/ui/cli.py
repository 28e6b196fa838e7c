from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from ledgerlink.app import (
    import_legacy_file,
    separate_by_integration_key,
    write_legacy_records,
)
from ledgerlink.config import ConfigurationError, configure_logging, get_app_config
from ledgerlink.domain.model import SourceSystem
from ledgerlink.domain.schema import SchemaDefinitionError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from ledgerlink.domain.rows import RowIndexManager

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile legacy ledger records")
    subparsers = parser.add_subparsers(dest="command", required=True)

    inspect = subparsers.add_parser(
        "inspect", help="Import records and report statistics and consistency issues"
    )
    inspect.add_argument("input", type=Path, help="JSON array of legacy records")

    export = subparsers.add_parser("export", help="Import records and write them back out")
    export.add_argument("input", type=Path, help="JSON array of legacy records")
    export.add_argument("output", type=Path, help="Destination JSON file")

    separate = subparsers.add_parser(
        "separate", help="Split one system out of an integrated row and export the result"
    )
    separate.add_argument("input", type=Path, help="JSON array of legacy records")
    separate.add_argument("output", type=Path, help="Destination JSON file")
    separate.add_argument(
        "--integration-key",
        type=str,
        required=True,
        help="Integration key of the row to split, e.g. 'PC:PC-55|SEAT:A-101'",
    )
    separate.add_argument(
        "--system",
        type=str,
        required=True,
        choices=[system.value for system in SourceSystem],
        help="Source system to separate",
    )

    return parser.parse_args(list(argv))


def _report(manager: RowIndexManager) -> bool:
    stats = manager.get_statistics()
    log.info(
        "Rows: total=%s, integrated=%s, single=%s, invalid=%s",
        stats.total_rows,
        stats.integrated_rows,
        stats.single_rows,
        stats.validation_errors,
    )
    log.info(
        "Active records per system: %s",
        ", ".join(f"{system}={count}" for system, count in stats.system_counts.items()),
    )
    report = manager.validate_consistency()
    for issue in report.issues:
        log.warning(
            "Consistency issue %s: key=%s rows=%s system=%s %s",
            issue.kind,
            issue.key,
            ",".join(issue.row_ids),
            issue.system,
            issue.detail or "",
        )
    return report.is_valid


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        config = get_app_config()
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)
    logging.getLogger().setLevel(config.log_level)

    try:
        manager, _ = import_legacy_file(parsed_args.input, config=config)
        if parsed_args.command == "inspect":
            if not _report(manager):
                sys.exit(1)
        elif parsed_args.command == "export":
            write_legacy_records(parsed_args.output, manager.export_to_legacy())
        elif parsed_args.command == "separate":
            result = separate_by_integration_key(
                manager, parsed_args.integration_key, parsed_args.system
            )
            log.info(
                "Separated %s: %s + %s",
                parsed_args.system,
                result.source_row.integration_key,
                result.separated_row.integration_key,
            )
            write_legacy_records(parsed_args.output, manager.export_to_legacy())
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except (SchemaDefinitionError, ConfigurationError):
        log.exception("Invalid configuration")
        sys.exit(2)
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
