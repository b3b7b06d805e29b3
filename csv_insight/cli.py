"""Command-line interface for CSV Insight."""

import argparse
import logging
import sys
from pathlib import Path

from csv_insight import __version__
from csv_insight.config import get_settings


def summarize_file(path: Path, sort: str = "default", top_k: int | None = None) -> int:
    """Print column summaries for a CSV file."""
    from csv_insight.analysis.statistics import summarize_dataset
    from csv_insight.core.dataset import Dataset
    from csv_insight.core.errors import PayloadError
    from csv_insight.visualization.cards import order_columns

    try:
        dataset = Dataset.from_csv(path.read_bytes())
    except (OSError, PayloadError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    summaries = summarize_dataset(dataset, top_k=top_k)
    print(f"{path.name}: {len(dataset)} rows, {len(dataset.headers)} columns\n")
    for column in order_columns(summaries, dataset.headers, sort):
        print(summaries[column].format_for_display())
        print()
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog="csv-insight",
        description="Column statistics and charts for CSV files",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Start the API server",
    )
    parser.add_argument(
        "--host",
        default=settings.api_host,
        help=f"API server host (default: {settings.api_host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.api_port,
        help=f"API server port (default: {settings.api_port})",
    )
    parser.add_argument(
        "--summarize",
        type=Path,
        metavar="FILE",
        help="Print column statistics for a CSV file",
    )
    parser.add_argument(
        "--sort",
        choices=["default", "type"],
        default="default",
        help="Column order for --summarize (default: header order)",
    )
    parser.add_argument(
        "--top-k",
        type=int,
        default=None,
        help="Most frequent values shown for text columns",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.summarize:
        return summarize_file(args.summarize, sort=args.sort, top_k=args.top_k)

    if args.serve:
        try:
            import uvicorn

            from csv_insight.api.app import app

            uvicorn.run(app, host=args.host, port=args.port)
        except ImportError as e:
            print(f"Error: {e}. Make sure uvicorn is installed.", file=sys.stderr)
            return 1
    else:
        parser.print_help()

    return 0


if __name__ == "__main__":
    sys.exit(main())
