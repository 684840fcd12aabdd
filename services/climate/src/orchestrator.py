"""
Climate summary orchestrator

Main entry point for the climate summary tool.
Opens each input file in order, streams it through the aggregator,
and writes the report once all input is consumed.
"""
import argparse
import json
import logging
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional, TextIO

from pydantic import ValidationError

from .aggregator import ClimateAggregator, create_aggregator
from .config import ClimateConfig, get_config
from .registry import RegionCapacityExceeded
from .report import build_summaries, format_report, summaries_to_dict

logger = logging.getLogger(__name__)


class ClimateOrchestrator:
    """Orchestrates file ingestion and report generation for one run"""

    def __init__(self, config: Optional[ClimateConfig] = None):
        """
        Initialize orchestrator

        Args:
            config: Configuration (loaded from environment if omitted)
        """
        self.config = config if config is not None else get_config()
        self.aggregator: ClimateAggregator = create_aggregator(
            max_regions=self.config.max_regions,
            delimiter=self.config.delimiter,
            encoding=self.config.file_encoding,
        )
        logger.info(
            f"ClimateOrchestrator initialized (max states: {self.config.max_regions})"
        )

    def process_file(self, path: str) -> Dict[str, Any]:
        """
        Ingest a single TDV file

        Open failures are logged and reported in the result, not raised.
        RegionCapacityExceeded propagates; the file is closed either way.

        Args:
            path: Path to the input file

        Returns:
            Ingest statistics for the file
        """
        logger.info(f"Opening file: {path}")

        try:
            # Binary mode: lines are decoded one by one by the parser
            fh = open(path, "rb")
        except OSError as e:
            logger.error(f"Could not open file {path} for reading: {e}")
            return {"path": path, "status": "failed", "error": str(e)}

        with fh:
            stats = self.aggregator.ingest_lines(fh, source=path)

        return {"path": path, "status": "success", **stats}

    def process_files(self, paths: List[str]) -> Dict[str, Any]:
        """
        Ingest files in the order given

        Args:
            paths: Input file paths

        Returns:
            Combined results for all files
        """
        start_time = datetime.utcnow()

        file_results = [self.process_file(path) for path in paths]

        failures = sum(1 for r in file_results if r["status"] == "failed")
        duration = (datetime.utcnow() - start_time).total_seconds()

        summary = {
            "total_files": len(paths),
            "files_processed": len(paths) - failures,
            "files_failed": failures,
            "states_found": len(self.aggregator.registry),
            "file_results": file_results,
            "processing_time_seconds": duration,
        }

        logger.info(
            f"Ingest complete: {summary['files_processed']} files processed, "
            f"{failures} failed, {summary['states_found']} states "
            f"in {duration:.2f}s"
        )

        return summary

    def render(self, output_format: str = "text") -> str:
        """
        Render the report for everything ingested so far

        Args:
            output_format: 'text' or 'json'
        """
        summaries = build_summaries(self.aggregator.registry, use_utc=self.config.use_utc)

        if output_format == "json":
            return json.dumps(summaries_to_dict(summaries), indent=2) + "\n"
        if output_format == "text":
            return format_report(summaries)
        raise ValueError(f"Unknown output format: {output_format}")

    def run(
        self,
        paths: List[str],
        output: TextIO,
        output_format: str = "text"
    ) -> Dict[str, Any]:
        """
        Ingest all files, then write the report to output

        Nothing is written if ingestion aborts.
        """
        results = self.process_files(paths)
        output.write(self.render(output_format))
        return results


def configure_logging(config: ClimateConfig) -> None:
    """Send log records to stderr using the configured level and format"""
    logging.basicConfig(
        level=config.log_level.upper(),
        format=config.log_format,
        stream=sys.stderr,
    )


def build_arg_parser() -> argparse.ArgumentParser:
    """CLI argument parser"""
    parser = argparse.ArgumentParser(
        description="Summarize NOAA climate observations per state"
    )
    parser.add_argument(
        "files",
        nargs="+",
        metavar="tdv_file",
        help="Tab-delimited observation files, processed in order"
    )
    parser.add_argument(
        "--max-regions",
        type=int,
        default=None,
        help="Maximum number of distinct states (default: 50)"
    )
    parser.add_argument(
        "--utc",
        action="store_true",
        default=None,
        help="Format extreme timestamps in UTC instead of local time"
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        default="text",
        choices=["text", "json"],
        help="Report format (default: text)"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: INFO)"
    )
    return parser


def main(argv: Optional[List[str]] = None):
    """Main entry point for CLI"""
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    overrides = {
        "max_regions": args.max_regions,
        "use_utc": args.utc,
        "log_level": args.log_level,
    }
    try:
        config = get_config(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        parser.error(str(e))
    configure_logging(config)

    orchestrator = ClimateOrchestrator(config)

    try:
        orchestrator.run(args.files, sys.stdout, args.output_format)
    except RegionCapacityExceeded as e:
        logger.error(f"Aborting: {e}")
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
