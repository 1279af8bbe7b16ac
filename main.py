#!/usr/bin/env python3
"""
Main entry point for the Nucleon Energy Correlator (NEC) analysis.

Reads EDM4eic events, applies the collection-availability and Q2 selection,
and writes the NEC histograms to a single ROOT file.
"""

import sys
import logging
import argparse
import yaml

from domain.config import AnalysisConfig
from pipeline.executor import PipelineExecutor


def setup_logging(level: str = "INFO"):
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def load_config(config_path: str) -> dict:
    """Load configuration from YAML file."""
    with open(config_path, 'r') as f:
        return yaml.safe_load(f) or {}


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Nucleon Energy Correlator analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run with the default configuration file
  python main.py

  # Local input, custom output and Q2 window
  python main.py --input events.edm4eic.root --output nec.root --min-q2 10 --max-q2 100

  # Validate configuration without reading events
  python main.py --config my_config.yaml --dry-run
        """
    )

    parser.add_argument(
        "--config", type=str, default="config.yaml",
        help="Path to configuration file (default: config.yaml)"
    )
    parser.add_argument(
        "--log-level", type=str, default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)"
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Validate configuration without running pipeline"
    )

    override_group = parser.add_argument_group("Configuration Overrides")
    override_group.add_argument(
        "--input", action="append", default=None, dest="input_files",
        help="Input file path or URL (repeatable, replaces configured inputs)"
    )
    override_group.add_argument(
        "--output", type=str, default=None, dest="output_file",
        help="Output ROOT file"
    )
    override_group.add_argument(
        "--min-q2", type=float, default=None, dest="min_q2",
        help="Lower edge of the Q2 window (exclusive)"
    )
    override_group.add_argument(
        "--max-q2", type=float, default=None, dest="max_q2",
        help="Upper edge of the Q2 window (exclusive)"
    )
    override_group.add_argument(
        "--threads", type=int, default=None,
        help="Number of files processed concurrently"
    )

    return parser.parse_args(argv)


def build_config(args) -> AnalysisConfig:
    """Load the YAML configuration (if any) and apply CLI overrides."""
    try:
        config_dict = load_config(args.config)
    except FileNotFoundError:
        logging.getLogger(__name__).warning(
            f"Configuration file {args.config} not found, using defaults"
        )
        config_dict = {}

    config = AnalysisConfig.from_dict(config_dict)
    return config.with_overrides(
        input_files=args.input_files,
        output_file=args.output_file,
        min_q2=args.min_q2,
        max_q2=args.max_q2,
        threads=args.threads,
    )


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    logger.info("Starting prototype NEC calculation!")

    try:
        config = build_config(args)
        logger.info("Configuration loaded and validated successfully")

        executor = PipelineExecutor(config)

        if args.dry_run:
            logger.info("Dry run mode - configuration is valid, exiting")
            logger.info(f"Input files: {list(config.input_files)}")
            logger.info(f"Output file: {config.output_file}")
            logger.info(f"Histograms: {len(executor.registry)}")
            return 0

        final_context = executor.run()

        if final_context.is_successful:
            return 0
        return 1

    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
