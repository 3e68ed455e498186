#!/usr/bin/env python3
"""
Google Docs to Markdown Export Tool - Main CLI Entry Point

This script provides the command-line interface for exporting every Google Doc
of a Drive folder to Markdown files, together with the document comments,
revision history and inline images.
"""

import argparse
import logging
import os
import sys

import yaml

from auth import AuthError, load_credentials
from config_loader import ConfigLoader
from converters import MalformedInputError
from exporters import ImageError
from fetchers import FetchError
from google_client import GoogleApiClient
from logger import setup_logging, log_section, log_config
from orchestrator import ExportOrchestrator

__version__ = "1.0.0"

DEFAULT_CONFIG_PATH = 'config.yaml'


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        description="Export the Google Docs of a Drive folder to Markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Export a folder (prompts for the URL)
  python export_docs.py

  # Export a folder into ./export without revisions
  python export_docs.py --folder-url https://drive.google.com/drive/folders/<id> \\
      --output-dir export --no-revisions

  # Verbose logging to a file
  python export_docs.py -vv --log-file export.log
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--config',
        type=str,
        help=f'Path to configuration YAML file (default: {DEFAULT_CONFIG_PATH} if present)'
    )

    parser.add_argument(
        '--folder-url',
        type=str,
        help='Google Drive folder URL (prompted for when omitted)'
    )

    parser.add_argument(
        '--output-dir',
        type=str,
        help='Directory that receives the exported folder'
    )

    parser.add_argument(
        '--comments',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Append document comments to document.md'
    )

    parser.add_argument(
        '--revisions',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Export every revision as its own markdown file'
    )

    parser.add_argument(
        '--images',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Download inline images next to document.md'
    )

    parser.add_argument(
        '--continue-on-error',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Keep exporting remaining documents after a failure'
    )

    parser.add_argument(
        '--token-file',
        type=str,
        help='Path of the cached OAuth token (default: ~/.credentials/token.json)'
    )

    parser.add_argument(
        '--log-file',
        type=str,
        help='Write logs to this file in addition to the console'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Increase verbosity (-v for INFO, -vv for DEBUG)'
    )

    return parser


def load_configuration(args: argparse.Namespace) -> dict:
    """Load the config file (or built-in defaults) and apply CLI overrides."""
    if args.config:
        config = ConfigLoader.load(args.config)
    elif os.path.exists(DEFAULT_CONFIG_PATH):
        config = ConfigLoader.load(DEFAULT_CONFIG_PATH)
    else:
        config = ConfigLoader.default_config()

    config = ConfigLoader.merge_with_args(config, args)
    ConfigLoader.validate(config)
    return config


def prompt_folder_url() -> str:
    """Ask for the Drive folder URL on standard input."""
    return input("Enter the Google Drive folder URL: ").strip()


def run_export(config: dict, folder_url: str, logger: logging.Logger) -> int:
    """
    Authenticate and export the folder.

    Returns:
        Process exit code
    """
    try:
        log_section("Authentication")
        credentials = load_credentials(config)
        client = GoogleApiClient.from_config(config, credentials)

        orchestrator = ExportOrchestrator(config, client, logger=logger)
        stats = orchestrator.run(folder_url)

        if stats['documents_failed'] > 0:
            logger.warning(f"Export completed with {stats['documents_failed']} failed document(s)")
            return 1

        logger.info("Export completed successfully")
        return 0

    except AuthError as e:
        logger.error(f"Authentication failed: {str(e)}")
        return 1
    except ValueError as e:
        logger.error(str(e))
        return 1
    except (FetchError, MalformedInputError, ImageError, OSError) as e:
        logger.error(f"Export failed: {str(e)}")
        return 1


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_argument_parser()
    args = parser.parse_args()

    try:
        config = load_configuration(args)

        logging_config = config.get('logging', {})
        logger = setup_logging(
            verbosity=args.verbose,
            log_file=logging_config.get('file'),
            log_format=logging_config.get('format'),
            date_format=logging_config.get('date_format'),
            level=logging_config.get('level')
        )

        log_section("Google Docs to Markdown Export Tool")
        logger.info(f"Version: {__version__}")
        log_config(config)

        folder_url = args.folder_url or prompt_folder_url()

        return run_export(config, folder_url, logger)

    except FileNotFoundError as e:
        print(f"ERROR: File not found: {e}", file=sys.stderr)
        return 1
    except (ValueError, yaml.YAMLError) as e:
        print(f"ERROR: Configuration error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nExport interrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
