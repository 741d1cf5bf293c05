#!/usr/bin/env python3
"""
HackSwipe - corpus converter.

Command-line entry point for turning scraped Devpost data into the
projects file the app reads:
  - Build a readable summary from the scraped page sections
  - Pick one canonical YouTube link, clean prizes, team, tech stack and date
  - Drop records with no usable title or summary
  - Write the corpus JSON and print a summary

Usage:
    python main.py                              # Convert RAW_DATA_PATH -> PROJECTS_PATH
    python main.py -i scraped.json -o out.json  # Explicit paths
    python main.py --dry-run --show-sample      # Convert and preview, no writes

Examples:
    # Preview what a new scrape would produce
    python main.py -i ../devpost-scraper/devpost_winners.json --dry-run -v

    # Regenerate the app corpus
    python main.py -i ../devpost-scraper/devpost_winners.json
"""

import argparse
import json
import sys
from pathlib import Path

from hackswipe import __version__
from hackswipe.converter import ConversionResult, convert_records
from hackswipe.config import (
    LOG_FORMAT,
    LOG_LEVEL,
    PROJECTS_PATH,
    RAW_DATA_PATH,
    print_config_summary,
    validate_config,
)
from hackswipe.observability import setup_logging


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="hackswipe-convert",
        description="Convert scraped Devpost projects into the HackSwipe corpus.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                              Convert with configured paths
  %(prog)s -i raw.json -o projects.json Explicit input and output
  %(prog)s --dry-run --show-sample      Convert without writing, show first project
  %(prog)s --fill-placeholders          Keep records missing a title or summary
        """,
    )
    
    parser.add_argument(
        "--input", "-i",
        default=None,
        metavar="PATH",
        help=f"Scraped JSON file (default: {RAW_DATA_PATH})",
    )
    
    parser.add_argument(
        "--output", "-o",
        default=None,
        metavar="PATH",
        help=f"Corpus file to write (default: {PROJECTS_PATH})",
    )
    
    parser.add_argument(
        "--dry-run", "-n",
        action="store_true",
        help="Convert but do not write the output file",
    )
    
    parser.add_argument(
        "--fill-placeholders",
        action="store_true",
        help="Use placeholder title/summary instead of dropping incomplete records",
    )
    
    parser.add_argument(
        "--show-sample",
        action="store_true",
        help="Print the first converted project",
    )
    
    # Output options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show detailed progress and debug info",
    )
    
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only show errors and final summary",
    )
    
    # Info options
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show current configuration and exit",
    )
    
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    
    return parser


def show_config() -> None:
    """Display current configuration."""
    print("=" * 60)
    print("HackSwipe Configuration")
    print("=" * 60)
    print_config_summary()
    
    errors = validate_config()
    if errors:
        print("\nConfiguration warnings:")
        for error in errors:
            print(f"  ⚠️  {error}")
    else:
        print("\n✓ Configuration valid")
    print("=" * 60)


def read_raw_records(path: Path) -> list:
    """
    Read the scraper output.
    
    Raises:
        ValueError: If the file is not a JSON array.
        OSError: If the file cannot be read.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array, got {type(data).__name__}")
    return data


def write_projects(path: Path, projects: list) -> None:
    """Write the corpus file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(projects, f, indent=2, ensure_ascii=False)


def run_conversion(
    input_path: Path,
    output_path: Path,
    dry_run: bool = False,
    fill_placeholders: bool = False,
) -> ConversionResult:
    """
    Read, convert and (unless dry-run) write the corpus.
    
    Args:
        input_path: Scraped JSON file.
        output_path: Corpus file.
        dry_run: Skip writing.
        fill_placeholders: Keep incomplete records with placeholder text.
        
    Returns:
        ConversionResult with counts and converted projects.
    """
    raw_records = read_raw_records(input_path)
    result = convert_records(raw_records, fill_placeholders=fill_placeholders)
    result.dry_run = dry_run
    
    if not dry_run:
        write_projects(output_path, result.projects)
        result.output_path = str(output_path)
    
    return result


def main(argv: list = None) -> int:
    """
    Main entry point.
    
    Args:
        argv: Command-line arguments (default: sys.argv[1:]).
        
    Returns:
        Exit code (0 = success, 1 = error).
    """
    parser = create_parser()
    args = parser.parse_args(argv)
    
    setup_logging("DEBUG" if args.verbose else LOG_LEVEL, LOG_FORMAT)
    
    if args.show_config:
        show_config()
        return 0
    
    input_path = Path(args.input or RAW_DATA_PATH)
    output_path = Path(args.output or PROJECTS_PATH)
    
    if not args.quiet:
        print("=" * 60)
        print("HackSwipe Corpus Converter")
        print("=" * 60)
        
        if args.dry_run:
            print("Mode: DRY RUN (no file written)")
        
        print(f"Settings:")
        print(f"  Input: {input_path}")
        print(f"  Output: {output_path}")
        print(f"  Fill placeholders: {args.fill_placeholders}")
        print()
    
    if not input_path.exists():
        print(f"\n❌ Input file not found: {input_path}")
        return 1
    
    try:
        result = run_conversion(
            input_path,
            output_path,
            dry_run=args.dry_run,
            fill_placeholders=args.fill_placeholders,
        )
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130
    except (OSError, ValueError) as e:
        print(f"\n❌ Conversion error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1
    
    print(result.to_summary())
    
    if args.show_sample and result.projects:
        print("\nSample project:")
        print(json.dumps(result.projects[0], indent=2, ensure_ascii=False))
    
    return 0


if __name__ == "__main__":
    sys.exit(main())
