"""Command-line interface for datforge."""

import sys
import logging
import argparse
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

logger = logging.getLogger(__name__)

from datforge import __version__
from datforge.config.loader import load_config, get_config_value, ConfigError
from datforge.config.validator import validate_config, ValidationError
from datforge.errors import DatError
from datforge.formats import (
    DatFormat,
    ParseResult,
    convert,
    detect_format,
    format_for_output,
    read_dat,
)

SEPARATED_VALUE_FORMATS = (DatFormat.CSV, DatFormat.TSV, DatFormat.SSV)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    format_names = ', '.join(member.value for member in DatFormat)

    parser = argparse.ArgumentParser(
        prog='datforge',
        description='Convert ROM DAT files between ClrMamePro, Logiqx, listrom and other dialects',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  # Convert a ClrMamePro DAT to Logiqx XML (formats detected from the files)
  datforge convert nointro.dat nointro.xml

  # Read MAME listrom output and write a ClrMamePro DAT
  datforge convert --from listrom --to clrmamepro listrom.txt mame.dat

  # Summarize a DAT
  datforge info collection.dat

  # Fail on unclosed blocks instead of recovering
  datforge convert --strict broken.dat fixed.xml

Formats: {format_names}, hashfile
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--config',
        type=Path,
        metavar='PATH',
        help='Path to datforge.yaml (default: ./datforge.yaml if present)'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Log level. Overrides config.'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    convert_parser = subparsers.add_parser('convert', help='Convert a DAT to another format')
    convert_parser.add_argument('source', type=Path, help='Input DAT file')
    convert_parser.add_argument('destination', type=Path, help='Output DAT file')
    convert_parser.add_argument(
        '--from',
        dest='source_format',
        metavar='FORMAT',
        help='Input format (default: detected)'
    )
    convert_parser.add_argument(
        '--to',
        dest='destination_format',
        metavar='FORMAT',
        help='Output format (default: from the output extension)'
    )
    convert_parser.add_argument(
        '--strict',
        action='store_true',
        help='Treat unterminated blocks as errors. Overrides config.'
    )
    convert_parser.add_argument(
        '--drop-extras',
        action='store_true',
        help='Do not re-emit unrecognized content. Overrides config.'
    )

    info_parser = subparsers.add_parser('info', help='Summarize the contents of a DAT')
    info_parser.add_argument('source', type=Path, help='Input DAT file')
    info_parser.add_argument(
        '--from',
        dest='source_format',
        metavar='FORMAT',
        help='Input format (default: detected)'
    )
    info_parser.add_argument(
        '--show-ambiguities',
        action='store_true',
        help='List every line kept as an unrecognized extra'
    )

    detect_parser = subparsers.add_parser('detect', help='Print the detected format of a DAT')
    detect_parser.add_argument('source', type=Path, help='Input DAT file')

    return parser


def _setup_logging(config: dict) -> None:
    """
    Setup logging configuration from config.

    Args:
        config: Configuration dictionary
    """
    logging_config = config.get('logging', {})

    # Get log level
    level_str = logging_config.get('level', 'INFO').upper()
    level = getattr(logging, level_str, logging.INFO)

    handlers = []

    if logging_config.get('console', True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        formatter = logging.Formatter('%(levelname)s: %(message)s')
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    # File handler (if configured)
    log_file = logging_config.get('file')
    if log_file:
        try:
            log_path = Path(log_file)
            # Create parent directory if it doesn't exist
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(level)
            formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)
        except OSError as e:
            print(f"Error: Could not create log file '{log_file}': {e}", file=sys.stderr)
            sys.exit(1)

    if not handlers:
        handlers.append(logging.NullHandler())

    # Configure root logger
    logging.basicConfig(
        level=level,
        handlers=handlers,
        force=True  # Override any existing configuration
    )


def _resolve_format(name: Optional[str], config: Dict[str, Any]) -> Optional[DatFormat]:
    """Map a format argument to a DatFormat; 'hashfile' uses the configured variant."""
    if name is None:
        return None
    if name.strip().lower() == 'hashfile':
        name = get_config_value(config, 'hashfile.default_type', 'sfv')
    return DatFormat.from_name(name)


def _write_quotes(fmt: DatFormat, config: Dict[str, Any]) -> Optional[bool]:
    if fmt is DatFormat.CLRMAMEPRO:
        return get_config_value(config, 'writing.clrmamepro_quotes', True)
    if fmt in SEPARATED_VALUE_FORMATS:
        return get_config_value(config, 'writing.separated_value_quotes', True)
    return None


def run_convert(config: Dict[str, Any], args: argparse.Namespace) -> int:
    source_format = _resolve_format(args.source_format, config)
    destination_format = _resolve_format(args.destination_format, config)
    if destination_format is None:
        destination_format = format_for_output(args.destination)

    strict = args.strict or get_config_value(config, 'parsing.strict', False)
    preserve_extras = (
        not args.drop_extras
        and get_config_value(config, 'writing.preserve_extras', True)
    )

    result = convert(
        args.source,
        args.destination,
        source_format=source_format,
        destination_format=destination_format,
        strict=strict,
        quotes=_write_quotes(destination_format, config),
        preserve_extras=preserve_extras,
    )

    stats = result.metadata.statistics()
    print(
        f"Converted {args.source} ({result.format.value}) -> "
        f"{args.destination} ({destination_format.value}): "
        f"{stats['machines']} machines, {len(result.ambiguities)} unrecognized lines kept"
    )
    return 0


def run_info(config: Dict[str, Any], args: argparse.Namespace) -> int:
    source_format = _resolve_format(args.source_format, config)
    result = read_dat(
        args.source,
        source_format,
        strict=get_config_value(config, 'parsing.strict', False),
    )
    console = Console()
    console.print(_info_table(args.source, result))

    if args.show_ambiguities and result.ambiguities:
        ambiguity_table = Table(title="Unrecognized lines", expand=False)
        ambiguity_table.add_column("Line", justify="right")
        ambiguity_table.add_column("Context")
        ambiguity_table.add_column("Content", overflow="fold")
        for ambiguity in result.ambiguities:
            ambiguity_table.add_row(
                str(ambiguity.line_number),
                Text(ambiguity.context or ''),
                Text(ambiguity.line),
            )
        console.print(ambiguity_table)
    return 0


def _info_table(source: Path, result: ParseResult) -> Table:
    header = result.metadata.header
    table = Table(title=Text(source.name), show_header=False, padding=(0, 1))
    table.add_column("Field", style="bold")
    table.add_column("Value", overflow="fold")

    table.add_row("Format", result.format.value)
    for label, value in (
        ("Name", header.name),
        ("Description", header.description),
        ("Version", header.version),
        ("Author", header.author),
    ):
        if value:
            table.add_row(label, Text(value))

    for key, count in result.metadata.statistics().items():
        table.add_row(key.capitalize(), str(count))
    table.add_row("Unrecognized lines", str(len(result.ambiguities)))
    return table


def run_detect(config: Dict[str, Any], args: argparse.Namespace) -> int:
    print(detect_format(args.source).value)
    return 0


COMMANDS = {
    'convert': run_convert,
    'info': run_info,
    'detect': run_detect,
}


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for datforge CLI.

    Args:
        argv: Command-line arguments (default: sys.argv)

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # Load and validate configuration
    try:
        config = load_config(args.config)
        if args.log_level:
            config.setdefault('logging', {})['level'] = args.log_level
        validate_config(config)
    except (ConfigError, ValidationError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    _setup_logging(config)

    try:
        return COMMANDS[args.command](config, args)
    except DatError as e:
        logger.debug("DAT processing failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user.", file=sys.stderr)
        return 130


if __name__ == '__main__':
    sys.exit(main())
