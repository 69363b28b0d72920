"""
envdoc Command-Line Interface

This module provides the CLI entry point for envdoc. It orchestrates the
full pipeline: load -> aggregate -> render -> output.

Usage:
    envdoc ./internal/config
    envdoc . --recursive --output docs/configuration.md
    envdoc . --config envdoc.toml --unsupported-types stringify

Exit Codes:
    0 - Markdown was written
    1 - Loading, extraction, configuration, or output failed
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, TextIO

from envdoc import __version__
from envdoc.config import EnvdocConfig, load_config
from envdoc.errors import ConfigError, EnvdocError, LoadError, RenderError
from envdoc.extractors import ConfigAggregator, UnsupportedTypePolicy
from envdoc.golang import BuildContext, PackageLoader
from envdoc.renderer import write_markdown


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="envdoc",
        description=(
            "Generate markdown documentation for Go configuration structs "
            "annotated with envconfig tags."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  envdoc ./config                     # Document one package\n"
            "  envdoc . --recursive                # Document every package below .\n"
            "  envdoc . -r -o docs/config.md       # Write to a file\n"
            "  envdoc . --tag env                  # Read `env:\"...\"` tags instead\n"
        ),
    )

    # Positional argument: package path
    parser.add_argument(
        "path",
        type=str,
        help="Path to the Go package directory",
    )

    # Input options
    parser.add_argument(
        "-r", "--recursive",
        action="store_true",
        default=None,
        help="Also document packages in sub-directories (like ./...)",
    )

    parser.add_argument(
        "--tags",
        type=str,
        default=None,
        help="Comma-separated build tags to satisfy, like go build -tags",
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="TOML configuration file",
    )

    # Extraction options
    parser.add_argument(
        "--tag",
        type=str,
        default=None,
        help="Struct tag holding the variable name (default: envconfig)",
    )

    parser.add_argument(
        "--unsupported-types",
        choices=[p.value for p in UnsupportedTypePolicy],
        default=None,
        help="How to handle fields whose type is not a plain identifier (default: skip)",
    )

    # Output options
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output file path (default: standard output)",
    )

    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing output file",
    )

    parser.add_argument(
        "--title",
        type=str,
        default=None,
        help="Add a level-1 title to the document",
    )

    # Verbosity
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show detailed progress information",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress all output except errors",
    )

    # Version
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def log(message: str, quiet: bool = False) -> None:
    """
    Print a message to stderr (for progress/status).

    Args:
        message: The message to print
        quiet: If True, suppress the message
    """
    if not quiet:
        print(f"[envdoc] {message}", file=sys.stderr)


def log_verbose(message: str, verbose: bool, quiet: bool) -> None:
    """Print a message only in verbose mode."""
    if verbose and not quiet:
        print(f"  {message}", file=sys.stderr)


def build_config(args: argparse.Namespace) -> EnvdocConfig:
    """
    Combine the configuration file (if any) with command-line overrides.

    Args:
        args: Parsed command-line arguments

    Returns:
        The effective configuration

    Raises:
        ConfigError: If the configuration file is invalid
    """
    config = load_config(args.config) if args.config else EnvdocConfig()

    if args.recursive is not None:
        config.load.recursive = args.recursive
    if args.tags is not None:
        config.load.tags = [tag for tag in args.tags.split(",") if tag]
    if args.tag is not None:
        if not args.tag:
            raise ConfigError("--tag must not be empty")
        config.extract.key_tag = args.tag
    if args.unsupported_types is not None:
        config.extract.unsupported_types = UnsupportedTypePolicy(args.unsupported_types)
    if args.title is not None:
        config.render.title = args.title

    return config


def run_pipeline(
    package_path: Path,
    config: EnvdocConfig,
    output_path: Optional[Path] = None,
    force: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    stdout: Optional[TextIO] = None,
) -> int:
    """
    Run the full envdoc pipeline.

    Args:
        package_path: Directory of the Go package (or module root)
        config: Effective configuration
        output_path: Where to write the markdown (None = stdout)
        force: If True, overwrite an existing output file
        verbose: If True, show detailed progress
        quiet: If True, suppress non-error output
        stdout: Stream used when no output path is given (default sys.stdout)

    Returns:
        Exit code (0 = success, non-zero = error)
    """
    if output_path is not None and output_path.exists() and not force:
        print(f"Error: File already exists: {output_path}", file=sys.stderr)
        print("Use --force to overwrite.", file=sys.stderr)
        return 1

    # Step 1: Load packages
    log("Loading packages...", quiet=quiet)
    loader = PackageLoader(
        package_path,
        recursive=config.load.recursive,
        context=BuildContext.from_environment(config.load.tags),
    )
    try:
        packages = loader.load()
    except LoadError as e:
        print(f"Error during package loading: {e}", file=sys.stderr)
        return 1

    discovery = loader.discovery
    log_verbose(
        f"Found {discovery.file_count} Go files in {len(discovery.packages)} directories "
        f"(GOOS={loader.context.goos}, GOARCH={loader.context.goarch})",
        verbose,
        quiet,
    )
    for path, reason in discovery.skipped_dirs:
        log_verbose(f"  Skipped {path}: {reason}", verbose, quiet)
    for file_path in loader.excluded_files:
        excluded = file_path.relative_to(discovery.root_path)
        log_verbose(f"  Excluded by build constraints: {excluded}", verbose, quiet)
    for package in packages:
        log_verbose(f"{package.name} ({package.path}): {len(package.files)} files", verbose, quiet)

    # Step 2: Extract and aggregate
    log("Extracting configuration...", quiet=quiet)
    aggregator = ConfigAggregator(config.extract)
    try:
        configs = aggregator.aggregate(packages)
    except EnvdocError as e:
        print(f"Error during extraction: {e}", file=sys.stderr)
        return 1

    for warning in aggregator.get_warnings():
        log(f"Warning: {warning}", quiet=quiet)

    log_verbose(f"Configuration types: {len(configs)}", verbose, quiet)
    for name in sorted(configs):
        log_verbose(f"  {name}: {len(configs[name].keys)} keys", verbose, quiet)

    # Step 3: Render and write
    log("Rendering markdown...", quiet=quiet)
    try:
        if output_path is None:
            write_markdown(stdout or sys.stdout, configs, config.render)
        else:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, "w", encoding="utf-8") as f:
                write_markdown(f, configs, config.render)
            log(f"Markdown written to: {output_path}", quiet=quiet)
    except RenderError as e:
        print(f"Error during rendering: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error writing file: {e}", file=sys.stderr)
        return 1

    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 = success, non-zero = error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
    except ConfigError as e:
        print(f"Error in configuration: {e}", file=sys.stderr)
        return 1

    output_path = Path(args.output) if args.output else None

    return run_pipeline(
        package_path=Path(args.path),
        config=config,
        output_path=output_path,
        force=args.force,
        verbose=args.verbose,
        quiet=args.quiet,
    )


if __name__ == "__main__":
    sys.exit(main())
