"""
Command-line interface for the layer exporter.
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from .collector import CollectedNodes, TreeCollector
from .document import Document, Node
from .exceptions import LayerExportError
from .exporters import ExportPipeline, ExportPreferences, PillowRenderer
from .exporters.formats import FORMATS, canonical_format_name, format_options_for
from .loader import load_document
from .progress import TqdmProgressReporter
from .utils import create_output_directory, format_duration, load_config, setup_logging, validate_manifest_path

NAME_COLLISION_HINT = "Some layers were not exported! (Are there many layers with the same name?)"


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = argparse.ArgumentParser(
        description="Export each layer of a layered document to its own image file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Export all layers as 24-bit PNG next to the manifest
  layer-export poster.yaml

  # Export only visible layers as JPEG into a separate folder
  layer-export poster.yaml -o ./out --format jpg --quality 10 --visible-only

  # Export 24-bit Targa without RLE compression
  layer-export poster.yaml --format tga --tga-bits 24 --no-alpha --no-rle

  # Show which layers would be exported
  layer-export poster.yaml --list
        """
    )

    parser.add_argument(
        "manifest",
        help="Path to the document manifest (YAML)"
    )

    parser.add_argument(
        "-o", "--output",
        help="Destination directory (default: from config, else the manifest's directory)"
    )

    parser.add_argument(
        "-c", "--config",
        help="Path to configuration file",
        default="config.yaml"
    )

    # Format options
    parser.add_argument(
        "-f", "--format",
        choices=sorted(FORMATS),
        help="Output file format (default: png)"
    )

    parser.add_argument(
        "--png8",
        action="store_true",
        help="PNG: save 8-bit palette images instead of 24-bit"
    )

    parser.add_argument(
        "--quality",
        type=int,
        help="JPEG: quality from 1 (lowest) to 12 (highest, default)"
    )

    parser.add_argument(
        "--tga-bits",
        type=int,
        choices=[24, 32],
        help="Targa: bits per pixel (default: 32)"
    )

    parser.add_argument(
        "--no-alpha",
        action="store_true",
        help="Targa: save without alpha channel"
    )

    parser.add_argument(
        "--no-rle",
        action="store_true",
        help="Targa: disable RLE compression"
    )

    # Layer selection
    parser.add_argument(
        "--visible-only",
        action="store_true",
        help="Export only layers that are currently visible"
    )

    parser.add_argument(
        "--list",
        action="store_true",
        help="List the collected layers and exit without exporting"
    )

    # Progress and logging
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable progress bar"
    )

    parser.add_argument(
        "--profile",
        action="store_true",
        help="Log how long collection and export took"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    parser.add_argument(
        "--log-file",
        help="Path to log file"
    )

    return parser


def build_preferences(args, config: Dict[str, Any], document: Document) -> ExportPreferences:
    """Merge configuration and command line arguments into export preferences."""
    export_config = dict(config.get('export', {}) or {})

    requested_format = args.format or export_config.get('format', 'png')
    format_name = canonical_format_name(requested_format)
    format_params = format_options_for(export_config.get('format_options'), requested_format)

    if args.png8:
        format_params['png8'] = True
    if args.quality is not None:
        format_params['quality'] = args.quality
    if args.tga_bits is not None:
        format_params['bits_per_pixel'] = args.tga_bits
    if args.no_alpha:
        format_params['alpha_channel'] = False
    if args.no_rle:
        format_params['rle_compression'] = False

    export_config['format'] = format_name
    export_config['format_options'] = {format_name: format_params}
    if args.output:
        export_config['destination'] = args.output
    if args.visible_only:
        export_config['visible_only'] = True

    return ExportPreferences.from_config(export_config, default_destination=document.path or Path.cwd())


def print_layers(document: Document, collected: CollectedNodes) -> None:
    """Print the layer tree, marking the layers that would be exported."""
    exported = set(collected.nodes)

    print(f"\n=== Layers of '{document.name}' ({document.width}x{document.height}) ===")
    for layer in reversed(document.layers):
        _print_node(layer, exported, depth=0)

    print(f"\nExportable layers: {len(collected.nodes)}")
    print(f"Visible layers: {len(collected.visible_nodes)}")


def _print_node(node: Node, exported: set, depth: int) -> None:
    marker = "*" if node in exported else " "
    visibility = "visible" if node.visible else "hidden"
    print(f"{marker} {'  ' * depth}{node.name} [{node.kind.value}, {visibility}]")
    for child in reversed(node.children):
        _print_node(child, exported, depth + 1)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    config: Dict[str, Any] = {}
    config_error = None
    if Path(args.config).exists():
        try:
            config = load_config(args.config)
        except Exception as e:
            config_error = e

    # Set up logging
    logging_config = config.get('logging', {}) or {}
    log_level = "DEBUG" if args.verbose else logging_config.get('level', "INFO")
    setup_logging(log_level, args.log_file or logging_config.get('file'))

    logger = logging.getLogger(__name__)

    if config_error is not None:
        logger.error(f"Failed to load configuration from {args.config}: {config_error}")
        return 1

    try:
        if config:
            logger.info(f"Loaded configuration from {args.config}")
        else:
            logger.info("No configuration file found, using defaults")

        progress_enabled = not args.no_progress and (config.get('progress', {}) or {}).get('enabled', True)
        progress = TqdmProgressReporter(disable=not progress_enabled)

        manifest = validate_manifest_path(args.manifest)
        document = load_document(manifest)

        # Collect layers
        started = time.time()
        collected = TreeCollector(progress).collect(document, traverse_hidden_groups=True)
        collection_duration = time.time() - started

        if args.profile:
            logger.info(f"Layers collected in {format_duration(collection_duration)}")

        logger.info(f"{len(collected.nodes)} layers found ({len(collected.visible_nodes)} visible)")

        if args.list:
            print_layers(document, collected)
            return 0

        prefs = build_preferences(args, config, document)
        create_output_directory(str(prefs.destination_directory))

        # Export
        pipeline = ExportPipeline(PillowRenderer(document), progress)
        result = pipeline.run(document, prefs, collected)

        if args.profile:
            logger.info(f"Export took {format_duration(collection_duration)} + "
                        f"{format_duration(result.execution_time)}")

        logger.info(f"Saved {result.exported_count} files.")

        if result.had_errors:
            logger.warning(NAME_COLLISION_HINT)
            for error in result.errors:
                logger.warning(f"  - {error}")
            return 1

        return 0

    except (LayerExportError, OSError, ValueError) as e:
        logger.error(f"Error: {e}")
        if args.verbose:
            import traceback
            logger.error(traceback.format_exc())
        return 1


if __name__ == "__main__":
    sys.exit(main())
