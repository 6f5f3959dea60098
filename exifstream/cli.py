# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Command-line interface for exifstream

Prints the decoded EXIF tags of one or more image files.

Copyright 2025 DNAi inc.
"""

import argparse
import json
import logging
import math
import sys
from pathlib import Path
from typing import List, Optional

from exifstream.core import read, read_stream
from exifstream.exceptions import ExifStreamError
from exifstream.options import ExifOptions, MultiRationalPolicy
from exifstream.tag_store import TagStore
from exifstream.tags import FloatTag, IntegerTag


def format_output(store: TagStore, format_type: str = "text") -> str:
    """
    Format decoded tags based on format type.
    
    Args:
        store: Decoded tags
        format_type: Output format ('text', 'json', 'csv')
        
    Returns:
        Formatted output string
    """
    if format_type == "json":
        records = []
        for tag in sorted(store, key=lambda t: t.tag_id):
            record = {"id": tag.tag_id, "label": tag.label, "value": tag.text_value}
            if isinstance(tag, IntegerTag):
                record["int"] = tag.int_value
            elif isinstance(tag, FloatTag):
                value = tag.float_value()
                # JSON has no NaN or Infinity
                record["float"] = value if math.isfinite(value) else None
            records.append(record)
        return json.dumps(records, indent=2, ensure_ascii=False, allow_nan=False)
    elif format_type == "csv":
        lines = ["Tag,Label,Value"]
        for tag in sorted(store, key=lambda t: t.tag_id):
            # Escape quotes in CSV
            value_str = tag.text_value.replace('"', '""')
            lines.append(f'0x{tag.tag_id:04X},"{tag.label}","{value_str}"')
        return "\n".join(lines)
    else:  # text format (default)
        return "\n".join(f"{label}: {value}" for label, value in store.as_dict().items())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exifstream",
        description="Print the EXIF tags of image files",
    )
    parser.add_argument('files', nargs='+', type=Path, help='Image file(s) to read')
    parser.add_argument('-f', '--format', choices=('text', 'json', 'csv'), default='text',
                        help='Output format (default: text)')
    parser.add_argument('--stream', action='store_true',
                        help='Read through the streaming loader instead of loading whole files')
    parser.add_argument('--thumbnail', action='store_true', help='Include IFD1 (thumbnail) tags')
    parser.add_argument('--strict', action='store_true', help='Skip entries with truncated payloads')
    parser.add_argument('--gps-only-fold', action='store_true',
                        help='Fold multi-component rationals only for GPS coordinates and timestamps')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s')
    
    options = ExifOptions(
        multi_rational_policy=(MultiRationalPolicy.FOLD_SEXAGESIMAL if args.gps_only_fold
                               else MultiRationalPolicy.FOLD_ALL),
        strict=args.strict,
        include_thumbnail=args.thumbnail,
    )
    
    status = 0
    for file_path in args.files:
        try:
            if args.stream:
                with open(file_path, 'rb') as f:
                    store = read_stream(f, options=options)
            else:
                store = read(file_path, options=options)
        except (ExifStreamError, OSError) as e:
            print(f"{file_path}: Error: {e}", file=sys.stderr)
            status = 1
            continue
        
        if len(args.files) > 1:
            print(f"======== {file_path}")
        print(format_output(store, args.format))
    
    return status
