"""Command-line interface for rendering sheets from YAML records or samples."""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np
import yaml

from .builder import BuilderError, DocumentBuilder
from .config import RenderConfig, load_config
from .measurement_sheet import MeasurementSheet
from .models import Customer, CustomOrderRecord, MeasurementRecord, ProductionSheetRecord
from .order_sheet import CustomOrderSheet
from .production_sheet import ProductionSheet
from .samples import (
    generate_custom_order, generate_customer, generate_measurement_record,
    generate_production_record, make_faker,
)

SHEET_KINDS = ("measurements", "order", "production")


def load_record(path: Path) -> Dict[str, Any]:
    """Load one record from a YAML file."""
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a mapping")
    return data


def sheet_from_record(kind: str, data: Dict[str, Any]):
    """Build the sheet for kind from a plain record mapping."""
    if kind == "measurements":
        # The customer sits beside the measurements in the same file
        customer = Customer.from_dict(data.get("customer") or {})
        return MeasurementSheet(customer, MeasurementRecord.from_dict(data.get("measurements") or {}))
    if kind == "order":
        return CustomOrderSheet(CustomOrderRecord.from_dict(data))
    if kind == "production":
        return ProductionSheet(ProductionSheetRecord.from_dict(data))
    raise ValueError(f"unknown sheet kind {kind!r}")


def sample_sheet(kind: str, seed: int, photo: Optional[str] = None):
    """Build the sheet for kind from generated sample data."""
    rng = np.random.default_rng(seed)
    fake = make_faker(rng)
    if kind == "measurements":
        return MeasurementSheet(generate_customer(rng, fake, with_photo=photo), generate_measurement_record(rng, fake))
    if kind == "order":
        return CustomOrderSheet(generate_custom_order(rng, fake))
    if kind == "production":
        return ProductionSheet(generate_production_record(rng, fake))
    raise ValueError(f"unknown sheet kind {kind!r}")


def render(sheet, config: RenderConfig, out_path: Path) -> DocumentBuilder:
    builder = DocumentBuilder(config)
    data = builder.build(sheet)

    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(data)

    print(f"Rendered {sheet.name} sheet to {out_path} ({len(data)} bytes)")
    for name, table in builder.rendered_tables.items():
        print(f"  {name}: {len(table.data_rows)} rows, {len(table.total_rows)} total row(s)")
        if table.dropped_rows:
            print(f"  {name}: {table.dropped_rows} row(s) dropped at the page bottom")
    for fallback in builder.fallbacks:
        print(f"  {fallback.slot} fallback: {fallback.ref} ({fallback.reason})")
    return builder


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="couture-docs",
        description="Render tailoring sheets (measurements, custom orders, production follow-up) to PDF",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "kind",
        choices=SHEET_KINDS,
        help="Sheet to render",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--record",
        type=Path,
        help="YAML file holding the record",
    )
    source.add_argument(
        "--sample",
        action="store_true",
        help="Render a generated sample record",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for --sample",
    )
    parser.add_argument(
        "--photo",
        help="Customer photo path or URL for a sample measurement sheet",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--out",
        type=Path,
        help="Output PDF path (default: <kind>.pdf)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    out_path = args.out or Path(f"{args.kind}.pdf")

    if args.sample:
        sheet = sample_sheet(args.kind, args.seed, args.photo)
    else:
        sheet = sheet_from_record(args.kind, load_record(args.record))

    try:
        render(sheet, config, out_path)
    except BuilderError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
