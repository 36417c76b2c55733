"""Command line entry point for medbill."""

import argparse
import json
import logging
import os
import sys
from datetime import date
from typing import List, Optional

import cv2

from .backends.yolo_backend import YoloBackend
from .billing.calculations import format_bill_number
from .config.settings import Config, load_config
from .core.constants import APP_NAME, SUPPORTED_IMAGE_FORMATS, VERSION
from .core.exceptions import ApplicationError, ValidationError
from .core.logging_config import configure_logging
from .extraction.assembler import BillExtractor
from .services.bill_scan_service import BillScanService
from .utils.detection_formatter import format_extracted_bill

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default="config.json", help="Path to config.json")
    common.add_argument("--log-level", default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Override the configured log level")
    common.add_argument("--format", dest="output_format", default="text", choices=["text", "json"],
                        help="Output format")
    common.add_argument("--bill-counter", type=int, default=1,
                        help="Counter used for the draft bill number in text output")

    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Extract medicine rows and bill details from pharmacy bill detections.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    extract = subparsers.add_parser("extract", parents=[common],
                                    help="Extract bill data from a detector JSON file")
    extract.add_argument("file", help="JSON list of predictions or a full detection response")
    extract.add_argument("--annotate-placeholders", action="store_true",
                         help="Fill missing prediction values with field placeholders")

    scan = subparsers.add_parser("scan", parents=[common],
                                 help="Detect fields in a bill image and extract bill data")
    scan.add_argument("image", help="Bill image file")
    scan.add_argument("--model", default=None, help="YOLO model path (defaults to the configured model)")

    return parser


def _read_records(path: str):
    try:
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError(f"'{path}' is not valid JSON: {e}") from e
    except OSError as e:
        raise ValidationError(f"Cannot read '{path}': {e}") from e

    if not isinstance(payload, (list, dict)):
        raise ValidationError(f"'{path}' must hold a list of predictions or a detection response")
    return payload


def run_extract(args: argparse.Namespace, config: Config) -> str:
    service = BillScanService(backend=None, extractor=BillExtractor.from_config(config), config=config)
    data = service.scan_predictions(_read_records(args.file), annotate=args.annotate_placeholders)
    return _render(data, args, config)


def run_scan(args: argparse.Namespace, config: Config) -> str:
    _, ext = os.path.splitext(args.image.lower())
    if ext not in SUPPORTED_IMAGE_FORMATS:
        raise ValidationError(f"Unsupported image format: {ext or args.image}")

    image = cv2.imread(args.image)
    if image is None:
        raise ValidationError(f"Cannot read image '{args.image}'")

    backend = YoloBackend(config)
    backend.load_model(args.model or config.detection_model)
    try:
        data = BillScanService(backend, config=config).scan(image)
    finally:
        backend.unload_model()
    return _render(data, args, config)


def _render(data, args: argparse.Namespace, config: Config) -> str:
    if args.output_format == "json":
        return json.dumps(data.to_dict(), indent=2, ensure_ascii=False)
    return format_extracted_bill(
        data,
        config.currency_symbol,
        discount_percentage=config.default_discount_percentage,
        cgst_percentage=config.default_cgst_percentage,
        sgst_percentage=config.default_sgst_percentage,
        bill_number=format_bill_number(config.bill_number_prefix, args.bill_counter, date.today().year),
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(args.config)

    configure_logging(
        log_level=args.log_level or config.log_level,
        log_dir=config.log_dir,
        enable_file_logging=config.enable_file_logging,
        structured_logging=config.structured_logging,
    )

    try:
        if args.command == "extract":
            output = run_extract(args, config)
        else:
            output = run_scan(args, config)
    except ApplicationError as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
