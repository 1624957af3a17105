#!/usr/bin/env python3
import argparse
import os
import sys

from image_freshness.models import AuditSettings
from image_freshness.services.freshness_audit_service import FreshnessAuditService
from image_freshness.utils.logging import configure_logging, setup_logger

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    # numeric values stay strings here and are validated by AuditSettings
    parser = argparse.ArgumentParser(description="Image Freshness Audit")
    parser.add_argument('--kubeconfig', default=os.environ.get("KUBECONFIG_PATH"),
                        help='Path to a kubeconfig file, otherwise assume running in-cluster')
    parser.add_argument('--inventory-file', default=os.environ.get("INVENTORY_FILE"),
                        help='Read the image inventory from a YAML file instead of the cluster')
    parser.add_argument('--timeout', default=os.environ.get("REGISTRY_TIMEOUT", "30"),
                        help='Timeout in seconds for every registry request')
    parser.add_argument('--max-workers', default=os.environ.get("MAX_WORKERS", "8"),
                        help='Number of images evaluated concurrently')
    parser.add_argument('--log-level', default=os.environ.get("LOG_LEVEL", "INFO"),
                        choices=LOG_LEVELS, type=str.upper)
    parser.add_argument('--json', action='store_true', help='Print the report as JSON')
    args = parser.parse_args(argv)
    if args.log_level not in LOG_LEVELS:
        parser.error(f"invalid LOG_LEVEL {args.log_level!r}")
    return args


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)
    logger = setup_logger("FreshnessAudit")

    try:
        settings = AuditSettings(
            kubeconfig=args.kubeconfig,
            inventory_file=args.inventory_file,
            timeout=args.timeout,
            max_workers=args.max_workers,
            json_output=args.json,
        )
        logger.info("Starting freshness audit")
        report = FreshnessAuditService(settings).run()
        logger.info(f"Freshness audit completed: {len(report.results)} evaluated, {len(report.skipped)} skipped")
        return 0
    except Exception as e:
        logger.error(f"Freshness audit failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
