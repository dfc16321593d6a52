"""
Demo entry point: submit the sample document through the rate-limited client.
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from prometheus_client import CollectorRegistry

from shared.config import get_config
from shared.errors import ConfigError, SubmissionClientException
from shared.logging import configure_logging, get_logger
from shared.metrics import get_metrics_collector
from .adapters.transport import StaticTransport
from .documents.samples import sample_documents
from .submission.service import SubmissionService


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Submit a sample document within the request quota")
    parser.add_argument("--signature", default="signature123", help="Signature header value")
    parser.add_argument("--api-url", default=None, help="Endpoint URL (default from settings)")
    parser.add_argument("--limit", type=int, default=None, help="Requests allowed per period")
    parser.add_argument("--period", type=float, default=None, help="Quota period in seconds")
    parser.add_argument("--count", type=int, default=1, help="Number of sample documents to submit")
    parser.add_argument("--dry-run", action="store_true", help="Do not contact the endpoint")
    parser.add_argument("--metrics-port", type=int, default=None, help="Expose Prometheus metrics on this port")
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    config = get_config(api_url=args.api_url, request_limit=args.limit, period_seconds=args.period)
    configure_logging(config.service_name, config.log_level)
    logger = get_logger("submission.main")
    metrics = get_metrics_collector(
        config.service_name,
        registry=CollectorRegistry() if args.metrics_port else None
    )
    if args.metrics_port:
        metrics.start_metrics_server(args.metrics_port)

    transport = StaticTransport() if args.dry_run else None
    documents = sample_documents(args.count)

    failures = 0
    async with SubmissionService.from_config(config, transport=transport, metrics=metrics) as service:
        for outcome in await asyncio.gather(
            *(service.submit(document, args.signature) for document in documents),
            return_exceptions=True
        ):
            if isinstance(outcome, SubmissionClientException):
                failures += 1
                logger.error("Failed to create document", code=outcome.code, error=outcome.message)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                logger.info("Document submitted", status_code=outcome.status_code)

    return 1 if failures else 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        return asyncio.run(run(args))
    except ConfigError as e:
        print(f"Invalid configuration: {e.message} {e.details}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
