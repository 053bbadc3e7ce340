#!/usr/bin/env python3
import argparse
import logging
import sys
from concurrent.futures import wait

from httpclient.client import TransportClient
from httpclient.config import ClientConfig, DEFAULT_USER_AGENT
from httpclient.metrics import OutcomeMetrics
from httpclient.net import Urllib3Transport
from httpclient.prometheus_exporter import PrometheusExporter
from httpclient.types import Request, Success


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Issue HTTP requests and print how each outcome was classified.")
    parser.add_argument("urls", nargs="+", help="One or more URLs to request.")
    parser.add_argument("-X", "--method", default="GET", help="HTTP method to use.")
    parser.add_argument("-H", "--header", dest="headers", action="append", default=[], help="Extra header, 'Name: value'.")
    parser.add_argument("--connect-timeout", type=float, default=5.0, help="HTTP connect timeout in seconds.")
    parser.add_argument("--timeout", type=float, default=15.0, help="HTTP read timeout in seconds.")
    parser.add_argument("--user-agent", default=DEFAULT_USER_AGENT, help="User-Agent header to send.")
    parser.add_argument("--workers", type=int, default=8, help="Number of transport worker threads.")
    parser.add_argument("--max-connections", type=int, default=16, help="Max connections per pool.")
    parser.add_argument("--max-redirects", type=int, default=5, help="Redirects to follow per request.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase logging verbosity.")
    parser.add_argument("--prometheus-port", type=int, default=0, help="Port for Prometheus metrics endpoint (0 to disable).")
    return parser.parse_args()


def parse_headers(values: list[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for value in values:
        name, sep, rest = value.partition(":")
        if not sep or not name.strip():
            raise SystemExit(f"Invalid header {value!r}, expected 'Name: value'")
        headers[name.strip()] = rest.strip()
    return headers


def main() -> int:
    args = parse_args()
    log_level = logging.WARNING
    if args.verbose == 1:
        log_level = logging.INFO
    elif args.verbose >= 2:
        log_level = logging.DEBUG
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(threadName)s %(message)s",
    )

    config = ClientConfig(
        user_agent=args.user_agent,
        connect_timeout=max(0.1, args.connect_timeout),
        read_timeout=max(0.1, args.timeout),
        max_connections=max(1, args.max_connections),
        workers=max(1, args.workers),
        max_redirects=max(0, args.max_redirects),
    )
    headers = parse_headers(args.headers)
    metrics = OutcomeMetrics()

    exporter = None
    if args.prometheus_port > 0:
        exporter = PrometheusExporter(metrics, port=args.prometheus_port)
        exporter.start()
        logging.info("Prometheus metrics available at http://0.0.0.0:%d/metrics", args.prometheus_port)

    failures = 0
    try:
        with TransportClient(Urllib3Transport(config), metrics=metrics) as client:
            futures = [
                (url, client.submit(Request(url=url, method=args.method.upper(), headers=headers)))
                for url in args.urls
            ]
            wait([f for _, f in futures])
            for url, future in futures:
                result = future.result()
                if isinstance(result, Success):
                    print(f"OK   {result.response.status_code} {url} ({len(result.data)} bytes)")
                else:
                    failures += 1
                    print(f"FAIL {url}: {result.error!r}")
    finally:
        if exporter:
            exporter.stop()

    totals, elapsed = metrics.snapshot()
    logging.info(
        "Calls=%d, successes=%d, transport_errors=%d, unexpected=%d, elapsed=%.2fs",
        totals.calls,
        totals.successes,
        totals.transport_failures,
        totals.unexpected_representations,
        elapsed,
    )
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
