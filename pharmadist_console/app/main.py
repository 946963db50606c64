from __future__ import annotations

import argparse
import json
import sys

from clients.pharmadist_sdk.config import SDKConfig
from clients.pharmadist_sdk.errors import ApiError
from clients.pharmadist_sdk.http_client import HttpClient
from clients.pharmadist_sdk.sync_client import SyncClient
from pharmadist_console.app.config import AppConfig
from pharmadist_console.app.data_source import FetchStatus
from pharmadist_console.app.error_presenter import build_error_payload, format_error_banner
from pharmadist_console.app.pages import PAGES, get_page
from pharmadist_console.app.remote_table import RemoteTable
from pharmadist_console.app.sync_channel import SyncEventChannel, socket_url_for
from pharmadist_console.app.sync_monitor import DELIVERY_LOG_SYNC_STEPS, LEDGER_SYNC_STEPS, SyncMonitor, SyncPhase
from pharmadist_console.app.ui.row_model import SortDirection
from pharmadist_console.app.ui.table_printer import format_table


def _parse_filters(raw_filters: list[str]) -> list[tuple[str, str]]:
    parsed: list[tuple[str, str]] = []
    for item in raw_filters:
        key, separator, value = item.partition("=")
        if not separator or not key.strip():
            raise argparse.ArgumentTypeError(f"invalid --filter '{item}', expected key=value")
        parsed.append((key.strip(), value.strip()))
    return parsed


def _parse_sort(raw_sort: str) -> tuple[str, SortDirection]:
    column_id, _, direction = raw_sort.partition(":")
    return column_id, SortDirection.DESC if direction.lower() == "desc" else SortDirection.ASC


def _resolve_token(args: argparse.Namespace, app_config: AppConfig) -> str | None:
    return args.token or app_config.access_token


def _sdk_config(args: argparse.Namespace) -> SDKConfig:
    config = SDKConfig.from_env(args.env_file)
    return config.with_base_url(args.base_url) if args.base_url else config


def cmd_pages(args: argparse.Namespace) -> int:
    for name in sorted(PAGES):
        options = PAGES[name]()
        print(f"{name:<20} {options.api_path}")
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    app_config = AppConfig.from_env(args.env_file)
    filters = _parse_filters(args.filter or [])
    sort = _parse_sort(args.sort) if args.sort else None
    options = get_page(args.page_name)
    http = HttpClient(_sdk_config(args))
    table = RemoteTable(options, http, access_token=_resolve_token(args, app_config), debounce_ms=app_config.search_debounce_ms)

    try:
        # apply everything before mounting so only the final state is fetched
        table.set_page_size(args.page_size or app_config.default_page_size)
        if args.search:
            table.set_search(args.search)
        for key, value in filters:
            table.set_filter(key, value)
        if args.page:
            table.set_page(args.page - 1)
        if sort:
            table.set_sort(*sort)

        table.mount()
        view = table.snapshot()
        print(format_table(view))
        if view.status is FetchStatus.IDLE:
            print("No access token available: set PHARMADIST_ACCESS_TOKEN or pass --token.", file=sys.stderr)
            return 1
        if view.status is FetchStatus.ERROR:
            return 1
        if args.export is not None:
            path = table.export(args.export or app_config.export_dir)
            if path is not None:
                print(f"Exported to {path}")
        return 0
    finally:
        table.unmount()
        http.close()


def cmd_sync(args: argparse.Namespace) -> int:
    app_config = AppConfig.from_env(args.env_file)
    token = _resolve_token(args, app_config)
    if not token:
        print("No access token available: set PHARMADIST_ACCESS_TOKEN or pass --token.", file=sys.stderr)
        return 1
    sdk_config = _sdk_config(args)
    # subscribe before starting the job so early progress events are not missed
    channel = _open_sync_channel(args, app_config, sdk_config) if args.follow else None
    try:
        http = HttpClient(sdk_config)
        client = SyncClient(http)
        try:
            if args.target == "ledger":
                started = client.start_ledger_sync(token)
                monitor = SyncMonitor(steps=LEDGER_SYNC_STEPS)
            else:
                started = client.start_delivery_log_sync(token)
                monitor = SyncMonitor(steps=DELIVERY_LOG_SYNC_STEPS)
        finally:
            http.close()
        progress = monitor.start(started)
        print(json.dumps({"sync_id": progress.sync_id, "step": progress.step, "stats": progress.stats}, indent=2))
        if channel is None:
            return 0
        progress = monitor.poll(channel.next_event, interval_seconds=args.poll_interval)
    finally:
        if channel is not None:
            channel.close()

    for entry in monitor.timeline:
        print(f"{entry['timestamp']} {entry['step']:<18} {entry['progress']:>5.1f}% {entry['message']}")
    if progress.phase is SyncPhase.FAILED:
        print(f"Sync failed: {progress.error_message}", file=sys.stderr)
        return 1
    print(json.dumps({"sync_id": progress.sync_id, "step": progress.step, "stats": progress.stats}, indent=2))
    return 0


def _open_sync_channel(args: argparse.Namespace, app_config: AppConfig, sdk_config: SDKConfig) -> SyncEventChannel | None:
    vendor_id = args.vendor_id or app_config.vendor_id
    if not vendor_id:
        print("No vendor id: set PHARMADIST_VENDOR_ID or pass --vendor-id to follow progress.", file=sys.stderr)
        return None
    channel = SyncEventChannel(app_config.socket_url or socket_url_for(sdk_config.base_url), vendor_id)
    if not channel.connect():
        print("Live sync progress unavailable: could not reach the event server.", file=sys.stderr)
        return None
    return channel


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pharmadist-console", description="PharmaDist listing console")
    parser.add_argument("--env-file", default=".env")
    parser.add_argument("--base-url", default=None, help="override PHARMADIST_BASE_URL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    pages_parser = subparsers.add_parser("pages", help="list the available listing pages")
    pages_parser.set_defaults(func=cmd_pages)

    list_parser = subparsers.add_parser("list", help="fetch and print one page of a listing")
    list_parser.add_argument("page_name", choices=sorted(PAGES))
    list_parser.add_argument("--page", type=int, default=None, help="1-based page number")
    list_parser.add_argument("--page-size", type=int, default=None)
    list_parser.add_argument("--search", default=None)
    list_parser.add_argument("--filter", action="append", help="key=value, repeatable")
    list_parser.add_argument("--sort", default=None, help="column[:desc]")
    list_parser.add_argument("--export", nargs="?", const="", default=None, help="export the page as CSV (default dir: PHARMADIST_EXPORT_DIR)")
    list_parser.add_argument("--token", default=None)
    list_parser.set_defaults(func=cmd_list)

    sync_parser = subparsers.add_parser("sync", help="start a backend sync job and follow its progress")
    sync_parser.add_argument("target", choices=["ledger", "delivery-logs"])
    sync_parser.add_argument("--token", default=None)
    sync_parser.add_argument("--vendor-id", default=None, help="room to follow (default: PHARMADIST_VENDOR_ID)")
    sync_parser.add_argument("--no-follow", dest="follow", action="store_false", help="start the job and exit")
    sync_parser.add_argument("--poll-interval", type=float, default=2.0, help="seconds between event checks")
    sync_parser.set_defaults(func=cmd_sync)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except ApiError as exc:
        print(format_error_banner(build_error_payload(exc)), file=sys.stderr)
        return 1
    except (ValueError, KeyError, argparse.ArgumentTypeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
