from __future__ import annotations

import argparse
import sys

from ams_client_sdk import load_config
from ams_client_sdk.exceptions import ApiError

from apps.asset_console.app.bootstrap import AssetConsoleBootstrap
from apps.asset_console.ui.list_view.sorting import SortDirection
from apps.asset_console.ui.widgets.table_printer import print_table


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Asset management console")
    parser.add_argument("--env-file", default=None)
    parser.add_argument("--list", dest="entity", default=None, help="Print one page of an entity list and exit")
    parser.add_argument("--search", default="")
    parser.add_argument("--sort", default=None, help="Sort by this column, ascending unless --desc is given")
    parser.add_argument("--desc", action="store_true")
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument("--headless", action="store_true")
    return parser.parse_args(argv)


def run_listing(bootstrap: AssetConsoleBootstrap, args: argparse.Namespace) -> int:
    if not bootstrap.session.authenticated:
        print("No stored session; sign in through the desktop console first.", file=sys.stderr)
        return 2
    service = bootstrap.service_for(args.entity)
    controller = service.build_controller()
    try:
        service.load()
    except ApiError as exc:
        print(f"{exc.code}: {exc.message} (trace_id={exc.trace_id})", file=sys.stderr)
        return 1
    controller.set_search(args.search)
    if args.sort or args.desc:
        direction = SortDirection.DESC if args.desc else SortDirection.ASC
        try:
            controller.set_sort(args.sort or controller.state.sort_key, direction)
        except ValueError as exc:
            print(exc, file=sys.stderr)
            return 2
    controller.set_page(args.page)
    print_table(controller.render(), sys.stdout, sort_field_labels=controller.config.labels)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    bootstrap = AssetConsoleBootstrap(config=load_config(args.env_file))
    if args.entity:
        return run_listing(bootstrap, args)
    from apps.asset_console.ui.gui_app import AssetConsoleApp

    AssetConsoleApp(bootstrap).start(headless=args.headless)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
