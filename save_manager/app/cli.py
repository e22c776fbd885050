"""save-manager CLI.

Commands:
- `create <name> <path>...`, `delete <name>`, `switch <name>`
- `list [saves|versions]`
- `save [name]`, `load [name|index|auto]`, `overwrite <name|index>`
- `remove <name|index>...`, `update name <name>`
- `status`, `check`
"""

from __future__ import annotations

import argparse
import os
import sys
from datetime import datetime
from typing import Any

from .. import __version__
from ..core.controller import SaveManagerController
from ..core.errors import SaveManagerError


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="save-manager",
        description="Keep named versions of directories, with an autosave on every load",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output",
    )
    parser.add_argument(
        "--data-dir",
        metavar="PATH",
        help="Directory holding data.json and snapshots (default: platform data dir)",
    )

    subparsers = parser.add_subparsers(dest="command")

    create = subparsers.add_parser("create", help="Create a category tracking one or more paths")
    create.add_argument("name", help="Name of new category")
    create.add_argument("paths", nargs="+", metavar="path", help="Paths to track")

    delete = subparsers.add_parser("delete", help="Delete a category and all of its versions")
    delete.add_argument("name", help="Name of category to delete")

    switch = subparsers.add_parser("switch", help="Switch the active category")
    switch.add_argument("name", help="Name of category to switch to")

    list_ = subparsers.add_parser("list", help="List categories and versions")
    list_.add_argument(
        "kind",
        nargs="?",
        choices=["saves", "versions"],
        help="saves = categories, versions = versions of the active category",
    )

    save = subparsers.add_parser("save", help="Save the current state as a new version")
    save.add_argument("name", nargs="?", help="Name of version")

    load = subparsers.add_parser("load", help="Load a version (default: newest)")
    load.add_argument(
        "name",
        nargs="?",
        metavar="name|index",
        help="Name or index of version to load, or `auto` to load the autosave",
    )

    overwrite = subparsers.add_parser("overwrite", help="Replace a version with the current state")
    overwrite.add_argument("name", metavar="name|index", help="Name or index of version")

    remove = subparsers.add_parser("remove", help="Remove versions")
    remove.add_argument(
        "names",
        nargs="+",
        metavar="name|index",
        help="Names or indexes of versions to remove, applied in order",
    )

    update = subparsers.add_parser("update", help="Update properties of the active category")
    update.add_argument("field", choices=["name"], help="Property to update")
    update.add_argument("value", help="New value")

    subparsers.add_parser("status", help="Show data directory status")
    subparsers.add_parser("check", help="Check snapshots on disk against the ledger")

    return parser


def main(args: list[str] | None = None) -> int:
    parser = create_parser()
    parsed = parser.parse_args(args)

    if parsed.debug:
        os.environ["SAVE_MANAGER_DEBUG"] = "1"

    if not parsed.command:
        parser.print_help()
        return 1

    controller = SaveManagerController(data_dir=parsed.data_dir)

    if parsed.command == "create":
        return cmd_create(parsed, controller)
    if parsed.command == "delete":
        return cmd_delete(parsed, controller)
    if parsed.command == "switch":
        return cmd_switch(parsed, controller)
    if parsed.command == "list":
        return cmd_list(parsed, controller)
    if parsed.command == "save":
        return cmd_save(parsed, controller)
    if parsed.command == "load":
        return cmd_load(parsed, controller)
    if parsed.command == "overwrite":
        return cmd_overwrite(parsed, controller)
    if parsed.command == "remove":
        return cmd_remove(parsed, controller)
    if parsed.command == "update":
        return cmd_update(parsed, controller)
    if parsed.command == "status":
        return cmd_status(controller)
    if parsed.command == "check":
        return cmd_check(controller)

    parser.print_help()
    return 1


def cmd_create(args: argparse.Namespace, controller: SaveManagerController) -> int:
    result = controller.create(args.name, args.paths)
    if not result.get("success"):
        return _print_error(result)

    print(f"Created category {result['name']}")
    if result.get("activated"):
        print(f"Switched active category to {result['name']}")
    return 0


def cmd_delete(args: argparse.Namespace, controller: SaveManagerController) -> int:
    result = controller.delete(args.name)
    if not result.get("success"):
        return _print_error(result)

    print(f"Deleted category {result['name']}")
    return 0


def cmd_switch(args: argparse.Namespace, controller: SaveManagerController) -> int:
    result = controller.switch(args.name)
    if not result.get("success"):
        return _print_error(result)

    print(f"Switched active category to {result['name']}")
    return 0


def cmd_list(args: argparse.Namespace, controller: SaveManagerController) -> int:
    if args.kind in (None, "saves"):
        result = controller.list_categories()
        if not result.get("success"):
            return _print_error(result)
        _print_categories(result)

    if args.kind is None:
        print()

    if args.kind in (None, "versions"):
        result = controller.list_versions()
        if not result.get("success"):
            return _print_error(result)
        _print_versions(result, controller)

    return 0


def cmd_save(args: argparse.Namespace, controller: SaveManagerController) -> int:
    result = controller.save(args.name)
    if not result.get("success"):
        return _print_error(result)

    if result.get("name"):
        print(f"Saved {result['name']} in {result['category']}")
    else:
        print(f"Saved version {result['position']} in {result['category']}")
    return 0


def cmd_load(args: argparse.Namespace, controller: SaveManagerController) -> int:
    result = controller.load(args.name)
    if not result.get("success"):
        return _print_error(result)

    if result.get("autosave"):
        print(f"Loaded autosave in {result['category']}")
    else:
        print(f"Loaded version {result['name']} in {result['category']}")
    return 0


def cmd_overwrite(args: argparse.Namespace, controller: SaveManagerController) -> int:
    result = controller.overwrite(args.name)
    if not result.get("success"):
        return _print_error(result)

    print(f"Overwrote version {args.name} in {result['category']}")
    return 0


def cmd_remove(args: argparse.Namespace, controller: SaveManagerController) -> int:
    result = controller.remove(args.names)
    if not result.get("success"):
        return _print_error(result)

    for label in result.get("removed", []):
        print(f"Removed version {label} in {result['category']}")
    return 0


def cmd_update(args: argparse.Namespace, controller: SaveManagerController) -> int:
    # `name` is the only updatable property
    result = controller.rename(args.value)
    if not result.get("success"):
        return _print_error(result)

    print(f"Renamed category {result['oldName']} to {result['name']}")
    return 0


def cmd_status(controller: SaveManagerController) -> int:
    try:
        status = controller.get_status()
    except SaveManagerError as e:
        return _print_error({"error": str(e)})
    print(f"Data directory:  {status.data_dir}")
    print(f"State file:      {status.state_file}")
    print(f"Categories:      {status.category_count}")
    print(f"Active category: {status.active_category or '(none)'}")
    if status.active_category:
        print(f"Versions:        {status.save_count}")
        print(f"Autosave:        {'yes' if status.has_autosave else 'no'}")
    return 0


def cmd_check(controller: SaveManagerController) -> int:
    try:
        result = controller.validate_system()
    except SaveManagerError as e:
        return _print_error({"error": str(e)})
    if result["valid"]:
        print("All snapshots match the ledger")
        return 0

    for issue in result["issues"]:
        print(f"  - {issue}")
    return 1


def format_timestamp(value: str | None, date_format: str) -> str:
    """Render a stored ISO timestamp for display, passing through anything unparseable."""
    if not value:
        return ""
    try:
        return datetime.fromisoformat(value).strftime(date_format)
    except ValueError:
        return value


def _print_categories(result: dict[str, Any]) -> None:
    categories = result.get("categories") or []
    if not categories:
        print("No categories yet")
        return

    print("Categories")
    for category in categories:
        marker = "->" if category.get("active") else "  "
        print(f"{marker}{category['name']}")


def _print_versions(result: dict[str, Any], controller: SaveManagerController) -> None:
    name = result.get("category")
    if name is None:
        print("No current category so no versions listed")
        return

    versions = result.get("versions") or []
    autosave = result.get("autosave")
    if not versions and not autosave:
        print(f"No versions in {name}")
        return

    date_format = controller.config.date_format
    print(f"Versions in {name}")
    if autosave:
        print(f"{format_timestamp(autosave, date_format)} auto")

    limit = controller.config.list_limit
    shown = versions[-limit:] if limit else versions
    if len(shown) < len(versions):
        print(f"  ... {len(versions) - len(shown)} older versions hidden")
    for version in shown:
        line = f"{format_timestamp(version.get('createdAt'), date_format)} {version['position']}"
        if version.get("name"):
            line += f" {version['name']}"
        print(line)


def _print_error(result: dict[str, Any]) -> int:
    print(f"error: {result.get('error')}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
