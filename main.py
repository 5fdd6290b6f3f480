"""
Main module for the Console Inventory client
Loads the configuration and exposes the console operations on the command line
"""

import argparse
from dataclasses import dataclass
import os
import sys
from typing import Any, Dict, List, Optional, Union

import dotenv
from console_controller import ConsoleController
from logger import Logger, LogLevel
from models import Console, ListQuery, PageResult
from service_error import ServiceError


DEFAULT_API_URL = "http://localhost:3333/api"


@dataclass
class Settings:
    """
    Client configuration read from the environment

    Attributes:
        api_url (str): API root, the consoles live under "<api_url>/consoles"
        timeout (Optional[float]): Request timeout in seconds, None waits forever
        retries (int): Retries for idempotent requests, 0 disables them
        backoff_factor (float): Backoff factor between retries
        ssl_cert (Union[str, bool]): CA bundle path, or whether to verify certificates
    """

    api_url: str = DEFAULT_API_URL
    timeout: Optional[float] = None
    retries: int = 0
    backoff_factor: float = 0.0
    ssl_cert: Union[str, bool] = True


def _read_number(name: str, cast: type, default: Any) -> Any:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _read_ssl_cert() -> Union[str, bool]:
    raw = os.getenv("SSL_CERT", "").strip()
    if not raw or raw.lower() == "true":
        return True
    if raw.lower() == "false":
        return False
    return raw


def setup_env() -> Settings:
    """
    Load environment variables from the .env file and return the client settings

    Raises:
        ValueError: When a numeric variable cannot be parsed

    Returns:
        Settings: Client settings
    """
    dotenv.load_dotenv(dotenv.find_dotenv(usecwd=True))

    retries = _read_number("API_RETRIES", int, 0)
    if retries < 0:
        raise ValueError(f"API_RETRIES must not be negative, got {retries}")

    return Settings(
        api_url=(os.getenv("API_URL") or DEFAULT_API_URL).rstrip("/"),
        timeout=_read_number("API_TIMEOUT", float, None),
        retries=retries,
        backoff_factor=_read_number("API_BACKOFF", float, 0.0),
        ssl_cert=_read_ssl_cert(),
    )


def get_controller(settings: Settings) -> ConsoleController:
    """
    Initialize the ConsoleController from the settings

    Args:
        settings (Settings): Client settings

    Returns:
        ConsoleController: Controller for the console resources
    """
    return ConsoleController(
        api_url=settings.api_url,
        ssl_cert=settings.ssl_cert,
        timeout=settings.timeout,
        retries=settings.retries,
        backoff_factor=settings.backoff_factor,
    )


def positive_int(value: str) -> int:
    """argparse type for page numbers and page sizes"""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """
    Build the command line parser

    Returns:
        argparse.ArgumentParser: Parser with one subcommand per operation
    """
    parser = argparse.ArgumentParser(description="Console Inventory client")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity level (-v for INFO, -vv for DEBUG)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    list_parser = commands.add_parser("list", help="List consoles page by page")
    list_parser.add_argument("-p", "--page", type=positive_int, default=1)
    list_parser.add_argument("-l", "--limit", type=positive_int, default=10)
    status = list_parser.add_mutually_exclusive_group()
    status.add_argument(
        "--active", dest="is_active", action="store_const", const=True,
        help="Only active consoles",
    )
    status.add_argument(
        "--inactive", dest="is_active", action="store_const", const=False,
        help="Only inactive consoles",
    )
    status.add_argument(
        "-a", "--include-inactive", action="store_true",
        help="Include inactive consoles",
    )
    list_parser.add_argument("--sort-by", help="Field to sort on, e.g. name")
    list_parser.add_argument("--sort-order", choices=["asc", "desc"])
    list_parser.add_argument("-s", "--search", help="Free text search")

    get_parser = commands.add_parser("get", help="Show a console")
    get_parser.add_argument("id")

    create_parser = commands.add_parser("create", help="Register a new console")
    create_parser.add_argument("--name", required=True)
    create_parser.add_argument("--manufacturer", required=True)
    create_parser.add_argument("--serial-number", required=True)

    update_parser = commands.add_parser("update", help="Edit a console")
    update_parser.add_argument("id")
    update_parser.add_argument("--name")
    update_parser.add_argument("--manufacturer")
    update_parser.add_argument("--serial-number")

    for name, description in (
        ("activate", "Mark a console as active"),
        ("deactivate", "Mark a console as inactive"),
        ("delete", "Permanently delete a console"),
    ):
        commands.add_parser(name, help=description).add_argument("id")

    return parser


def format_console(console: Console) -> str:
    """
    Format a console as a single line

    Args:
        console (Console): Console to format

    Returns:
        str: One line description of the console
    """
    status = "active" if console.active else "inactive"
    return (
        f"#{str(console.id):<6} {console.name:<24} {console.manufacturer:<16} "
        f"{console.serial_number:<16} {status}"
    )


def print_page(page: PageResult[Console]) -> None:
    """
    Print a page of consoles followed by the pagination footer

    Args:
        page (PageResult[Console]): Page to print
    """
    for console in page:
        print(format_console(console))

    meta = page.meta
    print(f"Page {meta.current_page}/{meta.last_page} - {meta.total} consoles in total")


def run_command(controller: ConsoleController, args: argparse.Namespace) -> None:
    """
    Run the operation selected on the command line and print its result

    Args:
        controller (ConsoleController): Controller to use
        args (argparse.Namespace): Parsed arguments
    """
    if args.command == "list":
        print_page(
            controller.list(
                ListQuery(
                    page=args.page,
                    limit=args.limit,
                    is_active=args.is_active,
                    include_inactive=args.include_inactive,
                    sort_by=args.sort_by,
                    sort_order=args.sort_order,
                    search=args.search,
                )
            )
        )
    elif args.command == "get":
        print(format_console(controller.get(args.id)))
    elif args.command == "create":
        print(
            format_console(
                controller.create(
                    {
                        "name": args.name,
                        "manufacturer": args.manufacturer,
                        "serial_number": args.serial_number,
                    }
                )
            )
        )
    elif args.command == "update":
        changes: Dict[str, Any] = {
            key: value
            for key, value in (
                ("name", args.name),
                ("manufacturer", args.manufacturer),
                ("serial_number", args.serial_number),
            )
            if value is not None
        }
        print(format_console(controller.update(args.id, changes)))
    elif args.command == "activate":
        print(format_console(controller.activate(args.id)))
    elif args.command == "deactivate":
        print(format_console(controller.deactivate(args.id)))
    elif args.command == "delete":
        controller.delete(args.id)
        print(f"Console {args.id} deleted")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point of the command line client

    Args:
        argv (Optional[List[str]]): Arguments, defaults to sys.argv

    Returns:
        int: Exit status
    """
    args = build_parser().parse_args(argv)

    verbosity_map = {
        0: LogLevel.WARNING,
        1: LogLevel.INFO,
        2: LogLevel.DEBUG,
    }
    logger = Logger(print_log_level=verbosity_map.get(args.verbose, LogLevel.DEBUG))

    try:
        settings = setup_env()
    except ValueError as e:
        logger.log_error(str(e))
        return 2

    try:
        run_command(get_controller(settings), args)
    except ServiceError as e:
        logger.log_error(f"Operation '{args.command}' failed")
        print(e.message, file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
