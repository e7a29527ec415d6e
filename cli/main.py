"""CLI entry point and argument parsing"""

import argparse
import asyncio
import sys
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

import settings
from api_client import ClientServices, FailureNotifier, build_client
from cli.debug_setup import setup_logging
from cli.status_display import show_token_status
from session_auth.errors import ApiError
from session_auth.navigation import Navigator


console = Console()


class ConsoleNavigator(Navigator):
    """Presents the login entry point as a console prompt"""

    def __init__(self, console: Console):
        self.console = console

    def navigate_to_login(self, message: Optional[str] = None):
        if message:
            self.console.print(f"\n[yellow]{escape(message)}[/yellow]")
        self.console.print("Run [bold]login[/bold] to sign in again.")

    def navigate_after_login(self, redirect_path: Optional[str] = None):
        self.console.print("[green][OK][/green] Signed in")


def _parse_params(pairs) -> dict:
    params = {}
    for pair in pairs or []:
        if "=" not in pair:
            raise ValueError(f"Invalid parameter '{pair}', expected key=value")
        key, value = pair.split("=", 1)
        params[key] = value
    return params


async def _run(args, services: ClientServices) -> int:
    try:
        if args.command == "status":
            show_token_status(services.store, services.auth_state, console)

        elif args.command == "login":
            email = args.email or Prompt.ask("Email")
            password = args.password or Prompt.ask("Password", password=True)
            user = await services.auth.login(email, password)
            console.print("[green][OK][/green] Authentication successful!")
            if user:
                console.print(f"Signed in as {escape(str(user.get('email', user.get('id', ''))))}")

        elif args.command == "logout":
            await services.auth.logout()
            console.print("[green][OK][/green] Logged out")

        elif args.command == "refresh":
            console.print("Refreshing access token...")
            await services.coordinator.force_refresh()
            console.print("[green][OK][/green] Token refreshed successfully")
            show_token_status(services.store, services.auth_state, console)

        elif args.command == "get":
            response = await services.client.get(args.path, params=_parse_params(args.param))
            console.print_json(response.text)

        return 0

    except ApiError as e:
        console.print(f"[red][ERROR][/red] {escape(e.message)}")
        return 1
    finally:
        await services.aclose()


def main():
    """Entry point for the CLI"""
    parser = argparse.ArgumentParser(description="Session API client")
    parser.add_argument("--debug", "-d", action="store_true", help="Write debug logs to the debug log file")
    parser.add_argument("--base-url", default=None, help="Override backend base URL (default: from config)")
    parser.add_argument("--locale", default=None, help="Override locale sent as x-lang")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("status", help="Show stored credential status")

    login = subparsers.add_parser("login", help="Sign in with email and password")
    login.add_argument("--email", default=None)
    login.add_argument("--password", default=None)

    subparsers.add_parser("logout", help="Sign out and clear the stored credential")
    subparsers.add_parser("refresh", help="Refresh the access token now")

    get = subparsers.add_parser("get", help="Send an authenticated GET request")
    get.add_argument("path", help="Path relative to the base URL")
    get.add_argument("--param", "-p", action="append", help="Query parameter as key=value")

    args = parser.parse_args()
    setup_logging(args.debug, settings.LOG_LEVEL, settings.DEBUG_LOG_FILE)

    try:
        services = build_client(
            navigator=ConsoleNavigator(console),
            notifier=FailureNotifier(console=console),
            base_url=args.base_url,
            locale=args.locale or settings.DEFAULT_LOCALE,
        )
        sys.exit(asyncio.run(_run(args, services)))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
    except ValueError as e:
        console.print(f"[red]ERROR:[/red] {escape(str(e))}")
        sys.exit(2)


if __name__ == "__main__":
    main()
