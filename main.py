"""
Garry - Main Entry Point

Command-line access to the Garry client core: check a warranty end date
offline, format dates, log in to the Garry services and print the
warranty dashboard.
"""

import asyncio
import sys
import logging
from typing import Dict, List, Optional

import aiohttp

from garry.api import ApiException, GarryAPIClient, get_token_storage
from garry.compute import (
    InvalidDateFormat,
    format_display_date,
    format_machine_date,
    get_evaluator,
)
from garry.config import config
from garry.dashboard import DashboardService
from garry.utils import DashboardReporter

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    stream=sys.stderr
)
logger = logging.getLogger(__name__)


USAGE = """Usage:
  python main.py status <end_date> [--today YYYY-MM-DD] [--locale fr|en]
  python main.py format <date> [--locale fr|en]
  python main.py login <email> <password>
  python main.py logout
  python main.py dashboard [--today YYYY-MM-DD] [--locale fr|en] [--output FILE]
  python main.py --help"""


def pop_option(args: List[str], name: str) -> Optional[str]:
    """Remove `name value` from args and return value (None when absent)."""
    if name not in args:
        return None
    index = args.index(name)
    if index + 1 >= len(args):
        raise ValueError(f"Missing value for {name}")
    value = args[index + 1]
    del args[index:index + 2]
    return value


# Options accepted by each command
COMMAND_OPTIONS = {
    "status": ("--today", "--locale"),
    "format": ("--locale",),
    "login": (),
    "logout": (),
    "dashboard": ("--today", "--locale", "--output"),
}


def parse_options(command: str, args: List[str]) -> Dict[str, str]:
    """Pop the options `command` accepts from args, reject any other option."""
    allowed = COMMAND_OPTIONS[command]
    options = {}
    for name in allowed:
        value = pop_option(args, name)
        if value is not None:
            options[name] = value

    for arg in args:
        if arg.startswith("--"):
            raise ValueError(f"Option {arg} is not supported by '{command}'")
    return options


class GarryRunner:

    def __init__(self):
        self.token_storage = get_token_storage(config.token_file)

    def build_client(self) -> GarryAPIClient:
        return GarryAPIClient.from_config(config, token_storage=self.token_storage)

    def status(self, end_date: str, today: Optional[str], locale: Optional[str]) -> int:
        evaluator = get_evaluator(today=today, locale=locale or config.locale)
        days = evaluator.days_remaining(end_date)
        status = evaluator.status(end_date)

        print(f"End date:       {format_display_date(end_date, evaluator.locale)}")
        print(f"Reference date: {evaluator.today.isoformat()}")
        print(f"Days remaining: {days}")
        print(f"Status:         {status.value}")
        return 0

    def format(self, value: str, locale: Optional[str]) -> int:
        print(format_display_date(value, locale or config.locale))
        print(format_machine_date(value))
        return 0

    async def login(self, email: str, password: str) -> int:
        async with self.build_client() as client:
            auth = await client.login(email, password)
        name = auth.user.name if auth.user else email
        print(f"✓ Logged in as {name}")
        return 0

    async def logout(self) -> int:
        async with self.build_client() as client:
            await client.logout()
        print("✓ Logged out")
        return 0

    async def dashboard(self, today: Optional[str], locale: Optional[str], output: Optional[str]) -> int:
        async with self.build_client() as client:
            service = DashboardService(client, locale=locale or config.locale)
            view = await service.load(now=today)

        reporter = DashboardReporter(view)
        if output:
            reporter.write(output)
        else:
            print(reporter.render())
        return 0


async def main(argv: List[str]) -> int:
    """Main entry point."""
    args = list(argv)
    if not args or args[0] in ("--help", "-h"):
        print(USAGE)
        return 0

    runner = GarryRunner()
    command = args.pop(0)

    if command not in COMMAND_OPTIONS:
        print(f"Unknown command: {command}")
        print("Use --help for usage information")
        return 2

    try:
        options = parse_options(command, args)
        today = options.get("--today")
        locale = options.get("--locale")
        output = options.get("--output")

        if command == "status" and len(args) == 1:
            return runner.status(args[0], today, locale)
        elif command == "format" and len(args) == 1:
            return runner.format(args[0], locale)
        elif command == "login" and len(args) == 2:
            return await runner.login(args[0], args[1])
        elif command == "logout" and not args:
            return await runner.logout()
        elif command == "dashboard" and not args:
            return await runner.dashboard(today, locale, output)
        else:
            print(f"Unknown command or arguments: {command} {' '.join(args)}".rstrip())
            print("Use --help for usage information")
            return 2

    except InvalidDateFormat as e:
        print(f"✗ {e}")
        return 1
    except ApiException as e:
        logger.debug(f"API call failed - status={e.status_code}")
        print(f"✗ {e.message}")
        return 1
    except asyncio.TimeoutError:
        logger.debug(f"Request timed out - timeout={config.request_timeout_seconds}s")
        print(f"✗ Connection failed: no response within {config.request_timeout_seconds}s")
        return 1
    except aiohttp.ClientError as e:
        print(f"✗ Connection failed: {e}")
        return 1
    except ValueError as e:
        print(f"✗ {e}")
        return 2


def run() -> None:
    sys.exit(asyncio.run(main(sys.argv[1:])))


if __name__ == "__main__":
    run()
