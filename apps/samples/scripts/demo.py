#!/usr/bin/env python3
"""
Console walkthrough of the sample service.

Usage:
    python -m apps.samples.scripts.demo
    python -m apps.samples.scripts.demo --async --reset
    python -m apps.samples.scripts.demo --database-url sqlite:///./demo.db

Steps:
    1. Add Turtle, Fox and Cat in one commit
    2. Print the count and every row
    3. Find Fox and rename it to Dog
    4. Delete Turtle and print the affected row count
    5. Print the remaining rows
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Callable, Optional

# Add project root to path
project_root = Path(__file__).parent.parent.parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy.exc import MultipleResultsFound, SQLAlchemyError

from datarepo.database.initializer import DatabaseInitializer
from datarepo.database.manager import DatabaseManager
from datarepo.database.sql_driver import SQLDriver
from datarepo.logging.logger import LogConfig, get_logger
from apps.samples.models import Sample
from apps.samples.service import AsyncSampleService, SampleService

logger = get_logger("sample_demo")

SEED_NAMES = ("Turtle", "Fox", "Cat")

Echo = Callable[[str], None]


def _print_rows(rows, echo: Echo) -> None:
    for sample in rows:
        echo(f"{sample.id} | {sample.name}")


def run_scenario(service: SampleService, echo: Echo = print) -> dict:
    """Run the walkthrough on a blocking service; returns what it observed."""
    service.add_all([Sample(name=name) for name in SEED_NAMES])

    echo(f"# of records : {service.count()}\n")
    _print_rows(service.get_all(), echo)

    fox = service.find(Sample.name == "Fox")
    fox.name = "Dog"
    service.update(fox, fox.id)

    deleted = service.delete(service.find(Sample.name == "Turtle"))
    echo(f"{deleted}\n")

    remaining = service.get_all()
    _print_rows(remaining, echo)
    return {"deleted": deleted, "count": service.count(), "names": [s.name for s in remaining]}


async def run_scenario_async(service: AsyncSampleService, echo: Echo = print) -> dict:
    """Same walkthrough through the async service."""
    await service.add_all([Sample(name=name) for name in SEED_NAMES])

    echo(f"# of records : {await service.count()}\n")
    _print_rows(await service.get_all(), echo)

    fox = await service.find(Sample.name == "Fox")
    fox.name = "Dog"
    await service.update(fox, fox.id)

    deleted = await service.delete(await service.find(Sample.name == "Turtle"))
    echo(f"{deleted}\n")

    remaining = await service.get_all()
    _print_rows(remaining, echo)
    return {"deleted": deleted, "count": await service.count(), "names": [s.name for s in remaining]}


async def _run_async(driver: SQLDriver) -> dict:
    try:
        async with AsyncSampleService(driver.new_async_session()) as service:
            return await run_scenario_async(service)
    finally:
        await driver.disconnect()


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Exercise the generic CRUD service against the sample table",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--database-url",
        help="Override DATABASE_URL (sync SQLAlchemy URL)"
    )
    parser.add_argument(
        "--async",
        dest="use_async",
        action="store_true",
        help="Run through AsyncSampleService instead of SampleService"
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop and recreate the schema before running"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Console log level (default: WARNING)"
    )
    args = parser.parse_args(argv)

    LogConfig.setup_logging(level=args.log_level, to_file=False)

    if args.database_url:
        driver = SQLDriver(args.database_url)
    else:
        driver = DatabaseManager.get_instance().sql

    exit_code = 1
    try:
        initializer = DatabaseInitializer(driver)
        if args.reset:
            initializer.drop_create()
        else:
            initializer.create_all()

        if args.use_async:
            asyncio.run(_run_async(driver))
        else:
            with SampleService(driver.new_session()) as service:
                run_scenario(service)
        exit_code = 0
    except MultipleResultsFound:
        logger.error("Sample rows from an earlier run are present; rerun with --reset")
    except SQLAlchemyError as e:
        logger.error(f"Database error: {e}")
    finally:
        driver.engine.dispose()

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
