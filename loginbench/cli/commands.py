from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from loginbench.config import ConfigError, RunConfig, load_config, parse_credential
from loginbench.credentials import CredentialSelector
from loginbench.driver import ArtifactRecorder, BrowserSessionDriver, SessionDriver
from loginbench.report import save_results
from loginbench.scheduler import (
    CancellationToken,
    Result,
    Scheduler,
    TaskContext,
    Watchdog,
    install_signal_handlers,
)
from loginbench.scheduler.cancellation import INTERRUPTED_EXIT_CODE

from .args import build_parser

LOG = logging.getLogger(__name__)


def run_cli(
    argv: list[str] | None = None, *, driver: SessionDriver | None = None
) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        _configure_logging(args.verbose)
        config = build_config(args)
        return cmd_run(config, driver or BrowserSessionDriver())

    except ConfigError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    except ExceptionGroup as exc:
        print(str(exc), file=sys.stderr)
        for error in exc.exceptions:
            print(f"  {type(error).__name__}: {error}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        return INTERRUPTED_EXIT_CODE


def build_config(args: argparse.Namespace) -> RunConfig:
    base = load_config(args.config) if args.config else RunConfig()
    users = (
        tuple(parse_credential(user) for user in args.users) if args.users else None
    )
    config = base.merged(
        start_url=args.start_url,
        logins=args.logins,
        concurrency=args.concurrency,
        users=users,
        output=args.output,
        screenshot=args.screenshot,
        seed=args.seed,
        grace_period=args.grace_period,
    )
    return config.validate()


def cmd_run(config: RunConfig, driver: SessionDriver) -> int:
    selector = CredentialSelector.seeded(config.users, config.seed)
    token = CancellationToken()
    watchdog = Watchdog(config.grace_period)
    watchdog.attach(token)

    try:
        results = asyncio.run(_run_logins(config, selector, token, driver))
        if config.output:
            LOG.info("Finalising...")
        save_results(results, config.output)
    finally:
        watchdog.disarm()

    if token.cancelled:
        return INTERRUPTED_EXIT_CODE
    return 0 if all(result.succeeded for result in results) else 1


async def _run_logins(
    config: RunConfig,
    selector: CredentialSelector,
    token: CancellationToken,
    driver: SessionDriver,
) -> list[Result]:
    install_signal_handlers(asyncio.get_running_loop(), token)
    scheduler = Scheduler(selector, token=token, output_dir=config.output)

    async def session(context: TaskContext):
        artifacts = ArtifactRecorder(context.output_dir, config.screenshot)
        context.log.info("Logging in as %s", context.credential.username)
        return await driver.drive(config.start_url, context.credential, artifacts)

    return await scheduler.run(config.logins, config.concurrency, session)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )
