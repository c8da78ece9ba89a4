from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="loginbench",
        description="Drive concurrent browser logins against a sign-in page",
    )

    parser.add_argument(
        "--config",
        default=None,
        help="Path to a .yaml/.yml, .toml or .json run config",
    )
    parser.add_argument(
        "-s",
        "--starturl",
        dest="start_url",
        help="Page that starts the login flow and that a successful login returns to",
    )
    parser.add_argument(
        "-l",
        "--logins",
        type=int,
        help="Total number of logins to perform (default 40)",
    )
    parser.add_argument(
        "-c",
        "--concurrency",
        type=int,
        help="Number of logins running at the same time (default 2)",
    )
    parser.add_argument(
        "-u",
        "--user",
        dest="users",
        action="append",
        metavar="USERNAME:PASSWORD",
        help="Credential to log in with, may be repeated",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Directory for results.csv and screenshots",
    )
    parser.add_argument(
        "--screenshot",
        "--ss",
        action="store_true",
        default=None,
        help="Save screenshots of each step (requires --output)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for credential selection",
    )
    parser.add_argument(
        "--grace-period",
        type=float,
        help="Seconds to wait after an interrupt before forcing exit (default 5)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every step of every login",
    )

    return parser
