"""Command-line entrypoint to print the next version of a repository."""

import argparse
import json
import logging
import os
import sys

import requests

from .classify import DEFAULT_KEYWORDS, InvalidPullRequestTitle, parse_keywords
from .client import BitbucketClient
from .increment import ZeroMajorViolation
from .logging import setup_logging
from .observer import LoggingObserver
from .resolve import Resolution, ResolverConfig, resolve_next_version
from .utils import str_to_bool
from .versions import InvalidVersionFormat


def build_parser(environ=None) -> argparse.ArgumentParser:
    """Return the argument parser, with defaults taken from the environment."""
    env = os.environ if environ is None else environ

    parser = argparse.ArgumentParser(
        prog="nextsemver",
        description=(
            "Compute the next semantic version from the pull requests merged "
            "into a Bitbucket branch since the last release tag."
        ),
    )
    parser.add_argument(
        "--url",
        default=env.get("BITBUCKET_PROJECT_URL"),
        help="Bitbucket repository REST url (env: BITBUCKET_PROJECT_URL)",
    )
    parser.add_argument(
        "-u",
        "--username",
        default=env.get("BITBUCKET_USER"),
        help="Bitbucket username (env: BITBUCKET_USER)",
    )
    parser.add_argument(
        "-p",
        "--password",
        default=env.get("BITBUCKET_PASSWORD") or env.get("BITBUCKET_PSWD"),
        help="Bitbucket password (env: BITBUCKET_PASSWORD)",
    )
    parser.add_argument(
        "-b",
        "--branch",
        default="master",
        help="root branch to scan for merged pull requests (default: master)",
    )
    parser.add_argument(
        "-d",
        "--depth",
        type=int,
        default=1,
        help="levels of child pull requests to walk below the root branch",
    )
    parser.add_argument("--alpha", action="store_true", help="add an alpha pre-release")
    parser.add_argument("--beta", action="store_true", help="add a beta pre-release")
    parser.add_argument("--rc", action="store_true", help="add an rc pre-release")
    parser.add_argument("--pre", help="add a custom pre-release")
    parser.add_argument("--meta", help="add build metadata")
    parser.add_argument(
        "--dev",
        type=str_to_bool,
        nargs="?",
        const=True,
        default=env.get("NEXTSEMVER_DEV", "false"),
        help="keep the major version at zero during initial development",
    )
    parser.add_argument(
        "--keyword",
        action="append",
        default=[],
        metavar="KEYWORD=LEVEL",
        help="additional pull request title keyword (level: major/minor/patch/none)",
    )
    parser.add_argument("--json", action="store_true", help="print JSON output")
    parser.add_argument("-v", "--verbose", action="store_true")

    return parser


def format_result(resolution: Resolution, as_json: bool) -> str:
    """Return the text to print for this resolution."""
    if resolution.unchanged:
        # Tools can check for this rather than comparing versions
        return json.dumps({"unchanged": True}) if as_json else "unchanged"

    return json.dumps(resolution.next.to_dict()) if as_json else resolution.next.label


def entrypoint(argv=None):
    """Main entrypoint for this module."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    for name in ("url", "username", "password"):
        if not getattr(args, name):
            parser.error(f"Bitbucket {name} is missing")

    try:
        keywords = dict(DEFAULT_KEYWORDS)
        keywords.update(parse_keywords(args.keyword))

        config = ResolverConfig(
            branch=args.branch,
            depth=args.depth,
            pre=args.pre,
            rc=args.rc,
            beta=args.beta,
            alpha=args.alpha,
            meta=args.meta,
            dev=args.dev,
            keywords=keywords,
        )
    except ValueError as err:
        parser.error(str(err))

    client = BitbucketClient(args.url, args.username, args.password)

    try:
        resolution = resolve_next_version(config, client, LoggingObserver())
    except (
        InvalidVersionFormat,
        InvalidPullRequestTitle,
        ZeroMajorViolation,
        requests.RequestException,
    ) as err:
        logger.error("%s", err)
        sys.exit(1)

    print(format_result(resolution, args.json))
