"Compute the next semantic version from merged pull requests."

from .classify import IncrementLevel, InvalidPullRequestTitle
from .increment import ZeroMajorViolation
from .resolve import Resolution, ResolverConfig, resolve_next_version
from .versions import InvalidVersionFormat, Semver, parse_semver

__all__ = [
    "IncrementLevel",
    "InvalidPullRequestTitle",
    "InvalidVersionFormat",
    "Resolution",
    "ResolverConfig",
    "Semver",
    "ZeroMajorViolation",
    "parse_semver",
    "resolve_next_version",
]
