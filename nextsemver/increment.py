"""Apply an increment level and pre-release options to a version."""

import re

from dataclasses import dataclass
from typing import Iterable, Optional

import semver

from .classify import IncrementLevel
from .versions import PreRelease, Semver


class ZeroMajorViolation(Exception):
    """Zero-major development mode was requested for a 1.0+ version."""


@dataclass(frozen=True)
class IncrementOptions:
    """Pre-release, metadata, and initial-development settings."""

    pre: Optional[str] = None
    rc: bool = False  # pylint: disable=invalid-name
    beta: bool = False
    alpha: bool = False
    meta: Optional[str] = None
    allow_zero_major_dev: bool = False

    def pre_release_type(self) -> Optional[str]:
        """Return the single pre-release type to apply, if any."""
        # Highest priority first
        candidates = (
            (self.pre, self.pre),
            (self.rc, "rc"),
            (self.beta, "beta"),
            (self.alpha, "alpha"),
        )
        for requested, pre_type in candidates:
            if requested:
                return pre_type
        return None


def bump(current: Semver, level: IncrementLevel, allow_zero_major_dev: bool = False):
    """Return the `semver.Version` after the numeric bump."""
    version = semver.Version(current.major, current.minor, current.patch)

    if level == IncrementLevel.MAJOR:
        if current.major > 0 or not allow_zero_major_dev:
            return version.bump_major()
        # Keep initial development releases below 1.0.0
        return version.bump_minor()

    if level == IncrementLevel.MINOR:
        return version.bump_minor()

    if level == IncrementLevel.PATCH:
        return version.bump_patch()

    return version


def find_latest_pre_release(
    base_label: str, pre_type: str, tag_names: Iterable[str]
) -> Optional[int]:
    """Return the highest `n` among tags named `[v]<base_label>-<pre_type>.<n>`."""
    # Tags may or may not carry a leading `v`; both count toward the sequence
    pattern = re.compile(
        rf"v?{re.escape(base_label)}-{re.escape(pre_type)}\.(\d+)", flags=re.ASCII
    )

    sequences = [
        int(match.group(1))
        for match in (pattern.fullmatch(name) for name in tag_names)
        if match
    ]
    return max(sequences, default=None)


def increment_version(
    current: Semver,
    level: IncrementLevel,
    options: IncrementOptions = IncrementOptions(),
    tag_names: Iterable[str] = (),
) -> Semver:
    """
    Return the next version.

    `tag_names` are the known tags, used to number successive pre-releases
    of the same version.
    """
    version = bump(current, level, options.allow_zero_major_dev)

    if pre_type := options.pre_release_type():
        latest = find_latest_pre_release(str(version), pre_type, tag_names)
        sequence = 1 if latest is None else latest + 1
        version = version.replace(prerelease=f"{pre_type}.{sequence}")

    if options.meta:
        version = version.replace(build=options.meta)

    return Semver(
        version.major,
        version.minor,
        version.patch,
        PreRelease.parse(version.prerelease) if version.prerelease else None,
        version.build or "",
    )
