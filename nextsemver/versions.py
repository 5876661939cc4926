"""Parse, format, and order the semantic versions found in tags."""

import functools
import re

from dataclasses import dataclass
from typing import Iterable, Optional


# Semver tag with or without pre-release and/or metadata
SEMVER_TAG_RE = re.compile(r"v?(\d+)\.(\d+)\.(\d+)([-+].+)?", flags=re.ASCII)

# Semver tag without pre-release, but with or without metadata
SEMVER_TAG_BASE_RE = re.compile(r"v?(\d+)\.(\d+)\.(\d+)(\+.+)?", flags=re.ASCII)

# Trailing `.<n>` counter of a pre-release such as `alpha.2`
SEQUENCE_RE = re.compile(
    r"(?P<identifier>.+)\.(?P<sequence>0|[1-9]\d*)", flags=re.ASCII
)


class InvalidVersionFormat(ValueError):
    """Indicate that a string is not a semantic version."""


@dataclass(frozen=True)
class PreRelease:
    """The pre-release part of a version, e.g. `rc.2` or `snapshot`."""

    identifier: str
    sequence: Optional[int] = None

    @classmethod
    def parse(cls, text: str) -> "PreRelease":
        """Split a trailing numeric counter off of the identifier."""
        if match := SEQUENCE_RE.fullmatch(text):
            return cls(match["identifier"], int(match["sequence"]))
        return cls(text)

    @property
    def label(self) -> str:
        if self.sequence is None:
            return self.identifier
        return f"{self.identifier}.{self.sequence}"

    def __str__(self):
        return self.label


@dataclass(frozen=True)
class Semver:
    """A semantic version as used by release tags."""

    major: int = 0
    minor: int = 0
    patch: int = 0
    pre_release: Optional[PreRelease] = None
    build_metadata: str = ""

    @property
    def base_label(self) -> str:
        """The `major.minor.patch` portion of the label."""
        return f"{self.major}.{self.minor}.{self.patch}"

    @property
    def label(self) -> str:
        """Canonical string form of this version."""
        return format_semver(self)

    def to_dict(self) -> dict:
        """Return a JSON-serializable representation."""
        return {
            "label": self.label,
            "major": self.major,
            "minor": self.minor,
            "patch": self.patch,
            "preRelease": (
                {
                    "label": self.pre_release.label,
                    "identifier": self.pre_release.identifier,
                    "sequence": self.pre_release.sequence,
                }
                if self.pre_release
                else None
            ),
            "buildMetadata": self.build_metadata,
        }

    def __str__(self):
        return self.label


def is_semver_tag(name: str) -> bool:
    """Return True if the tag name is a semantic version."""
    return bool(SEMVER_TAG_RE.fullmatch(name or ""))


def is_base_tag(name: str) -> bool:
    """Return True if the tag name is a full release (no pre-release)."""
    return bool(SEMVER_TAG_BASE_RE.fullmatch(name or ""))


def parse_semver(text: str) -> Semver:
    """
    Return the Semver for this string.

    A leading `v` is accepted and dropped. Raises InvalidVersionFormat for
    anything else that is not `major.minor.patch[-pre][+meta]`.
    """
    match = SEMVER_TAG_RE.fullmatch(text or "")
    if not match:
        raise InvalidVersionFormat(f"Invalid semver version: `{text}`")

    suffix = match[4] or ""
    pre_label, _, build_metadata = suffix.partition("+")

    pre_release = None
    if pre_label.startswith("-") and len(pre_label) > 1:
        pre_release = PreRelease.parse(pre_label[1:])

    return Semver(
        int(match[1]),
        int(match[2]),
        int(match[3]),
        pre_release,
        build_metadata,
    )


def format_semver(version: Semver) -> str:
    """Return `major.minor.patch[-pre][+meta]`."""
    label = version.base_label
    if version.pre_release:
        label += f"-{version.pre_release.label}"
    if version.build_metadata:
        label += f"+{version.build_metadata}"
    return label


def compare_base(first: Semver, second: Semver) -> int:
    """Compare only the numeric parts. Negative means `first` is lower."""
    for left, right in (
        (first.major, second.major),
        (first.minor, second.minor),
        (first.patch, second.patch),
    ):
        if left != right:
            return left - right
    return 0


def _compare(first: Semver, second: Semver) -> int:
    if diff := compare_base(first, second):
        return diff

    # A full release outranks its own pre-releases
    if (first.pre_release is None) != (second.pre_release is None):
        return 1 if first.pre_release is None else -1

    first_key = (str(first.pre_release or ""), first.build_metadata)
    second_key = (str(second.pre_release or ""), second.build_metadata)
    return (first_key > second_key) - (first_key < second_key)


def sort_semvers(versions: Iterable[Semver]) -> list[Semver]:
    """Return the versions sorted highest first."""
    return sorted(versions, key=functools.cmp_to_key(_compare), reverse=True)
