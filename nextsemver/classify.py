"""Derive the size of a release from pull request titles."""

import enum
import re

from typing import Iterable, Mapping


class IncrementLevel(enum.IntEnum):
    """How much of a version to bump, ordered by magnitude."""

    NONE = 0
    PATCH = 1
    MINOR = 2
    MAJOR = 3


# Title keywords and the increment they imply. Benign changes are supported
# but don't cause a release on their own.
DEFAULT_KEYWORDS: Mapping[str, IncrementLevel] = {
    "major": IncrementLevel.MAJOR,
    "breaking": IncrementLevel.MAJOR,
    "minor": IncrementLevel.MINOR,
    "feature": IncrementLevel.MINOR,
    "feat": IncrementLevel.MINOR,
    "patch": IncrementLevel.PATCH,
    "fix": IncrementLevel.PATCH,
    "doc": IncrementLevel.NONE,
    "docs": IncrementLevel.NONE,
    "upkeep": IncrementLevel.NONE,
    "chore": IncrementLevel.NONE,
}


class InvalidPullRequestTitle(Exception):
    """A merged pull request does not declare its semantic impact."""

    def __init__(self, pull_request_id: int, title: str):
        super().__init__(
            "Pull request title did not contain a valid Semver label: "
            f"#{pull_request_id} {title}"
        )
        self.pull_request_id = pull_request_id
        self.title = title


def build_title_pattern(keywords: Iterable[str]) -> re.Pattern:
    """
    Return a regex matching titles that start with one of the keywords.

    Will match (with the default table):
        Minor: Add the frobnicator
        fix the thing
        DOC:typo
    Will not match:
        Fixed the thing
        patch:
    """
    # Longest first so that `docs` is tried before `doc`
    alternatives = "|".join(
        re.escape(keyword) for keyword in sorted(keywords, key=len, reverse=True)
    )
    return re.compile(
        rf"^(?P<keyword>{alternatives})(?::|\s)\s*(?P<summary>\S.*)$",
        flags=re.IGNORECASE | re.DOTALL,
    )


def parse_keywords(pairs: Iterable[str]) -> dict[str, IncrementLevel]:
    """Parse `keyword=level` strings into a keyword table."""
    table = {}
    for pair in pairs:
        keyword, sep, level = pair.partition("=")
        keyword = keyword.strip()
        if not sep or not keyword or re.search(r"[\s:]", keyword):
            raise ValueError(f"Invalid keyword mapping `{pair}`")

        try:
            table[keyword.lower()] = IncrementLevel[level.strip().upper()]
        except KeyError as err:
            raise ValueError(f"Unknown increment level in `{pair}`") from err

    return table


def classify(pull_requests, keywords: Mapping[str, IncrementLevel] = DEFAULT_KEYWORDS):
    """
    Return the highest IncrementLevel declared by the pull request titles.

    Raises InvalidPullRequestTitle on the first title without a keyword.
    """
    lowered = {keyword.lower(): level for keyword, level in keywords.items()}
    if not lowered:
        raise ValueError("No pull request title keywords are configured")

    pattern = build_title_pattern(lowered)

    result = IncrementLevel.NONE
    for pull_request in pull_requests:
        match = pattern.match(pull_request.title or "")
        if not match:
            raise InvalidPullRequestTitle(pull_request.id, pull_request.title)

        result = max(result, lowered[match["keyword"].lower()])

    return result
