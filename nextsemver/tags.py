"""Find the release tag that the next version builds on."""

import datetime
import re

from dataclasses import dataclass, field
from typing import Optional

from .client import HostingService
from .observer import ResolutionObserver
from .utils import from_epoch_millis
from .versions import Semver, is_base_tag, is_semver_tag, parse_semver


TAG_PAGE_SIZE = 20

# Default merge commit message, e.g. "Merge pull request #123 in FOO/bar from ..."
MERGED_PR_RE = re.compile(r"^merge pull request #(\d+)", flags=re.IGNORECASE)


@dataclass
class Tag:
    """A semantic version tag and (optionally) details of its commit."""

    display_name: str
    commit_hash: str
    commit_message: Optional[str] = None
    commit_timestamp: Optional[datetime.datetime] = None
    semver: Optional[Semver] = None

    @classmethod
    def from_api(cls, item: dict) -> "Tag":
        """Build a Tag from a Bitbucket tag object."""
        name = item["displayId"]
        return cls(name, item.get("latestCommit", ""), semver=parse_semver(name))

    def attach_commit(self, commit: dict):
        """Record the message and author timestamp of the tagged commit."""
        self.commit_message = commit.get("message") or ""
        self.commit_timestamp = from_epoch_millis(commit.get("authorTimestamp"))


@dataclass
class BaseTagResolution:
    """The result of walking the tag history."""

    base_tag: Optional[Tag] = None

    # Every semver tag seen up to and including the base, newest first
    chain: list[Tag] = field(default_factory=list)

    excluded_pull_request_id: Optional[int] = None

    @property
    def latest(self) -> Optional[Tag]:
        return self.chain[0] if self.chain else None

    @property
    def cutoff(self) -> Optional[datetime.datetime]:
        """Pull requests updated at or before this were already released."""
        return self.base_tag.commit_timestamp if self.base_tag else None

    @property
    def base_version(self) -> Semver:
        if self.base_tag is None:
            return Semver(0, 0, 0)
        return self.base_tag.semver


def extract_pull_request_id(message: Optional[str]) -> Optional[int]:
    """Return the pull request id if this is a pull request merge commit."""
    if match := MERGED_PR_RE.match(message or ""):
        return int(match.group(1))
    return None


def resolve_tag_chain(
    service: HostingService,
    observer: Optional[ResolutionObserver] = None,
    page_size: int = TAG_PAGE_SIZE,
) -> BaseTagResolution:
    """
    Walk the tags (newest first) until the most recent full release is found.

    Commits are only fetched for the newest semver tag and for release
    candidates, to keep the number of requests down.
    """
    observer = observer or ResolutionObserver()
    resolution = BaseTagResolution()
    start = 0

    while True:
        page = service.list_tags(start, page_size)

        for item in page.values:
            name = item.get("displayId") or ""
            if not is_semver_tag(name):
                observer.tag_skipped(name)
                continue

            tag = Tag.from_api(item)
            resolution.chain.append(tag)
            observer.tag_added(tag)

            is_base = is_base_tag(name)
            if len(resolution.chain) == 1 or is_base:
                tag.attach_commit(service.get_commit(tag.commit_hash))

            if is_base:
                # The commit timestamp can trail the pull request's merge time
                # by a second or two, so the pull request id is more reliable
                resolution.base_tag = tag
                resolution.excluded_pull_request_id = extract_pull_request_id(
                    tag.commit_message
                )
                observer.tag_chain_resolved(resolution)
                return resolution

        if page.exhausted:
            observer.tag_chain_resolved(resolution)
            return resolution

        start = page.next_page_start
