"""Compute the next version of a repository from its tags and pull requests."""

from dataclasses import dataclass, field
from typing import Mapping, Optional

from .classify import DEFAULT_KEYWORDS, IncrementLevel, classify
from .client import HostingService
from .increment import IncrementOptions, ZeroMajorViolation, increment_version
from .observer import LoggingObserver, ResolutionObserver
from .pullrequests import collect_pull_requests, flatten_pull_requests
from .tags import BaseTagResolution, resolve_tag_chain
from .utils import normalize_branch_ref
from .versions import Semver


@dataclass(frozen=True)
class ResolverConfig:
    """Everything needed to resolve a version, apart from the service."""

    branch: str = "master"

    # Levels of pull requests to walk below the root branch
    depth: int = 1

    pre: Optional[str] = None
    rc: bool = False  # pylint: disable=invalid-name
    beta: bool = False
    alpha: bool = False
    meta: Optional[str] = None

    # Keep the major version at zero during initial development
    dev: bool = False

    keywords: Mapping[str, IncrementLevel] = field(
        default_factory=lambda: dict(DEFAULT_KEYWORDS)
    )

    def __post_init__(self):
        if self.depth < 0:
            raise ValueError(f"Depth must not be negative (got {self.depth})")

    @property
    def branch_ref(self) -> str:
        return normalize_branch_ref(self.branch)

    @property
    def increment_options(self) -> IncrementOptions:
        return IncrementOptions(
            pre=self.pre,
            rc=self.rc,
            beta=self.beta,
            alpha=self.alpha,
            meta=self.meta,
            allow_zero_major_dev=self.dev,
        )


@dataclass(frozen=True)
class Resolution:
    """The outcome of a version resolution."""

    current: Semver
    next: Semver
    is_first_release: bool
    increment: IncrementLevel
    tags: BaseTagResolution

    @property
    def unchanged(self) -> bool:
        """True if there is nothing to release."""
        return self.current.label == self.next.label and not self.is_first_release


def resolve_next_version(
    config: ResolverConfig,
    service: HostingService,
    observer: Optional[ResolutionObserver] = None,
) -> Resolution:
    """
    Return the current and next versions for the configured branch.

    Any error (remote or otherwise) aborts the whole resolution.
    """
    observer = observer or LoggingObserver()

    tags = resolve_tag_chain(service, observer)
    current = tags.base_version

    if config.dev and current.major > 0:
        raise ZeroMajorViolation(
            f"Initial development mode requested, but the current version "
            f"{current.label} is already past 1.0.0"
        )

    tree = collect_pull_requests(
        service,
        config.branch_ref,
        state="MERGED",
        cutoff=tags.cutoff,
        excluded_id=tags.excluded_pull_request_id,
        max_depth=config.depth,
        observer=observer,
    )
    observer.pull_requests_collected(tree)

    level = classify(flatten_pull_requests(tree), config.keywords)
    observer.increment_found(level)

    next_version = increment_version(
        current,
        level,
        config.increment_options,
        [tag.display_name for tag in tags.chain],
    )

    resolution = Resolution(
        current=current,
        next=next_version,
        is_first_release=tags.base_tag is None,
        increment=level,
        tags=tags,
    )
    observer.version_resolved(resolution)
    return resolution
