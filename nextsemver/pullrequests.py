"""Collect the pull requests merged since the last release."""

import datetime

from dataclasses import dataclass
from typing import Iterable, Optional

from .client import HostingService
from .observer import ResolutionObserver
from .utils import from_epoch_millis


ROOT_PAGE_SIZE = 30
CHILD_PAGE_SIZE = 20


@dataclass
class PullRequest:
    """A pull request and the pull requests merged into its source branch."""

    id: int  # pylint: disable=invalid-name
    title: str
    updated_at: Optional[datetime.datetime]
    source_branch_id: str
    children: tuple["PullRequest", ...] = ()

    @classmethod
    def from_api(cls, item: dict) -> "PullRequest":
        """Build a PullRequest from a Bitbucket pull request object."""
        return cls(
            id=int(item["id"]),
            title=item.get("title") or "",
            updated_at=from_epoch_millis(item.get("updatedDate")),
            source_branch_id=(item.get("fromRef") or {}).get("id", ""),
        )


def _is_released(
    pull_request: PullRequest,
    cutoff: Optional[datetime.datetime],
    excluded_id: Optional[int],
) -> bool:
    if excluded_id is not None and pull_request.id == excluded_id:
        return True

    return (
        cutoff is not None
        and pull_request.updated_at is not None
        and pull_request.updated_at <= cutoff
    )


def collect_pull_requests(
    service: HostingService,
    branch_ref: str,
    state: str = "MERGED",
    cutoff: Optional[datetime.datetime] = None,
    excluded_id: Optional[int] = None,
    max_depth: int = 1,
    observer: Optional[ResolutionObserver] = None,
) -> list[PullRequest]:
    """
    Return the tree of pull requests merged into `branch_ref`.

    The root branch is depth 0. Pull requests at depth `max_depth` are leaves.
    Only the root branch honors `cutoff` and `excluded_id`; anything merged
    into a feature branch is assumed to be unreleased.
    """
    observer = observer or ResolutionObserver()
    return _collect(
        service,
        branch_ref,
        state,
        cutoff,
        excluded_id,
        depth=0,
        max_depth=max_depth,
        path=frozenset({branch_ref}),
        observer=observer,
    )


def _collect(
    service: HostingService,
    branch_ref: str,
    state: str,
    cutoff: Optional[datetime.datetime],
    excluded_id: Optional[int],
    *,
    depth: int,
    max_depth: int,
    path: frozenset,
    observer: ResolutionObserver,
) -> list[PullRequest]:
    # pylint: disable=too-many-arguments
    page_size = ROOT_PAGE_SIZE if depth == 0 else CHILD_PAGE_SIZE
    results = []
    start = 0

    while True:
        page = service.list_pull_requests(branch_ref, state, start, page_size)

        stopped = False
        for item in page.values:
            pull_request = PullRequest.from_api(item)
            if _is_released(pull_request, cutoff, excluded_id):
                stopped = True
                break

            if depth >= max_depth:
                pull_request.children = ()
            elif pull_request.source_branch_id in path:
                observer.branch_cycle(pull_request)
                pull_request.children = ()
            else:
                pull_request.children = tuple(
                    _collect(
                        service,
                        pull_request.source_branch_id,
                        state,
                        None,
                        None,
                        depth=depth + 1,
                        max_depth=max_depth,
                        path=path | {pull_request.source_branch_id},
                        observer=observer,
                    )
                )

            results.append(pull_request)

        if stopped or page.exhausted:
            return results

        start = page.next_page_start


def flatten_pull_requests(tree: Iterable[PullRequest]) -> list[PullRequest]:
    """Return every pull request in the tree, parents before children."""
    result = []
    for pull_request in tree:
        result.append(pull_request)
        result.extend(flatten_pull_requests(pull_request.children))
    return result


def render_pull_request_tree(tree: Iterable[PullRequest], indent: int = 0) -> list[str]:
    """Return one indented line per pull request title."""
    lines = []
    for pull_request in tree:
        lines.append("    " * indent + pull_request.title)
        lines.extend(render_pull_request_tree(pull_request.children, indent + 1))
    return lines
