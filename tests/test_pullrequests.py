"""Tests for collecting the pull request tree."""

import datetime

from nextsemver.observer import ResolutionObserver
from nextsemver.pullrequests import (
    PullRequest,
    collect_pull_requests,
    flatten_pull_requests,
    render_pull_request_tree,
)

from .fakes import FakeHostingService, millis, pr_item


ROOT = "refs/heads/master"


def at(timestamp: str) -> datetime.datetime:
    """Return the aware datetime of an ISO timestamp."""
    return datetime.datetime.fromtimestamp(
        millis(timestamp) / 1000, tz=datetime.timezone.utc
    )


def ids(tree):
    """Return the ids of the top level of a tree."""
    return [pull_request.id for pull_request in tree]


def test_from_api():
    """Bitbucket objects are converted into PullRequests."""
    pull_request = PullRequest.from_api(
        pr_item(9, "Patch: x", "2024-05-01T12:00:00", "refs/heads/fix")
    )

    assert pull_request.id == 9
    assert pull_request.title == "Patch: x"
    assert pull_request.updated_at == at("2024-05-01T12:00:00")
    assert pull_request.source_branch_id == "refs/heads/fix"
    assert pull_request.children == ()


def test_cutoff_is_inclusive():
    """Collection stops at the first pull request at or before the cutoff."""
    service = FakeHostingService(
        pull_requests={
            ROOT: [
                pr_item(5, "minor: e", "2024-01-05T00:00:00"),
                pr_item(4, "patch: d", "2024-01-04T00:00:00"),
                pr_item(3, "patch: c", "2024-01-03T00:00:00"),
                pr_item(2, "patch: b", "2024-01-02T00:00:00"),
            ]
        }
    )

    tree = collect_pull_requests(
        service, ROOT, cutoff=at("2024-01-03T00:00:00"), max_depth=0
    )

    assert ids(tree) == [5, 4]


def test_excluded_id_stops_before_cutoff():
    """The pull request that made the base tag stops collection immediately."""
    service = FakeHostingService(
        pull_requests={
            ROOT: [
                pr_item(5, "minor: e", "2024-01-05T00:00:00"),
                pr_item(4, "patch: d", "2024-01-04T00:00:01"),
                pr_item(3, "patch: c", "2024-01-03T23:59:59"),
            ]
        }
    )

    tree = collect_pull_requests(
        service,
        ROOT,
        cutoff=at("2024-01-04T00:00:00"),
        excluded_id=4,
        max_depth=0,
    )

    assert ids(tree) == [5]


def test_early_stop_skips_remaining_pages():
    """No further pages are fetched once an old pull request is found."""
    prs = [
        pr_item(100 - index, "patch: x", f"2024-03-{31 - index:02d}T00:00:00")
        for index in range(20)
    ]
    prs += [
        pr_item(60 - index, "patch: old", f"2024-01-{28 - index:02d}T00:00:00")
        for index in range(25)
    ]
    service = FakeHostingService(pull_requests={ROOT: prs})

    tree = collect_pull_requests(
        service, ROOT, cutoff=at("2024-02-01T00:00:00"), max_depth=0
    )

    assert len(tree) == 20
    assert service.calls_of("pull-requests") == [("pull-requests", ROOT, 0)]


def test_pagination_without_cutoff():
    """Without a cutoff every page is collected."""
    prs = [
        pr_item(index, "patch: x", "2024-01-01T00:00:00") for index in range(75, 0, -1)
    ]
    service = FakeHostingService(pull_requests={ROOT: prs})

    tree = collect_pull_requests(service, ROOT, max_depth=0)

    assert ids(tree) == list(range(75, 0, -1))
    assert [call[2] for call in service.calls_of("pull-requests")] == [0, 30, 60]


def test_children_collected_to_depth():
    """Children are collected without a cutoff until the depth bound."""
    service = FakeHostingService(
        pull_requests={
            ROOT: [
                pr_item(10, "minor: feature", "2024-02-01T00:00:00", "refs/heads/a"),
                pr_item(9, "patch: released", "2023-12-01T00:00:00", "refs/heads/b"),
            ],
            "refs/heads/a": [
                pr_item(8, "patch: old but unreleased", "2023-01-01T00:00:00", "refs/heads/c"),
            ],
            "refs/heads/c": [
                pr_item(7, "major: deep", "2023-01-01T00:00:00", "refs/heads/d"),
            ],
        }
    )
    cutoff = at("2024-01-01T00:00:00")

    shallow = collect_pull_requests(service, ROOT, cutoff=cutoff, max_depth=1)
    assert ids(shallow) == [10]
    assert ids(shallow[0].children) == [8]
    assert shallow[0].children[0].children == ()

    deep = collect_pull_requests(service, ROOT, cutoff=cutoff, max_depth=5)
    assert [pr.id for pr in flatten_pull_requests(deep)] == [10, 8, 7]

    root_only = collect_pull_requests(service, ROOT, cutoff=cutoff, max_depth=0)
    assert ids(root_only) == [10]
    assert root_only[0].children == ()


def test_branch_cycles_are_not_followed():
    """A source branch already on the current path is not walked again."""

    class CycleObserver(ResolutionObserver):
        """Remember which pull requests hit a cycle."""

        def __init__(self):
            self.cycles = []

        def branch_cycle(self, pull_request):
            self.cycles.append(pull_request.id)

    service = FakeHostingService(
        pull_requests={
            ROOT: [pr_item(3, "patch: a", "2024-01-01T00:00:00", "refs/heads/a")],
            "refs/heads/a": [pr_item(2, "patch: b", "2024-01-01T00:00:00", "refs/heads/b")],
            "refs/heads/b": [pr_item(1, "patch: back", "2024-01-01T00:00:00", "refs/heads/a")],
        }
    )
    observer = CycleObserver()

    tree = collect_pull_requests(service, ROOT, max_depth=10, observer=observer)

    assert [pr.id for pr in flatten_pull_requests(tree)] == [3, 2, 1]
    assert observer.cycles == [1]


def test_flatten_and_render():
    """Trees are flattened parents first and rendered with indentation."""
    tree = [
        PullRequest(
            1,
            "minor: parent",
            None,
            "a",
            (
                PullRequest(2, "patch: child", None, "b", (PullRequest(3, "doc: leaf", None, "c"),)),
                PullRequest(4, "patch: sibling", None, "d"),
            ),
        ),
        PullRequest(5, "major: other", None, "e"),
    ]

    assert [pr.id for pr in flatten_pull_requests(tree)] == [1, 2, 3, 4, 5]
    assert render_pull_request_tree(tree) == [
        "minor: parent",
        "    patch: child",
        "        doc: leaf",
        "    patch: sibling",
        "major: other",
    ]
