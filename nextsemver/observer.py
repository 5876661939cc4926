"""Progress callbacks raised while a version is being resolved."""

from .logging import NOTICE, LoggingMixin


class ResolutionObserver:
    """Receives progress events. Every hook is a no-op by default."""

    def tag_skipped(self, name: str):
        """A tag was ignored because it is not a semantic version."""

    def tag_added(self, tag):
        """A semantic version tag was appended to the chain."""

    def tag_chain_resolved(self, resolution):
        """The tag walk finished, with or without a base tag."""

    def branch_cycle(self, pull_request):
        """A pull request's source branch was already being walked."""

    def pull_requests_collected(self, tree):
        """The full pull request tree has been fetched."""

    def increment_found(self, level):
        """The pull request titles were reduced to a single increment."""

    def version_resolved(self, resolution):
        """The next version was computed."""


class LoggingObserver(LoggingMixin, ResolutionObserver):
    """Report progress through the `logging` module."""

    def tag_skipped(self, name: str):
        self.logger.debug("Tag `%s` is not a semantic version, ignoring", name)

    def tag_added(self, tag):
        self.logger.debug("Tag `%s` (commit %s)", tag.display_name, tag.commit_hash)

    def tag_chain_resolved(self, resolution):
        if resolution.base_tag is None:
            self.logger.log(
                NOTICE,
                "No release tags found among %d semver tags - defaulting to 0.0.0",
                len(resolution.chain),
            )
            return

        self.logger.info(
            "Base tag `%s` committed at %s",
            resolution.base_tag.display_name,
            resolution.cutoff,
        )
        if resolution.excluded_pull_request_id is not None:
            self.logger.info(
                "Base tag was made on merged pull request #%d",
                resolution.excluded_pull_request_id,
            )

    def branch_cycle(self, pull_request):
        self.logger.warning(
            "Pull request #%d merges from `%s`, which is already being walked",
            pull_request.id,
            pull_request.source_branch_id,
        )

    def pull_requests_collected(self, tree):
        # Imported here to avoid a circular import
        from .pullrequests import render_pull_request_tree

        for line in render_pull_request_tree(tree):
            self.logger.debug("%s", line)

    def increment_found(self, level):
        self.logger.info("Increment level: %s", level.name)

    def version_resolved(self, resolution):
        self.logger.log(
            NOTICE, "%s -> %s", resolution.current.label, resolution.next.label
        )
