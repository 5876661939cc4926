"""Utility functions."""

import argparse
import datetime

from typing import Optional


def from_epoch_millis(value) -> Optional[datetime.datetime]:
    """Convert a Bitbucket millisecond timestamp into an aware datetime."""
    if value is None:
        return None

    return datetime.datetime.fromtimestamp(int(value) / 1000, tz=datetime.timezone.utc)


def normalize_branch_ref(branch: str) -> str:
    """Return the fully-qualified ref for a branch name."""
    # Bitbucket wants `refs/heads/main`, but users tend to type `main`
    if branch.startswith("refs/"):
        return branch
    return f"refs/heads/{branch}"


def str_to_bool(value: str) -> bool:
    """Convert a string to a boolean (case-insensitive)."""
    truthy_values = {"true", "t", "yes", "y", "1"}
    falsey_values = {"false", "f", "no", "n", "0"}

    # Normalize input to lowercase
    value = value.lower()

    if value in truthy_values:
        return True

    if value in falsey_values:
        return False

    raise argparse.ArgumentTypeError(f"Invalid boolean value: '{value}'")
