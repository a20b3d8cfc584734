"""Membership orchestration: join and unjoin."""

from kubefed.shared.functions.join import join
from kubefed.shared.functions.unjoin import unjoin

__all__ = ["join", "unjoin"]
