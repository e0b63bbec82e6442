"""Token estimator port - cheap token count approximations."""

from typing import Protocol


class TokenEstimator(Protocol):
    """Strategy estimating how many model tokens a text costs."""

    def estimate(self, text: str) -> int: ...
