"""Engine error types.

INVARIANT: InvalidPattern is the only error the engine raises, and only at
Rule construction time. Applying rules never fails.
"""

from __future__ import annotations


class InvalidPattern(ValueError):  # noqa: N818
    """A rule pattern could not be compiled.

    Attributes:
        pattern: The pattern source as supplied by the caller.
        reason: Compiler message describing the failure.
    """

    def __init__(self, pattern: object, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")
