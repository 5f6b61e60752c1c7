"""Deterministic process exit codes used when no step decided the outcome.

A failing step always propagates its own exit code instead.
"""

SUCCESS = 0
USER_ERROR = 2
INTERRUPTED = 130
