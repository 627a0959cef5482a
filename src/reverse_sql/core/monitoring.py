"""Sentry integration for error tracking and performance monitoring.

Sentry is initialized early in main() after logging setup. Without
REVERSE_SQL_SENTRY_DSN the SDK is initialized disabled, so spans and
captures become no-ops.
"""

import os

import sentry_sdk

from reverse_sql.__about__ import __version__

SENTRY_DSN_ENV = "REVERSE_SQL_SENTRY_DSN"


def setup_sentry(environment: str = "local") -> None:
    """Initialize Sentry from the environment for error tracking."""
    sentry_sdk.init(
        dsn=os.environ.get(SENTRY_DSN_ENV),
        traces_sample_rate=0.03,
        environment=environment,
        release=__version__,
        attach_stacktrace=True,
        send_default_pii=False,
    )
