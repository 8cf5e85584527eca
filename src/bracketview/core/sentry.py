from __future__ import annotations

"""
Error reporting for long-running display processes.

A display usually runs unattended on a venue machine, so unexpected task
failures are forwarded to Sentry when a DSN is configured. Without one
everything here is a no-op.

Environment variables (all optional):
- SENTRY_DSN / BRACKETVIEW_SENTRY_DSN: DSN that enables reporting.
- SENTRY_ENV / ENV: Environment name. Defaults to development.
- SENTRY_TRACES_SAMPLE_RATE: Tracing sample rate, clamped to [0,1].
- SENTRY_DEBUG: Truthy (1/true/yes/on) to enable SDK debug output.

Usage:
    from bracketview.core.sentry import init_sentry, tag_display
    if init_sentry(context="bracketview-bracket"):
        tag_display(config)
"""

import logging
import os
from typing import TYPE_CHECKING, Any, Iterable, Optional, Sequence
from urllib.parse import urlparse

if TYPE_CHECKING:
    from bracketview.core.config import DisplayConfig

_LOG = logging.getLogger("bracketview.core.sentry")

DEFAULT_DSN_ENVS = ("SENTRY_DSN", "BRACKETVIEW_SENTRY_DSN")


def _parse_float_env(name: str, default: float) -> float:
    """Float from the environment, clamped to [0.0, 1.0].

    Unset or unparsable values give ``default``.
    """
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        _LOG.debug("Ignoring non-numeric %s=%r", name, raw)
        return default
    return min(1.0, max(0.0, value))


def _truthy_env(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


def _resolve_dsn(names: Iterable[str]) -> Optional[str]:
    """First non-empty DSN among ``names``, stripped of stray quotes."""
    for name in names:
        value = (os.getenv(name) or "").strip().strip("\"'")
        if value:
            return value
    return None


def _is_valid_dsn(dsn: str) -> bool:
    parsed = urlparse(dsn)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def init_sentry(
    *,
    context: str,
    release: Optional[str] = None,
    dsn_envs: Optional[Iterable[str]] = None,
    extra_integrations: Optional[Sequence[Any]] = None,
) -> bool:
    """Start Sentry if a valid DSN is configured.

    ERROR-level log records become Sentry events and INFO records become
    breadcrumbs, so scheduler task failures logged with ``exc_info`` are
    reported with their traceback.

    Args:
        context: Value of the ``service`` tag, e.g. ``bracketview-overlay``.
        release: Release name, usually the package version.
        dsn_envs: Environment variables to read the DSN from, in order.
        extra_integrations: Additional SDK integrations.

    Returns:
        True if the SDK was initialized.
    """
    names = list(dsn_envs) if dsn_envs is not None else list(DEFAULT_DSN_ENVS)
    dsn = _resolve_dsn(names)
    if dsn is None:
        _LOG.info("Sentry disabled: no DSN configured (checked envs=%s)", names)
        return False
    if not _is_valid_dsn(dsn):
        _LOG.info("Sentry disabled: DSN is not an http(s) URL")
        return False

    import sentry_sdk
    from sentry_sdk.integrations.logging import LoggingIntegration

    environment = os.getenv("SENTRY_ENV") or os.getenv("ENV") or "development"
    traces = _parse_float_env("SENTRY_TRACES_SAMPLE_RATE", 0.0)

    integrations: list[Any] = [
        LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)
    ]
    integrations.extend(extra_integrations or ())

    try:
        sentry_sdk.init(
            dsn=dsn,
            environment=environment,
            release=release,
            integrations=integrations,
            traces_sample_rate=traces,
            debug=_truthy_env("SENTRY_DEBUG"),
        )
        sentry_sdk.set_tag("service", context)
    except Exception as e:  # pragma: no cover - sdk rejects config
        _LOG.info("Sentry init failed: %s", e)
        return False

    _LOG.info(
        "Sentry initialized: context=%s env=%s traces=%s",
        context,
        environment,
        traces,
    )
    return True


def tag_display(config: DisplayConfig) -> dict[str, str]:
    """Attach what this process displays as Sentry tags.

    Only call after ``init_sentry`` returned True.

    Returns:
        The tags that were set.
    """
    import sentry_sdk

    tags = {
        "phase_id": config.phase_id,
        "tournament": config.tournament_slug,
        "stream": config.stream_name,
        "pool_mode": "yes" if config.pool_mode else "no",
    }
    applied = {key: str(value) for key, value in tags.items() if value is not None}
    for key, value in applied.items():
        sentry_sdk.set_tag(key, value)
    return applied


__all__ = ["init_sentry", "tag_display", "_parse_float_env"]
