"""Sequential per-environment fan-out with progressive status lines."""

from __future__ import annotations

from typing import Callable, Sequence, TextIO

import structlog

from envfleet.clients.platform import PlatformError

logger = structlog.get_logger()


def run_per_environment(
    envs: Sequence[str],
    call: Callable[[str], None],
    *,
    label: Callable[[str], str],
    out: TextIO,
    event: str,
) -> dict[str, Exception]:
    """
    Run ``call`` once per environment, strictly in order.

    A failing environment never stops the others. Each environment gets one
    ``"<label>... ok"`` or ``"<label>... failed"`` line, written as soon as
    its call completes.

    Returns:
        Failures keyed by environment name, in processing order
    """
    failures: dict[str, Exception] = {}
    for env in envs:
        out.write(f"{label(env)}... ")
        try:
            call(env)
        except PlatformError as exc:
            logger.info(event, env=env, outcome="failed", error=str(exc))
            failures[env] = exc
            out.write("failed\n")
        else:
            logger.debug(event, env=env, outcome="ok")
            out.write("ok\n")
        out.flush()
    return failures
