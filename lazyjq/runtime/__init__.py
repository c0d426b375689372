"""Interactive runtime: config, terminal session, main loop and app wiring."""

from __future__ import annotations


def run_explorer(*args, **kwargs):
    """Lazily import the explorer entrypoint so config-only imports stay light."""
    from .app import run_explorer as _run_explorer

    return _run_explorer(*args, **kwargs)


__all__ = ["run_explorer"]
