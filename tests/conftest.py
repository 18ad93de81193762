"""Pytest fixtures and configuration."""

import pytest

import livecell.cell as _cell_mod


@pytest.fixture(autouse=True)
def _reset_scheduler():
    """Tests that install a scheduler must not leak it into the next test."""
    old_sched, old_thread = _cell_mod._scheduler, _cell_mod._scheduler_thread
    yield
    _cell_mod._scheduler = old_sched
    _cell_mod._scheduler_thread = old_thread

