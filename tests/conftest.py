"""Shared pytest fixtures for sway-autolayout tests."""

import pytest

from tests.fixtures.mock_sway import (
    MockSwayChannel,
    tree,
    window,
    workspace,
    workspace_info,
)
from sway_autolayout.config import DaemonConfig


@pytest.fixture
def single_window_tree():
    """Workspace 1 holding one freshly created, focused window."""
    return tree(workspace(1, nodes=[window(11, focused=True, percent=1.0)]))


@pytest.fixture
def two_window_tree():
    """Workspace 1 with the main window and a new focused window beside it."""
    return tree(workspace(1, nodes=[window(11), window(12, focused=True)]))


@pytest.fixture
def mock_channel(single_window_tree):
    """Mock channel serving the single-window tree; workspace 3 is focused."""
    return MockSwayChannel(snapshot=single_window_tree, workspaces=[workspace_info(3, num=1)])


@pytest.fixture
def config():
    return DaemonConfig(on_exit="opacity 1")
