"""
Unit tests for the autolayout decision engine.

Covers guard clauses, the first-window and docked-window branches, and
failure propagation.
"""

import pytest

from sway_autolayout.autolayout import autolayout, is_first_in_scope
from sway_autolayout.errors import (
    NoFocusedNodeError,
    NoFocusedWorkspaceError,
    NoParentError,
    RequestError,
)
from sway_autolayout.models import NodeLayout, NodeType
from tests.fixtures.mock_sway import (
    MockSwayChannel,
    container,
    tree,
    window,
    workspace,
    workspace_info,
)

FIRST_WINDOW = ["gaps horizontal current set 752", "mark --add main_1"]


class TestGuardClauses:
    """Floating, oversized and stacked/tabbed contexts issue nothing."""

    @pytest.mark.asyncio
    async def test_floating_focused_window(self):
        floating = window(30, focused=True, node_type=NodeType.FLOATING_CON)
        channel = MockSwayChannel(snapshot=tree(workspace(1, nodes=[window(11)], floating_nodes=[floating])))

        issued = await autolayout(channel)

        assert issued == []
        assert channel.commands == []

    @pytest.mark.asyncio
    async def test_percent_above_one(self):
        channel = MockSwayChannel(snapshot=tree(workspace(1, nodes=[window(11, focused=True, percent=1.5)])))

        assert await autolayout(channel) == []
        assert channel.commands == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("layout", [NodeLayout.STACKED, NodeLayout.TABBED])
    async def test_stacked_or_tabbed_parent(self, layout):
        snapshot = tree(workspace(1, nodes=[window(11), window(12, focused=True)], layout=layout))
        channel = MockSwayChannel(snapshot=snapshot)

        assert await autolayout(channel) == []
        assert channel.commands == []
        assert channel.get_workspaces_calls == 0

    @pytest.mark.asyncio
    async def test_nested_tabbed_parent(self):
        tabbed = container(20, nodes=[window(21, focused=True), window(22)], layout=NodeLayout.TABBED)
        channel = MockSwayChannel(snapshot=tree(workspace(1, nodes=[window(11), tabbed])))

        assert await autolayout(channel) == []


class TestFirstWindow:
    """The only tiled window of a workspace becomes the main column."""

    @pytest.mark.asyncio
    async def test_single_window_marks_workspace(self, mock_channel):
        issued = await autolayout(mock_channel)

        assert issued == FIRST_WINDOW
        assert mock_channel.commands == FIRST_WINDOW

    @pytest.mark.asyncio
    async def test_first_window_does_not_query_workspaces(self, mock_channel):
        await autolayout(mock_channel)

        assert mock_channel.get_workspaces_calls == 0

    @pytest.mark.asyncio
    async def test_splitv_workspace_counts_as_split(self):
        snapshot = tree(workspace(7, nodes=[window(11, focused=True)], layout=NodeLayout.SPLITV))
        channel = MockSwayChannel(snapshot=snapshot)

        assert await autolayout(channel) == ["gaps horizontal current set 752", "mark --add main_7"]

    def test_is_first_in_scope(self):
        assert is_first_in_scope(workspace(1, nodes=[window(11)]))
        assert not is_first_in_scope(workspace(1, nodes=[window(11), window(12)]))
        assert not is_first_in_scope(container(20, nodes=[window(21)]))


class TestDockedWindow:
    """Further windows dock beside the main column."""

    @pytest.mark.asyncio
    async def test_second_window_on_workspace(self, two_window_tree):
        channel = MockSwayChannel(snapshot=two_window_tree, workspaces=[workspace_info(3)])

        issued = await autolayout(channel)

        assert issued == ["gaps right current set 0", '[con_mark="main_3"] resize set 1920px']
        assert channel.get_workspaces_calls == 1

    @pytest.mark.asyncio
    async def test_nested_split_parent(self):
        nested = container(20, nodes=[window(21, focused=True)], layout=NodeLayout.SPLITV)
        channel = MockSwayChannel(
            snapshot=tree(workspace(1, nodes=[window(11), nested])),
            workspaces=[workspace_info(1)],
        )

        issued = await autolayout(channel)

        assert issued == ["gaps right current set 0", '[con_mark="main_1"] resize set 1920px']

    @pytest.mark.asyncio
    async def test_uses_focused_workspace_from_listing(self, two_window_tree):
        channel = MockSwayChannel(
            snapshot=two_window_tree,
            workspaces=[workspace_info(5, num=2, focused=False), workspace_info(8, num=4, focused=True)],
        )

        issued = await autolayout(channel)

        assert issued[-1] == '[con_mark="main_8"] resize set 1920px'

    @pytest.mark.asyncio
    async def test_no_focused_workspace(self, two_window_tree):
        channel = MockSwayChannel(snapshot=two_window_tree, workspaces=[workspace_info(5, focused=False)])

        with pytest.raises(NoFocusedWorkspaceError):
            await autolayout(channel)

        # The gap command was already sent before the workspace lookup
        assert channel.commands == ["gaps right current set 0"]

    @pytest.mark.asyncio
    async def test_same_snapshot_gives_same_commands(self, two_window_tree):
        channel = MockSwayChannel(snapshot=two_window_tree, workspaces=[workspace_info(3)])

        first = await autolayout(channel)
        second = await autolayout(channel)

        assert first == second
        assert channel.commands == first + second
        assert channel.get_tree_calls == 2


class TestDecisionErrors:
    """Missing focus or parent fails the invocation."""

    @pytest.mark.asyncio
    async def test_no_focused_node(self):
        channel = MockSwayChannel(snapshot=tree(workspace(1, nodes=[window(11)])))

        with pytest.raises(NoFocusedNodeError, match="No focused node"):
            await autolayout(channel)

        assert channel.commands == []

    @pytest.mark.asyncio
    async def test_no_parent(self):
        # Only the root itself is focused; nothing has it as a tiled child
        snapshot = tree(workspace(1)).model_copy(update={"focused": True})
        channel = MockSwayChannel(snapshot=snapshot)

        with pytest.raises(NoParentError, match="No parent"):
            await autolayout(channel)


class TestTransportFailures:
    """A dropped connection aborts the remaining steps."""

    @pytest.mark.asyncio
    async def test_failure_aborts_first_window_branch(self, mock_channel):
        mock_channel.fail_on = "gaps horizontal current set 752"

        with pytest.raises(RequestError):
            await autolayout(mock_channel)

        assert mock_channel.commands == []

    @pytest.mark.asyncio
    async def test_failure_aborts_docked_branch_before_lookup(self, two_window_tree):
        channel = MockSwayChannel(
            snapshot=two_window_tree,
            workspaces=[workspace_info(3)],
            fail_on="gaps right current set 0",
        )

        with pytest.raises(RequestError):
            await autolayout(channel)

        assert channel.commands == []
        assert channel.get_workspaces_calls == 0
