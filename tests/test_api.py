"""Tests for the functional API, configuration and execution planning."""

import pytest

from treestore import (
    ConfigurationError,
    CustomCollector,
    DataRequirement,
    DepthConfig,
    ExecutionPlan,
    FilterConfig,
    NodeFilter,
    StoreAdapter,
    TraversalConfig,
    TraversalStrategy,
    TreeStore,
    collect_tree_data,
    count_nodes,
    find_nodes,
    get_leaf_nodes,
    get_tree_paths,
    get_tree_stats,
    traverse_tree,
)
from treestore.core.traverser import BreadthFirstTraverser
from treestore.testing import example_source


@pytest.fixture
def store():
    return TreeStore.from_source(example_source())


def ids(nodes):
    return [n.id for n in nodes]


class TestTraverseTree:

    def test_default_is_pre_order(self, store):
        assert ids(traverse_tree(store, 17)) == [17, 2, 10, 7, 9]

    def test_strategy_by_name(self, store):
        assert ids(traverse_tree(store, 17, strategy="bfs")) == [17, 2, 10, 7, 9]
        assert ids(traverse_tree(store, 17, strategy="dfs_post")) == [2, 7, 9, 10, 17]

    def test_unknown_strategy(self, store):
        with pytest.raises(ValueError):
            list(traverse_tree(store, 17, strategy="spiral"))

    def test_start_can_be_node(self, store):
        assert ids(traverse_tree(store, store.get_node(10))) == [10, 7, 9]

    def test_node_filter(self, store):
        assert ids(traverse_tree(store, 16, node_filter=NodeFilter.INTERNAL_ONLY)) == \
            [16, 15, 13, 14, 12, 11]

    def test_exclude_filter(self, store):
        result = ids(traverse_tree(store, 17, exclude_filter=lambda n: n.is_leaf))
        assert result == [17, 10]

    def test_max_nodes(self, store):
        assert ids(traverse_tree(store, 18, max_nodes=3)) == [18, 16, 15]

    def test_rejects_unknown_tree_type(self):
        with pytest.raises(TypeError):
            list(traverse_tree({"not": "a tree"}, 0))


class TestHelpers:

    def test_count_nodes(self, store):
        assert count_nodes(store, 18) == 19
        assert count_nodes(store, 16, max_depth=1) == 3

    def test_find_nodes(self, store):
        assert sorted(ids(find_nodes(store, 18, lambda n: n.rank == 4))) == [1, 6]

    def test_get_leaf_nodes(self, store):
        assert ids(get_leaf_nodes(store, 16)) == [5, 3, 4, 0, 8, 6, 1]

    def test_get_leaf_nodes_other_strategy(self, store):
        assert sorted(ids(get_leaf_nodes(store, 16, strategy="bfs"))) == [0, 1, 3, 4, 5, 6, 8]

    def test_get_tree_paths(self, store):
        paths = list(get_tree_paths(store, 11))
        assert paths == [[18, 16, 14, 12, 11], [18, 16, 14, 12, 11, 6], [18, 16, 14, 12, 11, 1]]

    def test_get_tree_stats(self, store):
        stats = get_tree_stats(store, 18)
        assert stats['total_nodes'] == 19
        assert stats['leaf_nodes'] == 10
        assert stats['internal_nodes'] == 9
        assert stats['max_depth'] == 5
        assert stats['max_children'] == 2
        assert stats['average_branching'] == 2.0
        assert stats['depths'] == {0: 1, 1: 2, 2: 4, 3: 6, 4: 4, 5: 2}

    def test_get_tree_stats_of_leaf(self, store):
        stats = get_tree_stats(store, 7)
        assert stats['total_nodes'] == 1
        assert stats['average_branching'] == 0


class TestCollectTreeData:

    def test_identifiers(self, store):
        data = [d for _, d in collect_tree_data(store, 10, DataRequirement.IDENTIFIER_ONLY)]
        assert data == [10, 7, 9]

    def test_metadata(self, store):
        _, record = next(collect_tree_data(store, 10))
        assert record == {'id': 10, 'is_leaf': False, 'rank': 7, 'left_child': 7, 'right_sib': None}

    def test_child_counts(self, store):
        data = dict((n.id, d) for n, d in collect_tree_data(
            store, 10, DataRequirement.CHILDREN_COUNT))
        assert data[10]['child_count'] == 2
        assert data[7]['child_count'] == 0
        assert data[9]['depth'] == 1

    def test_unknown_option(self, store):
        with pytest.raises(TypeError):
            list(collect_tree_data(store, 10, colour="red"))


class TestConfig:

    def test_default_config_is_valid(self):
        assert TraversalConfig().validate() == []

    def test_validate_reports_every_problem(self):
        config = TraversalConfig(
            depth=DepthConfig(min_depth=-1, max_depth=-2),
            max_nodes=0,
            strategy=TraversalStrategy.CUSTOM,
            data_requirements=DataRequirement.CUSTOM,
        )
        errors = config.validate()
        assert "min_depth cannot be negative" in errors
        assert "max_depth cannot be negative" in errors
        assert "max_nodes must be positive" in errors
        assert "custom_traverser required when strategy is CUSTOM" in errors
        assert "custom_collector required when data_requirements is CUSTOM" in errors

    def test_leaves_only_preset(self, store):
        plan = ExecutionPlan(TraversalConfig.leaves_only(), StoreAdapter(store))
        assert [d for _, d in plan.execute(16)] == [5, 3, 4, 0, 8, 6, 1]

    def test_shallow_scan_preset(self, store):
        plan = ExecutionPlan(TraversalConfig.shallow_scan(), StoreAdapter(store))
        assert ids(n for n, _ in plan.execute(18)) == [18, 16, 17]

    def test_filter_config(self, store):
        node = store.get_node(5)
        assert FilterConfig().should_include(node)
        assert not FilterConfig(node_filter=NodeFilter.INTERNAL_ONLY).should_include(node)
        assert not FilterConfig(include_filter=lambda n: n.id == 6).should_include(node)
        assert not FilterConfig(
            include_filter=lambda n: True, exclude_filter=lambda n: True
        ).should_include(node)

    def test_specific_depths(self, store):
        config = TraversalConfig(depth=DepthConfig(specific_depths={2}))
        plan = ExecutionPlan(config, StoreAdapter(store))
        assert ids(n for n, _ in plan.execute(18)) == [15, 14, 2, 10]


class TestExecutionPlan:

    def test_invalid_config_raises(self, store):
        config = TraversalConfig(depth=DepthConfig(max_depth=-1))
        with pytest.raises(ConfigurationError):
            ExecutionPlan(config, StoreAdapter(store))

    def test_custom_components(self, store):
        adapter = StoreAdapter(store)
        config = TraversalConfig(
            strategy=TraversalStrategy.CUSTOM,
            custom_traverser=BreadthFirstTraverser(adapter),
            data_requirements=DataRequirement.CUSTOM,
            custom_collector=CustomCollector(adapter, lambda node, depth: (node.id, depth)),
        )
        plan = ExecutionPlan(config, adapter)
        assert [d for _, d in plan.execute(17)] == [(17, 0), (2, 1), (10, 1), (7, 2), (9, 2)]

    def test_summary_tracks_progress(self, store):
        plan = ExecutionPlan(TraversalConfig(max_nodes=4), StoreAdapter(store))
        assert len(list(plan.execute(18))) == 4
        summary = plan.get_execution_summary()
        assert summary['nodes_processed'] == 4
        assert summary['traverser'] == 'DepthFirstPreOrderTraverser'
        assert summary['collector'] == 'FullNodeCollector'
