"""Tests for map, switch_map and distinct_until_changed."""

import pytest

from livecell import MutableCell, distinct_until_changed, switch_map
from livecell.transformations import map as map_cell


class TestMap:
    def test_unset_source_never_calls_transform(self):
        """An absent value is not None: the transform does not run at all."""
        calls = []
        source = MutableCell()
        inverse = map_cell(source, lambda v: calls.append(v) or (not v))
        assert calls == []
        assert not inverse.is_set

    def test_explicit_none_reaches_transform(self):
        """A cell set to None calls the transform, which may fail on it."""
        source = MutableCell(None)
        with pytest.raises(TypeError):
            map_cell(source, lambda v: v + 1)

    def test_failed_construction_leaves_source_unobserved(self):
        source = MutableCell(None)
        with pytest.raises(TypeError):
            map_cell(source, lambda v: v + 1)
        assert not source.has_observers()
        source.set(None)  # nothing left to run the transform

    def test_maps_initial_value(self):
        source = MutableCell(False)
        inverse = source.map(lambda v: not v)
        assert inverse.get() is True

    def test_guarded_transform_handles_none(self):
        source = MutableCell()
        inverse = map_cell(source, lambda v: None if v is None else not v)
        assert inverse.get() is None
        source.set(None)
        assert inverse.is_set
        assert inverse.get() is None

    def test_forwards_subsequent_none(self):
        source = MutableCell(False)
        inverse = map_cell(source, lambda v: None if v is None else not v)
        assert inverse.get() is True
        source.set(None)
        assert inverse.get() is None

    def test_error_from_later_set_propagates(self):
        source = MutableCell(1)
        map_cell(source, lambda v: v * 2)
        with pytest.raises(TypeError):
            source.set(None)


class TestSwitchMap:
    def test_follows_selected_cell(self):
        selector = MutableCell()
        when_true = MutableCell("true")
        when_false = MutableCell("false")

        result = selector.switch_map(lambda v: when_true if v else when_false)
        assert result.get() is None

        selector.set(True)
        assert result.get() == "true"

        selector.set(None)
        assert result.get() == "false"

    def test_ignores_previously_selected_cell(self):
        selector = MutableCell(True)
        when_true = MutableCell("t1")
        when_false = MutableCell("f1")
        result = switch_map(selector, lambda v: when_true if v else when_false)
        log = []
        result.subscribe(log.append)

        selector.set(False)
        when_true.set("t2")
        when_false.set("f2")
        assert log == ["t1", "f1", "f2"]
        assert not when_true.has_observers()

    def test_same_cell_is_not_resubscribed(self):
        selector = MutableCell(1)
        inner = MutableCell("x")
        result = switch_map(selector, lambda v: inner)
        log = []
        result.subscribe(log.append)
        selector.set(2)
        assert log == ["x"]

    def test_none_detaches_and_keeps_value(self):
        selector = MutableCell(True)
        inner = MutableCell("x")
        result = switch_map(selector, lambda v: inner if v else None)
        selector.set(False)
        inner.set("y")
        assert result.get() == "x"
        assert not inner.has_observers()


class TestDistinctUntilChanged:
    def test_drops_equal_values(self):
        source = MutableCell(1)
        distinct = distinct_until_changed(source)
        log = []
        distinct.subscribe(log.append)
        source.set(1)
        source.set(2)
        source.set(2)
        source.set(1)
        assert log == [1, 2, 1]

    def test_fluent_form(self):
        source = MutableCell()
        distinct = source.distinct_until_changed()
        source.set(None)
        source.set(None)
        assert distinct.version == 0
