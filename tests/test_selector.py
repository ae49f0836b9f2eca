"""Tests for brickfall.selector: weighted selection."""
from __future__ import annotations

from brickfall.selector import select_weighted, total_weight
from brickfall.types import WeightedItem


class TestTotalWeight:
    def test_sums_weights(self) -> None:
        items = [WeightedItem("a", 1.0), WeightedItem("b", 2.5)]
        assert total_weight(items) == 3.5

    def test_negative_weights_clamped(self) -> None:
        items = [WeightedItem("a", -4.0), WeightedItem("b", 2.0)]
        assert total_weight(items) == 2.0


class TestSelectWeighted:
    def test_empty_list_is_no_selection(self) -> None:
        assert select_weighted([], 0.5) is None

    def test_all_zero_weights_is_no_selection(self) -> None:
        items = [WeightedItem("a", 0.0), WeightedItem("b", 0.0)]
        assert select_weighted(items, 0.3) is None

    def test_all_negative_weights_is_no_selection(self) -> None:
        items = [WeightedItem("a", -1.0)]
        assert select_weighted(items, 0.0) is None

    def test_cumulative_partition(self) -> None:
        items = [WeightedItem("a", 1.0), WeightedItem("b", 3.0)]
        assert select_weighted(items, 0.0) == "a"
        assert select_weighted(items, 0.24) == "a"
        assert select_weighted(items, 0.25) == "b"
        assert select_weighted(items, 0.999) == "b"

    def test_zero_weight_item_never_selected(self) -> None:
        items = [WeightedItem("a", 0.0), WeightedItem("b", 1.0), WeightedItem("c", 0.0)]
        for i in range(100):
            assert select_weighted(items, i / 100) == "b"

    def test_negative_weight_treated_as_zero(self) -> None:
        items = [WeightedItem("a", -5.0), WeightedItem("b", 1.0)]
        assert select_weighted(items, 0.0) == "b"

    def test_sample_at_upper_edge_falls_back_to_last_weighted(self) -> None:
        items = [WeightedItem("a", 1.0), WeightedItem("b", 1.0), WeightedItem("c", 0.0)]
        assert select_weighted(items, 1.0) == "b"

    def test_deterministic_for_same_inputs(self) -> None:
        items = [WeightedItem(n, float(n + 1)) for n in range(6)]
        picks = [select_weighted(items, i / 37) for i in range(37)]
        again = [select_weighted(items, i / 37) for i in range(37)]
        assert picks == again
