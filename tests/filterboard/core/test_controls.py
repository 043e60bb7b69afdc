from __future__ import annotations

import random

import numpy as np
import pytest

from filterboard.core.controls import (
    ALL_OPTION,
    BLANK_LABEL,
    MAX_HANDLE,
    MIN_HANDLE,
    ControlKind,
    MultiSelectControl,
    QuantileDropdownControl,
    RangeSliderControl,
    build_control,
    format_number,
    quantile_buckets,
    slider_bounds,
)
from filterboard.core.dataset import Dataset
from filterboard.core.exceptions import ConfigError, UnknownColumnError
from filterboard.core.predicates import MembershipSet, Range, Unconditional


def _dataset() -> Dataset:
    return Dataset.from_records(
        [
            {"Region": "EU", "GDP": 100.4, "Score": 10},
            {"Region": "AS", "GDP": 200.0, "Score": 20},
            {"Region": "EU", "GDP": 299.2, "Score": 30},
            {"Region": "AF", "GDP": 150.0, "Score": 40},
        ]
    )


# ---------------------------------------------------------------------------
# Multi-select
# ---------------------------------------------------------------------------
def test_multi_select_options_keep_first_seen_order_and_start_selected():
    control = MultiSelectControl.build(_dataset(), "Region")

    assert control.options == ["EU", "AS", "AF"]
    assert control.initial_value == ["EU", "AS", "AF"]


def test_multi_select_predicate_is_membership_of_selection():
    control = MultiSelectControl.build(_dataset(), "Region")

    assert control.predicate_for(["EU"]) == MembershipSet("Region", ("EU",))


def test_multi_select_offers_blank_cells_and_keeps_them_when_all_selected():
    ds = Dataset.from_records([{"Region": "EU"}, {"Region": None}, {"Region": "AS"}])
    control = MultiSelectControl.build(ds, "Region")

    assert control.options == ["EU", "", "AS"]
    assert control.dropdown_options[1] == {"label": BLANK_LABEL, "value": ""}

    pred = control.predicate_for(control.initial_value)
    assert pred.mask(ds.frame).tolist() == [True, True, True]


def test_multi_select_with_nothing_selected_matches_no_row():
    ds = _dataset()
    control = MultiSelectControl.build(ds, "Region")

    for selection in ([], None):
        pred = control.predicate_for(selection)
        assert not pred.mask(ds.frame).any()


# ---------------------------------------------------------------------------
# Quantile buckets
# ---------------------------------------------------------------------------
def test_quantile_buckets_for_ten_to_hundred():
    values = [100, 90, 80, 70, 60, 50, 40, 30, 20, 10]

    buckets = quantile_buckets("GDP", values)

    # linear interpolation over sorted values: 0.33 -> 39.7, 0.66 -> 69.4
    assert [b.label for b in buckets] == ["10 - 39", "39 - 69", "69 - 100"]
    assert buckets[0].predicate.lower == pytest.approx(10)
    assert buckets[1].predicate.lower == pytest.approx(39.7)
    assert buckets[2].predicate.lower == pytest.approx(69.4)
    assert buckets[2].predicate.upper == pytest.approx(100)

    assert [b.predicate.inclusive_upper for b in buckets] == [False, False, True]
    assert buckets[2].predicate.matches({"GDP": 100})
    # shared boundary belongs to the upper bucket only
    boundary = buckets[1].predicate.upper
    assert not buckets[1].predicate.matches({"GDP": boundary})
    assert buckets[2].predicate.matches({"GDP": boundary})


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_quantile_buckets_cover_every_value_exactly_once(seed):
    rng = np.random.default_rng(seed)
    values = rng.integers(0, 50, size=37).tolist()

    buckets = quantile_buckets("v", values)

    for value in values:
        hits = [b for b in buckets if b.predicate.matches({"v": value})]
        assert len(hits) == 1, f"{value} landed in {len(hits)} buckets"


def test_quantile_buckets_require_values():
    with pytest.raises(ValueError):
        quantile_buckets("v", [])


def test_quantile_dropdown_prepends_all_option():
    control = QuantileDropdownControl.build(_dataset(), "Score")

    assert control.options[0] == {"label": ALL_OPTION, "value": 0}
    assert [o["value"] for o in control.options] == [0, 1, 2, 3]
    assert control.initial_value == 0
    assert control.predicate_for(0) == Unconditional("Score")
    assert control.predicate_for(None) == Unconditional("Score")
    assert control.predicate_for(3) == control.buckets[2].predicate


def test_quantile_dropdown_rejects_unknown_choice():
    control = QuantileDropdownControl.build(_dataset(), "Score")

    with pytest.raises(ValueError):
        control.predicate_for(7)


def test_quantile_dropdown_on_text_column_is_config_error():
    with pytest.raises(ConfigError):
        QuantileDropdownControl.build(_dataset(), "Region")


# ---------------------------------------------------------------------------
# Range slider
# ---------------------------------------------------------------------------
def test_slider_bounds_floor_min_and_ceil_max():
    assert slider_bounds([100.4, 200.0, 299.2]) == (100, 300)


def test_slider_bounds_widen_constant_column():
    assert slider_bounds([5, 5, 5]) == (5, 6)


def test_slider_build_starts_at_the_bounds():
    control = RangeSliderControl.build(_dataset(), "GDP")

    assert (control.lower_bound, control.upper_bound) == (100, 300)
    assert (control.min_value, control.max_value) == (100, 300)


def test_drag_min_past_max_clamps_to_max_minus_one():
    control = RangeSliderControl("GDP", 0, 100, min_value=10, max_value=50)

    value, clamped = control.drag_min(50)

    assert clamped
    assert value == 49
    assert control.max_value == 50


def test_drag_max_below_min_clamps_to_min_plus_one():
    control = RangeSliderControl("GDP", 0, 100, min_value=10, max_value=50)

    value, clamped = control.drag_max(3)

    assert clamped
    assert value == 11
    assert control.min_value == 10


def test_drag_inside_range_is_not_clamped():
    control = RangeSliderControl("GDP", 0, 100)

    assert control.drag_min(20) == (20, False)
    assert control.drag_max(80) == (80, False)


def test_random_drag_sequences_keep_handles_apart_and_in_bounds():
    rnd = random.Random(42)
    control = RangeSliderControl("GDP", -5, 12)

    for _ in range(500):
        live = rnd.uniform(-10, 20)
        if rnd.random() < 0.5:
            control.drag_min(live)
        else:
            control.drag_max(live)
        assert control.lower_bound <= control.min_value < control.max_value <= control.upper_bound


def test_slider_predicate_is_inclusive_range():
    control = RangeSliderControl("GDP", 0, 100).with_handles(20, 60)

    pred = control.predicate()

    assert pred == Range("GDP", 20.0, 60.0)
    assert pred.matches({"GDP": 20})
    assert pred.matches({"GDP": 60})


def test_committed_crossed_handles_never_reach_the_predicate():
    control = RangeSliderControl("GDP", 0, 100).with_handles(80, 20)

    pred = control.predicate()

    assert 0 <= pred.lower < pred.upper <= 100


def test_crossed_commit_clamps_the_handle_that_moved():
    crossed = RangeSliderControl("GDP", 0, 100).with_handles(50, 30)

    assert crossed.predicate(MIN_HANDLE) == Range("GDP", 29.0, 30.0)

    crossed = RangeSliderControl("GDP", 0, 100).with_handles(50, 30)

    assert crossed.predicate(MAX_HANDLE) == Range("GDP", 50.0, 51.0)


def test_crossed_max_commit_at_upper_bound_stays_in_bounds():
    control = RangeSliderControl("GDP", 0, 100).with_handles(100, 100)

    assert control.predicate(MAX_HANDLE) == Range("GDP", 99.0, 100.0)


def test_predicate_rejects_unknown_handle_when_crossed():
    control = RangeSliderControl("GDP", 0, 100).with_handles(50, 30)

    with pytest.raises(ValueError):
        control.predicate("middle")


def test_crossed_handles_at_lower_bound_stay_in_bounds():
    control = RangeSliderControl("GDP", 0, 100).with_handles(0, 0)

    pred = control.predicate()

    assert (pred.lower, pred.upper) == (0.0, 1.0)


# ---------------------------------------------------------------------------
# Builder dispatch
# ---------------------------------------------------------------------------
def test_build_control_dispatches_on_kind():
    ds = _dataset()

    assert isinstance(build_control(ds, "Region", ControlKind.MULTI_SELECT), MultiSelectControl)
    assert isinstance(build_control(ds, "Score", "quantile_dropdown"), QuantileDropdownControl)
    assert isinstance(build_control(ds, "GDP", ControlKind.RANGE_SLIDER), RangeSliderControl)


def test_build_control_for_missing_column_raises():
    with pytest.raises(UnknownColumnError):
        build_control(_dataset(), "Population", ControlKind.RANGE_SLIDER)


def test_format_number_uses_thousands_separator():
    assert format_number(1380004385) == "1,380,004,385"
    assert format_number(12.0) == "12"
