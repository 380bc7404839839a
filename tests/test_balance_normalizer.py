import pytest

from analyzers.balance import balance_split, normalize_balance
from models.telemetry import LeftReferenced, RightReferenced, balance_from_flag


@pytest.mark.parametrize("value", [0, 12.4, 37.5, 50, 50.5, 63.49, 100])
def test_right_referenced_value_is_right_share(value):
    balance = normalize_balance(RightReferenced(value))
    assert abs(balance.right - value) <= 0.5
    assert abs(balance.left - (100 - value)) <= 0.5
    assert abs(balance.left + balance.right - 100) <= 1


@pytest.mark.parametrize("value", [0, 12.4, 37.5, 50, 50.5, 63.49, 100])
def test_left_referenced_value_is_left_share(value):
    balance = normalize_balance(LeftReferenced(value))
    assert abs(balance.left - value) <= 0.5
    assert abs(balance.right - (100 - value)) <= 0.5
    assert abs(balance.left + balance.right - 100) <= 1


def test_sides_are_rounded_independently_half_up():
    # 50.5 -> 51 and 49.5 -> 50: the pair sums to 101 and is left that way
    balance = normalize_balance(LeftReferenced(50.5))
    assert (balance.left, balance.right) == (51, 50)

    balance = normalize_balance(RightReferenced(50.5))
    assert (balance.left, balance.right) == (50, 51)


def test_whole_numbers_pass_through():
    assert normalize_balance(RightReferenced(47)).to_dict() == {'left': 53, 'right': 47}
    assert normalize_balance(LeftReferenced(47)).to_dict() == {'left': 47, 'right': 53}


def test_balance_from_flag_builds_matching_variant():
    assert balance_from_flag(48, True) == RightReferenced(48)
    assert balance_from_flag(48, False) == LeftReferenced(48)


def test_balance_split_is_unrounded():
    assert balance_split(RightReferenced(47.25)) == (52.75, 47.25)
    assert balance_split(LeftReferenced(47.25)) == (47.25, 52.75)
