# [TESTER] v1

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from cp_amm.constants import MAX_FEE_NUMERATOR, U64_MAX
from cp_amm.core.fees import apply_fee, compute_trading_fee, get_gross_amount_for_net
from cp_amm.errors import InvalidRangeError
from cp_amm.state.fees import BaseFeeConfig, PoolFeeState

BASE = BaseFeeConfig(cliff_fee_numerator=10_000_000, number_of_periods=0, period_frequency=0, reduction_factor=0)


def _pool_fees(protocol: int = 20, partner: int = 0, referral: int = 20) -> PoolFeeState:
    return PoolFeeState(
        base_fee=BASE,
        protocol_fee_percent=protocol,
        partner_fee_percent=partner,
        referral_fee_percent=referral,
    )


def test_referral_share_goes_to_protocol_without_referral_account() -> None:
    res = apply_fee(1_000_000, 10_000_000, _pool_fees())
    assert res.trading_fee == 10_000
    assert res.amount == 990_000
    assert res.protocol_fee == 4_000
    assert res.referral_fee == 0
    assert res.lp_fee == 6_000


def test_referral_share_is_paid_with_referral_account() -> None:
    res = apply_fee(1_000_000, 10_000_000, _pool_fees(), has_referral=True)
    assert (res.protocol_fee, res.partner_fee, res.referral_fee, res.lp_fee) == (2_000, 0, 2_000, 6_000)


def test_floor_residue_stays_with_liquidity_providers() -> None:
    res = apply_fee(999, 10_000_000, _pool_fees(protocol=20, partner=30, referral=10), has_referral=True)
    assert res.trading_fee == 9
    assert (res.protocol_fee, res.partner_fee, res.referral_fee) == (1, 2, 0)
    assert res.lp_fee == 6
    assert res.gross_amount == 999


def test_fee_numerator_above_ceiling_is_rejected() -> None:
    with pytest.raises(InvalidRangeError):
        compute_trading_fee(1_000, MAX_FEE_NUMERATOR + 1)
    with pytest.raises(InvalidRangeError):
        compute_trading_fee(-1, 1)


def test_fee_share_percentages_must_not_exceed_100() -> None:
    with pytest.raises(InvalidRangeError, match="sum"):
        _pool_fees(protocol=50, partner=30, referral=21)


@st.composite
def _shares(draw: st.DrawFn) -> tuple[int, int, int]:
    protocol = draw(st.integers(min_value=0, max_value=100))
    partner = draw(st.integers(min_value=0, max_value=100 - protocol))
    referral = draw(st.integers(min_value=0, max_value=100 - protocol - partner))
    return protocol, partner, referral


@settings(max_examples=300, deadline=None)
@given(
    amount=st.integers(min_value=0, max_value=U64_MAX),
    fee_numerator=st.integers(min_value=0, max_value=MAX_FEE_NUMERATOR),
    shares=_shares(),
    has_referral=st.booleans(),
)
def test_fee_split_conserves_value(
    amount: int, fee_numerator: int, shares: tuple[int, int, int], has_referral: bool
) -> None:
    protocol, partner, referral = shares
    res = apply_fee(amount, fee_numerator, _pool_fees(protocol, partner, referral), has_referral=has_referral)
    assert res.amount + res.trading_fee == amount
    assert res.protocol_fee + res.partner_fee + res.referral_fee <= res.trading_fee
    assert res.lp_fee + res.protocol_fee + res.partner_fee + res.referral_fee == res.trading_fee


def test_gross_amount_for_net_inverts_the_fee_floor() -> None:
    # 1_010_101 B pays a 10_101 fee and leaves exactly 1_000_000 to trade.
    assert get_gross_amount_for_net(1_000_000, 10_000_000) == 1_010_101
    assert get_gross_amount_for_net(990, 10_000_000) == 999
    assert get_gross_amount_for_net(0, 10_000_000) == 0
    assert get_gross_amount_for_net(123, 0) == 123
    with pytest.raises(InvalidRangeError):
        get_gross_amount_for_net(1, MAX_FEE_NUMERATOR + 1)


@settings(max_examples=300, deadline=None)
@given(
    net=st.integers(min_value=0, max_value=U64_MAX // 2),
    fee_numerator=st.integers(min_value=0, max_value=MAX_FEE_NUMERATOR),
)
def test_gross_amount_for_net_is_the_smallest_exact_gross(net: int, fee_numerator: int) -> None:
    gross = get_gross_amount_for_net(net, fee_numerator)
    assert gross - compute_trading_fee(gross, fee_numerator) == net
    if gross > 0:
        below = gross - 1
        assert below - compute_trading_fee(below, fee_numerator) < net
