"""Tests for deposits (claim minting) and withdrawals (claim burning)."""

import pytest

from dex_pool.core.errors import (
    InsufficientBalance,
    InsufficientLiquidity,
    InsufficientMintedClaims,
    InvalidAmount,
)
from dex_pool.core.events import LiquidityAdded, LiquidityRemoved
from dex_pool.core.pool import Pool
from tests.fixtures.pool_fixtures import (
    ASSET_X,
    ASSET_Y,
    STARTING_BALANCE,
    FlakyCustody,
    assert_pool_consistent,
    create_seeded_pool,
    snapshot_world,
)


class TestDeposit:
    def test_first_deposit_mints_geometric_mean(self, pool, custody):
        minted = pool.deposit("alice", 1000, 1000)

        assert minted == 1000
        assert pool.get_reserves() == (1000, 1000)
        assert pool.total_claims == 1000
        assert pool.balance_of("alice") == 1000
        assert custody.custody_balance(ASSET_X) == 1000
        assert custody.custody_balance(ASSET_Y) == 1000
        assert custody.balance_of(ASSET_X, "alice") == STARTING_BALANCE - 1000

    def test_first_deposit_unbalanced_amounts(self, pool):
        assert pool.deposit("alice", 4, 9) == 6
        assert pool.get_reserves() == (4, 9)
        assert_pool_consistent(pool)

    def test_emits_liquidity_added(self, pool):
        pool.deposit("alice", 1000, 1000)
        assert pool.events == [LiquidityAdded("alice", 1000, 1000, 1000)]
        assert pool.events[0].as_tuple() == ("alice", 1000, 1000, 1000)

    def test_identical_deposits_mint_identical_claims(self, seeded_pool):
        first = seeded_pool.deposit("alice", 300, 300)
        second = seeded_pool.deposit("bob", 300, 300)
        assert first == second == 300

    def test_identical_deposits_after_swap(self, seeded_pool):
        seeded_pool.swap_x_for_y("trader", 100)
        assert seeded_pool.get_reserves() == (1100, 910)

        first = seeded_pool.deposit("bob", 1100, 910)
        second = seeded_pool.deposit("bob", 1100, 910)
        assert first == second == 1000
        assert seeded_pool.get_reserves() == (3300, 2730)

    def test_mismatched_ratio_mints_smaller_share(self, seeded_pool):
        minted = seeded_pool.deposit("bob", 500, 1000)

        assert minted == 500
        assert seeded_pool.get_reserves() == (1500, 2000)
        assert seeded_pool.balance_of("bob") == 500
        assert seeded_pool.total_claims == 1500

    def test_dust_deposit_edge_case(self):
        """A deposit too small to mint a claim is rejected outright."""
        pool = create_seeded_pool(reserve_x=10**6, reserve_y=1)
        assert pool.total_claims == 1000
        custody = pool.custody
        before = snapshot_world(pool, custody)

        with pytest.raises(InsufficientMintedClaims):
            pool.deposit("bob", 1, 1)

        assert snapshot_world(pool, custody) == before

    @pytest.mark.parametrize(
        "amounts",
        [(0, 5), (5, 0), (0, 0), (-1, 5), (5, -1), (1.5, 5), (True, 5), ("10", 5)],
    )
    def test_invalid_amounts_rejected(self, pool, custody, amounts):
        before = snapshot_world(pool, custody)

        with pytest.raises(InvalidAmount):
            pool.deposit("alice", *amounts)

        assert pool.get_reserves() == (0, 0)
        assert snapshot_world(pool, custody) == before

    def test_deposit_after_full_drain_bootstraps_again(self, seeded_pool):
        seeded_pool.withdraw("alice", 1000)
        assert seeded_pool.get_reserves() == (0, 0)

        assert seeded_pool.deposit("bob", 9, 4) == 6
        assert seeded_pool.asset_x == ASSET_X
        assert seeded_pool.asset_y == ASSET_Y
        assert_pool_consistent(seeded_pool)


class TestWithdraw:
    def test_full_withdrawal_empties_pool(self, seeded_pool, custody):
        amounts = seeded_pool.withdraw("alice", 1000)

        assert amounts == (1000, 1000)
        assert seeded_pool.get_reserves() == (0, 0)
        assert seeded_pool.total_claims == 0
        assert seeded_pool.balance_of("alice") == 0
        assert "alice" not in seeded_pool.snapshot().balances
        assert custody.balance_of(ASSET_X, "alice") == STARTING_BALANCE
        assert custody.custody_balance(ASSET_Y) == 0

    def test_emits_liquidity_removed(self, seeded_pool):
        seeded_pool.withdraw("alice", 400)
        assert seeded_pool.events[-1] == LiquidityRemoved("alice", 400, 400, 400)

    def test_partial_withdrawal_after_fees(self, seeded_pool):
        seeded_pool.swap_x_for_y("trader", 100)

        amounts = seeded_pool.withdraw("alice", 500)

        assert amounts == (550, 455)
        assert seeded_pool.get_reserves() == (550, 455)
        assert seeded_pool.total_claims == 500
        assert_pool_consistent(seeded_pool)

    def test_overdraw_rejected_without_change(self, seeded_pool, custody):
        before = snapshot_world(seeded_pool, custody)

        with pytest.raises(InsufficientBalance):
            seeded_pool.withdraw("alice", 1001)
        with pytest.raises(InsufficientBalance):
            seeded_pool.withdraw("bob", 1)

        assert snapshot_world(seeded_pool, custody) == before

    @pytest.mark.parametrize("claims", [0, -3, 2.0])
    def test_invalid_claims_rejected(self, seeded_pool, claims):
        with pytest.raises(InvalidAmount):
            seeded_pool.withdraw("alice", claims)
        assert seeded_pool.balance_of("alice") == 1000

    def test_dust_withdrawal_edge_case(self):
        """Burning a claim that yields zero of one asset is rejected."""
        pool = create_seeded_pool(reserve_x=10**6, reserve_y=1)
        before = snapshot_world(pool, pool.custody)

        with pytest.raises(InsufficientLiquidity):
            pool.withdraw("alice", 1)

        assert snapshot_world(pool, pool.custody) == before

    def test_bookkeeping_committed_before_push(self, custody):
        """Custody sees the burned claims and reduced reserves at push time."""
        observed = []
        flaky = FlakyCustody(custody)
        pool = Pool(ASSET_X, ASSET_Y, flaky)

        def observe(kind, asset, account, amount):
            if kind == "push":
                observed.append(pool.snapshot())
            return False

        pool.deposit("alice", 1000, 1000)
        flaky.should_fail = observe
        pool.withdraw("alice", 600)

        assert observed[0].total_claims == 400
        assert observed[0].reserve_x == 400
        assert observed[0].reserve_y == 400

    def test_round_trip_returns_no_more_than_deposited(self, seeded_pool):
        minted = seeded_pool.deposit("bob", 300, 700)
        assert minted == 300

        amount_x, amount_y = seeded_pool.withdraw("bob", minted)

        assert (amount_x, amount_y) == (300, 392)
        assert amount_x <= 300 and amount_y <= 700

    def test_round_trip_exact_on_fresh_pool(self, pool):
        minted = pool.deposit("alice", 2, 8)
        assert pool.withdraw("alice", minted) == (2, 8)
