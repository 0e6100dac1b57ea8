"""Integration tests for index accrual, rollback and concurrent callers."""
from __future__ import annotations

import threading

import pytest

from lendcore.errors import ClockRegression, InsufficientBalance
from lendcore.fixed_point import RAY, to_units
from lendcore.oracles import OracleAdapter
from lendcore.services import LendingPool, LinearRateModel
from lendcore.tokens import InMemoryAsset, InMemoryClaimToken
from tests.conftest import DAI, DEPOSIT_AMOUNT_DAI, DEPOSIT_AMOUNT_WETH, USER1, USER2, WETH, fund

DAY = 24 * 3600


@pytest.fixture()
def active(pool: LendingPool) -> LendingPool:
    """A pool with an outstanding 2500 DAI borrow."""
    pool.deposit(USER1, WETH, DEPOSIT_AMOUNT_WETH)
    pool.set_use_as_collateral(USER1, WETH, True)
    pool.deposit(USER2, DAI, DEPOSIT_AMOUNT_DAI)
    pool.borrow(USER1, DAI, to_units(2500, 18))
    return pool


class TestAccrual:
    def test_indices_never_decrease(self, active: LendingPool, clock) -> None:
        previous = active.get_reserve_data(DAI)
        for _ in range(5):
            clock.advance(30 * DAY)
            assert active.accrue(DAI) is True
            current = active.get_reserve_data(DAI)
            assert current.supply_index > previous.supply_index
            assert current.borrow_index > previous.borrow_index
            assert current.last_update_timestamp == clock.now
            previous = current

    def test_same_timestamp_is_noop(self, active: LendingPool, clock) -> None:
        clock.advance(DAY)
        assert active.accrue(DAI) is True
        before = active.get_reserve_data(DAI)
        assert active.accrue(DAI) is False
        assert active.get_reserve_data(DAI) == before

    def test_idle_reserve_keeps_indices(self, active: LendingPool, clock) -> None:
        # Nobody borrows WETH, so its rates are zero
        clock.advance(365 * DAY)
        assert active.accrue(WETH) is True
        data = active.get_reserve_data(WETH)
        assert data.supply_index == RAY
        assert data.borrow_index == RAY
        assert data.last_update_timestamp == clock.now

    def test_clock_regression(self, active: LendingPool, clock) -> None:
        with pytest.raises(ClockRegression):
            active.accrue(DAI, now=clock.now - 1)

    def test_operations_accrue_first(self, active: LendingPool, clock, dai: InMemoryAsset) -> None:
        clock.advance(DAY)
        fund(dai, USER2, to_units(1, 18))
        active.deposit(USER2, DAI, to_units(1, 18))
        assert active.get_reserve_data(DAI).last_update_timestamp == clock.now

    def test_linear_compounding(self, active: LendingPool, clock) -> None:
        reserve = active.get_reserve_data(DAI)
        elapsed = 7 * DAY
        clock.advance(elapsed)
        active.accrue(DAI)
        expected = reserve.borrow_index + reserve.borrow_index * reserve.borrow_rate * elapsed // RAY
        assert active.get_reserve_data(DAI).borrow_index == expected


class TestRollback:
    def test_failed_operation_restores_everything(
        self,
        active: LendingPool,
        clock,
        dai: InMemoryAsset,
        a_dai: InMemoryClaimToken,
    ) -> None:
        clock.advance(DAY)
        before = active.get_reserve_data(DAI)
        pool_balance = dai.balance_of(active.address)

        # Burns claim units and accrues before the transfer fails
        with pytest.raises(InsufficientBalance):
            active.withdraw(USER2, DAI, DEPOSIT_AMOUNT_DAI)

        assert active.get_reserve_data(DAI) == before
        assert a_dai.balance_of(USER2) == DEPOSIT_AMOUNT_DAI
        assert dai.balance_of(active.address) == pool_balance

    def test_pool_usable_after_rollback(self, active: LendingPool, dai: InMemoryAsset) -> None:
        with pytest.raises(InsufficientBalance):
            active.borrow(USER1, DAI, to_units(10_000, 18))
        active.borrow(USER1, DAI, to_units(100, 18))
        assert active.get_user_borrow(USER1, DAI) == to_units(2600, 18)
        assert active.get_reserve_data(DAI).total_borrows == to_units(2600, 18)


class TestConcurrency:
    def test_parallel_deposits_are_serialized(
        self, pool: LendingPool, weth: InMemoryAsset, a_weth: InMemoryClaimToken
    ) -> None:
        users = [f"user-{i}" for i in range(8)]
        per_call = 1_000
        calls = 50
        for user in users:
            fund(weth, user, per_call * calls)

        def work(user: str) -> None:
            for _ in range(calls):
                pool.deposit(user, WETH, per_call)

        threads = [threading.Thread(target=work, args=(u,)) for u in users]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert a_weth.total_supply() == len(users) * per_call * calls
        assert weth.balance_of(pool.address) == len(users) * per_call * calls
        for user in users:
            assert a_weth.balance_of(user) == per_call * calls
            assert weth.balance_of(user) == 0


class GatedAsset(InMemoryAsset):
    """Asset whose outbound transfer, once gated, parks and then fails."""

    def __init__(self, address: str) -> None:
        super().__init__(address)
        self.gated = False
        self.entered = threading.Event()
        self.release = threading.Event()

    def transfer(self, sender: str, to: str, amount: int) -> None:
        if self.gated:
            self.entered.set()
            self.release.wait(5)
            raise InsufficientBalance(self.symbol, sender, 0, amount)
        super().transfer(sender, to, amount)


class TestReaderIsolation:
    def test_reader_waits_for_rollback(
        self, oracle: OracleAdapter, clock, rate_model: LinearRateModel
    ) -> None:
        gem = GatedAsset("GEM")
        a_gem = InMemoryClaimToken("GEM")
        pool = LendingPool(oracle, clock=clock)
        pool.init_reserve(gem, a_gem, rate_model)
        fund(gem, USER1, 100)
        pool.deposit(USER1, "GEM", 100)

        gem.gated = True
        errors: list[Exception] = []
        seen: list[int] = []

        def withdraw() -> None:
            try:
                pool.withdraw(USER1, "GEM", 100)
            except InsufficientBalance as e:
                errors.append(e)

        writer = threading.Thread(target=withdraw)
        writer.start()
        assert gem.entered.wait(5)
        # Claim units are burned at this point but the withdraw has not settled
        assert a_gem.balance_of(USER1) == 0

        def read() -> None:
            seen.append(pool.underlying_balance(USER1, "GEM"))

        reader = threading.Thread(target=read)
        reader.start()
        reader.join(timeout=0.2)
        assert reader.is_alive()

        gem.release.set()
        writer.join(5)
        reader.join(5)

        assert len(errors) == 1
        assert seen == [100]
        assert pool.underlying_balance(USER1, "GEM") == 100
