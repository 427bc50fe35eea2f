from __future__ import annotations

import asyncio
import random
import time
from decimal import Decimal

import pytest

from mockpay.application.services.transaction_simulator import (
    CHARGE_MESSAGES,
    REFUND_MESSAGES,
    TransactionSimulator,
)
from mockpay.domain.payments.entities import Outcome

TRIALS = 1000


async def _no_sleep(_: float) -> None:
    return None


def _simulator(seed: int = 1234, **kwargs) -> TransactionSimulator:
    kwargs.setdefault("sleep", _no_sleep)
    return TransactionSimulator(rng=random.Random(seed), **kwargs)


@pytest.mark.asyncio
async def test_charge_success_rate_within_bounds() -> None:
    sim = _simulator()

    results = [await sim.charge(Decimal("10.00"), "4111111111111111") for _ in range(TRIALS)]
    successes = sum(r.succeeded for r in results)

    # p=0.95, n=1000: sd is about 6.9, allow roughly 3.3 sd either way
    assert 927 <= successes <= 973


@pytest.mark.asyncio
async def test_refund_success_rate_within_bounds() -> None:
    sim = _simulator(seed=99)

    results = [await sim.refund("tx-1", Decimal("5.00")) for _ in range(TRIALS)]
    successes = sum(r.succeeded for r in results)

    # p=0.90, n=1000: sd is about 9.5
    assert 869 <= successes <= 931


@pytest.mark.asyncio
async def test_charge_record_shape() -> None:
    sim = _simulator()

    record = await sim.charge(Decimal("12.34"), "4111111111111111", "12/30", "123", "A B")

    assert record.amount == Decimal("12.34")
    assert record.transaction_id
    assert record.message == CHARGE_MESSAGES[record.outcome]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("rate", "expected"),
    [(1.0, Outcome.SUCCESS), (0.0, Outcome.FAILED)],
)
async def test_forced_outcomes_use_fixed_messages(rate: float, expected: Outcome) -> None:
    sim = _simulator(charge_success_rate=rate, refund_success_rate=rate)

    charge = await sim.charge(Decimal("1"))
    refund = await sim.refund("tx-9", Decimal("1"), reason="duplicate")

    assert charge.outcome is expected
    assert refund.outcome is expected
    assert charge.message == CHARGE_MESSAGES[expected]
    assert refund.message == REFUND_MESSAGES[expected]


@pytest.mark.asyncio
async def test_transaction_ids_are_unique() -> None:
    sim = _simulator()

    records = [await sim.charge(Decimal("1")) for _ in range(200)]

    assert len({r.transaction_id for r in records}) == 200


@pytest.mark.asyncio
async def test_refunding_same_transaction_twice_is_independent() -> None:
    sim = _simulator(refund_success_rate=1.0)

    first = await sim.refund("tx-1", Decimal("5"))
    second = await sim.refund("tx-1", Decimal("5"))

    assert first.original_transaction_id == second.original_transaction_id == "tx-1"
    assert first.refund_id != second.refund_id
    assert first.succeeded and second.succeeded


@pytest.mark.asyncio
async def test_refund_of_unknown_transaction_is_not_checked() -> None:
    sim = _simulator(refund_success_rate=1.0)

    record = await sim.refund("never-charged", Decimal("999"))

    assert record.succeeded
    assert record.amount == Decimal("999")


@pytest.mark.asyncio
async def test_latency_is_awaited_once_per_call() -> None:
    delays: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        delays.append(seconds)

    sim = _simulator(latency_seconds=0.25, sleep=fake_sleep)
    await sim.charge(Decimal("1"))
    await sim.refund("tx-1", Decimal("1"))

    assert delays == [0.25, 0.25]


@pytest.mark.asyncio
async def test_concurrent_calls_overlap_their_latency() -> None:
    sim = TransactionSimulator(latency_seconds=0.05, rng=random.Random(7))

    started = time.perf_counter()
    results = await asyncio.gather(*(sim.charge(Decimal("1")) for _ in range(20)))
    elapsed = time.perf_counter() - started

    assert len(results) == 20
    # Sequential execution would take a full second.
    assert elapsed < 0.5
