"""Unit tests for BalanceMap running totals."""

from decimal import Decimal

from restoration_kernel.domain.balances import BalanceMap


class TestBalanceMap:

    def test_absent_key_defaults_to_zero(self):
        balances: BalanceMap[str, Decimal] = BalanceMap(Decimal("0"))

        assert balances.get_or_default("missing") == Decimal("0")
        assert balances.get("missing") is None
        assert not balances.contains("missing")
        assert len(balances) == 0

    def test_add_creates_then_increments(self):
        balances: BalanceMap[tuple[int, str], Decimal] = BalanceMap(Decimal("0"))

        assert balances.add((1, "F1"), Decimal("10")) == Decimal("10")
        assert balances.add((1, "F1"), Decimal("2.5")) == Decimal("12.5")
        assert balances.get_or_default((1, "F1")) == Decimal("12.5")

    def test_recorded_zero_distinguishable_from_absent(self):
        balances: BalanceMap[int, int] = BalanceMap(0)
        balances.add(1, 0)

        assert balances.contains(1)
        assert balances.get(1) == 0
        assert not balances.contains(2)

    def test_keys_are_independent(self):
        balances: BalanceMap[int, int] = BalanceMap(0)
        balances.add(1, 5)
        balances.add(2, 7)

        assert balances.get_or_default(1) == 5
        assert balances.get_or_default(2) == 7
        assert sorted(balances.keys()) == [1, 2]

    def test_keys_snapshot_allows_mutation_while_iterating(self):
        balances: BalanceMap[int, int] = BalanceMap(0)
        balances.add(1, 1)

        for key in balances.keys():
            balances.add(key + 100, 1)

        assert len(balances) == 2

    def test_clear(self):
        balances: BalanceMap[int, int] = BalanceMap(0)
        balances.add(1, 5)
        balances.clear()

        assert len(balances) == 0
        assert balances.get_or_default(1) == 0

    def test_custom_adder(self):
        calls = []

        def adder(left, right):
            calls.append((left, right))
            return left + right

        balances: BalanceMap[int, int] = BalanceMap(0, adder=adder)
        balances.add(1, 5)
        balances.add(1, 2)

        assert balances.get_or_default(1) == 7
        assert calls == [(0, 5), (5, 2)]
