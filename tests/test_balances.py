"""
Tests for the balance calculator.
"""

import random
from decimal import Decimal

from splitease.models.expense import SplitType
from splitease.services.calculations.balances import (
    compute_balances,
    compute_member_totals,
    expense_shares,
)
from tests.helpers import make_expense, make_member


def _random_expenses(rng, member_ids, count):
    expenses = []
    for index in range(count):
        payer = rng.choice(member_ids)
        participants = rng.sample(member_ids, rng.randint(1, len(member_ids)))
        policy = rng.choice(list(SplitType))

        if policy == SplitType.EQUAL:
            amount = Decimal(rng.randint(1, 100000)) / 100
            expenses.append(make_expense(f"e{index}", amount, payer, participants))
        elif policy == SplitType.PERCENTAGE:
            # percentages with two decimals rarely land on exact cents
            amount = Decimal(rng.randint(1, 100000)) / 100
            cuts = sorted(rng.sample(range(1, 10000), len(participants) - 1))
            percentages = [Decimal(b - a) / 100 for a, b in zip([0] + cuts, cuts + [10000])]
            expenses.append(make_expense(
                f"e{index}", amount, payer, participants,
                split=SplitType.PERCENTAGE,
                custom_splits=dict(zip(participants, percentages)),
            ))
        else:
            parts = [rng.randint(1, 20000) for _ in participants]
            custom = {p: Decimal(c) / 100 for p, c in zip(participants, parts)}
            expenses.append(make_expense(
                f"e{index}", sum(custom.values()), payer, participants,
                split=SplitType.AMOUNT,
                custom_splits=custom,
            ))
    return expenses


class TestSplitPolicies:
    """Test each split policy against hand-computed balances."""

    def setup_method(self):
        self.members = [make_member("a"), make_member("b"), make_member("c")]

    def test_equal_split(self):
        """90.00 paid by A and shared by A, B and C."""
        expenses = [make_expense("e1", "90.00", "a", ["a", "b", "c"])]

        balances = compute_balances(self.members, expenses)

        assert balances == {"a": Decimal("60.00"), "b": Decimal("-30.00"), "c": Decimal("-30.00")}

    def test_equal_split_with_leftover_cent(self):
        """10.00 over three people: the first participant carries the extra cent."""
        expenses = [make_expense("e1", "10.00", "a", ["a", "b", "c"])]

        balances = compute_balances(self.members, expenses)

        assert balances == {"a": Decimal("6.66"), "b": Decimal("-3.33"), "c": Decimal("-3.33")}
        assert sum(balances.values()) == 0

    def test_percentage_split(self):
        """200.00 paid by A, split 50/50 between A and B."""
        expenses = [make_expense(
            "e1", "200.00", "a", ["a", "b"],
            split=SplitType.PERCENTAGE, custom_splits={"a": 50, "b": 50},
        )]

        balances = compute_balances(self.members, expenses)

        assert balances["a"] == Decimal("100.00")
        assert balances["b"] == Decimal("-100.00")
        assert balances["c"] == Decimal("0.00")

    def test_amount_split(self):
        expenses = [make_expense(
            "e1", "100.00", "b", ["a", "b"],
            split=SplitType.AMOUNT, custom_splits={"a": "70.00", "b": "30.00"},
        )]

        balances = compute_balances(self.members, expenses)

        assert balances == {"a": Decimal("-70.00"), "b": Decimal("70.00"), "c": Decimal("0.00")}

    def test_percentage_shares_add_up_to_amount(self):
        """33.33/33.33/33.34 of 10.00: the leftover cent goes to the largest fraction."""
        expenses = [make_expense(
            "e1", "10.00", "a", ["a", "b", "c"],
            split=SplitType.PERCENTAGE, custom_splits={"a": "33.33", "b": "33.33", "c": "33.34"},
        )]

        shares = expense_shares(expenses[0])

        assert shares == {"a": Decimal("3.33"), "b": Decimal("3.33"), "c": Decimal("3.34")}
        assert sum(shares.values()) == Decimal("10.00")

    def test_custom_split_without_map_only_credits_payer(self):
        expenses = [make_expense("e1", "40.00", "a", ["a", "b"], split=SplitType.AMOUNT)]

        balances = compute_balances(self.members, expenses)

        assert balances["a"] == Decimal("40.00")
        assert balances["b"] == Decimal("0.00")

    def test_unbalanced_custom_split_is_trusted(self):
        """Splits that do not add up show up as a non-zero total, not an error."""
        expenses = [make_expense(
            "e1", "100.00", "a", ["a", "b"],
            split=SplitType.PERCENTAGE, custom_splits={"a": 50, "b": 30},
        )]

        balances = compute_balances(self.members, expenses)

        assert sum(balances.values()) == Decimal("20.00")

    def test_duplicate_participants_count_once(self):
        expenses = [make_expense("e1", "90.00", "a", ["a", "b", "b", "c"])]

        balances = compute_balances(self.members, expenses)

        assert balances == {"a": Decimal("60.00"), "b": Decimal("-30.00"), "c": Decimal("-30.00")}


class TestStaleReferences:
    """Test that malformed input degrades instead of raising."""

    def setup_method(self):
        self.members = [make_member("a"), make_member("b")]

    def test_unknown_participant_is_skipped(self):
        expenses = [make_expense("e1", "90.00", "a", ["a", "b", "ghost"])]

        balances = compute_balances(self.members, expenses)

        assert set(balances) == {"a", "b"}
        assert balances["a"] == Decimal("60.00")
        assert balances["b"] == Decimal("-30.00")

    def test_unknown_payer_is_skipped(self):
        expenses = [make_expense("e1", "50.00", "ghost", ["a", "b"])]

        balances = compute_balances(self.members, expenses)

        assert balances == {"a": Decimal("-25.00"), "b": Decimal("-25.00")}

    def test_zero_participants_keeps_payer_credit(self):
        expenses = [make_expense("e1", "40.00", "a", [])]

        balances = compute_balances(self.members, expenses)

        assert balances == {"a": Decimal("40.00"), "b": Decimal("0.00")}

    def test_unknown_member_in_custom_split_is_skipped(self):
        expenses = [make_expense(
            "e1", "60.00", "a", ["a", "b"],
            split=SplitType.AMOUNT, custom_splits={"a": 20, "b": 20, "ghost": 20},
        )]

        balances = compute_balances(self.members, expenses)

        assert balances == {"a": Decimal("40.00"), "b": Decimal("-20.00")}

    def test_no_members(self):
        expenses = [make_expense("e1", "40.00", "a", ["a"])]
        assert compute_balances([], expenses) == {}


class TestBalanceProperties:
    """Test conservation, rounding and determinism over generated histories."""

    def setup_method(self):
        self.rng = random.Random(20250115)
        self.member_ids = ["a", "b", "c", "d", "e"]
        self.members = [make_member(m) for m in self.member_ids]

    def test_conservation(self):
        for _ in range(20):
            expenses = _random_expenses(self.rng, self.member_ids, 40)
            balances = compute_balances(self.members, expenses)
            assert abs(sum(balances.values())) <= Decimal("0.01")

    def test_conservation_with_repeating_percentages(self):
        """Five 10.00 expenses split 33.33/33.33/33.34 must not leak cents."""
        expenses = [
            make_expense(
                f"e{i}", "10.00", "a", ["a", "b", "c"],
                split=SplitType.PERCENTAGE, custom_splits={"a": "33.33", "b": "33.33", "c": "33.34"},
            )
            for i in range(5)
        ]

        balances = compute_balances(self.members, expenses)

        assert sum(balances.values()) == 0
        assert balances["a"] == Decimal("33.35")

    def test_conservation_with_sub_cent_amounts(self):
        expenses = [
            make_expense(
                f"e{i}", "10.00", "b", ["a", "b", "c"],
                split=SplitType.AMOUNT, custom_splits={"a": "3.333", "b": "3.333", "c": "3.334"},
            )
            for i in range(7)
        ]

        balances = compute_balances(self.members, expenses)

        assert sum(balances.values()) == 0

    def test_two_decimal_places(self):
        expenses = _random_expenses(self.rng, self.member_ids, 40)
        for value in compute_balances(self.members, expenses).values():
            assert value.as_tuple().exponent == -2

    def test_repeatable_and_order_independent(self):
        expenses = _random_expenses(self.rng, self.member_ids, 40)

        first = compute_balances(self.members, expenses)
        second = compute_balances(self.members, expenses)
        shuffled = list(expenses)
        self.rng.shuffle(shuffled)

        assert first == second
        assert compute_balances(self.members, shuffled) == first

    def test_every_member_reported(self):
        balances = compute_balances(self.members, [])
        assert balances == {m: Decimal("0.00") for m in self.member_ids}


class TestMemberTotals:
    """Test the paid / share breakdown."""

    def test_totals(self):
        members = [make_member("a"), make_member("b")]
        expenses = [
            make_expense("e1", "90.00", "a", ["a", "b"]),
            make_expense("e2", "30.00", "b", ["a", "b"]),
        ]

        totals = compute_member_totals(members, expenses)

        assert totals["a"] == {"paid": Decimal("90.00"), "share": Decimal("60.00"), "balance": Decimal("30.00")}
        assert totals["b"] == {"paid": Decimal("30.00"), "share": Decimal("60.00"), "balance": Decimal("-30.00")}
