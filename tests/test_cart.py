"""
Tests for the cart store
"""

from decimal import Decimal
from unittest.mock import Mock

from storefront.cart import CartPersistence, CartStore, Composition, InMemoryStore, Size
from storefront.cart.storage import decode_cart


class TestAdd:
    """Tests for adding products."""

    def test_add_new_line(self, cart, classic_pizza):
        cart.add(classic_pizza)

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 1
        assert cart.items[0].composition is None

    def test_same_selection_merges(self, cart, classic_pizza):
        composition = Composition(size=Size.MEDIUM)
        cart.add(classic_pizza, 2, composition)
        cart.add(classic_pizza, 3, Composition(size=Size.MEDIUM))

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 5

    def test_different_composition_new_line(self, cart, classic_pizza):
        cart.add(classic_pizza, 1, Composition(size=Size.MEDIUM))
        cart.add(classic_pizza, 1, Composition(size=Size.LARGE))

        assert len(cart.items) == 2

    def test_reordered_extras_new_line(self, cart, classic_pizza, bacon, onion):
        cart.add(classic_pizza, 1, Composition(extras=[bacon, onion]))
        cart.add(classic_pizza, 1, Composition(extras=[onion, bacon]))

        assert len(cart.items) == 2

    def test_absent_and_empty_composition_not_merged(self, cart, classic_pizza):
        cart.add(classic_pizza)
        cart.add(classic_pizza, 1, Composition())

        assert len(cart.items) == 2

    def test_insertion_order_kept(self, cart, classic_pizza, soda):
        cart.add(soda)
        cart.add(classic_pizza)
        cart.add(soda)

        assert [line.product.id for line in cart.items] == [soda.id, classic_pizza.id]
        assert cart.items[0].quantity == 2

    def test_non_positive_quantity_ignored(self, cart, classic_pizza):
        cart.add(classic_pizza, 0)
        cart.add(classic_pizza, -2)

        assert cart.items == ()

    def test_add_item_alias(self, cart, soda):
        cart.add_item(soda, 4)

        assert cart.total_item_count() == 4


class TestSetQuantity:
    """Tests for quantity updates."""

    def test_sets_quantity(self, cart, soda):
        cart.add(soda)
        cart.set_quantity(soda.id, 7)

        assert cart.items[0].quantity == 7

    def test_zero_removes(self, cart, soda):
        cart.add(soda, 3)
        cart.set_quantity(soda.id, 0)

        assert cart.is_empty()

    def test_negative_removes(self, cart, soda):
        cart.add(soda, 3)
        cart.set_quantity(soda.id, -1)

        assert cart.is_empty()

    def test_unknown_product_is_noop(self, cart, soda):
        cart.add(soda, 2)
        cart.set_quantity(999, 5)

        assert cart.items[0].quantity == 2

    def test_only_first_line_of_product_updated(self, cart, classic_pizza):
        """Matches by product id only; the second composition is untouched."""
        cart.add(classic_pizza, 1, Composition(size=Size.MEDIUM))
        cart.add(classic_pizza, 1, Composition(size=Size.LARGE))

        cart.set_quantity(classic_pizza.id, 4)

        assert [line.quantity for line in cart.items] == [4, 1]


class TestRemoveAndClear:
    """Tests for removal."""

    def test_remove_all_lines_of_product(self, cart, classic_pizza, soda):
        cart.add(classic_pizza, 1, Composition(size=Size.MEDIUM))
        cart.add(soda)
        cart.add(classic_pizza, 2, Composition(size=Size.LARGE))

        cart.remove(classic_pizza.id)

        assert [line.product.id for line in cart.items] == [soda.id]

    def test_remove_unknown_is_noop(self, cart, soda):
        cart.add(soda)
        cart.remove(12345)

        assert len(cart.items) == 1

    def test_clear_empties(self, cart, classic_pizza, soda):
        cart.add(classic_pizza, 2, Composition(size=Size.MEDIUM))
        cart.add(soda)

        cart.clear()

        assert cart.total_item_count() == 0
        assert cart.total_price() == 0


class TestTotals:
    """Tests for counts and totals."""

    def test_total_item_count(self, cart, classic_pizza, soda):
        cart.add(classic_pizza, 2)
        cart.add(soda, 3)

        assert cart.total_item_count() == 5

    def test_total_price_reflects_current_state(self, cart, classic_pizza, soda):
        cart.add(classic_pizza, 1, Composition(size=Size.MEDIUM))
        cart.add(soda, 2)
        assert cart.total_price() == Decimal("60.70")

        cart.set_quantity(soda.id, 1)
        assert cart.total_price() == Decimal("50.80")

    def test_line_totals(self, cart, soda):
        cart.add(soda, 2)

        [(line, total)] = cart.line_totals()
        assert line.product.id == soda.id
        assert total == Decimal("19.80")

    def test_quantities_stay_positive(self, cart, classic_pizza, soda):
        cart.add(classic_pizza, 2)
        cart.add(soda, 1)
        cart.set_quantity(classic_pizza.id, 0)
        cart.add(soda, -5)
        cart.set_quantity(soda.id, 3)

        assert all(line.quantity >= 1 for line in cart.items)


class TestDisplayFlag:
    """Tests for open/close."""

    def test_open_close(self, cart):
        assert cart.is_open is False
        cart.open()
        assert cart.is_open is True
        cart.close()
        assert cart.is_open is False

    def test_open_does_not_persist(self):
        persistence = Mock(spec=CartPersistence)
        persistence.load.return_value = []
        cart = CartStore(persistence=persistence)

        cart.open()
        cart.close()

        persistence.save.assert_not_called()


class TestPersistenceOnMutation:
    """Every mutation writes the full cart."""

    def test_each_mutation_saves(self, classic_pizza, soda):
        persistence = Mock(spec=CartPersistence)
        persistence.load.return_value = []
        cart = CartStore(persistence=persistence)

        cart.add(classic_pizza)
        cart.add(soda, 2)
        cart.set_quantity(soda.id, 5)
        cart.remove(classic_pizza.id)
        cart.clear()

        assert persistence.save.call_count == 5
        assert list(persistence.save.call_args_list[2].args[0])[1].quantity == 5

    def test_slot_matches_state_after_mutation(self, cart, memory_store, classic_pizza):
        cart.add(classic_pizza, 2, Composition(size=Size.MEDIUM))

        restored = decode_cart(memory_store.get("dotflow-cart"))
        assert restored == list(cart.items)

    def test_save_failure_does_not_raise(self, classic_pizza):
        failing = Mock(spec=InMemoryStore)
        failing.get.return_value = None
        failing.set.side_effect = RuntimeError("quota exceeded")
        cart = CartStore(persistence=CartPersistence(failing))

        cart.add(classic_pizza)

        assert cart.total_item_count() == 1

    def test_rehydrates_on_construction(self, persistence, classic_pizza, bacon):
        first = CartStore(persistence=persistence)
        first.add(classic_pizza, 2, Composition(size=Size.LARGE, extras=[bacon]))

        second = CartStore(persistence=persistence)

        assert second.items == first.items


class TestSubscribers:
    """Tests for change notifications."""

    def test_notified_after_mutation(self, cart, soda):
        seen = []
        cart.subscribe(lambda store: seen.append(store.total_item_count()))

        cart.add(soda, 2)
        cart.clear()

        assert seen == [2, 0]

    def test_notified_on_open(self, cart):
        seen = []
        cart.subscribe(lambda store: seen.append(store.is_open))

        cart.open()

        assert seen == [True]

    def test_unsubscribe(self, cart, soda):
        seen = []
        unsubscribe = cart.subscribe(lambda store: seen.append(1))
        unsubscribe()

        cart.add(soda)

        assert seen == []

    def test_failing_subscriber_isolated(self, cart, soda):
        seen = []

        def broken(store):
            raise RuntimeError("boom")

        cart.subscribe(broken)
        cart.subscribe(lambda store: seen.append(store.total_item_count()))

        cart.add(soda)

        assert seen == [1]
        assert cart.total_item_count() == 1

    def test_items_is_a_snapshot(self, cart, soda):
        cart.add(soda)
        snapshot = cart.items

        cart.add(soda)

        assert snapshot[0].quantity == 1
        assert isinstance(snapshot, tuple)
