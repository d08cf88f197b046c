"""
Tests for the cart mutation service.
"""
from decimal import Decimal
from unittest import mock
from uuid import uuid4

import pytest

from apps.carts.application.dtos import AddToCartDTO, CartItemPatch, CustomizationDataDTO
from apps.carts.application.services import MutationStage
from apps.carts.domain.entities.cart import Cart
from apps.carts.domain.exceptions import (
    CartItemNotFoundError,
    CustomizationAlreadyInCartError,
    CustomizationMismatchError,
    CustomizationNotFoundError,
    DesignNotFoundError,
    EmptySyncBatchError,
    InvalidQuantityError,
    InvalidThreadColorError,
    ProductNotFoundError,
    UnavailableItemError,
    VariantMismatchError,
    VariantNotFoundError,
)
from apps.carts.domain.value_objects import DesignSnapshot
from shared.domain.exceptions import LockTimeoutError, ValidationError
from shared.infrastructure.locks import cart_lock_key


def customized(design, color='#112233', notes=None, preview=None):
    return CustomizationDataDTO(
        design_id=design.id,
        thread_color_hex=color,
        additional_notes=notes,
        preview_image=preview,
    )


class TestReads:

    def test_get_cart_creates_empty_cart(self, cart_service, cart_repository, user_id):
        cart = cart_service.get_cart(user_id)

        assert cart.user_id == user_id
        assert cart.items == []
        assert cart.total == Decimal('0.00')
        assert cart.shipping_cost == Decimal('0.00')
        assert cart_repository.save_calls == 1

    def test_second_read_reuses_cart(self, cart_service, cart_repository, user_id):
        first = cart_service.get_cart(user_id)
        second = cart_service.get_cart(user_id)

        assert first.id == second.id
        assert cart_repository.save_calls == 1

    def test_read_uses_current_pricing(self, cart_service, pricing_config, catalog, cart_repository, user_id):
        product = catalog.add_product('20.00')
        cart_service.add_item(user_id, AddToCartDTO(product_id=product.id, quantity=2))
        saves = cart_repository.save_calls

        pricing_config.tax_rate = Decimal('0.20')
        summary = cart_service.get_summary(user_id)

        assert summary.tax_amount == Decimal('8.00')
        assert summary.total == Decimal('53.00')
        assert not summary.free_shipping
        assert cart_repository.save_calls == saves


class TestAddItem:

    def test_add_then_merge(self, cart_service, catalog, user_id):
        product = catalog.add_product('20.00')
        variant = catalog.add_variant(product)

        first = cart_service.add_item(
            user_id, AddToCartDTO(product_id=product.id, variant_id=variant.id, quantity=2)
        )
        assert first.subtotal == Decimal('40.00')
        assert first.tax_amount == Decimal('4.00')
        assert first.shipping_cost == Decimal('5.00')
        assert first.total == Decimal('49.00')

        second = cart_service.add_item(
            user_id, AddToCartDTO(product_id=product.id, variant_id=variant.id, quantity=1)
        )
        assert len(second.items) == 1
        assert second.items[0].quantity == 3
        assert second.items[0].line_total == Decimal('60.00')
        assert second.shipping_cost == Decimal('0.00')
        assert second.tax_amount == Decimal('6.00')
        assert second.total == Decimal('66.00')

    def test_variant_price_delta(self, cart_service, catalog, user_id):
        product = catalog.add_product('20.00')
        variant = catalog.add_variant(product, additional_price='2.50')

        cart = cart_service.add_item(user_id, AddToCartDTO(product_id=product.id, variant_id=variant.id))

        assert cart.items[0].unit_price == Decimal('22.50')

    def test_customized_line_carries_surcharge(self, cart_service, catalog, user_id):
        product = catalog.add_product('20.00')
        design = catalog.add_design()

        cart = cart_service.add_item(
            user_id,
            AddToCartDTO(product_id=product.id, quantity=2, customization=customized(design, notes='initials')),
        )

        line = cart.items[0]
        assert line.customization_surcharge == Decimal('10.00')
        assert line.line_total == Decimal('60.00')
        assert line.customization.thread_color_hex == '#112233'
        assert line.customization.additional_notes == 'initials'

    def test_customized_lines_stay_separate(self, cart_service, catalog, user_id):
        product = catalog.add_product()
        design = catalog.add_design()

        cart_service.add_item(user_id, AddToCartDTO(product_id=product.id))
        cart_service.add_item(user_id, AddToCartDTO(product_id=product.id, customization=customized(design)))
        cart = cart_service.add_item(user_id, AddToCartDTO(product_id=product.id, customization=customized(design)))

        assert len(cart.items) == 3
        assert cart.total_items == 3

    @pytest.mark.parametrize('quantity', [0, -3, 101])
    def test_rejects_quantity(self, cart_service, catalog, cart_repository, user_id, quantity):
        product = catalog.add_product()
        with pytest.raises(InvalidQuantityError):
            cart_service.add_item(user_id, AddToCartDTO(product_id=product.id, quantity=quantity))
        assert cart_repository.find_by_user_id(user_id) is None

    def test_unknown_product(self, cart_service, user_id):
        with pytest.raises(ProductNotFoundError):
            cart_service.add_item(user_id, AddToCartDTO(product_id=uuid4()))

    def test_inactive_product(self, cart_service, catalog, user_id):
        product = catalog.add_product(is_active=False)
        with pytest.raises(UnavailableItemError):
            cart_service.add_item(user_id, AddToCartDTO(product_id=product.id))

    def test_unknown_variant(self, cart_service, catalog, user_id):
        product = catalog.add_product()
        with pytest.raises(VariantNotFoundError):
            cart_service.add_item(user_id, AddToCartDTO(product_id=product.id, variant_id=uuid4()))

    def test_variant_of_other_product(self, cart_service, catalog, user_id):
        product = catalog.add_product()
        other_variant = catalog.add_variant(catalog.add_product())
        with pytest.raises(VariantMismatchError):
            cart_service.add_item(user_id, AddToCartDTO(product_id=product.id, variant_id=other_variant.id))

    def test_unknown_design(self, cart_service, catalog, user_id):
        product = catalog.add_product()
        request = AddToCartDTO(
            product_id=product.id,
            customization=CustomizationDataDTO(design_id=uuid4(), thread_color_hex='#000000'),
        )
        with pytest.raises(DesignNotFoundError):
            cart_service.add_item(user_id, request)

    def test_bad_thread_color(self, cart_service, catalog, customization_repository, user_id):
        product = catalog.add_product()
        design = catalog.add_design()
        with pytest.raises(InvalidThreadColorError):
            cart_service.add_item(
                user_id, AddToCartDTO(product_id=product.id, customization=customized(design, color='#12345'))
            )
        assert len(customization_repository) == 0


class TestLocking:

    def test_lock_released_after_persistence_failure(self, cart_service, catalog, cart_repository,
                                                    lock_backend, user_id):
        product = catalog.add_product()
        cart_repository.fail_on_save = RuntimeError("database unavailable")

        with pytest.raises(RuntimeError):
            cart_service.add_item(user_id, AddToCartDTO(product_id=product.id))

        assert lock_backend.get(cart_lock_key(user_id)) is None
        cart_repository.fail_on_save = None
        cart = cart_service.add_item(user_id, AddToCartDTO(product_id=product.id))
        assert cart.items[0].quantity == 1

    def test_lock_released_after_validation_failure(self, cart_service, lock_backend, user_id):
        with pytest.raises(ProductNotFoundError):
            cart_service.add_item(user_id, AddToCartDTO(product_id=uuid4()))
        assert lock_backend.get(cart_lock_key(user_id)) is None

    def test_failed_mutation_discards_new_customizations(self, cart_service, catalog, cart_repository,
                                                        customization_repository, user_id):
        product = catalog.add_product()
        design = catalog.add_design()
        cart_repository.fail_on_save = RuntimeError("database unavailable")

        with pytest.raises(RuntimeError):
            cart_service.add_item(user_id, AddToCartDTO(product_id=product.id, customization=customized(design)))

        assert len(customization_repository) == 0

    def test_busy_lock_raises_timeout(self, cart_service, catalog, lock_backend, service_config, user_id):
        product = catalog.add_product()
        lock_backend.set_if_absent(cart_lock_key(user_id), 'someone-else', 60_000)
        cart_service.config = type(service_config)(lock_timeout_seconds=5, lock_wait_seconds=0.05)

        with pytest.raises(LockTimeoutError):
            cart_service.add_item(user_id, AddToCartDTO(product_id=product.id))

        assert lock_backend.get(cart_lock_key(user_id)) == 'someone-else'


class TestUpdateAndRemove:

    def test_update_item(self, cart_service, catalog, user_id):
        product = catalog.add_product('20.00')
        cart = cart_service.add_item(user_id, AddToCartDTO(product_id=product.id))

        cart = cart_service.update_item(user_id, cart.items[0].id, 4)

        assert cart.items[0].quantity == 4
        assert cart.subtotal == Decimal('80.00')

    def test_update_unknown_item(self, cart_service, user_id):
        with pytest.raises(CartItemNotFoundError):
            cart_service.update_item(user_id, uuid4(), 2)

    def test_update_rejects_zero(self, cart_service, catalog, user_id):
        product = catalog.add_product()
        cart = cart_service.add_item(user_id, AddToCartDTO(product_id=product.id))
        with pytest.raises(InvalidQuantityError):
            cart_service.update_item(user_id, cart.items[0].id, 0)

    def test_patch_notes_only(self, cart_service, catalog, customization_repository, user_id):
        product = catalog.add_product()
        design = catalog.add_design()
        cart = cart_service.add_item(
            user_id, AddToCartDTO(product_id=product.id, quantity=2, customization=customized(design, notes='old'))
        )
        line = cart.items[0]

        cart = cart_service.patch_item(user_id, line.id, CartItemPatch(additional_notes='new'))

        assert cart.items[0].quantity == 2
        assert cart.items[0].customization.additional_notes == 'new'

    def test_patch_none_clears_notes(self, cart_service, catalog, user_id):
        product = catalog.add_product()
        design = catalog.add_design()
        cart = cart_service.add_item(
            user_id, AddToCartDTO(product_id=product.id, customization=customized(design, notes='old'))
        )

        cart = cart_service.patch_item(user_id, cart.items[0].id, CartItemPatch(additional_notes=None))

        assert cart.items[0].customization.additional_notes == ''

    def test_empty_patch_rejected(self, cart_service, user_id):
        with pytest.raises(ValidationError):
            cart_service.patch_item(user_id, uuid4(), CartItemPatch())

    def test_notes_on_plain_line_rejected(self, cart_service, catalog, user_id):
        product = catalog.add_product()
        cart = cart_service.add_item(user_id, AddToCartDTO(product_id=product.id))
        with pytest.raises(ValidationError):
            cart_service.patch_item(user_id, cart.items[0].id, CartItemPatch(additional_notes='hi'))

    def test_remove_item(self, cart_service, catalog, user_id):
        product = catalog.add_product()
        cart = cart_service.add_item(user_id, AddToCartDTO(product_id=product.id))

        cart = cart_service.remove_item(user_id, cart.items[0].id)

        assert cart.items == []
        assert cart.total == Decimal('0.00')

    def test_remove_unknown_item(self, cart_service, user_id):
        with pytest.raises(CartItemNotFoundError):
            cart_service.remove_item(user_id, uuid4())

    def test_remove_deletes_preview_once_even_on_failure(self, cart_service, catalog, preview_store,
                                                         customization_repository, user_id):
        product = catalog.add_product()
        design = catalog.add_design()
        cart = cart_service.add_item(
            user_id, AddToCartDTO(product_id=product.id, customization=customized(design, preview=b'png'))
        )
        preview_store.fail_delete = True

        cart = cart_service.remove_item(user_id, cart.items[0].id)

        assert cart.items == []
        assert len(preview_store.deletes) == 1
        assert len(customization_repository) == 0

    def test_clear(self, cart_service, catalog, customization_repository, user_id):
        design = catalog.add_design()
        cart_service.add_item(user_id, AddToCartDTO(product_id=catalog.add_product().id))
        cart_service.add_item(
            user_id, AddToCartDTO(product_id=catalog.add_product().id, customization=customized(design))
        )

        cart = cart_service.clear(user_id)

        assert cart.items == []
        assert cart.subtotal == Decimal('0.00')
        assert cart.shipping_cost == Decimal('0.00')
        assert len(customization_repository) == 0


class TestSyncLocalCart:

    def test_empty_batch_rejected(self, cart_service, lock_manager, user_id):
        with mock.patch.object(lock_manager, 'hold') as hold:
            with pytest.raises(EmptySyncBatchError):
                cart_service.sync_local_cart(user_id, [])
        hold.assert_not_called()

    def test_one_persist_and_one_recompute(self, cart_service, catalog, cart_repository, user_id):
        first, second = catalog.add_product('20.00'), catalog.add_product('5.00')
        items = [
            AddToCartDTO(product_id=first.id, quantity=1),
            AddToCartDTO(product_id=second.id, quantity=2),
            AddToCartDTO(product_id=first.id, quantity=2),
        ]

        with mock.patch.object(Cart, 'recalculate_totals', autospec=True,
                               side_effect=Cart.recalculate_totals) as recalc:
            cart = cart_service.sync_local_cart(user_id, items)

        assert cart_repository.save_calls == 1
        assert recalc.call_count == 1
        assert len(cart.items) == 2
        assert cart.subtotal == Decimal('70.00')

    def test_merges_with_existing_lines(self, cart_service, catalog, user_id):
        product = catalog.add_product('20.00')
        cart_service.add_item(user_id, AddToCartDTO(product_id=product.id, quantity=1))

        cart = cart_service.sync_local_cart(user_id, [AddToCartDTO(product_id=product.id, quantity=4)])

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 5

    def test_invalid_line_rejects_whole_batch(self, cart_service, catalog, cart_repository, user_id):
        product = catalog.add_product()
        items = [AddToCartDTO(product_id=product.id), AddToCartDTO(product_id=uuid4())]

        with pytest.raises(ProductNotFoundError):
            cart_service.sync_local_cart(user_id, items)

        assert cart_repository.find_by_user_id(user_id) is None


class TestSavedCustomizations:

    @pytest.fixture
    def product(self, catalog):
        return catalog.add_product('20.00')

    @pytest.fixture
    def design(self, catalog):
        return catalog.add_design()

    @pytest.fixture
    def saved(self, customization_service, product, design, user_id):
        return customization_service.attach(user_id, product.id, None, design.id, '#445566', additional_notes='saved')

    def test_add_saved_customization(self, cart_service, product, saved, user_id):
        cart = cart_service.add_item(user_id, AddToCartDTO(product_id=product.id, quantity=2, customization_id=saved.id))

        line = cart.items[0]
        assert line.customization.id == saved.id
        assert line.customization.additional_notes == 'saved'
        assert line.customization_surcharge == Decimal('10.00')
        assert line.line_total == Decimal('60.00')

    def test_saved_customization_line_does_not_merge(self, cart_service, product, saved, user_id):
        cart_service.add_item(user_id, AddToCartDTO(product_id=product.id))
        cart = cart_service.add_item(user_id, AddToCartDTO(product_id=product.id, customization_id=saved.id))

        assert len(cart.items) == 2

    def test_same_saved_customization_twice_rejected(self, cart_service, product, saved, user_id):
        cart_service.add_item(user_id, AddToCartDTO(product_id=product.id, customization_id=saved.id))

        with pytest.raises(CustomizationAlreadyInCartError):
            cart_service.add_item(user_id, AddToCartDTO(product_id=product.id, customization_id=saved.id))

    def test_base_product_customization_fits_variant(self, cart_service, catalog, product, saved, user_id):
        variant = catalog.add_variant(product)

        cart = cart_service.add_item(
            user_id, AddToCartDTO(product_id=product.id, variant_id=variant.id, customization_id=saved.id)
        )

        assert cart.items[0].variant_id == variant.id

    def test_unknown_customization(self, cart_service, product, user_id):
        with pytest.raises(CustomizationNotFoundError):
            cart_service.add_item(user_id, AddToCartDTO(product_id=product.id, customization_id=uuid4()))

    def test_other_users_customization(self, cart_service, product, saved):
        with pytest.raises(CustomizationNotFoundError):
            cart_service.add_item(uuid4(), AddToCartDTO(product_id=product.id, customization_id=saved.id))

    def test_product_mismatch(self, cart_service, catalog, saved, user_id):
        other = catalog.add_product()
        with pytest.raises(CustomizationMismatchError):
            cart_service.add_item(user_id, AddToCartDTO(product_id=other.id, customization_id=saved.id))

    def test_variant_mismatch(self, cart_service, customization_service, catalog, product, design, user_id):
        made_for, requested = catalog.add_variant(product), catalog.add_variant(product)
        customization = customization_service.attach(user_id, product.id, made_for.id, design.id, '#445566')

        with pytest.raises(CustomizationMismatchError):
            cart_service.add_item(
                user_id,
                AddToCartDTO(product_id=product.id, variant_id=requested.id, customization_id=customization.id),
            )

    def test_deactivated_design(self, cart_service, catalog, product, design, saved, user_id):
        catalog.designs[design.id] = DesignSnapshot(id=design.id, name=design.name, is_active=False)

        with pytest.raises(UnavailableItemError):
            cart_service.add_item(user_id, AddToCartDTO(product_id=product.id, customization_id=saved.id))

    def test_inline_and_saved_together_rejected(self, cart_service, product, design, saved, user_id):
        request = AddToCartDTO(product_id=product.id, customization=customized(design), customization_id=saved.id)
        with pytest.raises(ValidationError):
            cart_service.add_item(user_id, request)

    def test_failed_mutation_keeps_saved_customization(self, cart_service, cart_repository,
                                                      customization_repository, product, saved, user_id):
        cart_repository.fail_on_save = RuntimeError("database unavailable")

        with pytest.raises(RuntimeError):
            cart_service.add_item(user_id, AddToCartDTO(product_id=product.id, customization_id=saved.id))

        assert customization_repository.find_by_id(saved.id) is not None

    def test_sync_with_saved_customization(self, cart_service, product, saved, user_id):
        cart = cart_service.sync_local_cart(user_id, [
            AddToCartDTO(product_id=product.id, quantity=2),
            AddToCartDTO(product_id=product.id, customization_id=saved.id),
        ])

        assert len(cart.items) == 2
        assert cart.subtotal == Decimal('70.00')

    def test_sync_rejects_duplicate_reference(self, cart_service, cart_repository, product, saved, user_id):
        items = [
            AddToCartDTO(product_id=product.id, customization_id=saved.id),
            AddToCartDTO(product_id=product.id, customization_id=saved.id),
        ]
        with pytest.raises(CustomizationAlreadyInCartError):
            cart_service.sync_local_cart(user_id, items)
        assert cart_repository.find_by_user_id(user_id) is None


class TestFailureAtomicity:

    def test_notes_unchanged_when_cart_save_fails(self, cart_service, catalog, cart_repository,
                                                  customization_repository, user_id):
        product = catalog.add_product()
        design = catalog.add_design()
        cart = cart_service.add_item(
            user_id, AddToCartDTO(product_id=product.id, customization=customized(design, notes='old'))
        )
        line = cart.items[0]
        cart_repository.fail_on_save = RuntimeError("database unavailable")

        with pytest.raises(RuntimeError):
            cart_service.patch_item(user_id, line.id, CartItemPatch(quantity=3, additional_notes='new'))

        assert customization_repository.find_by_id(line.customization.id).additional_notes == 'old'

    def test_lock_timeout_never_reports_unlocked(self, cart_service, catalog, lock_backend, service_config, user_id):
        product = catalog.add_product()
        lock_backend.set_if_absent(cart_lock_key(user_id), 'someone-else', 60_000)
        cart_service.config = type(service_config)(lock_timeout_seconds=5, lock_wait_seconds=0.05)

        with mock.patch.object(cart_service, '_stage') as stage:
            with pytest.raises(LockTimeoutError):
                cart_service.add_item(user_id, AddToCartDTO(product_id=product.id))

        stages = [call.args[1] for call in stage.call_args_list]
        assert stages == [MutationStage.LOCK_PENDING]

    def test_failed_mutation_reports_unlocked(self, cart_service, user_id):
        with mock.patch.object(cart_service, '_stage') as stage:
            with pytest.raises(ProductNotFoundError):
                cart_service.add_item(user_id, AddToCartDTO(product_id=uuid4()))

        stages = [call.args[1] for call in stage.call_args_list]
        assert stages[:2] == [MutationStage.LOCK_PENDING, MutationStage.LOCKED]
        assert stages[-1] == MutationStage.UNLOCKED


def test_read_view_loads_customizations_in_one_batch(cart_service, catalog, customization_repository, user_id):
    product = catalog.add_product()
    design = catalog.add_design()
    cart_service.add_item(user_id, AddToCartDTO(product_id=product.id, customization=customized(design)))
    cart_service.add_item(user_id, AddToCartDTO(product_id=product.id, customization=customized(design)))
    before = customization_repository.batch_lookups

    cart = cart_service.get_cart(user_id)

    assert customization_repository.batch_lookups == before + 1
    assert all(line.customization is not None for line in cart.items)
