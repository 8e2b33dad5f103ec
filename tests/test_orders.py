import unittest
from datetime import date
from unittest.mock import patch

from sqlalchemy import func, select, text
from sqlalchemy.exc import IntegrityError

from retail_orders.core.errors import (
    CascadeIntegrityError,
    DomainViolation,
    RecordNotFound,
    UniquenessViolation,
)
from retail_orders.database import build_engine, create_schema, make_session_factory
from retail_orders.models import Collection, Delivery, Order, OrderProduct, StaffOrder
from retail_orders.services import (
    fulfilment_service,
    inventory_service,
    order_service,
    staff_service,
)
from retail_orders.services.sequence_service import peek_next_value


class OrderServiceTest(unittest.TestCase):
    def setUp(self):
        self.engine = build_engine("sqlite:///:memory:")
        create_schema(self.engine)
        self.db = make_session_factory(self.engine)()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def _count(self, model, order_id):
        return self.db.execute(
            select(func.count()).select_from(model).where(model.order_id == order_id)
        ).scalar_one()

    def test_order_ids_come_from_the_sequence(self):
        first = order_service.create_order(self.db, "InStore")
        second = order_service.create_order(self.db, "Delivery", placed_on=date(2024, 3, 1))

        self.assertEqual((first.order_id, second.order_id), (1, 2))
        self.assertEqual(first.completed, 0)
        self.assertEqual(first.placed_on, date.today())
        self.assertEqual(second.placed_on, date(2024, 3, 1))
        self.assertEqual(peek_next_value(self.db), 3)

    def test_accepts_each_order_type(self):
        for order_type in ("InStore", "Collection", "Delivery"):
            with self.subTest(order_type=order_type):
                order = order_service.create_order(self.db, order_type)
                self.assertEqual(order_service.get_order(self.db, order.order_id).order_type, order_type)

    def test_rejects_unknown_or_miscased_order_type(self):
        for order_type in ("Pickup", "instore", "DELIVERY", ""):
            with self.subTest(order_type=order_type):
                with self.assertRaises(DomainViolation):
                    order_service.create_order(self.db, order_type)
        self.assertEqual(self.db.execute(select(func.count()).select_from(Order)).scalar_one(), 0)

    def test_schema_rejects_unknown_order_type(self):
        with self.assertRaises(IntegrityError) as ctx:
            self.db.execute(
                text(
                    'INSERT INTO "ORDERS" ("OrderID", "OrderType", "OrderCompleted") '
                    "VALUES (1, 'Pickup', 0)"
                )
            )
        self.assertIn("CHECK", str(ctx.exception))
        self.db.rollback()

    def test_rejects_bad_completion_flag_and_id(self):
        with self.assertRaises(DomainViolation):
            order_service.create_order(self.db, "InStore", completed=2)
        with self.assertRaises(DomainViolation):
            order_service.create_order(self.db, "InStore", order_id=0)

    def test_explicit_duplicate_id_is_rejected(self):
        order_service.create_order(self.db, "InStore", order_id=40)
        with self.assertRaises(UniquenessViolation):
            order_service.create_order(self.db, "Collection", order_id=40)

    def test_sequence_skips_ids_taken_explicitly(self):
        order_service.create_order(self.db, "InStore", order_id=1)

        order = order_service.create_order(self.db, "InStore")

        self.assertEqual(order.order_id, 2)
        self.assertEqual(order_service.create_order(self.db, "Delivery").order_id, 3)
        self.assertEqual(peek_next_value(self.db), 4)

    def test_rejected_insert_uses_up_its_sequence_value(self):
        def refuse(db, action):
            db.rollback()
            raise UniquenessViolation(action)

        with patch.object(order_service, "commit_or_raise", side_effect=refuse):
            with self.assertRaises(UniquenessViolation):
                order_service.create_order(self.db, "InStore")

        self.assertEqual(peek_next_value(self.db), 2)
        self.assertEqual(order_service.create_order(self.db, "InStore").order_id, 2)

    def test_mark_completed_and_update(self):
        order = order_service.create_order(self.db, "InStore")

        self.assertTrue(order_service.mark_completed(self.db, order.order_id).is_completed)
        self.assertFalse(order_service.mark_completed(self.db, order.order_id, False).is_completed)
        updated = order_service.update_order(self.db, order.order_id, placed_on="2024-05-02")
        self.assertEqual(updated.placed_on, date(2024, 5, 2))
        with self.assertRaises(DomainViolation):
            order_service.update_order(self.db, order.order_id, order_type="Pickup")
        with self.assertRaises(RecordNotFound):
            order_service.update_order(self.db, 77, completed=1)

    def test_type_change_cannot_strand_a_delivery_record(self):
        order = order_service.create_order(self.db, "Delivery")
        fulfilment_service.record_delivery(self.db, order.order_id, "Ann", "Lee", "4", "High St", "Leeds")

        with self.assertRaises(DomainViolation):
            order_service.update_order(self.db, order.order_id, order_type="InStore")
        self.assertEqual(order_service.get_order(self.db, order.order_id).order_type, "Delivery")

    def test_delete_order_cascades_to_every_dependent_table(self):
        for product_id in (1, 2, 3):
            inventory_service.create_product(self.db, product_id, f"Item {product_id}", "4.99", 20)
        order_service.create_order(self.db, "Delivery", order_id=5)
        for product_id in (1, 2, 3):
            order_service.add_line(self.db, 5, product_id, product_id)
        fulfilment_service.record_delivery(
            self.db, 5, "Sam", "Hill", "12", "Mill Lane", "York", date(2024, 6, 1)
        )
        staff_service.create_staff(self.db, 1, "Pat", "Jones")
        staff_service.attribute_order(self.db, 1, 5)

        order_service.delete_order(self.db, 5)

        for model in (OrderProduct, Delivery, Collection, StaffOrder, Order):
            with self.subTest(table=model.__tablename__):
                self.assertEqual(self._count(model, 5), 0)
        self.assertEqual(order_service.remaining_dependents(self.db, 5), {})
        # Parents on the other side of the joins survive.
        self.assertIsNotNone(inventory_service.get_product(self.db, 1))
        self.assertIsNotNone(staff_service.get_staff(self.db, 1))

    def test_database_cascade_without_the_orm(self):
        inventory_service.create_product(self.db, 1, "Item", "1.00", 5)
        order_service.create_order(self.db, "Collection", order_id=6)
        order_service.add_line(self.db, 6, 1, 2)
        fulfilment_service.record_collection(self.db, 6, "Kim", "Ray", date(2024, 6, 2))

        self.db.execute(text('DELETE FROM "ORDERS" WHERE "OrderID" = 6'))
        self.db.commit()

        self.assertEqual(self._count(OrderProduct, 6), 0)
        self.assertEqual(self._count(Collection, 6), 0)

    def test_partial_cascade_is_rolled_back(self):
        order_service.create_order(self.db, "InStore", order_id=8)

        with patch.object(order_service, "remaining_dependents", return_value={"ORDER_PRODUCTS": 1}):
            with self.assertRaises(CascadeIntegrityError):
                order_service.delete_order(self.db, 8)

        self.assertEqual(self._count(Order, 8), 1)

    def test_delete_missing_order(self):
        with self.assertRaises(RecordNotFound):
            order_service.delete_order(self.db, 123)


if __name__ == "__main__":
    unittest.main()
