import tempfile
import unittest
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from retail_orders.core.constants import ORDER_SEQUENCE_NAME
from retail_orders.core.errors import SequenceExhaustedError
from retail_orders.database import build_engine, create_schema, make_session_factory
from retail_orders.models import SequenceCounter
from retail_orders.services import sequence_service


class SequenceServiceTest(unittest.TestCase):
    def setUp(self):
        self.engine = build_engine("sqlite:///:memory:")
        create_schema(self.engine)
        self.session_factory = make_session_factory(self.engine)
        self.db = self.session_factory()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def test_schema_seeds_the_order_sequence(self):
        counter = self.db.get(SequenceCounter, ORDER_SEQUENCE_NAME)
        self.assertEqual((counter.next_value, counter.increment_by), (1, 1))

    def test_starts_at_one_and_increments_by_one(self):
        values = [sequence_service.next_value(self.db) for _ in range(3)]
        self.db.commit()

        self.assertEqual(values, [1, 2, 3])
        self.assertEqual(sequence_service.peek_next_value(self.db), 4)

    def test_rollback_returns_values(self):
        sequence_service.next_value(self.db)
        self.db.rollback()

        self.assertEqual(sequence_service.next_value(self.db), 1)

    def test_allocate_commits_before_returning(self):
        self.assertEqual(sequence_service.allocate(session_factory=self.session_factory), 1)
        self.assertEqual(sequence_service.allocate(session_factory=self.session_factory), 2)

        other = self.session_factory()
        try:
            self.assertEqual(sequence_service.peek_next_value(other), 3)
        finally:
            other.close()

    def test_missing_sequence_is_created_on_first_use(self):
        self.assertEqual(sequence_service.next_value(self.db, "RECEIPTS_seq"), 1)
        self.assertEqual(sequence_service.next_value(self.db, "RECEIPTS_seq"), 2)

    def test_ensure_sequence_is_idempotent(self):
        self.assertFalse(sequence_service.ensure_sequence(self.db, ORDER_SEQUENCE_NAME))
        self.assertTrue(sequence_service.ensure_sequence(self.db, "TILL_seq", start=100, increment=10))
        self.assertEqual(sequence_service.next_value(self.db, "TILL_seq"), 100)
        self.assertEqual(sequence_service.next_value(self.db, "TILL_seq"), 110)

    def test_does_not_cycle(self):
        sequence_service.ensure_sequence(self.db, "SHORT_seq", max_value=2)
        self.assertEqual(sequence_service.next_value(self.db, "SHORT_seq"), 1)
        self.assertEqual(sequence_service.next_value(self.db, "SHORT_seq"), 2)

        with self.assertRaises(SequenceExhaustedError):
            sequence_service.next_value(self.db, "SHORT_seq")


class ConcurrentAllocationTest(unittest.TestCase):
    def test_concurrent_callers_get_distinct_consecutive_values(self):
        callers = 16
        with tempfile.TemporaryDirectory() as tmp_dir:
            db_path = Path(tmp_dir) / "orders.db"
            engine = build_engine(f"sqlite:///{db_path}")
            try:
                create_schema(engine)
                session_factory = make_session_factory(engine)

                with ThreadPoolExecutor(max_workers=8) as pool:
                    futures = [
                        pool.submit(sequence_service.allocate, ORDER_SEQUENCE_NAME, session_factory)
                        for _ in range(callers)
                    ]
                    values = [future.result() for future in futures]
            finally:
                engine.dispose()

        self.assertEqual(len(set(values)), callers)
        self.assertEqual(sorted(values), list(range(1, callers + 1)))


if __name__ == "__main__":
    unittest.main()
