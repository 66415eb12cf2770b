import itertools
from concurrent.futures import Future
from threading import Barrier, Thread
import unittest

from payment_bridge.exceptions import AlreadyPendingError
from payment_bridge.slot import PendingRequestSlot
from payment_bridge import slot as slot_module


class TestPendingRequestSlot(unittest.TestCase):
    def test_install(self):
        slot = PendingRequestSlot()
        self.assertFalse(slot.pending)

        token = slot.install(Future())
        self.assertEqual(token, 1001)
        self.assertTrue(slot.pending)

    def test_install_twice(self):
        slot = PendingRequestSlot()
        continuation = Future()
        token = slot.install(continuation)

        self.assertRaises(AlreadyPendingError, slot.install, Future())

        # original occupant is untouched
        self.assertIs(slot.take_if_matches(token), continuation)

    def test_tokens_increase(self):
        slot = PendingRequestSlot()
        first = slot.install(Future())
        slot.take_if_matches(first)
        second = slot.install(Future())
        self.assertGreater(second, first)

    def test_tokens_wrap(self):
        slot = PendingRequestSlot()
        slot._counter = itertools.count(
            slot_module._TOKEN_LIMIT - slot_module._TOKEN_BASE - 1
        )
        last = slot.install(Future())
        self.assertEqual(last, 0xffff)
        slot.take_if_matches(last)
        self.assertEqual(slot.install(Future()), 1001)

    def test_take_matching(self):
        slot = PendingRequestSlot()
        continuation = Future()
        token = slot.install(continuation)

        self.assertIs(slot.take_if_matches(token), continuation)
        self.assertFalse(slot.pending)
        self.assertIsNone(slot.take_if_matches(token))

    def test_take_mismatched(self):
        slot = PendingRequestSlot()
        token = slot.install(Future())

        self.assertIsNone(slot.take_if_matches(token + 1))
        self.assertTrue(slot.pending)

    def test_take_without_token(self):
        slot = PendingRequestSlot()
        continuation = Future()
        slot.install(continuation)

        self.assertIs(slot.take_if_matches(None), continuation)
        self.assertIsNone(slot.take_if_matches(None))

    def test_take_empty(self):
        slot = PendingRequestSlot()
        self.assertIsNone(slot.take_if_matches(None))
        self.assertIsNone(slot.take_if_matches(1001))

    def test_clear(self):
        slot = PendingRequestSlot()
        continuation = Future()
        token = slot.install(continuation)

        self.assertIsNone(slot.clear_on_timeout_or_cancel(token + 1))
        self.assertIs(slot.clear_on_timeout_or_cancel(token), continuation)
        self.assertIsNone(slot.take_if_matches(token))

    def test_clear_requires_token(self):
        slot = PendingRequestSlot()
        slot.install(Future())
        self.assertRaises(ValueError, slot.clear_on_timeout_or_cancel, None)
        self.assertTrue(slot.pending)

    def test_single_winner(self):
        slot = PendingRequestSlot()

        for i in range(50):
            token = slot.install(Future())

            barrier = Barrier(4)
            winners = []

            def claim(operation, token):
                barrier.wait()
                continuation = operation(token)
                if continuation is not None:
                    winners.append(continuation)

            threads = [
                Thread(target=claim, args=(slot.take_if_matches, token)),
                Thread(target=claim, args=(slot.take_if_matches, None)),
                Thread(target=claim, args=(
                    slot.clear_on_timeout_or_cancel, token,
                )),
                Thread(target=claim, args=(
                    slot.clear_on_timeout_or_cancel, token,
                )),
            ]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

            self.assertEqual(len(winners), 1)
            self.assertFalse(slot.pending)
