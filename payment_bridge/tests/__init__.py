import unittest

from payment_bridge.tests.test_codec import TestCodec
from payment_bridge.tests.test_slot import TestPendingRequestSlot
from payment_bridge.tests.test_gateway import TestPaymentGateway
from payment_bridge.tests.test_channel import TestPaymentChannel
from payment_bridge.tests.test_loader import TestLoader
from payment_bridge.drivers.dummy.tests.test_dummy import TestDummyHandler
from payment_bridge.drivers.intent.tests.test_intent import (
    TestIntentHandler,
)


def suite():
    loader = unittest.TestLoader()
    suite = unittest.TestSuite((
        loader.loadTestsFromTestCase(TestCodec),
        loader.loadTestsFromTestCase(TestPendingRequestSlot),
        loader.loadTestsFromTestCase(TestPaymentGateway),
        loader.loadTestsFromTestCase(TestPaymentChannel),
        loader.loadTestsFromTestCase(TestLoader),
        loader.loadTestsFromTestCase(TestDummyHandler),
        loader.loadTestsFromTestCase(TestIntentHandler),
    ))
    return suite
