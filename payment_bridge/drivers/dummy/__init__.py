import json
from threading import Thread, Lock, Event
from urllib.parse import urlparse, parse_qs

import logging
log = logging.getLogger('payment_bridge')

from payment_bridge.base import PaymentHandler
from payment_bridge.codec import (
    RESPONSE_CODE, RESPONSE_MESSAGE, TRANSACTION_DATA,
)


class DummyHandler(PaymentHandler):
    """ Pretends to be an external payment handler.

    Every request is answered from a background thread after `delay`
    seconds, unless `silent` is set in which case requests are never
    answered.
    """
    def __init__(
            self, *, delay=1, response_code='00',
            response_message='Approved', silent=False):
        self._lock = Lock()
        self._shutdown = Event()
        self._callback = None

        self.delay = delay
        self.response_code = response_code
        self.response_message = response_message
        self.silent = silent

        self.requests = []

    def bind(self, callback):
        with self._lock:
            self._callback = callback

    def send(self, request):
        if self._shutdown.is_set():
            raise RuntimeError("dummy handler has been shut down")
        self.requests.append(request)
        if self.silent:
            return
        Thread(target=self._reply, args=(request,), daemon=True).start()

    def _reply(self, request):
        if self._shutdown.wait(self.delay):
            return

        payload = {
            RESPONSE_CODE: self.response_code,
            RESPONSE_MESSAGE: self.response_message,
            TRANSACTION_DATA: json.dumps({
                'amount': str(request.amount),
                'transactionName': request.transaction_name,
            }),
        }

        with self._lock:
            callback = self._callback
        if callback is None:
            log.warning("dummy handler has nothing to reply to")
            return
        try:
            callback(payload, request.request_code)
        except Exception:
            log.exception("error in dummy handler callback")

    def shutdown(self):
        self._shutdown.set()


def open_dummy(uri, *args, **kwargs):
    query = parse_qs(urlparse(uri).query)
    if 'delay' in query:
        kwargs.setdefault('delay', float(query['delay'][-1]))
    if 'response_code' in query:
        kwargs.setdefault('response_code', query['response_code'][-1])
    if 'response_message' in query:
        kwargs.setdefault('response_message', query['response_message'][-1])
    if 'silent' in query:
        kwargs.setdefault('silent', query['silent'][-1] in ('1', 'true'))
    return DummyHandler(*args, **kwargs)

__all__ = ['DummyHandler', 'open_dummy']
