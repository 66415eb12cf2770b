""" Driver for payment handlers that are started as a separate activity.

Requests are packed into an :py:class:`Intent` envelope and handed to a
platform supplied ``launcher``.  The platform is expected to report the
handler's reply by calling :py:meth:`IntentHandler.on_result` with the same
request code.
"""
import json
from collections import namedtuple
from threading import Lock
from urllib.parse import urlparse

import logging
log = logging.getLogger('payment_bridge')

from payment_bridge.base import PaymentHandler


DEFAULT_PACKAGE = 'com.arke2'
DEFAULT_ACTIVITY = 'com.arke.thirdcalling.ThirdPartyCallActivity'


Intent = namedtuple('Intent', ['package', 'activity', 'extras'])


def pack_request(request, *, package=DEFAULT_PACKAGE,
                 activity=DEFAULT_ACTIVITY):
    """ Build the envelope the external handler expects for `request`.
    """
    # handler reads the amount as a JSON number
    transaction_data = json.dumps({'amount': float(request.amount)})
    return Intent(package, activity, {
        'applicationName': request.application_name,
        'transactionName': request.transaction_name,
        'transactionData': transaction_data,
    })


class IntentHandler(PaymentHandler):
    def __init__(
            self, launcher, *, package=DEFAULT_PACKAGE,
            activity=DEFAULT_ACTIVITY):
        """
        :param launcher:
            function taking an ``Intent`` and an integer request code that
            starts the external handler and returns without waiting for it.
            Should raise if the handler could not be started.
        """
        self._launcher = launcher
        self._lock = Lock()
        self._callback = None

        self.package = package
        self.activity = activity

    def bind(self, callback):
        with self._lock:
            self._callback = callback

    def send(self, request):
        intent = pack_request(
            request, package=self.package, activity=self.activity,
        )
        log.debug("launching %r with request code %r", intent,
                  request.request_code)
        self._launcher(intent, request.request_code)

    def on_result(self, request_code, data):
        """ Deliver a reply from the external handler.

        :param data:
            mapping of result extras, or `None` if the handler returned
            without any.

        .. note:: Called by the platform
        """
        with self._lock:
            callback = self._callback
        if callback is None:
            log.warning(
                "dropping result for request code %r, no gateway bound",
                request_code,
            )
            return
        callback(data, request_code)


def open_intent(uri, *args, launcher=None, **kwargs):
    uri_parts = urlparse(uri)
    if launcher is None:
        raise ValueError("intent driver requires a launcher")
    if uri_parts.hostname:
        kwargs.setdefault('package', uri_parts.hostname)
    activity = uri_parts.path.lstrip('/')
    if activity:
        kwargs.setdefault('activity', activity)
    return IntentHandler(launcher, *args, **kwargs)

__all__ = ['Intent', 'IntentHandler', 'pack_request', 'open_intent']
