import concurrent.futures
import decimal
import math
from threading import Timer

import logging
log = logging.getLogger('payment_bridge')

from payment_bridge import codec
from payment_bridge.base import (
    PaymentSession, PaymentRequest, DEFAULT_APPLICATION_NAME,
)
from payment_bridge.exceptions import (
    InvalidArgumentError, RequestInProgressError, AlreadyPendingError,
    DispatchError, PaymentTimeoutError,
    SessionCompletedError, SessionCancelledError,
)
from payment_bridge.slot import PendingRequestSlot


def _validate_amount(amount):
    if amount is None:
        raise InvalidArgumentError("Amount is required")
    # bool is an int subclass but True is not an amount of money
    if isinstance(amount, bool):
        raise InvalidArgumentError("Amount must be a number")
    if isinstance(amount, float):
        # go through repr so that 10.5 becomes Decimal('10.5') rather than
        # the exact binary expansion
        amount = repr(amount)
    try:
        amount = decimal.Decimal(amount)
    except (decimal.InvalidOperation, TypeError, ValueError) as e:
        raise InvalidArgumentError("Amount must be a number") from e
    if not amount.is_finite() or amount <= 0:
        raise InvalidArgumentError("Amount must be a positive number")
    # handlers receive the amount as a float
    as_float = float(amount)
    if not math.isfinite(as_float) or as_float <= 0:
        raise InvalidArgumentError("Amount is out of range")
    return amount


def _validate_timeout(timeout):
    if timeout is None:
        return None
    try:
        timeout = float(timeout)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError("Timeout must be a number") from e
    if not math.isfinite(timeout) or timeout < 0:
        raise InvalidArgumentError(
            "Timeout must be a finite, non-negative number of seconds"
        )
    return timeout


class CallbackDispatcher(object):
    """ Entry point for replies from the external handler.

    Replies are matched to the pending request using the request code they
    were sent with.  Replies that don't match anything are logged and
    dropped.
    """
    def __init__(self, slot, *, declined_codes=()):
        self._slot = slot
        self._declined_codes = frozenset(declined_codes)

    def on_callback(self, payload, request_code=None):
        """
        .. note:: Called by handler drivers, possibly from another thread.
        """
        log.debug(
            "callback received for request code %r: %r",
            request_code, payload,
        )
        continuation = self._slot.take_if_matches(request_code)
        if continuation is None:
            log.warning(
                "ignoring callback with no pending request (request code %r)",
                request_code,
            )
            return

        try:
            outcome = codec.decode_payload(
                payload, declined_codes=self._declined_codes,
            )
        except Exception:
            # the continuation has already been claimed and must be resolved
            log.exception("could not decode callback payload %r", payload)
            outcome = codec.null_outcome()

        log.info(
            "payment %r finished: %s %s",
            request_code, outcome.status, outcome.code,
        )
        continuation.set_result(outcome)


class _GatewayPaymentSession(PaymentSession):
    def __init__(self, gateway, future, request=None):
        self._gateway = gateway
        self._future = future
        self.request = request

    def result(self, timeout=None):
        try:
            return self._future.result(timeout=timeout)
        except concurrent.futures.CancelledError as e:
            raise SessionCancelledError() from e

    def add_done_callback(self, fn):
        self._future.add_done_callback(lambda future: fn(self))

    def cancel(self):
        """
        :raises SessionCompletedError:
            If session has already finished
        """
        if self.request is None or not self._gateway._cancel(
                self.request.request_code):
            if self._future.cancelled():
                raise SessionCancelledError()
            raise SessionCompletedError()

    def cancelled(self):
        return self._future.cancelled()

    def done(self):
        return self._future.done()


class PaymentGateway(object):
    def __init__(
            self, handler, *, application_name=DEFAULT_APPLICATION_NAME,
            timeout=None, declined_codes=()):
        """
        :param handler:
            ``PaymentHandler`` used to reach the external payment handler.

        :param timeout:
            default number of seconds to wait for the handler to reply before
            failing a payment with ``PaymentTimeoutError``.  `None` waits
            forever.

        :param declined_codes:
            response codes that should be reported as declines rather than
            errors.
        """
        self._handler = handler
        self._slot = PendingRequestSlot()
        self.dispatcher = CallbackDispatcher(
            self._slot, declined_codes=declined_codes,
        )

        self.application_name = application_name
        self.timeout = _validate_timeout(timeout)

        self._handler.bind(self.dispatcher.on_callback)

    @property
    def pending(self):
        return self._slot.pending

    def _failed(self, exception):
        future = concurrent.futures.Future()
        future.set_exception(exception)
        return _GatewayPaymentSession(self, future)

    def start_payment(self, amount, *, timeout=None):
        """
        :param amount:
            The amount of money to request.  Anything ``decimal.Decimal``
            accepts, or a float.

        :param timeout:
            seconds to wait for a reply, overriding the gateway default.

        :returns:
            a new ``PaymentSession``.  Payments that can't be started are
            returned as sessions that have already failed.
        """
        try:
            timeout = _validate_timeout(timeout)
            amount = _validate_amount(amount)
        except InvalidArgumentError as e:
            log.warning("rejecting payment: %s", e)
            return self._failed(e)

        future = concurrent.futures.Future()
        try:
            token = self._slot.install(future)
        except AlreadyPendingError as e:
            log.warning("rejecting payment: %s", e)
            error = RequestInProgressError()
            error.__cause__ = e
            return self._failed(error)

        request = PaymentRequest(
            amount, token, application_name=self.application_name,
        )
        session = _GatewayPaymentSession(self, future, request)

        log.debug("dispatching %r", request)
        try:
            self._handler.send(request)
        except Exception as e:
            log.exception("failed to dispatch %r", request)
            continuation = self._slot.take_if_matches(token)
            if continuation is not None:
                error = DispatchError(
                    "Failed to start payment intent: %s" % e, cause=e,
                )
                error.__cause__ = e
                continuation.set_exception(error)
            return session

        if timeout is None:
            timeout = self.timeout
        if timeout is not None:
            timer = Timer(timeout, self._expire, args=(token, timeout))
            timer.daemon = True
            # cancelling a timer before it starts stops it from ever firing
            future.add_done_callback(lambda future: timer.cancel())
            timer.start()

        return session

    def _expire(self, token, timeout):
        continuation = self._slot.clear_on_timeout_or_cancel(token)
        if continuation is None:
            return
        log.warning("payment %r timed out after %ss", token, timeout)
        continuation.set_exception(PaymentTimeoutError(
            "No reply from payment handler after %ss" % timeout
        ))

    def _cancel(self, token):
        continuation = self._slot.clear_on_timeout_or_cancel(token)
        if continuation is None:
            return False
        log.warning("payment %r cancelled", token)
        continuation.cancel()
        return True

    def shutdown(self):
        """ Unbinds from the handler and cancels any outstanding payment.
        """
        self._handler.bind(None)
        continuation = self._slot.take_if_matches(None)
        if continuation is not None:
            log.warning("cancelling outstanding payment on shutdown")
            continuation.cancel()
        self._handler.shutdown()

__all__ = ['CallbackDispatcher', 'PaymentGateway']
