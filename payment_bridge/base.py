from collections import namedtuple


APPROVED = 'APPROVED'
DECLINED = 'DECLINED'
ERROR = 'ERROR'

CONSUME = 'Consume'
DEFAULT_APPLICATION_NAME = 'ArkeAcquiringProject'

# codes the codec substitutes when the handler gives us nothing usable
UNKNOWN_ERROR = 'UNKNOWN_ERROR'
NULL_INTENT = 'NULL_INTENT'


class PaymentRequest(object):
    def __init__(
            self, amount, request_code, *,
            application_name=DEFAULT_APPLICATION_NAME,
            transaction_name=CONSUME):
        self.amount = amount
        self.request_code = request_code
        self.application_name = application_name
        self.transaction_name = transaction_name

    def __repr__(self):
        return "<PaymentRequest amount=%s request_code=%r>" % (
            self.amount, self.request_code,
        )


class PaymentOutcome(namedtuple(
        'PaymentOutcome', ['status', 'code', 'message', 'raw_data'])):
    """The normalized reply of the external handler.

    Business level declines and handler errors are outcomes, not
    exceptions.  ``code`` and ``message`` are preserved exactly as the
    handler sent them.
    """
    __slots__ = ()

    @property
    def approved(self):
        return self.status == APPROVED

    @property
    def system_error(self):
        """`True` if the outcome was synthesized locally because the handler
        reply was missing or unusable.
        """
        return self.code in (NULL_INTENT, UNKNOWN_ERROR)


class PaymentSession(object):
    def result(self, timeout=None):
        """Returns the ``PaymentOutcome`` reported by the external handler.

        If no reply has arrived yet, waits up to `timeout` seconds before
        raising a `TimeoutError`.

        :raises InvalidArgumentError:
        :raises RequestInProgressError:
        :raises DispatchError:
        :raises PaymentTimeoutError:
            If the payment failed before the handler replied.

        :raises SessionCancelledError:
            If the session was cancelled.
        """
        raise NotImplementedError()

    def exception(self, timeout=None):
        """Return the exception raised by the payment.
        """
        try:
            self.result(timeout=timeout)
        except TimeoutError:
            raise
        except Exception as e:
            return e
        else:
            return None

    def add_done_callback(self, fn):
        """Register a function to be called when the payment has failed or
        completed.

        :param fn:
            A function taking the completed payment session as its only
            argument
        """
        raise NotImplementedError()

    def cancel(self):
        """Stops waiting for the reply to this payment.

        Does not roll back the payment if the external handler goes on to
        complete it.

        :raises SessionCompletedError:
            If the handler has already replied or the payment has already
            failed or been cancelled.
        """
        raise NotImplementedError()

    def cancelled(self):
        """Return `True` if the payment was successfully cancelled.
        """
        raise NotImplementedError()

    def done(self):
        raise NotImplementedError()


class PaymentHandler(object):
    """Adapter for an external, out of process payment handler.
    """
    def bind(self, callback):
        """
        :param callback:
            function to be called, possibly from another thread, whenever the
            external handler replies.  Takes the raw reply payload (a mapping
            or `None`) and the request code the reply was sent for.  Passing
            `None` unbinds the current callback.
        """
        raise NotImplementedError()

    def send(self, request):
        """Hand a ``PaymentRequest`` to the external handler.

        Must return as soon as the request has been dispatched, without
        waiting for the reply.  Raises if the request could not be
        dispatched.
        """
        raise NotImplementedError()

    def shutdown(self):
        pass
