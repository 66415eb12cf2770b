class NotSupportedError(Exception):
    """ Raised if a driver does not exist for a uri scheme, or a channel
    method is not recognised
    """
    pass


class PaymentBridgeError(Exception):
    """ Base class for errors delivered to the caller of a payment.

    Carries a stable ``code`` alongside the human readable ``message``.
    """
    code = 'PAYMENT_ERROR'

    def __init__(self, message=None):
        if message is None:
            message = self.__doc__.strip()
        super(PaymentBridgeError, self).__init__(message)
        self.message = message


class InvalidArgumentError(PaymentBridgeError, ValueError):
    """ Amount is missing or is not a positive number
    """
    code = 'INVALID_ARGUMENT'


class RequestInProgressError(PaymentBridgeError):
    """ Another payment is still waiting for a reply from the handler
    """
    code = 'REQUEST_IN_PROGRESS'


class AlreadyPendingError(PaymentBridgeError):
    """ Pending request slot is already occupied
    """
    code = 'ALREADY_PENDING'


class DispatchError(PaymentBridgeError):
    """ Request could not be handed to the external handler
    """
    code = 'INTENT_ERROR'

    def __init__(self, message=None, *, cause=None):
        super(DispatchError, self).__init__(message)
        self.cause = cause


class PaymentTimeoutError(PaymentBridgeError):
    """ External handler did not reply before the timeout expired
    """
    code = 'TIMEOUT'


class SessionCompletedError(Exception):
    """ Could not perform operation on session as session is finished
    """
    pass


class SessionCancelledError(SessionCompletedError):
    """ Could not perform operation on session as session has been cancelled
    """
    pass
