import logging
log = logging.getLogger('payment_bridge')

from payment_bridge.exceptions import NotSupportedError


class PaymentChannel(object):
    """ Routes method calls from the UI shell to a ``PaymentGateway``.
    """
    def __init__(self, gateway):
        self._gateway = gateway
        self._methods = {
            'startPayment': self._start_payment,
        }

    def _start_payment(self, arguments):
        return self._gateway.start_payment(arguments.get('amount'))

    def handle(self, method, arguments=None):
        """
        :param method: name of the method being called
        :param arguments: mapping of keyword arguments for the method

        :returns: a ``PaymentSession``

        :raises NotSupportedError: if `method` is not recognised
        """
        try:
            handler = self._methods[method]
        except KeyError as e:
            raise NotSupportedError("Unrecognised method %r" % method) from e
        log.debug("handling method call %r", method)
        return handler(arguments or {})

__all__ = ['PaymentChannel']
