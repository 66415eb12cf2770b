from urllib.parse import urlparse, parse_qs

from payment_bridge.exceptions import NotSupportedError
from payment_bridge.gateway import PaymentGateway
from payment_bridge.drivers import dummy, intent


_BUILTIN_DRIVERS = {
    'intent': intent.open_intent,
    'dummy': dummy.open_dummy,
}

_drivers = {}
_drivers.update(_BUILTIN_DRIVERS)


def register_driver(uri_scheme, factory):
    _drivers[uri_scheme] = factory


def _gateway_options(query):
    options = {}
    if 'timeout' in query:
        options['timeout'] = float(query['timeout'][-1])
    if 'application_name' in query:
        options['application_name'] = query['application_name'][-1]
    if 'declined_codes' in query:
        options['declined_codes'] = [
            code.strip()
            for value in query['declined_codes']
            for code in value.split(',')
            if code.strip()
        ]
    return options


def open_gateway(uri, *args, **kwargs):
    """ Open a ``PaymentGateway`` connected to the handler described by `uri`.

    Extra arguments are passed to the driver.  ``timeout``,
    ``application_name`` and ``declined_codes`` can be set in the query
    string and are used to configure the gateway.
    """
    uri_parts = urlparse(uri)
    scheme = uri_parts.scheme
    if not scheme or scheme == uri:
        raise ValueError("Malformed handler uri")
    try:
        driver = _drivers[scheme]
    except KeyError as e:
        raise NotSupportedError("Unrecognised handler uri") from e

    options = _gateway_options(parse_qs(uri_parts.query))
    handler = driver(uri, *args, **kwargs)
    return PaymentGateway(handler, **options)

__all__ = ['register_driver', 'open_gateway']
