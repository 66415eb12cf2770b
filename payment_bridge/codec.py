""" Normalizes replies from the external handler into ``PaymentOutcome``
values.

Raw response codes should never be interpreted outside of this module.
"""
from collections.abc import Mapping

from payment_bridge.base import (
    PaymentOutcome, APPROVED, DECLINED, ERROR, UNKNOWN_ERROR, NULL_INTENT,
)


APPROVED_CODES = frozenset(['00', '01'])

RESPONSE_CODE = 'responseCode'
RESPONSE_MESSAGE = 'responseMessage'
TRANSACTION_DATA = 'transactionData'


def decode(response_code, response_message, raw_data, *, declined_codes=()):
    """
    :param declined_codes:
        response codes that should be reported as ``DECLINED`` rather than
        ``ERROR``.  By default every code that isn't an approval is an error.
    """
    if response_code is None:
        return PaymentOutcome(
            ERROR, UNKNOWN_ERROR, response_message, raw_data,
        )

    if not isinstance(response_code, str):
        response_code = str(response_code)

    if response_code in APPROVED_CODES:
        status = APPROVED
    elif response_code in declined_codes:
        status = DECLINED
    else:
        status = ERROR
    return PaymentOutcome(status, response_code, response_message, raw_data)


def decode_payload(payload, *, declined_codes=()):
    if not isinstance(payload, Mapping):
        return null_outcome()
    return decode(
        payload.get(RESPONSE_CODE),
        payload.get(RESPONSE_MESSAGE),
        payload.get(TRANSACTION_DATA),
        declined_codes=declined_codes,
    )


def null_outcome():
    return PaymentOutcome(ERROR, NULL_INTENT, "Intent data is null", None)

__all__ = ['decode', 'decode_payload', 'null_outcome']
