import itertools
from threading import Lock

import logging
log = logging.getLogger('payment_bridge')

from payment_bridge.exceptions import AlreadyPendingError


# request codes handed to the platform must fit in the lower 16 bits
_TOKEN_BASE = 1001
_TOKEN_LIMIT = 0x10000


class PendingRequest(object):
    __slots__ = ('token', 'continuation')

    def __init__(self, token, continuation):
        self.token = token
        self.continuation = continuation

    def __repr__(self):
        return "<PendingRequest token=%r>" % self.token


class PendingRequestSlot(object):
    """ Holds the continuation of the one request that is waiting for a reply.

    Every occupancy is cleared exactly once: of all the calls to
    :py:meth:`take_if_matches` and :py:meth:`clear_on_timeout_or_cancel`
    made against it, only the first returns the continuation.  The rest get
    `None`.
    """
    def __init__(self):
        self._lock = Lock()
        self._pending = None
        self._counter = itertools.count()

    def _next_token(self):
        return _TOKEN_BASE + next(self._counter) % (_TOKEN_LIMIT - _TOKEN_BASE)

    def install(self, continuation):
        """
        :returns: a fresh correlation token for the new occupant

        :raises AlreadyPendingError:
            If another request is still waiting for a reply.
        """
        with self._lock:
            if self._pending is not None:
                raise AlreadyPendingError(
                    "request %r is still pending" % self._pending.token
                )
            self._pending = PendingRequest(self._next_token(), continuation)
            return self._pending.token

    def _take(self, token):
        with self._lock:
            pending = self._pending
            if pending is None:
                return None
            if token is not None and token != pending.token:
                return None
            self._pending = None
        return pending.continuation

    def take_if_matches(self, token):
        """ Clear the slot and return its continuation if `token` identifies
        the current occupant.

        If `token` is `None` any occupant matches.

        :returns: the continuation, or `None` if the slot is empty or is
            occupied by a different request
        """
        continuation = self._take(token)
        if continuation is None:
            log.debug("no pending request matches %r", token)
        return continuation

    def clear_on_timeout_or_cancel(self, token):
        """ Like :py:meth:`take_if_matches` but for use by timeout and
        cancellation paths.  `token` is required.
        """
        if token is None:
            raise ValueError("token is required")
        return self._take(token)

    @property
    def pending(self):
        with self._lock:
            return self._pending is not None

__all__ = ['PendingRequest', 'PendingRequestSlot']
