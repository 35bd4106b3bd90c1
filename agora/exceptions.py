#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Exceptions
==========
"""


class InvalidUsage(Exception):
    """
    User has requested that we perform an invalid or illegal operation.

    The operation was refused and this exception needs to be propagated
    back to the user to inform them about the situation. The exception
    should not get swallowed along the way.
    """

    data = {}
    """Mapping with additional data."""

    status = 400
    """HTTP-compatible error code."""

    def __init__(self, message, data=None, status=None):
        super().__init__(message)

        self.data = data or {}
        self.status = status or self.status

    def to_dict(self):
        """
        Convert the exception to a dictionary.

        This method is useful when the exception needs to be JSON-encoded.
        Make sure that the :attr:`data` can be serialized at least in this
        manner -- API clients depend on that.
        """

        return {
            'status': self.status,
            'error': str(self),
            'data': self.data,
        }


class DocumentNotFound(InvalidUsage):
    """
    Requested document does not exist (or is hidden from the user).
    Handled exactly like a request for an unknown address.
    """

    status = 404


class AccessDenied(InvalidUsage):
    """
    User is not allowed to touch the document.
    """

    status = 403


class RemoteError(InvalidUsage):
    """
    An operation that attempted to use a different service on behalf of
    the user has failed. User needs to be informed.
    """

    status = 502


# vim:set sw=4 ts=4 et:
