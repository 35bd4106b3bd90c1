#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Logging
=======

Every module creates its own logger with a dummy handler:

.. code-block:: python

    from agora.log import make_logger

    log = make_logger(__name__)
    log.debug('Loading taxonomy...')

The server entry point directs everything to the console. An environmental
variable ``LOGLEVEL`` can be used to adjust the level if you do not specify
it explicitly.

.. code-block:: python

    from agora.log import log_to_console, DEBUG

    log_to_console(level=DEBUG)

In development mode, :func:`log_requests` adds a short line per request,
similar to what other development servers print.
"""


import logging
import os

from logging import DEBUG, INFO, WARNING, ERROR, CRITICAL


__all__ = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL',
           'make_logger', 'handler', 'log_to_console', 'log_requests']


handler = None

LEVELS = ('debug', 'info', 'warning', 'error', 'critical')


def make_logger(name):
    """
    Create new logger with a null handler.
    """

    logger = logging.getLogger(name)
    logger.addHandler(logging.NullHandler())
    return logger


def log_to_console(level=None):
    """
    Install a root logging handler that will output to console.

    Log messages of given level or higher are printed along with their level
    and source name. Calling this function again replaces the handler.
    """

    global handler

    if handler is not None:
        logging.root.removeHandler(handler)
        handler = None

    if level is None:
        level = os.environ.get('LOGLEVEL', '').lower()
        if level in LEVELS:
            level = getattr(logging, level.upper())
        else:
            level = INFO

    fmt = logging.Formatter('%(levelname)s: [%(name)s] %(message)s')

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(fmt)
    logging.root.addHandler(handler)
    logging.root.setLevel(level)


def log_requests(app):
    """
    Log ``METHOD path status`` for every request handled by the `app`.
    """

    from flask import request

    log = make_logger('agora.requests')

    @app.after_request
    def log_request(response):
        log.debug('%s %s %s', request.method, request.full_path.rstrip('?'),
                  response.status_code)
        return response


# vim:set sw=4 ts=4 et:
