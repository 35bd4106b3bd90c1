#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Helpers shared by the models.
"""


import re
import unicodedata

from datetime import datetime, timezone


__all__ = ['slugify', 'utcnow']


def slugify(text):
    """
    Convert arbitrary text to a short, URL-friendly identifier.

    .. code-block:: python

        >>> slugify('Žluťoučký kůň: úpěl ódy!')
        'zlutoucky-kun-upel-ody'
    """

    text = unicodedata.normalize('NFKD', str(text))
    text = text.encode('ascii', 'ignore').decode('ascii')
    text = re.sub(r'[^\w\s-]', '', text).strip().lower()
    return re.sub(r'[-\s_]+', '-', text).strip('-')


def utcnow():
    """
    Current time in UTC, without the time zone. That is what the
    database hands back to us, so keep it comparable.
    """

    return datetime.now(timezone.utc).replace(tzinfo=None)


# vim:set sw=4 ts=4 et:
