#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Pagination
==========

Mostly automatic pagination over collections of documents that is good
enough for discussions entered manually by users.

.. admonition:: NOTE

    Do not use for large collections of automatically acquired entries.
    Skipping over documents gets slower the further the page is.

Example:

.. code-block:: python

    from agora.mongo import db
    from agora.site.pagination import Page

    page = Page(db.posts, {'topic': 'ideas'}, sort=[('score', -1)])
    return render_template('posts.html', page=page)

You can use the ``pagination.html`` template to render the navigation.
"""

from math import ceil

from flask import request
from flask_babel import lazy_gettext as _

from agora.exceptions import InvalidUsage


__all__ = ['Page']


class Page:
    """
    Page is automatically initialized using :attr:`flask.request.args` and
    the supplied collection and filter that is counted and sliced.

    You need to make sure that the ordering of the results stays stable.
    Ideally include a unique key such as ``_id`` as the last sort key.

    All page and item offsets are base 1 for user convenience.
    """

    size = 20
    """Current page size."""

    items = []
    """Documents on the current page."""

    items_total = 0
    """Total count of the documents matching the filter."""

    items_first = 1
    """Offset of the first item on the current page."""

    items_last = 0
    """Offset of the last item on the current page."""

    number = 1
    """Current page number."""

    first = 1
    """First page number."""

    last = 1
    """Last page number."""

    next = 1
    """Following page number (or current if on the last page)."""

    prev = 1
    """Previous page number (or current if on the first page)."""

    def __init__(self, collection, filter=None, sort=None, size=20):
        assert size > 0, 'Page size must be positive'

        self.size = size

        try:
            self.number = int(request.args.get('page', '1'))
        except ValueError:
            raise InvalidUsage(_('Invalid page argument (wrong type)'))

        if self.number < 1:
            raise InvalidUsage(_('Invalid page argument (< 1)'))

        filter = filter or {}
        offset = (self.number - 1) * size

        self.items_total = collection.count_documents(filter)
        self.items_first = offset + 1

        cursor = collection.find(filter)
        if sort:
            cursor = cursor.sort(sort)

        self.items = list(cursor.skip(offset).limit(size))
        self.items_last = offset + len(self.items)

        self.first = 1
        self.last = max(1, ceil(self.items_total / size))

        self.next = min(self.number + 1, self.last)
        self.prev = max(self.number - 1, self.first)

    def is_first(self):
        return self.number == self.first

    def is_last(self):
        return self.number == self.last

    def to_dict(self):
        return {
            'page': self.number,
            'pages': self.last,
            'total': self.items_total,
        }


# vim:set sw=4 ts=4 et:
