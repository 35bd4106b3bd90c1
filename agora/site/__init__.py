#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Common Site Setup
=================

Site components that do not know about posts or users.

Example:

.. code-block:: python

    from flask import Flask, render_template

    from agora.site.base import setup_base, wants_json
    from agora.site.pagination import Page
    from agora.mongo import setup_mongo, db

    app = Flask(__name__)
    app.config.from_mapping({
        'BABEL_DEFAULT_LOCALE': 'en',
        'MONGO_URI': 'mongodb://localhost/demo',
    })

    setup_base(app)
    setup_mongo(app)

    @app.route('/')
    def home():
        page = Page(db.foo, sort=[('_id', 1)])
        return render_template('home.html', page=page)
"""


# vim:set sw=4 ts=4 et:
