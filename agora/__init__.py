#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Agora
=====

Community discussion site. Posts are grouped in topics and, optionally,
forums. Users sign in with an e-mail address or an external account and
scripts can use the JSON API with their API keys.

See :func:`agora.app.create_app`.
"""


# vim:set sw=4 ts=4 et:
