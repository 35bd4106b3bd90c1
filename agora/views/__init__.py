#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Views
=====

Plain functions without any routing. See :mod:`agora.routes` for
the addresses they are available at and the guards in front of them.
"""


# vim:set sw=4 ts=4 et:
