#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Models
======

Thin layer over the document collections. Nothing here keeps any state
apart from the taxonomy loaded on startup.
"""


from agora.models.site import Site
from agora.models.taxonomy import Configure, Taxonomy, load_taxonomy
from agora.models.user import User
from agora.models.post import Post


__all__ = ['Site', 'Configure', 'Taxonomy', 'load_taxonomy', 'User', 'Post']


# vim:set sw=4 ts=4 et:
