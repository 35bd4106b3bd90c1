#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Access Model
============

Users carry a list of roles. Roles are resolved to privileges using the
``ACCESS_RULES`` configuration option:

.. code-block:: python

    ACCESS_RULES = [
        ('moderate', ['+admin', '+moderator']),
    ]

Use :func:`have_privilege` to check the current user:

.. code-block:: python

    if not have_privilege('moderate'):
        raise AccessDenied(_('Only moderators can do that.'))
"""


from fnmatch import fnmatch

from flask import current_app
from flask_login import current_user


__all__ = ['AccessModel', 'DEFAULT_RULES', 'setup_access', 'have_privilege']


DEFAULT_RULES = [
    ('moderate', ['+admin', '+moderator']),
]


class AccessModel:
    """
    Access model with privilege rules.

    The rules specify what roles must an user have in order to obtain
    certain privileges. The privileges are not hierarchical. If some privileges need to overlap,
    repeat the patterns in both rules.

    Patterns starting with ``+`` grant the privilege to matching roles,
    patterns starting with ``-`` revoke it again. They are evaluated in
    order, so ``['+*', '-banned']`` means everyone except banned users.

    If a single privilege gets mentioned several times, it is equivalent
    to it being specified just once with all the patterns concatenated.
    """

    def __init__(self, items):
        self.patterns = []

        for priv, pats in items:
            for pat in pats:
                pat = pat.strip()

                if not fnmatch(pat, '[+-]?*'):
                    raise ValueError('invalid pattern: %r' % (pat,))

                self.patterns.append((pat, priv))

    def privileges(self, role):
        """
        Resolve a role to a set of application specific privileges.
        """

        privs = set()

        for pat, priv in self.patterns:
            if pat[0] == '+' and fnmatch(role, pat[1:]):
                privs.add(priv)
            elif pat[0] == '-' and fnmatch(role, pat[1:]):
                privs.discard(priv)

        return privs

    def have_privilege(self, priv, roles):
        """
        Determine whether specified roles have given privilege.
        """

        for role in roles or ['user']:
            if priv in self.privileges(role):
                return True

        return False


def setup_access(app):
    app.config.setdefault('ACCESS_RULES', DEFAULT_RULES)
    app.access = AccessModel(app.config['ACCESS_RULES'])
    return app.access


def have_privilege(priv, user=None):
    """
    Check whether the `user` (defaults to the current one) has privilege.
    Anonymous users have no privileges at all.
    """

    if user is None:
        user = current_user

    if not user or not user.is_authenticated:
        return False

    return current_app.access.have_privilege(priv, user.get('roles'))


# vim:set sw=4 ts=4 et:
