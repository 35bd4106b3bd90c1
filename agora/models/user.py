#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Users
=====

User accounts are documents in the ``users`` collection. The :class:`User`
class wraps them for `Flask-Login`_ while still behaving as a mapping, so
that templates can use ``user.profile.name`` and similar.

.. _Flask-Login: https://flask-login.readthedocs.io/
"""


import hashlib
import secrets

from datetime import timedelta

from bson import ObjectId
from bson.errors import InvalidId
from flask_babel import lazy_gettext as _
from flask_login import UserMixin
from pymongo.errors import DuplicateKeyError
from werkzeug.security import generate_password_hash, check_password_hash

from agora.exceptions import InvalidUsage
from agora.log import make_logger
from agora.models.common import utcnow
from agora.mongo import db


__all__ = ['User']


log = make_logger(__name__)

RESET_LIFETIME = timedelta(hours=1)

PROFILE_FIELDS = ('name', 'gender', 'location', 'website', 'picture')


class User(UserMixin, dict):
    """
    Single user account.
    """

    def get_id(self):
        return str(self['_id'])

    @property
    def id(self):
        return self['_id']

    @property
    def profile(self):
        return self.get('profile', {})

    @property
    def display_name(self):
        return self.profile.get('name') or self.get('email') or _('Anonymous')

    def gravatar(self, size=200):
        """
        Address of the profile picture, either configured or from Gravatar.
        """

        if self.profile.get('picture'):
            return self.profile['picture']

        email = (self.get('email') or '').strip().lower()
        digest = hashlib.md5(email.encode('utf-8')).hexdigest()
        return 'https://gravatar.com/avatar/%s?s=%i&d=retro' % (digest, size)

    @classmethod
    def _load(cls, query):
        doc = db.users.find_one(query)
        if doc is None:
            return None

        return cls(doc)

    @classmethod
    def find(cls, user_id):
        """
        Load user by identifier. Malformed identifiers raise
        :class:`~bson.errors.InvalidId`.
        """

        return cls._load({'_id': ObjectId(user_id)})

    @classmethod
    def load(cls, user_id):
        """
        Load user for the session. Returns ``None`` for stale sessions.
        """

        try:
            return cls.find(user_id)
        except InvalidId:
            return None

    @classmethod
    def by_email(cls, email):
        if not email:
            return None

        return cls._load({'email': email.strip().lower()})

    @classmethod
    def by_api_key(cls, key):
        if not key:
            return None

        return cls._load({'api_key': key})

    @classmethod
    def by_provider(cls, provider, provider_id):
        return cls._load({provider: str(provider_id)})

    @classmethod
    def create(cls, email=None, password=None, **fields):
        """
        Create new account. E-mail addresses are unique.
        """

        if email is not None:
            email = email.strip().lower()

            if cls.by_email(email) is not None:
                raise InvalidUsage(_('Account with that e-mail address '
                                     'already exists.'), status=409)

        doc = {
            'roles': [],
            'profile': {key: '' for key in PROFILE_FIELDS},
            'tokens': [],
            'verified': False,
            'created': utcnow(),
        }

        if email is not None:
            doc['email'] = email

        if password is not None:
            doc['password'] = generate_password_hash(password)

        doc.update(fields)

        try:
            doc['_id'] = db.users.insert_one(doc).inserted_id
        except DuplicateKeyError:
            raise InvalidUsage(_('Account with that e-mail address '
                                 'already exists.'), status=409)

        log.info('Created user %s', doc['_id'])
        return cls(doc)

    @classmethod
    def authenticate(cls, email, password):
        """
        Return the user if the credentials match, ``None`` otherwise.
        """

        user = cls.by_email(email)

        if user is None or not user.get('password'):
            return None

        if not check_password_hash(user['password'], password):
            return None

        return user

    def _update(self, changes, unset=None):
        update = {}

        if changes:
            update['$set'] = changes

        if unset:
            update['$unset'] = {key: '' for key in unset}

        db.users.update_one({'_id': self.id}, update)

        doc = db.users.find_one({'_id': self.id})
        self.clear()
        self.update(doc)

    def update_profile(self, email=None, **profile):
        changes = {}

        if email is not None:
            email = email.strip().lower()

            if email != self.get('email'):
                if User.by_email(email) is not None:
                    raise InvalidUsage(_('That e-mail address is already '
                                         'used by another account.'),
                                       status=409)

                changes['email'] = email
                changes['verified'] = False

        for key, value in profile.items():
            if key in PROFILE_FIELDS:
                changes['profile.' + key] = value or ''

        if changes:
            self._update(changes)

    def set_password(self, password):
        self._update({'password': generate_password_hash(password)},
                     unset=['reset_token', 'reset_expires'])

    def generate_api_key(self):
        """
        Replace the API key of the user with a new random one.
        """

        key = secrets.token_hex(20)
        self._update({'api_key': key})
        log.info('Generated new API key for user %s', self.id)
        return key

    @classmethod
    def start_password_reset(cls, email):
        """
        Issue a password reset token valid for an hour.
        Returns the ``(user, token)`` pair or ``(None, None)``.
        """

        user = cls.by_email(email)
        if user is None:
            return None, None

        token = secrets.token_hex(20)
        user._update({
            'reset_token': token,
            'reset_expires': utcnow() + RESET_LIFETIME,
        })

        return user, token

    @classmethod
    def by_reset_token(cls, token):
        if not token:
            return None

        return cls._load({
            'reset_token': token,
            'reset_expires': {'$gt': utcnow()},
        })

    def start_verification(self):
        token = secrets.token_hex(20)
        self._update({'verify_token': token})
        return token

    def finish_verification(self, token):
        if not token or token != self.get('verify_token'):
            return False

        self._update({'verified': True}, unset=['verify_token'])
        return True

    def link(self, provider, provider_id, access_token=None, profile=None,
             token_secret=None):
        """
        Link external account to this user, filling in missing profile
        information from the external one. OAuth 1.0a providers also hand
        out a `token_secret`.
        """

        other = User.by_provider(provider, provider_id)
        if other is not None and other.id != self.id:
            raise InvalidUsage(_('There is already another account linked '
                                 'with that %(provider)s account.',
                                 provider=provider.title()), status=409)

        tokens = [t for t in self.get('tokens', []) if t['kind'] != provider]
        if access_token:
            token = {'kind': provider, 'access_token': access_token}
            if token_secret:
                token['token_secret'] = token_secret
            tokens.append(token)

        changes = {provider: str(provider_id), 'tokens': tokens}

        for key, value in (profile or {}).items():
            if key in PROFILE_FIELDS and value and not self.profile.get(key):
                changes['profile.' + key] = value

        self._update(changes)

    def linked(self, provider):
        return bool(self.get(provider))

    def unlink(self, provider):
        """
        Forget the external account. Refuses to lock the user out.
        """

        others = [p for p in ('facebook', 'google', 'twitter', 'github')
                  if p != provider and self.linked(p)]

        if not self.get('password') and not others:
            raise InvalidUsage(_('Set a password before unlinking your only '
                                 'sign in method.'))

        tokens = [t for t in self.get('tokens', []) if t['kind'] != provider]
        self._update({'tokens': tokens}, unset=[provider])

    def delete(self):
        db.users.delete_one({'_id': self.id})
        log.info('Deleted user %s', self.id)


# vim:set sw=4 ts=4 et:
