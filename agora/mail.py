#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Mail
====

Outgoing e-mail through `Flask-Mail`_. Configure it using the usual
``MAIL_SERVER``, ``MAIL_PORT``, ``MAIL_USERNAME`` and similar options.
Messages are not sent at all while testing.

.. _Flask-Mail: https://flask-mail.readthedocs.io/
"""


from flask import current_app
from flask_babel import gettext as _
from flask_mail import Mail, Message

from agora.exceptions import RemoteError
from agora.log import make_logger


__all__ = ['mail', 'setup_mail', 'send_mail']


log = make_logger(__name__)
mail = Mail()


def setup_mail(app):
    mail.init_app(app)
    return mail


def send_mail(recipients, subject, body, reply_to=None):
    """
    Send a plain text message, raising :class:`RemoteError` when the mail
    server refuses it.
    """

    subject = '[%s] %s' % (current_app.config['SITE_NAME'], subject)
    msg = Message(subject, recipients=list(recipients), body=body,
                  reply_to=reply_to)

    try:
        mail.send(msg)
    except OSError as exn:
        log.exception(exn)
        raise RemoteError(_('Failed to send the e-mail, please try again '
                            'later.'))

    log.info('Sent %r to %s', subject, ', '.join(recipients))


# vim:set sw=4 ts=4 et:
