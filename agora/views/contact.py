#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

from flask import current_app, flash, redirect, render_template
from flask_babel import gettext, lazy_gettext as _
from flask_login import current_user

from agora.exceptions import RemoteError
from agora.forms import ContactForm
from agora.mail import send_mail


def get_contact():
    form = ContactForm()

    if current_user.is_authenticated:
        form.name.value = current_user.profile.get('name', '')
        form.email.value = current_user.get('email', '')

    return render_template('contact.html', form=form)


def post_contact():
    form = ContactForm()

    if not form.validate_on_submit():
        return render_template('contact.html', form=form)

    try:
        send_mail([current_app.config['CONTACT_EMAIL']],
                  gettext('Message from %(name)s', name=form.name.value),
                  form.message.value,
                  reply_to=form.email.value)
    except RemoteError as exn:
        flash(str(exn), 'error')
        return render_template('contact.html', form=form)

    flash(_('Thank you! Your message has been sent.'), 'ok')
    return redirect('/contact')


# vim:set sw=4 ts=4 et:
