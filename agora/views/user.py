#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Account Views
=============

Signing in and out, signing up, password resets and account management.
"""


from flask import abort, flash, jsonify, redirect, render_template, \
                  request, session, url_for
from flask_babel import gettext, lazy_gettext as _
from flask_login import current_user, login_user, logout_user

from agora.exceptions import InvalidUsage
from agora.forms import LoginForm, PasswordForm, ProfileForm, \
                        ResetPasswordForm, SignupForm
from agora.log import make_logger
from agora.mail import send_mail
from agora.models import Post, Site, User
from agora.models.site import PROVIDERS
from agora.site.base import wants_json


log = make_logger(__name__)


def redirect_back(default='/'):
    """
    Redirect to the remembered destination (if any) or to the `default`.
    """

    return redirect(session.pop('return_to', None) or default)


def get_login():
    if current_user.is_authenticated:
        return redirect('/')

    return render_template('account/login.html', form=LoginForm())


def post_login():
    form = LoginForm()

    if form.validate_on_submit():
        user = User.authenticate(form.email.value, form.password.value)

        if user is not None:
            login_user(user, remember=True)
            flash(_('Success! You are signed in.'), 'ok')
            return redirect_back()

        flash(_('Invalid e-mail address or password.'), 'error')

    return render_template('account/login.html', form=form)


def logout():
    logout_user()
    return redirect('/')


def get_signup():
    if current_user.is_authenticated:
        return redirect('/')

    return render_template('account/signup.html', form=SignupForm())


def post_signup():
    form = SignupForm()

    if form.validate_on_submit():
        try:
            user = User.create(form.email.value, form.password.value)
        except InvalidUsage as exn:
            flash(str(exn), 'error')
        else:
            login_user(user, remember=True)
            flash(_('Welcome! Your account has been created.'), 'ok')
            return redirect_back()

    return render_template('account/signup.html', form=form)


def render_account(profile_form=None, password_form=None):
    if profile_form is None:
        profile_form = ProfileForm()

        for name, field in profile_form.fields.items():
            if name == 'email':
                field.value = current_user.get('email', '')
            else:
                field.value = current_user.profile.get(name, '')

    linked = {p: current_user.linked(p) for p in PROVIDERS}

    return render_template('account/profile.html',
                           profile_form=profile_form,
                           password_form=password_form or PasswordForm(),
                           providers=Site.providers(),
                           linked=linked,
                           favorites=Post.favorites_of(current_user))


def get_account():
    return render_account()


def post_update_profile():
    form = ProfileForm()

    if not form.validate_on_submit():
        return render_account(profile_form=form)

    try:
        data = form.dump()
        current_user.update_profile(**data)
    except InvalidUsage as exn:
        flash(str(exn), 'error')
        return render_account(profile_form=form)

    flash(_('Profile information updated.'), 'ok')
    return redirect('/account')


def post_update_password():
    form = PasswordForm()

    if not form.validate_on_submit():
        return render_account(password_form=form)

    current_user.set_password(form.password.value)
    flash(_('Password has been changed.'), 'ok')
    return redirect('/account')


def post_delete_account():
    current_user.delete()
    logout_user()
    flash(_('Your account has been deleted.'), 'info')
    return redirect('/')


def post_api_key():
    key = current_user.generate_api_key()

    if wants_json():
        return jsonify(apikey=key)

    flash(_('New API key has been generated.'), 'ok')
    return redirect('/account')


def get_reset_password():
    if current_user.is_authenticated:
        return redirect('/')

    return render_template('account/reset-password.html',
                           form=ResetPasswordForm())


def post_reset_password():
    form = ResetPasswordForm()

    if not form.validate_on_submit():
        return render_template('account/reset-password.html', form=form)

    user, token = User.start_password_reset(form.email.value)

    if user is not None:
        link = Site.url(request) + url_for('change_password', token=token)
        send_mail([user['email']], gettext('Reset your password'),
                  gettext('Someone (hopefully you) asked to reset the '
                          'password of your account.\n\n'
                          'To choose a new password, open this link:\n\n'
                          '%(link)s\n\n'
                          'The link is valid for an hour. If you did not '
                          'ask for the reset, ignore this message.',
                          link=link))
    else:
        log.info('Password reset requested for unknown e-mail address')

    flash(_('If there is an account with that e-mail address, we have sent '
            'instructions to reset the password there.'), 'info')
    return redirect('/login')


def get_change_password(token):
    if User.by_reset_token(token) is None:
        flash(_('Password reset link is invalid or has expired.'), 'error')
        return redirect('/reset-password')

    return render_template('account/change-password.html',
                           form=PasswordForm(), token=token)


def post_change_password(token):
    user = User.by_reset_token(token)

    if user is None:
        flash(_('Password reset link is invalid or has expired.'), 'error')
        return redirect('/reset-password')

    form = PasswordForm()

    if not form.validate_on_submit():
        return render_template('account/change-password.html',
                               form=form, token=token)

    user.set_password(form.password.value)
    login_user(user, remember=True)

    flash(_('Success! Your password has been changed.'), 'ok')
    return redirect('/')


def get_account_verify():
    return render_template('account/verify.html')


def post_account_verify():
    if current_user.get('verified'):
        flash(_('Your e-mail address is already verified.'), 'info')
        return redirect('/account')

    if not current_user.get('email'):
        flash(_('Set your e-mail address first.'), 'error')
        return redirect('/account')

    token = current_user.start_verification()
    link = Site.url(request) + url_for('account_verify_token', token=token)

    send_mail([current_user['email']], gettext('Verify your e-mail address'),
              gettext('To verify your e-mail address, open this link:\n\n'
                      '%(link)s', link=link))

    flash(_('We have sent you a message with a verification link.'), 'info')
    return redirect('/account/verify')


def get_account_verify_token(token):
    if current_user.finish_verification(token):
        flash(_('Thank you! Your e-mail address has been verified.'), 'ok')
    else:
        flash(_('Verification link is invalid.'), 'error')

    return redirect('/account')


def get_oauth_unlink(provider):
    if provider not in PROVIDERS:
        abort(404)

    try:
        current_user.unlink(provider)
    except InvalidUsage as exn:
        flash(str(exn), 'error')
    else:
        flash(_('%(provider)s account has been unlinked.',
                provider=provider.title()), 'info')

    return redirect('/account')


# vim:set sw=4 ts=4 et:
