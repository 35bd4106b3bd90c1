#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Forms
=====

Forms used by the views and the API.
"""


from collections import OrderedDict

from flask import current_app
from flask_babel import lazy_gettext as _

from agora.site.forms import *


class LoginForm(Form):
    class email(EmailField):
        label = _('E-mail')

    class password(PasswordField):
        label = _('Password')
        min_length = 0

    class ok(SubmitButton):
        label = _('Sign In')


class SignupForm(Form):
    class email(EmailField):
        label = _('E-mail')

    class password(PasswordField):
        label = _('Password')

    class confirm(PasswordField):
        label = _('Confirm Password')
        min_length = 0

        def validate(self):
            super().validate()

            if self.value != self.form.password.value:
                raise ValidationError(_('Passwords do not match.'))

    class ok(SubmitButton):
        label = _('Sign Up')


class ProfileForm(Form):
    class email(EmailField):
        label = _('E-mail')

    class name(StringField):
        label = _('Name')
        required = False
        max_length = 100

    class gender(SelectField):
        label = _('Gender')
        required = False
        choices = OrderedDict([
            ('', _('Not specified')),
            ('female', _('Female')),
            ('male', _('Male')),
            ('other', _('Other')),
        ])

    class location(StringField):
        label = _('Location')
        required = False
        max_length = 100

    class website(StringField):
        label = _('Website')
        required = False
        pattern = r'^https?://\S+$'
        max_length = 200

    class ok(SubmitButton):
        label = _('Update Profile')


class PasswordForm(Form):
    class password(PasswordField):
        label = _('New Password')

    class confirm(PasswordField):
        label = _('Confirm Password')
        min_length = 0

        def validate(self):
            super().validate()

            if self.value != self.form.password.value:
                raise ValidationError(_('Passwords do not match.'))

    class ok(SubmitButton):
        label = _('Change Password')


class ResetPasswordForm(Form):
    class email(EmailField):
        label = _('E-mail')

    class ok(SubmitButton):
        label = _('Reset Password')


class ContactForm(Form):
    class name(StringField):
        label = _('Name')
        max_length = 100

    class email(EmailField):
        label = _('E-mail')

    class message(TextField):
        label = _('Message')
        max_length = 10000

    class ok(SubmitButton):
        label = _('Send')


class PostForm(Form):
    """
    Post editor. Choices come from the taxonomy, topics and forums are only
    offered when the address does not determine them already.
    """

    class title(StringField):
        label = _('Title')
        max_length = 200

    class description(TextField):
        label = _('Description')
        required = False
        max_length = 50000

    class topic(SelectField):
        label = _('Topic')

    class forum(SelectField):
        label = _('Forum')

    class state(SelectField):
        label = _('State')
        required = False

    class priority(SelectField):
        label = _('Priority')
        required = False

    class ok(SubmitButton):
        label = _('Save')

    def __init__(self, **options):
        super().__init__(**options)

        taxonomy = current_app.taxonomy

        for name, kind in (('topic', 'topics'), ('forum', 'forums'),
                           ('state', 'states'), ('priority', 'priorities')):
            field = self.fields[name]
            field.choices = OrderedDict(taxonomy.choices(kind))

            if not field.choices:
                field.required = False
                field.options['hidden'] = True


class CommentForm(Form):
    class comment(TextField):
        label = _('Comment')
        max_length = 10000

    class ok(SubmitButton):
        label = _('Add Comment')


class SearchForm(Form):
    method = 'GET'
    action = '/search'
    ignore = Form.ignore + ('page', 'sort')

    class q(StringField):
        label = _('Search')
        required = False
        max_length = 200


# vim:set sw=4 ts=4 et:
