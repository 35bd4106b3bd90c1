#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
HTML Forms
==========

Module provides classes that can be used to model HTML forms along with
server-side input validations. They are then rendered using macros from
the ``forms.html`` template.

The same forms validate JSON documents sent to the API, so that both
entry points share the exact same rules.

Example:

.. code-block:: python

    from flask import request, flash, redirect
    from flask_babel import lazy_gettext as _
    from agora.site.forms import *

    class CommentForm(Form):
        class comment(TextField):
            label = _('Comment')
            max_length = 10000

        class ok(SubmitButton):
            label = _('Add Comment')

    @app.route('/comments/add/<int:id>', methods=['POST'])
    def add_comment(id):
        form = CommentForm()

        if form.validate_on_submit():
            add_comment_to_post(id, form.comment.value)
            flash(_('Comment added.'), 'ok')

        return redirect(post_url(id))
"""

import re

from collections import OrderedDict
from collections.abc import Mapping

from werkzeug.datastructures import MultiDict

from flask import get_template_attribute, request
from flask_babel import lazy_gettext as _


__all__ = [
    'Form',
    'Field',
    'StringField',
    'EmailField',
    'PasswordField',
    'TextField',
    'SelectField',
    'Button',
    'SubmitButton',
    'ValidationError',
]


class FormMeta(type):
    @classmethod
    def __prepare__(metacls, name, bases, **kwds):
        return OrderedDict()

    def __new__(cls, name, bases, namespace, **kwds):
        result = type.__new__(cls, name, bases, namespace, **kwds)
        result.field_types = OrderedDict()
        result.button_types = OrderedDict()

        for base in bases:
            if hasattr(base, 'field_types'):
                result.field_types.update(base.field_types)

            if hasattr(base, 'button_types'):
                result.button_types.update(base.button_types)

        for name, Elem in list(namespace.items()):
            if isinstance(Elem, type) and issubclass(Elem, Field):
                result.field_types[name] = Elem

            elif isinstance(Elem, type) and issubclass(Elem, Button):
                result.button_types[name] = Elem

        return result


class Form(metaclass=FormMeta):
    """
    Form for user input

    Makes use of a metaclass that helps to preserve class member ordering.
    You are expected to supply static members of type :class:`type` that
    subclass :class:`Field`, possibly overriding some static members.

    When the :class:`Form` is instantiated, all member field classes are
    instantiated as well and take their respective place among the instance
    attributes.

    .. code-block:: python

        class SearchForm(Form):
            method = 'GET'
            action = '/search'

            class q(StringField):
                label = _('Search')
                max_length = 100

        search = SearchForm()
        search.load({'q': 'Python'})
        assert search.q.value == 'Python'
    """

    template = 'forms.html'
    """
    Template from which the macro used to render the form should be sourced.
    """

    macro = 'render_form'
    """
    Name of the ``jinja2`` macro used to render the form and it's contents.
    """

    method = 'POST'
    """
    Form submission method. Best keep it set to ``POST``.
    """

    action = ''
    """
    Address of the input-processing endpoint. Keep empty to send the form to
    the same address it was loaded from.
    """

    label = ''
    """
    Label to render as a form heading.
    """

    ignore = ('csrf_token', 'apikey', 'lang')
    """
    Submitted names that are not fields, but are consumed elsewhere.
    """

    def __init__(self, field_options={}, button_options={}, **options):
        self.options = options
        self.errors = []

        self.fields = OrderedDict()
        self.buttons = OrderedDict()

        for orig_name, FieldType in self.field_types.items():
            name = orig_name
            if orig_name.endswith('_'):
                name = orig_name[:-1]

            self.fields[name] = FieldType(name, self, **field_options)
            setattr(self, orig_name, self.fields[name])

        for orig_name, ButtonType in self.button_types.items():
            name = orig_name
            if orig_name.endswith('_'):
                name = orig_name[:-1]

            self.buttons[name] = ButtonType(name, self, **button_options)
            setattr(self, orig_name, self.buttons[name])

    def dump(self):
        """
        Dump contents of the form.

        Returns a :class:`~collections.OrderedDict` with form fields and
        their current values.
        """

        result = OrderedDict()

        for name, field in self.fields.items():
            value = field.dump()
            if value is not None:
                result[name] = value

        return result

    def _load_field(self, name, values):
        if not isinstance(values, list):
            values = [values]

        try:
            if name in self.buttons:
                elem = self.buttons[name]
            else:
                elem = self.fields[name]

        except KeyError:
            msg = _('There is no field called %(name)r.', name=name)
            self.errors.append(msg)
            return

        if len(values) > 0:
            return elem.load(values[0])

        return elem.load(None)

    def load(self, mapping):
        """
        Populate form fields from a :class:`~collections.abc.Mapping`
        or from attributes of an arbitrary object.

        There is a special provision for
        :class:`~werkzeug.datastructures.MultiDict` used by Flask to provide
        request parameters.
        """

        self.errors.clear()

        missing = set(self.fields).union(self.buttons)

        if isinstance(mapping, MultiDict):
            mapping = mapping.to_dict(flat=False)

        if isinstance(mapping, Mapping):
            for name, values in mapping.items():
                if name in self.ignore:
                    continue

                self._load_field(name, values)
                missing.discard(name)

        else:
            for name in self.fields:
                if hasattr(mapping, name):
                    self._load_field(name, getattr(mapping, name))
                    missing.discard(name)

        for name in missing:
            if name in self.fields:
                self.fields[name].load(None)

            if name in self.buttons:
                self.buttons[name].load(None)

    def is_valid(self):
        """
        Test whether is the form completely error-free.
        """

        if self.errors:
            return False

        for field in self.fields.values():
            if not field.is_valid():
                return False

        return True

    def all_errors(self):
        """
        List errors of the form and all of it's fields, in the form
        expected by API clients.
        """

        result = [{'param': None, 'msg': str(msg)} for msg in self.errors]

        for name, field in self.fields.items():
            for msg in field.errors:
                result.append({'param': name, 'msg': str(msg)})

        return result

    def validate_on_submit(self):
        """
        Shortcut to determine whether has the form been submitted,
        load it from the request and check it's validity. Use like this:

        .. code-block:: python

            if form.validate_on_submit():
                save(form.dump())

        JSON request bodies are accepted in place of the form data.
        """

        if request.method == 'GET':
            return False

        if request.is_json:
            self.load(request.get_json(silent=True) or {})
        else:
            self.load(request.form)

        return self.is_valid()

    def render(self, *args, **kwargs):
        """
        Render the form using :attr:`~Form.template` and :attr:`~Form.macro`.

        To be used from inside the template, like this:

        .. code-block:: jinja

            <div class="post-form">
             {{form.render()}}
            </div>
        """

        assert self.template is not None, 'Form does not specify a template'
        assert self.macro is not None, 'Form does not specify a macro'

        macro = get_template_attribute(self.template, self.macro)
        return macro(self, *args, **self.options, **kwargs)


class Field:
    """
    Base input field used to create other, derived input fields.

    .. code-block:: python

        class SignupForm(Form):
            class confirm(PasswordField):
                label = _('Confirm Password')

                def validate(self):
                    super().validate()

                    if self.value != self.form.password.value:
                        raise ValidationError(_('Passwords do not match.'))
    """

    template = 'forms.html'
    """
    Template from which the macro used to render the field should be sourced.
    """

    macro = None
    """
    Name of the ``jinja2`` macro used to render the field.
    """

    default = ''
    """
    Default value to use when no input was supplied.
    """

    label = ''
    """
    Label to render along the field.
    """

    nullable = False
    """
    Controls whether to dump ``None`` value when the field value is falsy.
    """

    required = True
    """
    Controls whether is the field required to be filled in on submission.
    """

    def __init__(self, name, form, **options):
        self.name = name
        self.form = form
        self.errors = []
        self.options = options
        self.value = self.default

    @property
    def id(self):
        return self.name

    def is_valid(self):
        """
        Test whether is the field completely error-free.
        """

        if self.errors:
            return False

        return True

    def load(self, value):
        """
        Populate form field from the supplied value.
        """

        self.errors.clear()

        try:
            if value is None:
                self.value = self.default
            else:
                self.value = value

            if not self.options.get('disabled'):
                self.validate()

        except ValidationError as error:
            self.errors.append(str(error))

    def dump(self):
        """
        Dump form field value with respect to the :attr:`~Field.nullable`
        attribute.
        """

        if not self.value:
            if self.nullable:
                return None

        return self.value

    def validate(self):
        """
        Validate field and possibly clean up the value. Feel free to override
        it, but do not forget to call the original method as well.
        """

        if self.required and not self.value:
            raise ValidationError(_('This field must be filled in.'))

    def render(self, *args, **kwargs):
        assert self.template is not None, 'Field does not specify a template'
        assert self.macro is not None, 'Field does not specify a macro'

        macro = get_template_attribute(self.template, self.macro)
        return macro(self, *args, **self.options, **kwargs)


class StringField(Field):
    """
    Field that contains a short textual value, usually without line breaks.
    """

    macro = 'render_string_field'

    pattern = r'.*'
    """
    Input field validation regular expression pattern.
    """

    min_length = 0
    max_length = None

    def validate(self):
        if not isinstance(self.value, str):
            raise ValidationError(_('Expected a string.'))

        self.value = self.value.strip()

        super().validate()

        if not self.value and not self.required:
            return

        if not re.match(self.pattern, self.value):
            raise ValidationError(_('Invalid input format.'))

        if len(self.value) < self.min_length:
            msg = _('Input too short (< %(min)d).', min=self.min_length)
            raise ValidationError(msg)

        if self.max_length is not None:
            if len(self.value) > self.max_length:
                msg = _('Input too long (> %(max)d).', max=self.max_length)
                raise ValidationError(msg)


class EmailField(StringField):
    """
    Field that contains an e-mail address. Stored lowercase.
    """

    macro = 'render_email_field'
    pattern = r'^[^@\s]+@[^@\s]+\.[^@\s]+$'
    max_length = 254

    def validate(self):
        super().validate()
        self.value = self.value.lower()


class PasswordField(StringField):
    """
    Field that contains a secret. Never rendered back to the user.
    """

    macro = 'render_password_field'
    min_length = 4


class TextField(StringField):
    """
    Field that contains a long textual value.
    """

    macro = 'render_text_field'


class SelectField(Field):
    """
    Field that allows user to select one of many choices.
    """

    macro = 'render_select_field'

    choices = OrderedDict()
    """
    Ordered mapping of choice names to their respective labels.
    Forms usually replace it per instance with the current choices.
    """

    def validate(self):
        super().validate()

        if not self.value:
            return

        if not isinstance(self.value, str):
            raise ValidationError(_('Expected a string.'))

        if self.value not in self.choices:
            raise ValidationError(_('Value not among the valid choices.'))


class Button:
    """
    Base button used to create other, derived buttons.
    """

    template = 'forms.html'
    macro = None
    label = ''

    def __init__(self, name, form, **options):
        """
        :param name: Name of the button relative to the parent form.
        :param form: Reference to the parent form.
        :param options: Additional options passed to the rendering macro.
        """

        self.name = name
        self.form = form
        self.options = options
        self.clicked = False

    def load(self, value):
        self.clicked = bool(value)

    def render(self, *args, **kwargs):
        assert self.template is not None, 'Button does not specify a template'
        assert self.macro is not None, 'Button does not specify a macro'

        macro = get_template_attribute(self.template, self.macro)
        return macro(self, *args, **self.options, **kwargs)


class SubmitButton(Button):
    """
    The typical, inviting submit button.
    """

    macro = 'render_submit_button'


class ValidationError(Exception):
    """Error signalizing that a form field validation has failed."""


# vim:set sw=4 ts=4 et:
