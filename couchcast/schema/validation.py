# -*- coding: utf-8 -
#
# This file is part of couchcast released under the MIT license.
# See the NOTICE for more information.

""" Validation of casted documents.

Validation never raises. Each object keeps its own :class:`ValidationErrors`,
refreshed every time :meth:`ValidationMixin.is_valid` runs on it or on one of
its ancestors. A nested model that fails makes its parents invalid, but its
messages stay on the nested model:

    >>> cat = Cat(toys=[{}, {'name': 'Feather'}])
    >>> cat.is_valid()
    False
    >>> cat.errors.full_messages()
    []
    >>> cat.toys[0].errors.full_messages()
    ["name can't be blank"]

"""

__all__ = ['ValidationErrors', 'ValidationMixin', 'is_blank']


def is_blank(value):
    """ None, whitespace strings and empty collections are blank """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


class ValidationErrors(object):
    """ ordered list of (attribute, message) pairs """

    def __init__(self):
        self._errors = []

    def add(self, attribute, message):
        self._errors.append((attribute, message))

    def on(self, attribute):
        """ messages for `attribute`, None if it has none """
        messages = [m for a, m in self._errors if a == attribute]
        return messages or None

    def full_messages(self):
        return [message for attribute, message in self._errors]

    def clear(self):
        del self._errors[:]

    def __iter__(self):
        return iter(self._errors)

    def __len__(self):
        return len(self._errors)

    def __bool__(self):
        return bool(self._errors)

    def __contains__(self, attribute):
        return any(a == attribute for a, m in self._errors)

    def __repr__(self):
        return "<%s %r>" % (self.__class__.__name__, self._errors)


class PresenceRule(object):
    """ add an error for each attribute that is blank """

    def __init__(self, *attributes):
        self.attributes = attributes

    def __call__(self, document, errors):
        for attribute in self.attributes:
            if is_blank(document.get(attribute)):
                errors.add(attribute, "%s can't be blank" % attribute)


class ValidationMixin(object):
    """ validation part of casted models. Each class keeps its own
    `_validators`, callables taking the object and its `ValidationErrors`;
    the rules of an object are those of every class in its MRO. """

    _validators = ()

    @property
    def errors(self):
        errors = self.__dict__.get('_errors')
        if errors is None:
            errors = self.__dict__['_errors'] = ValidationErrors()
        return errors

    @classmethod
    def validates_present(cls, *attributes):
        """ declare that `attributes` can't be blank """
        cls.add_validator(PresenceRule(*attributes))

    @classmethod
    def add_validator(cls, rule):
        cls._validators = list(cls.__dict__.get('_validators', ())) + [rule]

    @classmethod
    def validation_rules(cls):
        rules = []
        for klass in reversed(cls.__mro__):
            for rule in klass.__dict__.get('_validators', ()):
                if rule not in rules:
                    rules.append(rule)
        return rules

    def run_validations(self):
        """ refill `errors` with the object own rules, without looking
        at nested models """
        errors = self.errors
        errors.clear()
        for name, prop in self.declared_properties():
            for message in prop.check(self[name]):
                errors.add(name, message)
        for rule in self.validation_rules():
            rule(self, errors)
        return not errors

    def is_valid(self):
        """ True if this object and every casted model it holds,
        transitively, are valid. Every nested model is visited so each
        one has its own errors refreshed. Values are read as stored,
        they were casted when written. """
        valid = self.run_validations()
        for name, prop in self.declared_properties():
            if not prop.casted:
                continue

            value = self[name]
            if prop.is_array:
                children = value or []
            else:
                children = [value]

            for child in children:
                if isinstance(child, ValidationMixin) and not child.is_valid():
                    valid = False
        return valid
