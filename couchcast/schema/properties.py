# -*- coding: utf-8 -
#
# This file is part of couchcast released under the MIT license.
# See the NOTICE for more information.

""" Properties and casting.

A :class:`Property` is a jsonobject property declared on a casted model.
When it has a `cast_as` target, values written through it are casted:
mappings become instances of the target model, lists become
:class:`CastedList` of such instances.

    class Toy(DocumentSchema):
        name = Property(required=True)

    class Cat(Document):
        favorite_toy = Property(cast_as='Toy')
        toys = Property(cast_as=['Toy'])
        nicknames = Property(cast_as=[str])

"""
from collections.abc import Mapping
import copy
import functools
import logging
import weakref

from jsonobject import JsonArray, JsonProperty

from ..exceptions import BadValueError, ConfigurationError
from .validation import is_blank

__all__ = ['Property', 'CastedList', 'register_type', 'resolve_type',
        'cast']

logger = logging.getLogger(__name__)

SCALAR_TYPES = {
    'str': str,
    'int': int,
    'float': float,
    'bool': bool,
    'dict': dict,
    'list': list,
}

_TYPES = {}

def register_type(cls, name=None):
    """ make `cls` available as a cast target under `name` """
    _TYPES[name or cls.__name__] = cls

def resolve_type(target):
    """ return the class named by `target`. `target` may already
    be a class. """
    if isinstance(target, type):
        return target
    try:
        return _TYPES[target]
    except KeyError:
        pass
    try:
        return SCALAR_TYPES[target]
    except KeyError:
        raise ConfigurationError("unknown cast target %r" % (target,))


class Property(JsonProperty):
    """ Property of a casted model. Values are casted on write, the rules
    (`required`, `choices`, `validators`) only run when the model is
    validated. """
    creation_counter = 0

    def __init__(self, verbose_name=None, default=None, cast_as=None,
            required=False, validators=None, choices=None, name=None,
            exclude_if_none=False):
        """ Default constructor for a property.

        :param verbose_name: str, verbose name of field, could
                be use for description
        :param default: default value, or a callable returning it. Static
                defaults are copied for each instance.
        :param cast_as: a model class or its name to cast mappings to it, or
                a one-element list holding one to cast lists of them.
        :param required: True if field must be present for the document
                to be valid, default is False
        :param validators: list of callable or callable, raising
                `BadValueError` for invalid values. They run when the
                document is validated.
        :param choices: list of allowed values
        """
        self.is_array = isinstance(cast_as, (list, tuple))
        if self.is_array:
            if len(cast_as) != 1:
                raise ConfigurationError(
                    "array cast target must hold exactly one type, got %r"
                    % (cast_as,))
            cast_as = cast_as[0]
            if default is None:
                default = list
        self.cast_as = cast_as
        self._element = None

        if not callable(default):
            default = functools.partial(copy.deepcopy, default)

        super(Property, self).__init__(default=default, name=name,
                choices=choices, required=required,
                exclude_if_none=exclude_if_none, validators=validators,
                verbose_name=verbose_name)

        Property.creation_counter += 1
        self.creation_counter = Property.creation_counter

    def __repr__(self):
        return "<%s %s>" % (self.__class__.__name__, self.name)

    @property
    def casted(self):
        return self.cast_as is not None

    @property
    def target(self):
        """ resolved cast target class, None for uncasted properties """
        if self.cast_as is None:
            return None
        return resolve_type(self.cast_as)

    @property
    def element(self):
        """ property casting the elements of an array property """
        if self._element is None:
            element = Property(cast_as=self.cast_as)
            element.name = self.name
            element.type_config = self.type_config
            self._element = element
        return self._element

    def __get__(self, instance, owner):
        if instance is None:
            return self
        return instance.read_attribute(self.name)

    def __set__(self, instance, value):
        instance.write_attribute(self.name, value)

    def default_value(self):
        """ return default value """
        return self.default()

    def empty(self, value):
        return is_blank(value)

    def wrap(self, obj):
        return cast(obj, self)

    def unwrap(self, obj):
        value = cast(obj, self)
        if isinstance(value, CastedList) or hasattr(value, 'casted_by'):
            return value, value._obj
        return value, value

    def validate(self, value, required=True, recursive=True):
        # rules are collected by `check`, writes never fail on them
        pass

    def check(self, value):
        """ run the property own rules on `value`, return a list of
        error messages """
        try:
            JsonProperty.validate(self, value, required=True)
        except BadValueError as e:
            return [str(e)]
        return []


def _link(value, owner):
    """ point the back-reference of `value` to `owner` """
    if owner is None:
        return value
    if isinstance(value, CastedList):
        value.link(owner)
    elif hasattr(value, 'casted_by'):
        value._casted_by = weakref.ref(owner)
    return value

def cast_value(value, target, owner=None):
    """ cast one value to the `target` class """
    if isinstance(value, target):
        return _link(value, owner)

    if target in SCALAR_TYPES.values():
        raise BadValueError("%r is not a %s instance" % (value,
            target.__name__))

    if not isinstance(value, Mapping):
        raise BadValueError("can't cast %s to %s" % (type(value).__name__,
            target.__name__))

    logger.debug("cast %s into %s", list(value), target.__name__)
    return _link(target.wrap(dict(value)), owner)

def cast(value, prop, owner=None):
    """ cast a raw value according to `prop`. `owner` is the object
    holding the value, it becomes the back-reference of casted models. """
    if prop.cast_as is None:
        return value

    target = prop.target
    if prop.is_array:
        if value is None:
            value = []
        elif isinstance(value, CastedList) and value.element_type is target:
            return _link(value, owner)
        elif not isinstance(value, (list, tuple)):
            raise BadValueError("Property %s must be a list, not a %s" % (
                prop.name, type(value).__name__))
        return CastedList(prop.element, value, owner)

    if value is None:
        return None
    return cast_value(value, target, owner)


class CastedList(JsonArray):
    """ list of casted values. Elements added to it are casted by the
    `element` property and linked to the object owning the list. """

    def __init__(self, element, values=None, owner=None):
        self.element = element
        self._owner = None
        super(CastedList, self).__init__(None, wrapper=element,
                type_config=element.type_config)
        if values:
            self.extend(values)
        if owner is not None:
            self.link(owner)

    @property
    def element_type(self):
        return self.element.target

    @property
    def owner(self):
        if self._owner is None:
            return None
        return self._owner()

    def link(self, owner):
        """ make `owner` the back-reference of the list and its elements """
        self._owner = weakref.ref(owner)
        self._relink()

    def _relink(self):
        owner = self.owner
        if owner is None:
            return
        for value in self:
            _link(value, owner)

    def __setitem__(self, index, value):
        super(CastedList, self).__setitem__(index, value)
        self._relink()

    def __iadd__(self, values):
        self.extend(values)
        return self

    def append(self, value):
        super(CastedList, self).append(value)
        self._relink()

    def extend(self, values):
        super(CastedList, self).extend(list(values))
        self._relink()

    def insert(self, index, value):
        super(CastedList, self).insert(index, value)
        self._relink()
