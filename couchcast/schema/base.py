# -*- coding: utf-8 -
#
# This file is part of couchcast released under the MIT license.
# See the NOTICE for more information.

""" module that provides casted models and the Document object that
allows you to map CouchDB documents in Python, statically or dynamically
"""
import logging

import jsonobject
from jsonobject.base import get_settings

from ..exceptions import ConfigurationError, DeleteNotAllowed, \
NoSuchAttributeError, ReservedWordError
from .properties import Property, _link, cast, register_type
from .util import doc_getter
from .validation import ValidationMixin

__all__ = ['ReservedWordError', 'SchemaProperties', 'CastedModel',
        'DocumentSchema', 'Document', 'valid_id']

logger = logging.getLogger(__name__)

_RESERVED_WORDS = ['_id', '_rev', 'doc_type', 'casted_by', 'errors', 'attributes']

def check_reserved_words(attr_name):
    if attr_name in _RESERVED_WORDS or hasattr(Document, attr_name):
        raise ReservedWordError(
            "Cannot define property using reserved word '%(attr_name)s'." %
            locals())

def valid_id(value):
    if isinstance(value, str) and not value.startswith('_'):
        return value
    raise TypeError('id "%s" is invalid' % value)

def _subclasses(cls):
    for subclass in cls.__subclasses__():
        yield subclass
        for klass in _subclasses(subclass):
            yield klass


class SchemaProperties(jsonobject.JsonObjectMeta):
    """ metaclass of casted models. jsonobject collects the properties,
    this adds reserved words, the JsonObject check and the registration of
    the class as a cast target """

    def __new__(mcs, name, bases, dct):
        if isinstance(dct.get('doc_type'), str):
            doc_type = dct.pop('doc_type')
        else:
            doc_type = name

        for attr_name, attr in dct.items():
            if isinstance(attr, Property):
                check_reserved_words(attr_name)

        if any(issubclass(base, jsonobject.JsonObject) for base in bases):
            cls = super(SchemaProperties, mcs).__new__(mcs, name, bases, dct)
        else:
            cls = type.__new__(mcs, name, bases, dct)
            if any(isinstance(base, SchemaProperties) for base in bases):
                raise ConfigurationError(
                    "%s must be a JsonObject to use casted models, inherit "
                    "from DocumentSchema" % name)

        cls._doc_type = doc_type
        register_type(cls, doc_type)
        return cls


class CastedModel(ValidationMixin, metaclass=SchemaProperties):
    """ Behaviour of casted models, to combine with a JsonObject:

        class Toy(CastedModel, jsonobject.JsonObject):
            name = Property()

    Values given at construction go through the declared properties, so
    nested mappings are casted right away. Keys without a property are kept
    as jsonobject dynamic properties. A casted model knows the object that
    casted it with `casted_by`.
    """

    _validate_required_lazily = True
    _casted_by = None

    def __init__(self, attrs=None, **kwargs):
        values = dict(attrs or {})
        values.update(kwargs)
        super(CastedModel, self).__init__()
        for name, value in values.items():
            self.write_attribute(name, value)

    def __getitem__(self, key):
        return self._wrapped.get(key)

    def __setitem__(self, key, value):
        prop = self.resolve_property(key)
        if value is None and prop is not None and prop.is_array:
            value = []
        super(CastedModel, self).__setitem__(key, value)
        _link(self._wrapped[key], self)

    def __delitem__(self, key):
        try:
            super(CastedModel, self).__delitem__(key)
        except DeleteNotAllowed:
            self[key] = None

    def __eq__(self, other):
        if not isinstance(other, CastedModel):
            return NotImplemented
        return self._obj == other._obj

    def get(self, key, default=None):
        return self._wrapped.get(key, default)

    @property
    def casted_by(self):
        """ object that casted this model, None for a standalone one """
        if self._casted_by is None:
            return None
        return self._casted_by()

    @classmethod
    def resolve_property(cls, name):
        """ the `Property` declared for `name`, None if undeclared """
        prop = cls._properties_by_key.get(name)
        if isinstance(prop, Property):
            return prop
        return None

    @classmethod
    def declared_properties(cls):
        """ (name, `Property`) pairs in declaration order """
        props = [(name, prop) for name, prop in cls._properties_by_key.items()
                if isinstance(prop, Property)]
        props.sort(key=lambda item: item[1].creation_counter)
        return props

    @classmethod
    def declare_property(cls, name, **options):
        """ add a property to an existing class and the subclasses that
        don't declare their own. `options` are the `Property` arguments """
        check_reserved_words(name)
        prop = Property(**options)
        prop.init_property(default_name=name,
                type_config=get_settings(cls).type_config)
        setattr(cls, name, prop)

        for klass in [cls] + list(_subclasses(cls)):
            if klass is not cls and \
                    isinstance(klass.__dict__.get(name), jsonobject.JsonProperty):
                continue
            by_attr = dict(klass._properties_by_attr)
            by_attr[name] = prop
            by_key = dict(klass._properties_by_key)
            by_key[name] = prop
            klass._properties_by_attr = by_attr
            klass._properties_by_key = by_key
        return prop

    def read_attribute(self, name):
        return self[name]

    def write_attribute(self, name, value):
        self[name] = value

    def update_attributes_without_saving(self, attrs=None, **kwargs):
        """ set many declared attributes at once. Values are all casted
        before the first one is stored, so nothing changes if one of them
        can't be set. """
        values = dict(attrs or {})
        values.update(kwargs)

        props = {}
        for name in values:
            props[name] = self.resolve_property(name)
            if props[name] is None:
                raise NoSuchAttributeError(
                    "%s has no attribute %r" % (self.__class__.__name__, name))

        casted = dict((name, cast(value, props[name]))
                for name, value in values.items())
        for name, value in casted.items():
            self[name] = value

    attributes = property(lambda self: dict(self),
            update_attributes_without_saving)


class DocumentSchema(CastedModel, jsonobject.JsonObject):
    """ JsonObject backed casted model, the usual base of nested models """

    def __repr__(self):
        return "%s(%r)" % (self.__class__.__name__, self._obj)


class Document(DocumentSchema):
    """ root document, saved to and loaded from a couchdb database.
    The database is bound to the class with `set_db` or `contain`. """

    _id = jsonobject.StringProperty(exclude_if_none=True)
    _rev = jsonobject.StringProperty(exclude_if_none=True)

    _db = None

    @jsonobject.StringProperty
    def doc_type(self):
        return self._doc_type

    @classmethod
    def set_db(cls, db):
        """ Set document db"""
        cls._db = db

    @classmethod
    def get_db(cls):
        """ get document db"""
        db = getattr(cls, '_db', None)
        if db is None:
            raise TypeError("doc database required to save document")
        return db

    @doc_getter
    def get(cls, docid, rev=None, db=None):
        """ get document with `docid`. Nested casted models of the
        document are casted when it's loaded.
        """
        if db is None:
            db = cls.get_db()
        params = {}
        if rev is not None:
            params['rev'] = rev
        return db.open_doc(docid, wrapper=cls.wrap, **params)

    def save(self, **params):
        """ Save document in database if it's valid.

        @return: bool, False if the document or one of its casted
        models is invalid.
        """
        if not self.is_valid():
            logger.debug("%s not saved, it is invalid", self._doc_type)
            return False

        db = self.get_db()
        doc = dict(self.to_json())
        db.save_doc(doc, **params)
        self._id = doc['_id']
        self._rev = doc['_rev']
        return True

    store = save

    def delete(self):
        """ Delete document from the database. """
        if self.new_document:
            raise TypeError("the document is not saved")

        self.get_db().delete_doc({'_id': self._id, '_rev': self._rev})

        # reinit document
        self._id = None
        self._rev = None

    def get_id(self):
        return self._id

    def set_id(self, docid):
        self._id = valid_id(docid)
    id = property(get_id, set_id)

    @property
    def rev(self):
        return self._rev

    new_document = property(lambda self: self._rev is None)
