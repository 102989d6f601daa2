# -*- coding: utf-8 -
#
# This file is part of couchcast released under the MIT license.
# See the NOTICE for more information.

""" Schema is an easy way to map couchdb documents in python objects, with
nested objects casted from plain mappings.

A casted model is a jsonobject `JsonObject` with declared properties. A
property with a `cast_as` target turns the mappings written to it into
instances of the target model, and lists into lists of such instances:


    from couchcast import Document, DocumentSchema, Property

    class CatToy(DocumentSchema):
        name = Property(required=True)

    class Cat(Document):
        name = Property()
        favorite_toy = Property(cast_as='CatToy')
        toys = Property(cast_as=['CatToy'])
        nicknames = Property(cast_as=['str'])

    cat = Cat(name="Felix", favorite_toy={'name': 'Feather'})
    cat.toys.append({'name': 'Mouse'})
    cat.favorite_toy.name
    # 'Feather'
    cat.favorite_toy.casted_by is cat
    # True

Cast targets can be given by class or by name, so a model can reference
itself or a model declared later. Casting happens when the value is set:
at construction, through the attribute, through
`update_attributes_without_saving` or when a document is loaded from the
database.

Any JsonObject class can get casted behaviour by combining it with
`CastedModel`:

    class Settings(CastedModel, jsonobject.JsonObject):
        color = Property(default='orange')


  Validation
------------

`is_valid()` checks the document and, recursively, every casted model it
holds. Each object keeps its own `errors`; an invalid nested model makes
its parents invalid without adding messages to them:

    class Question(Document):
        q = Property(required=True)

    Cat.validates_present('name')


  Saving
--------

A document class is bound to a database with `set_db`, or `contain` for
many classes. `save()` returns False, and doesn't touch the database, if the
document isn't valid:

    Cat.set_db(server.get_or_create_db('cats'))
    cat.save()
    cat = Cat.get(cat.id)

This binding isn't threadsafe since a class shares its db reference across
threads. It's better to use the db object methods if you want to be
threadsafe.

"""

from .properties import Property, CastedList, register_type, resolve_type, \
cast
from .validation import ValidationErrors, ValidationMixin, is_blank
from .base import ReservedWordError, SchemaProperties, CastedModel, \
DocumentSchema, Document, valid_id

def contain(db, *docs):
    """ associate a db to multiple `Document` class"""
    for doc in docs:
        if hasattr(doc, '_db'):
            doc._db = db
