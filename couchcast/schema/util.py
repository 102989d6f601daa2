# -*- coding: utf-8 -
#
# This file is part of couchcast released under the MIT license.
# See the NOTICE for more information.

import types


class doc_getter(object):
    """ `Document.get(docid)` loads a document while `doc.get(key)`
    on an instance keeps the mapping meaning. """

    def __init__(self, func):
        self.func = func
        self.__doc__ = func.__doc__

    def __set_name__(self, owner, name):
        self.owner = owner
        self.name = name

    def __get__(self, instance, cls):
        if instance is None:
            return types.MethodType(self.func, cls)
        return getattr(super(self.owner, instance), self.name)
