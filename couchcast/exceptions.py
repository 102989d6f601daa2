# -*- coding: utf-8 -
#
# This file is part of couchcast released under the MIT license.
# See the NOTICE for more information.

"""
All exceptions used in couchcast.
"""
from jsonobject.exceptions import BadValueError, DeleteNotAllowed


class ConfigurationError(TypeError):
    """ raised when a schema is misconfigured: an unknown cast target
    or casted behaviour composed onto a class that isn't a JsonObject """

class ReservedWordError(Exception):
    """ exception raised when a reserved word
    is used in Document schema """

class NoSuchAttributeError(AttributeError):
    """ raised when a bulk update names an attribute that has no
    declared property """

class ResourceError(Exception):
    """ default error raised by the couchdb resource. `msg`,
    `status_int` and `response` describe the failed request """

    status_int = None

    def __init__(self, msg=None, http_code=None, response=None):
        self.msg = msg or ''
        if http_code is not None:
            self.status_int = http_code
        self.response = response
        Exception.__init__(self, self.msg)

class RequestError(ResourceError):
    """ raised when the request couldn't be sent """

class RequestFailed(ResourceError):
    """ raised when the server answered with an unexpected error """

class ResourceNotFound(ResourceError):
    """ Exception raised when resource is not found"""
    status_int = 404

class ResourceConflict(ResourceError):
    """ Exception raised when there is conflict while updating"""
    status_int = 409

class PreconditionFailed(ResourceError):
    """ Exception raised when 412 HTTP error is received in response
    to a request """
    status_int = 412
