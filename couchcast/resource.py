# -*- coding: utf-8 -
#
# This file is part of couchcast released under the MIT license.
# See the NOTICE for more information.

"""
couchcast.resource
~~~~~~~~~~~~~~~~~~

This module provides a common interface for all CouchDB requests. HTTP
requests are made with a :mod:`requests` session, which can be passed in
to share connection pools or to set authentication and TLS options.

Example:

    >>> resource = CouchdbResource()
    >>> info = resource.get().json_body
    >>> info['couchdb']
    'Welcome'

"""
import logging

import requests

from .exceptions import ResourceNotFound, ResourceConflict, \
PreconditionFailed, RequestFailed, RequestError
from .utils import json, url_quote
from .version import __version__

USER_AGENT = 'couchcast/%s' % __version__

logger = logging.getLogger(__name__)


class CouchDBResponse(object):
    """ thin wrapper around a :class:`requests.Response` """

    def __init__(self, response):
        self.response = response

    @property
    def status_int(self):
        return self.response.status_code

    @property
    def headers(self):
        return self.response.headers

    def body_string(self):
        return self.response.text

    @property
    def json_body(self):
        body = self.body_string()

        # try to decode json
        try:
            return json.loads(body)
        except ValueError:
            return body


class CouchdbResource(object):

    def __init__(self, uri="http://127.0.0.1:5984", session=None,
            timeout=None):
        """Constructor for a `CouchdbResource` object.

        CouchdbResource represent an HTTP resource to CouchDB.

        @param uri: str, full uri to the server.
        @param session: `requests.Session` instance, a new one is
        created if not given.
        @param timeout: float, seconds to wait for the server
        """
        self.uri = uri.rstrip('/')
        if session is None:
            session = requests.Session()
        self.session = session
        self.timeout = timeout

    def __call__(self, path):
        """ return a new resource for `path`, sharing the session """
        return self.__class__(self.make_uri(path), session=self.session,
                timeout=self.timeout)

    def make_uri(self, path=None):
        if not path:
            return self.uri
        return "%s/%s" % (self.uri, path.lstrip('/'))

    def get(self, path=None, headers=None, **params):
        return self.request('GET', path=path, headers=headers, **params)

    def head(self, path=None, headers=None, **params):
        return self.request('HEAD', path=path, headers=headers, **params)

    def delete(self, path=None, headers=None, **params):
        return self.request('DELETE', path=path, headers=headers, **params)

    def post(self, path=None, payload=None, headers=None, **params):
        return self.request('POST', path=path, payload=payload,
                headers=headers, **params)

    def put(self, path=None, payload=None, headers=None, **params):
        return self.request('PUT', path=path, payload=payload,
                headers=headers, **params)

    def request(self, method, path=None, payload=None, headers=None, **params):
        """ Perform HTTP call to the couchdb server and manage
        JSON conversions, support GET, HEAD, POST, PUT and DELETE.

        Usage example, get infos of a couchdb server on
        http://127.0.0.1:5984 :


            import couchcast.resource
            resource = couchcast.resource.CouchdbResource()
            infos = resource.request('GET').json_body

        @param method: str, the HTTP action to be performed:
            'GET', 'HEAD', 'POST', 'PUT', or 'DELETE'
        @param path: str, path to add to the uri
        @param payload: str or any object that could be
            converted to JSON.
        @param headers: dict, optional headers that will
            be added to HTTP request.
        @param params: Optional parameters added to the request.

        @return: `CouchDBResponse` instance
        """

        headers = headers or {}
        headers.setdefault('Accept', 'application/json')
        headers.setdefault('User-Agent', USER_AGENT)

        if payload is not None:
            if not hasattr(payload, 'read') and \
                    not isinstance(payload, (str, bytes)):
                payload = json.dumps(payload).encode('utf-8')
                headers.setdefault('Content-Type', 'application/json')

        uri = self.make_uri(path)
        params = encode_params(params)
        logger.debug("%s %s %s", method, uri, params or '')
        try:
            resp = self.session.request(method, uri, data=payload,
                    headers=headers, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise RequestError(str(e))

        if resp.status_code >= 400:
            raise_for_status(resp)
        return CouchDBResponse(resp)


def raise_for_status(resp):
    """ map an HTTP error response to a couchcast exception """
    msg = resp.text
    content_type = resp.headers.get('content-type', '')
    if msg and content_type.startswith('application/json'):
        try:
            msg = json.loads(msg)
        except ValueError:
            pass

    if isinstance(msg, dict):
        error = msg.get('reason')
    else:
        error = msg

    status = resp.status_code
    if status == 404:
        raise ResourceNotFound(error, http_code=404, response=resp)
    elif status == 409:
        raise ResourceConflict(error, http_code=409, response=resp)
    elif status == 412:
        raise PreconditionFailed(error, http_code=412, response=resp)
    raise RequestFailed(error, http_code=status, response=resp)

def encode_params(params):
    """ encode parameters in json if needed """
    _params = {}
    if params:
        for name, value in params.items():
            if name in ('key', 'startkey', 'endkey'):
                value = json.dumps(value)
            elif value is None:
                continue
            elif not isinstance(value, str):
                value = json.dumps(value)
            _params[name] = value
    return _params

def escape_docid(docid):
    if docid.startswith('/'):
        docid = docid[1:]
    if docid.startswith('_design'):
        docid = '_design/%s' % url_quote(docid[8:], safe='')
    else:
        docid = url_quote(docid, safe='')
    return docid
