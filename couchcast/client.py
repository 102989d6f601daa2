# -*- coding: utf-8 -
#
# This file is part of couchcast released under the MIT license.
# See the NOTICE for more information.

"""
The persistence side of casted documents: a `Server` hands out `Database`
objects, and a :class:`couchcast.schema.Document` bound to one of them is
saved with `save_doc` and loaded back with `open_doc`.

    >>> from couchcast import Server
    >>> db = Server().create_db('couchcast_test')
    >>> doc = {'string': 'test'}
    >>> db.save_doc(doc)
    >>> db.get(doc['_id'])['string']
    'test'

"""
from collections import deque
import logging

from .exceptions import ResourceNotFound, ResourceConflict
from . import resource
from .utils import validate_dbname, url_quote


DEFAULT_UUID_BATCH_COUNT = 1000

logger = logging.getLogger(__name__)


class Server(object):
    """ a couchdb node """

    resource_class = resource.CouchdbResource

    def __init__(self, uri='http://127.0.0.1:5984',
            uuid_batch_count=DEFAULT_UUID_BATCH_COUNT,
            resource_class=None, session=None, timeout=None):
        """
        @param uri: uri of CouchDb host
        @param uuid_batch_count: number of uuids fetched at once
        @param resource_class: `CouchdbResource` subclass used for requests
        @param session: `requests.Session` shared by every request
        @param timeout: float, seconds to wait for the server
        """
        if not uri:
            raise ValueError("Server uri is missing")

        self.uri = uri.rstrip("/")
        self.uuid_batch_count = uuid_batch_count
        if resource_class is not None:
            self.resource_class = resource_class

        self.res = self.resource_class(self.uri, session=session,
                timeout=timeout)
        self._uuids = deque()

    def get_db(self, dbname, **params):
        return Database(self, dbname, **params)

    def create_db(self, dbname):
        """ the database `dbname`, created on the node when missing """
        return self.get_db(dbname, create=True)

    get_or_create_db = create_db

    def delete_db(self, dbname):
        logger.info("delete database %s", dbname)
        return self.res.delete(self._db_path(dbname)).json_body

    def uuids(self, count=1):
        return self.res.get('/_uuids', count=count).json_body["uuids"]

    def next_uuid(self):
        """ an unused document id. Ids are asked to the node by batches
        of `uuid_batch_count`. """
        if not self._uuids:
            self._uuids.extend(self.uuids(count=self.uuid_batch_count))
        return self._uuids.pop()

    def _db_path(self, dbname):
        return '/%s/' % url_quote(dbname.lstrip("/"), safe=":")


class Database(object):
    """ documents of one couchdb database """

    def __init__(self, server, dbname, create=False):
        """
        @param server: Server instance
        @param dbname: str, name of database
        @param create: if True, create the database when it doesn't exist
        """
        if not hasattr(server, 'next_uuid'):
            raise TypeError('%s is not a couchcast.Server instance' %
                            server.__class__.__name__)

        validate_dbname(dbname)
        self.server = server
        self.dbname = dbname

        if create:
            db_path = server._db_path(dbname)
            try:
                server.res.head(db_path)
            except ResourceNotFound:
                logger.info("create database %s", dbname)
                server.res.put(db_path)

        self.res = server.res(url_quote(dbname, safe=":"))

    def __repr__(self):
        return "<%s %s>" % (self.__class__.__name__, self.dbname)

    def doc_exist(self, docid):
        try:
            self.res.head(resource.escape_docid(docid))
        except ResourceNotFound:
            return False
        return True

    __contains__ = doc_exist

    def open_doc(self, docid, wrapper=None, **params):
        """ the document `docid` as a dict, or what `wrapper` makes of
        it. `params` go to the query string, like `rev`. """
        if wrapper is not None and not callable(wrapper):
            raise TypeError("wrapper isn't a callable")

        doc = self.res.get(resource.escape_docid(docid), **params).json_body
        if wrapper is not None:
            return wrapper(doc)
        return doc
    get = open_doc

    def get_rev(self, docid):
        """ current revision of `docid`, read from the ETag header """
        response = self.res.head(resource.escape_docid(docid))
        return response.headers['etag'].strip('"')

    def save_doc(self, doc, force_update=False, **params):
        """ Save the dict `doc`, under a new uuid if it has no `_id`.
        `doc` gets the `_id` and `_rev` given by the server.

        @param force_update: on conflict, retry over the current revision
        """
        if '_id' not in doc:
            doc['_id'] = self.server.next_uuid()

        docid = resource.escape_docid(doc['_id'])
        try:
            res = self.res.put(docid, payload=doc, **params).json_body
        except ResourceConflict:
            if not force_update:
                raise
            doc['_rev'] = self.get_rev(doc['_id'])
            res = self.res.put(docid, payload=doc, **params).json_body

        doc['_id'] = res['id']
        if 'rev' in res:
            doc['_rev'] = res['rev']
        return res

    def delete_doc(self, doc, **params):
        """ delete `doc`, a dict holding `_id` and `_rev`, or a document
        id whose current revision is deleted """
        if isinstance(doc, dict):
            if '_id' not in doc or '_rev' not in doc:
                raise KeyError('_id and _rev are required to delete a doc')
            docid, rev = doc['_id'], doc['_rev']
        else:
            docid, rev = doc, self.get_rev(doc)

        result = self.res.delete(resource.escape_docid(docid), rev=rev,
                **params).json_body
        if isinstance(doc, dict):
            doc['_rev'] = result['rev']
            doc['_deleted'] = True
        return result
