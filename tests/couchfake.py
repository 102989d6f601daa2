# -*- coding: utf-8 -
#
# This file is part of couchcast released under the MIT license.
# See the NOTICE for more information.

""" in-process stand-in for a CouchDB node, used as the `requests`
session of the resources under test """

import uuid
from urllib.parse import urlsplit, unquote

from requests.structures import CaseInsensitiveDict

from couchcast.utils import json


class FakeResponse(object):

    def __init__(self, status_code, body=None, headers=None):
        self.status_code = status_code
        if body is None:
            self.text = ''
        else:
            self.text = json.dumps(body)
        self.headers = CaseInsensitiveDict({'content-type': 'application/json'})
        self.headers.update(headers or {})


class FakeCouchSession(object):

    def __init__(self):
        self.dbs = {}
        self.requests = []

    def request(self, method, url, data=None, headers=None, params=None,
            timeout=None):
        self.requests.append((method, url, params))
        path = urlsplit(url).path.strip('/')
        parts = [unquote(p) for p in path.split('/', 1)] if path else []
        if data is not None:
            data = json.loads(data)
        params = params or {}

        if not parts:
            return FakeResponse(200, {"couchdb": "Welcome", "version": "3.3.3"})
        if parts[0] == '_all_dbs':
            return FakeResponse(200, sorted(self.dbs))
        if parts[0] == '_uuids':
            count = int(params.get('count', 1))
            return FakeResponse(200,
                {"uuids": [uuid.uuid4().hex for i in range(count)]})
        if len(parts) == 1:
            return self._db_request(method, parts[0])
        return self._doc_request(method, parts[0], parts[1], data, params)

    def _db_request(self, method, dbname):
        exists = dbname in self.dbs
        if method == 'PUT':
            if exists:
                return FakeResponse(412, {"error": "file_exists",
                    "reason": "The database could not be created, "
                    "the file already exists."})
            self.dbs[dbname] = {}
            return FakeResponse(201, {"ok": True})

        if not exists:
            return FakeResponse(404, {"error": "not_found",
                "reason": "Database does not exist."})
        if method == 'DELETE':
            del self.dbs[dbname]
            return FakeResponse(200, {"ok": True})
        if method == 'HEAD':
            return FakeResponse(200)
        return FakeResponse(200, {"db_name": dbname,
            "doc_count": len(self.dbs[dbname])})

    def _doc_request(self, method, dbname, docid, data, params):
        if dbname not in self.dbs:
            return FakeResponse(404, {"error": "not_found",
                "reason": "Database does not exist."})
        docs = self.dbs[dbname]
        current = docs.get(docid)

        if method == 'PUT':
            if current is not None and data.get('_rev') != current['_rev']:
                return FakeResponse(409, {"error": "conflict",
                    "reason": "Document update conflict."})
            generation = 1
            if current is not None:
                generation = int(current['_rev'].split('-')[0]) + 1
            rev = "%d-%s" % (generation, uuid.uuid4().hex)
            data.update({'_id': docid, '_rev': rev})
            docs[docid] = data
            return FakeResponse(201, {"ok": True, "id": docid, "rev": rev})

        if current is None:
            return FakeResponse(404, {"error": "not_found",
                "reason": "missing"})
        etag = {'etag': '"%s"' % current['_rev']}
        if method == 'HEAD':
            return FakeResponse(200, headers=etag)
        if method == 'DELETE':
            if params.get('rev') != current['_rev']:
                return FakeResponse(409, {"error": "conflict",
                    "reason": "Document update conflict."})
            del docs[docid]
            return FakeResponse(200, {"ok": True, "id": docid,
                "rev": "%d-deleted" % (int(current['_rev'].split('-')[0]) + 1)})
        return FakeResponse(200, json.loads(json.dumps(current)),
                headers=etag)
