# -*- coding: utf-8 -
#
# This file is part of couchcast released under the MIT license.
# See the NOTICE for more information.


"""
Mostly utility functions couchcast uses internally that don't
really belong anywhere else in the modules.
"""
import re
from urllib.parse import quote, unquote

try:
    import simplejson as json
except ImportError:
    import json


VALID_DB_NAME = re.compile(r'^[a-z][a-z0-9_$()+-/]*$')
SPECIAL_DBS = ("_users", "_replicator",)

def validate_dbname(name):
    """ validate dbname """
    if name in SPECIAL_DBS:
        return True
    elif not VALID_DB_NAME.match(unquote(name)):
        raise ValueError("Invalid db name: '%s'" % name)
    return True

def url_quote(s, safe='/'):
    """ quote a path segment, utf-8 encoded """
    if isinstance(s, str):
        s = s.encode('utf-8')
    return quote(s, safe=safe)
