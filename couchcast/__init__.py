# -*- coding: utf-8 -
#
# This file is part of couchcast released under the MIT license.
# See the NOTICE for more information.

import logging

from .version import version_info, __version__

from .exceptions import ConfigurationError, ReservedWordError, \
NoSuchAttributeError, BadValueError, ResourceError, RequestError, \
RequestFailed, ResourceNotFound, ResourceConflict, PreconditionFailed
from .resource import CouchdbResource
from .client import Server, Database
from .schema import Property, CastedList, CastedModel, DocumentSchema, \
Document, ValidationErrors, contain, cast

LOG_LEVELS = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG
}

def set_logging(level, handler=None):
    """
    Set level of logging, and choose where to display/save logs
    (file or standard output).
    """
    if not handler:
        handler = logging.StreamHandler()

    loglevel = LOG_LEVELS.get(level, logging.INFO)
    logger = logging.getLogger('couchcast')
    logger.setLevel(loglevel)
    format = r"%(asctime)s [%(process)d] [%(levelname)s] %(message)s"
    datefmt = r"%Y-%m-%d %H:%M:%S"

    handler.setFormatter(logging.Formatter(format, datefmt))
    logger.addHandler(handler)
