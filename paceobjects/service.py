# Copyright (c) 2009-2010 Six Apart Ltd.
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# * Redistributions of source code must retain the above copyright notice,
#   this list of conditions and the following disclaimer.
#
# * Redistributions in binary form must reproduce the above copyright notice,
#   this list of conditions and the following disclaimer in the documentation
#   and/or other materials provided with the distribution.
#
# * Neither the name of Six Apart Ltd. nor the names of its contributors may
#   be used to endorse or promote products derived from this software without
#   specific prior written permission.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

"""

The interface `Model` uses to reach the web service.

`RemoteObjectService` declares the object operations (create, read, update,
delete, clone, find) and transaction control. `paceobjects.http` provides an
implementation over HTTP; subclass `RemoteObjectService` to reach the web
service some other way, or to stand in for it.

"""

import logging
import re

from paceobjects.exceptions import Fault


log = logging.getLogger('paceobjects.service')

version_pattern = re.compile(r'(\d+)\.(\d+)-(\d+)')


def parse_version(string):
    """Returns the version dictionary for a version string."""
    version = {'string': string}
    match = version_pattern.search(string or '')
    if match is not None:
        version.update(zip(('major', 'minor', 'patch'), map(int, match.groups())))
    return version


class TransactionContext(object):

    """The transaction state of one `RemoteObjectService`.

    Requests made while a transaction is active carry its id, and the
    requests that start, commit and roll back a transaction carry a process
    marker as well. The context supplies both as headers for each request.

    """

    id_header = 'x-pace-transaction-id'
    process_header = 'x-pace-transaction-process'

    def __init__(self):
        self.transaction_id = None

    @property
    def active(self):
        return self.transaction_id is not None

    def begin(self, transaction_id):
        self.transaction_id = transaction_id

    def end(self):
        self.transaction_id = None

    def headers(self, process=None):
        """Returns the transaction headers for a request.

        Optional parameter `process` is the transaction step the request
        performs: ``startTransaction``, ``commit`` or ``rollback``.

        """
        headers = {}
        if self.transaction_id is not None:
            headers[self.id_header] = str(self.transaction_id)
        if process is not None:
            headers[self.process_header] = process
        return headers


class RemoteObjectService(object):

    """The object operations of the web service.

    The operations in this class raise `NotImplementedError`. Override them
    in a subclass that talks to the web service. Except for `read()`, which
    returns `None` for a missing object, every operation should let faults
    from the web service propagate.

    """

    def __init__(self, context=None):
        if context is None:
            context = TransactionContext()
        self.context = context

    def create(self, type, attributes):
        """Creates an object, returning all its attributes including any
        defaults the web service filled in."""
        raise NotImplementedError

    def read(self, type, key):
        """Returns the attributes of the object with the given key, or `None`
        if there is no such object."""
        raise NotImplementedError

    def update(self, type, attributes):
        raise NotImplementedError

    def delete(self, type, key):
        raise NotImplementedError

    def clone(self, type, attributes, overrides, new_key=None, new_parent=None):
        """Clones the object described by `attributes`, changing the
        attributes in `overrides` on the clone, and returns the clone's
        attributes."""
        raise NotImplementedError

    def find(self, type, filter, sort=None, offset=None, limit=None, fields=None):
        """Returns the keys of the objects matching the filter expression.

        If `fields` are given, returns value objects holding those fields
        instead of bare keys.

        """
        raise NotImplementedError

    def start_transaction(self, timeout=60):
        raise NotImplementedError

    def commit(self):
        raise NotImplementedError

    def rollback(self):
        raise NotImplementedError

    def version(self):
        """Returns the web service's version as a dictionary.

        The ``string`` member is the version as the web service reports it.
        Versions in the usual ``29.0-1209`` form also have integer ``major``,
        ``minor`` and ``patch`` members.

        """
        raise NotImplementedError

    def transaction(self, callback):
        """Calls `callback` in a transaction, returning its result.

        The transaction is committed if `callback` returns normally and rolled
        back if it raises. When `callback` raises a `Fault`, the web service
        has already rolled the transaction back itself, so the transaction is
        only forgotten.

        """
        self.start_transaction()

        try:
            result = callback()
        except Fault:
            log.debug('Transaction %r was rolled back by the web service',
                self.context.transaction_id)
            self.context.end()
            raise
        except Exception:
            self.rollback()
            raise

        self.commit()
        return result
