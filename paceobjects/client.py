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

`Client` is the starting point for working with a web service: it makes
models by type name and wraps the service's transactions.

>>> client = Client.from_environ()
>>> job = client.model('Job').read('12345')
>>> client.model('jobPart').filter('@job', job.job).get()

"""

import logging
import os

from paceobjects.exceptions import ImproperlyConfigured
from paceobjects.http import HttpObjectService
from paceobjects.model import Model
from paceobjects.types import Type


log = logging.getLogger('paceobjects.client')


class Client(object):

    model_class = Model

    def __init__(self, service):
        """Sets the `RemoteObjectService` the client's models use."""
        self.service = service

    @classmethod
    def from_environ(cls, environ=None, http=None):
        """Creates a client for the web service named by environment
        variables.

        ``PACE_HOST`` is the host name or address (with a port if needed).
        ``PACE_LOGIN`` and ``PACE_PASSWORD`` are the credentials of a user
        allowed to use the remote API. ``PACE_SCHEME`` is ``https`` (the
        default) or ``http``.

        Optional parameter `environ` is the mapping to read instead of
        `os.environ`. Optional parameter `http` is passed to the
        `HttpObjectService`.

        """
        if environ is None:
            environ = os.environ

        missing = [name for name in ('PACE_HOST', 'PACE_LOGIN') if not environ.get(name)]
        if missing:
            raise ImproperlyConfigured('Missing settings: %s' % ', '.join(missing))

        scheme = environ.get('PACE_SCHEME') or 'https'
        if scheme not in ('https', 'http'):
            raise ImproperlyConfigured('Unsupported PACE_SCHEME %r' % (scheme,))

        log.debug('Using web service at %s://%s', scheme, environ['PACE_HOST'])
        service = HttpObjectService.for_host(environ['PACE_HOST'],
            environ['PACE_LOGIN'], environ.get('PACE_PASSWORD', ''),
            scheme=scheme, http=http)
        return cls(service)

    def model(self, name):
        """Returns a new model of the type `name`, which may be either a type
        name (``JobPart``) or a property name (``jobPart``)."""
        if name[:1].islower():
            name = Type.from_property_name(name)
        return self.model_class(self.service, name)

    def transaction(self, callback):
        return self.service.transaction(callback)

    def start_transaction(self, timeout=60):
        self.service.start_transaction(timeout)

    def commit_transaction(self):
        self.service.commit()

    def rollback_transaction(self):
        self.service.rollback()

    def version(self):
        """Returns the web service's version, as `RemoteObjectService.version()`
        describes."""
        return self.service.version()
