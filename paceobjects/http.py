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

`HttpObjectService` reaches the web service's object operations with JSON
requests over HTTP, through the `httplib2` library.

Each operation is a ``POST`` of a JSON request to the URL of the service and
operation, such as ``https://epace.example.com/rpc/services/ReadObject/readJob``.
Successful responses are JSON objects holding the result in an ``out``
member. Faults are ``500`` responses holding the fault string in a ``fault``
member.

"""

from datetime import date, datetime, timezone
import http.client
import logging
from urllib.parse import urljoin

import httplib2
import simplejson as json

from paceobjects.exceptions import Fault
from paceobjects.service import RemoteObjectService, parse_version
from paceobjects.types import to_property_name


log = logging.getLogger('paceobjects.http')


def encode_value(value):
    """Encodes values `simplejson` can't: timestamps and dates."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.strftime(HttpObjectService.dateformat)
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError('%r is not JSON serializable' % (value,))


class HttpObjectService(RemoteObjectService):

    """A `RemoteObjectService` that makes JSON requests over HTTP."""

    content_types = ('application/json',)

    dateformat = '%Y-%m-%dT%H:%M:%S.%fZ'

    not_found_fault = 'Unable to locate object'

    class Unauthorized(http.client.HTTPException):
        """An HTTPException thrown when the server reports that the request
        was not authenticated.

        This exception corresponds to the HTTP status code 401. Check the
        login and password, and that the user is allowed to use the remote
        API.

        """
        pass

    class Forbidden(http.client.HTTPException):
        """An HTTPException thrown when the server reports that the
        authenticated user may not perform the requested operation.

        This exception corresponds to the HTTP status code 403.

        """
        pass

    class RequestError(http.client.HTTPException):
        """An HTTPException thrown when the server reports an error in the
        client's request.

        This exception corresponds to the HTTP status code 400.

        """
        pass

    class ServerError(http.client.HTTPException):
        """An HTTPException thrown when the server reports an unexpected
        error that is not a fault.

        This exception corresponds to the HTTP status code 500.

        """
        pass

    class BadResponse(http.client.HTTPException):
        """An HTTPException thrown when the client receives some other
        response it can't use."""
        pass

    def __init__(self, url, login=None, password=None, http=None, context=None):
        """Sets the base URL of the services and the credentials to use.

        Optional parameter `http` is the user agent object to use. `http`
        objects should be compatible with `httplib2.Http` objects. Optional
        parameter `context` is the `TransactionContext` to track transactions
        with.

        """
        super(HttpObjectService, self).__init__(context)
        if not url.endswith('/'):
            url += '/'
        self.url = url
        if http is None:
            http = httplib2.Http()
        if login is not None:
            http.add_credentials(login, password)
        self.http = http

    @classmethod
    def for_host(cls, host, login, password, scheme='https', **kwargs):
        """Creates a service for the web service on the given host.

        Parameter `host` is the host name or address, with a port if needed
        (``epace.example.com:8443``).

        """
        url = '%s://%s/rpc/services/' % (scheme, host)
        return cls(url, login, password, **kwargs)

    def get_request(self, service, operation, payload, process=None):
        """Returns the parameters for requesting an operation as a dictionary
        of keyword arguments suitable for passing to `httplib2.Http.request()`.

        Optional parameter `process` is the transaction step the request
        performs, if any.

        """
        headers = {
            'accept': ', '.join(self.content_types),
            'content-type': self.content_types[0],
        }
        headers.update(self.context.headers(process))

        body = json.dumps(payload, default=encode_value)

        # Use 'uri' because httplib2.request does.
        return dict(uri=urljoin(self.url, '%s/%s' % (service, operation)),
            method='POST', body=body, headers=headers)

    def call(self, service, operation, payload, process=None):
        """Requests an operation, returning the ``out`` member of its
        response."""
        request = self.get_request(service, operation, payload, process)
        log.debug('Requesting %s with %s', request['uri'], request['body'])

        response, content = self.http.request(**request)
        self.raise_for_response(request['uri'], response, content)

        if not content:
            return None
        data = self.decode(content)
        return data.get('out')

    def decode(self, content):
        if isinstance(content, bytes):
            content = content.decode('utf-8')
        return json.loads(content)

    def raise_for_response(self, url, response, content):
        """Raises exceptions corresponding to responses that aren't results.

        A fault from the web service raises `Fault`; other unsuccessful
        responses raise the HTTP exceptions declared on this class.

        """
        if response.status == http.client.UNAUTHORIZED:
            raise self.Unauthorized('Not authorized to request %s' % (url,))
        if response.status == http.client.FORBIDDEN:
            raise self.Forbidden('Forbidden from requesting %s' % (url,))
        if response.status == http.client.BAD_REQUEST:
            raise self.RequestError('%d %s requesting %s'
                % (response.status, response.reason, url))

        if response.status == http.client.INTERNAL_SERVER_ERROR:
            fault = None
            try:
                fault = self.decode(content).get('fault')
            except (ValueError, AttributeError):
                pass
            if fault is not None:
                raise Fault(fault)
            raise self.ServerError('%d %s requesting %s'
                % (response.status, response.reason, url))

        if response.status not in (http.client.OK, http.client.NO_CONTENT):
            raise self.BadResponse('Unexpected response requesting %s: %d %s'
                % (url, response.status, response.reason))

        if response.status == http.client.NO_CONTENT:
            return

        content_type = response.get('content-type', '').split(';', 1)[0].strip()
        if content_type not in self.content_types:
            raise self.BadResponse(
                'Bad response requesting %s: content-type %s is not an expected type'
                % (url, response.get('content-type')))

    def create(self, type, attributes):
        out = self.call('CreateObject', 'create' + type,
            {to_property_name(type): attributes})
        return dict(out or {})

    def read(self, type, key):
        try:
            out = self.call('ReadObject', 'read' + type,
                {to_property_name(type): {'primaryKey': key}})
        except Fault as exc:
            if str(exc).startswith(self.not_found_fault):
                log.debug('No %s %r to read', type, key)
                return None
            raise
        return dict(out or {})

    def update(self, type, attributes):
        out = self.call('UpdateObject', 'update' + type,
            {to_property_name(type): attributes})
        return dict(out or {})

    def delete(self, type, key):
        self.call('DeleteObject', 'deleteObject', {'in0': type, 'in1': key})

    def clone(self, type, attributes, overrides, new_key=None, new_parent=None):
        out = self.call('CloneObject', 'clone' + type, {
            type: attributes,
            type + 'AttributesToOverride': overrides,
            'newPrimaryKey': new_key,
            'newParent': new_parent,
        })
        return dict(out or {})

    def find(self, type, filter, sort=None, offset=None, limit=None, fields=None):
        """Finds objects, using the simplest operation of the find service
        that supports the given arguments."""
        request = {'in0': type, 'in1': filter}

        if fields:
            operation = 'loadValueObjects'
            request.update(in2=sort, in3=offset, in4=limit, in5=fields)
        elif offset or limit is not None:
            operation = 'findSortAndLimit'
            request.update(in2=sort, in3=offset, in4=limit)
        elif sort is not None:
            operation = 'findAndSort'
            request.update(in2=sort)
        else:
            operation = 'find'

        return list(self.call('FindObjects', operation, request) or [])

    def start_transaction(self, timeout=60):
        transaction_id = self.call('TransactionService', 'startTransaction',
            {'in0': timeout}, process='startTransaction')
        log.debug('Started transaction %r', transaction_id)
        self.context.begin(transaction_id)

    def rollback(self):
        self.call('TransactionService', 'rollback', {}, process='rollback')
        self.context.end()

    def commit(self):
        self.call('TransactionService', 'commit', {}, process='commit')
        self.context.end()

    def version(self):
        return parse_version(self.call('Version', 'getVersion', {}))
