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

import logging
import sys

import httplib2
import mock
import simplejson as json


def make_response(response):
    """Returns an `httplib2.Response` and content for a mocked request.

    Parameter `response` is either the content of a successful JSON response,
    or a dictionary of response headers including ``status`` and optionally
    ``content``. Content that isn't a string is encoded as JSON.

    """
    default_response = {
        'status':       200,
        'content-type': 'application/json',
    }

    if isinstance(response, dict) and 'status' in response:
        response = dict(response)
        content = response.pop('content', '')
        status = response['status']
        if 200 <= status < 300:
            response_info = dict(default_response)
            response_info.update(response)
        else:
            # Homg all bets are off!! Use specified headers only.
            response_info = response
    else:
        response_info = dict(default_response)
        content = response

    if not isinstance(content, (str, bytes)):
        content = json.dumps(content)

    return httplib2.Response(response_info), content


def mock_http(*responses):
    """Returns a mock `httplib2.Http` that answers its requests with the
    given responses, in order."""
    http = mock.Mock(spec_set=httplib2.Http)
    http.request.side_effect = [make_response(r) for r in responses]
    return http


def out(value):
    """Returns the content of a successful response with result `value`."""
    return {'out': value}


def fault(message):
    """Returns a fault response with the given fault string."""
    return {'status': 500, 'content': {'fault': message},
        'content-type': 'application/json'}


def log():
    logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format="%(asctime)s %(levelname)s %(message)s")
