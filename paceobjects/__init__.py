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

paceobjects maps the objects of the Pace web service onto Python models you
can read, change and save, and finds them with a fluent query builder.

paceobjects have:

* active-record `Model` instances that track their changes and save only
  through explicit calls

* a `Builder` that compiles filters, sorts and field lists into the web
  service's XPath filter syntax

* lazy `KeyCollection` results that read each object only when it is used,
  and never twice

* relationships between objects found by naming convention


Example
=======

For example, you can find a customer's open jobs in the shell::

    >>> from paceobjects import Client
    >>> client = Client.from_environ()
    >>> customer = client.model('Customer').read('HOUSE')
    >>> jobs = customer.related('jobs').filter('@adminStatus', 'O').get()
    >>> [job.description for job in jobs.paginate(1, 3)]
    ['Spring catalog', 'Window signs', 'Letterhead']


Models by convention
====================

A `Model` knows its type (``Job``, ``JobPart``, ``CSR``) and holds its
object's attributes by their names in the web service. An attribute named for
a type holds the key of an object of that type, so ``job.related('csr')``
reads the job's CSR. A pluralized type name refers to the objects that hold
this model's key in an attribute named for this model's type, so
``job.related('jobParts')`` builds a query for the parts of the job.

To reach the web service some way other than JSON over HTTP, implement a
`RemoteObjectService` and pass it to `Client`.

"""

__version__ = '1.0.0'
__author__ = 'paceobjects contributors'

from paceobjects.client import Client
from paceobjects.exceptions import (PaceError, ImproperlyConfigured,
    InvalidFormat, UnsupportedOperator, MissingKey, NotFound, KeyNotFound,
    Immutable, Fault)
from paceobjects.http import HttpObjectService
from paceobjects.keycollection import KeyCollection
from paceobjects.model import Model, RelationshipResolver, BelongsTo, HasMany
from paceobjects.service import RemoteObjectService, TransactionContext
from paceobjects.types import Type
from paceobjects.xpath import Builder

__all__ = ('Client', 'Model', 'KeyCollection', 'Builder', 'Type',
    'RemoteObjectService', 'HttpObjectService', 'TransactionContext',
    'RelationshipResolver', 'BelongsTo', 'HasMany', 'PaceError',
    'ImproperlyConfigured', 'InvalidFormat', 'UnsupportedOperator',
    'MissingKey', 'NotFound', 'KeyNotFound', 'Immutable', 'Fault')
