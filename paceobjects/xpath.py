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

A fluent builder for the web service's XPath filter syntax.

The find operations of the web service take a filter expression such as::

    @job = "12345" and (starts-with(@name, "Jane") or @active = 'true')

plus an optional list of sorts. Rather than write these strings by hand,
build them with a `Builder`:

>>> b = Builder().filter('@job', '12345')
>>> b = b.filter(lambda n: n.starts_with('@name', 'Jane').or_filter('@active', True))
>>> print(b.to_xpath())
@job = "12345" and (starts-with(@name, "Jane") or @active = 'true')

A `Builder` made by a `Model` (through `Model.new_builder()` or any of the
builder methods a `Model` passes through) can also run its query, through
`find()`, `get()`, `first()` and friends.

"""

from datetime import date
from decimal import Decimal
import logging
import re

from paceobjects.exceptions import NotFound, UnsupportedOperator


log = logging.getLogger('paceobjects.xpath')


class Builder(object):

    operators = ('=', '!=', '<', '>', '<=', '>=')
    functions = ('contains', 'starts-with')

    leading_boolean = re.compile(r'^and |^or ')

    def __init__(self, model=None):
        self.model = model
        self.filters = []
        self.sorts = []
        self.fields = {}
        self._offset = 0
        self._limit = None

    def filter(self, xpath, operator=None, value=None, boolean='and'):
        """Adds a filter and returns the builder.

        With two arguments, the second is the value to compare to and the
        operator is ``=``, unless the second argument is itself an operator.

        If `xpath` is callable, it is called with a new `Builder` and the
        filters it adds are grouped in parentheses, joined to this builder's
        filters with `boolean`.

        """
        if callable(xpath):
            return self.nested_filter(xpath, boolean)

        if value is None and not self.is_operator(operator):
            value, operator = operator, '='

        if not self.is_operator(operator) and not self.is_function(operator):
            raise UnsupportedOperator("Operator '%s' is not supported" % (operator,))

        self.filters.append(dict(xpath=xpath, operator=operator, value=value,
            boolean=boolean))
        return self

    def or_filter(self, xpath, operator=None, value=None):
        return self.filter(xpath, operator, value, 'or')

    def nested_filter(self, callback, boolean='and'):
        builder = type(self)()
        callback(builder)
        self.filters.append(dict(builder=builder, boolean=boolean))
        return self

    def contains(self, xpath, value=None, boolean='and'):
        return self.filter(xpath, 'contains', value, boolean)

    def or_contains(self, xpath, value=None):
        return self.filter(xpath, 'contains', value, 'or')

    def starts_with(self, xpath, value=None, boolean='and'):
        return self.filter(xpath, 'starts-with', value, boolean)

    def or_starts_with(self, xpath, value=None):
        return self.filter(xpath, 'starts-with', value, 'or')

    def in_(self, xpath, values, boolean='and'):
        """Adds a group of ``=`` filters joined by ``or``, one per value."""
        def alternatives(builder):
            for value in values:
                builder.filter(xpath, '=', value, 'or')
        return self.nested_filter(alternatives, boolean)

    def or_in(self, xpath, values):
        return self.in_(xpath, values, 'or')

    def sort(self, xpath, descending=False):
        self.sorts.append(dict(xpath=xpath, descending=descending))
        return self

    def load(self, fields):
        """Requests only the given fields be loaded.

        Parameter `fields` is a field path such as ``'@description'``, a
        mapping of names to field paths, or a sequence of either. Paths given
        without a name are named for the path without its leading ``@``.

        """
        if isinstance(fields, str):
            fields = [fields]
        elif hasattr(fields, 'items'):
            fields = [fields]

        for field in fields:
            if isinstance(field, str):
                self.fields[field.lstrip('@')] = field
            else:
                self.fields.update(field)
        return self

    def offset(self, offset):
        self._offset = offset
        return self

    def limit(self, limit):
        self._limit = limit
        return self

    def paginate(self, page, per_page=25):
        """Limits the results to the given page, counting from 1."""
        offset = max(page - 1, 0) * per_page
        return self.offset(offset).limit(per_page)

    def find(self):
        """Runs the query, returning a `KeyCollection` of the results."""
        if self.model is None:
            raise ValueError('Cannot find with %r; it was not built from a model' % (self,))

        xpath = self.to_xpath()
        log.debug('Finding %s where %r', self.model.type, xpath)
        return self.model.find(xpath, self.to_xpath_sort(),
            self._offset, self._limit, self.to_field_descriptor())

    def get(self):
        return self.find()

    def first(self):
        """Returns the first matching model, or `None` if nothing matched."""
        return self.find().first()

    def first_or_fail(self):
        result = self.first()
        if result is None:
            raise NotFound('No filtered results for model [%s].' % (self.model.type,),
                type=self.model.type)
        return result

    def first_or_new(self):
        result = self.first()
        if result is None:
            return self.model.new_instance()
        return result

    def to_xpath(self):
        """Returns the filter expression."""
        xpath = []
        for f in self.filters:
            if 'builder' in f:
                xpath.append(self.compile_nested(f))
            elif self.is_function(f['operator']):
                xpath.append(self.compile_function(f))
            else:
                xpath.append(self.compile_filter(f))

        return self.leading_boolean.sub('', ' '.join(xpath), count=1)

    def to_xpath_sort(self):
        """Returns the sorts as the web service expects them, or `None` if
        there are no sorts."""
        if not self.sorts:
            return None
        return {'XPathDataSort': [dict(s) for s in self.sorts]}

    def to_field_descriptor(self):
        return [{'name': name, 'xpath': xpath}
            for name, xpath in self.fields.items()]

    def compile_filter(self, f):
        return '%s %s %s %s' % (f['boolean'], f['xpath'], f['operator'],
            self.value(f['value']))

    def compile_function(self, f):
        return '%s %s(%s, %s)' % (f['boolean'], f['operator'], f['xpath'],
            self.value(f['value']))

    def compile_nested(self, f):
        return '%s (%s)' % (f['boolean'], f['builder'].to_xpath())

    def is_function(self, operator):
        return isinstance(operator, str) and operator in self.functions

    def is_operator(self, operator):
        return isinstance(operator, str) and operator in self.operators

    def value(self, value):
        """Returns the filter syntax for a Python value.

        Strings are quoted but not escaped; a string containing a double quote
        will produce an expression the web service can't parse. `None` is the
        empty string.

        """
        if value is None:
            return '""'
        if isinstance(value, bool):
            return "'true'" if value else "'false'"
        if isinstance(value, (int, float, Decimal)):
            return str(value)
        if isinstance(value, date):
            return self.date(value)
        return '"%s"' % (value,)

    def date(self, value):
        return 'date(%d, %d, %d)' % (value.year, value.month, value.day)

    def __repr__(self):
        return '<%s %r>' % (type(self).__name__, self.to_xpath())
