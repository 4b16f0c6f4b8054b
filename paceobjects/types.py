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

Object type names and their camelCase property names.

The web service names its object types in "Capitalized Words" (``Job``,
``JobPart``, ``GLAccount``) and refers to the same types in camelCase when
they appear as attributes or request members (``job``, ``jobPart``,
``glAccount``). Most names convert by changing the case of the first
character; types that begin with an acronym are looked up in
`irregular_names` instead.

Relationship accessors are pluralized property names (``jobParts``), so this
module also provides singular and plural inflection through a replaceable
inflector.

"""

import logging
import re

import inflection

from paceobjects.exceptions import InvalidFormat


log = logging.getLogger('paceobjects.types')

# Property names of types with adjacent uppercase letters.
irregular_names = {
    'apSetup': 'APSetup',
    'arSetup': 'ARSetup',
    'crmSetup': 'CRMSetup',
    'crmStatus': 'CRMStatus',
    'crmUser': 'CRMUser',
    'csr': 'CSR',
    'dsfMediaSize': 'DSFMediaSize',
    'dsfOrderStatus': 'DSFOrderStatus',
    'faSetup': 'FASetup',
    'glAccount': 'GLAccount',
    'glAccountBalance': 'GLAccountBalance',
    'glAccountBalanceSummary': 'GLAccountBalanceSummary',
    'glAccountBudget': 'GLAccountBudget',
    'glAccountingPeriod': 'GLAccountingPeriod',
    'glBatch': 'GLBatch',
    'glDepartment': 'GLDepartment',
    'glDepartmentLocation': 'GLDepartmentLocation',
    'glJournalEntry': 'GLJournalEntry',
    'glJournalEntryAudit': 'GLJournalEntryAudit',
    'glLocation': 'GLLocation',
    'glRegisterNumber': 'GLRegisterNumber',
    'glSchedule': 'GLSchedule',
    'glScheduleLine': 'GLScheduleLine',
    'glSetup': 'GLSetup',
    'glSplit': 'GLSplit',
    'glSummaryName': 'GLSummaryName',
    'jmfReceivedMessage': 'JMFReceivedMessage',
    'jmfReceivedMessagePartition': 'JMFReceivedMessagePartition',
    'jmfReceivedMessageTransaction': 'JMFReceivedMessageTransaction',
    'jmfReceivedMessageTransactionPartition': 'JMFReceivedMessageTransactionPartition',
    'poSetup': 'POSetup',
    'poStatus': 'POStatus',
    'rssChannel': 'RSSChannel',
    'uom': 'UOM',
    'uomDimension': 'UOMDimension',
    'uomRange': 'UOMRange',
    'uomSetup': 'UOMSetup',
    'uomType': 'UOMType',
    'wipCategory': 'WIPCategory',
}

irregular_types = dict((v, k) for k, v in irregular_names.items())

# Types whose primary key field can't be guessed from their attributes.
irregular_keys = {
    'FileAttachment': 'attachment',
}


def to_property_name(name):
    """Returns the camelCase property name for the type name `name`."""
    try:
        return irregular_types[name]
    except KeyError:
        return name[:1].lower() + name[1:]


def to_type_name(name):
    """Returns the type name for the camelCase property name `name`."""
    try:
        return irregular_names[name]
    except KeyError:
        return name[:1].upper() + name[1:]


def primary_key_field(name):
    """Returns the primary key field registered for type `name`, or `None`
    if the key field should be guessed."""
    return irregular_keys.get(name)


class EnglishInflector(object):

    """Singular and plural forms of English identifiers.

    Only the trailing word of a camelCase identifier is inflected, so
    ``jobStatuses`` becomes ``jobStatus``. Irregular and uncountable nouns are
    whatever the `inflection` library says they are. Words whose singular and
    plural forms coincide (``series``, ``equipment``) are reported by
    `is_ambiguous()`, since there is no telling which form the caller meant.

    To use other rules, implement `singularize()` and `pluralize()` on another
    object and pass it to `set_inflector()`.

    """

    def singularize(self, word):
        return inflection.singularize(word)

    def pluralize(self, word):
        return inflection.pluralize(word)

    def is_ambiguous(self, word):
        return self.singularize(word) == self.pluralize(word)


inflector = EnglishInflector()


def set_inflector(new_inflector):
    """Replaces the module's default inflector, returning the old one."""
    global inflector
    old, inflector = inflector, new_inflector
    return old


def singular(name):
    """Returns the singular form of the identifier `name`."""
    result = inflector.singularize(name)
    if getattr(inflector, 'is_ambiguous', None) and inflector.is_ambiguous(name):
        log.debug('Singular of %r is ambiguous; using %r', name, result)
    return result


def plural(name):
    """Returns the plural form of the identifier `name`."""
    return inflector.pluralize(name)


class Type(str):

    """The name of an object type in the web service, such as ``JobPart``.

    A `Type` is a string, so it can be used anywhere a type name is expected.
    Creating one validates the name:

    >>> Type('JobPart')
    'JobPart'
    >>> Type('jobPart')
    Traceback (most recent call last):
        ...
    InvalidFormat: Type 'jobPart' is not in the expected format

    Use `Type.from_property_name()` to start from a camelCase name.

    """

    pattern = re.compile(r'^[A-Z][A-Za-z0-9]*$')

    def __new__(cls, name):
        if not isinstance(name, str) or not cls.pattern.match(name):
            raise InvalidFormat('Type %r is not in the expected format' % (name,))
        return super(Type, cls).__new__(cls, name)

    @classmethod
    def from_property_name(cls, name):
        """Creates a `Type` from its camelCase property name."""
        return cls(to_type_name(name))

    @property
    def property_name(self):
        return to_property_name(self)

    @property
    def key_field(self):
        return primary_key_field(self)
