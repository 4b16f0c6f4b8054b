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

`Model` is an active record for one object in the web service.

A `Model` holds the attributes of one object of some `Type`, keeps a copy of
them as last synchronized with the web service so changes can be detected,
and knows how to create, read, update, delete and clone its object through a
`RemoteObjectService`.

Models also find their related objects by convention. An attribute named for
a type (a ``Job`` with a ``csr`` attribute) holds the key of a related object
of that type, and a pluralized type name (``jobParts`` on a ``Job``) names the
objects of that type whose attribute named for this type holds this model's
key:

>>> job = client.model('Job').read('12345')
>>> job.related('csr')                    # reads CSR job.csr
>>> job.related('jobParts').get()         # finds JobParts with @job = "12345"

"""

from collections import namedtuple
import logging

import simplejson as json

from paceobjects.exceptions import MissingKey, NotFound
from paceobjects.keycollection import KeyCollection
from paceobjects import types
from paceobjects.types import Type
from paceobjects.xpath import Builder


log = logging.getLogger('paceobjects.model')

PRIMARY_KEY = 'primaryKey'

KEY_DELIMITER = ':'


def join_keys(keys):
    """Joins the parts of a compound key."""
    return KEY_DELIMITER.join('' if k is None else str(k) for k in keys)


def split_key(key):
    """Splits a compound key into its parts."""
    return str(key).split(KEY_DELIMITER)


def is_compound_key(key):
    return isinstance(key, str) and KEY_DELIMITER in key


BelongsTo = namedtuple('BelongsTo', ('type', 'foreign_key'))
HasMany = namedtuple('HasMany', ('type', 'foreign_key'))


class RelationshipResolver(object):

    """Decides what relationship an accessor name refers to.

    If the accessor is the name of one of the model's attributes, the
    attribute holds the key of a related object whose type is named for the
    attribute: a `BelongsTo`. Otherwise the accessor is a pluralized type
    name, and the related objects refer back to the model through an
    attribute named for the model's type: a `HasMany`.

    """

    def __init__(self, owner_type, inflector=None):
        self.owner_type = Type(owner_type)
        self.inflector = inflector

    def singular(self, name):
        if self.inflector is None:
            return types.singular(name)
        return self.inflector.singularize(name)

    def resolve(self, accessor, attribute_names):
        if accessor in attribute_names:
            return BelongsTo(Type.from_property_name(accessor), accessor)

        related_type = Type.from_property_name(self.singular(accessor))
        return HasMany(related_type, self.owner_type.property_name)


class Model(object):

    """A record of one object in the web service.

    Attributes of the object are available as attributes of the model
    (``model.name``) or by subscript (``model['name']``); attributes that are
    not set read as `None`. Use subscripts for attributes whose names are
    also names of `Model` methods, such as ``key`` or ``filter``.

    A `Model` instance that has not been read from or saved to the web service
    also serves as the gateway to its type: `read()`, `find()` and the builder
    methods listed in `builder_methods` work on any instance.

    """

    # Builder methods available directly on models, each starting a new query.
    builder_methods = ('filter', 'or_filter', 'nested_filter', 'contains',
        'or_contains', 'starts_with', 'or_starts_with', 'in_', 'or_in',
        'sort', 'load', 'offset', 'limit', 'paginate', 'get', 'first',
        'first_or_fail', 'first_or_new')

    builder_class = Builder
    key_collection_class = KeyCollection

    # Instance state that is not an attribute of the remote object.
    local_fields = ('exists',)

    exists = False

    def __init__(self, service, type, attributes=None):
        """Creates a new, unsaved model.

        Parameter `service` is the `RemoteObjectService` to use. Parameter
        `type` is the name of the object type, and must be in the web
        service's "Capitalized Words" form (raising `InvalidFormat`
        otherwise). Optional parameter `attributes` is a mapping of the
        model's initial attributes, which are taken to be in sync with the
        web service.

        """
        self._service = service
        self._type = Type(type)
        self._attributes = dict(attributes or {})
        self._relations = {}
        self.sync_original()

    def make_builder_method(methodname):
        """Makes a method that starts a new query with the builder method
        `methodname`."""
        def builder_method(self, *args, **kwargs):
            return getattr(self.new_builder(), methodname)(*args, **kwargs)
        builder_method.__name__ = methodname
        builder_method.__doc__ = 'Starts a new query with `Builder.%s()`.' % methodname
        return builder_method

    filter         = make_builder_method('filter')
    or_filter      = make_builder_method('or_filter')
    nested_filter  = make_builder_method('nested_filter')
    contains       = make_builder_method('contains')
    or_contains    = make_builder_method('or_contains')
    starts_with    = make_builder_method('starts_with')
    or_starts_with = make_builder_method('or_starts_with')
    in_            = make_builder_method('in_')
    or_in          = make_builder_method('or_in')
    sort           = make_builder_method('sort')
    load           = make_builder_method('load')
    offset         = make_builder_method('offset')
    limit          = make_builder_method('limit')
    paginate       = make_builder_method('paginate')
    get            = make_builder_method('get')
    first          = make_builder_method('first')
    first_or_fail  = make_builder_method('first_or_fail')
    first_or_new   = make_builder_method('first_or_new')

    del make_builder_method

    @property
    def service(self):
        return self._service

    @property
    def type(self):
        return self._type

    @property
    def attributes(self):
        return dict(self._attributes)

    @property
    def original(self):
        return dict(self._original)

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)
        return self.get_attribute(name)

    def __setattr__(self, name, value):
        if name.startswith('_') or name in self.local_fields:
            super(Model, self).__setattr__(name, value)
        elif hasattr(type(self), name):
            raise AttributeError("Cannot set %r on %s; use model[%r] to set the attribute"
                % (name, type(self).__name__, name))
        else:
            self.set_attribute(name, value)

    def __delattr__(self, name):
        if name.startswith('_') or name in self.__dict__:
            super(Model, self).__delattr__(name)
        else:
            self.unset_attribute(name)

    def __getitem__(self, name):
        return self.get_attribute(name)

    def __setitem__(self, name, value):
        self.set_attribute(name, value)

    def __delitem__(self, name):
        self.unset_attribute(name)

    def __contains__(self, name):
        return self.has_attribute(name)

    def __iter__(self):
        return iter(self._attributes)

    def __eq__(self, other):
        """Returns whether two models are of the same type with the same
        attributes."""
        if not isinstance(other, Model):
            return NotImplemented
        return self._type == other._type and self._attributes == other._attributes

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        return '<%s %s %r>' % (type(self).__name__, self._type, self._attributes)

    def __str__(self):
        return json.dumps(self.to_dict(), default=str)

    def get_attribute(self, name):
        return self._attributes.get(name)

    def set_attribute(self, name, value):
        """Sets an attribute of the model.

        If `value` is another `Model`, its primary key is stored instead.

        """
        if isinstance(value, Model):
            value = value.key()
        self._attributes[name] = value

    def unset_attribute(self, name):
        self._attributes.pop(name, None)

    def has_attribute(self, name):
        return name in self._attributes

    def to_dict(self):
        return dict(self._attributes)

    def new_instance(self, attributes=None):
        """Returns a new, unsaved model of the same type."""
        return type(self)(self._service, self._type, attributes)

    def new_model(self, related_type):
        """Returns a new, unsaved model of another type, using the same
        service."""
        return type(self)(self._service, related_type)

    def new_builder(self):
        return self.builder_class(self)

    def new_key_collection(self, keys):
        """Wraps the results of a find in a `KeyCollection`."""
        keys = list(keys)
        if keys and hasattr(keys[0], 'items'):
            return self.key_collection_class.from_value_objects(self, keys)
        return self.key_collection_class(self, keys)

    def read(self, key):
        """Reads the object with the given primary key, returning a new model,
        or `None` if there is no such object.

        Keys that are `None`, empty or integer zero are not read at all: the
        web service doesn't consider them keys, and responds to them with a
        fault.

        """
        if not key:
            return None

        attributes = self._service.read(self._type, key)
        if attributes is None:
            return None

        model = self.new_instance(attributes)
        model.exists = True
        return model

    def read_or_fail(self, key):
        """Reads the object with the given primary key, raising `NotFound` if
        there is no such object."""
        model = self.read(key)
        if model is None:
            raise NotFound('%s [%s] does not exist.' % (self._type, key),
                type=self._type, key=key)
        return model

    def find(self, filter, sort=None, offset=None, limit=None, fields=None):
        """Finds the objects matching the filter expression `filter`,
        returning a `KeyCollection` of them.

        When specific `fields` are requested, the paging arguments default to
        the first thousand results.

        """
        if fields:
            if offset is None:
                offset = 0
            if limit is None:
                limit = 1000

        keys = self._service.find(self._type, filter, sort, offset, limit, fields or [])
        return self.new_key_collection(keys or [])

    def create(self, attributes):
        """Creates a new object with the given attributes, returning its
        model."""
        model = self.new_instance(attributes)
        model.save()
        return model

    def save(self):
        """Saves the model to the web service, creating its object if it does
        not yet exist.

        The model's attributes are replaced with those the web service
        responds with, so any defaults the service fills in are included.

        """
        if self.exists:
            log.debug('Updating %s %r', self._type, self._attributes)
            self._attributes = dict(self._service.update(self._type, self._attributes))
        else:
            log.debug('Creating %s %r', self._type, self._attributes)
            self._attributes = dict(self._service.create(self._type, self._attributes))
            self.exists = True

        self.sync_original()
        return True

    def delete(self, key_field=None):
        """Deletes the model's object, returning `True`, or `None` if the
        model was never saved."""
        if not self.exists:
            return None

        self._service.delete(self._type, self.key(key_field))
        self.exists = False
        return True

    def duplicate(self, new_key=None):
        """Clones the model's object, returning a model of the clone.

        The clone is made from the attributes as last synchronized, with any
        changes since applied to the clone only. This model's attributes are
        then restored, so it remains in sync with its object.

        """
        if not self.exists:
            return None

        attributes = self._service.clone(self._type, self.original,
            self.get_dirty(), new_key)

        model = self.new_instance(attributes)
        model.exists = True

        self.restore()
        return model

    def fresh(self, key_field=None):
        """Reads the model's object again, returning a new model."""
        if not self.exists:
            return None
        return self.read(self.key(key_field))

    def is_dirty(self):
        return self._attributes != self._original

    def get_dirty(self):
        """Returns the attributes that changed since the model was last
        synchronized."""
        return dict((name, value) for name, value in self._attributes.items()
            if name not in self._original or self._original[name] != value)

    def sync_original(self):
        self._original = dict(self._attributes)

    def restore(self):
        self._attributes = dict(self._original)

    def key(self, key_field=None):
        """Returns the model's primary key.

        The key is the attribute `key_field` if given. Otherwise it is the
        type's registered key field, ``primaryKey``, ``id`` or the attribute
        named for the type, whichever comes first.

        Raises `MissingKey` if the key is `None`, empty or zero.

        """
        key = self.get_attribute(key_field or self.guess_primary_key())
        if not key:
            raise MissingKey('Key must not be null.')
        return key

    def guess_primary_key(self):
        key_field = self._type.key_field
        if key_field:
            return key_field
        if self.has_attribute(PRIMARY_KEY):
            return PRIMARY_KEY
        if self.has_attribute('id'):
            return 'id'
        return self._type.property_name

    def join_keys(self, keys):
        return join_keys(keys)

    def split_key(self, key=None):
        """Splits a compound key into its parts. If `key` is not given, the
        model's own key is split."""
        if key is None:
            key = self.key()
        return split_key(key)

    def belongs_to(self, related_type, foreign_key):
        """Reads the related object of type `related_type` whose key is in the
        attribute `foreign_key`.

        A compound `foreign_key` such as ``'job:jobPart'`` names the
        attributes holding the parts of a compound key.

        """
        if is_compound_key(foreign_key):
            key = join_keys(self.get_attribute(name) for name in split_key(foreign_key))
        else:
            key = self.get_attribute(foreign_key)

        return self.new_model(related_type).read(key)

    def has_many(self, related_type, foreign_key, key_field=None):
        """Returns a `Builder` for the objects of type `related_type` whose
        attribute `foreign_key` holds this model's key.

        For a compound `foreign_key` such as ``'job:jobPart'``, each named
        attribute is matched against the matching part of this model's key.

        """
        builder = self.new_model(related_type).new_builder()

        if is_compound_key(foreign_key):
            names = split_key(foreign_key)
            values = self.split_key(self.key(key_field))
            for name, value in zip(names, values):
                builder.filter('@' + name, value)
        else:
            builder.filter('@' + foreign_key, self.key(key_field))

        return builder

    def morph_many(self, related_type, base_object='baseObject',
            base_object_key='baseObjectKey', key_field=None):
        """Returns a `Builder` for the objects of type `related_type` that
        refer to this model by type name and key, such as file attachments."""
        builder = self.new_model(related_type).new_builder()
        builder.filter('@' + base_object, str(self._type))
        builder.filter('@' + base_object_key, self.key(key_field))
        return builder

    def related(self, accessor):
        """Returns the related object or objects named by `accessor`.

        If the model has an attribute named `accessor`, the related object of
        the type named for it is read (once; later calls return the same
        model). Otherwise `accessor` should be a pluralized type name, and an
        unexecuted `Builder` for the related objects is returned.

        """
        relation = self.relationship_resolver().resolve(accessor, self._attributes)

        if isinstance(relation, BelongsTo):
            if accessor not in self._relations:
                self._relations[accessor] = self.belongs_to(*relation)
            return self._relations[accessor]

        return self.has_many(*relation)

    def relationship_resolver(self):
        return RelationshipResolver(self._type)

    def relation_loaded(self, accessor):
        return accessor in self._relations
