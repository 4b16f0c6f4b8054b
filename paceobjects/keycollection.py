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

`KeyCollection` is the result of a find: the primary keys that matched,
standing in for the models they identify.

The keys are fetched by the find itself, but no model is read from the web
service until it is used. Each key is read at most once per collection, so
iterating a collection twice costs no more requests than iterating it once.

"""

import logging

import simplejson as json

from paceobjects.exceptions import Immutable, KeyNotFound


log = logging.getLogger('paceobjects.keycollection')

# A position with no key, such as the first key of an empty collection.
NO_KEY = object()


class KeyCollection(object):

    """An immutable, ordered set of primary keys that reads its models
    lazily.

    `KeyCollection` instances support ``len()``, iteration (yielding models)
    and ``in`` (testing keys). Subscripting a collection with a key returns
    the model for that key; subscripting with a slice returns a new
    collection of a portion of the keys. Collections can't be changed: the
    methods that would change one return a new collection instead.

    """

    def __init__(self, model, keys):
        """Sets the model to read with and the keys to read.

        Parameter `model` is any `Model` of the right type; only its `read()`
        method is used. Parameter `keys` is the sequence of primary keys.

        """
        self.model = model
        self._keys = list(keys)
        self._read_models = {}

    @classmethod
    def from_value_objects(cls, model, objects):
        """Creates a `KeyCollection` from partially loaded value objects.

        Value objects are the results of a find that requested specific
        fields. Each is either a mapping of field names to values including a
        ``primaryKey``, or a mapping with a ``primaryKey`` and a ``fields``
        list of ``name``/``value`` mappings. The models are built from the
        value objects directly, so no reads are needed for them.

        """
        keys = []
        read_models = {}
        for obj in objects:
            attributes = dict(obj)
            if 'fields' in attributes:
                fields = attributes.pop('fields') or []
                attributes.update((f['name'], f.get('value')) for f in fields)
            key = attributes['primaryKey']
            keys.append(key)

            loaded = model.new_instance(attributes)
            loaded.exists = True
            read_models[(type(key), key)] = loaded

        self = cls(model, keys)
        self._read_models.update(read_models)
        return self

    def __len__(self):
        return len(self._keys)

    def __iter__(self):
        for key in self._keys:
            yield self.read(key)

    def __contains__(self, key):
        return self.has(key)

    def __getitem__(self, key):
        """Returns the model for the given key, or a new collection of the
        keys in the given slice."""
        if isinstance(key, slice):
            if key.step is not None:
                raise TypeError("%s slices can't have a step" % (type(self).__name__,))
            return self.fresh(self._keys[key.start:key.stop])
        return self.get(key)

    def __setitem__(self, key, value):
        raise Immutable("Unable to set key '%s': %s is immutable"
            % (key, type(self).__name__))

    def __delitem__(self, key):
        raise Immutable("Unable to unset key '%s': %s is immutable"
            % (key, type(self).__name__))

    def __repr__(self):
        return '<%s of %s %r>' % (type(self).__name__,
            getattr(self.model, 'type', None), self._keys)

    def __str__(self):
        return self.to_json()

    def count(self):
        return len(self._keys)

    def is_empty(self):
        return not self._keys

    def keys(self):
        return list(self._keys)

    def items(self):
        """Yields a pair of each key and its model, in order."""
        for key in self._keys:
            yield key, self.read(key)

    def has(self, key):
        """Returns whether the collection holds exactly `key`.

        Keys of different types never match, so ``1`` does not match ``'1'``,
        ``1.0`` or ``True``.

        """
        return any(type(k) is type(key) and k == key for k in self._keys)

    def get(self, key):
        """Returns the model for `key`, reading it if necessary.

        Raises `KeyNotFound` if the collection does not hold `key`.

        """
        if not self.has(key):
            raise KeyNotFound("The key '%s' does not exist" % (key,))
        return self.read(key)

    def first(self):
        return self.read(self._keys[0] if self._keys else NO_KEY)

    def last(self):
        return self.read(self._keys[-1] if self._keys else NO_KEY)

    def all(self):
        """Reads all the keys, returning a list of their models."""
        return list(self)

    def pluck(self, value, key=None):
        """Returns the `value` attribute of every model.

        If `key` is given, returns a dictionary of the `value` attributes keyed
        by the `key` attributes. Otherwise returns a list.

        """
        models = self.all()
        if key is not None:
            return dict((m.get_attribute(key), m.get_attribute(value))
                for m in models)
        return [m.get_attribute(value) for m in models]

    def diff(self, keys):
        """Returns a collection of the keys not in `keys`, which may be
        another `KeyCollection` or a sequence of keys."""
        if isinstance(keys, KeyCollection):
            keys = keys.keys()
        keys = list(keys)
        return self.fresh(k for k in self._keys if k not in keys)

    def filter_keys(self, callback):
        """Returns a collection of the keys for which `callback` returns a
        true value."""
        return self.fresh(k for k in self._keys if callback(k))

    def slice(self, offset, length=None):
        if length is None:
            return self.fresh(self._keys[offset:])
        return self.fresh(self._keys[offset:offset + length])

    def paginate(self, page, per_page=25):
        """Returns a collection of the keys on the given page, counting from 1."""
        offset = max(page - 1, 0) * per_page
        return self.slice(offset, per_page)

    def to_json(self):
        """Returns a JSON object of the models' attributes keyed by their
        primary keys."""
        return json.dumps(dict((str(k), None if m is None else m.to_dict())
            for k, m in self.items()), default=str)

    def fresh(self, keys):
        return type(self)(self.model, keys)

    def read(self, key):
        """Returns the model for `key`, reading it only if it has not been
        read by this collection before."""
        if key is NO_KEY:
            return None

        # Keyed by type as well, so 1 and True are read separately.
        cache_key = (type(key), key)
        if cache_key not in self._read_models:
            log.debug('Reading %s %r', getattr(self.model, 'type', None), key)
            self._read_models[cache_key] = self.model.read(key)

        return self._read_models[cache_key]
