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

Exceptions raised by `paceobjects`.

Every exception here is a `PaceError`, and each also derives from the
built-in exception it most resembles, so callers may catch either.

"""


class PaceError(Exception):
    """A general `paceobjects` exception."""
    pass


class ImproperlyConfigured(PaceError):
    """Raised when a `Client` cannot be built from the available settings."""
    pass


class InvalidFormat(PaceError, ValueError):
    """Raised when a type name is not in the "Capitalized Words" shape the
    web service uses for its object types."""
    pass


class UnsupportedOperator(PaceError, ValueError):
    """Raised when a filter is added with an operator or function the filter
    syntax does not know."""
    pass


class MissingKey(PaceError, ValueError):
    """Raised when a model has no usable primary key value.

    The web service treats integer zero and empty strings as "no key", so
    those values count as missing too.

    """
    pass


class NotFound(PaceError, LookupError):
    """Raised by the "or fail" operations when no object matches."""

    def __init__(self, message, type=None, key=None):
        super(NotFound, self).__init__(message)
        self.type = type
        self.key = key


class KeyNotFound(PaceError, KeyError):
    """Raised when a `KeyCollection` is asked for a key it does not hold."""

    def __str__(self):
        # KeyError would repr() the message.
        return str(self.args[0]) if self.args else ''


class Immutable(PaceError, TypeError):
    """Raised on any attempt to change the keys of a `KeyCollection`."""
    pass


class Fault(PaceError):
    """An error reported by the web service itself.

    The message is the fault string the service responded with, unchanged.

    """
    pass
