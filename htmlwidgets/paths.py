"""
Dotted path addressing over nested Python objects.

A path like ``"Addresses.0.Street"`` is split on ``.`` and interpreted
segment by segment against the data root. Every container met on the way
is wrapped in a value node that knows how to read, write and delete one
of its children:

* records: any object with attributes, e.g. dataclass instances
* mappings: ``MutableMapping`` with string keys
* sequences: ``MutableSequence`` indexed by non negative integers

Declared types (``typing`` hints on records, ``List[X]`` and
``Dict[str, X]`` arguments) are followed along the path so a sequence can
grow by one element in the middle of a path.
"""

from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from dataclasses import is_dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from functools import lru_cache
import inspect
import logging
import numbers
import re
import types
import typing

from dateutil import tz

from .const import LOGMSG_DEB_PATH_GROW
from .exceptions import AddressError

log = logging.getLogger(__name__)

# Go style zero time, written by the TimeWidget on unparsable input
ZERO_TIME = datetime(1, 1, 1, tzinfo=tz.UTC)

_INDEX_RE = re.compile(r"[0-9]+")

_SCALAR_TYPES = (
    str,
    bytes,
    bytearray,
    numbers.Number,
    date,
    time,
    timedelta,
    Enum,
)

_UNION_TYPES = (typing.Union, getattr(types, "UnionType", typing.Union))


def split_path(path):
    """
    Split a dotted path into its segments.

    :param path: Dotted path, e.g. ``"Extra.Items.2"``
    :return: List of non empty segments
    :raises AddressError: If the path or one of its segments is empty
    """
    if not path:
        raise AddressError("Empty path", path=path)
    segments = path.split(".")
    for segment in segments:
        if not segment:
            raise AddressError(
                "Empty segment in path %r" % path, path=path, segment=segment
            )
    return segments


def unwrap_hint(hint):
    """Strip ``Optional`` from a declared type, ``Any`` becomes None."""
    if hint is None or hint is typing.Any:
        return None
    if typing.get_origin(hint) in _UNION_TYPES:
        args = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        if len(args) == 1:
            return unwrap_hint(args[0])
        return None
    return hint


def zero_value(hint):
    """
    Create the empty value of a declared type.

    :param hint: A type or typing hint, may be None
    :return: The zero value, or None if the type is unknown or
        can't be built without arguments
    """
    hint = unwrap_hint(hint)
    if hint is None:
        return None
    origin = typing.get_origin(hint) or hint
    if not isinstance(origin, type):
        return None
    if issubclass(origin, Enum):
        # Enums have no empty member, IntEnum and str enums included
        return None
    if issubclass(origin, bool):
        return False
    if issubclass(origin, datetime):
        return ZERO_TIME
    if issubclass(origin, (str, int, float)):
        return origin()
    if origin in (list, MutableSequence, Sequence):
        return []
    if origin in (dict, MutableMapping, Mapping):
        return {}
    if is_dataclass(origin):
        try:
            return origin()
        except TypeError:
            return None
    return None


def _type_args(hint):
    hint = unwrap_hint(hint)
    if hint is None:
        return ()
    return typing.get_args(hint)


@lru_cache(maxsize=256)
def _record_hints(record_type):
    try:
        return typing.get_type_hints(record_type)
    except (NameError, TypeError):
        # Unresolvable forward references, fall back to undeclared fields
        return {}


def is_scalar(value):
    return value is None or isinstance(value, _SCALAR_TYPES)


class ValueNode(object):
    """
    A container met while walking a path.

    Subclasses implement the accessors for one container kind.
    """

    kind = "scalar"

    def __init__(self, value, hint=None, path=""):
        self.value = value
        self.hint = hint
        self.path = path

    def _error(self, message, segment):
        return AddressError(
            "%s (at %r)" % (message, self.path or "<root>"),
            path=self.path,
            segment=segment,
        )

    def child_hint(self, segment):
        return None

    def get(self, segment):
        raise self._error(
            "Can't descend into %s value with %r"
            % (type(self.value).__name__, segment),
            segment,
        )

    def descend(self, segment, grow=False):
        return self.get(segment)

    def set(self, segment, value):
        self.get(segment)

    def remove(self, segment):
        self.get(segment)


class RecordNode(ValueNode):
    """Object with fixed, named attributes"""

    kind = "record"

    def child_hint(self, segment):
        return _record_hints(type(self.value)).get(segment)

    def get(self, segment):
        if segment.startswith("_"):
            raise self._error("Field %r is not addressable" % segment, segment)
        try:
            value = getattr(self.value, segment)
        except AttributeError:
            raise self._error("Unknown field %r" % segment, segment) from None
        if inspect.isroutine(value):
            raise self._error("Field %r is not addressable" % segment, segment)
        return value

    def set(self, segment, value):
        self.get(segment)
        try:
            setattr(self.value, segment, value)
        except AttributeError as e:
            raise self._error(
                "Can't set field %r: %s" % (segment, e), segment
            ) from e

    def remove(self, segment):
        raise self._error("Can't remove field %r from a record" % segment, segment)


class MappingNode(ValueNode):
    """String keyed dynamic container"""

    kind = "mapping"

    def child_hint(self, segment):
        args = _type_args(self.hint)
        if len(args) == 2:
            return args[1]
        return None

    def get(self, segment):
        try:
            return self.value[segment]
        except KeyError:
            raise self._error("Missing key %r" % segment, segment) from None

    def descend(self, segment, grow=False):
        if grow and segment not in self.value:
            zero = zero_value(self.child_hint(segment))
            if zero is None:
                raise self._error(
                    "Missing key %r of unknown type" % segment, segment
                )
            self.value[segment] = zero
        return self.get(segment)

    def set(self, segment, value):
        self.value[segment] = value

    def remove(self, segment):
        if segment not in self.value:
            raise self._error("Missing key %r" % segment, segment)
        del self.value[segment]


class SequenceNode(ValueNode):
    """Contiguous, index keyed container that grows one element at a time"""

    kind = "sequence"

    def child_hint(self, segment):
        args = _type_args(self.hint)
        if len(args) == 1:
            return args[0]
        if len(self.value):
            # Undeclared element type, take it from the existing elements
            return type(self.value[0])
        return None

    def index(self, segment):
        if not _INDEX_RE.fullmatch(segment):
            raise self._error("Expected index, got %r" % segment, segment)
        return int(segment)

    def get(self, segment):
        index = self.index(segment)
        if index >= len(self.value):
            raise self._error(
                "Index %s out of range for %s elements" % (index, len(self.value)),
                segment,
            )
        return self.value[index]

    def descend(self, segment, grow=False):
        index = self.index(segment)
        if grow and index == len(self.value):
            zero = zero_value(self.child_hint(segment))
            if zero is None:
                raise self._error(
                    "Can't grow sequence with elements of unknown type", segment
                )
            self.value.append(zero)
            log.debug(LOGMSG_DEB_PATH_GROW, self.path, len(self.value))
        return self.get(segment)

    def set(self, segment, value):
        index = self.index(segment)
        if index == len(self.value):
            self.value.append(value)
            log.debug(LOGMSG_DEB_PATH_GROW, self.path, len(self.value))
        elif index < len(self.value):
            self.value[index] = value
        else:
            raise self._error(
                "Index %s leaves a gap after %s elements" % (index, len(self.value)),
                segment,
            )

    def remove(self, segment):
        self.get(segment)
        del self.value[self.index(segment)]


def value_node(value, hint=None, path=""):
    """
    Wrap a value in the node matching its container kind.

    :param value: Any value from the data graph
    :param hint: Declared type of the value, if known
    :param path: Path of the value, used in error messages
    """
    if is_scalar(value):
        return ValueNode(value, hint, path)
    if isinstance(value, MutableMapping):
        return MappingNode(value, hint, path)
    if isinstance(value, MutableSequence):
        return SequenceNode(value, hint, path)
    if is_dataclass(value) or hasattr(value, "__dict__") or hasattr(
        type(value), "__slots__"
    ):
        return RecordNode(value, hint, path)
    return ValueNode(value, hint, path)


class PathResolver(object):
    """
    Reads and mutates locations of a data root addressed by dotted paths.

    The resolver only references the data root, all changes are made in
    place. It is not thread safe.
    """

    def __init__(self, root):
        self.root = root

    def _parent(self, path, grow=False):
        """
        Walk to the container holding the last segment of ``path``.

        :return: Tuple of the parent value node and the last segment
        """
        segments = split_path(path)
        node = value_node(self.root, type(self.root))
        walked = []
        for segment in segments[:-1]:
            child = node.descend(segment, grow=grow)
            hint = node.child_hint(segment)
            walked.append(segment)
            node = value_node(child, hint, ".".join(walked))
        return node, segments[-1]

    def get(self, path):
        """
        Get the current value at ``path``.

        Reading never changes the data.

        :raises AddressError: If the path can't be resolved
        """
        node, segment = self._parent(path)
        return node.get(segment)

    def exists(self, path):
        try:
            self.get(path)
        except AddressError:
            return False
        return True

    def set(self, path, value):
        """
        Write ``value`` at ``path``.

        Sequences along the path may grow by exactly one element, the
        terminal sequence is appended to if the index equals its length
        and overwritten in place otherwise.

        :raises AddressError: If the path can't be resolved
        """
        node, segment = self._parent(path, grow=True)
        node.set(segment, value)

    def ensure(self, path):
        """
        Make sure ``path`` exists.

        A missing sequence element is created with the zero value of its
        declared type, None if the type is unknown. A missing mapping key
        is only created if its declared type has a zero value.

        :return: The value at ``path``
        :raises AddressError: If the path can't be resolved or a mapping
            key of unknown type is missing
        """
        node, segment = self._parent(path, grow=True)
        if isinstance(node, SequenceNode):
            if node.index(segment) == len(node.value):
                node.set(segment, zero_value(node.child_hint(segment)))
        elif isinstance(node, MappingNode):
            return node.descend(segment, grow=True)
        return node.get(segment)

    def remove(self, path):
        """
        Remove a mapping entry or a sequence element.

        Later sequence elements shift down by one, no gap is left behind.

        :raises AddressError: If the path can't be resolved
        """
        node, segment = self._parent(path)
        node.remove(segment)

    def length(self, path):
        """Number of elements of the sequence at ``path``."""
        value = self.get(path)
        if not isinstance(value, MutableSequence):
            raise AddressError(
                "Expected a sequence at %r, got %s" % (path, type(value).__name__),
                path=path,
            )
        return len(value)
