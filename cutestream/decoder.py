# Copyright (c) 2019 Iotic Labs Ltd. All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""QDataStream decoder"""

from io import BytesIO
from math import copysign, inf
from struct import Struct, error as StructError
from collections import namedtuple
from types import MappingProxyType
from urllib.parse import urlparse

from .dates import julian_to_date, msecs_to_time, combine
from .metatypes import (TYPE_BOOL, TYPE_INT, TYPE_UINT, TYPE_LONGLONG, TYPE_ULONGLONG, TYPE_DOUBLE, TYPE_QCHAR,
                        TYPE_QVARIANTMAP, TYPE_QVARIANTLIST, TYPE_QSTRING, TYPE_QSTRINGLIST, TYPE_QBYTEARRAY,
                        TYPE_QBITARRAY, TYPE_QDATE, TYPE_QTIME, TYPE_QDATETIME, TYPE_QURL, TYPE_QVARIANTHASH,
                        TYPE_QUUID, TYPE_LONG, TYPE_SHORT, TYPE_CHAR, TYPE_ULONG, TYPE_USHORT, TYPE_UCHAR, TYPE_FLOAT,
                        TYPE_SCHAR, type_name)

BIG_ENDIAN = '>'
LITTLE_ENDIAN = '<'

# QDataStream::Qt_5_13 & QDataStream::Qt_6_0
VERSION_QT_5_13 = 19
VERSION_QT_6_0 = 20
SUPPORTED_VERSIONS = (VERSION_QT_5_13, VERSION_QT_6_0)

# Length prefix denoting a null QString / QByteArray (as opposed to an empty one)
NULL_LENGTH = 0xFFFFFFFF

DEFAULT_MAX_DEPTH = 128

_UTF16 = {BIG_ENDIAN: 'utf-16-be', LITTLE_ENDIAN: 'utf-16-le'}
_STRUCTS = {order: {fmt: Struct(order + fmt) for fmt in 'bBhHiIqQfd'} for order in (BIG_ENDIAN, LITTLE_ENDIAN)}
__FLOAT32 = Struct('<f')


def _narrow_float(value):
    """Rounds a double to single precision, as a C float cast does (out of range values become infinite)."""
    try:
        return __FLOAT32.unpack(__FLOAT32.pack(value))[0]
    except OverflowError:
        return copysign(inf, value)


class DecoderException(ValueError):
    """Raised when decoding of a QDataStream fails."""

    def __init__(self, message, position=None):
        if position is not None:
            super(DecoderException, self).__init__('%s (at byte %d)' % (message, position), position)
        else:
            super(DecoderException, self).__init__(str(message), None)

    @property
    def position(self):
        """Position in stream where decoding failed. Can be None if the file-like object does not support tell()."""
        return self.args[1]  # pylint: disable=unsubscriptable-object


class UnsupportedTypeException(DecoderException):
    """Raised when a variant carries a type which cannot be decoded. Only the type and null flag have been consumed
    from the stream at this point."""

    def __init__(self, type_, position=None):
        name = type_name(type_)
        super(UnsupportedTypeException, self).__init__('Unsupported variant type %d%s' % (
            type_, '' if name is None else ' (%s)' % name), position)
        self.type = type_


class UnsupportedVersionException(ValueError):
    """Raised when a stream version outside of SUPPORTED_VERSIONS is requested."""

    def __init__(self, version):
        super(UnsupportedVersionException, self).__init__('%r is not a supported version, %s' % (
            version, list(SUPPORTED_VERSIONS)))
        self.version = version


class Variant(namedtuple('Variant', 'type value null')):
    """A decoded QVariant. A null variant has a value of None, regardless of its type. (A non-null variant can also
    have a value of None, e.g. for a null QString or an empty QUrl.)"""

    __slots__ = ()


class StreamReader(object):
    """Reads QDataStream-serialized values from a file-like object.

    Args:
        fp: read([size])-able object
        byte_order: BIG_ENDIAN (the QDataStream default) or LITTLE_ENDIAN
        double_precision (bool): Set if the stream was written with QDataStream::DoublePrecision. Affects how double
                                 values are read: 8 bytes if set, otherwise 4 bytes (single precision).
        version (int): Stream version, one of SUPPORTED_VERSIONS
        max_depth (int): Maximum nesting depth of variants. Exceeding it raises DecoderException.
        max_length (int): If set, any length or count prefix greater than this raises DecoderException before
                          the corresponding payload is read.

    A reader is not safe for use by multiple threads. After any failure, the stream position is undefined.
    """

    def __init__(self, fp, byte_order=BIG_ENDIAN, double_precision=False, version=VERSION_QT_5_13,
                 max_depth=DEFAULT_MAX_DEPTH, max_length=None):
        if not callable(fp.read):
            raise TypeError('fp.read not callable')
        if byte_order not in _STRUCTS:
            raise ValueError('byte_order must be BIG_ENDIAN or LITTLE_ENDIAN')
        self.__fp = fp
        self.__fp_read = fp.read
        self.__byte_order = byte_order
        self.__structs = _STRUCTS[byte_order]
        self.__utf16 = _UTF16[byte_order]
        self.__double_precision = bool(double_precision)
        self.__max_depth = max_depth
        self.__max_length = max_length
        self.__depth = 0
        self.__version = VERSION_QT_5_13
        self.set_version(version)

    @property
    def byte_order(self):
        return self.__byte_order

    @property
    def double_precision(self):
        return self.__double_precision

    @property
    def version(self):
        return self.__version

    @version.setter
    def version(self, version):
        self.set_version(version)

    def set_version(self, version):
        """Changes the stream version. Raises UnsupportedVersionException (leaving the version unchanged) if version
        is not one of SUPPORTED_VERSIONS."""
        if version not in SUPPORTED_VERSIONS:
            raise UnsupportedVersionException(version)
        self.__version = version

    def __position(self):
        try:
            return self.__fp.tell()
        except (AttributeError, OSError):
            return None

    def __unpack(self, fmt, name):
        struct_ = self.__structs[fmt]
        try:
            return struct_.unpack(self.__fp_read(struct_.size))[0]
        except StructError as ex:
            raise DecoderException('Failed to unpack %s' % name, self.__position()) from ex

    def __read_raw(self, length, name):
        raw = self.__fp_read(length)
        if len(raw) < length:
            raise DecoderException('%s too short' % name, self.__position())
        return raw

    def __check_length(self, length, name):
        if self.__max_length is not None and length > self.__max_length:
            raise DecoderException('%s length %d exceeds limit of %d' % (name, length, self.__max_length),
                                   self.__position())
        return length

    # Returns None for the null sentinel
    def __read_length(self, name):
        length = self.read_uint32()
        if length == NULL_LENGTH:
            return None
        return self.__check_length(length, name)

    def __read_count(self, name):
        return self.__check_length(self.read_uint32(), name)

    # Primitives

    def read_bool(self):
        return self.__unpack('B', 'bool') != 0

    def read_int8(self):
        return self.__unpack('b', 'int8')

    def read_uint8(self):
        return self.__unpack('B', 'uint8')

    def read_int16(self):
        return self.__unpack('h', 'int16')

    def read_uint16(self):
        return self.__unpack('H', 'uint16')

    def read_int32(self):
        return self.__unpack('i', 'int32')

    def read_uint32(self):
        return self.__unpack('I', 'uint32')

    def read_int64(self):
        return self.__unpack('q', 'int64')

    def read_uint64(self):
        return self.__unpack('Q', 'uint64')

    def read_float(self):
        """Reads an 8 byte value narrowed to single precision in double precision mode, otherwise a 4 byte single
        precision value."""
        if self.__double_precision:
            return _narrow_float(self.__unpack('d', 'float'))
        return self.__unpack('f', 'float')

    def read_double(self):
        """Reads an 8 byte value in double precision mode, otherwise a 4 byte single precision value."""
        if self.__double_precision:
            return self.__unpack('d', 'double')
        return self.__unpack('f', 'double')

    # Text & blobs

    def read_bytes(self):
        """Reads a QByteArray. Returns None for a null byte array."""
        length = self.__read_length('Byte array')
        if length is None:
            return None
        return self.__read_raw(length, 'Byte array')

    def read_string(self):
        """Reads a UTF-16 encoded QString. Returns None for a null string (and '' for an empty one)."""
        length = self.__read_length('String')
        if length is None:
            return None
        if length % 2:
            raise DecoderException('String length %d is not a multiple of 2' % length, self.__position())
        raw = self.__read_raw(length, 'String')
        try:
            return raw.decode(self.__utf16)
        except UnicodeError as ex:
            raise DecoderException('Failed to decode string', self.__position()) from ex

    def read_cstring(self):
        """Reads a char* (length including terminating NUL, followed by the bytes). Returns None for a null
        string."""
        length = self.__read_length('C-string')
        if length is None:
            return None
        raw = self.__read_raw(length, 'C-string')
        if raw.endswith(b'\0'):
            raw = raw[:-1]
        try:
            return raw.decode('utf-8')
        except UnicodeError as ex:
            raise DecoderException('Failed to decode C-string', self.__position()) from ex

    def read_string_list(self):
        return [self.read_string() for _ in range(self.__read_count('String list'))]

    def read_bit_array(self):
        """Reads a QBitArray as a list of bools. Bits are packed most significant bit first."""
        count = self.__read_count('Bit array')
        raw = self.__read_raw((count + 7) // 8, 'Bit array')
        return [bool((raw[i >> 3] >> (7 - (i & 7))) & 1) for i in range(count)]

    def read_uuid(self):
        """Reads a QUuid as a hex string of its 16 bytes, in the order they appear in the stream."""
        return self.__read_raw(16, 'Uuid').hex()

    def read_url(self):
        """Reads a QUrl as urllib.parse.ParseResult. Returns None for an empty (or null) url."""
        url = self.read_string()
        if not url:
            return None
        try:
            return urlparse(url)
        except ValueError as ex:
            raise DecoderException('Failed to parse url', self.__position()) from ex

    # Date & time

    def read_date(self):
        """Reads a QDate (Julian day number) as a Date."""
        # The day number is a qint64 in Qt, i.e. days before the start of the Julian period are negative.
        return julian_to_date(self.__unpack('q', 'date'))

    def read_time(self):
        """Reads a QTime (milliseconds since midnight) as a Time."""
        return msecs_to_time(self.read_uint32())

    def read_datetime(self):
        """Reads a QDateTime. Returns a naive datetime for local time and an aware (UTC) datetime otherwise."""
        date_ = self.read_date()
        time_ = self.read_time()
        utc = self.read_uint8() != 0
        try:
            return combine(date_, time_, utc)
        except (ValueError, OverflowError) as ex:
            raise DecoderException('Date-time out of range', self.__position()) from ex

    # Variants

    def read_variant(self):
        """Reads a QVariant.

        Returns:
            Variant

        Raises:
            UnsupportedTypeException: If the (non-null) variant type cannot be decoded
            DecoderException: For any other decoding failure

        QVariant types are mapped to Python types as follows.

            +---------------------------------+-------------------------+
            | QVariant                        | Python                  |
            +=================================+=========================+
            | bool                            | bool                    |
            +---------------------------------+-------------------------+
            | (u)char, (u)short, (u)int,      | int                     |
            | (u)long, (u)longlong, QChar     |                         |
            +---------------------------------+-------------------------+
            | float, double                   | float                   |
            +---------------------------------+-------------------------+
            | QString                         | str (None if null)      |
            +---------------------------------+-------------------------+
            | QStringList                     | list of str             |
            +---------------------------------+-------------------------+
            | QByteArray                      | bytes (None if null)    |
            +---------------------------------+-------------------------+
            | QBitArray                       | list of bool            |
            +---------------------------------+-------------------------+
            | QDate                           | Date                    |
            +---------------------------------+-------------------------+
            | QTime                           | Time                    |
            +---------------------------------+-------------------------+
            | QDateTime                       | datetime                |
            +---------------------------------+-------------------------+
            | QUrl                            | ParseResult (or None)   |
            +---------------------------------+-------------------------+
            | QUuid                           | str (hex)               |
            +---------------------------------+-------------------------+
            | QVariantList                    | list of Variant         |
            +---------------------------------+-------------------------+
            | QVariantMap, QVariantHash       | dict of str to Variant  |
            +---------------------------------+-------------------------+
        """
        type_ = self.read_uint32()
        if self.read_bool():
            return Variant(type_, None, True)

        method = VARIANT_READERS.get(type_)
        if method is None:
            raise UnsupportedTypeException(type_, self.__position())
        if self.__depth >= self.__max_depth:
            raise DecoderException('Maximum variant depth (%d) exceeded' % self.__max_depth, self.__position())

        self.__depth += 1
        try:
            return Variant(type_, method(self), False)
        finally:
            self.__depth -= 1

    def read_variant_list(self):
        return [self.read_variant() for _ in range(self.__read_count('Variant list'))]

    def read_variant_map(self):
        """Reads a QVariantMap (or QVariantHash). For duplicate keys, the last value wins."""
        obj = {}
        for _ in range(self.__read_count('Variant map')):
            key = self.read_string()
            obj[key] = self.read_variant()
        return obj


VARIANT_READERS = MappingProxyType({
    TYPE_BOOL: StreamReader.read_bool,
    TYPE_INT: StreamReader.read_int32,
    TYPE_UINT: StreamReader.read_uint32,
    TYPE_LONGLONG: StreamReader.read_int64,
    TYPE_ULONGLONG: StreamReader.read_uint64,
    TYPE_DOUBLE: StreamReader.read_double,
    TYPE_QCHAR: StreamReader.read_uint16,
    TYPE_QVARIANTMAP: StreamReader.read_variant_map,
    TYPE_QVARIANTLIST: StreamReader.read_variant_list,
    TYPE_QSTRING: StreamReader.read_string,
    TYPE_QSTRINGLIST: StreamReader.read_string_list,
    TYPE_QBYTEARRAY: StreamReader.read_bytes,
    TYPE_QBITARRAY: StreamReader.read_bit_array,
    TYPE_QDATE: StreamReader.read_date,
    TYPE_QTIME: StreamReader.read_time,
    TYPE_QDATETIME: StreamReader.read_datetime,
    TYPE_QURL: StreamReader.read_url,
    TYPE_QVARIANTHASH: StreamReader.read_variant_map,
    TYPE_QUUID: StreamReader.read_uuid,
    TYPE_LONG: StreamReader.read_int64,
    TYPE_SHORT: StreamReader.read_int16,
    TYPE_CHAR: StreamReader.read_uint8,
    TYPE_ULONG: StreamReader.read_uint64,
    TYPE_USHORT: StreamReader.read_uint16,
    TYPE_UCHAR: StreamReader.read_uint8,
    TYPE_FLOAT: StreamReader.read_float,
    TYPE_SCHAR: StreamReader.read_int8,
})

SUPPORTED_TYPES = frozenset(VARIANT_READERS)


def load(fp, byte_order=BIG_ENDIAN, double_precision=False, version=VERSION_QT_5_13, max_depth=DEFAULT_MAX_DEPTH,
         max_length=None):
    """Decodes and returns a single QVariant from the given file-like object. See StreamReader for arguments.

    Returns:
        Variant

    Raises:
        DecoderException: If decoding failed
        UnsupportedVersionException: If version is not supported
    """
    return StreamReader(fp, byte_order=byte_order, double_precision=double_precision, version=version,
                        max_depth=max_depth, max_length=max_length).read_variant()


def loadb(chars, byte_order=BIG_ENDIAN, double_precision=False, version=VERSION_QT_5_13, max_depth=DEFAULT_MAX_DEPTH,
          max_length=None):
    """Decodes and returns a single QVariant from the given bytes or bytearray object. See load() for arguments."""
    with BytesIO(chars) as fp:
        return load(fp, byte_order=byte_order, double_precision=double_precision, version=version,
                    max_depth=max_depth, max_length=max_length)
