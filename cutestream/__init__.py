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


"""QDataStream (QVariant) decoder

Example usage:

# To decode a single QVariant
variant = cutestream.loadb(raw)
print(variant.type, variant.value)

# To read a sequence of individual fields
reader = cutestream.StreamReader(fp, byte_order=cutestream.LITTLE_ENDIAN)
count = reader.read_uint32()
names = [reader.read_string() for _ in range(count)]

To use a file-like object as input, use load() instead of loadb().
"""

from .decoder import (StreamReader, Variant, load, loadb, DecoderException, UnsupportedTypeException,
                      UnsupportedVersionException, BIG_ENDIAN, LITTLE_ENDIAN, VERSION_QT_5_13, VERSION_QT_6_0,
                      SUPPORTED_VERSIONS, SUPPORTED_TYPES)
from .dates import Date, Time

__version__ = '0.1.0'

__all__ = ('StreamReader', 'Variant', 'Date', 'Time', 'load', 'loadb', 'DecoderException',
           'UnsupportedTypeException', 'UnsupportedVersionException', 'BIG_ENDIAN', 'LITTLE_ENDIAN',
           'VERSION_QT_5_13', 'VERSION_QT_6_0', 'SUPPORTED_VERSIONS', 'SUPPORTED_TYPES')
