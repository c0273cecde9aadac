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


"""QMetaType codes as written by QDataStream when streaming a QVariant.

The numbering follows qtbase/corelib/kernel/qmetatype.h. Codes for types which
cannot be decoded (GUI, geometry etc.) are still listed so that they are never
reused for something else.
"""

TYPE_BOOL = 1
TYPE_INT = 2
TYPE_UINT = 3
TYPE_LONGLONG = 4
TYPE_ULONGLONG = 5
TYPE_DOUBLE = 6
TYPE_QCHAR = 7
TYPE_QVARIANTMAP = 8
TYPE_QVARIANTLIST = 9
TYPE_QSTRING = 10
TYPE_QSTRINGLIST = 11
TYPE_QBYTEARRAY = 12
TYPE_QBITARRAY = 13
TYPE_QDATE = 14
TYPE_QTIME = 15
TYPE_QDATETIME = 16
TYPE_QURL = 17
TYPE_QLOCALE = 18
TYPE_QRECT = 19
TYPE_QRECTF = 20
TYPE_QSIZE = 21
TYPE_QSIZEF = 22
TYPE_QLINE = 23
TYPE_QLINEF = 24
TYPE_QPOINT = 25
TYPE_QPOINTF = 26
TYPE_QREGEXP = 27
TYPE_QVARIANTHASH = 28
TYPE_QEASINGCURVE = 29
TYPE_QUUID = 30
TYPE_VOIDSTAR = 31
TYPE_LONG = 32
TYPE_SHORT = 33
TYPE_CHAR = 34
TYPE_ULONG = 35
TYPE_USHORT = 36
TYPE_UCHAR = 37
TYPE_FLOAT = 38
TYPE_QOBJECTSTAR = 39
TYPE_SCHAR = 40
TYPE_QVARIANT = 41
TYPE_QMODELINDEX = 42
TYPE_VOID = 43
TYPE_QREGULAREXPRESSION = 44
TYPE_QJSONVALUE = 45
TYPE_QJSONOBJECT = 46
TYPE_QJSONARRAY = 47
TYPE_QJSONDOCUMENT = 48

# GUI types
TYPE_QFONT = 64
TYPE_QPIXMAP = 65
TYPE_QBRUSH = 66
TYPE_QCOLOR = 67
TYPE_QPALETTE = 68
TYPE_QICON = 69
TYPE_QIMAGE = 70
TYPE_QPOLYGON = 71
TYPE_QREGION = 72
TYPE_QBITMAP = 73
TYPE_QCURSOR = 74
TYPE_QKEYSEQUENCE = 75
TYPE_QPEN = 76
TYPE_QTEXTLENGTH = 77
TYPE_QTEXTFORMAT = 78
TYPE_QMATRIX = 79
TYPE_QTRANSFORM = 80
TYPE_QMATRIX4X4 = 81
TYPE_QVECTOR2D = 82
TYPE_QVECTOR3D = 83
TYPE_QVECTOR4D = 84
TYPE_QQUATERNION = 85
TYPE_QPOLYGONF = 86

# Widget types
TYPE_QSIZEPOLICY = 121


def __build_names():
    return {code: name[5:] for name, code in globals().items() if name.startswith('TYPE_')}


NAMES = __build_names()


def type_name(code):
    """Returns the symbolic name for the given type code, or None if the code is not known."""
    return NAMES.get(code)
