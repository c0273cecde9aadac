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


"""Converts a QDataStream-serialized QVariant to json"""

from sys import argv, stderr, stdout, stdin, exit  # pylint: disable=redefined-builtin
from base64 import b64encode
from datetime import datetime
from json import dump as jdump
from urllib.parse import ParseResult

from . import (load, DecoderException, UnsupportedVersionException, Variant, Date, Time, BIG_ENDIAN, LITTLE_ENDIAN,
               SUPPORTED_VERSIONS)


def __error(*args, **kwargs):
    print(*args, file=stderr, **kwargs)


def to_plain(obj):
    """Converts decoded values into json-serializable ones. Variant wrappers are dropped."""
    if isinstance(obj, Variant):
        return to_plain(obj.value)
    if isinstance(obj, dict):
        return {key: to_plain(value) for key, value in obj.items()}
    if isinstance(obj, ParseResult):
        return obj.geturl()
    if isinstance(obj, Date):
        return '%d-%02d-%02d' % obj
    if isinstance(obj, Time):
        return '%02d:%02d:%02d.%03d' % (obj.hour, obj.minute, obj.second, obj.msec)
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, bytes):
        return b64encode(obj).decode('ascii')
    if isinstance(obj, list):
        return [to_plain(item) for item in obj]
    return obj


def to_json(in_stream, out_stream, **kwargs):
    try:
        obj = load(in_stream, **kwargs)
    except DecoderException as ex:
        __error('Failed to decode QDataStream: %s' % ex)
        return 8
    try:
        jdump(to_plain(obj), out_stream, sort_keys=True, separators=(',', ':'))
    except (TypeError, ValueError) as ex:
        __error('Failed to encode to json: %s' % ex)
        return 16
    return 0


__OPTIONS = {'-l': ('byte_order', LITTLE_ENDIAN),
             '-b': ('byte_order', BIG_ENDIAN),
             '-d': ('double_precision', True)}


def __parse_args(args):
    kwargs = {}
    while args and args[0].startswith('-') and args[0] != '-':
        arg = args.pop(0)
        if arg.startswith('-v'):
            kwargs['version'] = int(arg[2:])
        elif arg in __OPTIONS:
            key, value = __OPTIONS[arg]
            kwargs[key] = value
        else:
            raise ValueError('Unknown option %s' % arg)
    return args, kwargs


def main():
    try:
        args, kwargs = __parse_args(argv[1:])
    except ValueError:
        args = None
    if not (args and 1 <= len(args) <= 2):
        print("""USAGE: cutestream [-l|-b] [-d] [-vVERSION] (INFILE|-) [OUTFILE]

Converts a QVariant serialized with QDataStream to json. Input is read from
INFILE unless set to '-', in which case stdin is used. If OUTFILE is not
specified, output goes to stdout.

  -l         little endian stream
  -b         big endian stream (default)
  -d         stream uses double precision floating point
  -vVERSION  stream version (19 or 20, default 19)""", file=stderr)
        return 1

    version = kwargs.get('version')
    if version is not None and version not in SUPPORTED_VERSIONS:
        __error(str(UnsupportedVersionException(version)))
        return 1

    in_file = out_file = None
    try:
        # input
        if args[0] == '-':
            in_stream = getattr(stdin, 'buffer', stdin)
        else:
            try:
                in_stream = in_file = open(args[0], 'rb')
            except IOError as ex:
                __error('Failed to open input file for reading: %s' % ex)
                return 2
        # output
        if len(args) == 1:
            out_stream = stdout
        else:
            try:
                out_stream = out_file = open(args[1], 'w')
            except IOError as ex:
                __error('Failed to open output file for writing: %s' % ex)
                return 4

        return to_json(in_stream, out_stream, **kwargs)
    except IOError as ex:
        __error('I/O failure: %s' % ex)
        return 2
    finally:
        if in_file:
            in_file.close()
        if out_file:
            out_file.close()


if __name__ == "__main__":
    exit(main())
