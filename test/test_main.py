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


from base64 import b64encode
from datetime import datetime, timezone
from io import BytesIO, StringIO
from json import loads
from struct import pack
from unittest import TestCase
from unittest.mock import patch
from urllib.parse import urlparse

from cutestream import Variant, Date, LITTLE_ENDIAN
from cutestream.dates import msecs_to_time
from cutestream.metatypes import TYPE_INT, TYPE_QVARIANTMAP, TYPE_QBYTEARRAY, TYPE_QSTRING, TYPE_QRECT
from cutestream.__main__ import to_json, to_plain, main

from streams import qstring, qbytes, variant, variant_map


class TestToJson(TestCase):

    def test_to_plain(self):
        self.assertEqual(to_plain(Variant(TYPE_INT, 1, False)), 1)
        self.assertEqual(to_plain(Date(2022, 5, 3)), '2022-05-03')
        self.assertEqual(to_plain(Date(-1, 12, 31)), '-1-12-31')
        self.assertEqual(to_plain(msecs_to_time(9751123)), '02:42:31.123')
        self.assertEqual(to_plain(datetime(2022, 5, 3, 12, tzinfo=timezone.utc)), '2022-05-03T12:00:00+00:00')
        self.assertEqual(to_plain(b'\x00\x01'), b64encode(b'\x00\x01').decode('ascii'))
        self.assertEqual(to_plain(urlparse('http://example.com/a')), 'http://example.com/a')
        self.assertEqual(to_plain([Variant(TYPE_QSTRING, None, True), {'a': Variant(TYPE_INT, 2, False)}]),
                         [None, {'a': 2}])

    def test_to_json(self):
        raw = variant(TYPE_QVARIANTMAP, variant_map((
            ('int', variant(TYPE_INT, pack('>i', -5))),
            ('bytes', variant(TYPE_QBYTEARRAY, qbytes(b'abc'))),
            ('str', variant(TYPE_QSTRING, qstring('text'))))))
        out = StringIO()
        self.assertEqual(to_json(BytesIO(raw), out), 0)
        self.assertEqual(loads(out.getvalue()), {'int': -5, 'bytes': 'YWJj', 'str': 'text'})

    def test_to_json_options(self):
        out = StringIO()
        self.assertEqual(to_json(BytesIO(variant(TYPE_INT, pack('<i', 7), LITTLE_ENDIAN)), out,
                                 byte_order=LITTLE_ENDIAN), 0)
        self.assertEqual(loads(out.getvalue()), 7)

    def test_to_json_failure(self):
        for raw in (b'', variant(TYPE_QRECT, b''), variant(TYPE_INT, b'\x00')):
            with patch('cutestream.__main__.stderr', new_callable=StringIO) as err:
                self.assertEqual(to_json(BytesIO(raw), StringIO()), 8)
            self.assertIn('Failed to decode', err.getvalue())


class TestMain(TestCase):

    def run_main(self, *args):
        with patch('cutestream.__main__.argv', ['cutestream'] + list(args)), \
                patch('cutestream.__main__.stderr', new_callable=StringIO) as err:
            return main(), err.getvalue()

    def test_usage(self):
        for args in ((), ('-x', 'in'), ('-v', 'in'), ('a', 'b', 'c')):
            code, err = self.run_main(*args)
            self.assertEqual(code, 1)
            self.assertIn('USAGE', err)

    def test_missing_input(self):
        code, err = self.run_main('/nonexistent/input.bin')
        self.assertEqual(code, 2)
        self.assertIn('Failed to open input file', err)

    def test_unsupported_version(self):
        # rejected before any file is opened
        with patch('cutestream.__main__.open', create=True) as mock_open:
            for args in (('-v21', '/nonexistent/input.bin'), ('-v21', __file__), ('-v18', __file__, 'out.json')):
                code, err = self.run_main(*args)
                self.assertEqual(code, 1)
                self.assertIn('not a supported version', err)
            mock_open.assert_not_called()
