# SPDX-License-Identifier: Apache-2.0
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

import struct

import pytest

from bbbs.errors import RecordDecodeError
from bbbs.records import CmdHead, Virage2
from conftest import BOOT_APP_KEY, SA1_IV, make_cmd_head, make_virage2


def test_record_sizes():
    assert CmdHead.SIZE == 0x1ac
    assert Virage2.SIZE == 0x100


def test_cmd_head_layout():
    raw = make_cmd_head(size=0x5000).to_bytes()
    assert len(raw) == CmdHead.SIZE
    # size is the fourth big-endian word
    assert struct.unpack('>I', raw[12:16])[0] == 0x5000
    # common cmd iv, hash, then the SA1 iv
    assert raw[0x38:0x48] == SA1_IV

    cmd = CmdHead.from_bytes(raw + b"\xff" * 64)
    assert cmd.size == 0x5000
    assert cmd.iv == SA1_IV
    assert cmd.issuer_name == "Root-CA00000001-CP00000002"
    assert cmd == make_cmd_head(size=0x5000)


def test_virage2_layout():
    v2 = make_virage2(bbid=0xcafe)
    raw = v2.to_bytes()
    assert len(raw) == Virage2.SIZE
    assert raw[0xb8:0xc8] == BOOT_APP_KEY
    assert struct.unpack('>I', raw[0x94:0x98])[0] == 0xcafe

    decoded = Virage2.from_bytes(raw)
    assert decoded == v2
    assert decoded.rom_patch == tuple(range(16))


@pytest.mark.parametrize("record, size", [(CmdHead, 0x1ac),
                                          (Virage2, 0x100)])
def test_truncated_record(record, size):
    with pytest.raises(RecordDecodeError) as e:
        record.from_bytes(bytes(size - 1))
    assert e.value.record == record.__name__
    assert e.value.expected == size
    assert e.value.actual == size - 1
    assert record.__name__ in e.value.format_message()
