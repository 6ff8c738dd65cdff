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

"""
Decoders for the fixed-layout records consumed while rebuilding an SKSA.

Both records are stored big-endian, as laid out by the console's
secure kernel.
"""

import struct
from collections import namedtuple

from .errors import RecordDecodeError

# Content metadata header found right after the SK in an SKSA.
CMD_HEAD_FORMAT = '>IIIII16s20s16sIIII64sI16s256s'
CMD_HEAD_FIELDS = [
    'unused_padding',
    'ca_crl_version',
    'cp_crl_version',
    'size',
    'desc_flags',
    'common_cmd_iv',
    'hash',
    'iv',
    'exec_flags',
    'hw_access_rights',
    'secure_kernel_rights',
    'bbid',
    'issuer',
    'content_id',
    'key',
    'signature',
]

# Per-console data burnt into the Virage2 NVRAM.
VIRAGE2_FORMAT = '>20s16I64sI32s16s16s16s16sII'
VIRAGE2_ROM_PATCH_WORDS = 16
VIRAGE2_FIELDS = [
    'sk_hash',
    'rom_patch',
    'public_key',
    'bbid',
    'private_key',
    'boot_app_key',
    'recrypt_list_key',
    'app_state_key',
    'self_msg_key',
    'csum_adjust',
    'jtag_enable',
]


def _check_size(record, buf, size):
    if len(buf) < size:
        raise RecordDecodeError(record, size, len(buf))


class CmdHead(namedtuple('CmdHead', CMD_HEAD_FIELDS)):
    __slots__ = ()

    SIZE = struct.calcsize(CMD_HEAD_FORMAT)

    @classmethod
    def from_bytes(cls, buf):
        """Decode a command header from the start of `buf`."""
        _check_size("CmdHead", buf, cls.SIZE)
        return cls(*struct.unpack(CMD_HEAD_FORMAT, bytes(buf[:cls.SIZE])))

    def to_bytes(self):
        return struct.pack(CMD_HEAD_FORMAT, *self)

    @property
    def issuer_name(self):
        return self.issuer.split(b'\0', 1)[0].decode('ascii',
                                                      errors='replace')


class Virage2(namedtuple('Virage2', VIRAGE2_FIELDS)):
    __slots__ = ()

    SIZE = struct.calcsize(VIRAGE2_FORMAT)

    @classmethod
    def from_bytes(cls, buf):
        """Decode a Virage2 dump.  Trailing bytes are ignored."""
        _check_size("Virage2", buf, cls.SIZE)
        values = struct.unpack(VIRAGE2_FORMAT, bytes(buf[:cls.SIZE]))
        rom_patch = tuple(values[1:1 + VIRAGE2_ROM_PATCH_WORDS])
        rest = values[1 + VIRAGE2_ROM_PATCH_WORDS:]
        return cls(values[0], rom_patch, *rest)

    def to_bytes(self):
        return struct.pack(VIRAGE2_FORMAT, self.sk_hash, *self.rom_patch,
                           *self[2:])
