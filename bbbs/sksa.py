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
SKSA rebuilding.

An SKSA is the SK (secure kernel) ciphertext, followed by the SA1 info
block holding the command header, followed by the SA1 ciphertext.  A
rebuild keeps the SK and the info block and replaces SA1 with a new
image wrapping an arbitrary payload, encrypted under the SA1 key
recovered through the Virage2 boot app key.
"""

import logging
import struct

from .bootrom import derive_sk_keys
from .crypto import AES_BLOCK_SIZE, aes_cbc_decrypt, aes_cbc_encrypt, sha1
from .errors import (
    InvalidImageSize, InvalidSKHash, PayloadTooLarge, SKSATooShort)
from .records import CmdHead, Virage2

SK_SIZE = 64 * 1024
SA1_CMD_HEAD_SIZE = CmdHead.SIZE
SA1_INFO_BLOCK_SIZE = 16 * 1024
SKSA_MIN_BYTES = SK_SIZE + SA1_INFO_BLOCK_SIZE

ROM_HEADER_SIZE = 4 * 1024
ENTRYPOINT_OFFSET = 2 * struct.calcsize('>I')

UNZIP_BUF_OFFSET = 0x80300000

log = logging.getLogger(__name__)


class SKSA:
    """Read-only view over the regions of an SKSA buffer."""

    def __init__(self, data):
        check_sksa_length(data)
        self.data = bytes(data)

    @property
    def sk(self):
        return self.data[:SK_SIZE]

    @property
    def cmd_head_bytes(self):
        return self.data[SK_SIZE:SK_SIZE + SA1_CMD_HEAD_SIZE]

    @property
    def info_block(self):
        return self.data[SK_SIZE:SKSA_MIN_BYTES]

    @property
    def prefix(self):
        """SK and SA1 info block, carried unchanged into a rebuilt SKSA."""
        return self.data[:SKSA_MIN_BYTES]

    @property
    def sa1(self):
        return self.data[SKSA_MIN_BYTES:]

    def cmd_head(self):
        return CmdHead.from_bytes(self.cmd_head_bytes)


def check_sksa_length(data):
    if len(data) < SKSA_MIN_BYTES:
        raise SKSATooShort(len(data), SKSA_MIN_BYTES)


def check_image_size(cmd):
    """The SA1 size must hold the ROM header and be AES block aligned."""
    if cmd.size < ROM_HEADER_SIZE:
        raise InvalidImageSize(
            cmd.size, "smaller than the 0x{:X} byte ROM header".format(
                ROM_HEADER_SIZE))
    if cmd.size % AES_BLOCK_SIZE:
        raise InvalidImageSize(
            cmd.size, "not a multiple of the AES block size")


def check_payload_capacity(payload, cmd):
    max_len = cmd.size - ROM_HEADER_SIZE
    if len(payload) > max_len:
        raise PayloadTooLarge(len(payload), max_len)


def verify_sk(sk, key, iv, expected_hash):
    """Decrypt the SK and check its SHA-1 against the Virage2 hash.

    A match proves the bootrom (through the KDF) reproduces the key the
    SK was encrypted with.  Returns the decrypted SK.
    """
    plain = aes_cbc_decrypt(sk, key, iv)
    sk_hash = sha1(plain)
    if sk_hash != bytes(expected_hash):
        raise InvalidSKHash(sk_hash.hex(), bytes(expected_hash).hex())
    log.debug("SK hash %s is valid", sk_hash.hex())
    return plain


def derive_sa1_key(cmd, virage2):
    return aes_cbc_decrypt(cmd.key, virage2.boot_app_key, cmd.common_cmd_iv)


def make_sa1(payload, size):
    """Build the plaintext SA1: ROM header, payload, zero padding."""
    sa1 = bytearray(ROM_HEADER_SIZE)
    struct.pack_into('>I', sa1, ENTRYPOINT_OFFSET, UNZIP_BUF_OFFSET)
    sa1 += payload
    if len(sa1) < size:
        sa1 += bytes(size - len(sa1))
    return bytes(sa1)


def encrypt_sa1(sa1, key, iv):
    return aes_cbc_encrypt(sa1, key, iv)


def assemble(sksa, sa1_enc):
    return sksa.prefix + sa1_enc


def check_chain(sksa, virage2, bootrom, kdf):
    """Validate the SKSA and check the SK against the Virage2 hash.

    Returns the decoded command header and Virage2.
    """
    if not isinstance(sksa, SKSA):
        sksa = SKSA(sksa)
    cmd = sksa.cmd_head()
    check_image_size(cmd)
    v2 = Virage2.from_bytes(virage2)
    sk_key, sk_iv = derive_sk_keys(kdf, bootrom)
    verify_sk(sksa.sk, sk_key, sk_iv, v2.sk_hash)
    return cmd, v2


def build(payload, sksa, virage2, bootrom, kdf):
    """Rebuild `sksa` with a new SA1 wrapping `payload`.

    Returns the new SKSA bytes.  Nothing is returned on failure, the
    first failing stage raises.
    """
    sksa = SKSA(sksa)
    cmd = sksa.cmd_head()
    log.debug("SA1 size 0x%X, payload size 0x%X", cmd.size, len(payload))
    check_image_size(cmd)
    check_payload_capacity(payload, cmd)

    cmd, v2 = check_chain(sksa, virage2, bootrom, kdf)

    sa1_key = derive_sa1_key(cmd, v2)
    sa1 = make_sa1(payload, cmd.size)
    sa1_enc = encrypt_sa1(sa1, sa1_key, cmd.iv)

    out = assemble(sksa, sa1_enc)
    log.debug("Rebuilt SKSA: 0x%X bytes", len(out))
    return out
