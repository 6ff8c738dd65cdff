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

import pytest
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

import fakekdf
from bbbs.crypto import sha1
from bbbs.records import CmdHead, Virage2
from bbbs.sksa import SA1_INFO_BLOCK_SIZE, SK_SIZE

BOOTROM = bytes(range(256)) * 32
BOOT_APP_KEY = bytes.fromhex("00112233445566778899aabbccddeeff")
COMMON_CMD_IV = bytes.fromhex("0f0e0d0c0b0a09080706050403020100")
SA1_KEY = bytes.fromhex("6b1d3c9a55e07f214488ad0c3e92b7f1")
SA1_IV = bytes.fromhex("a0a1a2a3a4a5a6a7a8a9aaabacadaeaf")
SA1_SIZE = 20 * 1024


def cbc_encrypt(data, key, iv):
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    return encryptor.update(data) + encryptor.finalize()


def cbc_decrypt(data, key, iv):
    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    return decryptor.update(data) + decryptor.finalize()


def make_cmd_head(size=SA1_SIZE, **fields):
    values = dict(
        unused_padding=0,
        ca_crl_version=1,
        cp_crl_version=2,
        size=size,
        desc_flags=0,
        common_cmd_iv=COMMON_CMD_IV,
        hash=bytes(20),
        iv=SA1_IV,
        exec_flags=0,
        hw_access_rights=0xffffffff,
        secure_kernel_rights=0,
        bbid=0x1234,
        issuer=b"Root-CA00000001-CP00000002".ljust(64, b"\0"),
        content_id=0x00100001,
        key=cbc_encrypt(SA1_KEY, BOOT_APP_KEY, COMMON_CMD_IV),
        signature=bytes(256),
    )
    values.update(fields)
    return CmdHead(**values)


def make_virage2(sk_plain=bytes(SK_SIZE), **fields):
    values = dict(
        sk_hash=sha1(sk_plain),
        rom_patch=tuple(range(16)),
        public_key=bytes(64),
        bbid=0x1234,
        private_key=bytes(32),
        boot_app_key=BOOT_APP_KEY,
        recrypt_list_key=bytes(16),
        app_state_key=bytes(16),
        self_msg_key=bytes(16),
        csum_adjust=0,
        jtag_enable=0,
    )
    values.update(fields)
    return Virage2(**values)


def make_sksa(cmd, sk_plain=bytes(SK_SIZE), bootrom=BOOTROM, sa1=b""):
    key, iv = fakekdf.derive(bootrom)
    sk = cbc_encrypt(sk_plain, key, iv)
    info = cmd.to_bytes().ljust(SA1_INFO_BLOCK_SIZE, b"\0")
    return sk + info + sa1


@pytest.fixture
def cmd_head():
    return make_cmd_head()


@pytest.fixture
def sksa_data(cmd_head):
    return make_sksa(cmd_head)


@pytest.fixture
def virage2_data():
    return make_virage2().to_bytes()


@pytest.fixture
def kdf():
    return fakekdf.derive


@pytest.fixture
def input_files(tmp_path, sksa_data, virage2_data):
    """SKSA, Virage2 and bootrom written to disk, for the CLI."""
    files = {
        "sksa": tmp_path / "in.sksa",
        "virage2": tmp_path / "virage2.bin",
        "bootrom": tmp_path / "bootrom.bin",
    }
    files["sksa"].write_bytes(sksa_data)
    files["virage2"].write_bytes(virage2_data)
    files["bootrom"].write_bytes(BOOTROM)
    return files
