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
AES-128-CBC and SHA-1 primitives used by the boot chain.

Buffers are always block aligned, so no padding scheme is applied or
stripped.
"""

import hashlib
import logging

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .errors import CipherFailure

AES_KEY_SIZE = 16
AES_BLOCK_SIZE = 16
SHA1_SIZE = 20

log = logging.getLogger(__name__)


def _cbc(key, iv):
    if len(key) != AES_KEY_SIZE:
        raise ValueError("Invalid key size ({}) for AES-128".format(
            len(key) * 8))
    return Cipher(algorithms.AES(bytes(key)), modes.CBC(bytes(iv)),
                  backend=default_backend())


def _run(operation, key, iv, data):
    try:
        cipher = _cbc(key, iv)
        if operation == "encryption":
            ctx = cipher.encryptor()
        else:
            ctx = cipher.decryptor()
        out = ctx.update(bytes(data)) + ctx.finalize()
    except (ValueError, TypeError) as e:
        raise CipherFailure(operation, e) from e
    log.debug("AES-CBC %s of 0x%X bytes", operation, len(data))
    return out


def aes_cbc_decrypt(data, key, iv):
    """Decrypt `data` with AES-128-CBC, without removing any padding."""
    return _run("decryption", key, iv, data)


def aes_cbc_encrypt(data, key, iv):
    """Encrypt `data` with AES-128-CBC, without adding any padding."""
    return _run("encryption", key, iv, data)


def sha1(data):
    sha = hashlib.sha1()
    sha.update(data)
    return sha.digest()
