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
Boot ROM key derivation.

The algorithm turning a boot ROM dump into the SK key and IV is
hardware specific and lives outside this package.  A key derivation
function (KDF) is any callable taking the raw boot ROM bytes and
returning a ``(key, iv)`` pair of byte strings.  It is selected on the
command line as ``package.module:function``.
"""

import importlib
import logging

from .errors import KeyDerivationError

log = logging.getLogger(__name__)


def load_kdf(spec):
    """Import the KDF named by `spec`, of the form ``module:attribute``."""
    module_name, sep, attr = spec.partition(':')
    if not sep or not module_name or not attr:
        raise KeyDerivationError(
            "invalid KDF '{}', expected 'module:function'".format(spec))
    try:
        module = importlib.import_module(module_name)
    except Exception as e:
        raise KeyDerivationError(
            "cannot import KDF module '{}': {}".format(module_name, e)) from e
    kdf = module
    for part in attr.split('.'):
        kdf = getattr(kdf, part, None)
        if kdf is None:
            raise KeyDerivationError(
                "module '{}' has no attribute '{}'".format(module_name, attr))
    if not callable(kdf):
        raise KeyDerivationError("KDF '{}' is not callable".format(spec))
    return kdf


def derive_sk_keys(kdf, bootrom):
    """Run `kdf` on the boot ROM and return the SK ``(key, iv)`` pair."""
    if kdf is None:
        raise KeyDerivationError(
            "no KDF configured (use --kdf or set BBBS_KDF)")
    try:
        result = kdf(bytes(bootrom))
    except KeyDerivationError:
        raise
    except Exception as e:
        raise KeyDerivationError(e) from e

    try:
        key, iv = result
    except (TypeError, ValueError):
        raise KeyDerivationError(
            "KDF returned {!r}, expected a (key, iv) pair".format(
                type(result).__name__))
    if not isinstance(key, (bytes, bytearray)) or \
            not isinstance(iv, (bytes, bytearray)):
        raise KeyDerivationError("KDF key and iv must be bytes")

    log.debug("Derived SK key (0x%X bytes) and iv (0x%X bytes) from "
              "0x%X bytes of bootrom", len(key), len(iv), len(bootrom))
    return bytes(key), bytes(iv)
