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
Errors raised while rebuilding an SKSA.

Every error is a click exception, so the command line reports it as
"Error: <message>" and exits with a non-zero status.
"""

import click


class BBBSError(click.ClickException):
    """Base class for all SKSA rebuild failures."""
    pass


class SKSATooShort(BBBSError):
    def __init__(self, actual, required):
        self.actual = actual
        self.required = required
        super().__init__(
            "Provided SKSA is too short (got 0x{:X} bytes, expected "
            "0x{:X})".format(actual, required))


class PayloadTooLarge(BBBSError):
    def __init__(self, actual, maximum):
        self.actual = actual
        self.maximum = maximum
        super().__init__(
            "Provided payload is too long to fit in the provided SA1 "
            "(got 0x{:X} bytes, max 0x{:X})".format(actual, maximum))


class InvalidImageSize(BBBSError):
    def __init__(self, size, reason):
        self.size = size
        self.reason = reason
        super().__init__(
            "Invalid SA1 size 0x{:X} in command header: {}".format(size,
                                                                   reason))


class RecordDecodeError(BBBSError):
    def __init__(self, record, expected, actual):
        self.record = record
        self.expected = expected
        self.actual = actual
        super().__init__(
            "Unable to decode {}: need 0x{:X} bytes, got 0x{:X}".format(
                record, expected, actual))


class KeyDerivationError(BBBSError):
    def __init__(self, reason):
        self.reason = reason
        super().__init__(
            "Unable to derive SK keys from bootrom: {}".format(reason))


class InvalidSKHash(BBBSError):
    def __init__(self, calculated, expected):
        self.calculated = calculated
        self.expected = expected
        super().__init__("Invalid SK hash (got {}, expected {})".format(
            calculated, expected))


class CipherFailure(BBBSError):
    def __init__(self, operation, reason):
        self.operation = operation
        self.reason = reason
        super().__init__("AES-CBC {} failed: {}".format(operation, reason))


class IOFailure(BBBSError):
    def __init__(self, source, reason):
        self.source = source
        self.reason = reason
        super().__init__("{} ({})".format(reason, source))
