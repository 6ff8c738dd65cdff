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
Reading and writing the files handled by bbbs.

Every file name may be "-", meaning stdin for inputs and stdout for the
output.
"""

import logging
import os.path

import click
from intelhex import IntelHex, IntelHexError

from .errors import IOFailure

BIN_EXT = "bin"
INTEL_HEX_EXT = "hex"
SKSA_EXT = "sksa"
STDIO = "-"

log = logging.getLogger(__name__)


def display_name(path, output=False):
    if path == STDIO:
        return "stdout" if output else "stdin"
    return str(path)


def read_input(path):
    """Read all of `path` (or stdin) into memory."""
    try:
        with click.open_file(path, 'rb') as f:
            data = f.read()
    except OSError as e:
        raise IOFailure(display_name(path), e.strerror or e) from e
    log.debug("Read 0x%X bytes from %s", len(data), display_name(path))
    return data


def read_payload(path):
    """Read the payload, converting Intel HEX files to binary."""
    ext = os.path.splitext(str(path))[1][1:].lower()
    if path == STDIO or ext != INTEL_HEX_EXT:
        return read_input(path)
    try:
        ih = IntelHex(path)
    except OSError as e:
        raise IOFailure(display_name(path), e.strerror or e) from e
    except IntelHexError as e:
        raise IOFailure(display_name(path),
                        "invalid Intel HEX: {}".format(e)) from e
    data = ih.tobinarray().tobytes()
    log.debug("Loaded 0x%X bytes from Intel HEX %s (base 0x%X)", len(data),
              path, ih.minaddr() or 0)
    return data


def write_output(path, data):
    """Write `data` to `path` (or stdout), replacing it atomically."""
    try:
        with click.open_file(path, 'wb', atomic=True) as f:
            f.write(data)
    except OSError as e:
        raise IOFailure(display_name(path, output=True),
                        e.strerror or e) from e
    log.debug("Wrote 0x%X bytes to %s", len(data),
              display_name(path, output=True))


def default_outfile(infile):
    """Output name derived from the payload name.

    A .bin or .hex extension is replaced with .sksa, a missing one is
    added, and any other extension gets .sksa appended.  A payload read
    from stdin gives an SKSA written to stdout.
    """
    if infile == STDIO:
        return STDIO
    base, ext = os.path.splitext(str(infile))
    if not ext or ext[1:].lower() in (BIN_EXT, INTEL_HEX_EXT):
        return "{}.{}".format(base, SKSA_EXT)
    return "{}.{}".format(infile, SKSA_EXT)
