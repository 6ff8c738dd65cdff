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
Parse and print the layout and command header of an SKSA.
"""
import os.path

import click
import yaml

from .errors import IOFailure
from .files import display_name, read_input
from .sksa import SA1_CMD_HEAD_SIZE, SK_SIZE, SKSA, SKSA_MIN_BYTES

_LINE_LENGTH = 60


def print_in_frame(header_text, content):
    sepc = " "
    header = "#### " + header_text + sepc
    post_header = "#" * (_LINE_LENGTH - len(header))
    print(header + post_header)

    print("|", sepc * (_LINE_LENGTH - 2), "|", sep="")
    offset = (_LINE_LENGTH - len(content)) // 2
    pre = "|" + (sepc * (offset - 1))
    post = sepc * (_LINE_LENGTH - len(pre) - len(content) - 1) + "|"
    print(pre, content, post, sep="")
    print("|", sepc * (_LINE_LENGTH - 2), "|", sep="")
    print("#" * _LINE_LENGTH)


def print_in_row(row_text):
    row_text = "#### " + row_text + " "
    fill = "#" * (_LINE_LENGTH - len(row_text))
    print(row_text + fill)


def cmd_head_info(cmd):
    """Command header fields as printable values."""
    info = {}
    for key, value in cmd._asdict().items():
        if key == "issuer":
            info[key] = cmd.issuer_name
        elif isinstance(value, bytes):
            info[key] = value.hex()
        else:
            info[key] = hex(value)
    return info


def dump_sksa(sksa_file, outfile=None, silent=False):
    """Parse an SKSA and print/save the available information."""
    sksa = SKSA(read_input(sksa_file))
    cmd = sksa.cmd_head()
    header = cmd_head_info(cmd)
    layout = {
        "sk": {"offset": 0, "size": SK_SIZE},
        "cmd_head": {"offset": SK_SIZE, "size": SA1_CMD_HEAD_SIZE},
        "sa1": {"offset": SKSA_MIN_BYTES, "size": len(sksa.sa1)},
    }

    if outfile is not None:
        try:
            with click.open_file(outfile, "w", atomic=True) as outf:
                # sort_keys - from pyyaml 5.1
                yaml.dump({"layout": layout, "cmd_head": header}, outf,
                          sort_keys=False)
        except OSError as e:
            raise IOFailure(display_name(outfile, output=True),
                            e.strerror or e) from e

    if silent:
        return

    name = display_name(sksa_file)
    print("Printing content of SKSA:", os.path.basename(name), "\n")

    print_in_frame("SK (offset: 0x0)",
                   "Encrypted SK (size: {} Bytes)".format(hex(SK_SIZE)))

    print_in_row("SA1 command header (offset: {})".format(hex(SK_SIZE)))
    for key, value in header.items():
        if len(value) > _LINE_LENGTH - 22:
            value = value[:_LINE_LENGTH - 25] + "..."
        print(key, ":", " " * (21 - len(key)), value, sep="")
    print("#" * _LINE_LENGTH)

    padding_off = SK_SIZE + SA1_CMD_HEAD_SIZE
    print_in_frame("Info block padding (offset: {})".format(hex(padding_off)),
                   "padding (size: {} Bytes)".format(
                       hex(len(sksa.info_block) - SA1_CMD_HEAD_SIZE)))

    print_in_frame("SA1 (offset: {})".format(hex(SKSA_MIN_BYTES)),
                   "Encrypted SA1 (size: {} Bytes)".format(
                       hex(len(sksa.sa1))))
    if len(sksa.sa1) != cmd.size:
        print("Warning: SA1 size does not match the command header "
              "({})".format(hex(cmd.size)))

    print_in_row("End of SKSA ")
