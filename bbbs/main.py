#! /usr/bin/env python3
#
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

import logging
import sys

import click

from bbbs import bbbs_version, sksa
from bbbs.bootrom import load_kdf
from bbbs.dumpinfo import dump_sksa
from bbbs.files import (
    STDIO, default_outfile, read_input, read_payload, write_output)

MIN_PYTHON_VERSION = (3, 6)
if sys.version_info < MIN_PYTHON_VERSION:
    sys.exit("Python %s.%s or newer is required by bbbs."
             % MIN_PYTHON_VERSION)


def get_kdf(ctx, param, value):
    return load_kdf(value) if value else None


def check_single_stdin(**inputs):
    stdin_users = [name for name, path in inputs.items() if path == STDIO]
    if len(stdin_users) > 1:
        raise click.UsageError(
            "Only one input can be read from stdin, got: {}".format(
                ", ".join(stdin_users)))


def kdf_option(f):
    return click.option(
        '--kdf', metavar='module:function', envvar='BBBS_KDF',
        callback=get_kdf,
        help='Bootrom key derivation function, called with the bootrom '
             'contents and returning the SK (key, iv). '
             'Defaults to $BBBS_KDF.')(f)


def chain_options(f):
    f = kdf_option(f)
    f = click.option('-b', '--bootrom', metavar='filename', required=True,
                     help='Input bootrom (used for key derivation); '
                          '"-" for stdin')(f)
    f = click.option('-v', '--virage2', metavar='filename', required=True,
                     help='Input Virage2 (used for key derivation); '
                          '"-" for stdin')(f)
    f = click.option('-s', '--sksa', 'sksa_file', metavar='filename',
                     required=True, help='Input SKSA; "-" for stdin')(f)
    return f


@click.argument('outfile', required=False)
@click.argument('infile', default=STDIO)
@chain_options
@click.command(help='''Rebuild an SKSA with a new SA1 wrapping a payload\n
               INFILE is the payload ("-" for stdin, the default); it is
               parsed as Intel HEX if it has a .hex extension. OUTFILE
               defaults to INFILE with a .sksa extension, or stdout when
               the payload is read from stdin.''')
def build(sksa_file, virage2, bootrom, kdf, infile, outfile):
    check_single_stdin(infile=infile, sksa=sksa_file, virage2=virage2,
                       bootrom=bootrom)
    if outfile is None:
        outfile = default_outfile(infile)

    payload = read_payload(infile)
    data = sksa.build(payload, read_input(sksa_file), read_input(virage2),
                      read_input(bootrom), kdf)
    write_output(outfile, data)


@chain_options
@click.command(help='Check that the SK of an SKSA matches the Virage2 '
                    'hash under the bootrom keys')
def verify(sksa_file, virage2, bootrom, kdf):
    check_single_stdin(sksa=sksa_file, virage2=virage2, bootrom=bootrom)
    cmd, _ = sksa.check_chain(read_input(sksa_file), read_input(virage2),
                              read_input(bootrom), kdf)
    print("SK hash is valid")
    print("SA1 size: {}".format(hex(cmd.size)))
    print("SA1 capacity: {} bytes".format(hex(cmd.size -
                                               sksa.ROM_HEADER_SIZE)))


@click.argument('sksafile')
@click.option('-o', '--outfile', metavar='filename', required=False,
              help='Save SKSA information to outfile in YAML format')
@click.option('-s', '--silent', default=False, is_flag=True,
              help='Do not print SKSA information to output')
@click.command(help='Print the layout and SA1 command header of an SKSA')
def dumpinfo(sksafile, outfile, silent):
    dump_sksa(sksafile, outfile, silent)
    if not silent:
        print("dumpinfo has run successfully")


@click.command(help='Print bbbs version information')
def version():
    print(bbbs_version)


@click.option('--verbose', default=False, is_flag=True,
              help='Log each step to stderr')
@click.command(cls=click.Group,
               context_settings=dict(help_option_names=['-h', '--help']))
def bbbs(verbose):
    if verbose:
        logging.basicConfig(format='%(levelname)5s: %(message)s',
                            level=logging.DEBUG, stream=sys.stderr)


bbbs.add_command(build)
bbbs.add_command(verify)
bbbs.add_command(dumpinfo)
bbbs.add_command(version)


if __name__ == '__main__':
    bbbs()
