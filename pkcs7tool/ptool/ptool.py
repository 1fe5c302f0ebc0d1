# ----------------------------------------------------------------------------
# Copyright (c) 2022-2023 Izuma Networks
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
# ----------------------------------------------------------------------------
"""PKCS#7 tool file."""
import argparse
import enum
import logging
import sys

from pkcs7tool import __version__
from pkcs7tool.ptool.actions.init import InitAction
from pkcs7tool.ptool.actions.schema import PrintSchemaAction
from pkcs7tool.ptool.actions.sign import SignAction
from pkcs7tool.ptool.actions.verify import VerifyAction

logger = logging.getLogger("pkcs7-tool")


class Actions(enum.Enum):
    """Actions class."""

    SIGN = "sign"
    VERIFY = "verify"
    SCHEMA = "schema"
    INIT = "init"


def get_parser():
    """Get argument parser."""
    parser = argparse.ArgumentParser(
        description="Tool for creating and verifying "
        "PKCS#7 (RFC 2315) SignedData messages.",
        add_help=False,
    )

    parser.add_argument(
        "-h", "--help", action="help", help="Show this help message and exit."
    )
    parser.add_argument(
        "--version",
        action="version",
        version="PKCS7-Tool version {}".format(__version__),
        help="Show program's version number and exit.",
    )

    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Print error logs only."
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print exception info upon exiting.",
    )

    actions_parser = parser.add_subparsers(title="Commands", dest="action")
    actions_parser.required = True

    sign_parser = actions_parser.add_parser(
        Actions.SIGN.value,
        help="Sign a file.",
        description="Create a detached PKCS#7 SignedData message "
        "over a file.",
        add_help=False,
    )
    SignAction.register_parser_args(sign_parser)

    verify_parser = actions_parser.add_parser(
        Actions.VERIFY.value,
        help="Parse and verify a PKCS#7 message.",
        description="Parse and verify a PKCS#7 message.",
        add_help=False,
    )
    VerifyAction.register_parser_args(verify_parser)

    schema_parser = actions_parser.add_parser(
        Actions.SCHEMA.value,
        help="Print the signing configuration schema.",
        description="Print the signing configuration schema.",
        add_help=False,
    )
    PrintSchemaAction.register_parser_args(schema_parser)

    init_parser = actions_parser.add_parser(
        Actions.INIT.value,
        help="Create self-signed development credentials.",
        description="Create an RSA private key and a self-signed "
        "certificate for development.",
        add_help=False,
    )
    InitAction.register_parser_args(init_parser)

    return parser


def entry_point(argv=sys.argv[1:]):  # pylint: disable=dangerous-default-value
    """Entry point of the PKCS#7 tool."""
    parser = get_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        stream=sys.stdout,
        format="%(asctime)s %(levelname)s %(message)s",
        level=logging.ERROR if args.quiet else logging.DEBUG,
    )

    if args.debug:
        root = logging.getLogger()
        root.setLevel(logging.DEBUG)

    try:
        action = Actions(args.action)
        if action == Actions.SIGN:
            SignAction.entry_point(args)
        elif action == Actions.VERIFY:
            VerifyAction.entry_point(args)
        elif action == Actions.SCHEMA:
            PrintSchemaAction.entry_point(args)
        elif action == Actions.INIT:
            InitAction.entry_point(args)
        else:
            # will never get here
            raise AssertionError("Invalid action")
    except Exception as ex:  # pylint: disable=broad-except
        logger.error(str(ex), exc_info=args.debug)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(entry_point())
