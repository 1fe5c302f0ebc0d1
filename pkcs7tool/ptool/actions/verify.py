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
"""Verify action."""
import argparse
import collections
import logging

import yaml

from pkcs7tool import rsa_helper
from pkcs7tool import verify


def ordered_dict_representer(dumper, data):
    return dumper.represent_dict(data.items())


yaml.Dumper.add_representer(collections.OrderedDict, ordered_dict_representer)


class VerifyAction:
    """VerifyAction class."""

    logger = logging.getLogger('pkcs7-tool-verify')

    @staticmethod
    def register_parser_args(parser):
        """Register parser arguments."""
        required = parser.add_argument_group('required arguments')
        optional = parser.add_argument_group('optional arguments')

        required.add_argument(
            'message',
            help='Path to the PKCS#7 message file (DER or PEM).',
            type=argparse.FileType('rb')
        )

        optional.add_argument(
            '--content',
            help='Path to the signed content file '
                 'to validate the message digest.',
            type=argparse.FileType('rb')
        )

        optional.add_argument(
            '-c', '--certificate',
            help='Path to the signer certificate file. '
                 'Default: the signer certificate carried in the message.',
            type=argparse.FileType('rb')
        )

        optional.add_argument(
            '-I', '--issuer-certificate',
            help='Path to the certificate of the signer certificate issuer. '
                 'Default: the issuer certificate carried in the message, '
                 'if any.',
            type=argparse.FileType('rb')
        )

        optional.add_argument(
            '--no-verify',
            help='Only dump the message, do not verify the signature.',
            action='store_true'
        )

        optional.add_argument(
            '-h',
            '--help',
            action='help',
            help='Show this help message and exit.'
        )

    @classmethod
    def do_verify(
            cls,
            message_data: bytes,
            content=None,
            certificate_data: bytes = None,
            issuer_certificate_data: bytes = None,
            skip_verification: bool = False
    ) -> collections.OrderedDict:
        """Verify method."""
        if skip_verification:
            parsed = verify.parse_envelope(message_data)
        else:
            certificate = None
            if certificate_data:
                certificate = rsa_helper.load_certificate(certificate_data)
            issuer_certificate = None
            if issuer_certificate_data:
                issuer_certificate = rsa_helper.load_certificate(
                    issuer_certificate_data)
            parsed = verify.verify_envelope(
                message_data,
                content=content,
                certificate=certificate,
                issuer_certificate=issuer_certificate
            )

        dom = verify.to_dict(parsed)
        cls.logger.info(
            '\n----- PKCS#7 dump start -----\n'
            '%s----- PKCS#7 dump end -----',
            yaml.dump(dom, default_flow_style=False)
        )
        return dom

    @classmethod
    def entry_point(cls, args):
        """Entry point method."""
        cert_data = args.certificate.read() if args.certificate else None
        issuer_data = args.issuer_certificate.read() \
            if args.issuer_certificate else None
        message_data = args.message.read()
        try:
            cls.do_verify(
                message_data=message_data,
                content=args.content,
                certificate_data=cert_data,
                issuer_certificate_data=issuer_data,
                skip_verification=args.no_verify
            )
        finally:
            if args.content:
                args.content.close()
