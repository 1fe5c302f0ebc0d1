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
"""Sign action."""
import argparse
import datetime
import logging
from pathlib import Path
from typing import Optional

from pkcs7tool import rsa_helper
from pkcs7tool import signer
from pkcs7tool.ptool.actions import existing_file_path_arg_factory
from pkcs7tool.ptool.actions import load_signing_config


class SignAction:
    """SignAction class."""

    logger = logging.getLogger('pkcs7-tool-sign')

    @staticmethod
    def register_parser_args(parser: argparse.ArgumentParser):
        """Register parser arguments."""
        required = parser.add_argument_group('required arguments')
        optional = parser.add_argument_group('optional arguments')

        required.add_argument(
            'content',
            help='Path to the file to be signed.',
            type=existing_file_path_arg_factory
        )

        required.add_argument(
            '-o', '--output',
            help='Output PKCS#7 message filename.',
            type=argparse.FileType('wb'),
            required=True
        )

        optional.add_argument(
            '-c', '--certificate',
            help='Path to the signer certificate file (PEM or DER). '
                 'Overrides "certificate" of the configuration file.',
            type=existing_file_path_arg_factory
        )

        optional.add_argument(
            '-k', '--key',
            help='Path to the signer RSA private key PEM file. '
                 'Overrides "private-key" of the configuration file.',
            type=existing_file_path_arg_factory
        )

        optional.add_argument(
            '-i', '--intermediate',
            help='Path to an intermediate certificate file (PEM or DER) '
                 'to include in the message.',
            type=existing_file_path_arg_factory
        )

        optional.add_argument(
            '--pem',
            help='Write PEM armoured output instead of DER.',
            action='store_true'
        )

        optional.add_argument(
            '--config',
            help='Path to the signing configuration file.',
            metavar='YAML',
            type=argparse.FileType('rb')
        )

        optional.add_argument(
            '-h',
            '--help',
            action='help',
            help='Show this help message and exit.'
        )

    @classmethod
    def do_sign(
            cls,
            content: Path,
            certificate_data: bytes,
            private_key_data: bytes,
            intermediate_data: Optional[bytes] = None,
            private_key_password: Optional[bytes] = None,
            output_format: str = 'der',
            signing_time: Optional[datetime.datetime] = None
    ) -> bytes:
        """Sign method."""
        certificate = rsa_helper.load_certificate(certificate_data)
        private_key = rsa_helper.load_rsa_private_key(
            private_key_data, private_key_password)
        intermediate = None
        if intermediate_data:
            intermediate = rsa_helper.load_certificate(intermediate_data)

        with content.open('rb') as fh:
            message = signer.sign_with_intermediate(
                fh,
                certificate,
                private_key,
                intermediate=intermediate,
                signing_time=signing_time
            )
        cls.logger.info('Signed %s', content.as_posix())

        if output_format == 'pem':
            return signer.to_pem(message)
        return message

    @classmethod
    def entry_point(cls, args):
        """Entry point method."""
        input_cfg = {}
        if args.config:
            with args.config as fh:
                input_cfg = load_signing_config(fh)

        certificate = args.certificate or input_cfg.get('certificate')
        if not certificate:
            raise AssertionError('signer certificate must be provided')
        key = args.key or input_cfg.get('private-key')
        if not key:
            raise AssertionError('signer private key must be provided')
        intermediate = args.intermediate or \
            input_cfg.get('intermediate-certificate')

        password = input_cfg.get('private-key-password')
        output_format = 'pem' if args.pem else \
            input_cfg.get('output-format', 'der')

        message = cls.do_sign(
            content=args.content,
            certificate_data=Path(certificate).read_bytes(),
            private_key_data=Path(key).read_bytes(),
            intermediate_data=Path(intermediate).read_bytes()
            if intermediate else None,
            private_key_password=password.encode('utf-8')
            if password else None,
            output_format=output_format
        )
        with args.output as fh:
            fh.write(message)
