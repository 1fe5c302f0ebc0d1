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
"""Init action: development signing credentials."""
import argparse
import datetime
import logging
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from pkcs7tool import defaults
from pkcs7tool.common.common_helpers import get_positive_int_argument

logger = logging.getLogger('pkcs7-tool-init')


def generate_credentials(
        key_file: Path,
        cert_file: Path,
        cred_valid_time: int = defaults.VALID_DAYS,
        key_size: int = defaults.KEY_SIZE,
        common_name: str = defaults.COMMON_NAME
):
    """
    Generate self-signed development credentials.

    :param key_file - path to .pem RSA signing key file
    :param cert_file - path to .der certificate file
    :param cred_valid_time - x.509 certificate validity period in days
    :param key_size - RSA modulus size in bits
    :param common_name - subject common name
    """
    logger.info('generating dev-credentials')
    key = rsa.generate_private_key(
        public_exponent=65537, key_size=key_size, backend=default_backend()
    )

    # For a self-signed certificate the
    # subject and issuer are always the same.
    subject = issuer = x509.Name(
        [x509.NameAttribute(x509.oid.NameOID.COMMON_NAME, common_name)]
    )

    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + datetime.timedelta(days=cred_valid_time))
        .add_extension(
            x509.KeyUsage(
                digital_signature=True,
                content_commitment=True,
                key_encipherment=False,
                data_encipherment=False,
                key_agreement=False,
                key_cert_sign=False,
                crl_sign=False,
                encipher_only=False,
                decipher_only=False,
            ),
            critical=True,
        )
        .add_extension(
            x509.ExtendedKeyUsage(
                [x509.oid.ExtendedKeyUsageOID.CODE_SIGNING]
            ),
            critical=False,
        )
        .add_extension(
            x509.SubjectKeyIdentifier.from_public_key(key.public_key()),
            critical=False,
        )
        .sign(key, hashes.SHA256(), default_backend())
    )

    key_file.parent.mkdir(parents=True, exist_ok=True)
    key_file.write_bytes(
        key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    logger.info('created %s', key_file)

    cert_file.parent.mkdir(parents=True, exist_ok=True)
    cert_file.write_bytes(cert.public_bytes(serialization.Encoding.DER))
    logger.info('created %s', cert_file)

    logger.warning(
        'Certificates generated with this tool are self-signed '
        'and for testing only'
    )


class InitAction:
    """InitAction class."""

    @staticmethod
    def register_parser_args(parser: argparse.ArgumentParser):
        """Register parser arguments."""
        optional = parser.add_argument_group('optional arguments')

        optional.add_argument(
            '--cache-dir',
            help='Directory for the generated credentials. '
                 '[Default: {}]'.format(defaults.BASE_PATH),
            type=Path,
            default=defaults.BASE_PATH
        )

        optional.add_argument(
            '--key-size',
            help='RSA key size in bits. '
                 '[Default: {}]'.format(defaults.KEY_SIZE),
            type=get_positive_int_argument,
            default=defaults.KEY_SIZE
        )

        optional.add_argument(
            '--valid-days',
            help='Certificate validity period in days. '
                 '[Default: {}]'.format(defaults.VALID_DAYS),
            type=get_positive_int_argument,
            default=defaults.VALID_DAYS
        )

        optional.add_argument(
            '--common-name',
            help='Certificate subject common name. '
                 '[Default: {}]'.format(defaults.COMMON_NAME),
            default=defaults.COMMON_NAME
        )

        optional.add_argument(
            '-h',
            '--help',
            action='help',
            help='Show this help message and exit.'
        )

    @classmethod
    def entry_point(cls, args):
        """Entry point method."""
        generate_credentials(
            key_file=args.cache_dir / defaults.SIGNING_KEY,
            cert_file=args.cache_dir / defaults.CERTIFICATE,
            cred_valid_time=args.valid_days,
            key_size=args.key_size,
            common_name=args.common_name
        )
