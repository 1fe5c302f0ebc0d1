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
"""Configuration test."""
import datetime

import pytest
from cryptography import x509
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from pkcs7tool.ptool.actions.init import generate_credentials


def _rsa_key():
    return rsa.generate_private_key(
        public_exponent=65537, key_size=2048, backend=default_backend()
    )


def _name(common_name):
    return x509.Name(
        [x509.NameAttribute(x509.oid.NameOID.COMMON_NAME, common_name)]
    )


def issue_certificate(subject, public_key, issuer, issuer_key, is_ca):
    """Issue a certificate for public_key signed by issuer_key."""
    now = datetime.datetime.now(datetime.timezone.utc)
    return (
        x509.CertificateBuilder()
        .subject_name(_name(subject))
        .issuer_name(_name(issuer))
        .public_key(public_key)
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=30))
        .add_extension(
            x509.BasicConstraints(ca=is_ca, path_length=None),
            critical=True,
        )
        .sign(issuer_key, hashes.SHA256(), default_backend())
    )


@pytest.fixture(scope="session")
def credentials(tmp_path_factory):
    """Signer certificate issued by an intermediate CA."""
    tmp_path = tmp_path_factory.mktemp("credentials")

    root_key = _rsa_key()
    intermediate_key = _rsa_key()
    signer_key = _rsa_key()

    root = issue_certificate(
        "Test Root CA", root_key.public_key(),
        "Test Root CA", root_key, True)
    intermediate = issue_certificate(
        "Test Intermediate CA", intermediate_key.public_key(),
        "Test Root CA", root_key, True)
    certificate = issue_certificate(
        "Test Signer", signer_key.public_key(),
        "Test Intermediate CA", intermediate_key, False)

    key_file = tmp_path / "signer.key.pem"
    key_file.write_bytes(
        signer_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    certificate_file = tmp_path / "signer.cert.der"
    certificate_file.write_bytes(
        certificate.public_bytes(serialization.Encoding.DER))
    intermediate_file = tmp_path / "intermediate.cert.pem"
    intermediate_file.write_bytes(
        intermediate.public_bytes(serialization.Encoding.PEM))

    return {
        "tmp_path": tmp_path,
        "root": root,
        "intermediate": intermediate,
        "intermediate_key": intermediate_key,
        "certificate": certificate,
        "private_key": signer_key,
        "key_file": key_file,
        "certificate_file": certificate_file,
        "intermediate_file": intermediate_file,
    }


@pytest.fixture(scope="session")
def dev_credentials(tmp_path_factory):
    """Self-signed development credentials."""
    tmp_path = tmp_path_factory.mktemp("dev")
    key_file = tmp_path / "dev.key.pem"
    certificate_file = tmp_path / "dev.cert.der"
    generate_credentials(
        key_file=key_file,
        cert_file=certificate_file,
        cred_valid_time=8
    )
    return {
        "tmp_path": tmp_path,
        "key_file": key_file,
        "certificate_file": certificate_file,
    }
