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
"""RSA helper file."""
from typing import Optional

from cryptography import x509
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.asymmetric import utils as asym_utils


def load_rsa_private_key(
        pem_key_data: bytes,
        password: Optional[bytes] = None
) -> rsa.RSAPrivateKey:
    """Load RSA PEM private key."""
    private_key = serialization.load_pem_private_key(
        pem_key_data, password=password, backend=default_backend()
    )
    if isinstance(private_key, rsa.RSAPrivateKey):
        return private_key
    raise TypeError('Only RSA private keys are supported')


def load_certificate(certificate_data: bytes) -> x509.Certificate:
    """Load a PEM or DER encoded certificate."""
    if certificate_data.lstrip().startswith(b'-----BEGIN'):
        return x509.load_pem_x509_certificate(
            certificate_data, default_backend())
    return x509.load_der_x509_certificate(certificate_data, default_backend())


def certificate_to_der(certificate: x509.Certificate) -> bytes:
    """Raw DER encoding of the certificate."""
    return certificate.public_bytes(serialization.Encoding.DER)


def rsa_sign_prehashed(private_key: rsa.RSAPrivateKey, digest: bytes) -> bytes:
    """RSA PKCS#1 v1.5 sign a pre-hashed SHA-256 digest."""
    return private_key.sign(
        digest, padding.PKCS1v15(), asym_utils.Prehashed(hashes.SHA256())
    )


def rsa_verify_prehashed(public_key, digest: bytes, signature: bytes):
    """Verify the RSA PKCS#1 v1.5 signature over a pre-hashed digest."""
    public_key.verify(
        signature,
        digest,
        padding.PKCS1v15(),
        asym_utils.Prehashed(hashes.SHA256())
    )


def public_key_from_certificate(certificate_data: bytes):
    """Extract public key from the certificate."""
    return load_certificate(certificate_data).public_key()
