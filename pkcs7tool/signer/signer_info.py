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
"""SignerInfo of the single signer."""
import logging
from typing import NamedTuple
from typing import Tuple

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import rsa
from pyasn1.codec.der import encoder as der_encoder
from pyasn1.type import univ

from pkcs7tool import rsa_helper
from pkcs7tool.asn1 import oids
from pkcs7tool.asn1 import pkcs7_definition
from pkcs7tool.errors import SigningError
from pkcs7tool.signer import attributes
from pkcs7tool.signer import certificates

SIGNER_INFO_VERSION = 1

logger = logging.getLogger('pkcs7-signer-info')


class UnsignedSignerInfo(NamedTuple):
    """Everything a SignerInfo holds except the encrypted digest."""

    issuer: bytes
    serial_number: int
    attribute_set: attributes.AttributeSet


class SignerInfoRecord(NamedTuple):
    """A SignerInfo together with its signature."""

    unsigned: UnsignedSignerInfo
    encrypted_digest: bytes


def _algorithm_identifier(spec, algorithm):
    algorithm_id = spec()
    algorithm_id['algorithm'] = algorithm
    algorithm_id['parameters'] = der_encoder.encode(univ.Null(''))
    return algorithm_id


def digest_algorithm_identifier() -> pkcs7_definition.DigestAlgorithmIdentifier:
    """sha256 with NULL parameters."""
    return _algorithm_identifier(
        pkcs7_definition.DigestAlgorithmIdentifier, oids.SHA256)


def digest_encryption_algorithm_identifier(
) -> pkcs7_definition.DigestEncryptionAlgorithmIdentifier:
    """rsaEncryption with NULL parameters."""
    return _algorithm_identifier(
        pkcs7_definition.DigestEncryptionAlgorithmIdentifier,
        oids.PKCS1_RSA_ENCRYPTION)


def issuer_and_serial(certificate: x509.Certificate) -> Tuple[bytes, int]:
    """
    Get the raw issuer Name and serial number of a certificate.

    The issuer is returned exactly as encoded in the certificate.
    """
    decoded = certificates.decode_certificate(
        rsa_helper.certificate_to_der(certificate))
    tbs = decoded['tbsCertificate']
    return bytes(tbs['issuer']), int(tbs['serialNumber'])


def prepare_signer_info(
        certificate: x509.Certificate,
        attribute_set: attributes.AttributeSet
) -> UnsignedSignerInfo:
    """First phase: identify the signer and attach the attributes."""
    issuer, serial_number = issuer_and_serial(certificate)
    logger.debug('Signer serial number: %x', serial_number)
    return UnsignedSignerInfo(
        issuer=issuer,
        serial_number=serial_number,
        attribute_set=attribute_set
    )


def complete_signer_info(
        unsigned: UnsignedSignerInfo,
        private_key: rsa.RSAPrivateKey
) -> SignerInfoRecord:
    """
    Second phase: sign the attributes digest.

    The digest is passed pre-hashed; the key wraps it into a SHA-256
    DigestInfo and applies PKCS#1 v1.5 padding.
    """
    if not isinstance(private_key, rsa.RSAPrivateKey):
        raise SigningError(
            'Only RSA private keys are supported, got {}'.format(
                type(private_key).__name__)
        )
    try:
        signature = rsa_helper.rsa_sign_prehashed(
            private_key, unsigned.attribute_set.digest)
    except (ValueError, TypeError) as ex:
        raise SigningError('RSA signing failed: {}'.format(ex)) from ex
    logger.debug('Signature of %d bytes created', len(signature))
    return SignerInfoRecord(unsigned=unsigned, encrypted_digest=signature)


def to_asn1(record: SignerInfoRecord) -> pkcs7_definition.SignerInfo:
    """Build the pyasn1 SignerInfo of a signed record."""
    unsigned = record.unsigned

    sid = pkcs7_definition.IssuerAndSerialNumber()
    sid['issuer'] = unsigned.issuer
    sid['serialNumber'] = unsigned.serial_number

    signer_info = pkcs7_definition.SignerInfo()
    signer_info['version'] = SIGNER_INFO_VERSION
    signer_info['issuerAndSerialNumber'] = sid
    signer_info['digestAlgorithm'] = digest_algorithm_identifier()
    signer_info['authenticatedAttributes'] = attributes.attributes_container(
        unsigned.attribute_set.attributes, attributes.EMBEDDED_TAG)
    signer_info['digestEncryptionAlgorithm'] = \
        digest_encryption_algorithm_identifier()
    signer_info['encryptedDigest'] = record.encrypted_digest
    return signer_info
