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
"""PKCS#7 SignedData envelope."""
import datetime
import logging
from typing import BinaryIO
from typing import Optional

from asn1crypto import pem
from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import rsa
from pyasn1.codec.der import encoder as der_encoder
from pyasn1.error import PyAsn1Error

from pkcs7tool.asn1 import oids
from pkcs7tool.asn1 import pkcs7_definition
from pkcs7tool.errors import EncodingError
from pkcs7tool.signer import attributes
from pkcs7tool.signer import certificates
from pkcs7tool.signer import digest
from pkcs7tool.signer import signer_info

SIGNED_DATA_VERSION = 1
PEM_TYPE = 'PKCS7'

logger = logging.getLogger('pkcs7-envelope')


def _encode(value) -> bytes:
    try:
        return der_encoder.encode(value)
    except PyAsn1Error as ex:
        raise EncodingError(
            'Failed to encode {}'.format(type(value).__name__)) from ex


def build_signed_data(
        bundle: certificates.CertificateBundle,
        record: signer_info.SignerInfoRecord
) -> pkcs7_definition.SignedData:
    """Assemble SignedData with detached data content and one signer."""
    digest_algorithms = pkcs7_definition.DigestAlgorithmIdentifiers()
    digest_algorithms[0] = signer_info.digest_algorithm_identifier()

    content_info = pkcs7_definition.ContentInfo()
    content_info['contentType'] = oids.PKCS7_DATA

    signer_infos = pkcs7_definition.SignerInfos()
    signer_infos[0] = signer_info.to_asn1(record)

    signed_data = pkcs7_definition.SignedData()
    signed_data['version'] = SIGNED_DATA_VERSION
    signed_data['digestAlgorithms'] = digest_algorithms
    signed_data['contentInfo'] = content_info
    signed_data['certificates'] = certificates.certificates_field(bundle)
    signed_data['signerInfos'] = signer_infos
    return signed_data


def wrap_signed_data(der_signed_data: bytes) -> bytes:
    """Wrap encoded SignedData in the outer ContentInfo."""
    content_info = pkcs7_definition.ContentInfo()
    content_info['contentType'] = oids.PKCS7_SIGNED_DATA
    content_info['content'] = der_signed_data
    return _encode(content_info)


def sign_with_intermediate(
        stream: BinaryIO,
        certificate: x509.Certificate,
        private_key: rsa.RSAPrivateKey,
        intermediate: Optional[x509.Certificate] = None,
        signing_time: Optional[datetime.datetime] = None
) -> bytes:
    """
    Sign the content of a stream.

    :param stream: readable binary stream, consumed once
    :param certificate: signer certificate
    :param private_key: RSA private key matching the certificate
    :param intermediate: optional intermediate certificate
    :param signing_time: signing-time attribute value, now if not given
    :return: DER encoded ContentInfo with SignedData
    """
    message_digest = digest.digest_stream(stream)
    attribute_set = attributes.build_attribute_set(
        message_digest, signing_time)
    unsigned = signer_info.prepare_signer_info(certificate, attribute_set)
    record = signer_info.complete_signer_info(unsigned, private_key)
    bundle = certificates.build_certificate_bundle(certificate, intermediate)

    der_signed_data = _encode(build_signed_data(bundle, record))
    envelope = wrap_signed_data(der_signed_data)
    logger.info('PKCS#7 SignedData created (%d bytes)', len(envelope))
    return envelope


def sign(
        stream: BinaryIO,
        certificate: x509.Certificate,
        private_key: rsa.RSAPrivateKey,
        signing_time: Optional[datetime.datetime] = None
) -> bytes:
    """Sign the content of a stream without an intermediate certificate."""
    return sign_with_intermediate(
        stream, certificate, private_key,
        intermediate=None,
        signing_time=signing_time
    )


def to_pem(der: bytes) -> bytes:
    """PEM armour for a DER encoded PKCS#7 message."""
    return pem.armor(PEM_TYPE, der)


def from_pem(data: bytes) -> bytes:
    """DER bytes of a PEM armoured PKCS#7 message, DER input as is."""
    if not pem.detect(data):
        return data
    try:
        object_type, _, der = pem.unarmor(data)
    except ValueError as ex:
        raise EncodingError('Malformed PKCS#7 PEM') from ex
    if object_type != PEM_TYPE:
        raise EncodingError(
            'Expected PEM type {}, got {}'.format(PEM_TYPE, object_type))
    return der
