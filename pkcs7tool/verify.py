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
"""Parse and verify PKCS#7 SignedData messages."""
import hashlib
import logging
from collections import OrderedDict
from typing import BinaryIO
from typing import Dict
from typing import NamedTuple
from typing import Optional
from typing import Tuple

from cryptography import x509
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import rsa
from pyasn1.codec.der import decoder as der_decoder
from pyasn1.error import PyAsn1Error
from pyasn1.type import univ

from pkcs7tool import rsa_helper
from pkcs7tool.asn1 import oids
from pkcs7tool.asn1 import pkcs7_definition
from pkcs7tool.errors import EncodingError
from pkcs7tool.errors import VerificationError
from pkcs7tool.signer import attributes
from pkcs7tool.signer import certificates
from pkcs7tool.signer import digest
from pkcs7tool.signer import envelope

REQUIRED_ATTRIBUTES = (
    oids.PKCS9_CONTENT_TYPE,
    oids.PKCS9_SIGNING_TIME,
    oids.PKCS9_MESSAGE_DIGEST,
)

logger = logging.getLogger('pkcs7-verify')


class ParsedEnvelope(NamedTuple):
    """Decoded single-signer SignedData."""

    signed_data: pkcs7_definition.SignedData
    signer_info: pkcs7_definition.SignerInfo
    certificates: Tuple[bytes, ...]
    issuer: bytes
    serial_number: int
    # attribute type -> DER of its single value
    attributes: Dict[univ.ObjectIdentifier, bytes]
    # attributes re-encoded under the SET OF tag
    attributes_der: bytes
    encrypted_digest: bytes

    @property
    def message_digest(self) -> bytes:
        return bytes(_decode(self.attributes[oids.PKCS9_MESSAGE_DIGEST],
                             pkcs7_definition.MessageDigest()))

    @property
    def signing_time(self):
        return _decode(self.attributes[oids.PKCS9_SIGNING_TIME],
                       pkcs7_definition.SigningTime()).asDateTime

    @property
    def content_type(self) -> univ.ObjectIdentifier:
        return _decode(self.attributes[oids.PKCS9_CONTENT_TYPE],
                       pkcs7_definition.ContentType())


def _decode(data: bytes, spec):
    try:
        value, rest = der_decoder.decode(data, asn1Spec=spec)
    except PyAsn1Error as ex:
        raise EncodingError(
            'Failed to decode {}'.format(type(spec).__name__)) from ex
    if rest:
        raise EncodingError(
            '{} has {} trailing bytes'.format(type(spec).__name__, len(rest)))
    return value


def _collect_attributes(signer_info) -> Dict[univ.ObjectIdentifier, bytes]:
    collected = OrderedDict()
    for attribute in signer_info['authenticatedAttributes']:
        attr_type = attribute['type']
        if attr_type in collected:
            raise VerificationError(
                'Duplicate attribute {}'.format(oids.name_of(attr_type)))
        if len(attribute['values']) != 1:
            raise VerificationError(
                'Attribute {} must have exactly one value'.format(
                    oids.name_of(attr_type)))
        collected[attr_type] = bytes(attribute['values'][0])
    for attr_type in REQUIRED_ATTRIBUTES:
        if attr_type not in collected:
            raise VerificationError(
                'Missing attribute {}'.format(oids.name_of(attr_type)))
    return collected


def parse_envelope(data: bytes) -> ParsedEnvelope:
    """
    Decode a DER (or PEM) PKCS#7 SignedData message.

    :param data: encoded message
    :return: ParsedEnvelope
    """
    content_info = _decode(
        envelope.from_pem(data), pkcs7_definition.ContentInfo())
    if content_info['contentType'] != oids.PKCS7_SIGNED_DATA:
        raise VerificationError(
            'Unexpected content type {}'.format(
                oids.name_of(content_info['contentType'])))
    if not content_info['content'].isValue:
        raise VerificationError('SignedData content is missing')

    signed_data = _decode(
        bytes(content_info['content']), pkcs7_definition.SignedData())

    signer_infos = signed_data['signerInfos']
    if len(signer_infos) != 1:
        raise VerificationError(
            'Expected exactly one SignerInfo, found {}'.format(
                len(signer_infos)))
    signer_info = signer_infos[0]

    digest_algorithm = signer_info['digestAlgorithm']['algorithm']
    declared = [
        algorithm['algorithm']
        for algorithm in signed_data['digestAlgorithms']
    ]
    if digest_algorithm not in declared:
        raise VerificationError(
            'SignerInfo digest algorithm is not declared in SignedData')
    if digest_algorithm != oids.SHA256:
        raise VerificationError(
            'Unsupported digest algorithm {}'.format(
                oids.name_of(digest_algorithm)))
    encryption_algorithm = \
        signer_info['digestEncryptionAlgorithm']['algorithm']
    if encryption_algorithm != oids.PKCS1_RSA_ENCRYPTION:
        raise VerificationError(
            'Unsupported signature algorithm {}'.format(
                oids.name_of(encryption_algorithm)))

    collected = _collect_attributes(signer_info)

    bundle = ()
    if signed_data['certificates'].isValue:
        bundle = certificates.split_certificates(
            bytes(signed_data['certificates']))

    sid = signer_info['issuerAndSerialNumber']
    return ParsedEnvelope(
        signed_data=signed_data,
        signer_info=signer_info,
        certificates=bundle,
        issuer=bytes(sid['issuer']),
        serial_number=int(sid['serialNumber']),
        attributes=collected,
        attributes_der=attributes.encode_attributes(
            list(signer_info['authenticatedAttributes'])),
        encrypted_digest=bytes(signer_info['encryptedDigest'])
    )


def find_signer_certificate(parsed: ParsedEnvelope) -> bytes:
    """Find the signer certificate in the bundle by issuer and serial."""
    for cert_der in parsed.certificates:
        tbs = certificates.decode_certificate(cert_der)['tbsCertificate']
        if bytes(tbs['issuer']) == parsed.issuer and \
                int(tbs['serialNumber']) == parsed.serial_number:
            return cert_der
    raise VerificationError('Signer certificate not found in the message')


def find_issuer_certificate(
        parsed: ParsedEnvelope
) -> Optional[bytes]:
    """Certificate of the signer's issuer if the bundle carries it."""
    for cert_der in parsed.certificates:
        tbs = certificates.decode_certificate(cert_der)['tbsCertificate']
        if bytes(tbs['subject']) == parsed.issuer:
            return cert_der
    return None


def verify_certificate_issued_by(cert_der: bytes, issuer_der: bytes):
    """Check the signature of a certificate against its issuer."""
    try:
        signer_cert = rsa_helper.load_certificate(cert_der)
        issuer_cert = rsa_helper.load_certificate(issuer_der)
    except ValueError as ex:
        raise VerificationError('Malformed certificate') from ex
    try:
        signer_cert.verify_directly_issued_by(issuer_cert)
    except InvalidSignature as ex:
        raise VerificationError(
            'Signer certificate signature verification failed') from ex
    except (ValueError, TypeError) as ex:
        raise VerificationError(
            'Signer certificate not issued by {}: {}'.format(
                issuer_cert.subject.rfc4514_string(), ex)
        ) from ex


def verify_envelope(
        data: bytes,
        content: Optional[BinaryIO] = None,
        certificate: Optional[x509.Certificate] = None,
        issuer_certificate: Optional[x509.Certificate] = None
) -> ParsedEnvelope:
    """
    Verify a PKCS#7 SignedData message.

    The signer certificate signature is checked against
    issuer_certificate, or against the issuer found in the message
    bundle. Without either of them only the message signature is checked.

    :param data: encoded message
    :param content: stream with the signed content, message digest
        attribute is checked when given
    :param certificate: signer certificate, looked up in the message
        when not given
    :param issuer_certificate: certificate of the signer's issuer
    :return: ParsedEnvelope
    """
    parsed = parse_envelope(data)

    if parsed.content_type != oids.PKCS7_DATA:
        raise VerificationError('Content type attribute is not data')

    if content is not None:
        if digest.digest_stream(content) != parsed.message_digest:
            raise VerificationError('Message digest mismatch')
        logger.info('Message digest verified!')

    if certificate is not None:
        cert_der = rsa_helper.certificate_to_der(certificate)
        tbs = certificates.decode_certificate(cert_der)['tbsCertificate']
        if bytes(tbs['issuer']) != parsed.issuer or \
                int(tbs['serialNumber']) != parsed.serial_number:
            raise VerificationError(
                'Certificate does not identify the signer')
    else:
        cert_der = find_signer_certificate(parsed)

    if issuer_certificate is not None:
        issuer_der = rsa_helper.certificate_to_der(issuer_certificate)
    else:
        issuer_der = find_issuer_certificate(parsed)
    if issuer_der is not None:
        verify_certificate_issued_by(cert_der, issuer_der)
        logger.info('Signer certificate verified!')
    else:
        logger.debug('Issuer certificate not available')

    try:
        public_key = rsa_helper.public_key_from_certificate(cert_der)
    except ValueError as ex:
        raise VerificationError('Malformed signer certificate') from ex
    if not isinstance(public_key, rsa.RSAPublicKey):
        raise VerificationError('Signer certificate has no RSA key')

    attributes_digest = hashlib.sha256(parsed.attributes_der).digest()
    try:
        rsa_helper.rsa_verify_prehashed(
            public_key=public_key,
            digest=attributes_digest,
            signature=parsed.encrypted_digest
        )
    except InvalidSignature as ex:
        raise VerificationError('Signature verification failed') from ex
    logger.info('Signature verified!')
    return parsed


def to_dict(parsed: ParsedEnvelope) -> OrderedDict:
    """Readable view of a parsed message."""
    signed_data = parsed.signed_data
    signer_info = parsed.signer_info

    certs = []
    for cert_der in parsed.certificates:
        cert = rsa_helper.load_certificate(cert_der)
        certs.append(OrderedDict([
            ('subject', cert.subject.rfc4514_string()),
            ('issuer', cert.issuer.rfc4514_string()),
            ('serial-number', cert.serial_number),
            ('size', len(cert_der)),
        ]))

    return OrderedDict([
        ('content-type', oids.name_of(oids.PKCS7_SIGNED_DATA)),
        ('version', int(signed_data['version'])),
        ('digest-algorithms', [
            oids.name_of(algorithm['algorithm'])
            for algorithm in signed_data['digestAlgorithms']
        ]),
        ('encapsulated-content-type',
         oids.name_of(signed_data['contentInfo']['contentType'])),
        ('certificates', certs),
        ('signer-info', OrderedDict([
            ('version', int(signer_info['version'])),
            ('issuer', parsed.issuer.hex()),
            ('serial-number', parsed.serial_number),
            ('digest-algorithm',
             oids.name_of(signer_info['digestAlgorithm']['algorithm'])),
            ('authenticated-attributes', OrderedDict([
                ('content-type', oids.name_of(parsed.content_type)),
                ('signing-time', parsed.signing_time.isoformat()),
                ('message-digest', parsed.message_digest.hex()),
            ])),
            ('digest-encryption-algorithm', oids.name_of(
                signer_info['digestEncryptionAlgorithm']['algorithm'])),
            ('encrypted-digest', parsed.encrypted_digest.hex()),
        ])),
    ])
