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
"""Certificates carried in the SignedData."""
import logging
from typing import NamedTuple
from typing import Optional
from typing import Tuple

from cryptography import x509
from pyasn1.codec.der import decoder as der_decoder
from pyasn1.error import PyAsn1Error
from pyasn1.type import tag
from pyasn1.type import univ

from pkcs7tool import rsa_helper
from pkcs7tool.asn1 import x509_definition
from pkcs7tool.errors import EncodingError

# SignedData declares certificates as [0] IMPLICIT SET OF Certificate
CERTIFICATES_TAG = tag.Tag(tag.tagClassContext, tag.tagFormatConstructed, 0)

logger = logging.getLogger('pkcs7-certificates')


class CertificateBundle(NamedTuple):
    """Signer certificate followed by the optional intermediate."""

    certificates: Tuple[bytes, ...]
    raw: bytes


def decode_certificate(raw: bytes) -> x509_definition.Certificate:
    """
    Decode a single complete DER certificate.

    :param raw: DER encoding of exactly one certificate
    :return: decoded certificate
    """
    if not raw:
        raise EncodingError('Empty certificate encoding')
    try:
        certificate, rest = der_decoder.decode(
            raw, asn1Spec=x509_definition.Certificate())
    except PyAsn1Error as ex:
        raise EncodingError('Malformed certificate encoding') from ex
    if rest:
        raise EncodingError(
            'Certificate encoding has {} trailing bytes'.format(len(rest))
        )
    return certificate


def split_certificates(raw: bytes) -> Tuple[bytes, ...]:
    """Split concatenated DER certificates."""
    certificates = []
    while raw:
        try:
            _, rest = der_decoder.decode(
                raw, asn1Spec=x509_definition.Certificate())
        except PyAsn1Error as ex:
            raise EncodingError('Malformed certificate encoding') from ex
        certificates.append(raw[:len(raw) - len(rest)])
        raw = rest
    return tuple(certificates)


def build_certificate_bundle(
        certificate: x509.Certificate,
        intermediate: Optional[x509.Certificate] = None
) -> CertificateBundle:
    """
    Concatenate raw DER of the signer and intermediate certificates.

    :param certificate: signer certificate
    :param intermediate: optional intermediate certificate
    :return: CertificateBundle
    """
    certificates = [rsa_helper.certificate_to_der(certificate)]
    if intermediate is not None:
        certificates.append(rsa_helper.certificate_to_der(intermediate))
    for raw in certificates:
        decode_certificate(raw)
    logger.debug(
        'Certificate bundle of %d certificate(s)', len(certificates)
    )
    return CertificateBundle(
        certificates=tuple(certificates),
        raw=b''.join(certificates)
    )


def certificates_field(bundle: CertificateBundle) -> univ.Any:
    """SignedData certificates field holding the bundle bytes."""
    return univ.Any(bundle.raw).subtype(explicitTag=CERTIFICATES_TAG)
