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
"""Authenticated attributes of a SignerInfo."""
import datetime
import hashlib
import logging
from typing import NamedTuple
from typing import Optional
from typing import Tuple

from pyasn1.codec.der import encoder as der_encoder
from pyasn1.error import PyAsn1Error
from pyasn1.type import tag

from pkcs7tool.asn1 import oids
from pkcs7tool.asn1 import pkcs7_definition
from pkcs7tool.errors import EncodingError

# SignerInfo declares authenticatedAttributes as [0] IMPLICIT Attributes
EMBEDDED_TAG = tag.Tag(tag.tagClassContext, tag.tagFormatConstructed, 0)

logger = logging.getLogger('pkcs7-attributes')


class AttributeSet(NamedTuple):
    """Authenticated attributes with their digested DER form."""

    attributes: Tuple[pkcs7_definition.Attribute, ...]
    # universal SET OF tag (0x31), the bytes the signature covers
    digest_form: bytes
    # SHA-256 over digest_form
    digest: bytes


def _attribute(attr_type, value) -> pkcs7_definition.Attribute:
    attribute = pkcs7_definition.Attribute()
    attribute['type'] = attr_type
    attribute['values'][0] = pkcs7_definition.AttributeValue(
        der_encoder.encode(value)
    )
    return attribute


def utc_time(signing_time: datetime.datetime) -> pkcs7_definition.SigningTime:
    """
    Convert datetime to UTCTime.

    Naive datetimes are taken as UTC.
    """
    if signing_time.tzinfo is not None:
        signing_time = signing_time.astimezone(datetime.timezone.utc)
    if not 1950 <= signing_time.year <= 2049:
        raise EncodingError(
            'signing time {} is out of UTCTime range'.format(signing_time)
        )
    return pkcs7_definition.SigningTime(
        signing_time.strftime('%y%m%d%H%M%SZ')
    )


def build_attributes(
        message_digest: bytes,
        signing_time: Optional[datetime.datetime] = None
) -> Tuple[pkcs7_definition.Attribute, ...]:
    """
    Build content-type, signing-time and message-digest attributes.

    :param message_digest: digest of the signed content
    :param signing_time: signing time, now if not given
    :return: attributes in their logical order
    """
    if signing_time is None:
        signing_time = datetime.datetime.now(datetime.timezone.utc)
    try:
        return (
            _attribute(oids.PKCS9_CONTENT_TYPE,
                       pkcs7_definition.ContentType(oids.PKCS7_DATA)),
            _attribute(oids.PKCS9_SIGNING_TIME, utc_time(signing_time)),
            _attribute(oids.PKCS9_MESSAGE_DIGEST,
                       pkcs7_definition.MessageDigest(message_digest)),
        )
    except PyAsn1Error as ex:
        raise EncodingError('Failed to encode attribute value') from ex


def attributes_container(
        attributes,
        implicit_tag: Optional[tag.Tag] = None
) -> pkcs7_definition.Attributes:
    """Place attributes in a SET OF, optionally under an implicit tag."""
    container = pkcs7_definition.Attributes()
    if implicit_tag is not None:
        container = container.subtype(implicitTag=implicit_tag)
    for idx, attribute in enumerate(attributes):
        container[idx] = attribute
    return container


def encode_attributes(
        attributes,
        implicit_tag: Optional[tag.Tag] = None
) -> bytes:
    """
    DER encode attributes with the requested outer tag.

    Without implicit_tag the universal SET OF tag is used, which is the
    encoding a verifier digests. With EMBEDDED_TAG the result is the
    authenticatedAttributes field of a SignerInfo. Both encodings share
    the same content octets.
    """
    try:
        return der_encoder.encode(
            attributes_container(attributes, implicit_tag)
        )
    except PyAsn1Error as ex:
        raise EncodingError('Failed to encode attributes') from ex


def build_attribute_set(
        message_digest: bytes,
        signing_time: Optional[datetime.datetime] = None
) -> AttributeSet:
    """Build attributes, both encodings and the digest to be signed."""
    attributes = build_attributes(message_digest, signing_time)
    digest_form = encode_attributes(attributes)
    digest = hashlib.sha256(digest_form).digest()
    logger.debug(
        'Authenticated attributes: %d bytes, digest %s',
        len(digest_form), digest.hex()
    )
    return AttributeSet(
        attributes=attributes,
        digest_form=digest_form,
        digest=digest
    )
