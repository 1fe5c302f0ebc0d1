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
# PKCS #7: Cryptographic Message Syntax Version 1.5 (RFC 2315), the subset
# needed to produce and read a single-signer SignedData message.
# Certificates, the issuer name and the SignedData payload of the outer
# ContentInfo are carried as raw DER regions.
from pyasn1.type import univ, namedtype, namedval, tag, useful


class Version(univ.Integer):
    pass


Version.namedValues = namedval.NamedValues(
    ('v0', 0),
    ('v1', 1)
)


class ContentType(univ.ObjectIdentifier):
    pass


class AlgorithmIdentifier(univ.Sequence):
    pass


AlgorithmIdentifier.componentType = namedtype.NamedTypes(
    namedtype.NamedType('algorithm', univ.ObjectIdentifier()),
    namedtype.OptionalNamedType('parameters', univ.Any())
)


class DigestAlgorithmIdentifier(AlgorithmIdentifier):
    pass


class DigestEncryptionAlgorithmIdentifier(AlgorithmIdentifier):
    pass


class DigestAlgorithmIdentifiers(univ.SetOf):
    pass


DigestAlgorithmIdentifiers.componentType = DigestAlgorithmIdentifier()


class AttributeValue(univ.Any):
    pass


class Attribute(univ.Sequence):
    pass


Attribute.componentType = namedtype.NamedTypes(
    namedtype.NamedType('type', univ.ObjectIdentifier()),
    namedtype.NamedType('values', univ.SetOf(componentType=AttributeValue()))
)


class Attributes(univ.SetOf):
    pass


Attributes.componentType = Attribute()


class MessageDigest(univ.OctetString):
    pass


class SigningTime(useful.UTCTime):
    pass


class EncryptedDigest(univ.OctetString):
    pass


class CertificateSerialNumber(univ.Integer):
    pass


class IssuerAndSerialNumber(univ.Sequence):
    pass


IssuerAndSerialNumber.componentType = namedtype.NamedTypes(
    namedtype.NamedType('issuer', univ.Any()),
    namedtype.NamedType('serialNumber', CertificateSerialNumber())
)


class SignerInfo(univ.Sequence):
    pass


SignerInfo.componentType = namedtype.NamedTypes(
    namedtype.NamedType('version', Version()),
    namedtype.NamedType('issuerAndSerialNumber', IssuerAndSerialNumber()),
    namedtype.NamedType('digestAlgorithm', DigestAlgorithmIdentifier()),
    namedtype.OptionalNamedType('authenticatedAttributes', Attributes().subtype(implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatConstructed, 0))),
    namedtype.NamedType('digestEncryptionAlgorithm', DigestEncryptionAlgorithmIdentifier()),
    namedtype.NamedType('encryptedDigest', EncryptedDigest()),
    namedtype.OptionalNamedType('unauthenticatedAttributes', Attributes().subtype(implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatConstructed, 1)))
)


class SignerInfos(univ.SetOf):
    pass


SignerInfos.componentType = SignerInfo()


class ContentInfo(univ.Sequence):
    pass


ContentInfo.componentType = namedtype.NamedTypes(
    namedtype.NamedType('contentType', ContentType()),
    namedtype.OptionalNamedType('content', univ.Any().subtype(explicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatConstructed, 0)))
)


class SignedData(univ.Sequence):
    pass


# certificates is [0] IMPLICIT SET OF Certificate; a DER SET OF is the
# concatenation of its members, so the region is kept as one tagged blob
# and member order is preserved as given.
SignedData.componentType = namedtype.NamedTypes(
    namedtype.NamedType('version', Version()),
    namedtype.NamedType('digestAlgorithms', DigestAlgorithmIdentifiers()),
    namedtype.NamedType('contentInfo', ContentInfo()),
    namedtype.OptionalNamedType('certificates', univ.Any().subtype(explicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatConstructed, 0))),
    namedtype.OptionalNamedType('crls', univ.SetOf(componentType=univ.Any()).subtype(implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatConstructed, 1))),
    namedtype.NamedType('signerInfos', SignerInfos())
)
