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
"""Object identifiers used in PKCS#7 SignedData messages."""
from types import MappingProxyType

from pyasn1.type import univ

# PKCS#7 content types (RFC 2315 section 14)
PKCS7_DATA = univ.ObjectIdentifier('1.2.840.113549.1.7.1')
PKCS7_SIGNED_DATA = univ.ObjectIdentifier('1.2.840.113549.1.7.2')

# PKCS#9 attribute types
PKCS9_CONTENT_TYPE = univ.ObjectIdentifier('1.2.840.113549.1.9.3')
PKCS9_MESSAGE_DIGEST = univ.ObjectIdentifier('1.2.840.113549.1.9.4')
PKCS9_SIGNING_TIME = univ.ObjectIdentifier('1.2.840.113549.1.9.5')

# algorithms
SHA256 = univ.ObjectIdentifier('2.16.840.1.101.3.4.2.1')
PKCS1_RSA_ENCRYPTION = univ.ObjectIdentifier('1.2.840.113549.1.1.1')

NAMES = MappingProxyType({
    PKCS7_DATA: 'data',
    PKCS7_SIGNED_DATA: 'signedData',
    PKCS9_CONTENT_TYPE: 'contentType',
    PKCS9_MESSAGE_DIGEST: 'messageDigest',
    PKCS9_SIGNING_TIME: 'signingTime',
    SHA256: 'sha256',
    PKCS1_RSA_ENCRYPTION: 'rsaEncryption',
})


def name_of(oid) -> str:
    """Return a readable name for a known OID, dotted form otherwise."""
    oid = univ.ObjectIdentifier(oid)
    return NAMES.get(oid, str(oid))
