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
import pytest
from cryptography.hazmat.primitives import serialization
from pyasn1.codec.der import encoder as der_encoder

from pkcs7tool.errors import EncodingError
from pkcs7tool.signer import certificates


def _der(cert):
    return cert.public_bytes(serialization.Encoding.DER)


def test_bundle_signer_only(credentials):
    bundle = certificates.build_certificate_bundle(
        credentials['certificate'])

    assert bundle.certificates == (_der(credentials['certificate']),)
    assert bundle.raw == _der(credentials['certificate'])
    assert len(bundle.raw) == len(_der(credentials['certificate']))


def test_bundle_with_intermediate(credentials):
    bundle = certificates.build_certificate_bundle(
        credentials['certificate'], credentials['intermediate'])

    signer_der = _der(credentials['certificate'])
    intermediate_der = _der(credentials['intermediate'])
    assert len(bundle.raw) == len(signer_der) + len(intermediate_der)
    assert bundle.raw == signer_der + intermediate_der


def test_split_certificates(credentials):
    bundle = certificates.build_certificate_bundle(
        credentials['certificate'], credentials['intermediate'])

    assert certificates.split_certificates(bundle.raw) == bundle.certificates


def test_certificates_field_tag(credentials):
    bundle = certificates.build_certificate_bundle(
        credentials['certificate'], credentials['intermediate'])

    encoded = der_encoder.encode(certificates.certificates_field(bundle))
    assert encoded[0] == 0xa0
    assert encoded.endswith(bundle.raw)


def test_decode_empty_certificate():
    with pytest.raises(EncodingError):
        certificates.decode_certificate(b'')


def test_decode_certificate_trailing_bytes(credentials):
    with pytest.raises(EncodingError):
        certificates.decode_certificate(
            _der(credentials['certificate']) + b'\x00\x00')


def test_decode_truncated_certificate(credentials):
    with pytest.raises(EncodingError):
        certificates.decode_certificate(_der(credentials['certificate'])[:-10])


def test_decoded_certificate_fields(credentials):
    cert = credentials['certificate']
    tbs = certificates.decode_certificate(_der(cert))['tbsCertificate']

    assert int(tbs['serialNumber']) == cert.serial_number
    assert bytes(tbs['issuer']) == cert.issuer.public_bytes()
