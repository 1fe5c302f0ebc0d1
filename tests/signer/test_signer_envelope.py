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
import datetime
import hashlib
import io
import shutil
import subprocess

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.serialization import pkcs7
from pyasn1.codec.der import decoder as der_decoder

from pkcs7tool import signer
from pkcs7tool import verify
from pkcs7tool.asn1 import oids
from pkcs7tool.asn1 import pkcs7_definition
from pkcs7tool.errors import EncodingError
from pkcs7tool.errors import VerificationError
from pkcs7tool.signer import envelope

CONTENT = b'firmware image content ' * 100
SIGNING_TIME = datetime.datetime(
    2022, 5, 6, 7, 8, 9, tzinfo=datetime.timezone.utc)


def _der(cert):
    return cert.public_bytes(serialization.Encoding.DER)


@pytest.fixture
def message(credentials):
    return signer.sign_with_intermediate(
        io.BytesIO(CONTENT),
        credentials['certificate'],
        credentials['private_key'],
        intermediate=credentials['intermediate'],
        signing_time=SIGNING_TIME
    )


def test_outer_content_info(message):
    content_info, rest = der_decoder.decode(
        message, asn1Spec=pkcs7_definition.ContentInfo())

    assert not rest
    assert content_info['contentType'] == oids.PKCS7_SIGNED_DATA
    # SEQUENCE with two length octets, signedData OID, [0] EXPLICIT content
    assert message[:2] == b'\x30\x82'
    assert message[4:15] == \
        b'\x06\x09\x2a\x86\x48\x86\xf7\x0d\x01\x07\x02'
    assert message[15] == 0xa0


def test_message_digest_attribute(message):
    parsed = verify.parse_envelope(message)
    assert parsed.message_digest == hashlib.sha256(CONTENT).digest()


def test_exactly_three_attributes(message):
    parsed = verify.parse_envelope(message)

    assert set(parsed.attributes) == {
        oids.PKCS9_CONTENT_TYPE,
        oids.PKCS9_SIGNING_TIME,
        oids.PKCS9_MESSAGE_DIGEST,
    }
    assert len(parsed.signer_info['authenticatedAttributes']) == 3
    assert parsed.content_type == oids.PKCS7_DATA
    assert parsed.signing_time == SIGNING_TIME


def test_signed_data_structure(message):
    parsed = verify.parse_envelope(message)
    signed_data = parsed.signed_data

    assert int(signed_data['version']) == 1
    assert len(signed_data['digestAlgorithms']) == 1
    assert signed_data['digestAlgorithms'][0]['algorithm'] == oids.SHA256
    assert parsed.signer_info['digestAlgorithm']['algorithm'] == \
        signed_data['digestAlgorithms'][0]['algorithm']
    assert signed_data['contentInfo']['contentType'] == oids.PKCS7_DATA
    assert not signed_data['contentInfo']['content'].isValue
    assert len(signed_data['signerInfos']) == 1


def test_signature_verifies(message, credentials):
    verify.verify_envelope(message, content=io.BytesIO(CONTENT))
    verify.verify_envelope(
        message, certificate=credentials['certificate'])


def test_altered_content_fails(message):
    altered = bytearray(CONTENT)
    altered[10] ^= 0x01
    with pytest.raises(VerificationError):
        verify.verify_envelope(message, content=io.BytesIO(bytes(altered)))


def test_altered_encrypted_digest_fails(message):
    # encryptedDigest is the last field of the message
    altered = bytearray(message)
    altered[-1] ^= 0x01
    with pytest.raises(VerificationError):
        verify.verify_envelope(bytes(altered))


def test_altered_attributes_fail(message):
    altered = message.replace(b'220506070809Z', b'220506070810Z')
    assert altered != message
    with pytest.raises(VerificationError):
        verify.verify_envelope(altered)


def test_wrong_certificate_fails(message, credentials):
    with pytest.raises(VerificationError):
        verify.verify_envelope(
            message, certificate=credentials['intermediate'])


def _flip_byte(message, offset):
    altered = bytearray(message)
    altered[offset] ^= 0x01
    return bytes(altered)


def _signer_certificate_end(message, credentials):
    signer_der = _der(credentials['certificate'])
    return message.index(signer_der) + len(signer_der)


def test_altered_certificate_signature_fails(message, credentials):
    altered = _flip_byte(
        message, _signer_certificate_end(message, credentials) - 1)
    with pytest.raises(VerificationError):
        verify.verify_envelope(altered, content=io.BytesIO(CONTENT))


def test_altered_certificate_subject_fails(message):
    altered = _flip_byte(message, message.index(b'Test Signer'))
    assert b'Test Signer' not in altered
    with pytest.raises(VerificationError):
        verify.verify_envelope(altered, content=io.BytesIO(CONTENT))


def test_issuer_certificate_given(credentials):
    message = signer.sign(
        io.BytesIO(CONTENT),
        credentials['certificate'],
        credentials['private_key'],
        signing_time=SIGNING_TIME
    )
    verify.verify_envelope(
        message, issuer_certificate=credentials['intermediate'])

    altered = _flip_byte(
        message, _signer_certificate_end(message, credentials) - 1)
    with pytest.raises(VerificationError):
        verify.verify_envelope(
            altered, issuer_certificate=credentials['intermediate'])


def test_wrong_issuer_certificate_fails(message, credentials):
    with pytest.raises(VerificationError):
        verify.verify_envelope(
            message, issuer_certificate=credentials['root'])


def test_find_issuer_certificate(message, credentials):
    parsed = verify.parse_envelope(message)
    assert verify.find_issuer_certificate(parsed) == \
        _der(credentials['intermediate'])


def test_bundle_length_with_intermediate(message, credentials):
    parsed = verify.parse_envelope(message)
    signer_der = _der(credentials['certificate'])
    intermediate_der = _der(credentials['intermediate'])

    assert parsed.certificates == (signer_der, intermediate_der)
    assert bytes(parsed.signed_data['certificates']) == \
        signer_der + intermediate_der


def test_bundle_length_without_intermediate(credentials):
    message = signer.sign(
        io.BytesIO(CONTENT),
        credentials['certificate'],
        credentials['private_key']
    )
    parsed = verify.parse_envelope(message)

    assert len(bytes(parsed.signed_data['certificates'])) == \
        len(_der(credentials['certificate']))
    verify.verify_envelope(message, content=io.BytesIO(CONTENT))


def test_issuer_and_serial_verbatim(message, credentials):
    parsed = verify.parse_envelope(message)
    cert = credentials['certificate']

    assert parsed.issuer == cert.issuer.public_bytes()
    assert parsed.serial_number == cert.serial_number


def test_repeated_signing(credentials):
    first = signer.sign(
        io.BytesIO(CONTENT),
        credentials['certificate'],
        credentials['private_key']
    )
    second = signer.sign(
        io.BytesIO(CONTENT),
        credentials['certificate'],
        credentials['private_key']
    )
    for message in (first, second):
        verify.verify_envelope(message, content=io.BytesIO(CONTENT))


def test_fixed_signing_time_reproducible(credentials):
    messages = [
        signer.sign(
            io.BytesIO(CONTENT),
            credentials['certificate'],
            credentials['private_key'],
            signing_time=SIGNING_TIME
        )
        for _ in range(2)
    ]
    assert messages[0] == messages[1]


def test_empty_content(credentials):
    message = signer.sign(
        io.BytesIO(b''),
        credentials['certificate'],
        credentials['private_key']
    )
    parsed = verify.verify_envelope(message, content=io.BytesIO(b''))
    assert parsed.message_digest == hashlib.sha256(b'').digest()


def test_stream_error_aborts(credentials):
    class BrokenStream:
        def read(self, _size=-1):
            raise OSError('read failed')

    with pytest.raises(OSError):
        signer.sign(
            BrokenStream(),
            credentials['certificate'],
            credentials['private_key']
        )


def test_openssl_reads_certificates(message, credentials):
    loaded = pkcs7.load_der_pkcs7_certificates(message)

    assert sorted(_der(cert) for cert in loaded) == sorted([
        _der(credentials['certificate']),
        _der(credentials['intermediate']),
    ])


def test_pem_armour(message):
    pem = envelope.to_pem(message)

    assert pem.startswith(b'-----BEGIN PKCS7-----\n')
    assert pem.endswith(b'-----END PKCS7-----\n')
    assert all(len(line) <= 64 for line in pem.splitlines())
    assert envelope.from_pem(pem) == message
    verify.verify_envelope(pem, content=io.BytesIO(CONTENT))


def test_pem_input_passes_der_through(message):
    assert envelope.from_pem(message) == message


def test_pem_missing_footer(message):
    pem = envelope.to_pem(message)
    truncated = pem[:pem.index(b'-----END')]
    with pytest.raises(EncodingError):
        envelope.from_pem(truncated)


def test_pem_wrong_type(message, credentials):
    pem = credentials['certificate'].public_bytes(serialization.Encoding.PEM)
    with pytest.raises(EncodingError):
        envelope.from_pem(pem)


@pytest.mark.skipif(
    shutil.which('openssl') is None, reason='openssl not available')
def test_openssl_verifies_message(message, tmp_path):
    message_file = tmp_path / 'content.p7s'
    message_file.write_bytes(message)
    content_file = tmp_path / 'content.bin'
    content_file.write_bytes(CONTENT)

    result = subprocess.run(
        [
            'openssl', 'smime', '-verify', '-binary',
            '-inform', 'DER',
            '-in', str(message_file),
            '-content', str(content_file),
            '-noverify',
            '-out', str(tmp_path / 'verified.bin'),
        ],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE
    )
    assert result.returncode == 0, result.stderr.decode(errors='replace')
    assert (tmp_path / 'verified.bin').read_bytes() == CONTENT
