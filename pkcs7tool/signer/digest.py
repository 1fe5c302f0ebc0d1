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
"""Message digest of the signed content."""
import hashlib
import logging
from typing import BinaryIO

READ_BLOCK_SIZE = 65536

logger = logging.getLogger('pkcs7-digest')


def digest_stream(stream: BinaryIO) -> bytes:
    """
    Calculate SHA-256 digest of a readable binary stream.

    The stream is consumed to EOF exactly once; read errors propagate
    unchanged and no partial digest is returned.

    :param stream: object with a read(size) method returning bytes
    :return: 32 bytes digest
    """
    hash_ctx = hashlib.sha256()
    size = 0
    buf = stream.read(READ_BLOCK_SIZE)
    while buf:
        if not isinstance(buf, (bytes, bytearray, memoryview)):
            raise TypeError('content stream must be opened in binary mode')
        hash_ctx.update(buf)
        size += len(buf)
        buf = stream.read(READ_BLOCK_SIZE)
    logger.debug('Content digest calculated over %d bytes', size)
    return hash_ctx.digest()
