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
"""Errors raised while building or checking PKCS#7 messages."""


class Pkcs7Error(Exception):
    """Base class for all pkcs7-tool errors."""


class EncodingError(Pkcs7Error):
    """A DER marshal or unmarshal step rejected its input."""


class SigningError(Pkcs7Error):
    """The private key could not produce the signature."""


class VerificationError(Pkcs7Error):
    """A PKCS#7 message does not verify."""
