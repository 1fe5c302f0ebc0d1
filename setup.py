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
"""Setup of pkcs7 tool."""
from setuptools import setup, find_packages

import pkcs7tool

with open("requirements.txt", "rt") as fh:
    tool_requirements = fh.readlines()

setup(
    name="pkcs7-tool",
    version=pkcs7tool.__version__,
    description="Tool/lib to create and verify PKCS#7 SignedData messages",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    author="Izuma Networks",
    author_email="opensource@izumanetworks.com",
    license="Apache 2.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"pkcs7tool": ["signer-input-schema.json"]},
    zip_safe=False,
    entry_points={
        "console_scripts": [
            "pkcs7-tool=pkcs7tool.ptool.ptool:entry_point",
        ],
    },
    python_requires=">=3.7.0",
    install_requires=tool_requirements,
    extras_require={"test": ["pytest"]},
)
