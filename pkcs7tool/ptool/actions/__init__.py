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
"""Actions init."""
import argparse
from pathlib import Path

import jsonschema
import yaml

PACKAGE_PATH = Path(__file__).resolve().parent.parent.parent

SCHEMA_FILE = PACKAGE_PATH / 'signer-input-schema.json'


def existing_file_path_arg_factory(value) -> Path:
    """
    Construct Path to an existing file for an argument.

    :param value: input string
    :return: Path
    """
    prospective = Path(value)
    if not prospective.is_file():
        raise argparse.ArgumentTypeError(
            'File "{}" is not found'.format(value)
        )
    return prospective


def load_signing_config(config_fh) -> dict:
    """
    Load and validate a YAML signing configuration.

    :param config_fh: binary file object
    :return: configuration dictionary, empty for an empty file
    """
    input_cfg = yaml.safe_load(config_fh) or {}
    with SCHEMA_FILE.open('rb') as fh:
        input_schema = yaml.safe_load(fh)
    jsonschema.validate(input_cfg, input_schema)
    return input_cfg
