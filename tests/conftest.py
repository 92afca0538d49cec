# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the conftest unit so this responsibility stays isolated, testable, and easy to evolve."""

import os
import tempfile
import pytest
from pathlib import Path

_ENV_KEYS = ("BINDFORM_CONFIG", "BINDFORM_CODECS", "BINDFORM_BODY_LIMIT")


@pytest.fixture(scope="session", autouse=True)
def session_temp_env():
    # Keep a developer's own BINDFORM_* settings or config/bindform.json
    # from leaking into the app factory during tests.
    temp_dir = tempfile.TemporaryDirectory(prefix="bindform_test_session_")

    originals = {key: os.environ.get(key) for key in _ENV_KEYS}
    for key in _ENV_KEYS:
        os.environ.pop(key, None)
    os.environ["BINDFORM_CONFIG"] = str(Path(temp_dir.name) / "bindform.json")

    yield

    temp_dir.cleanup()

    for key, value in originals.items():
        if value is not None:
            os.environ[key] = value
        else:
            os.environ.pop(key, None)
