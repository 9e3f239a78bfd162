import os

import pytest


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path_factory, monkeypatch):
    """Keeps PSCAN_* variables and ~/.pscan.yaml of the machine out of tests"""
    for name in list(os.environ):
        if name.upper().startswith("PSCAN_"):
            monkeypatch.delenv(name)
    monkeypatch.setenv("HOME", str(tmp_path_factory.mktemp("home")))
