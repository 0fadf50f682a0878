"""Package import order: adapters and services must load from a cold interpreter."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import pytest

BACKEND_DIR = Path(__file__).resolve().parents[3]


@pytest.mark.parametrize(
    "module",
    [
        "shopauth.infra.jwt.pyjwt_token_provider",
        "shopauth.infra.mail.logging_mailer",
        "shopauth.services._shared.ports",
        "shopauth.services.auth.wiring",
        "shopauth.services",
        "shopauth.cli",
    ],
)
def test_module_imports_first_in_fresh_interpreter(module):
    env = {**os.environ, "PYTHONPATH": str(BACKEND_DIR)}
    result = subprocess.run(
        [sys.executable, "-c", f"import {module}"],
        cwd=BACKEND_DIR,
        env=env,
        capture_output=True,
        text=True,
        check=False,
    )
    assert result.returncode == 0, result.stderr
