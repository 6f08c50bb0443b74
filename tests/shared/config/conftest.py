# -*- coding: utf-8 -*-
import os

import pytest


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """
    Aísla variables de entorno: los tests de settings no deben heredar la
    configuración del shell del dev.
    """
    for k in list(os.environ.keys()):
        if k.upper().startswith(("IPN_", "APP_", "DATABASE_", "DB_", "LOG_")):
            monkeypatch.delenv(k, raising=False)
    yield
