from __future__ import annotations

from datetime import date

import pytest
from flask.testing import FlaskClient

from wealthplan.app import create_app
from wealthplan.config import Settings

AS_OF = date(2025, 6, 15)


@pytest.fixture()
def as_of() -> date:
    return AS_OF


@pytest.fixture()
def client() -> FlaskClient:
    app = create_app(Settings(log_json=False, log_level="WARNING"))
    with app.test_client() as test_client:
        yield test_client
