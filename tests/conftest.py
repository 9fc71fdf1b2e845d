from __future__ import annotations

import os
import sys

import pytest

from app import cache, create_app, db
from app.utils.result import Err

# Ensure the app package is importable when tests change directories
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, BASE_DIR)


@pytest.fixture
def app(tmp_path):
    os.environ.setdefault("SECRET_KEY", "testsecret")

    # Ensure a clean database for each test within the temp directory
    db_path = tmp_path / "invoices.db"
    if db_path.exists():
        os.remove(db_path)

    cwd = os.getcwd()
    os.chdir(tmp_path)
    app = create_app(
        ["--demo"],
        config={
            "TESTING": True,
            "WTF_CSRF_ENABLED": False,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_path}",
            "CACHE_TYPE": "SimpleCache",
        },
    )
    os.chdir(cwd)

    with app.app_context():
        db.create_all()
        cache.clear()

        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


class FailingRepository:
    """Repository double whose every statement fails."""

    def __init__(self, message: str = "connection refused"):
        self.message = message
        self.calls: list[tuple] = []

    def insert_invoice(self, *args):
        self.calls.append(("insert_invoice", *args))
        return Err(self.message)

    def update_invoice(self, *args):
        self.calls.append(("update_invoice", *args))
        return Err(self.message)

    def delete_invoice(self, *args):
        self.calls.append(("delete_invoice", *args))
        return Err(self.message)


@pytest.fixture
def failing_repository():
    return FailingRepository()
