from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from library_api.app.core.config import Settings
from library_api.app.core.db import Database
from library_api.app.main import create_app
from library_api.app.schemas.book import BookCreate
from library_api.app.services.borrowing_service import BorrowingService
from library_api.app.stores.borrower_store import BorrowerStore
from library_api.app.stores.catalog_store import CatalogStore
from library_api.app.stores.loan_ledger import LoanLedger

ISBN = 978316148420

# Mid-afternoon on purpose: due dates must not depend on the time of day.
FIXED_NOW = datetime(2024, 1, 1, 15, 30, tzinfo=timezone.utc)


class FrozenClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def database(tmp_path):
    db = Database(str(tmp_path / "library.db"), timeout=30)
    db.init_schema()
    return db


@pytest.fixture
def catalog(database):
    return CatalogStore(database)


@pytest.fixture
def borrowers(database):
    return BorrowerStore(database)


@pytest.fixture
def loans(database):
    return LoanLedger(database)


@pytest.fixture
def clock():
    return FrozenClock(FIXED_NOW)


@pytest.fixture
def service(database, catalog, borrowers, loans, clock):
    return BorrowingService(database, catalog, borrowers, loans, clock=clock)


@pytest.fixture
def add_book(catalog):
    def _add(isbn=ISBN, quantity=1, title="History of hairbrushes", author="Afro B. Rusher", shelf="A12"):
        return catalog.create(
            BookCreate(isbn=isbn, title=title, author=author, quantity=quantity, shelf_location=shelf)
        )

    return _add


@pytest.fixture
def add_borrower(borrowers):
    counter = {"n": 0}

    def _add(name=None, email=None):
        counter["n"] += 1
        n = counter["n"]
        return borrowers.create(name or f"Reader {n}", email or f"reader{n}@library.org")

    return _add


@pytest.fixture
def app(tmp_path):
    return create_app(Settings(database_url=str(tmp_path / "api.db")))


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
