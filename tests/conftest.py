"""Shared fixtures: a temp data folder, a write-counting document repository and a scripted file picker."""

import pytest

from structdesk.domain.models import Category, Field, FieldType, Structure, SubCategory
from structdesk.services.core import CoreService
from structdesk.services.exchange import FilePicker
from structdesk.services.repositories.document_repository import DocumentRepository


class CountingDocumentRepository(DocumentRepository):
    """Real JSON writes, with a per-path tally."""

    def __init__(self):
        super().__init__(indent=2)
        self.writes = {}

    def write(self, path, payload):
        super().write(path, payload)
        self.writes[path] = self.writes.get(path, 0) + 1

    def count(self, path):
        return self.writes.get(path, 0)


class StubPicker(FilePicker):
    """Returns the queued path (None = cancelled) and records the filters it was given."""

    def __init__(self, open_path=None, save_path=None):
        self.open_path = open_path
        self.save_path = save_path
        self.save_defaults = []
        self.calls = 0

    def pick_open_path(self, filters):
        self.calls += 1
        return self.open_path

    def pick_save_path(self, filters, default_name):
        self.calls += 1
        self.save_defaults.append(default_name)
        return self.save_path


def make_catalog():
    invoice = Structure("Invoice", [Field("Id", FieldType.NUMBER), Field("Paid", FieldType.BOOLEAN)])
    customer = Structure(
        "Customer",
        [Field("Name", FieldType.TEXT), Field("Since", FieldType.DATE), Field("Credit", FieldType.NUMBER)],
    )
    return [
        Category("Finance", [SubCategory("Billing", [invoice])]),
        Category("Sales", [SubCategory("Accounts", [customer])]),
    ]


@pytest.fixture
def documents():
    return CountingDocumentRepository()


@pytest.fixture
def picker():
    return StubPicker()


@pytest.fixture
def core(tmp_path, documents, picker):
    """Started core with the sample catalog saved and an empty records document."""
    svc = CoreService(data_dir=str(tmp_path), picker=picker, documents=documents)
    svc.start()
    svc.catalog.categories = make_catalog()
    svc.catalog.save()
    return svc
