"""
Unit tests for the error kind to HTTP status mapping.

Run with: pytest src/memos/api/errors_test.py -v
"""

import pytest

from memos.api.errors import STATUS_BY_KIND, error_response
from memos.errors import (
    ErrorKind,
    InternalError,
    NotFoundError,
    RecordNotFound,
    StorageError,
    ValidationError,
)


def test_every_kind_has_a_status():
    assert set(STATUS_BY_KIND) == set(ErrorKind)


@pytest.mark.parametrize("error,status,name", [
    (ValidationError("bad input"), 400, "ValidationError"),
    (NotFoundError("Memo with id x not found"), 404, "NotFound"),
    (StorageError("connection refused"), 500, "DatabaseError"),
    (RecordNotFound("no row"), 500, "DatabaseError"),
    (InternalError("broken"), 500, "InternalError"),
])
def test_error_response(stub_app, error, status, name):
    with stub_app.app_context():
        response, code = error_response(error)

    assert code == status
    assert response.get_json() == {"error": name, "message": error.message, "status": status}
