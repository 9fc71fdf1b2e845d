"""Server-side actions behind the invoice forms of the dashboard.

Each action validates the submitted payload, runs a single statement through
an :class:`~app.services.invoice_repository.InvoiceRepository`, marks the
cached invoice listing as stale and then either hands back a
:class:`Navigate` effect or a :class:`State` for the form to re-render.
Failures are always returned, never raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from flask import current_app

from app import db
from app.forms import InvoiceForm
from app.models import utc_today
from app.services.invoice_repository import InvoiceRepository, SqlInvoiceRepository
from app.utils.cache import revalidate_path
from app.utils.numeric import to_minor_units
from app.utils.result import Err

INVOICES_PATH = "/dashboard/invoices"

CREATE_VALIDATION_MESSAGE = "Missing Fields. Failed to Create Invoice."
# TODO: confirm the wording for edits with product; the edit form still
# shows the create message.
UPDATE_VALIDATION_MESSAGE = CREATE_VALIDATION_MESSAGE
CREATE_FAILED_MESSAGE = "Database error : Failed to create an invoice"
UPDATE_FAILED_MESSAGE = "Database error : Failed to update invoice"
DELETE_FAILED_MESSAGE = "Database error : Failed to delete the invoice"
DELETED_MESSAGE = "Deleted invoice!"


@dataclass
class State:
    """What an invoice form shows after a submission that did not redirect."""

    errors: Optional[dict] = None
    message: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"message": self.message}
        if self.errors:
            data["errors"] = self.errors
        return data


@dataclass(frozen=True)
class Navigate:
    """Redirect the caller must perform; nothing runs after it."""

    location: str


ActionOutcome = Union[State, Navigate]


def _default_repository() -> InvoiceRepository:
    return SqlInvoiceRepository(db.session)


def _validate(form_data):
    form = InvoiceForm.from_payload(form_data)
    if form.validate():
        return form.cleaned_data, None
    return None, form.field_errors


def create_invoice(
    prev_state: Optional[State],
    form_data,
    repository: Optional[InvoiceRepository] = None,
) -> ActionOutcome:
    """Validate the form and insert a new invoice dated today."""
    data, errors = _validate(form_data)
    if errors:
        return State(errors=errors, message=CREATE_VALIDATION_MESSAGE)

    repository = repository or _default_repository()
    amount_in_cents = to_minor_units(data["amount"])
    date = utc_today().isoformat()

    result = repository.insert_invoice(
        data["customer_id"], amount_in_cents, data["status"], date
    )
    if isinstance(result, Err):
        return State(message=CREATE_FAILED_MESSAGE)

    current_app.logger.info(
        "Created invoice %s for customer %s", result.value, data["customer_id"]
    )
    revalidate_path(INVOICES_PATH)
    return Navigate(INVOICES_PATH)


def update_invoice(
    invoice_id: str,
    prev_state: Optional[State],
    form_data,
    repository: Optional[InvoiceRepository] = None,
) -> ActionOutcome:
    """Validate the form and overwrite customer, amount and status of an invoice.

    The invoice date is left untouched.
    """
    data, errors = _validate(form_data)
    if errors:
        current_app.logger.info(
            "Invoice %s update rejected: %s", invoice_id, errors
        )
        return State(errors=errors, message=UPDATE_VALIDATION_MESSAGE)

    repository = repository or _default_repository()
    amount_in_cents = to_minor_units(data["amount"])

    result = repository.update_invoice(
        invoice_id, data["customer_id"], amount_in_cents, data["status"]
    )
    if isinstance(result, Err):
        return State(message=UPDATE_FAILED_MESSAGE)

    current_app.logger.info("Updated invoice %s", invoice_id)
    revalidate_path(INVOICES_PATH)
    return Navigate(INVOICES_PATH)


def delete_invoice(
    invoice_id: str, repository: Optional[InvoiceRepository] = None
) -> State:
    """Remove an invoice; the caller stays on its current page."""
    repository = repository or _default_repository()

    result = repository.delete_invoice(invoice_id)
    if isinstance(result, Err):
        return State(message=DELETE_FAILED_MESSAGE)

    current_app.logger.info("Deleted invoice %s", invoice_id)
    revalidate_path(INVOICES_PATH)
    return State(message=DELETED_MESSAGE)
