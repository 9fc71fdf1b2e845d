"""Persistence of invoice rows through parameterized SQL statements."""

from __future__ import annotations

from typing import Protocol

from flask import current_app
from sqlalchemy import delete, insert, update

from app.models import Invoice
from app.utils.result import Err, Ok, Result


class InvoiceRepository(Protocol):
    """Storage used by the invoice actions.

    Implementations report database failures as :class:`Err` values and
    never raise them to the caller.
    """

    def insert_invoice(
        self, customer_id: str, amount_in_cents: int, status: str, date: str
    ) -> Result: ...

    def update_invoice(
        self, invoice_id: str, customer_id: str, amount_in_cents: int, status: str
    ) -> Result: ...

    def delete_invoice(self, invoice_id: str) -> Result: ...


class SqlInvoiceRepository:
    """Run one statement per call against the ``invoices`` table."""

    def __init__(self, session):
        self.session = session

    def _execute(self, statement, failure: str, returning=None) -> Result:
        try:
            result = self.session.execute(statement)
            value = returning(result) if returning else result.rowcount
            self.session.commit()
        except Exception as exc:
            # Drivers raise some bind errors (e.g. OverflowError) unwrapped.
            self.session.rollback()
            current_app.logger.exception(failure)
            return Err(str(exc))
        return Ok(value)

    def insert_invoice(
        self, customer_id: str, amount_in_cents: int, status: str, date: str
    ) -> Result:
        statement = insert(Invoice.__table__).values(
            customer_id=customer_id,
            amount=amount_in_cents,
            status=status,
            date=date,
        )
        return self._execute(
            statement,
            "Failed to insert invoice",
            returning=lambda result: result.inserted_primary_key[0],
        )

    def update_invoice(
        self, invoice_id: str, customer_id: str, amount_in_cents: int, status: str
    ) -> Result:
        statement = (
            update(Invoice.__table__)
            .where(Invoice.__table__.c.id == invoice_id)
            .values(customer_id=customer_id, amount=amount_in_cents, status=status)
        )
        return self._execute(statement, f"Failed to update invoice {invoice_id}")

    def delete_invoice(self, invoice_id: str) -> Result:
        statement = delete(Invoice.__table__).where(
            Invoice.__table__.c.id == invoice_id
        )
        return self._execute(statement, f"Failed to delete invoice {invoice_id}")
