import uuid
from datetime import date, datetime, timezone

from app import db
from app.utils.numeric import from_minor_units

INVOICE_STATUSES = ("pending", "paid")


def _new_invoice_id() -> str:
    return str(uuid.uuid4())


def utc_today() -> date:
    """Return the current calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def _today_iso() -> str:
    return utc_today().isoformat()


class Invoice(db.Model):
    __tablename__ = "invoices"

    id = db.Column(db.String(36), primary_key=True, default=_new_invoice_id)
    # Customers live in another service; only their identifier is stored.
    customer_id = db.Column(db.String(64), nullable=False, index=True)
    # Minor currency units (cents).
    amount = db.Column(db.Integer, nullable=False)
    status = db.Column(db.String(16), nullable=False)
    date = db.Column(db.String(10), nullable=False, default=_today_iso)

    __table_args__ = (
        db.CheckConstraint("amount > 0", name="ck_invoices_amount_positive"),
        db.CheckConstraint(
            "status IN ('pending', 'paid')", name="ck_invoices_status"
        ),
        db.Index("ix_invoices_date", "date"),
    )

    @property
    def amount_in_units(self):
        """Amount in whole currency units for display."""
        return from_minor_units(self.amount)

    def __repr__(self):
        return f"<Invoice {self.id} {self.status} {self.amount}>"
