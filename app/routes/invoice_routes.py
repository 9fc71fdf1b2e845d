from flask import (
    Blueprint,
    abort,
    jsonify,
    redirect,
    render_template,
    request,
)

from app import db
from app.forms import DeleteForm, InvoiceForm
from app.models import Invoice
from app.services.invoice_actions import (
    INVOICES_PATH,
    Navigate,
    State,
    create_invoice as create_invoice_action,
    delete_invoice as delete_invoice_action,
    update_invoice as update_invoice_action,
)
from app.utils.cache import cached_for_path

invoice = Blueprint("invoice", __name__)


def _render_form(form, state, title, action_url):
    return render_template(
        "invoices/invoice_form.html",
        form=form,
        state=state,
        title=title,
        action_url=action_url,
    )


def _load_invoice_rows():
    invoices = Invoice.query.order_by(Invoice.date.desc(), Invoice.id).all()
    return [
        {
            "id": inv.id,
            "customer_id": inv.customer_id,
            "amount": inv.amount,
            "amount_display": f"{inv.amount_in_units:,.2f}",
            "status": inv.status,
            "date": inv.date,
        }
        for inv in invoices
    ]


@invoice.route(INVOICES_PATH)
def view_invoices():
    """List invoices, newest first."""
    invoices = cached_for_path(INVOICES_PATH, _load_invoice_rows)
    return render_template(
        "invoices/view_invoices.html",
        invoices=invoices,
        delete_form=DeleteForm(),
    )


@invoice.route(f"{INVOICES_PATH}/create", methods=["GET", "POST"])
def create_invoice():
    """Create an invoice from the submitted form."""
    state = State()
    if request.method == "POST":
        outcome = create_invoice_action(state, request.form)
        if isinstance(outcome, Navigate):
            return redirect(outcome.location)
        state = outcome
        form = InvoiceForm.from_payload(request.form)
    else:
        form = InvoiceForm()
    return _render_form(form, state, "Create Invoice", request.path)


@invoice.route(f"{INVOICES_PATH}/<invoice_id>/edit", methods=["GET", "POST"])
def edit_invoice(invoice_id):
    """Edit the customer, amount and status of an invoice."""
    existing = db.session.get(Invoice, invoice_id)
    if existing is None:
        abort(404)

    state = State()
    if request.method == "POST":
        outcome = update_invoice_action(invoice_id, state, request.form)
        if isinstance(outcome, Navigate):
            return redirect(outcome.location)
        state = outcome
        form = InvoiceForm.from_payload(request.form)
    else:
        form = InvoiceForm(
            data={
                "customer_id": existing.customer_id,
                "amount": existing.amount_in_units,
                "status": existing.status,
            }
        )
    return _render_form(form, state, "Edit Invoice", request.path)


@invoice.route(f"{INVOICES_PATH}/<invoice_id>/delete", methods=["POST"])
def delete_invoice(invoice_id):
    """Delete an invoice and report the outcome without leaving the page."""
    form = DeleteForm()
    if not form.validate_on_submit():
        abort(400)
    state = delete_invoice_action(invoice_id)
    return jsonify(state.to_dict())
