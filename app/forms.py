from decimal import Decimal, InvalidOperation

from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict
from wtforms import DecimalField as WTFormsDecimalField
from wtforms import Form, SelectField, StringField, SubmitField
from wtforms.validators import AnyOf, DataRequired, StopValidation, ValidationError
from wtforms.widgets import TextInput

from app.models import INVOICE_STATUSES
from app.utils.numeric import AmountParsingError, parse_amount, to_minor_units

CUSTOMER_REQUIRED_MESSAGE = "Please select a customer"
AMOUNT_POSITIVE_MESSAGE = "Please enter a amount greater than $0"
STATUS_REQUIRED_MESSAGE = "Please select a status"


class AmountField(WTFormsDecimalField):
    """Decimal field that accepts formatted monetary input.

    Values such as ``"$1,234.50"`` are normalised before parsing.  Blank
    input leaves ``data`` as ``None`` instead of raising a processing error
    so that the amount validator can report it like any other non-positive
    amount.
    """

    widget = TextInput()

    def __init__(self, *args, render_kw=None, **kwargs):
        render_kw = dict(render_kw or {})
        render_kw.setdefault("inputmode", "decimal")
        super().__init__(*args, render_kw=render_kw, **kwargs)

    def process_formdata(self, valuelist):
        if not valuelist:
            return
        try:
            self.data = parse_amount(valuelist[0])
        except AmountParsingError as exc:
            self.data = None
            raise ValueError(str(exc)) from exc


class GreaterThanZero:
    """Require a positive amount that is still positive once stored in cents."""

    def __init__(self, message=None):
        self.message = message or AMOUNT_POSITIVE_MESSAGE

    def __call__(self, form, field):
        if field.data is None and field.process_errors:
            # The processing error already explains the problem.
            raise StopValidation()
        if field.data is None or field.data <= 0:
            raise ValidationError(self.message)
        try:
            cents = to_minor_units(field.data)
        except InvalidOperation as exc:
            raise ValidationError("Amount is too large.") from exc
        if cents <= 0:
            raise ValidationError(self.message)


class InvoiceForm(Form):
    """Schema for the invoice create and edit forms.

    The HTML names follow the dashboard's form payload (``customerId``,
    ``amount``, ``status``).  The form is a plain WTForms form so it can
    validate any submitted mapping; CSRF is enforced by ``CSRFProtect`` on
    the routes.
    """

    customer_id = StringField(
        "Customer",
        name="customerId",
        validators=[DataRequired(message=CUSTOMER_REQUIRED_MESSAGE)],
    )
    amount = AmountField("Amount", validators=[GreaterThanZero()])
    status = SelectField(
        "Status",
        choices=[(status, status.title()) for status in INVOICE_STATUSES],
        validate_choice=False,
        validators=[AnyOf(INVOICE_STATUSES, message=STATUS_REQUIRED_MESSAGE)],
    )
    submit = SubmitField("Save Invoice")

    @classmethod
    def from_payload(cls, form_data, **kwargs):
        """Build the form from a request form or any plain mapping."""
        if form_data is not None and not hasattr(form_data, "getlist"):
            form_data = MultiDict(form_data)
        return cls(formdata=form_data, **kwargs)

    @property
    def field_errors(self) -> dict:
        """Errors keyed by the submitted field names, failing fields only."""
        return {
            field.name: list(field.errors) for field in self if field.errors
        }

    @property
    def cleaned_data(self) -> dict:
        return {
            "customer_id": self.customer_id.data.strip(),
            "amount": Decimal(self.amount.data),
            "status": self.status.data,
        }


class DeleteForm(FlaskForm):
    """Simple form used for CSRF protection on delete actions."""

    submit = SubmitField("Delete")
