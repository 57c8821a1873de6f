from datetime import date

from accordo.services.models import Objectives, format_number


def generate_generic_contract(objectives: Objectives, today: date | None = None) -> str:
    """Boilerplate agreement used as the negotiation base in place of the upload.

    Its PAYMENT TERMS, DELIVERY TIME and PENALTIES headings are what the
    clause substitution step matches on.
    """
    today = today or date.today()
    return f"""
CONTRACT AGREEMENT

This Contract Agreement (the "Agreement") is entered into as of {today.strftime("%m/%d/%Y")}.

PARTIES:
Between the Client and the Provider.

SCOPE OF WORK:
The Provider agrees to deliver the products and/or services as described below.

PAYMENT TERMS:
The Client shall pay the Provider the agreed amount within {format_number(objectives.payment_days)} days of receiving the invoice.

Payment shall be made by bank transfer to the Provider's designated account.

Late payments will incur interest at a rate of 2% per month.

DELIVERY TIME:
The Provider shall deliver all products and complete all services within {format_number(objectives.delivery_days)} days from the date of this agreement.

Delivery shall be considered complete when the Client acknowledges receipt of all deliverables.

PENALTIES:
In case of late delivery, a penalty of {format_number(objectives.penalty_rate)}% of the total contract value will be applied for each week of delay.

The total penalties shall not exceed 10% of the contract value.

CONFIDENTIALITY:
Both parties agree to maintain the confidentiality of any proprietary information shared during the course of this agreement.

TERMINATION:
Either party may terminate this agreement with 30 days written notice.

In case of termination, the Client shall pay for all work completed up to the termination date.

GOVERNING LAW:
This agreement shall be governed by the laws of [Jurisdiction].

SIGNATURES:
This agreement constitutes the entire understanding between the parties.
"""
