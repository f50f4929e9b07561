# educk/domain/payments.py
"""Simulated payment gateway. No external call is made."""
import time
from datetime import datetime, timezone

from educk.domain.enums import PaymentMethod
from educk.domain.errors import InvalidPaymentMethodError

# settled at checkout; boleto waits for the bank
IMMEDIATE_SETTLEMENT = {PaymentMethod.CREDIT_CARD, PaymentMethod.PIX}

_PIX_CODE = (
    "00020126580014br.gov.bcb.pix0136a629532e-7693-4846-b028-f142a1dd1d55"
    "520400005303986540510.005802BR5913Educk Cursos6008Sorocaba62070503***63041234"
)
_BOLETO_BASE_URL = "https://pagamentos.educk.com.br/boleto"


def parse_payment_method(value: str) -> PaymentMethod:
    try:
        return PaymentMethod(value)
    except ValueError:
        allowed = ", ".join(m.value for m in PaymentMethod)
        raise InvalidPaymentMethodError(
            f"Invalid payment method '{value}'. Allowed: {allowed}"
        ) from None


def settles_immediately(method: PaymentMethod) -> bool:
    return method in IMMEDIATE_SETTLEMENT


def build_payment_details(method: PaymentMethod) -> dict:
    stamp = int(time.time() * 1000)
    now = datetime.now(timezone.utc).isoformat()

    if method == PaymentMethod.CREDIT_CARD:
        return {"transactionId": f"TR{stamp}", "paymentDate": now, "cardLastFour": "4242"}
    if method == PaymentMethod.PIX:
        return {"transactionId": f"PIX{stamp}", "paymentDate": now, "pixCode": _PIX_CODE}
    return {"transactionId": f"BOL{stamp}", "boletoUrl": f"{_BOLETO_BASE_URL}/{stamp}"}
