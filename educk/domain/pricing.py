# educk/domain/pricing.py
"""
Cart and order pricing.

``discount_price`` is the markdown applied to a course: a course listed at
99.90 with ``discount_price`` 79.90 contributes 79.90 to the per-item discount.
A ``discount_price`` of 0 means the course is sold at list price.

All amounts are Decimal and rounded to cents.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Mapping

from educk.domain.errors import EmptyCartError, InvalidCouponError

ZERO = Decimal("0.00")
CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PriceLine:
    """Immutable price snapshot of a single course."""

    course_id: int
    title: str
    price: Decimal
    discount_price: Decimal = ZERO

    @property
    def markdown(self) -> Decimal:
        return self.discount_price if self.discount_price > 0 else ZERO

    @property
    def final_price(self) -> Decimal:
        return max(self.price - self.markdown, ZERO)

    @classmethod
    def from_course(cls, course) -> "PriceLine":
        return cls(
            course_id=course.id,
            title=course.title,
            price=to_money(course.price),
            discount_price=to_money(course.discount_price or 0),
        )


@dataclass(frozen=True)
class CartTotals:
    subtotal: Decimal
    per_item_discount: Decimal
    total: Decimal


@dataclass(frozen=True)
class CouponResult:
    code: str
    percentage: int
    discount_amount: Decimal
    final_total: Decimal


@dataclass(frozen=True)
class OrderPricing:
    lines: tuple
    subtotal: Decimal
    discount_amount: Decimal
    final_amount: Decimal
    coupon: CouponResult | None = None


def compute_cart_totals(lines: Iterable[PriceLine], require_items: bool = False) -> CartTotals:
    lines = list(lines)
    if not lines:
        if require_items:
            raise EmptyCartError()
        return CartTotals(subtotal=ZERO, per_item_discount=ZERO, total=ZERO)

    subtotal = sum((line.price for line in lines), ZERO)
    per_item_discount = sum((line.markdown for line in lines), ZERO)

    return CartTotals(
        subtotal=to_money(subtotal),
        per_item_discount=to_money(per_item_discount),
        total=to_money(max(subtotal - per_item_discount, ZERO)),
    )


class CouponRegistry:
    """Lookup table of coupon code -> percentage off (0-100)."""

    def __init__(self, coupons: Mapping[str, int]):
        table = {}
        for code, percentage in coupons.items():
            percentage = int(percentage)
            if not 0 <= percentage <= 100:
                raise ValueError(f"Coupon {code} has percentage {percentage} outside 0-100")
            table[self.normalize(code)] = percentage
        self._coupons = table

    @staticmethod
    def normalize(code: str) -> str:
        return code.strip().upper()

    def percentage_for(self, code: str) -> int:
        try:
            return self._coupons[self.normalize(code)]
        except KeyError:
            raise InvalidCouponError(f"Coupon '{code}' is invalid or expired") from None

    def apply(self, total: Decimal, code: str) -> CouponResult:
        percentage = self.percentage_for(code)
        total = to_money(total)
        discount = to_money(total * percentage / Decimal(100))

        return CouponResult(
            code=self.normalize(code),
            percentage=percentage,
            discount_amount=discount,
            # floor only guards against rounding; valid percentages never go below 0
            final_total=max(total - discount, ZERO),
        )


def apply_coupon(total: Decimal, code: str, registry: CouponRegistry) -> CouponResult:
    return registry.apply(total, code)


def price_order(
    lines: Iterable[PriceLine],
    coupon_code: str | None,
    registry: CouponRegistry,
) -> OrderPricing:
    """
    Prices a checkout.

    The coupon percentage is taken from the total left after per-item
    markdowns; its discount is added on top of them. The final amount never
    goes below zero.
    """
    lines = tuple(lines)
    totals = compute_cart_totals(lines, require_items=True)

    coupon = None
    discount_amount = totals.per_item_discount
    if coupon_code:
        coupon = registry.apply(totals.total, coupon_code)
        discount_amount += coupon.discount_amount

    return OrderPricing(
        lines=lines,
        subtotal=totals.subtotal,
        discount_amount=to_money(discount_amount),
        final_amount=to_money(max(totals.subtotal - discount_amount, ZERO)),
        coupon=coupon,
    )
