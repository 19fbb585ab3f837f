"""Steuerberechnung für eine DiGA-Verordnung (Standardsatz oder Reverse Charge)."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .dto import DecimalLike, quantize_money, to_decimal

TAX_TYPE_CODE_VAT = "VAT"
TAX_CATEGORY_STANDARD = "S"
TAX_CATEGORY_REVERSE_CHARGE = "AE"


@dataclass(frozen=True, slots=True)
class TaxResult:
    tax_amount: Decimal
    grand_total: Decimal
    category_code: str
    effective_rate: Decimal


def compute_tax(net_price: DecimalLike, vat_percent: DecimalLike, reverse_charge: bool) -> TaxResult:
    """Berechnet Steuerbetrag und Gesamtbetrag.

    Bei Reverse Charge schuldet der Leistungsempfänger die Steuer: Kategorie
    ``AE``, Satz 0 und Steuerbetrag 0.00. Sonst Kategorie ``S`` mit dem
    konfigurierten Satz. Steuer und Gesamtbetrag werden aus dem auf zwei Stellen
    gerundeten Nettopreis berechnet.
    Gerundet wird kaufmännisch gerade (``ROUND_HALF_EVEN``).
    """

    net = quantize_money(net_price)
    if reverse_charge:
        category_code = TAX_CATEGORY_REVERSE_CHARGE
        effective_rate = Decimal("0")
        tax_amount = quantize_money(Decimal("0"))
    else:
        category_code = TAX_CATEGORY_STANDARD
        effective_rate = to_decimal(vat_percent)
        tax_amount = quantize_money(net * effective_rate / Decimal("100"))

    grand_total = quantize_money(net + tax_amount)
    return TaxResult(
        tax_amount=tax_amount,
        grand_total=grand_total,
        category_code=category_code,
        effective_rate=effective_rate,
    )
