"""Datentransferobjekte für DiGA-Prüf- und Abrechnungsanfragen.

Alle Strukturen sind unveränderlich und deterministisch. Beträge werden als
`Decimal` geführt und vor der Ausgabe mit `ROUND_HALF_EVEN` auf zwei
Nachkommastellen quantisiert.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_EVEN
from typing import Optional, Union


DecimalLike = Decimal | str | int | float
DateLike = Union[date, datetime]


def to_decimal(value: DecimalLike) -> Decimal:
    """Konvertiere Eingaben deterministisch in ``Decimal``.

    Floats werden zunächst in Strings umgewandelt, um binäre Rundungsfehler zu
    vermeiden.
    """

    if isinstance(value, bool):
        raise TypeError(f"Unsupported decimal input: {type(value)!r}")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, str, float)):
        return Decimal(str(value))
    raise TypeError(f"Unsupported decimal input: {type(value)!r}")


def quantize_money(amount: DecimalLike) -> Decimal:
    """Rundet Beträge auf zwei Nachkommastellen (ROUND_HALF_EVEN)."""

    return to_decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_EVEN)


@dataclass(frozen=True, slots=True)
class ContactPerson:
    full_name: str
    phone_number: Optional[str] = None
    email_address: Optional[str] = None


@dataclass(frozen=True, slots=True)
class TradeAddress:
    postal_code: str
    address_line: str
    city: str
    country_code: str


@dataclass(frozen=True, slots=True)
class DigaInformation:
    """Statische Angaben zur DiGA und zum Hersteller (Rechnungssteller)."""

    diga_id: str
    diga_name: str
    manufacturing_company_ik: str
    manufacturing_company_name: str
    net_price_per_prescription: Decimal
    applicable_vat_percent: Decimal
    reverse_charge_vat: bool = False
    manufacturing_company_vat_registration: Optional[str] = None
    contact_person_for_billing: Optional[ContactPerson] = None
    company_trade_address: Optional[TradeAddress] = None
    diga_description: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "net_price_per_prescription", to_decimal(self.net_price_per_prescription)
        )
        object.__setattr__(
            self, "applicable_vat_percent", to_decimal(self.applicable_vat_percent)
        )


@dataclass(frozen=True, slots=True)
class DigaCodeInformation:
    full_diga_code: str
    insurance_company_ik_number: str


@dataclass(frozen=True, slots=True)
class DigaInvoice:
    # invoice_id must be unique per invoice, the caller assigns it
    invoice_id: str
    issue_date: DateLike
    date_of_service_provision: DateLike
    digav_eid: str
    validated_diga_code: str
    invoice_currency_code: str = "EUR"


@dataclass(frozen=True, slots=True)
class DigaBillingInformation:
    insurance_company_ik_number: str
    insurance_company_name: str
    buyer_company_postal_code: str
    buyer_company_address_line: str
    buyer_company_city: str
    buyer_company_country_code: str = "DE"

    @property
    def postal_address(self) -> TradeAddress:
        return TradeAddress(
            postal_code=self.buyer_company_postal_code,
            address_line=self.buyer_company_address_line,
            city=self.buyer_company_city,
            country_code=self.buyer_company_country_code,
        )
