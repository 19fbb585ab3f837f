"""Wire-Werte (Identifier, Beträge, Prozentsätze, Datumsangaben) für die XML-Bäume.

Jeder Wert kennt seinen Elementtext und seine Attribute. Die Konventionen
(Scheme-Codes, Datumsformat ``102``, Rundung) sind durch die empfangenden
Systeme vorgegeben und werden hier zentral festgehalten.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Optional

from .dto import DateLike, DecimalLike, quantize_money, to_decimal

SCHEME_PRODUCT_GLOBAL_ID = "XR01"
SCHEME_BUYER_ASSIGNED_ID = "XR02"
SCHEME_PARTY_ID = "XR03"
SCHEME_VAT_REGISTRATION = "VA"

DATE_FORMAT_CODE = "102"
DATE_FORMAT_PATTERN = "%Y%m%d"

UNIT_CODE_PIECE = "C62"


class WireValue:
    """Basisklasse für Blattwerte eines Dokumentbaums."""

    __slots__ = ()

    def xml_text(self) -> str:
        raise NotImplementedError

    def xml_attributes(self) -> Dict[str, str]:
        return {}


@dataclass(frozen=True, slots=True)
class Identifier(WireValue):
    value: str
    scheme_id: Optional[str] = None

    def xml_text(self) -> str:
        return self.value

    def xml_attributes(self) -> Dict[str, str]:
        if self.scheme_id is None:
            return {}
        return {"schemeID": self.scheme_id}


@dataclass(frozen=True, slots=True)
class Text(WireValue):
    value: str

    def xml_text(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Code(WireValue):
    value: str

    def xml_text(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Amount(WireValue):
    value: Decimal
    currency_id: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", quantize_money(self.value))

    def xml_text(self) -> str:
        return f"{self.value:.2f}"

    def xml_attributes(self) -> Dict[str, str]:
        if self.currency_id is None:
            return {}
        return {"currencyID": self.currency_id}


@dataclass(frozen=True, slots=True)
class Percent(WireValue):
    value: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", to_decimal(self.value))

    def xml_text(self) -> str:
        return format(self.value, "f")


@dataclass(frozen=True, slots=True)
class Quantity(WireValue):
    value: Decimal
    unit_code: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", to_decimal(self.value))

    def xml_text(self) -> str:
        return format(self.value, "f")

    def xml_attributes(self) -> Dict[str, str]:
        return {"unitCode": self.unit_code}


@dataclass(frozen=True, slots=True)
class DateTimeString(WireValue):
    value: str
    format: str = DATE_FORMAT_CODE

    def __post_init__(self) -> None:
        if self.format != DATE_FORMAT_CODE:
            raise ValueError(f"Unsupported date format code: {self.format!r}")

    def xml_text(self) -> str:
        return self.value

    def xml_attributes(self) -> Dict[str, str]:
        return {"format": self.format}


def identifier(value: str, scheme_id: Optional[str] = None) -> Identifier:
    return Identifier(value=value, scheme_id=scheme_id)


def text(value: str) -> Text:
    return Text(value=value)


def code(value: str) -> Code:
    return Code(value=value)


def amount(value: DecimalLike, currency_id: Optional[str] = None) -> Amount:
    """Betrag, immer auf zwei Stellen gerundet; ``currencyID`` nur wenn angegeben."""

    return Amount(value=to_decimal(value), currency_id=currency_id)


def percent(value: DecimalLike) -> Percent:
    return Percent(value=to_decimal(value))


def quantity(value: DecimalLike, unit_code: str = UNIT_CODE_PIECE) -> Quantity:
    return Quantity(value=to_decimal(value), unit_code=unit_code)


def local_date(value: DateLike) -> date:
    """Kalenderdatum in der lokalen Zeitzone des Prozesses."""

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Unsupported date input: {type(value)!r}")


def date_time_string(value: DateLike) -> DateTimeString:
    """Kompakte Datumsdarstellung ``yyyyMMdd`` mit Formatcode ``102``."""

    return DateTimeString(value=local_date(value).strftime(DATE_FORMAT_PATTERN))
