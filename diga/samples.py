"""Deterministische Beispieldaten für Tests & CLI."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from .dto import (
    ContactPerson,
    DigaBillingInformation,
    DigaCodeInformation,
    DigaInformation,
    DigaInvoice,
    TradeAddress,
)

SAMPLE_TEST_CODE = "77AAAAAAAAAAAGIS"
SAMPLE_PRODUCTION_CODE = "2A4B6C8D0E2F4G6H"
SAMPLE_INSURER_IK = "IK109911114"

SAMPLE_DIGA_INFORMATION = DigaInformation(
    diga_id="12345",
    diga_name="Sample DiGA",
    manufacturing_company_ik="IK123456789",
    manufacturing_company_name="Sample Therapeutics GmbH",
    net_price_per_prescription=Decimal("49.90"),
    applicable_vat_percent=Decimal("19"),
    reverse_charge_vat=False,
    manufacturing_company_vat_registration="DE123456789",
    contact_person_for_billing=ContactPerson(
        full_name="Erika Mustermann",
        phone_number="+49 30 1234567",
        email_address="billing@sample-therapeutics.example",
    ),
    company_trade_address=TradeAddress(
        postal_code="10115",
        address_line="Musterstraße 1",
        city="Berlin",
        country_code="DE",
    ),
    diga_description=None,
)

SAMPLE_BILLING_INFORMATION = DigaBillingInformation(
    insurance_company_ik_number=SAMPLE_INSURER_IK,
    insurance_company_name="Test Krankenkasse ",
    buyer_company_postal_code="20095",
    buyer_company_address_line="Kassenweg 5",
    buyer_company_city="Hamburg",
    buyer_company_country_code="DE",
)


def build_sample_code_information(*, test: bool = True) -> DigaCodeInformation:
    return DigaCodeInformation(
        full_diga_code=SAMPLE_TEST_CODE if test else SAMPLE_PRODUCTION_CODE,
        insurance_company_ik_number=SAMPLE_INSURER_IK,
    )


def build_sample_invoice(
    invoice_id: str = "DIGA-2021-00001",
    *,
    issue_date: date = date(2021, 3, 1),
    date_of_service_provision: date = date(2021, 2, 15),
    validated_code: str = SAMPLE_TEST_CODE,
) -> DigaInvoice:
    return DigaInvoice(
        invoice_id=invoice_id,
        issue_date=issue_date,
        date_of_service_provision=date_of_service_provision,
        digav_eid="12345001",
        validated_diga_code=validated_code,
        invoice_currency_code="EUR",
    )
