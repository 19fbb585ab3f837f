"""XRechnung 2.2 (UN/CEFACT CII D16B) Rechnung für eine DiGA-Verordnung.

Je Rechnung wird genau eine abgegebene Verordnung abgerechnet: eine
Rechnungsposition, Käufer ist die Krankenkasse, Verkäufer und Zahlungsempfänger
ist der Hersteller. Die Dataclasses bilden die benötigte Teilmenge des
CII-Schemas ab, die Feldreihenfolge folgt den XSD-Sequenzen.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import ClassVar, Dict, Optional, Tuple

from diga.binding import BILLING, DocumentSerializer, default_serializer, element
from diga.core.logging import get_logger
from diga.dto import (
    ContactPerson,
    DateLike,
    DigaBillingInformation,
    DigaInformation,
    DigaInvoice,
    TradeAddress as TradeAddressInformation,
)
from diga.tax import TAX_TYPE_CODE_VAT, TaxResult, compute_tax
from diga.utils import ik_number_without_prefix
from diga.values import (
    SCHEME_BUYER_ASSIGNED_ID,
    SCHEME_PARTY_ID,
    SCHEME_PRODUCT_GLOBAL_ID,
    SCHEME_VAT_REGISTRATION,
    UNIT_CODE_PIECE,
    Amount,
    Code,
    DateTimeString,
    Identifier,
    Percent,
    Quantity,
    Text,
    amount,
    code,
    date_time_string,
    identifier,
    percent,
    quantity,
    text,
)

logger = get_logger(__name__)

XRECHNUNG_GUIDELINE_ID = (
    "urn:cen.eu:en16931:2017#compliant#urn:xoev-de:kosit:standard:xrechnung_2.2"
    "#conformant#urn:xoev-de:kosit:extension:xrechnung_2.2"
)
DOCUMENT_TYPE_COMMERCIAL_INVOICE = "380"
PAYMENT_MEANS_STANDING_AGREEMENT = "57"
BUYER_REFERENCE_PLACEHOLDER = "Leitweg-ID"
LINE_ID = "1"
BILLED_QUANTITY = Decimal("1")

CII_NAMESPACES: Dict[Optional[str], str] = {
    "rsm": "urn:un:unece:uncefact:data:standard:CrossIndustryInvoice:100",
    "ram": "urn:un:unece:uncefact:data:standard:ReusableAggregateBusinessInformationEntity:100",
    "qdt": "urn:un:unece:uncefact:data:standard:QualifiedDataType:100",
    "udt": "urn:un:unece:uncefact:data:standard:UnqualifiedDataType:100",
}


# -- document tree -----------------------------------------------------------


@dataclass(frozen=True, slots=True, kw_only=True)
class DocumentContextParameter:
    id: Identifier = element("ram:ID", required=True)


@dataclass(frozen=True, slots=True, kw_only=True)
class ExchangedDocumentContext:
    guideline_parameters: Tuple[DocumentContextParameter, ...] = element(
        "ram:GuidelineSpecifiedDocumentContextParameter", required=True, many=True
    )


@dataclass(frozen=True, slots=True, kw_only=True)
class DateTime:
    date_time_string: DateTimeString = element("udt:DateTimeString", required=True)


@dataclass(frozen=True, slots=True, kw_only=True)
class ExchangedDocument:
    id: Identifier = element("ram:ID", required=True)
    type_code: Code = element("ram:TypeCode", required=True)
    issue_date_time: DateTime = element("ram:IssueDateTime", required=True)


@dataclass(frozen=True, slots=True, kw_only=True)
class DocumentLineDocument:
    line_id: Identifier = element("ram:LineID", required=True)


@dataclass(frozen=True, slots=True, kw_only=True)
class TradeProduct:
    global_id: Optional[Identifier] = element("ram:GlobalID")
    buyer_assigned_id: Optional[Identifier] = element("ram:BuyerAssignedID")
    name: Text = element("ram:Name", required=True)
    description: Optional[Text] = element("ram:Description")


@dataclass(frozen=True, slots=True, kw_only=True)
class TradePrice:
    charge_amount: Amount = element("ram:ChargeAmount", required=True)


@dataclass(frozen=True, slots=True, kw_only=True)
class LineTradeAgreement:
    net_price_product_trade_price: TradePrice = element("ram:NetPriceProductTradePrice", required=True)


@dataclass(frozen=True, slots=True, kw_only=True)
class LineTradeDelivery:
    billed_quantity: Quantity = element("ram:BilledQuantity", required=True)


@dataclass(frozen=True, slots=True, kw_only=True)
class TradeTax:
    calculated_amount: Optional[Amount] = element("ram:CalculatedAmount")
    type_code: Code = element("ram:TypeCode", required=True)
    basis_amount: Optional[Amount] = element("ram:BasisAmount")
    category_code: Code = element("ram:CategoryCode", required=True)
    rate_applicable_percent: Percent = element("ram:RateApplicablePercent", required=True)


@dataclass(frozen=True, slots=True, kw_only=True)
class TradeSettlementLineMonetarySummation:
    line_total_amount: Amount = element("ram:LineTotalAmount", required=True)


@dataclass(frozen=True, slots=True, kw_only=True)
class LineTradeSettlement:
    applicable_trade_taxes: Tuple[TradeTax, ...] = element("ram:ApplicableTradeTax", required=True, many=True)
    monetary_summation: TradeSettlementLineMonetarySummation = element(
        "ram:SpecifiedTradeSettlementLineMonetarySummation", required=True
    )


@dataclass(frozen=True, slots=True, kw_only=True)
class SupplyChainTradeLineItem:
    associated_document_line_document: DocumentLineDocument = element(
        "ram:AssociatedDocumentLineDocument", required=True
    )
    specified_trade_product: TradeProduct = element("ram:SpecifiedTradeProduct", required=True)
    specified_line_trade_agreement: LineTradeAgreement = element(
        "ram:SpecifiedLineTradeAgreement", required=True
    )
    specified_line_trade_delivery: LineTradeDelivery = element(
        "ram:SpecifiedLineTradeDelivery", required=True
    )
    specified_line_trade_settlement: LineTradeSettlement = element(
        "ram:SpecifiedLineTradeSettlement", required=True
    )


@dataclass(frozen=True, slots=True, kw_only=True)
class UniversalCommunication:
    uri_id: Optional[Identifier] = element("ram:URIID")
    complete_number: Optional[Text] = element("ram:CompleteNumber")


@dataclass(frozen=True, slots=True, kw_only=True)
class TradeContact:
    person_name: Text = element("ram:PersonName", required=True)
    telephone: Optional[UniversalCommunication] = element("ram:TelephoneUniversalCommunication")
    email: Optional[UniversalCommunication] = element("ram:EmailURIUniversalCommunication")


@dataclass(frozen=True, slots=True, kw_only=True)
class TradeAddress:
    postcode_code: Code = element("ram:PostcodeCode", required=True)
    line_one: Text = element("ram:LineOne", required=True)
    city_name: Text = element("ram:CityName", required=True)
    country_id: Code = element("ram:CountryID", required=True)


@dataclass(frozen=True, slots=True, kw_only=True)
class TaxRegistration:
    id: Identifier = element("ram:ID", required=True)


@dataclass(frozen=True, slots=True, kw_only=True)
class LegalOrganization:
    id: Identifier = element("ram:ID", required=True)
    trading_business_name: Text = element("ram:TradingBusinessName", required=True)


@dataclass(frozen=True, slots=True, kw_only=True)
class TradeParty:
    ids: Tuple[Identifier, ...] = element("ram:ID", required=True, many=True)
    name: Text = element("ram:Name", required=True)
    specified_legal_organization: Optional[LegalOrganization] = element("ram:SpecifiedLegalOrganization")
    defined_trade_contacts: Tuple[TradeContact, ...] = element("ram:DefinedTradeContact", many=True)
    postal_trade_address: Optional[TradeAddress] = element("ram:PostalTradeAddress")
    specified_tax_registrations: Tuple[TaxRegistration, ...] = element(
        "ram:SpecifiedTaxRegistration", many=True
    )


@dataclass(frozen=True, slots=True, kw_only=True)
class HeaderTradeAgreement:
    buyer_reference: Text = element("ram:BuyerReference", required=True)
    seller_trade_party: TradeParty = element("ram:SellerTradeParty", required=True)
    buyer_trade_party: TradeParty = element("ram:BuyerTradeParty", required=True)


@dataclass(frozen=True, slots=True, kw_only=True)
class SupplyChainEvent:
    occurrence_date_time: DateTime = element("ram:OccurrenceDateTime", required=True)


@dataclass(frozen=True, slots=True, kw_only=True)
class HeaderTradeDelivery:
    actual_delivery_supply_chain_event: SupplyChainEvent = element(
        "ram:ActualDeliverySupplyChainEvent", required=True
    )


@dataclass(frozen=True, slots=True, kw_only=True)
class TradeSettlementPaymentMeans:
    type_code: Code = element("ram:TypeCode", required=True)


@dataclass(frozen=True, slots=True, kw_only=True)
class TradePaymentTerms:
    description: Text = element("ram:Description", required=True)


@dataclass(frozen=True, slots=True, kw_only=True)
class TradeSettlementHeaderMonetarySummation:
    line_total_amount: Amount = element("ram:LineTotalAmount", required=True)
    tax_basis_total_amount: Amount = element("ram:TaxBasisTotalAmount", required=True)
    tax_total_amount: Amount = element("ram:TaxTotalAmount", required=True)
    grand_total_amount: Amount = element("ram:GrandTotalAmount", required=True)
    due_payable_amount: Amount = element("ram:DuePayableAmount", required=True)


@dataclass(frozen=True, slots=True, kw_only=True)
class HeaderTradeSettlement:
    invoice_currency_code: Code = element("ram:InvoiceCurrencyCode", required=True)
    payee_trade_party: TradeParty = element("ram:PayeeTradeParty", required=True)
    payment_means: Tuple[TradeSettlementPaymentMeans, ...] = element(
        "ram:SpecifiedTradeSettlementPaymentMeans", required=True, many=True
    )
    applicable_trade_taxes: Tuple[TradeTax, ...] = element("ram:ApplicableTradeTax", required=True, many=True)
    payment_terms: Tuple[TradePaymentTerms, ...] = element("ram:SpecifiedTradePaymentTerms", many=True)
    monetary_summation: TradeSettlementHeaderMonetarySummation = element(
        "ram:SpecifiedTradeSettlementHeaderMonetarySummation", required=True
    )


@dataclass(frozen=True, slots=True, kw_only=True)
class SupplyChainTradeTransaction:
    line_items: Tuple[SupplyChainTradeLineItem, ...] = element(
        "ram:IncludedSupplyChainTradeLineItem", required=True, many=True
    )
    applicable_header_trade_agreement: HeaderTradeAgreement = element(
        "ram:ApplicableHeaderTradeAgreement", required=True
    )
    applicable_header_trade_delivery: HeaderTradeDelivery = element(
        "ram:ApplicableHeaderTradeDelivery", required=True
    )
    applicable_header_trade_settlement: HeaderTradeSettlement = element(
        "ram:ApplicableHeaderTradeSettlement", required=True
    )


@dataclass(frozen=True, slots=True, kw_only=True)
class CrossIndustryInvoice:
    XML_ROOT: ClassVar[str] = "rsm:CrossIndustryInvoice"
    XML_NAMESPACES: ClassVar[Dict[Optional[str], str]] = CII_NAMESPACES

    exchanged_document_context: ExchangedDocumentContext = element(
        "rsm:ExchangedDocumentContext", required=True
    )
    exchanged_document: ExchangedDocument = element("rsm:ExchangedDocument", required=True)
    supply_chain_trade_transaction: SupplyChainTradeTransaction = element(
        "rsm:SupplyChainTradeTransaction", required=True
    )


# -- assembly ----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TradePartyInformation:
    """Angaben zu einer Vertragspartei vor der Abbildung auf CII."""

    company_ik: str
    company_name: str
    tax_registration: Optional[str] = None
    contact_person: Optional[ContactPerson] = None
    postal_address: Optional[TradeAddressInformation] = None


def date_time(value: DateLike) -> DateTime:
    return DateTime(date_time_string=date_time_string(value))


def default_description(diga_name: str) -> str:
    return f"A {diga_name} prescription."


def build_document_context() -> ExchangedDocumentContext:
    # declares the document as XRechnung 2.2 (CIUS of EN16931)
    return ExchangedDocumentContext(
        guideline_parameters=(DocumentContextParameter(id=identifier(XRECHNUNG_GUIDELINE_ID)),)
    )


def build_exchanged_document(invoice: DigaInvoice) -> ExchangedDocument:
    return ExchangedDocument(
        id=identifier(invoice.invoice_id),
        type_code=code(DOCUMENT_TYPE_COMMERCIAL_INVOICE),
        issue_date_time=date_time(invoice.issue_date),
    )


def build_line_item(
    diga_information: DigaInformation,
    invoice: DigaInvoice,
    tax: TaxResult,
) -> SupplyChainTradeLineItem:
    """Die einzige Rechnungsposition: eine abgegebene Verordnung."""

    net_price = diga_information.net_price_per_prescription
    description = diga_information.diga_description
    if description is None:
        description = default_description(diga_information.diga_name)

    product = TradeProduct(
        global_id=identifier(invoice.digav_eid, SCHEME_PRODUCT_GLOBAL_ID),
        buyer_assigned_id=identifier(invoice.validated_diga_code, SCHEME_BUYER_ASSIGNED_ID),
        name=text(diga_information.diga_name),
        description=text(description),
    )
    line_tax = TradeTax(
        type_code=code(TAX_TYPE_CODE_VAT),
        category_code=code(tax.category_code),
        rate_applicable_percent=percent(tax.effective_rate),
    )
    return SupplyChainTradeLineItem(
        associated_document_line_document=DocumentLineDocument(line_id=identifier(LINE_ID)),
        specified_trade_product=product,
        specified_line_trade_agreement=LineTradeAgreement(
            net_price_product_trade_price=TradePrice(charge_amount=amount(net_price)),
        ),
        specified_line_trade_delivery=LineTradeDelivery(
            billed_quantity=quantity(BILLED_QUANTITY, UNIT_CODE_PIECE),
        ),
        specified_line_trade_settlement=LineTradeSettlement(
            applicable_trade_taxes=(line_tax,),
            # line total is the net price as is, not price x quantity
            monetary_summation=TradeSettlementLineMonetarySummation(line_total_amount=amount(net_price)),
        ),
    )


def _trade_address(address: TradeAddressInformation) -> TradeAddress:
    return TradeAddress(
        postcode_code=code(address.postal_code),
        line_one=text(address.address_line),
        city_name=text(address.city),
        country_id=code(address.country_code),
    )


def _trade_contact(contact: ContactPerson) -> TradeContact:
    telephone = None
    if contact.phone_number is not None:
        telephone = UniversalCommunication(complete_number=text(contact.phone_number))
    email = None
    if contact.email_address is not None:
        email = UniversalCommunication(uri_id=identifier(contact.email_address))
    return TradeContact(person_name=text(contact.full_name), telephone=telephone, email=email)


def build_trade_party(
    party: TradePartyInformation,
    *,
    legal_organization: Optional[LegalOrganization] = None,
) -> TradeParty:
    """Bildet eine Partei ab; fehlende optionale Angaben werden weggelassen."""

    contacts: Tuple[TradeContact, ...] = ()
    if party.contact_person is not None:
        contacts = (_trade_contact(party.contact_person),)
    registrations: Tuple[TaxRegistration, ...] = ()
    if party.tax_registration is not None:
        registrations = (TaxRegistration(id=identifier(party.tax_registration, SCHEME_VAT_REGISTRATION)),)
    address = _trade_address(party.postal_address) if party.postal_address is not None else None

    return TradeParty(
        ids=(identifier(party.company_ik, SCHEME_PARTY_ID),),
        name=text(party.company_name),
        specified_legal_organization=legal_organization,
        defined_trade_contacts=contacts,
        postal_trade_address=address,
        specified_tax_registrations=registrations,
    )


def _manufacturer(diga_information: DigaInformation, *, with_details: bool) -> TradePartyInformation:
    ik = diga_information.manufacturing_company_ik
    party = TradePartyInformation(
        company_ik=ik_number_without_prefix(ik),
        company_name=diga_information.manufacturing_company_name,
    )
    if not with_details:
        return party
    return replace(
        party,
        tax_registration=diga_information.manufacturing_company_vat_registration,
        contact_person=diga_information.contact_person_for_billing,
        postal_address=diga_information.company_trade_address,
    )


def build_trade_agreement(
    diga_information: DigaInformation,
    billing_information: DigaBillingInformation,
) -> HeaderTradeAgreement:
    """Verkäufer (Hersteller) und Käufer (Krankenkasse).

    Bei Reverse Charge trägt der Käufer zusätzlich eine
    ``SpecifiedLegalOrganization`` mit der IK (``XR03``) und dem Namen.
    """

    insurer_ik = billing_information.insurance_company_ik_number
    insurer_name = billing_information.insurance_company_name
    legal_organization = None
    if diga_information.reverse_charge_vat:
        legal_organization = LegalOrganization(
            id=identifier(ik_number_without_prefix(insurer_ik), SCHEME_PARTY_ID),
            trading_business_name=text(insurer_name.strip() if insurer_name is not None else None),
        )
    buyer = build_trade_party(
        TradePartyInformation(
            company_ik=ik_number_without_prefix(insurer_ik),
            company_name=insurer_name,
            postal_address=billing_information.postal_address,
        ),
        legal_organization=legal_organization,
    )
    return HeaderTradeAgreement(
        buyer_reference=text(BUYER_REFERENCE_PLACEHOLDER),
        seller_trade_party=build_trade_party(_manufacturer(diga_information, with_details=True)),
        buyer_trade_party=buyer,
    )


def build_trade_delivery(invoice: DigaInvoice) -> HeaderTradeDelivery:
    return HeaderTradeDelivery(
        actual_delivery_supply_chain_event=SupplyChainEvent(
            occurrence_date_time=date_time(invoice.date_of_service_provision),
        )
    )


def build_trade_settlement(
    diga_information: DigaInformation,
    invoice: DigaInvoice,
    tax: TaxResult,
) -> HeaderTradeSettlement:
    net_price = diga_information.net_price_per_prescription
    header_tax = TradeTax(
        calculated_amount=amount(tax.tax_amount),
        type_code=code(TAX_TYPE_CODE_VAT),
        basis_amount=amount(net_price),
        category_code=code(tax.category_code),
        rate_applicable_percent=percent(tax.effective_rate),
    )
    summation = TradeSettlementHeaderMonetarySummation(
        line_total_amount=amount(net_price),
        tax_basis_total_amount=amount(net_price),
        tax_total_amount=amount(tax.tax_amount, invoice.invoice_currency_code),
        grand_total_amount=amount(tax.grand_total),
        due_payable_amount=amount(tax.grand_total),
    )
    return HeaderTradeSettlement(
        invoice_currency_code=code(invoice.invoice_currency_code),
        # the creditor is always the manufacturer sending the invoice
        payee_trade_party=build_trade_party(_manufacturer(diga_information, with_details=False)),
        payment_means=(TradeSettlementPaymentMeans(type_code=code(PAYMENT_MEANS_STANDING_AGREEMENT)),),
        applicable_trade_taxes=(header_tax,),
        # downstream validators reject the invoice without an (empty) terms description
        payment_terms=(TradePaymentTerms(description=text("")),),
        monetary_summation=summation,
    )


def build_invoice_document(
    diga_information: DigaInformation,
    invoice: DigaInvoice,
    billing_information: DigaBillingInformation,
) -> CrossIndustryInvoice:
    tax = compute_tax(
        diga_information.net_price_per_prescription,
        diga_information.applicable_vat_percent,
        diga_information.reverse_charge_vat,
    )
    transaction = SupplyChainTradeTransaction(
        line_items=(build_line_item(diga_information, invoice, tax),),
        applicable_header_trade_agreement=build_trade_agreement(diga_information, billing_information),
        applicable_header_trade_delivery=build_trade_delivery(invoice),
        applicable_header_trade_settlement=build_trade_settlement(diga_information, invoice, tax),
    )
    return CrossIndustryInvoice(
        exchanged_document_context=build_document_context(),
        exchanged_document=build_exchanged_document(invoice),
        supply_chain_trade_transaction=transaction,
    )


def build_invoice_xml(
    diga_information: DigaInformation,
    invoice: DigaInvoice,
    billing_information: DigaBillingInformation,
    *,
    serializer: Optional[DocumentSerializer] = None,
) -> bytes:
    document = build_invoice_document(diga_information, invoice, billing_information)
    xml_bytes = (serializer or default_serializer(BILLING)).serialize(document)
    settlement = document.supply_chain_trade_transaction.applicable_header_trade_settlement
    logger.info(
        "Invoice document created",
        extra={
            "invoice_id": invoice.invoice_id,
            "category_code": settlement.applicable_trade_taxes[0].category_code.value,
            "grand_total": str(settlement.monetary_summation.grand_total_amount.value),
            "size_bytes": len(xml_bytes),
        },
    )
    return xml_bytes
