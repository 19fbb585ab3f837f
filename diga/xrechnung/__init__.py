"""XRechnung (UN/CEFACT CII) Rechnungsdokument für DiGA-Verordnungen."""

from .generator import (
    BUYER_REFERENCE_PLACEHOLDER,
    CII_NAMESPACES,
    DOCUMENT_TYPE_COMMERCIAL_INVOICE,
    PAYMENT_MEANS_STANDING_AGREEMENT,
    XRECHNUNG_GUIDELINE_ID,
    CrossIndustryInvoice,
    TradePartyInformation,
    build_document_context,
    build_exchanged_document,
    build_invoice_document,
    build_invoice_xml,
    build_line_item,
    build_trade_agreement,
    build_trade_delivery,
    build_trade_party,
    build_trade_settlement,
    default_description,
)

__all__ = [
    "BUYER_REFERENCE_PLACEHOLDER",
    "CII_NAMESPACES",
    "DOCUMENT_TYPE_COMMERCIAL_INVOICE",
    "PAYMENT_MEANS_STANDING_AGREEMENT",
    "XRECHNUNG_GUIDELINE_ID",
    "CrossIndustryInvoice",
    "TradePartyInformation",
    "build_document_context",
    "build_exchanged_document",
    "build_invoice_document",
    "build_invoice_xml",
    "build_line_item",
    "build_trade_agreement",
    "build_trade_delivery",
    "build_trade_party",
    "build_trade_settlement",
    "default_description",
]
