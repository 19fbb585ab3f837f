"""XML-Anfragen für die DiGA-Abrechnung: Freischaltcode-Prüfung und XRechnung."""

from .binding import DocumentSerializer, LxmlDocumentSerializer, default_serializer
from .codevalidation import (
    PROCESS_IDENTIFIER_PRODUCTION,
    PROCESS_IDENTIFIER_TEST,
    build_code_validation_request,
    build_code_validation_xml,
)
from .dto import (
    ContactPerson,
    DigaBillingInformation,
    DigaCodeInformation,
    DigaInformation,
    DigaInvoice,
    TradeAddress,
    quantize_money,
)
from .errors import DigaXmlWriterError
from .tax import TaxResult, compute_tax
from .utils import ik_number_with_prefix, ik_number_without_prefix, is_diga_test_code
from .writer import DigaXmlRequestWriter
from .xrechnung import XRECHNUNG_GUIDELINE_ID, build_invoice_document, build_invoice_xml

__all__ = [
    "DocumentSerializer",
    "LxmlDocumentSerializer",
    "default_serializer",
    "PROCESS_IDENTIFIER_PRODUCTION",
    "PROCESS_IDENTIFIER_TEST",
    "build_code_validation_request",
    "build_code_validation_xml",
    "ContactPerson",
    "DigaBillingInformation",
    "DigaCodeInformation",
    "DigaInformation",
    "DigaInvoice",
    "TradeAddress",
    "quantize_money",
    "DigaXmlWriterError",
    "TaxResult",
    "compute_tax",
    "ik_number_with_prefix",
    "ik_number_without_prefix",
    "is_diga_test_code",
    "DigaXmlRequestWriter",
    "XRECHNUNG_GUIDELINE_ID",
    "build_invoice_document",
    "build_invoice_xml",
]
