"""Writer für die XML-Anfragen eines DiGA-Herstellers."""

from __future__ import annotations

from typing import Callable, Optional

from .binding import BILLING, CODE_VALIDATION, DocumentSerializer, default_serializer
from .codevalidation import build_code_validation_xml
from .dto import DigaBillingInformation, DigaCodeInformation, DigaInformation, DigaInvoice
from .utils import is_diga_test_code
from .xrechnung import build_invoice_xml


class DigaXmlRequestWriter:
    """Erzeugt Prüfanfragen und Rechnungen für genau eine DiGA.

    Die statischen DiGA-Angaben werden einmalig übergeben. Der Writer hält
    darüber hinaus keinen veränderlichen Zustand und kann von mehreren Threads
    gleichzeitig genutzt werden, solange die Serializer das ebenfalls
    erlauben (siehe :class:`~diga.binding.LxmlDocumentSerializer`).
    """

    def __init__(
        self,
        diga_information: DigaInformation,
        *,
        code_serializer: Optional[DocumentSerializer] = None,
        billing_serializer: Optional[DocumentSerializer] = None,
        is_test_code: Callable[[str], bool] = is_diga_test_code,
    ) -> None:
        if diga_information is None:
            raise ValueError("diga_information is required")
        self.diga_information = diga_information
        self._code_serializer = code_serializer or default_serializer(CODE_VALIDATION)
        self._billing_serializer = billing_serializer or default_serializer(BILLING)
        self._is_test_code = is_test_code

    def create_code_validation_request(self, code_information: DigaCodeInformation) -> bytes:
        return build_code_validation_xml(
            self.diga_information,
            code_information,
            is_test_code=self._is_test_code,
            serializer=self._code_serializer,
        )

    def create_billing_request(
        self,
        invoice: DigaInvoice,
        billing_information: DigaBillingInformation,
    ) -> bytes:
        return build_invoice_xml(
            self.diga_information,
            invoice,
            billing_information,
            serializer=self._billing_serializer,
        )
