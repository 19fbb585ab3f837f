"""Prüfanfrage für DiGA-Freischaltcodes (Pruefung_Freischaltcode, Nachrichtentyp ANF)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, ClassVar, Dict, Optional

from diga.binding import CODE_VALIDATION, DocumentSerializer, attribute, default_serializer, element
from diga.core.logging import get_logger
from diga.dto import DigaCodeInformation, DigaInformation
from diga.utils import ik_number_without_prefix, is_diga_test_code

logger = get_logger(__name__)

CODE_VALIDATION_NAMESPACE = "http://www.gkv-datenaustausch.de/XML-Schema/EDFC0_Pruefung/2.0.0"
CODE_VALIDATION_VERSION = "002.000.000"
CODE_VALIDATION_VALID_FROM = "2020-07-01"

MESSAGE_TYPE_REQUEST = "ANF"
PROCESS_IDENTIFIER_TEST = "TDFC0"
PROCESS_IDENTIFIER_PRODUCTION = "EDFC0"


@dataclass(frozen=True, slots=True, kw_only=True)
class Anfrage:
    ik_diga_hersteller: str = element("IK_DiGA_Hersteller", required=True)
    ik_krankenkasse: str = element("IK_Krankenkasse", required=True)
    diga_id: str = element("DiGAID", required=True)
    freischaltcode: str = element("Freischaltcode", required=True)


@dataclass(frozen=True, slots=True, kw_only=True)
class PruefungFreischaltcode:
    XML_ROOT: ClassVar[str] = "edfc:Pruefung_Freischaltcode"
    XML_NAMESPACES: ClassVar[Dict[Optional[str], str]] = {"edfc": CODE_VALIDATION_NAMESPACE}

    version: str = attribute("version", required=True)
    gueltigab: str = attribute("gueltigab", required=True)
    verfahrenskennung: str = attribute("verfahrenskennung", required=True)
    nachrichtentyp: str = attribute("nachrichtentyp", required=True)
    absender: str = attribute("absender", required=True)
    empfaenger: str = attribute("empfaenger", required=True)
    anfrage: Anfrage = element("Anfrage", required=True)


def process_identifier(full_diga_code: str, is_test_code: Callable[[str], bool] = is_diga_test_code) -> str:
    return PROCESS_IDENTIFIER_TEST if is_test_code(full_diga_code) else PROCESS_IDENTIFIER_PRODUCTION


def build_code_validation_request(
    diga_information: DigaInformation,
    code_information: DigaCodeInformation,
    *,
    is_test_code: Callable[[str], bool] = is_diga_test_code,
) -> PruefungFreischaltcode:
    """Baut den Dokumentbaum der Prüfanfrage.

    Absender ist der Hersteller, Empfänger die Krankenkasse, beide mit IK ohne
    Präfix. Testcodes werden mit ``TDFC0`` geprüft, alle anderen mit ``EDFC0``.
    """

    manufacturer_ik = ik_number_without_prefix(diga_information.manufacturing_company_ik)
    insurer_ik = ik_number_without_prefix(code_information.insurance_company_ik_number)

    anfrage = Anfrage(
        ik_diga_hersteller=manufacturer_ik,
        ik_krankenkasse=insurer_ik,
        diga_id=diga_information.diga_id,
        freischaltcode=code_information.full_diga_code,
    )
    return PruefungFreischaltcode(
        version=CODE_VALIDATION_VERSION,
        gueltigab=CODE_VALIDATION_VALID_FROM,
        verfahrenskennung=process_identifier(code_information.full_diga_code, is_test_code),
        nachrichtentyp=MESSAGE_TYPE_REQUEST,
        absender=manufacturer_ik,
        empfaenger=insurer_ik,
        anfrage=anfrage,
    )


def build_code_validation_xml(
    diga_information: DigaInformation,
    code_information: DigaCodeInformation,
    *,
    is_test_code: Callable[[str], bool] = is_diga_test_code,
    serializer: Optional[DocumentSerializer] = None,
) -> bytes:
    request = build_code_validation_request(
        diga_information, code_information, is_test_code=is_test_code
    )
    xml_bytes = (serializer or default_serializer(CODE_VALIDATION)).serialize(request)
    logger.info(
        "Code validation request created",
        extra={
            "process_identifier": request.verfahrenskennung,
            "receiver_ik": request.empfaenger,
            "size_bytes": len(xml_bytes),
        },
    )
    return xml_bytes
