"""Prüfanfrage für Freischaltcodes (Pruefung_Freischaltcode)."""

from .generator import (
    CODE_VALIDATION_NAMESPACE,
    CODE_VALIDATION_VALID_FROM,
    CODE_VALIDATION_VERSION,
    MESSAGE_TYPE_REQUEST,
    PROCESS_IDENTIFIER_PRODUCTION,
    PROCESS_IDENTIFIER_TEST,
    Anfrage,
    PruefungFreischaltcode,
    build_code_validation_request,
    build_code_validation_xml,
    process_identifier,
)

__all__ = [
    "CODE_VALIDATION_NAMESPACE",
    "CODE_VALIDATION_VALID_FROM",
    "CODE_VALIDATION_VERSION",
    "MESSAGE_TYPE_REQUEST",
    "PROCESS_IDENTIFIER_PRODUCTION",
    "PROCESS_IDENTIFIER_TEST",
    "Anfrage",
    "PruefungFreischaltcode",
    "build_code_validation_request",
    "build_code_validation_xml",
    "process_identifier",
]
