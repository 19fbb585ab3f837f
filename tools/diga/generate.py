"""CLI: Freischaltcode-Prüfanfrage oder XRechnung aus einer JSON-Datei erzeugen.

Beispiele::

    python -m tools.diga.generate invoice --sample --output invoice.xml
    python -m tools.diga.generate code-validation --input request.json
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from datetime import date
from decimal import InvalidOperation
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from diga import (
    ContactPerson,
    DigaBillingInformation,
    DigaCodeInformation,
    DigaInformation,
    DigaInvoice,
    DigaXmlRequestWriter,
    DigaXmlWriterError,
    TradeAddress,
)
from diga.core.logging import get_logger, init_logging, set_trace_id
from diga.samples import (
    SAMPLE_BILLING_INFORMATION,
    SAMPLE_DIGA_INFORMATION,
    build_sample_code_information,
    build_sample_invoice,
)

logger = get_logger(__name__)

COMMANDS = ("code-validation", "invoice")
REQUIRED_SECTIONS = {
    "code-validation": ("diga_information", "code_information"),
    "invoice": ("diga_information", "invoice", "billing_information"),
}


def _diga_information(payload: Dict[str, Any]) -> DigaInformation:
    data = dict(payload)
    contact = data.pop("contact_person_for_billing", None)
    address = data.pop("company_trade_address", None)
    return DigaInformation(
        contact_person_for_billing=ContactPerson(**contact) if contact else None,
        company_trade_address=TradeAddress(**address) if address else None,
        **data,
    )


def _invoice(payload: Dict[str, Any]) -> DigaInvoice:
    data = dict(payload)
    for key in ("issue_date", "date_of_service_provision"):
        data[key] = date.fromisoformat(data[key])
    return DigaInvoice(**data)


def load_request_file(path: Path) -> Dict[str, Any]:
    """Liest eine JSON-Anfrage und bildet sie auf die DTOs ab.

    Erwartete Schlüssel: ``diga_information`` sowie ``code_information`` oder
    ``invoice`` und ``billing_information``. Beträge werden als Strings
    angegeben, Datumswerte im ISO-Format. Fehlerhafte Dateien werden als
    ``ValueError`` gemeldet.
    """

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as err:
        raise ValueError(f"{path}: invalid JSON: {err}") from err
    if not isinstance(raw, dict) or "diga_information" not in raw:
        raise ValueError(f"{path}: missing section 'diga_information'")

    try:
        request: Dict[str, Any] = {"diga_information": _diga_information(raw["diga_information"])}
        if "code_information" in raw:
            request["code_information"] = DigaCodeInformation(**raw["code_information"])
        if "invoice" in raw:
            request["invoice"] = _invoice(raw["invoice"])
        if "billing_information" in raw:
            request["billing_information"] = DigaBillingInformation(**raw["billing_information"])
    except (KeyError, TypeError, InvalidOperation) as err:
        raise ValueError(f"{path}: invalid request data: {err!r}") from err
    return request


def sample_request(*, reverse_charge: bool = False, production_code: bool = False) -> Dict[str, Any]:
    diga_information = SAMPLE_DIGA_INFORMATION
    if reverse_charge:
        diga_information = replace(diga_information, reverse_charge_vat=True)
    return {
        "diga_information": diga_information,
        "code_information": build_sample_code_information(test=not production_code),
        "invoice": build_sample_invoice(),
        "billing_information": SAMPLE_BILLING_INFORMATION,
    }


def generate(command: str, request: Dict[str, Any]) -> bytes:
    if command not in REQUIRED_SECTIONS:
        raise ValueError(f"Unsupported command: {command}")
    missing = [key for key in REQUIRED_SECTIONS[command] if key not in request]
    if missing:
        raise ValueError(f"Request lacks section(s) for {command}: {', '.join(missing)}")

    writer = DigaXmlRequestWriter(request["diga_information"])
    if command == "code-validation":
        return writer.create_code_validation_request(request["code_information"])
    return writer.create_billing_request(request["invoice"], request["billing_information"])


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate DiGA request documents")
    parser.add_argument("command", choices=COMMANDS, help="Dokumentart")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", type=Path, help="JSON-Datei mit den Eingabedaten")
    source.add_argument("--sample", action="store_true", help="Eingebaute Beispieldaten verwenden")
    parser.add_argument("--reverse-charge", action="store_true", help="Beispiel mit Reverse Charge")
    parser.add_argument("--production-code", action="store_true", help="Beispiel mit Produktivcode")
    parser.add_argument("--output", type=Path, help="Zieldatei (default: stdout)")
    parser.add_argument("--trace-id", help="Trace-ID für die Logs")
    return parser.parse_args(argv)


def main(argv: Iterable[str] | None = None) -> int:
    args = parse_args(argv)
    init_logging(sys.stderr)
    set_trace_id(args.trace_id)

    try:
        if args.sample:
            request = sample_request(
                reverse_charge=args.reverse_charge,
                production_code=args.production_code,
            )
        else:
            request = load_request_file(args.input)
        xml_bytes = generate(args.command, request)
    except (ValueError, OSError) as err:
        logger.error("Invalid request: %s", err)
        return 1
    except DigaXmlWriterError as err:
        logger.error("Document generation failed: %s", err)
        return 1

    output: Optional[Path] = args.output
    if output is None:
        sys.stdout.buffer.write(xml_bytes)
        sys.stdout.buffer.flush()
    else:
        output.write_bytes(xml_bytes)
        logger.info("Document written", extra={"path": str(output), "size_bytes": len(xml_bytes)})
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
