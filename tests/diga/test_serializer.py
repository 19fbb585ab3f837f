"""Tests for the lxml document serializer and its error reporting."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import ClassVar, Dict, Optional

import pytest
from lxml import etree

from diga.binding import LxmlDocumentSerializer, attribute, element
from diga.codevalidation import build_code_validation_request
from diga.errors import DigaXmlWriterError
from diga.samples import build_sample_code_information
from diga.xrechnung import TradePartyInformation, build_invoice_document, build_trade_party


@dataclass(frozen=True, slots=True, kw_only=True)
class Leaf:
    label: Optional[str] = attribute("label")
    value: Optional[str] = element("value")


@dataclass(frozen=True, slots=True, kw_only=True)
class UnknownPrefixRoot:
    XML_ROOT: ClassVar[str] = "x:Root"
    XML_NAMESPACES: ClassVar[Dict[Optional[str], str]] = {}

    value: str = element("x:value", required=True)


@dataclass(frozen=True, slots=True, kw_only=True)
class PlainRoot:
    XML_ROOT: ClassVar[str] = "Root"

    leaves: tuple = element("Leaf", many=True)
    note: Optional[str] = element("Note")
    count: Optional[int] = element("Count")


def test_missing_required_attribute(diga_information, serializer) -> None:
    request = build_code_validation_request(diga_information, build_sample_code_information())
    broken = replace(request, empfaenger=None)

    with pytest.raises(DigaXmlWriterError) as exc_info:
        serializer.serialize(broken)

    assert exc_info.value.path == "/edfc:Pruefung_Freischaltcode/empfaenger"
    assert "Missing required attribute" in str(exc_info.value)


def test_missing_required_element(diga_information, serializer) -> None:
    request = build_code_validation_request(diga_information, build_sample_code_information())
    broken = replace(request, anfrage=replace(request.anfrage, freischaltcode=None))

    with pytest.raises(DigaXmlWriterError) as exc_info:
        serializer.serialize(broken)

    assert exc_info.value.path == "/edfc:Pruefung_Freischaltcode/Anfrage/Freischaltcode"


def test_missing_required_repeated_element(serializer) -> None:
    party = build_trade_party(
        TradePartyInformation(company_ik="123456789", company_name="Hersteller")
    )
    broken = PlainRoot(leaves=(replace(party, ids=()),))

    with pytest.raises(DigaXmlWriterError) as exc_info:
        serializer.serialize(broken)

    assert exc_info.value.path == "/Root/Leaf/ram:ID"


def test_invalid_xml_characters_are_reported(diga_information, invoice, billing_information, serializer) -> None:
    document = build_invoice_document(diga_information, invoice, billing_information)
    exchanged = replace(document.exchanged_document, id=replace(document.exchanged_document.id, value="INV\x00"))
    broken = replace(document, exchanged_document=exchanged)

    with pytest.raises(DigaXmlWriterError) as exc_info:
        serializer.serialize(broken)

    assert exc_info.value.path == "/rsm:CrossIndustryInvoice/rsm:ExchangedDocument/ram:ID"
    assert isinstance(exc_info.value.__cause__, ValueError)


def test_non_root_document_is_rejected(serializer) -> None:
    with pytest.raises(DigaXmlWriterError, match="not a document root"):
        serializer.serialize(Leaf(value="x"))


def test_unknown_namespace_prefix(serializer) -> None:
    with pytest.raises(DigaXmlWriterError, match="Unknown namespace prefix 'x'"):
        serializer.serialize(UnknownPrefixRoot(value="1"))


def test_unsupported_value_type(serializer) -> None:
    with pytest.raises(DigaXmlWriterError, match="Unsupported value type int") as exc_info:
        serializer.serialize(PlainRoot(count=3))

    assert exc_info.value.path == "/Root/Count"


def test_optional_values_are_omitted(serializer) -> None:
    xml_bytes = serializer.serialize(PlainRoot(leaves=(Leaf(label="a"), Leaf(value="b"))))

    root = etree.fromstring(xml_bytes)
    assert root.tag == "Root"
    leaves = root.findall("Leaf")
    assert leaves[0].get("label") == "a"
    assert leaves[0].find("value") is None
    assert leaves[1].get("label") is None
    assert leaves[1].findtext("value") == "b"
    assert root.find("Note") is None


def test_pretty_print_can_be_disabled(diga_information) -> None:
    request = build_code_validation_request(diga_information, build_sample_code_information())

    compact = LxmlDocumentSerializer(pretty_print=False).serialize(request)
    pretty = LxmlDocumentSerializer(pretty_print=True).serialize(request)

    assert b"\n  <Anfrage>" in pretty
    assert b"><Anfrage>" in compact
    assert etree.tostring(etree.fromstring(compact)) == etree.tostring(
        etree.fromstring(pretty, etree.XMLParser(remove_blank_text=True))
    )


def test_error_message_carries_path() -> None:
    err = DigaXmlWriterError("Missing required element", path="/Root/Child")

    assert str(err) == "Missing required element (at /Root/Child)"
    assert DigaXmlWriterError("boom").path is None


def test_unreadable_schema_is_reported(tmp_path) -> None:
    with pytest.raises(DigaXmlWriterError, match="Cannot load XML schema"):
        LxmlDocumentSerializer(schema_path=tmp_path / "missing.xsd")


def test_schema_validation(tmp_path) -> None:
    schema = tmp_path / "plain.xsd"
    schema.write_text(
        """<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">
  <xs:element name="Root">
    <xs:complexType>
      <xs:sequence>
        <xs:element name="Note" type="xs:string"/>
      </xs:sequence>
    </xs:complexType>
  </xs:element>
</xs:schema>
""",
        encoding="utf-8",
    )
    validating = LxmlDocumentSerializer(schema_path=schema)

    assert b"<Note>ok</Note>" in validating.serialize(PlainRoot(note="ok"))
    with pytest.raises(DigaXmlWriterError, match="Schema validation failed"):
        validating.serialize(PlainRoot())



def test_missing_text_on_required_element(diga_information, invoice, billing_information, serializer) -> None:
    unnamed = replace(diga_information, diga_name=None)

    with pytest.raises(DigaXmlWriterError, match="Missing element text") as exc_info:
        serializer.serialize(build_invoice_document(unnamed, invoice, billing_information))

    assert exc_info.value.path.endswith("/ram:SpecifiedTradeProduct/ram:Name")


def test_missing_contact_person_name(diga_information, invoice, billing_information, serializer) -> None:
    contact = replace(diga_information.contact_person_for_billing, full_name=None)
    information = replace(diga_information, contact_person_for_billing=contact)

    with pytest.raises(DigaXmlWriterError) as exc_info:
        serializer.serialize(build_invoice_document(information, invoice, billing_information))

    assert exc_info.value.path.endswith("/ram:SellerTradeParty/ram:DefinedTradeContact/ram:PersonName")


def test_missing_insurer_name_under_reverse_charge(
    reverse_charge_information, invoice, billing_information, serializer
) -> None:
    nameless = replace(billing_information, insurance_company_name=None)

    with pytest.raises(DigaXmlWriterError) as exc_info:
        serializer.serialize(build_invoice_document(reverse_charge_information, invoice, nameless))

    assert exc_info.value.path.endswith("/ram:BuyerTradeParty/ram:Name")


def test_missing_manufacturer_ik_in_code_validation(diga_information, serializer) -> None:
    request = build_code_validation_request(
        replace(diga_information, manufacturing_company_ik=None),
        build_sample_code_information(),
    )

    with pytest.raises(DigaXmlWriterError, match="Missing required attribute") as exc_info:
        serializer.serialize(request)

    assert exc_info.value.path == "/edfc:Pruefung_Freischaltcode/absender"
