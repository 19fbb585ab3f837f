"""XML-Bindung der Dokumentbäume (lxml).

Dokumentbäume bestehen aus unveränderlichen Dataclasses. Felder, die im XML
erscheinen, werden mit :func:`element` bzw. :func:`attribute` deklariert; die
Reihenfolge der Felder entspricht der Sequenz im jeweiligen XSD. Der
:class:`LxmlDocumentSerializer` rendert einen solchen Baum zu UTF-8-Bytes und
meldet jede strukturelle Abweichung als :class:`DigaXmlWriterError`.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, fields, is_dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Protocol

from lxml import etree

from .core.config import settings
from .core.logging import get_logger
from .errors import DigaXmlWriterError
from .values import WireValue

logger = get_logger(__name__)

XML_BINDING = "xml_binding"
ELEMENT = "element"
ATTRIBUTE = "attribute"

CODE_VALIDATION = "code_validation"
BILLING = "billing"

_MISSING = object()


@dataclass(frozen=True, slots=True)
class Binding:
    name: str
    kind: str
    required: bool


def element(name: str, *, required: bool = False, many: bool = False) -> Any:
    """Deklariert ein Kindelement. Pflichtelemente haben keinen Default."""

    metadata = {XML_BINDING: Binding(name, ELEMENT, required)}
    if many:
        return field(default_factory=tuple, metadata=metadata)
    if required:
        return field(metadata=metadata)
    return field(default=None, metadata=metadata)


def attribute(name: str, *, required: bool = False) -> Any:
    metadata = {XML_BINDING: Binding(name, ATTRIBUTE, required)}
    if required:
        return field(metadata=metadata)
    return field(default=None, metadata=metadata)


class DocumentSerializer(Protocol):
    def serialize(self, document: Any) -> bytes:
        ...


def _qualified_name(name: str, namespaces: Mapping[Optional[str], str], path: str) -> str:
    if ":" not in name:
        return name
    prefix, local = name.split(":", 1)
    try:
        return f"{{{namespaces[prefix]}}}{local}"
    except KeyError as err:
        raise DigaXmlWriterError(f"Unknown namespace prefix {prefix!r}", path=path) from err


class LxmlDocumentSerializer:
    """Rendert Dokumentbäume mit lxml, optional mit XSD-Prüfung.

    Das Schema wird einmalig im Konstruktor geladen; danach ist die Instanz
    nur noch lesend in Gebrauch. ``XMLSchema.validate`` ist durch ein Lock
    geschützt, damit mehrere Threads dieselbe Instanz nutzen können.
    """

    def __init__(self, *, pretty_print: bool = True, schema_path: Optional[Path] = None) -> None:
        self._pretty_print = pretty_print
        self._schema: Optional[etree.XMLSchema] = None
        self._schema_lock = threading.Lock()
        if schema_path is not None:
            try:
                self._schema = etree.XMLSchema(etree.parse(str(schema_path)))
            except (OSError, etree.XMLSyntaxError, etree.XMLSchemaParseError) as err:
                raise DigaXmlWriterError(f"Cannot load XML schema {schema_path}: {err}") from err
            logger.info("XML schema loaded", extra={"schema": Path(schema_path).name})

    def serialize(self, document: Any) -> bytes:
        document_type = type(document)
        root_name = getattr(document_type, "XML_ROOT", None)
        if root_name is None or not is_dataclass(document):
            raise DigaXmlWriterError(f"{document_type.__name__} is not a document root")

        namespaces: Dict[Optional[str], str] = dict(getattr(document_type, "XML_NAMESPACES", {}))
        path = f"/{root_name}"
        root = etree.Element(_qualified_name(root_name, namespaces, path), nsmap=namespaces)
        self._render_node(root, document, namespaces, path)
        self._validate(root)

        try:
            return etree.tostring(
                root,
                xml_declaration=True,
                encoding="UTF-8",
                pretty_print=self._pretty_print,
            )
        except (etree.SerialisationError, OSError) as err:
            raise DigaXmlWriterError(f"Cannot serialize {root_name}: {err}") from err

    def _render_node(
        self,
        parent: etree._Element,
        node: Any,
        namespaces: Mapping[Optional[str], str],
        path: str,
    ) -> None:
        for node_field in fields(node):
            binding: Optional[Binding] = node_field.metadata.get(XML_BINDING)
            if binding is None:
                continue
            value = getattr(node, node_field.name, _MISSING)
            child_path = f"{path}/{binding.name}"

            if binding.kind == ATTRIBUTE:
                if value is None or value is _MISSING:
                    if binding.required:
                        raise DigaXmlWriterError("Missing required attribute", path=child_path)
                    continue
                self._set(parent, _qualified_name(binding.name, namespaces, child_path), value, child_path)
                continue

            if isinstance(value, (tuple, list)):
                items = list(value)
            elif value is None or value is _MISSING:
                items = []
            else:
                items = [value]
            if not items and binding.required:
                raise DigaXmlWriterError("Missing required element", path=child_path)
            for item in items:
                self._render_element(parent, binding.name, item, namespaces, child_path)

    def _render_element(
        self,
        parent: etree._Element,
        name: str,
        value: Any,
        namespaces: Mapping[Optional[str], str],
        path: str,
    ) -> None:
        child = etree.SubElement(parent, _qualified_name(name, namespaces, path))
        if isinstance(value, WireValue):
            value_text = value.xml_text()
            if value_text is None:
                raise DigaXmlWriterError("Missing element text", path=path)
            self._set_text(child, value_text, path)
            for attr_name, attr_value in value.xml_attributes().items():
                self._set(child, attr_name, attr_value, path)
        elif is_dataclass(value):
            self._render_node(child, value, namespaces, path)
        elif isinstance(value, str):
            self._set_text(child, value, path)
        else:
            raise DigaXmlWriterError(f"Unsupported value type {type(value).__name__}", path=path)

    @staticmethod
    def _set_text(target: etree._Element, value: str, path: str) -> None:
        try:
            target.text = value
        except (ValueError, TypeError) as err:
            raise DigaXmlWriterError(f"Invalid element text: {err}", path=path) from err

    @staticmethod
    def _set(target: etree._Element, name: str, value: Any, path: str) -> None:
        if isinstance(value, WireValue):
            value = value.xml_text()
        if not isinstance(value, str):
            raise DigaXmlWriterError(f"Unsupported attribute type {type(value).__name__}", path=path)
        try:
            target.set(name, value)
        except (ValueError, TypeError) as err:
            raise DigaXmlWriterError(f"Invalid attribute value: {err}", path=path) from err

    def _validate(self, root: etree._Element) -> None:
        if self._schema is None:
            return
        with self._schema_lock:
            valid = self._schema.validate(root)
            error = self._schema.error_log.last_error
        if not valid:
            raise DigaXmlWriterError(f"Schema validation failed: {error}")


@lru_cache(maxsize=None)
def default_serializer(kind: str) -> LxmlDocumentSerializer:
    """Prozessweiter Serializer je Dokumentart, einmalig aus den Settings gebaut."""

    schemas = {CODE_VALIDATION: settings.code_validation_xsd, BILLING: settings.billing_xsd}
    if kind not in schemas:
        raise ValueError(f"Unknown document kind: {kind}")
    schema_path: Optional[Path] = schemas[kind] if settings.schema_validation else None
    return LxmlDocumentSerializer(pretty_print=settings.xml_pretty_print, schema_path=schema_path)
