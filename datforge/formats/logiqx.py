"""
Logiqx XML DAT format.

A ``<datafile>`` with one ``<header>`` and ``<game>``/``<machine>``
elements whose children are items (``<rom>``, ``<disk>``, ...). Unknown
child elements are kept as serialized XML in the parent's extras; unknown
item attributes are kept as ``name=value`` tokens.
"""

import logging
from typing import Dict, List

from lxml import etree

from ..errors import DatParseError
from ..models import ITEM_TYPES, DatItem, Header, ItemStatus, Machine, MetadataFile
from .base import DatFormatHandler

logger = logging.getLogger(__name__)

DOCTYPE = (
    '<!DOCTYPE datafile PUBLIC "-//Logiqx//DTD ROM Management Datafile//EN" '
    '"http://www.logiqx.com/Dats/datafile.dtd">'
)

HEADER_ELEMENTS = [
    'name', 'description', 'category', 'version', 'date', 'author',
    'email', 'homepage', 'url', 'comment', 'type',
]

# <clrmamepro> attribute -> Header field
CLRMAMEPRO_ATTRIBUTES = {
    'header': 'header',
    'forcemerging': 'force_merging',
    'forcezipping': 'force_zipping',
    'forcepacking': 'force_packing',
}

MACHINE_ELEMENTS = ['comment', 'description', 'year', 'manufacturer', 'category']
MACHINE_ATTRIBUTES = ['name', 'cloneof', 'romof', 'sampleof']
MACHINE_FLAGS = {'isbios': 'is_bios', 'isdevice': 'is_device'}

# (element, attribute) -> item field, where the names differ
ATTRIBUTE_ALIASES = {
    ('chip', 'type'): 'chip_type',
    ('feature', 'type'): 'feature_type',
}
FIELD_ALIASES = {(tag, field_name): attr for (tag, attr), field_name in ATTRIBUTE_ALIASES.items()}

# Item fields that have no Logiqx attribute
SKIPPED_FIELDS = frozenset({'extra', 'entries', 'alt_romname', 'alt_title', 'file_is_available'})


def _serialize(element: etree.Element) -> str:
    return etree.tostring(element, encoding='unicode', with_tail=False)


class LogiqxFormat(DatFormatHandler):
    """Reads and writes Logiqx XML DATs."""

    name = 'logiqx'
    extensions = ('.xml',)

    def read_text(self, text: str) -> MetadataFile:
        self.ambiguities = []
        parser = etree.XMLParser(remove_blank_text=True, resolve_entities=False, no_network=True)
        try:
            root = etree.fromstring(text.encode('utf-8'), parser)
        except etree.XMLSyntaxError as e:
            raise DatParseError(f"Malformed Logiqx XML: {e}") from e
        return self.read_element(root)

    def read_element(self, root: etree.Element) -> MetadataFile:
        """Build a canonical tree from a parsed ``<datafile>`` element."""
        metadata = MetadataFile(origin=self.name)

        for child in root:
            if not isinstance(child.tag, str):
                continue
            if child.tag == 'header':
                metadata.header = self._parse_header(child)
            elif child.tag in ('game', 'machine'):
                metadata.machines.append(self._parse_machine(child))
            else:
                metadata.extra.append(_serialize(child))

        logger.info(f"Parsed Logiqx DAT: {len(metadata.machines)} machines")
        return metadata

    def _parse_header(self, element: etree.Element) -> Header:
        header = Header()
        for child in element:
            if not isinstance(child.tag, str):
                continue
            if child.tag in HEADER_ELEMENTS:
                header.write(child.tag, child.text or '')
            elif child.tag == 'clrmamepro' and set(child.attrib) <= set(CLRMAMEPRO_ATTRIBUTES):
                for attr, value in child.attrib.items():
                    header.write(CLRMAMEPRO_ATTRIBUTES[attr], value)
            else:
                header.extra.append(_serialize(child))
        return header

    def _parse_machine(self, element: etree.Element) -> Machine:
        machine = Machine()
        for attr, value in element.attrib.items():
            if attr in MACHINE_ATTRIBUTES:
                machine.write(attr, value)
            elif attr in MACHINE_FLAGS:
                machine.write(MACHINE_FLAGS[attr], value == 'yes')
            else:
                machine.extra.append(f"{attr}={value}")

        for child in element:
            if not isinstance(child.tag, str):
                continue
            if child.tag in MACHINE_ELEMENTS:
                machine.write(child.tag, child.text or '')
            elif child.tag in ITEM_TYPES:
                machine.items.append(self._parse_item(child))
            else:
                machine.extra.append(_serialize(child))
        return machine

    def _parse_item(self, element: etree.Element) -> DatItem:
        item = ITEM_TYPES[element.tag]()
        for attr, value in element.attrib.items():
            field_name = ATTRIBUTE_ALIASES.get((element.tag, attr), attr)
            if field_name in ('extra', 'entries') or not item.has_field(field_name):
                item.extra.append(f"{attr}={value}")
                continue
            if field_name == 'status' and element.tag in ('rom', 'disk'):
                status = ItemStatus.from_string(value)
                if status is None:
                    item.extra.append(f"{attr}={value}")
                    continue
                value = status
            item.write(field_name, value)

        for child in element:
            if not isinstance(child.tag, str):
                continue
            if element.tag == 'dipswitch' and child.tag == 'dipvalue' and 'name' in child.attrib:
                item.entries.append(child.get('name'))
                if child.get('default') == 'yes':
                    item.default = child.get('name')
            else:
                item.extra.append(_serialize(child))
        return item

    def write_text(self, metadata: MetadataFile) -> str:
        keep_extras = self.keeps_extras(metadata)
        root = etree.Element('datafile')
        root.append(self._header_element(metadata.header, keep_extras))

        for machine in metadata.machines:
            root.append(self._machine_element(machine, keep_extras))

        if keep_extras:
            for extra in metadata.extra:
                self._append_extra(root, extra)

        output = etree.tostring(
            root,
            encoding='UTF-8',
            xml_declaration=True,
            pretty_print=True,
            doctype=DOCTYPE,
        )
        return output.decode('utf-8')

    def write_lines(self, metadata: MetadataFile) -> List[str]:
        return self.write_text(metadata).splitlines()

    def _header_element(self, header: Header, keep_extras: bool) -> etree.Element:
        element = etree.Element('header')
        for tag in HEADER_ELEMENTS:
            value = header.read_string(tag)
            if value is not None:
                etree.SubElement(element, tag).text = value

        attributes: Dict[str, str] = {}
        for attr, field_name in CLRMAMEPRO_ATTRIBUTES.items():
            value = header.read_string(field_name)
            if value is not None:
                attributes[attr] = value
        if attributes:
            etree.SubElement(element, 'clrmamepro', attributes)

        if keep_extras:
            for extra in header.extra:
                self._append_extra(element, extra)
        return element

    def _machine_element(self, machine: Machine, keep_extras: bool) -> etree.Element:
        element = etree.Element('game')
        for attr in MACHINE_ATTRIBUTES:
            value = machine.read_string(attr)
            if value is not None:
                element.set(attr, value)
        for attr, field_name in MACHINE_FLAGS.items():
            if machine.read(field_name):
                element.set(attr, 'yes')

        for tag in MACHINE_ELEMENTS:
            value = machine.read_string(tag)
            if value is not None:
                etree.SubElement(element, tag).text = value

        for item in machine.items:
            element.append(self._item_element(item, keep_extras))

        if keep_extras:
            for extra in machine.extra:
                self._append_extra(element, extra)
        return element

    def _item_element(self, item: DatItem, keep_extras: bool) -> etree.Element:
        tag = item.item_type
        element = etree.Element(tag)
        for field_name in item.field_names():
            if field_name in SKIPPED_FIELDS or (tag == 'dipswitch' and field_name == 'default'):
                continue
            value = item.read_string(field_name)
            if value is not None:
                element.set(FIELD_ALIASES.get((tag, field_name), field_name), value)

        for entry in item.read_array('entries') or []:
            dipvalue = etree.SubElement(element, 'dipvalue', name=entry)
            if entry == item.read('default'):
                dipvalue.set('default', 'yes')

        if keep_extras:
            for extra in item.extra:
                self._append_extra(element, extra)
        return element

    def _append_extra(self, parent: etree.Element, extra: str) -> None:
        """Restore an extra as a child element or, for ``name=value``, an attribute."""
        if extra.startswith('<'):
            try:
                parent.append(etree.fromstring(extra))
                return
            except etree.XMLSyntaxError:
                pass
        name, sep, value = extra.partition('=')
        if sep and name and ' ' not in name and parent.get(name) is None:
            parent.set(name, value)
        else:
            logger.debug(f"Cannot restore extra on <{parent.tag}>: {extra}")

