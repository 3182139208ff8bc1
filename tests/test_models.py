#!/usr/bin/env python3

"""
test_models.py - Unit tests for layout value types
"""

import json
import unittest

from dtlayout.core.models import Attribute, LinkLayoutShape, MemoryRegion
from dtlayout.core.synthesizer import as_ram, as_rom, synthesize_layout


class TestAttributes(unittest.TestCase):
    """Short-code attribute strings"""

    def test_parse_negations(self):
        self.assertEqual(
            Attribute.parse('wxa!ri'),
            (Attribute.WRITABLE, Attribute.EXECUTABLE, Attribute.ALLOCATABLE,
             Attribute.NOT_READABLE, Attribute.INITIALIZED))

    def test_unknown_code(self):
        with self.assertRaises(ValueError):
            Attribute.parse('rz')


class TestLinkLayoutShape(unittest.TestCase):
    """CLI names of layout shapes"""

    def test_from_name(self):
        self.assertIs(LinkLayoutShape.from_name('RamRodata'), LinkLayoutShape.RAMRODATA)

    def test_unknown_name(self):
        with self.assertRaises(ValueError) as ctx:
            LinkLayoutShape.from_name('freertos')
        self.assertIn('scratchpad', str(ctx.exception))


class TestMemoryRegion(unittest.TestCase):
    """Region value type"""

    def test_end_address(self):
        region = MemoryRegion('ram', 0x80000000, 0x4000)
        self.assertEqual(region.end_address, 0x80003fff)
        self.assertTrue(region.contains(0x80003fff))
        self.assertFalse(region.contains(0x80004000))

    def test_rejects_negative_base(self):
        with self.assertRaises(ValueError):
            MemoryRegion('ram', -1, 0x4000)

    def test_accepts_64_bit_top(self):
        region = MemoryRegion('ram', 0xFFFFFFFF00000000, 0x1000)
        self.assertEqual(region.base, 0xFFFFFFFF00000000)

    def test_immutable(self):
        region = MemoryRegion('ram', 0x80000000, 0x4000)
        with self.assertRaises(AttributeError):
            region.base = 0


class TestResolvedLayout(unittest.TestCase):
    """Layout serialization"""

    def setUp(self):
        self.ram = as_ram(MemoryRegion('dtim', 0x80000000, 0x10000, compatible='sifive,dtim0'))
        self.rom = as_rom(MemoryRegion('spi', 0x20000000, 0x40000))
        self.layout = synthesize_layout(
            LinkLayoutShape.RAMRODATA, self.ram, self.rom, strategy='ChosenStrategy')

    def test_distinct_regions_in_slot_order(self):
        self.assertEqual([region.name for region in self.layout.regions()], ['flash', 'ram'])

    def test_unknown_slot(self):
        with self.assertRaises(KeyError):
            self.layout.slot('stack')

    def test_to_dict(self):
        data = json.loads(json.dumps(self.layout.to_dict()))
        self.assertEqual(data['strategy'], 'ChosenStrategy')
        self.assertEqual(data['shape'], 'ramrodata')
        self.assertEqual(data['slots'], {
            'code': 'flash', 'scratch': 'flash', 'data': 'ram', 'rodata': 'flash'})
        ram = data['regions'][1]
        self.assertEqual(ram['base'], 0x80000000)
        self.assertEqual(ram['attributes'], 'wxa!ri')
        self.assertEqual(ram['compatible'], 'sifive,dtim0')


if __name__ == '__main__':
    unittest.main()
