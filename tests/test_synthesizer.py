#!/usr/bin/env python3

"""
test_synthesizer.py - Unit tests for four-slot layout assembly
"""

import unittest

from dtlayout.core.exceptions import IncompleteLayout
from dtlayout.core.models import SLOTS, LinkLayoutShape, MemoryRegion
from dtlayout.core.synthesizer import as_itim, as_ram, as_rom, synthesize_layout


RAM = as_ram(MemoryRegion('dtim', 0x80000000, 0x10000))
ROM = as_rom(MemoryRegion('flash', 0x20000000, 0x40000))
ITIM = as_itim(MemoryRegion('itim', 0x08000000, 0x4000))


class TestRoleAttributes(unittest.TestCase):
    """Role tagging renames regions and sets their permissions"""

    def test_ram(self):
        self.assertEqual(RAM.name, 'ram')
        self.assertEqual(RAM.attribute_string, 'wxa!ri')

    def test_rom(self):
        self.assertEqual(ROM.name, 'flash')
        self.assertEqual(ROM.attribute_string, 'rxai!w')

    def test_itim(self):
        self.assertEqual(ITIM.name, 'itim')
        self.assertEqual(ITIM.attribute_string, 'wx!rai')

    def test_tagging_keeps_address(self):
        self.assertEqual((RAM.base, RAM.size), (0x80000000, 0x10000))


class TestShapes(unittest.TestCase):
    """Slot assignment per shape, with and without ITIM"""

    def assertSlots(self, layout, code, scratch, data, rodata):
        self.assertEqual(
            (layout.code, layout.scratch, layout.data, layout.rodata),
            (code, scratch, data, rodata))

    def test_default_without_itim(self):
        layout = synthesize_layout(LinkLayoutShape.DEFAULT, RAM, ROM)
        self.assertSlots(layout, ROM, ROM, RAM, RAM)

    def test_default_with_itim(self):
        layout = synthesize_layout(LinkLayoutShape.DEFAULT, RAM, ROM, ITIM)
        self.assertSlots(layout, ROM, ITIM, RAM, RAM)

    def test_default_with_itim_keeps_rom_region(self):
        layout = synthesize_layout(LinkLayoutShape.DEFAULT, RAM, ROM, ITIM)
        self.assertEqual([region.name for region in layout.regions()], ['flash', 'itim', 'ram'])

    def test_scratchpad_without_itim(self):
        layout = synthesize_layout(LinkLayoutShape.SCRATCHPAD, RAM, ROM)
        self.assertSlots(layout, RAM, RAM, RAM, RAM)

    def test_scratchpad_with_itim(self):
        layout = synthesize_layout(LinkLayoutShape.SCRATCHPAD, RAM, ROM, ITIM)
        self.assertSlots(layout, RAM, ITIM, RAM, RAM)

    def test_ramrodata_without_itim(self):
        layout = synthesize_layout(LinkLayoutShape.RAMRODATA, RAM, ROM)
        self.assertSlots(layout, ROM, ROM, RAM, ROM)

    def test_ramrodata_with_itim(self):
        layout = synthesize_layout(LinkLayoutShape.RAMRODATA, RAM, ROM, ITIM)
        self.assertSlots(layout, ROM, ITIM, RAM, ROM)

    def test_every_slot_filled(self):
        for shape in LinkLayoutShape:
            for itim in (None, ITIM):
                layout = synthesize_layout(shape, RAM, ROM, itim)
                for slot_name in SLOTS:
                    self.assertIsInstance(layout.slot(slot_name), MemoryRegion,
                                          f"{shape.value}/{slot_name}")

    def test_strategy_name_recorded(self):
        layout = synthesize_layout(LinkLayoutShape.DEFAULT, RAM, ROM, strategy='ChosenStrategy')
        self.assertEqual(layout.strategy, 'ChosenStrategy')


class TestRequiredRegions(unittest.TestCase):
    """Missing RAM/ROM is fatal where the shape needs it"""

    def test_missing_ram(self):
        for shape in LinkLayoutShape:
            with self.assertRaises(IncompleteLayout) as ctx:
                synthesize_layout(shape, None, ROM)
            self.assertIn('ram', ctx.exception.missing)

    def test_missing_rom_default(self):
        with self.assertRaises(IncompleteLayout) as ctx:
            synthesize_layout(LinkLayoutShape.DEFAULT, RAM, None, ITIM)
        self.assertEqual(ctx.exception.missing, ('rom',))

    def test_missing_rom_ramrodata(self):
        with self.assertRaises(IncompleteLayout):
            synthesize_layout(LinkLayoutShape.RAMRODATA, RAM, None)

    def test_missing_both(self):
        with self.assertRaises(IncompleteLayout) as ctx:
            synthesize_layout(LinkLayoutShape.DEFAULT, None, None)
        self.assertEqual(ctx.exception.missing, ('ram', 'rom'))
        self.assertEqual(ctx.exception.details['shape'], 'default')

    def test_scratchpad_needs_no_rom(self):
        layout = synthesize_layout(LinkLayoutShape.SCRATCHPAD, RAM, None)
        self.assertEqual(layout.code, RAM)


if __name__ == '__main__':
    unittest.main()
