#!/usr/bin/env python3

"""
test_fit.py - Unit tests for mapping ELF sections onto a resolved layout
"""

import unittest
from unittest.mock import MagicMock, mock_open, patch

from elftools.common.exceptions import ELFError

from dtlayout.analysis.fit import SectionInfo, check_fit, map_sections, read_sections
from dtlayout.core.exceptions import FitCheckError
from dtlayout.core.models import LinkLayoutShape, MemoryRegion
from dtlayout.core.synthesizer import as_ram, as_rom, synthesize_layout


LAYOUT = synthesize_layout(
    LinkLayoutShape.DEFAULT,
    ram=as_ram(MemoryRegion('dtim', 0x80000000, 0x4000)),
    rom=as_rom(MemoryRegion('spi', 0x20000000, 0x10000)),
    strategy='ChosenStrategy',
)


def make_section(name, addr, size, flags=0x2):
    """Mock pyelftools section"""
    section = MagicMock()
    section.name = name
    values = {'sh_addr': addr, 'sh_size': size, 'sh_flags': flags}
    section.__getitem__.side_effect = values.__getitem__
    return section


class TestMapSections(unittest.TestCase):
    """Address-based placement of sections"""

    def test_sections_fit(self):
        report = map_sections([
            SectionInfo('.text', 0x20000000, 0x8000),
            SectionInfo('.rodata', 0x20008000, 0x1000),
            SectionInfo('.data', 0x80000000, 0x100),
            SectionInfo('.bss', 0x80000100, 0x200),
        ], LAYOUT)

        self.assertTrue(report.ok)
        usage = {u.region.name: u for u in report.regions}
        self.assertEqual(usage['flash'].used_size, 0x9000)
        self.assertEqual(usage['ram'].used_size, 0x300)
        self.assertEqual(usage['ram'].free_size, 0x4000 - 0x300)

    def test_overflowing_section(self):
        report = map_sections([SectionInfo('.bss', 0x80003f00, 0x200)], LAYOUT)
        self.assertFalse(report.ok)
        self.assertEqual([s.name for s in report.overflows], ['.bss'])

    def test_section_outside_layout(self):
        report = map_sections([SectionInfo('.noinit', 0x90000000, 0x10)], LAYOUT)
        self.assertFalse(report.ok)
        self.assertEqual([s.name for s in report.unmapped], ['.noinit'])

    def test_region_overcommitted(self):
        report = map_sections([
            SectionInfo('.data', 0x80000000, 0x3000),
            SectionInfo('.bss', 0x80001000, 0x3000),
        ], LAYOUT)
        self.assertFalse(report.ok)
        self.assertEqual(report.to_dict()['overflows'], [])

    def test_to_dict(self):
        report = map_sections([SectionInfo('.text', 0x20000000, 0x8000)], LAYOUT)
        data = report.to_dict()
        self.assertTrue(data['ok'])
        self.assertEqual(data['regions'][0]['region'], 'flash')
        self.assertEqual(data['regions'][0]['utilization_percent'], 50.0)
        self.assertEqual(data['regions'][0]['sections'], ['.text'])


class TestReadSections(unittest.TestCase):
    """Reading allocated sections with pyelftools"""

    @patch('dtlayout.analysis.fit.ELFFile')
    def test_only_allocated_nonempty_sections(self, mock_elffile):
        mock_elffile.return_value.iter_sections.return_value = [
            make_section('', 0, 0, flags=0),
            make_section('.text', 0x20000000, 0x100),
            make_section('.debug_info', 0, 0x500, flags=0),
            make_section('.empty', 0x20000100, 0),
            make_section('.bss', 0x80000000, 0x40, flags=0x3),
        ]
        with patch('builtins.open', mock_open()):
            sections = read_sections('/test/firmware.elf')

        self.assertEqual([s.name for s in sections], ['.text', '.bss'])
        self.assertEqual(sections[1].address, 0x80000000)

    @patch('dtlayout.analysis.fit.ELFFile')
    def test_invalid_elf(self, mock_elffile):
        mock_elffile.side_effect = ELFError('Magic number does not match')
        with patch('builtins.open', mock_open()):
            with self.assertRaises(FitCheckError):
                read_sections('/test/firmware.elf')

    def test_missing_file(self):
        with self.assertRaises(FitCheckError):
            read_sections('/nonexistent/firmware.elf')

    @patch('dtlayout.analysis.fit.read_sections')
    def test_check_fit(self, mock_read):
        mock_read.return_value = [SectionInfo('.text', 0x20000000, 0x20000)]
        report = check_fit('/test/firmware.elf', LAYOUT)
        self.assertFalse(report.ok)
        mock_read.assert_called_once_with('/test/firmware.elf')


if __name__ == '__main__':
    unittest.main()
