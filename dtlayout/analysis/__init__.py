"""Firmware image analysis against a resolved layout."""

from .fit import FitReport, RegionUsage, SectionInfo, check_fit, map_sections, read_sections

__all__ = ['FitReport', 'RegionUsage', 'SectionInfo', 'check_fit', 'map_sections', 'read_sections']
