#!/usr/bin/env python3
"""
dtlayout - firmware memory layouts from devicetree hardware descriptions.

Given a devicetree and a layout shape, dtlayout decides which physical
memories hold code, scratch and data, and emits that decision as JSON or C
header constants.
"""

__version__ = '1.0.0'
