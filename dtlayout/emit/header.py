"""
Render C header constants for a resolved layout.

The header carries one base/size pair per physical region, aliases naming
which region backs each layout slot, and optional base/size macros for
devices selected by compatible string, each compatible announced by a
METAL_<COMPAT> presence marker.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import jinja2

from ..core.hardware import HardwareDocument, HardwareNode
from ..core.models import SLOTS, ResolvedLayout

logger = logging.getLogger(__name__)

TEMPLATES_PATH = 'templates'
HEADER_TEMPLATE = 'layout.h.j2'

DEVICE_REG_NAME = 'control'


@dataclass
class DeviceEntry:
    """Base/size macros for one device node"""

    compatible: str
    path: str
    handle: str
    index_handle: Optional[str]
    base: int
    size: int


def macro_name(text: str) -> str:
    """Upper-case a compatible or node name for use in a C macro"""
    return re.sub(r'[,\-@.]', '_', text).upper()


def _device_window(node: HardwareNode) -> Optional[Tuple[int, int]]:
    pair = node.named_reg(DEVICE_REG_NAME)
    if pair is not None:
        return pair
    try:
        entries = node.reg_entries()
    except ValueError:
        entries = []
    if entries:
        return entries[0]
    return node.single_reg()


def collect_devices(document: HardwareDocument,
                    compatibles: Sequence[str]) -> List[DeviceEntry]:
    """Build DeviceEntry records for every node matching the compatibles.

    A device's index is its position among the nodes with the same
    compatible, ordered by node path. Nodes without a register window are
    skipped.
    """
    devices = []
    for compatible in compatibles:
        prefix = f"METAL_{macro_name(compatible)}"
        for index, node in enumerate(document.match(re.escape(compatible))):
            window = _device_window(node)
            if window is None:
                logger.warning("%s has no register window, skipping", node.identity)
                continue
            instance = macro_name(node.instance) if node.instance else str(index)
            # Short unit addresses already are indices
            index_handle = f"{prefix}_{index}" if len(node.instance) > 2 else None
            devices.append(DeviceEntry(
                compatible=compatible,
                path=node.identity,
                handle=f"{prefix}_{instance}",
                index_handle=index_handle,
                base=window[0],
                size=window[1],
            ))
    return devices


def missingvalue(message: str):
    """Template hook that aborts rendering when a required value is absent"""
    raise jinja2.UndefinedError(message)


def get_environment() -> jinja2.Environment:
    """Initialize jinja2 with the packaged templates"""
    env = jinja2.Environment(
        loader=jinja2.PackageLoader('dtlayout.emit', TEMPLATES_PATH),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    env.globals['missingvalue'] = missingvalue
    env.filters['hex'] = lambda value: f"0x{value:08x}"
    env.filters['macro'] = macro_name
    return env


def group_devices(devices: Sequence[DeviceEntry]) -> List[Tuple[str, List[DeviceEntry]]]:
    """Group device entries by compatible, keeping first-seen order"""
    groups: Dict[str, List[DeviceEntry]] = {}
    for device in devices:
        groups.setdefault(device.compatible, []).append(device)
    return list(groups.items())


def build_header_context(layout: ResolvedLayout,
                         devices: Sequence[DeviceEntry] = (),
                         source: str = '') -> Dict[str, Any]:
    """Template variables for the layout header"""
    return {
        'source': source,
        'strategy': layout.strategy,
        'shape': layout.shape.value,
        'regions': list(layout.regions()),
        'slots': [(slot_name, layout.slot(slot_name)) for slot_name in SLOTS],
        'device_groups': group_devices(devices),
    }


def render_header(layout: ResolvedLayout,
                  devices: Sequence[DeviceEntry] = (),
                  source: str = '') -> str:
    """Render the layout header.

    Raises:
        jinja2.TemplateError: If the template is broken or a value is missing
    """
    template = get_environment().get_template(HEADER_TEMPLATE)
    return template.render(**build_header_context(layout, devices, source))
