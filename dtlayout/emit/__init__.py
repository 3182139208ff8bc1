"""Emitters that turn a resolved layout into build inputs."""

from .header import DeviceEntry, collect_devices, render_header

__all__ = ['DeviceEntry', 'collect_devices', 'render_header']
