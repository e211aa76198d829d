"""Hotspot detection for pytest-mender.

This package recognises mutation points (hotspots) in a Python AST and
holds the catalog of rewrites that may be applied at each of them.
"""

from pytest_mender.hotspots.catalog import CATALOG, Alternative, alternatives_for, identity_choice
from pytest_mender.hotspots.detector import Detection, HotspotDetector, detect
from pytest_mender.hotspots.hotspot import Hotspot, HotspotMarker
from pytest_mender.hotspots.kinds import HotspotKind, detect_kind, select_kinds


__all__ = [
    'CATALOG',
    'Alternative',
    'Detection',
    'Hotspot',
    'HotspotDetector',
    'HotspotKind',
    'HotspotMarker',
    'alternatives_for',
    'detect',
    'detect_kind',
    'identity_choice',
    'select_kinds',
]
