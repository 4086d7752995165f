"""
agent-environment Platform Detection & Tool Resolution
Platform ids, version comparison and the system/local/download resolver
"""

from agentenv.platform.detector import (
    Arch,
    OSType,
    PlatformDetector,
    PlatformId,
    detect_platform,
    detect_shell,
    executable_name,
    get_platform,
)
from agentenv.platform.version import Ordering, SemVer, at_least, compare, parse, parse_loose

__all__ = [
    'Arch',
    'OSType',
    'PlatformDetector',
    'PlatformId',
    'detect_platform',
    'detect_shell',
    'executable_name',
    'get_platform',
    'Ordering',
    'SemVer',
    'at_least',
    'compare',
    'parse',
    'parse_loose',
]
