"""
agent-environment Dependent-Tool Installers
Runtimes installed through a resolved tool (Python via uv, Node.js via fnm)
"""

from agentenv.platform.installers.base import DependentInstaller
from agentenv.platform.installers.python import PythonInstaller
from agentenv.platform.installers.node import NodeInstaller

__all__ = [
    'DependentInstaller',
    'PythonInstaller',
    'NodeInstaller',
]
