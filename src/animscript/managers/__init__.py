"""
Managers for configuration and script discovery
"""

from .config_manager import ConfigManager
from .script_catalog import ScriptCatalog

__all__ = ['ConfigManager', 'ScriptCatalog']
