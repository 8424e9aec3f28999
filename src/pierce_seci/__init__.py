# src/pierce_seci/__init__.py
"""
Monte Carlo SECI simulation of Pierce's disease in wild-type and defended
(transgenic) grapevine hosts.
"""
from .version_info import VERSION as __version__  # noqa: F401
