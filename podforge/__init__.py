"""podforge -- configure a library template into a named project.

Quick usage::

    import asyncio
    from pathlib import Path
    from podforge import ScaffoldConfig, TemplateConfigurator

    configurator = TemplateConfigurator("MyLibrary", ScaffoldConfig(root=Path(".")))
    report = asyncio.run(configurator.run())
"""

from podforge.config import ScaffoldConfig
from podforge.configurator import RunReport, TemplateConfigurator, main

__all__ = [
    "RunReport",
    "ScaffoldConfig",
    "TemplateConfigurator",
    "main",
]

__version__ = "0.1.0"
