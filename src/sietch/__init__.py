"""Sietch -- encrypted, content-addressed vaults scaffolded from templates.

Public API::

    from sietch import scaffold, ScaffoldSettings
    from sietch.pipeline import ScaffoldPipeline
    from sietch.templates import TemplateProvider
"""

from sietch.pipeline import ScaffoldPipeline, ScaffoldResult, scaffold
from sietch.settings import ScaffoldSettings

__all__ = ["ScaffoldPipeline", "ScaffoldResult", "ScaffoldSettings", "scaffold"]
__version__ = "0.1.0"
