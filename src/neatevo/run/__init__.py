"""
NEAT Run Package

Modules:
    config: Config class, parsing INI configuration files
    trial:  Trial abstract base class, running one evolution
"""

from neatevo.run.config import Config
from neatevo.run.trial  import Trial

__all__ = ['Config', 'Trial']
