"""
voltgate.ext.commands
~~~~~~~~~~~~~~~~~~~~~

A small prefix command framework built on top of the event stream.

:copyright: (c) 2024-present MCausc78
:license: MIT, see LICENSE for more details.

"""

from .core import *
from .errors import *
from .view import *
