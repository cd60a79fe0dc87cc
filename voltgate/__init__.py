"""
Voltgate
~~~~~~~~

A Revolt event stream client with a bounded cache and a typed REST layer.

:copyright: (c) 2024-present MCausc78
:license: MIT, see LICENSE for more details.

"""

from . import (
    routes as routes,
    utils as utils,
)

from .autumn import *
from .base import *
from .cache import *
from .cdn import *
from .channel import *
from .client import *
from .core import *
from .dispatch import *
from .emoji import *
from .enums import *
from .errors import *
from .events import *
from .flags import *
from .http import *
from .message import *
from .parser import *
from .permissions import *
from .server import *
from .shard import *
from .user import *
from .utils import *
from .webhook import *
