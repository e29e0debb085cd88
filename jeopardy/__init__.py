"""
Jeopardy Discord Bot
~~~~~~~~~~~~~~~~~~~~
Jeopardy-style trivia boards for Discord text channels.

:copyright: (c) 2018-present HitchedSyringe
:license: MPL-2.0, see https://mozilla.org/MPL/2.0/ for more information.

"""


__title__ = "jeopardy"
__author__ = "HitchedSyringe"
__copyright__ = "Copyright (c) 2018-present HitchedSyringe"
__license__ = "MPL-2.0"
__version__ = "1.0.0"


from . import utils as utils
from .board import *
from .controller import *
from .errors import *
from .http import *
from .provider import *
