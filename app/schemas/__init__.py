# ruff: noqa: F403, F401
"""Schemas package initialization."""

from .base import *
from .comment import *
from .delivery import *
from .folder import *
from .job import *
from .review import *
from .revision import *
from .settings import *
from .user import *
