"""Pydantic schemas for request/response validation."""

from .agency import *  # noqa: F403
from .booking import *  # noqa: F403
from .bus import *  # noqa: F403
from .client import *  # noqa: F403
from .common import *  # noqa: F403
from .health import *  # noqa: F403
from .hotel import *  # noqa: F403
from .payment import *  # noqa: F403
from .provider import *  # noqa: F403
from .route import *  # noqa: F403
from .seat import *  # noqa: F403
from .ticket import *  # noqa: F403
from .tour import *  # noqa: F403
