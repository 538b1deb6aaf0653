"""ASGI entrypoint serving the local Daily Cigs API.

Launch configuration comes from ``DAILY_CIGS_*`` environment variables.
"""

from daily_cigs.api.app import create_app
from daily_cigs.config import Settings
from daily_cigs.containers import build_container

settings = Settings()
app = create_app(build_container(settings))
