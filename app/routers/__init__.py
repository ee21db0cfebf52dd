# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - projects.py: Project list/create/detail and cover upload
# - assets.py: Asset detail
# - uploads.py: Batch upload sessions
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import projects
from . import assets
from . import uploads

__all__ = [
    "health",
    "projects",
    "assets",
    "uploads",
]
