"""
Cleanup tasks for the link-in-bio backend.

Deletes session rows whose tokens have already expired. Run it by hand or
from an external scheduler; the application never sweeps on its own, and
removing rows does not change which tokens are accepted.

Usage:
    python -m src.scripts.cleanup_tasks
"""

from src.linkbio.core.config import logger
from src.linkbio.db.session import get_db
from src.linkbio.services.session_service import cleanup_expired_sessions


def run_cleanup() -> int:
    """Run all cleanup tasks."""
    db = next(get_db())

    try:
        expired_count = cleanup_expired_sessions(db)
        logger.info(f"Cleaned up {expired_count} expired sessions")
        return expired_count
    finally:
        db.close()


if __name__ == "__main__":
    total_cleaned = run_cleanup()
    print(f"Total cleaned sessions: {total_cleaned}")
