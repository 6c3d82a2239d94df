"""
Logs Controller
Read-only access to the timer event log
"""

import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from services.event_log_service import EventLogService

logger = logging.getLogger("timer-discord-bot")


def create_logs_router(event_log: EventLogService) -> APIRouter:
    """Create the /api/logs router for an event log"""
    logs_router = APIRouter(
        prefix="/api/logs",
        tags=["Timer Logs"]
    )

    @logs_router.get("")
    async def get_logs(include_content: bool = False):
        """Get the state, and optionally the content, of the timer log"""
        exists, file_path = event_log.get_status()
        if not include_content:
            return {
                "exists": exists,
                "content": None,
                "path": file_path
            }

        try:
            content = await event_log.read()
        except Exception as e:
            logger.error(f"Error reading timer log: {e}")
            raise HTTPException(status_code=500, detail=f"Error reading file: {str(e)}")

        return {
            "exists": exists,
            "content": content,
            "path": file_path,
            "total_size": len(content) if content else 0
        }

    @logs_router.get("/download")
    async def download_logs():
        """Download the timer log"""
        exists, file_path = event_log.get_status()
        if not exists:
            raise HTTPException(status_code=404, detail="Timer log not found")
        return FileResponse(file_path, media_type="text/plain", filename="timers.log")

    return logs_router
