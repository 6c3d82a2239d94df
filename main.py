"""
Timer-Discord-Bot
Discord bot for named countdown timers
Runs one timer per channel and keeps an append-only log of starts and stops
"""

import os
import asyncio
import threading
import logging

import discord
from discord.ext import commands
from dotenv import load_dotenv

load_dotenv()

from models.reply import Reply
from services.session_store import SessionStore
from services.event_log_service import EventLogService
from services.timer_service import TimerService, TimerConfig
from services.bot_service import bot_service
from controllers.message_controller import MessageController
from controllers.command_controller import CommandController
from controllers.interaction_controller import InteractionController
from controllers.bot_controller import bot_router
from controllers.logs_controller import create_logs_router
from utils.message_utils import deliver_reply

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("timer-discord-bot")

# Services
timer_config = TimerConfig(
    log_file=os.getenv("TIMER_LOG_FILE", "timers.log"),
    max_duration_minutes=int(os.getenv("MAX_TIMER_MINUTES", "10080"))
)
session_store = SessionStore()
event_log_service = EventLogService(timer_config.log_file)
timer_service = None

# Seconds between checks of the enable switch while the bot is off
IDLE_POLL_SECONDS = 1
# Pause after a crashed run before starting a new instance
RESTART_DELAY_SECONDS = 5


async def deliver_expiry_notice(session_id: int, reply: Reply):
    """Send an auto-expiry notice through whichever bot instance is current"""
    await deliver_reply(bot_service.bot, session_id, reply)


async def initialize_services():
    """Initialize all services once"""
    global timer_service

    timer_service = TimerService(
        store=session_store,
        event_log=event_log_service,
        config=timer_config,
        notify=deliver_expiry_notice
    )

    bot_service.set_session_store(session_store)

    logger.info(f"Timer log: {timer_config.log_file}")
    logger.info(f"Max timer duration: {timer_config.max_duration_minutes} minutes")


def create_discord_bot():
    """Create and configure a new Discord bot instance"""
    INTENTS = discord.Intents.default()
    INTENTS.message_content = True

    bot = commands.Bot(
        command_prefix=os.getenv("COMMAND_PREFIX", "!"),
        intents=INTENTS,
        description='Timer-Discord-Bot - named countdown timers per channel'
    )

    # Controllers register their handlers on this bot instance
    MessageController(bot, timer_service)
    CommandController(bot, timer_service)
    InteractionController(bot, timer_service)

    @bot.event
    async def on_ready():
        """Bot is ready and connected to Discord"""
        logger.info(f"Bot logged in as {bot.user.name} ({bot.user.id})")
        logger.info("Timer-Discord-Bot is ready!")

    return bot


# Health check endpoint for Docker
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

app = FastAPI(
    title="Timer-Discord-Bot Health",
    description="Health check and log endpoints for the timer bot"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include bot control and log routers
app.include_router(bot_router)
app.include_router(create_logs_router(event_log_service))


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    health_info = bot_service.get_health_info()

    return {
        "status": "healthy",
        "service": "timer-discord-bot",
        "discord_enabled": bool(os.getenv("DISCORD_BOT_TOKEN")),
        **health_info
    }


@app.get("/ready")
async def readiness_check():
    """Readiness check endpoint - HTTP server is always ready"""
    return {
        "status": "ready",
        **bot_service.get_health_info()
    }


def run_health_server():
    """Run the health check server on a separate thread"""
    port = int(os.getenv("PORT", "8004"))
    uvicorn.run(app, host="0.0.0.0", port=port)


async def shutdown():
    """Graceful shutdown"""
    if timer_service:
        await timer_service.shutdown()
    if bot_service.bot_running:
        await bot_service.bot.close()
    bot_service.detach()


async def run_bot_once(bot_token: str, loop):
    """Run one fresh bot instance until it is closed or crashes"""
    bot = create_discord_bot()
    bot_service.attach(bot, loop)
    try:
        logger.info("Starting Discord bot instance")
        await bot.start(bot_token)
        logger.info("Discord bot instance stopped")
    except Exception as e:
        logger.error(f"Discord bot crashed: {e}")
        await asyncio.sleep(RESTART_DELAY_SECONDS)
    finally:
        if not bot.is_closed():
            try:
                await bot.close()
            except Exception as e:
                logger.error(f"Error closing bot: {e}")
        bot_service.detach()


async def run_bot_loop(bot_token: str, loop):
    """Keep a bot running while the API switch is on, idle while it is off"""
    idle = False
    while True:
        if bot_service.bot_enabled:
            idle = False
            await run_bot_once(bot_token, loop)
            continue

        if not idle:
            logger.info("Bot is disabled; waiting for /api/bot/enable")
            idle = True
        await asyncio.sleep(IDLE_POLL_SECONDS)


async def serve_http_only():
    """Keep the process alive for the HTTP endpoints when there is no token"""
    logger.warning("DISCORD_BOT_TOKEN not set - Discord bot features disabled")
    bot_service.bot_enabled = False
    logger.info("Timer-Discord-Bot running in HTTP mode (health endpoints active)")
    while True:
        await asyncio.sleep(3600)


async def main():
    """Main entry point"""
    bot_token = os.getenv("DISCORD_BOT_TOKEN")

    await initialize_services()
    bot_service.attach(None, asyncio.get_running_loop())

    threading.Thread(target=run_health_server, daemon=True).start()

    try:
        if not bot_token:
            await serve_http_only()
        logger.info("Starting Timer-Discord-Bot...")
        await run_bot_loop(bot_token, asyncio.get_running_loop())
    finally:
        await shutdown()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
