"""
botlist.services.embeds — Discord embed builders for lifecycle notifications
=============================================================================

All embed construction lives here so the dispatcher only ships data.
"""

from __future__ import annotations

import discord

from botlist.engine.events import NotificationEvent, NotificationType


def _bot_field(event: NotificationEvent) -> str:
    return f"**{event.bot_name}** (`{event.bot_id}`)"


def build_submit_embed(event: NotificationEvent) -> discord.Embed:
    """New submission waiting in the review queue."""
    embed = discord.Embed(
        title="\U0001f4e5 New Bot Submitted",
        description=f"{_bot_field(event)} is awaiting review.",
        color=discord.Color.blurple(),
    )
    embed.add_field(name="Owner", value=f"<@{event.user_id}> ({event.username})", inline=False)
    return embed


def build_approved_embed(event: NotificationEvent) -> discord.Embed:
    embed = discord.Embed(
        title="✅ Bot Approved",
        description=f"{_bot_field(event)} is now listed.",
        color=discord.Color.green(),
    )
    embed.add_field(name="Owner", value=f"<@{event.user_id}>", inline=True)
    embed.set_footer(text=f"Approved by {event.username}")
    return embed


def build_rejected_embed(event: NotificationEvent) -> discord.Embed:
    """Rejection notice carrying the moderator's reason."""
    embed = discord.Embed(
        title="❌ Bot Rejected",
        description=f"{_bot_field(event)} was rejected and removed.",
        color=discord.Color.red(),
    )
    embed.add_field(name="Owner", value=f"<@{event.user_id}>", inline=True)
    embed.add_field(name="Reason", value=(event.reason or "No reason given")[:1024], inline=False)
    embed.set_footer(text=f"Rejected by {event.username}")
    return embed


def build_featured_embed(event: NotificationEvent) -> discord.Embed:
    embed = discord.Embed(
        title="⭐ Bot Featured",
        description=f"{_bot_field(event)} is now featured on the front page.",
        color=discord.Color.gold(),
    )
    embed.set_footer(text=f"Featured by {event.username}")
    return embed


def build_notification_embed(event: NotificationEvent) -> discord.Embed:
    """Dispatch on ``event.type``."""
    builders = {
        NotificationType.BOT_SUBMIT: build_submit_embed,
        NotificationType.BOT_APPROVED: build_approved_embed,
        NotificationType.BOT_REJECTED: build_rejected_embed,
        NotificationType.BOT_FEATURED: build_featured_embed,
    }
    return builders[event.type](event)
