"""Telegram bot interface for docbot.

Runs alongside the console loop in a background thread, sharing the same
command router and session registry.

    "!doc String#strip"           typed message  -> MessageSource
    /doc --long --omit-tags List  bot command    -> SlashSource
    inline button press           callback query -> ButtonSource

Requires telegram_credentials.py with TELEGRAM_TOKEN from @BotFather.
If not configured, start_telegram() logs a message and returns without error.
"""

import threading
import asyncio
from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import (
    ApplicationBuilder, CallbackQueryHandler, CommandHandler, ContextTypes,
    MessageHandler, filters,
)

from docbot.commands import router
from docbot.commands.doc import abbreviate
from docbot.commands.source import ButtonSource, MessageSource, SlashSource, slash_options

_MAX_MESSAGE_LENGTH = 4096
_SLASH_COMMANDS = ("doc", "javadoc")


def _log(msg):
    print(msg, flush=True)


def _source_id(message):
    """Session keys must be a single word: chat id and message id joined by a dot."""
    return f"{message.chat.id}.{message.message_id}"


def _tag(user):
    if user is None:
        return "[Telegram]"
    return f"[Telegram:{user.first_name or user.username or 'unknown'}]"


def _markup(rows):
    if not rows:
        return None
    return InlineKeyboardMarkup([
        [InlineKeyboardButton(c.label, callback_data=c.payload) for c in row]
        for row in rows
    ])


async def _send_replies(source, message, callback_query=None):
    """Send what the command collected on the source."""
    for reply in source.replies:
        text = abbreviate(reply.text, _MAX_MESSAGE_LENGTH)
        markup = _markup(reply.rows)
        first_line = text.splitlines()[0] if text else ""
        buttons = sum(len(row) for row in reply.rows)
        _log(f"  Response: \"{first_line}\"" + (f" [{buttons} buttons]" if buttons else ""))
        try:
            if reply.edit and callback_query is not None:
                await callback_query.edit_message_text(text, reply_markup=markup)
            else:
                await message.reply_text(text, reply_markup=markup)
        except Exception as e:
            _log(f"  {source.tag} failed to send reply: {e}")


async def _handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle an incoming text message ("!doc ...")."""
    message = update.message
    if message is None or not message.text:
        return

    source = MessageSource(_source_id(message), message.text, tag=_tag(message.from_user))
    if router.dispatch(source) is None and not source.replies:
        return

    _log(f"  {source.tag} \"{message.text}\"")
    await _send_replies(source, message)


async def _handle_slash(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /doc and /javadoc."""
    message = update.message
    if message is None:
        return

    options = slash_options(context.args or [])
    source = SlashSource(_source_id(message), "doc", options, tag=_tag(message.from_user))
    _log(f"  {source.tag} /doc {options}")
    router.dispatch(source)
    await _send_replies(source, message)


async def _handle_button(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle a press on one of the choice buttons."""
    query = update.callback_query
    await query.answer()
    if query.message is None or not query.data:
        return

    source = ButtonSource(_source_id(query.message), query.data, tag=_tag(query.from_user))
    _log(f"  {source.tag} button \"{query.data}\"")
    router.dispatch(source)
    await _send_replies(source, query.message, callback_query=query)


async def _run_bot_async(token):
    """Run the Telegram bot polling loop (async)."""
    app = ApplicationBuilder().token(token).build()
    app.add_handler(CommandHandler(list(_SLASH_COMMANDS), _handle_slash))
    app.add_handler(CallbackQueryHandler(_handle_button))
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, _handle_message))

    await app.initialize()
    await app.updater.start_polling(drop_pending_updates=True)
    await app.start()
    print("Telegram bot started.", flush=True)

    # Block forever (until thread is killed as daemon)
    stop_event = asyncio.Event()
    await stop_event.wait()


def _run_bot(token):
    """Run the Telegram bot (blocking). Meant to be called in a thread."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    loop.run_until_complete(_run_bot_async(token))


def start_telegram():
    """Start the Telegram bot in a background daemon thread.

    Returns True if started, False if skipped (no token).
    """
    try:
        from docbot.telegram_credentials import TELEGRAM_TOKEN as token
    except ImportError:
        print("No telegram_credentials.py, Telegram disabled.", flush=True)
        return False

    t = threading.Thread(target=_run_bot, args=(token,), daemon=True)
    t.start()
    return True
