"""
utils/constants.py

Purpose: Centralized static content

- All user-facing messages
- Preference keyboard layout
- Command names and keywords

(Prevents hardcoding across the codebase)
"""

# ============================================================
# COMMANDS & KEYWORDS
# ============================================================

COMMAND_START = "start"
COMMAND_ADD_CHANNEL = "addchannel"

# Exact, case-sensitive keyword that closes preference collection
DONE_KEYWORD = "Done"

DEFAULT_DISPLAY_NAME = "friend"

# ============================================================
# WELCOME & PROFILE
# ============================================================

WELCOME_MESSAGE = "👋 Welcome to {bot_name}, {name}!"

ASK_FIRST_NAME_MESSAGE = "What is your first name?"

ASK_LAST_NAME_MESSAGE = "Nice to meet you, {first_name}! What is your last name?"

# ============================================================
# JOB PREFERENCES
# ============================================================

ASK_PREFERENCES_MESSAGE = "Thanks {first_name} {last_name}! Now let's set up job preferences."

PREFERENCE_ADDED_MESSAGE = 'Added {preference} preference. Select more or click "Done"'

SETUP_COMPLETE_MESSAGE = "Setup complete! Now add channels with /addchannel @channelname"

PREFERENCE_KEYBOARD = [
    ["Remote", "Full-time"],
    ["Part-time", "Contract"],
    [DONE_KEYWORD],
]

# ============================================================
# CHANNELS
# ============================================================

ADD_CHANNEL_USAGE_MESSAGE = "Usage: /addchannel @channelname"

CHANNEL_ADDED_MESSAGE = "✅ @{channel} added successfully!"

CHANNEL_ALREADY_ADDED_MESSAGE = "ℹ️ @{channel} was already added."

CHANNEL_UNREACHABLE_MESSAGE = (
    "❌ Couldn't access @{channel}. Ensure:\n"
    "- You're a member\n"
    "- Channel exists\n"
    "- No typos"
)

# ============================================================
# ERRORS
# ============================================================

GENERIC_ERROR_MESSAGE = "⚠️ An error occurred. Please try again."

# ============================================================
# ROUTES
# ============================================================

# Path Telegram posts updates to, relative to API_PREFIX
WEBHOOK_ROUTE = "/telegram/webhook"
