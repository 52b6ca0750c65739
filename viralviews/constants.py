"""Global constants for the viralviews application."""

# Collections
USERS_COLLECTION = "users"
BATTLES_COLLECTION = "battles"
MESSAGES_COLLECTION = "messages"

# Firestore rejects batches with more writes than this.
BATCH_WRITE_LIMIT = 500
MEDIA_COLLECTION = "media"

# Battle lifecycle
BATTLE_WAITING = "waiting"
BATTLE_ACTIVE = "active"
BATTLE_VOTING = "voting"
BATTLE_COMPLETED = "completed"
BATTLE_STATUSES = (BATTLE_WAITING, BATTLE_ACTIVE, BATTLE_VOTING, BATTLE_COMPLETED)
BATTLE_FORMATS = ("freestyle", "written", "cypher")

MIN_PARTICIPANTS = 2
MAX_PARTICIPANTS = 10
MAX_TITLE_LENGTH = 100
MIN_TIME_LIMIT = 30
MAX_TIME_LIMIT = 600
MAX_PERFORMANCE_LENGTH = 5000

# Chat
MAX_CHAT_MESSAGE_LENGTH = 500
CHAT_HISTORY_LIMIT = 50
CHAT_MESSAGE_TYPES = ("message", "reaction", "system")

# Media
MEDIA_CATEGORIES = ("battle", "cypher", "freestyle", "practice", "other")
MEDIA_PRIVACY = ("public", "private", "unlisted")
MEDIA_TYPES = ("video", "audio")
MAX_TAGS = 10
MAX_TAG_LENGTH = 30
PLACEHOLDER_MEDIA_BASE_URL = "https://storage.example.com/media"

# Moderation
MEDIA_PENDING = "pending_moderation"
MEDIA_APPROVED = "approved"
MEDIA_REJECTED = "rejected"
MEDIA_FLAGGED = "flagged"
MODERATION_ACTIONS = {
    "approve": MEDIA_APPROVED,
    "reject": MEDIA_REJECTED,
    "flag": MEDIA_FLAGGED,
}

# Users
MIN_USERNAME_LENGTH = 3
MAX_USERNAME_LENGTH = 30
MAX_DISPLAY_NAME_LENGTH = 50
MIN_PASSWORD_LENGTH = 8
SOCIAL_NETWORKS = ("instagram", "youtube", "soundcloud", "tiktok")
