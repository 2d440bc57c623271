"""Protocol constants."""

TOKEN_TTL_SECONDS = 24 * 60 * 60

HEADER_USER_ID = "X-AUTH-USER-ID"
HEADER_TEAM_ID = "X-AUTH-TEAM-ID"
HEADER_SIGNATURE = "X-AUTH-SIGNATURE"
HEADER_EPOCH = "X-AUTH-EPOCH"

AUTH_HEADERS = (HEADER_USER_ID, HEADER_TEAM_ID, HEADER_SIGNATURE, HEADER_EPOCH)

WS_PARAM_USER_ID = "user_id"
WS_PARAM_TEAM_ID = "team_id"
WS_PARAM_SIGNATURE = "signature"
WS_PARAM_EPOCH = "epoch"
WS_PARAM_CONVERSATION_ID = "conversation_id"

PATH_CONVERSATION_NEW = "/conversation/new"
PATH_CONVERSATION_USER = "/conversation/user"
PATH_CONVERSATION_HISTORY = "/conversation/history"
PATH_CHAT_COMPLETION = "/chat/completion"
PATH_CONVERSATION_MARK_READ = "/conversation/mark_read"
PATH_CSAT_SET = "/csat/set"

DEFAULT_WS_PATH = "/ws"
DEFAULT_TIMEOUT_S = 10.0
DEFAULT_OPEN_TIMEOUT_S = 10.0

MESSAGE_TYPE_USER = "message"
MESSAGE_TYPE_CHAT = "chat_message"
MESSAGE_TYPE_ERROR = "error"
