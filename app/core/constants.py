"""Application constants.

Contains the PostgREST error codes the services branch on and the
Japanese display strings rendered on the profile page.
"""

# ---------------------------------------------------------------------------
# PostgREST
# ---------------------------------------------------------------------------
# Raised by ``.single()`` when the filter matched zero rows.
POSTGREST_NOT_FOUND_CODE: str = "PGRST116"

# ---------------------------------------------------------------------------
# Page labels
# ---------------------------------------------------------------------------
DEFAULT_DISPLAY_NAME: str = "ユーザー"
DEFAULT_AVATAR_INITIAL: str = "U"
BIO_PLACEHOLDER: str = "プロフィールを設定してください"
SKILLS_PLACEHOLDER: str = "スキルを設定してください"
HOURLY_RATE_UNSET: str = "未設定"
BUDGET_NEGOTIABLE: str = "予算相談"
DEADLINE_NONE: str = "期限なし"
CURRENCY_SYMBOL: str = "¥"
HOURLY_SUFFIX: str = "/時間"

SAVE_LABEL_IDLE: str = "プロフィールを保存"
SAVE_LABEL_BUSY: str = "保存中..."
SAVE_SUCCESS_MESSAGE: str = "プロフィールを保存しました！"
SAVE_FAILURE_PREFIX: str = "プロフィールの保存に失敗しました: "

# Number of skill chips shown per job card before collapsing into "+N".
JOB_SKILLS_SHOWN: int = 5

# Where the client is sent after sign-out.
LOGOUT_CALLBACK_URL: str = "/"

# ---------------------------------------------------------------------------
# Tabs: id -> (label, icon)
# ---------------------------------------------------------------------------
TAB_LABELS: dict[str, tuple[str, str]] = {
    "overview": ("概要", "📊"),
    "posted-jobs": ("投稿した案件", "📝"),
    "edit": ("プロフィール編集", "✏️"),
}
