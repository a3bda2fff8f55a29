from .assistant import AssistantPromptRequest, AssistantPromptResponse
from .device import PushDeviceCreate, PushDeviceRead
from .notification import (
    NotificationCreate,
    NotificationCreateResponse,
    NotificationListResponse,
    NotificationMarkReadRequest,
    NotificationMarkReadResponse,
    NotificationRead,
    SenderRead,
    UnreadCountResponse,
)
from .preferences import (
    CategoryPreferenceRead,
    CategoryPreferenceUpdate,
    GroupPreferenceRead,
    GroupPreferenceUpdate,
    PreferencesRead,
    PreferencesUpdate,
)
from .token import (
    BonusTokensRequest,
    TierUpgradeRequest,
    TokenSummaryRead,
    UsageDayRead,
    UsageStatsRead,
)

__all__ = [
    "AssistantPromptRequest",
    "AssistantPromptResponse",
    "BonusTokensRequest",
    "CategoryPreferenceRead",
    "CategoryPreferenceUpdate",
    "GroupPreferenceRead",
    "GroupPreferenceUpdate",
    "NotificationCreate",
    "NotificationCreateResponse",
    "NotificationListResponse",
    "NotificationMarkReadRequest",
    "NotificationMarkReadResponse",
    "NotificationRead",
    "PreferencesRead",
    "PreferencesUpdate",
    "PushDeviceCreate",
    "PushDeviceRead",
    "SenderRead",
    "TierUpgradeRequest",
    "TokenSummaryRead",
    "UnreadCountResponse",
    "UsageDayRead",
    "UsageStatsRead",
]
