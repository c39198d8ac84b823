from types import MappingProxyType

# Jira 인스턴스의 커스텀 필드 ID → 표준 필드명
DEFAULT_FIELD_MAP = MappingProxyType({
    "customfield_12001": "requirementId",
    "customfield_12108": "skillsNotes",
    "customfield_12221": "account",
    "customfield_12225": "approach",
    "customfield_12235": "requestLanguage",
    "customfield_12236": "devices",
    "customfield_12269": "overageCalculator",
    "customfield_12273": "workRatioAutomation",
    "customfield_12281": "acceptanceCriteria",
    "customfield_12285": "productboardUrl",
    "customfield_11303": "startDate",
    "customfield_10001": "sprint",
    "customfield_10002": "epicLink",
})

CUSTOM_FIELD_PREFIX = "customfield"
