"""
plugins/cloudwatch - CloudWatch Resources
"""

CATEGORY = {
    "name": "cloudwatch",
    "display_name": "CloudWatch",
    "description": "CloudWatch 알람 및 로그 그룹",
    "description_en": "CloudWatch Alarms and Log Groups",
    "aliases": ["cw"],
}

RESOURCES = [
    {
        "kind": "alarms",
        "module": "alarms",
        "description": "메트릭 알람",
        "description_en": "Metric alarms",
        "aliases": ["alarms", "alarm"],
    },
    {
        "kind": "log-groups",
        "module": "log_groups",
        "description": "로그 그룹",
        "description_en": "Log groups",
        "aliases": ["logs", "lg"],
    },
]
