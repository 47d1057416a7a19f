"""
plugins/iam - IAM Resources

Global service: results are the same in every region
"""

CATEGORY = {
    "name": "iam",
    "display_name": "IAM",
    "description": "IAM 역할",
    "description_en": "IAM Roles",
    "aliases": [],
}

RESOURCES = [
    {
        "kind": "roles",
        "module": "roles",
        "description": "IAM 역할",
        "description_en": "IAM roles",
        "aliases": ["roles", "role"],
    },
]
