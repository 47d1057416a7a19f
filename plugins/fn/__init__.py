"""
plugins/fn - Lambda Resources

Folder name 'fn': 'lambda' is a Python reserved word
"""

CATEGORY = {
    "name": "lambda",
    "display_name": "Lambda",
    "description": "Lambda 함수",
    "description_en": "Lambda Functions",
    "aliases": ["fn", "function", "serverless"],
}

RESOURCES = [
    {
        "kind": "functions",
        "module": "functions",
        "description": "Lambda 함수",
        "description_en": "Lambda functions",
        "aliases": ["functions"],
    },
]
