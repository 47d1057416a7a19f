"""
plugins/sqs - SQS Queue Resources
"""

CATEGORY = {
    "name": "sqs",
    "display_name": "SQS",
    "description": "SQS 큐",
    "description_en": "SQS Queues",
    "aliases": ["queue"],
}

RESOURCES = [
    {
        "kind": "queues",
        "module": "queues",
        "description": "SQS 큐",
        "description_en": "SQS queues",
        "aliases": ["queues"],
    },
]
