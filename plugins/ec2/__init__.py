"""
plugins/ec2 - EC2 Resources

Browse EC2 instances and security groups
"""

CATEGORY = {
    "name": "ec2",
    "display_name": "EC2",
    "description": "EC2 인스턴스 및 보안 그룹",
    "description_en": "EC2 Instances and Security Groups",
    "aliases": ["compute"],
}

RESOURCES = [
    {
        "kind": "instances",
        "module": "instances",
        "description": "EC2 인스턴스",
        "description_en": "EC2 instances",
        "aliases": ["i"],
    },
    {
        "kind": "security-groups",
        "module": "security_groups",
        "description": "보안 그룹",
        "description_en": "Security groups",
        "aliases": ["sg"],
    },
]
