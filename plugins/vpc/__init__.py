"""
plugins/vpc - VPC Resources

Browse VPCs and subnets
"""

CATEGORY = {
    "name": "vpc",
    "display_name": "VPC",
    "description": "VPC 및 네트워크 리소스",
    "description_en": "VPC and Network Resources",
    "aliases": ["network"],
}

RESOURCES = [
    {
        "kind": "vpcs",
        "module": "vpcs",
        "description": "VPC",
        "description_en": "VPCs",
        "aliases": [],
    },
    {
        "kind": "subnets",
        "module": "subnets",
        "description": "서브넷",
        "description_en": "Subnets",
        "aliases": ["subnet"],
    },
]
