"""
plugins/cloudformation - CloudFormation Resources

## 사용 케이스
- Stack 상태/드리프트 확인
- 삭제 전 Stack 상세 확인
"""

CATEGORY = {
    "name": "cloudformation",
    "display_name": "CloudFormation",
    "description": "CloudFormation Stack",
    "description_en": "CloudFormation Stacks",
    "aliases": ["cfn"],
}

RESOURCES = [
    {
        "kind": "stacks",
        "module": "stacks",
        "description": "CloudFormation Stack",
        "description_en": "CloudFormation stacks",
        "aliases": ["stacks", "stack"],
    },
]
