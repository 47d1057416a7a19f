"""
tests/plugins/test_plugin_vpc.py - VPC/서브넷 플러그인 테스트
"""

from core.browser.filter import match_field_filter
from plugins.vpc.subnets import Subnet, SubnetFetcher
from plugins.vpc.vpcs import Vpc, VpcFetcher, VpcFormatter


class TestVpc:
    """Vpc 모델/포매터 테스트"""

    def test_from_api(self):
        vpc = Vpc.from_api(
            {"VpcId": "vpc-1", "CidrBlock": "10.0.0.0/16", "IsDefault": True, "Tags": [{"Key": "Name", "Value": "main"}]}
        )
        assert (vpc.id, vpc.name, vpc.cidr_block) == ("vpc-1", "main", "10.0.0.0/16")
        assert vpc.is_default is True
        assert vpc.field_value("VpcId") == "vpc-1"

    def test_navigations_filter_by_vpc(self):
        navs = VpcFormatter().navigations(Vpc.from_api({"VpcId": "vpc-1"}))
        assert [(n.key, n.domain, n.kind) for n in navs] == [
            ("s", "vpc", "subnets"),
            ("i", "ec2", "instances"),
            ("g", "ec2", "security-groups"),
        ]
        assert {(n.filter_field, n.filter_value) for n in navs} == {("VpcId", "vpc-1")}


class TestSubnet:
    """Subnet 모델 테스트"""

    def test_from_api(self):
        subnet = Subnet.from_api(
            {
                "SubnetId": "subnet-1",
                "VpcId": "vpc-1",
                "CidrBlock": "10.0.1.0/24",
                "AvailabilityZone": "ap-northeast-2a",
                "AvailableIpAddressCount": 251,
            }
        )
        assert subnet.vpc_id == "vpc-1"
        assert subnet.available_ips == 251
        assert subnet.name == ""

    def test_subnet_id_field_filter_uses_raw(self):
        """인스턴스 -> 서브넷 이동 시 SubnetId 필드 필터"""
        subnet = Subnet.from_api({"SubnetId": "subnet-1", "VpcId": "vpc-1"})
        assert match_field_filter(subnet, "SubnetId", "subnet-1") is True
        assert match_field_filter(subnet, "SubnetId", "subnet-2") is False


class TestFetchersMoto:
    """moto 기반 조회 테스트"""

    def test_vpc_list_includes_created(self, fetch_ctx, moto_ec2):
        _, vpc_id, _ = moto_ec2
        vpcs, token = VpcFetcher(fetch_ctx).list_page(fetch_ctx, 100, "")
        assert vpc_id in [v.id for v in vpcs]
        assert token == ""

    def test_vpc_filter(self, fetch_ctx, moto_ec2):
        _, vpc_id, _ = moto_ec2
        ctx = fetch_ctx.with_filter("VpcId", vpc_id)
        vpcs, _ = VpcFetcher(ctx).list_page(ctx, 100, "")
        assert [v.id for v in vpcs] == [vpc_id]

    def test_subnets_filtered_by_vpc(self, fetch_ctx, moto_ec2):
        _, vpc_id, subnet_id = moto_ec2
        ctx = fetch_ctx.with_filter("VpcId", vpc_id)
        subnets, _ = SubnetFetcher(ctx).list_page(ctx, 100, "")
        assert [s.id for s in subnets] == [subnet_id]
        assert subnets[0].cidr_block == "10.0.1.0/24"
