"""VPC and networking infrastructure realized from a NetworkPlan."""

from typing import Optional

import pulumi
import pulumi_aws as aws

from vpc_infra import naming
from vpc_infra.plan import INTERNET_GATEWAY, NetworkPlan, NaclRulePlan, SubnetPlan


class Networking(pulumi.ComponentResource):
    """VPC and networking infrastructure for a project.

    Creates, following the plan:
    - VPC with the planned CIDR and DNS attributes
    - Internet gateway (only when there are public subnets)
    - One subnet, route table and route table association per planned subnet
    - A 0.0.0.0/0 route to the internet gateway in each public route table
    - One network ACL shared by all subnets, with one association per subnet
    """

    def __init__(
        self,
        name: str,
        plan: NetworkPlan,
        provider: Optional[aws.Provider] = None,
        tags: Optional[dict[str, str]] = None,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__("vpcplan:network:Networking", name, None, opts)

        self.plan = plan
        self._extra_tags = dict(tags or {})
        child_opts = pulumi.ResourceOptions(parent=self, provider=provider)

        self.vpc = aws.ec2.Vpc(
            plan.vpc.name,
            cidr_block=plan.vpc.cidr,
            enable_dns_hostnames=plan.vpc.enable_dns_hostnames,
            enable_dns_support=plan.vpc.enable_dns_support,
            tags=self._tags(plan.vpc.name),
            opts=child_opts,
        )

        self.internet_gateway: Optional[aws.ec2.InternetGateway] = None
        if plan.internet_gateway is not None:
            self.internet_gateway = aws.ec2.InternetGateway(
                plan.internet_gateway.name,
                vpc_id=self.vpc.id,
                tags=self._tags(plan.internet_gateway.name),
                opts=child_opts,
            )

        self.network_acl = aws.ec2.NetworkAcl(
            plan.network_acl.name,
            vpc_id=self.vpc.id,
            ingress=[_ingress(rule) for rule in plan.network_acl.ingress],
            egress=[_egress(rule) for rule in plan.network_acl.egress],
            tags=self._tags(plan.network_acl.name),
            opts=child_opts,
        )

        self.public_subnets: list[aws.ec2.Subnet] = []
        self.private_subnets: list[aws.ec2.Subnet] = []
        self.public_route_tables: list[aws.ec2.RouteTable] = []
        self.private_route_tables: list[aws.ec2.RouteTable] = []
        self.public_nacl_associations: list[aws.ec2.NetworkAclAssociation] = []
        self.private_nacl_associations: list[aws.ec2.NetworkAclAssociation] = []
        self.routes: list[aws.ec2.Route] = []

        for subnet_plan in plan.subnets:
            subnet, route_table, association = self._create_subnet(subnet_plan, child_opts)
            if subnet_plan.is_public:
                self.public_subnets.append(subnet)
                self.public_route_tables.append(route_table)
                self.public_nacl_associations.append(association)
            else:
                self.private_subnets.append(subnet)
                self.private_route_tables.append(route_table)
                self.private_nacl_associations.append(association)

        # Export outputs
        self.vpc_id = self.vpc.id
        self.internet_gateway_id = self.internet_gateway.id if self.internet_gateway else None
        self.public_subnet_ids = [s.id for s in self.public_subnets]
        self.private_subnet_ids = [s.id for s in self.private_subnets]
        self.public_route_table_ids = [rt.id for rt in self.public_route_tables]
        self.private_route_table_ids = [rt.id for rt in self.private_route_tables]
        self.network_acl_id = self.network_acl.id
        self.public_nacl_association_ids = [a.id for a in self.public_nacl_associations]
        self.private_nacl_association_ids = [a.id for a in self.private_nacl_associations]

        self.register_outputs(self.outputs())

    def outputs(self) -> dict:
        return {
            "vpc_id": self.vpc_id,
            "internet_gateway_id": self.internet_gateway_id,
            "public_subnet_ids": self.public_subnet_ids,
            "private_subnet_ids": self.private_subnet_ids,
            "public_route_table_ids": self.public_route_table_ids,
            "private_route_table_ids": self.private_route_table_ids,
            "network_acl_id": self.network_acl_id,
            "public_nacl_association_ids": self.public_nacl_association_ids,
            "private_nacl_association_ids": self.private_nacl_association_ids,
        }

    def _tags(self, name: str) -> dict[str, str]:
        return {**self._extra_tags, "Name": name, "Project": self.plan.project_name}

    def _create_subnet(
        self,
        subnet_plan: SubnetPlan,
        opts: pulumi.ResourceOptions,
    ) -> tuple[aws.ec2.Subnet, aws.ec2.RouteTable, aws.ec2.NetworkAclAssociation]:
        """Create a subnet with its own route table and ACL association."""
        subnet = aws.ec2.Subnet(
            subnet_plan.name,
            vpc_id=self.vpc.id,
            cidr_block=subnet_plan.cidr,
            availability_zone=subnet_plan.availability_zone,
            map_public_ip_on_launch=subnet_plan.is_public,
            tags=self._tags(subnet_plan.name),
            opts=opts,
        )

        rt_plan = subnet_plan.route_table
        route_table = aws.ec2.RouteTable(
            rt_plan.name,
            vpc_id=self.vpc.id,
            tags=self._tags(rt_plan.name),
            opts=opts,
        )

        for route in rt_plan.routes:
            # Only the internet gateway is a planned route target
            if route.target != INTERNET_GATEWAY or self.internet_gateway is None:
                raise ValueError(f"Route table {rt_plan.name} has no target for {route.target}")
            self.routes.append(
                aws.ec2.Route(
                    naming.route_name(rt_plan.name, route.destination_cidr),
                    route_table_id=route_table.id,
                    destination_cidr_block=route.destination_cidr,
                    gateway_id=self.internet_gateway.id,
                    opts=opts,
                )
            )

        aws.ec2.RouteTableAssociation(
            naming.route_table_association_name(rt_plan.name),
            subnet_id=subnet.id,
            route_table_id=route_table.id,
            opts=opts,
        )

        association = aws.ec2.NetworkAclAssociation(
            subnet_plan.nacl_association.name,
            network_acl_id=self.network_acl.id,
            subnet_id=subnet.id,
            opts=opts,
        )

        return subnet, route_table, association


def _ingress(rule: NaclRulePlan) -> aws.ec2.NetworkAclIngressArgs:
    return aws.ec2.NetworkAclIngressArgs(
        rule_no=rule.rule_no,
        protocol=rule.protocol,
        action=rule.action,
        cidr_block=rule.cidr_block,
        from_port=rule.from_port,
        to_port=rule.to_port,
    )


def _egress(rule: NaclRulePlan) -> aws.ec2.NetworkAclEgressArgs:
    return aws.ec2.NetworkAclEgressArgs(
        rule_no=rule.rule_no,
        protocol=rule.protocol,
        action=rule.action,
        cidr_block=rule.cidr_block,
        from_port=rule.from_port,
        to_port=rule.to_port,
    )
