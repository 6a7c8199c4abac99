"""Resource names. These must stay stable across releases."""

PUBLIC = "pub"
PRIVATE = "pvt"


def vpc_name(project: str, suffix: str = "") -> str:
    return f"{project}-vpc{suffix}"


def internet_gateway_name(project: str, suffix: str = "") -> str:
    return f"{project}-igw{suffix}"


def network_acl_name(project: str, suffix: str = "") -> str:
    return f"{project}-nacl{suffix}"


def subnet_name(project: str, index: int, is_public: bool, suffix: str = "") -> str:
    """Name of the subnet at 1-based ``index``, e.g. ``demo-pub-sn-az-1-042``."""
    tier = PUBLIC if is_public else PRIVATE
    return f"{project}-{tier}-sn-az-{index}{suffix}"


def route_table_name(project: str, index: int, is_public: bool, suffix: str = "") -> str:
    tier = PUBLIC if is_public else PRIVATE
    return f"{project}-{tier}-rt-{index}{suffix}"


def nacl_association_name(subnet: str) -> str:
    return f"{subnet}-nacl-assoc"


def route_table_association_name(route_table: str) -> str:
    return f"{route_table}-assoc"


def route_name(route_table: str, destination: str) -> str:
    if destination == "0.0.0.0/0":
        return f"{route_table}-default"
    return f"{route_table}-{destination.replace('/', '-').replace('.', '-')}"
