"""
Secret policy provisioning.

write_policy and delete_policy are always used in matching pairs across a
deployment's deploy and destroy programs. The secrets store treats creation
as create-or-replace and deletion as delete-if-exists, so either may be
repeated safely.
"""

from typing import Iterable

from shipwright import syntax as s
from shipwright.program import Program
from shipwright.schemas import NamespaceName, PolicyConfig, StackName


def policy_name(sn: StackName, ns: NamespaceName) -> str:
    """Deterministic policy name for a stack in a namespace."""
    return f"shipwright__{ns.value.replace('/', '_')}__{sn}"


def write_policy(
    config: PolicyConfig,
    sn: StackName,
    ns: NamespaceName,
    roles: Iterable[str],
) -> Program[None]:
    return s.create_policy(config, sn, ns, roles)


def delete_policy(sn: StackName, ns: NamespaceName) -> Program[None]:
    return s.delete_policy(sn, ns)
