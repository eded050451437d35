"""
Alert definition publication.

A unit ships alert rules; a plan may opt out of some of them by name. The
remaining rules are written to the discovery store so the alerting system can
pick them up, keyed by stack name.
"""

import json
from typing import Iterable, Optional

from shipwright import syntax as s
from shipwright.program import Done, Program
from shipwright.schemas import AlertOptOut, AlertRule, NamespaceName, StackName, UnitDef

ALERTING_PREFIX = "alerting/v1"


def alerts_key(sn: StackName) -> str:
    return f"{ALERTING_PREFIX}/{sn}"


def effective_rules(unit: UnitDef, opt_outs: Iterable[AlertOptOut]) -> list[AlertRule]:
    """Alert rules of `unit` minus the opted-out ones, sorted by alert name."""
    excluded = {o.alert for o in opt_outs}
    return sorted(
        (r for r in unit.alerting if r.alert not in excluded),
        key=lambda r: r.alert,
    )


def write_alerts(
    sn: StackName,
    ns: NamespaceName,
    plan_name: str,
    unit: UnitDef,
    opt_outs: Iterable[AlertOptOut],
) -> Program[Optional[str]]:
    """
    Publish the alert rules of a stack.

    Returns:
        Program yielding the key written, or None when there was nothing to write
    """
    rules = effective_rules(unit, opt_outs)
    if not rules:
        return Done(None)

    key = alerts_key(sn)
    payload = json.dumps(
        {
            "stack": str(sn),
            "namespace": str(ns),
            "plan": plan_name,
            "rules": [{"alert": r.alert, "expression": r.expression} for r in rules],
        },
        sort_keys=True,
        separators=(",", ":"),
    )
    return s.put(key, payload).map(lambda _: key)


def delete_alerts(sn: StackName) -> Program[None]:
    return s.delete_key(alerts_key(sn))
