from __future__ import annotations
from typing import Any, Dict, List

from tutor_onboarding.catalog import StepCatalog
from tutor_onboarding.models.step import StepDefinition


def step_node_id(role: str, step: StepDefinition) -> str:
    # variants sharing a slot are told apart by the branches they apply to
    variant = "+".join(step.when) if step.when else "all"
    return f"{role}_s{step.slot}_{variant}"


def step_node_data(role: str, step: StepDefinition) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": step_node_id(role, step),
        "label": step.title,
        "type": step.kind,
        "slot": step.slot,
        "when": list(step.when),
        "description": step.description,
    }
    if step.icon:
        data["icon"] = step.icon
    if step.message:
        data["message"] = step.message
    if step.fields:
        data["fields"] = [
            {
                "key": f.key,
                "kind": f.kind,
                "label": f.label,
                "option_set": f.option_set,
                "options": [o.model_dump() for o in f.options],
            }
            for f in step.fields
        ]
    return data


def build_branch_graph(catalog: StepCatalog, value: str) -> Dict[str, Any]:
    role = catalog.role.value
    steps = catalog.branch_steps(value)
    nodes = [{"data": step_node_data(role, s)} for s in steps]
    edges: List[Dict[str, Any]] = []
    for prev, nxt in zip(steps, steps[1:]):
        label = catalog.discriminator_label(value) if prev.kind == "path" else "next"
        edges.append({"data": {
            "source": step_node_id(role, prev),
            "target": step_node_id(role, nxt),
            "label": label,
            "branch": value,
        }})
    return {"nodes": nodes, "edges": edges}


def build_role_graph(catalog: StepCatalog) -> Dict[str, Any]:
    """Merge every branch of a role; shared step variants become one node."""
    nodes: Dict[str, Dict[str, Any]] = {}
    edges: Dict[tuple, Dict[str, Any]] = {}
    for value in catalog.discriminator_values:
        g = build_branch_graph(catalog, value)
        for n in g["nodes"]:
            nodes.setdefault(n["data"]["id"], n)
        for e in g["edges"]:
            d = e["data"]
            key = (d["source"], d["target"])
            if key in edges:
                edges[key]["data"]["branches"].append(value)
            else:
                edges[key] = {"data": {
                    "source": d["source"],
                    "target": d["target"],
                    "label": d["label"],
                    "branches": [value],
                }}
    return {"nodes": list(nodes.values()), "edges": list(edges.values())}
