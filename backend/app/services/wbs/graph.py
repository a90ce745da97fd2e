from typing import Iterable, Iterator, Mapping

from app.core.errors import FieldError, ReferentialError, ValidationError
from app.db.models.wbs import WbsItem, WbsType


def find_cycle(nodes: Iterable[int], edges: Mapping[int, list[int]]) -> list[int] | None:
    """Depth-first search; returns the first cycle found as a closed path of ids.

    Walks with an explicit stack of (node, successor iterator) so long chains
    do not hit the recursion limit.
    """
    done: set[int] = set()
    path: list[int] = []
    positions: dict[int, int] = {}

    for start in nodes:
        if start in done or start in positions:
            continue
        positions[start] = 0
        path.append(start)
        stack: list[tuple[int, Iterator[int]]] = [(start, iter(edges.get(start, [])))]
        while stack:
            node, successors = stack[-1]
            for nxt in successors:
                if nxt in positions:
                    return path[positions[nxt] :] + [nxt]
                if nxt not in done:
                    positions[nxt] = len(path)
                    path.append(nxt)
                    stack.append((nxt, iter(edges.get(nxt, []))))
                    break
            else:
                stack.pop()
                path.pop()
                positions.pop(node)
                done.add(node)
    return None


def check_new_dependency(
    predecessor: WbsItem,
    successor: WbsItem,
    existing_edges: Iterable[tuple[int, int]],
) -> None:
    if predecessor.id == successor.id:
        raise ValidationError([FieldError("successor_id", "Cannot create self-dependency")])
    if predecessor.project_id != successor.project_id:
        raise ReferentialError("Dependencies must link items of the same project")
    if predecessor.type != WbsType.activity.value or successor.type != WbsType.activity.value:
        raise ValidationError([FieldError("predecessor_id", "Dependencies can only be created between 'Activity' items")])

    edges: dict[int, list[int]] = {}
    for pred_id, succ_id in existing_edges:
        if (pred_id, succ_id) == (predecessor.id, successor.id):
            raise ReferentialError("Dependency already exists")
        edges.setdefault(pred_id, []).append(succ_id)
    edges.setdefault(predecessor.id, []).append(successor.id)

    cycle = find_cycle([predecessor.id], edges)
    if cycle:
        path = " -> ".join(str(n) for n in cycle)
        raise ValidationError([FieldError("successor_id", f"Dependency would create a cycle: {path}")])
