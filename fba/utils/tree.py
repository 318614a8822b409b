# fba/utils/tree.py

from typing import Any, Dict, List, Sequence


def build_tree(rows: Sequence[Any], read_model) -> List[Dict[str, Any]]:
    """parent_id 로 연결된 행 목록을 중첩된 children 트리로 바꿉니다. (정렬 순서 유지)"""
    nodes = {row.id: {**read_model.model_validate(row).model_dump(), "children": []} for row in rows}
    roots: List[Dict[str, Any]] = []
    for row in rows:
        node = nodes[row.id]
        parent = nodes.get(row.parent_id) if row.parent_id is not None else None
        if parent is not None and row.parent_id != row.id:
            parent["children"].append(node)
        else:
            roots.append(node)
    return roots
