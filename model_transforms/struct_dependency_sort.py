"""
Dependency ordering for struct emission.
A struct that embeds another struct by value needs that struct fully defined first.
Structs without by-value struct members go first, in name order; the rest follow in
name order, each preceded by whatever it embeds. Raises an error if a cycle is detected.
"""
from typing import Dict, List, Tuple

from generators.generator_utils import pascal_case, sorted_by_name
from schema_errors import StructDependencyCycleError
from schema_model import Struct


def partition_structs(structs: List[Struct]) -> Tuple[List[Struct], List[Struct]]:
    """
    Split structs into (plain, embedding), both sorted by capitalized name.
    'embedding' structs hold at least one other struct by value.
    """
    plain = []
    embedding = []
    for s in sorted_by_name(structs):
        if s.embedded_struct_names():
            embedding.append(s)
        else:
            plain.append(s)
    return plain, embedding


def order_structs_for_emission(structs: List[Struct]) -> List[Struct]:
    """
    Returns the structs in an order where every by-value dependency is emitted
    before the struct embedding it. With at most one level of nesting this is the
    plain structs followed by the embedding structs, each group in name order.
    Raises StructDependencyCycleError if structs embed each other in a cycle.
    """
    plain, embedding = partition_structs(structs)
    pending: Dict[str, Struct] = {s.name: s for s in embedding}
    visited = set()
    temp_mark = []
    result = list(plain)

    def visit(s: Struct):
        if s.name in visited:
            return
        if s.name in temp_mark:
            cycle = temp_mark[temp_mark.index(s.name):] + [s.name]
            raise StructDependencyCycleError(
                f"struct.{s.name}",
                "by-value struct cycle: " + " -> ".join(cycle),
            )
        temp_mark.append(s.name)
        # Dependencies on plain structs are already emitted; unknown names are not validated here
        for dep_name in sorted(set(s.embedded_struct_names()), key=pascal_case):
            if dep_name in pending:
                visit(pending[dep_name])
        temp_mark.pop()
        visited.add(s.name)
        result.append(s)

    for s in embedding:
        visit(s)
    return result
