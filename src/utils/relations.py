"""Read-side joins: resolve reference fields into projected sub-documents."""
from typing import Any, Dict, Iterable, List, Optional, Sequence


def populate(
    docs: List[Dict[str, Any]],
    field: str,
    repo,
    select: Optional[Sequence[str]] = None,
) -> List[Dict[str, Any]]:
    """
    Reemplaza ``doc[field]`` (id string) por el documento referenciado,
    con una sola consulta ``$in`` para todo el lote. Referencias rotas quedan en None.
    """
    ids = {d.get(field) for d in docs if d.get(field)}
    projection = {f: 1 for f in select} if select else None
    found = repo.find_by_ids(ids, projection) if ids else {}
    for d in docs:
        ref = d.get(field)
        if ref:
            d[field] = found.get(str(ref))
    return docs


def populate_many(docs: List[Dict[str, Any]], relations: Dict[str, tuple], wanted: Iterable[str]) -> List[Dict[str, Any]]:
    """``relations`` mapea nombre de campo -> (repo, select)."""
    for name in wanted:
        if name in relations:
            repo, select = relations[name]
            populate(docs, name, repo, select)
    return docs
