from __future__ import annotations

from app.models import TransactionProcess


def processes(community_id: int) -> list[dict]:
    rows = (
        TransactionProcess.query.filter_by(community_id=int(community_id))
        .order_by(TransactionProcess.id.asc())
        .all()
    )
    return [row.to_dict() for row in rows]
