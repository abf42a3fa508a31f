from __future__ import annotations


def rank_entries(entries):
    """Rank ``{"name", "score", ...}`` rows: score descending, name ascending.

    Rank is the 1-based position after sorting, so equal scores still get
    distinct ranks.
    """
    ordered = sorted(
        entries,
        key=lambda entry: (-float(entry.get("score") or 0), str(entry.get("name") or "").casefold()),
    )
    return [dict(entry, rank=index) for index, entry in enumerate(ordered, start=1)]


def best_result_per_user(results):
    """Keep each user's highest score; the earliest submission wins a tie."""
    best = {}
    for result in sorted(results, key=lambda row: row.submitted_at):
        current = best.get(result.user_id)
        if current is None or result.score > current.score:
            best[result.user_id] = result
    return list(best.values())


def build_leaderboard(results, limit=None):
    entries = [
        {
            "user_id": result.user_id,
            "name": result.user_name or "Anonymous",
            "score": result.score,
        }
        for result in best_result_per_user(results)
    ]
    ranked = rank_entries(entries)
    if limit:
        ranked = ranked[:limit]
    return ranked
