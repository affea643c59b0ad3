"""Reconciliation rules between the local mirror and server payloads.

The server is the only source of truth. Local rows with a negative id are
optimistic placeholders that the server has not confirmed yet.
"""


def is_optimistic(item):
    return (item.get("id") or 0) < 0


def merge_challenges(local, fetched):
    """Merge a full fetch into the local ``{id: challenge}`` mapping.

    Fetched rows always win. Unconfirmed optimistic rows survive the merge;
    confirmed rows the server no longer returns are dropped.
    """
    merged = {c["id"]: c for c in local.values() if is_optimistic(c)}
    for challenge in fetched:
        merged[challenge["id"]] = dict(challenge)
    return merged


def visible_challenges(challenges):
    """Non-archived challenges, newest first, pending placeholders on top."""
    rows = [c for c in challenges.values() if not c.get("archived")]
    return sorted(
        rows,
        key=lambda c: (is_optimistic(c), c.get("created_at") or "", c["id"]),
        reverse=True,
    )


def max_confirmed_id(messages):
    return max((m["id"] for m in messages if not is_optimistic(m)), default=0)


def should_replace_messages(current, incoming):
    """Highest message identity wins.

    A full list whose newest confirmed message is older than what we already
    hold was published before our current copy and would regress the thread.
    Equal identities are accepted so flag-only changes (proof, validation,
    read receipts) still land.
    """
    if current is None:
        return True
    return max_confirmed_id(incoming) >= max_confirmed_id(current)


def patch_message(messages, message_id, changes):
    return [dict(m, **changes) if m["id"] == message_id else m for m in messages]


def apply_read_notice(messages, reader_id):
    """The reader has seen everything the counterpart wrote."""
    return [
        dict(m, is_read=True) if m.get("user_id") != reader_id else m
        for m in messages
    ]


def unread_count(messages, user_id):
    return sum(1 for m in messages if m.get("user_id") != user_id and not m.get("is_read"))
