"""
Duet Backend — Derived-State Core
===================================

Pure, synchronous rules that turn already-fetched rows into computed values.
Nothing here touches the database or the network. Services read the rows
and `dates.utc_now()` once per call, then pass both in.

    progress.py   → completion percentages
    matching.py   → partner answer match score
    streak.py     → consecutive-day streaks and calendar helpers
    rotation.py   → daily question rotation, random sub-topic batches
    divisions.py  → unanswered / your_turn / answered / complete buckets
    dates.py      → UTC day helpers shared by the above
"""
