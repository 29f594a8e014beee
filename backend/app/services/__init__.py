"""
Duet Backend — Services Layer
===============================

What:  Data-store access and response shaping, between routes (HTTP) and
       the ORM. Derived values (progress, matches, streaks, divisions,
       rotation) are delegated to the pure functions in `app.core`.

Service Inventory:
    - base:          CRUDService generic + SQLAlchemy error translation
    - pairing:       resolves relationshipId/userId into a user pair
    - user, relationship, content, answer, journal: resource CRUD
    - progress:      per-user progress and division views
    - streak:        app-open recording, streaks, week/month calendars
    - result:        answer comparison between partners
    - home:          home overview, random sub-topics, daily question

Every service is stateless and exposed as a module-level singleton. Each
method takes the request's `AsyncSession`; derived-state methods also take
an optional `now` so the clock is read once per call.
"""
