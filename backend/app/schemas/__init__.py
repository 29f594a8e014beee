"""
Duet Backend — API Schemas
============================

Pydantic models for request bodies and responses. Field names are
snake_case in Python and camelCase on the wire (`relationshipId`,
`similarityPercent`); both spellings are accepted on input.
"""
