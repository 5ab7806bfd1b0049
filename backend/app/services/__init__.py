"""
Services Layer

Pure scheduling logic that:
- Accepts validated domain inputs (activity and cabin names, round count)
- Returns immutable domain outputs (dataclasses)
- Does NOT depend on HTTP request/response objects
- Does NOT perform I/O or keep state between calls
"""
