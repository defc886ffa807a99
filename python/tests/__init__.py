"""
Test suite for the mockup-review delivery pipeline.

Test Categories:
- Unit tests: archive building, credentials, settings, extraction rules
- Integration tests: loopback login against a real local listener,
  push -> ingest -> extract round trips
- Edge case tests: hostile archives (zip-slip, bombs, oversize entry counts)
"""
