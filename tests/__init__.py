"""Test suite for dblapi.

Test Structure:
- unit/api/http/: request pipeline (builder, decoders, executor, transport, auth)
- unit/api/dbl/: Discord Bot List client and models
- unit/config/, unit/logging/: configuration loading and logging setup
- doubles.py: transport doubles and response builders
- conftest.py: shared fixtures
"""
