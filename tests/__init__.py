"""Test suite for inkstone.

Test Structure:
- unit/: Unit tests for individual components, one directory per subpackage
- conftest.py: Site, draft and store builders shared by every test
"""
