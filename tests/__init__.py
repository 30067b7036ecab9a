"""
KeyAuth Admin Bot Test Suite
============================

Test Organization
-----------------
- tests/unit/   : Fast unit tests; KeyAuth is replaced by an in-memory HTTP fake

Testing Philosophy
------------------
- No test reaches Discord or KeyAuth
- Follow AAA pattern: Arrange, Act, Assert
"""
