"""
Accounts

Modules:
- validation: Pure checks for the sign-up, sign-in and reset forms
- service: Account workflows on top of an injected backend client
"""
