"""Business logic for user accounts.

Credential verification and token issuance live outside this
project; what stays here is the account-level lock password that
guards locked folders.
"""
