"""
Identities package - wallet registration and (wallet, chain) resolution.

Primary identities own billing state; linked identities inherit it from
exactly one primary.
"""
