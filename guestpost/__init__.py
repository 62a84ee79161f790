"""
GuestPost marketplace.

Buyers order guest-post placements from approved sellers; an administrator
approves sellers and listings. All state lives in a key-value store of JSON
documents (see ``guestpost.repositories``).
"""
