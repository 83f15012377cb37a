"""
Use Cases

Organized into domain folders:
- auth/: Authentication flows
- users/: Current user
- admin/: Account administration
"""
