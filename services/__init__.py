"""
services/ - Business Logic Layer
================================
Services sit between the handlers and the repositories. They validate input,
apply the account rules, derive calendar events and format replies.
"""
