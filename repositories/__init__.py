"""
repositories/ - Data Access Layer
==================================
One repository per table (users, accounts, transactions). Repositories own
every SQL statement and hand domain model objects back to the services.
"""
